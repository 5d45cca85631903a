import pytest

from ingredient_utils.ingredients.normalization import (
    is_unit,
    normalize_name,
    normalize_unit,
    significant_words,
    singularize,
    strip_accents,
    strip_descriptors,
)


@pytest.mark.parametrize(
    "input_unit, expected_unit",
    [
        ("ounces", "oz"),
        ("oz.", "oz"),
        ("TBSP.", "tbsp"),
        ("Tablespoons", "tbsp"),
        ("T", "tbsp"),
        ("t", "tsp"),
        ("tsp", "tsp"),
        ("Cups", "cup"),
        ("fluid ounces", "fl oz"),
        ("lbs", "lb"),
        ("litres", "l"),
        ("furlong", "furlong"),
    ],
)
def test_normalize_unit(input_unit, expected_unit):
    assert normalize_unit(input_unit) == expected_unit


@pytest.mark.parametrize(
    "token, expected",
    [("cups", True), ("T", True), ("fl oz", True), ("Pinch", True), ("flour", False)],
)
def test_is_unit(token, expected):
    assert is_unit(token) is expected


@pytest.mark.parametrize(
    "word, expected",
    [
        ("tomatoes", "tomato"),
        ("berries", "berry"),
        ("chiles", "chile"),
        ("eggs", "egg"),
        ("radishes", "radish"),
        ("boxes", "box"),
        ("leaves", "leaf"),
        ("asparagus", "asparagus"),
        ("molasses", "molasses"),
        ("glass", "glass"),
        ("oil", "oil"),
    ],
)
def test_singularize(word, expected):
    assert singularize(word) == expected


@pytest.mark.parametrize(
    "input_text, expected",
    [
        ("Jalapeños", "jalapeno"),
        ("  Fresno   Chiles ", "fresno chile"),
        ("Extra-Virgin Olive Oil", "extra-virgin olive oil"),
        ("Confectioners' Sugar", "confectioner sugar"),
        ("crème fraîche", "creme fraiche"),
        ("", ""),
    ],
)
def test_normalize_name(input_text, expected):
    assert normalize_name(input_text) == expected


def test_normalize_name_is_idempotent():
    once = normalize_name("Roma Tomatoes")
    assert normalize_name(once) == once


def test_strip_accents():
    assert strip_accents("jalapeño") == "jalapeno"


@pytest.mark.parametrize(
    "normalized, expected",
    [
        ("fresh basil", "basil"),
        ("large red onion", "onion"),
        ("fresh", "fresh"),
        ("olive oil", "olive oil"),
    ],
)
def test_strip_descriptors(normalized, expected):
    assert strip_descriptors(normalized) == expected


def test_significant_words_skip_descriptors_and_short_words():
    assert significant_words("fresh red bell pepper") == ["bell", "pepper"]
    assert significant_words("a bit of oil") == ["bit", "oil"]
