import pytest

from ingredient_utils.ingredients.parsing import (
    _parse_amount,
    _parse_unit,
    clean_ingredient_name,
    parse,
    parse_amount,
    parse_quantity,
    split_alternatives,
    split_preparation,
)


@pytest.mark.parametrize(
    "input_text, expected_amount, expected_unit, expected_name",
    [
        ("2 cups flour", 2.0, "cups", "flour"),
        ("1/2 tsp salt", 0.5, "tsp", "salt"),
        ("1 1/2 cups whole wheat flour", 1.5, "cups", "whole wheat flour"),
        ("1½ cups basmati rice", 1.5, "cups", "basmati rice"),
        ("1 ½ cups basmati rice", 1.5, "cups", "basmati rice"),
        ("¾ cup heavy cream", 0.75, "cup", "heavy cream"),
        ("0.5 lb butter", 0.5, "lb", "butter"),
        ("500g flour", 500.0, "g", "flour"),
        ("1,000 g flour", 1000.0, "g", "flour"),
        ("1-inch piece ginger", 1.0, None, "1-inch piece ginger"),
        ("2 1-inch pieces ginger", 2.0, None, "1-inch pieces ginger"),
        ("2 eggs", 2.0, None, "eggs"),
        ("2 large eggs", 2.0, None, "large eggs"),
        ("3 garlic cloves", 3.0, None, "garlic cloves"),
        ("3 cloves garlic", 3.0, "cloves", "garlic"),
        ("1 cup of flour", 1.0, "cup", "flour"),
        ("8 fl oz milk", 8.0, "fl oz", "milk"),
        ("2 T sugar", 2.0, "T", "sugar"),
        ("2 Tbsp. sugar", 2.0, "Tbsp", "sugar"),
        ("2 tablespoons extra-virgin olive oil", 2.0, "tablespoons", "extra-virgin olive oil"),
        ("One large onion, thinly sliced", 1.0, None, "large onion"),
        ("A pinch of red pepper flakes", 1.0, "pinch", "red pepper flakes"),
        ("a few sprigs thyme", 3.0, "sprigs", "thyme"),
        ("a couple of limes", 2.0, None, "limes"),
        ("whole milk", None, None, "whole milk"),
        ("Salt and pepper to taste", None, None, "salt and pepper"),
        ("Fresh cilantro", None, None, "fresh cilantro"),
    ],
)
def test_parse(input_text, expected_amount, expected_unit, expected_name):
    parsed = parse(input_text)
    assert parsed.quantity_amount == expected_amount
    assert parsed.quantity_unit == expected_unit
    assert parsed.name == expected_name
    assert parsed.raw_text == input_text


def test_parse_keeps_display_name_and_raw_text():
    parsed = parse("  2   Jalapeños ")
    assert parsed.display_name == "Jalapeños"
    assert parsed.name == "jalapeños"
    assert parsed.raw_text == "  2   Jalapeños "


@pytest.mark.parametrize("input_text", ["", "   ", "\t\n"])
def test_parse_empty_line(input_text):
    parsed = parse(input_text)
    assert parsed.name == ""
    assert parsed.quantity_amount is None
    assert parsed.quantity_unit is None
    assert parsed.alternatives == ()


@pytest.mark.parametrize(
    "input_text, expected_prep, expected_name",
    [
        ("1 cup flour, sifted", "sifted", "flour"),
        (
            "1 pound boneless, skinless chicken thighs, cut into 1-inch pieces",
            "cut into 1-inch pieces",
            "boneless, skinless chicken thighs",
        ),
        ("1 cup (packed, light) brown sugar, sifted", "sifted", "brown sugar"),
        ("Salt, to taste", "to taste", "salt"),
        ("salt to taste", "to taste", "salt"),
        ("Parsley for garnish", "for garnish", "parsley"),
        ("2 cups flour", None, "flour"),
    ],
)
def test_parse_preparation(input_text, expected_prep, expected_name):
    parsed = parse(input_text)
    assert parsed.preparation == expected_prep
    assert parsed.name == expected_name


def test_parse_parenthetical_notes():
    parsed = parse("1 (14.5 oz) can diced tomatoes")
    assert parsed.quantity_amount == 1.0
    assert parsed.quantity_unit == "can"
    assert parsed.name == "diced tomatoes"
    assert parsed.notes == ("14.5 oz",)


@pytest.mark.parametrize(
    "input_text, expected_amount, expected_range, expected_name",
    [
        ("2-3 cups baby spinach", 2.0, (2.0, 3.0), "baby spinach"),
        ("2–3 cups baby spinach", 2.0, (2.0, 3.0), "baby spinach"),
        ("2 to 3 cups baby spinach", 2.0, (2.0, 3.0), "baby spinach"),
        ("1 or 2 eggs", 1.0, (1.0, 2.0), "eggs"),
        ("1/2-1 tsp salt", 0.5, (0.5, 1.0), "salt"),
        ("1 1/2 - 2 cups flour", 1.5, (1.5, 2.0), "flour"),
        ("3-2 cups flour", 2.0, (2.0, 3.0), "flour"),
    ],
)
def test_parse_ranges_use_lower_bound(input_text, expected_amount, expected_range, expected_name):
    parsed = parse(input_text)
    assert parsed.quantity_amount == pytest.approx(expected_amount)
    assert parsed.quantity_range == pytest.approx(expected_range)
    assert parsed.name == expected_name


def test_parse_bad_fraction_degrades_to_no_quantity():
    parsed = parse("1/0 cup sugar")
    assert parsed.quantity_amount is None
    assert parsed.name == "1/0 cup sugar"


def test_parse_or_pattern_shares_quantity():
    parsed = parse("2 jalapeños or fresno chiles")
    assert parsed.is_or_pattern
    assert parsed.quantity_amount == 2.0
    assert parsed.quantity_unit is None
    assert parsed.name == "jalapeños"
    assert [a.name for a in parsed.alternatives] == ["fresno chiles"]
    assert all(a.quantity_amount == 2.0 for a in parsed.alternatives)
    assert all(a.quantity_unit is None for a in parsed.alternatives)
    assert [f.name for f in parsed.fragments] == ["jalapeños", "fresno chiles"]
    assert all(f.alternatives == () for f in parsed.fragments)


def test_parse_or_pattern_distributes_descriptor():
    parsed = parse("1 head purple or green cabbage, shredded")
    assert [f.name for f in parsed.fragments] == ["purple cabbage", "green cabbage"]
    assert parsed.quantity_unit == "head"
    assert all(f.preparation == "shredded" for f in parsed.fragments)


def test_parse_without_or_has_no_alternatives():
    parsed = parse("1 cup orange juice")
    assert not parsed.is_or_pattern
    assert parsed.name == "orange juice"


@pytest.mark.parametrize(
    "input_text, expected",
    [
        ("jalapeños or fresno chiles", ["jalapeños", "fresno chiles"]),
        ("Fresno chiles or jalapeños", ["Fresno chiles", "jalapeños"]),
        ("red or green cabbage", ["red cabbage", "green cabbage"]),
        (
            "red or green or yellow bell pepper",
            ["red bell pepper", "green bell pepper", "yellow bell pepper"],
        ),
        ("butter or oil", ["butter", "oil"]),
        ("butter (or margarine)", ["butter (or margarine)"]),
        ("orange juice", ["orange juice"]),
    ],
)
def test_split_alternatives(input_text, expected):
    assert split_alternatives(input_text) == expected


@pytest.mark.parametrize(
    "input_text, expected",
    [
        ("1 cup flour, sifted", ("1 cup flour", "sifted")),
        ("1 cup flour", ("1 cup flour", None)),
        ("1 cup flour,", ("1 cup flour", None)),
        ("1,000 g flour", ("1,000 g flour", None)),
        ("2,500 ml stock, warmed", ("2,500 ml stock", "warmed")),
        ("1 cup (packed, light) brown sugar", ("1 cup (packed, light) brown sugar", None)),
    ],
)
def test_split_preparation(input_text, expected):
    assert split_preparation(input_text) == expected


@pytest.mark.parametrize(
    "input_text, expected_text",
    [
        ("fresh lemon juice (about 1 lemon)", "fresh lemon juice"),
        ("of  rice ,", "rice"),
        ("  olive oil;  ", "olive oil"),
    ],
)
def test_clean_ingredient_name(input_text, expected_text):
    assert clean_ingredient_name(input_text) == expected_text


@pytest.mark.parametrize(
    "input_text, expected_amt, expected_rest",
    [
        ("2 ounces vodka", 2.0, "ounces vodka"),
        ("1/2 cup sugar", 0.5, "cup sugar"),
        ("1 1/2 tsp salt", 1.5, "tsp salt"),
        ("salt", None, "salt"),
        ("2.5 ml water", 2.5, "ml water"),
        ("", None, ""),
        ("4 lemons, peeled", 4.0, "lemons, peeled"),
        ("½ ounce rum", 0.5, "ounce rum"),
        ("⅓ cup honey", pytest.approx(1 / 3), "cup honey"),
    ],
)
def test_parse_amount_helper(input_text, expected_amt, expected_rest):
    amount, _, rest = _parse_amount(input_text)
    assert amount == expected_amt
    assert rest == expected_rest


@pytest.mark.parametrize(
    "input_text, has_amount, expected_unit, expected_rest",
    [
        ("cups flour", True, "cups", "flour"),
        ("fluid ounces cream", True, "fluid ounces", "cream"),
        ("pinch of salt", False, "pinch", "salt"),
        ("whole milk", False, None, "whole milk"),
        ("whole chicken", True, "whole", "chicken"),
        ("eggs", True, None, "eggs"),
        ("", True, None, ""),
    ],
)
def test_parse_unit_helper(input_text, has_amount, expected_unit, expected_rest):
    assert _parse_unit(input_text, has_amount) == (expected_unit, expected_rest)


@pytest.mark.parametrize(
    "input_text, expected",
    [
        ("½", 0.5),
        ("1 1/2", 1.5),
        ("1½", 1.5),
        ("0.25", 0.25),
        ("3", 3.0),
        ("2 cups", None),
        ("flour", None),
    ],
)
def test_parse_amount(input_text, expected):
    if expected is None:
        assert parse_amount(input_text) is None
    else:
        assert parse_amount(input_text) == pytest.approx(expected)


def test_parse_quantity():
    assert parse_quantity("2 1/2 cups whole wheat flour, sifted") == (
        2.5,
        "cups",
        "whole wheat flour",
    )
