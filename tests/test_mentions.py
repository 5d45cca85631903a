import pytest

from ingredient_utils.ingredients import (
    CanonicalIngredient,
    TextPart,
    find_ingredient_mentions,
    split_instruction,
)
from ingredient_utils.ingredients.mentions import name_variations

OLIVE_OIL = CanonicalIngredient(id="olive-oil", name="olive oil")
OIL = CanonicalIngredient(id="oil", name="oil")
BELL_PEPPER = CanonicalIngredient(id="bell-pepper", name="red bell pepper")
BASIL = CanonicalIngredient(id="basil", name="fresh basil")


@pytest.mark.parametrize(
    "name, expected",
    [
        ("red bell pepper", ["red bell pepper", "bell pepper"]),
        ("fresh basil", ["fresh basil", "basil"]),
        ("chopped onion", ["chopped onion", "onion"]),
        ("olive oil", ["olive oil"]),
        ("ox", []),
    ],
)
def test_name_variations(name, expected):
    assert name_variations(name) == expected


def test_find_mentions_sorted_and_case_insensitive():
    mentions = find_ingredient_mentions(
        "Chop the Bell Pepper, then add basil.", [BASIL, BELL_PEPPER]
    )
    assert [(m.matched_text, m.ingredient.id) for m in mentions] == [
        ("Bell Pepper", "bell-pepper"),
        ("basil", "basil"),
    ]
    assert mentions[0].start == 9


def test_earlier_ingredient_wins_overlaps():
    mentions = find_ingredient_mentions("Heat the olive oil in a pan.", [OLIVE_OIL, OIL])
    assert [m.ingredient.id for m in mentions] == ["olive-oil"]


def test_mentions_need_word_boundaries():
    assert find_ingredient_mentions("Boil the water.", [OIL]) == []
    assert find_ingredient_mentions("oils", [OIL]) == []
    assert len(find_ingredient_mentions("oil (warm)", [OIL])) == 1


def test_split_instruction():
    parts = split_instruction("Drizzle olive oil over the basil.", [OLIVE_OIL, BASIL])
    assert parts == [
        TextPart("Drizzle "),
        TextPart("olive oil", OLIVE_OIL),
        TextPart(" over the "),
        TextPart("basil", BASIL),
        TextPart("."),
    ]
    assert [p.is_ingredient for p in parts] == [False, True, False, True, False]


def test_split_instruction_without_mentions():
    assert split_instruction("Preheat the oven.", [OIL]) == [TextPart("Preheat the oven.")]
