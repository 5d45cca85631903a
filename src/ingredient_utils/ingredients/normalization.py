"""Ingredient name and unit normalization utilities."""

import re
import unicodedata
from typing import List

# Surface spellings of common cooking units, keyed by canonical unit code.
# This is the parser's lightweight vocabulary; the authoritative unit data
# lives in the measurement unit directory.
UNIT_MAP = {
    # Volume
    "cup": ["cup", "cups", "c", "c."],
    "tbsp": [
        "tablespoon",
        "tablespoons",
        "tbsp",
        "tbsps",
        "tbs",
        "tbl",
        "tablespoonful",
        "tablespoonfuls",
        "T",
    ],
    "tsp": ["teaspoon", "teaspoons", "tsp", "tsps", "teaspoonful", "teaspoonfuls", "t"],
    "fl oz": ["fl oz", "fl. oz", "fluid ounce", "fluid ounces", "floz"],
    "pint": ["pint", "pints", "pt"],
    "quart": ["quart", "quarts", "qt"],
    "gallon": ["gallon", "gallons", "gal"],
    "ml": ["milliliter", "milliliters", "millilitre", "millilitres", "ml", "mls"],
    "cl": ["centiliter", "centiliters", "cl"],
    "dl": ["deciliter", "deciliters", "dl"],
    "l": ["liter", "liters", "litre", "litres", "l"],
    # Weight
    "oz": ["ounce", "ounces", "oz"],
    "lb": ["pound", "pounds", "lb", "lbs"],
    "g": ["gram", "grams", "g", "gr"],
    "kg": ["kilogram", "kilograms", "kg", "kgs"],
    "mg": ["milligram", "milligrams", "mg"],
    # Count
    "piece": ["piece", "pieces", "pc", "pcs"],
    "whole": ["whole"],
    "each": ["each", "ea"],
    "clove": ["clove", "cloves"],
    "head": ["head", "heads"],
    "bunch": ["bunch", "bunches"],
    "sprig": ["sprig", "sprigs"],
    "stalk": ["stalk", "stalks"],
    "slice": ["slice", "slices"],
    "stick": ["stick", "sticks"],
    "can": ["can", "cans", "tin", "tins"],
    "jar": ["jar", "jars"],
    "bottle": ["bottle", "bottles"],
    "package": ["package", "packages", "pkg", "packet", "packets"],
    "box": ["box", "boxes"],
    "bag": ["bag", "bags"],
    # Other
    "pinch": ["pinch", "pinches"],
    "dash": ["dash", "dashes"],
    "drop": ["drop", "drops"],
    "handful": ["handful", "handfuls"],
    "splash": ["splash", "splashes"],
}

# Reverse mapping for lookup. "T" and "t" stay case-sensitive, every other
# spelling is stored lowercase.
UNIT_LOOKUP = {
    (v if v in ("T", "t") else v.lower()): k for k, vs in UNIT_MAP.items() for v in vs
}

# Longest spelling (in words) the parser needs to look ahead for
MAX_UNIT_WORDS = max(len(v.split()) for vs in UNIT_MAP.values() for v in vs)

# Adjectives and variants that qualify a base ingredient without changing it
DESCRIPTORS = {
    # colours
    "red",
    "green",
    "yellow",
    "white",
    "purple",
    "orange",
    "brown",
    "black",
    "golden",
    # sizes
    "large",
    "small",
    "medium",
    "big",
    "baby",
    # state and quality
    "fresh",
    "dried",
    "dry",
    "canned",
    "frozen",
    "organic",
    "ripe",
    "unripe",
    "raw",
    "cooked",
    "extra-virgin",
    "virgin",
    "light",
    "dark",
    "sweet",
    "hot",
    "mild",
    "salted",
    "unsalted",
    "smoked",
    "whole",
    "ground",
    "boneless",
    "skinless",
}

# Words whose trailing "s" is not a plural marker
_SINGULAR_EXCEPTIONS = {
    "asparagus",
    "bass",
    "citrus",
    "couscous",
    "grits",
    "hummus",
    "molasses",
    "swiss",
    "octopus",
    "schnapps",
    "series",
    "species",
    "watercress",
    "cress",
}

_IRREGULAR_PLURALS = {
    "leaves": "leaf",
    "loaves": "loaf",
    "halves": "half",
    "knives": "knife",
    "geese": "goose",
    "teeth": "tooth",
    "mice": "mouse",
}


def normalize_unit(unit: str) -> str:
    """Normalize unit names to their canonical code.

    Args:
        unit: Raw unit string

    Returns:
        Canonical unit code, or the lowercased input when unknown

    Examples:
        >>> normalize_unit("ounces")
        'oz'
        >>> normalize_unit("Tbsp.")
        'tbsp'
    """
    unit = unit.strip()
    if unit in ("T", "t"):
        return UNIT_LOOKUP[unit]
    unit = unit.lower().rstrip(".")
    return UNIT_LOOKUP.get(unit, unit)


def is_unit(token: str) -> bool:
    """Check if a token is a known unit spelling."""
    token = token.strip()
    if token in ("T", "t"):
        return True
    return token.lower().rstrip(".") in UNIT_LOOKUP


def strip_accents(text: str) -> str:
    """Remove combining diacritics ('jalapeños' -> 'jalapenos')."""
    decomposed = unicodedata.normalize("NFKD", text)
    return "".join(c for c in decomposed if not unicodedata.combining(c))


def singularize(word: str) -> str:
    """Singularize a single English word using common plural suffixes.

    Examples:
        >>> singularize("tomatoes")
        'tomato'
        >>> singularize("berries")
        'berry'
        >>> singularize("chiles")
        'chile'
    """
    if len(word) <= 3 or word in _SINGULAR_EXCEPTIONS:
        return word
    if word in _IRREGULAR_PLURALS:
        return _IRREGULAR_PLURALS[word]
    if word.endswith("ies") and len(word) > 4:
        return word[:-3] + "y"
    if word.endswith("oes"):
        return word[:-2]
    if re.search(r"(ches|shes|sses|xes|zes)$", word):
        return word[:-2]
    if word.endswith("s") and not word.endswith(("ss", "us", "is")):
        return word[:-1]
    return word


def normalize_name(text: str) -> str:
    """Normalize an ingredient name into its matching key.

    Lowercases, strips accents, replaces punctuation with spaces (keeping
    hyphens and apostrophes inside words), collapses whitespace and
    singularizes every word. Both sides of a comparison must go through this
    function.

    Examples:
        >>> normalize_name("Jalapeños")
        'jalapeno'
        >>> normalize_name("  Fresno   Chiles ")
        'fresno chile'
    """
    text = strip_accents(text).lower()
    text = text.replace("’", "'").replace("‘", "'")
    text = re.sub(r"[^\w\s'-]", " ", text)
    words = [w.strip("'-") for w in text.split()]
    return " ".join(singularize(w) for w in words if w)


def strip_descriptors(normalized: str) -> str:
    """Remove descriptor words from an already-normalized name.

    Falls back to the input when nothing but descriptors would remain.
    """
    words = [w for w in normalized.split() if w not in DESCRIPTORS]
    return " ".join(words) if words else normalized


def significant_words(normalized: str, min_length: int = 3) -> List[str]:
    """Words of a normalized name that are worth querying on their own."""
    return [
        w
        for w in normalized.split()
        if len(w) >= min_length and w not in DESCRIPTORS
    ]
