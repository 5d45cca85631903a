"""Ingredient line parsing utilities."""

import re
from decimal import Decimal, InvalidOperation
from typing import List, Optional, Tuple

from ingredient_utils.ingredients.models import ParsedIngredient
from ingredient_utils.ingredients.normalization import (
    DESCRIPTORS,
    MAX_UNIT_WORDS,
    is_unit,
    normalize_unit,
    strip_accents,
)
from ingredient_utils.ingredients.number_utils import (
    VULGAR_FRACTIONS,
    _is_fraction,
    _is_integer,
    _is_value,
    _is_vulgar_fraction,
    _parse_fraction,
    _parse_value,
)

# --- Constants ---

NUMBER_WORDS = {
    "one": 1,
    "two": 2,
    "three": 3,
    "four": 4,
    "five": 5,
    "six": 6,
    "seven": 7,
    "eight": 8,
    "nine": 9,
    "ten": 10,
    "eleven": 11,
    "twelve": 12,
}

RANGE_CONNECTORS = {"-", "–", "to", "or"}

# Units that may appear without a leading amount ("pinch of salt")
AMOUNTLESS_UNITS = {"pinch", "dash", "drop", "handful", "splash"}

# Trailing phrases that describe usage rather than the ingredient
USAGE_PHRASE_RE = re.compile(
    r"[\s,]+(to taste|as needed|for garnish|for serving|for dusting|optional)$",
    re.IGNORECASE,
)

_GLYPHS = "".join(VULGAR_FRACTIONS)
_BULLET_RE = re.compile(r"^[•·▪◦‣*-]\s+")
_ATTACHED_UNIT_RE = re.compile(r"^(\d+(?:\.\d+)?)([A-Za-z]+\.?)(?=\s|$)")
_DISJUNCTION_RE = re.compile(r"\s+or\s+", re.IGNORECASE)
# A comma that is not a thousands separator ("1,000")
_CLAUSE_COMMA = r"(?<!\d),|,(?!\d)"
_THOUSANDS_RE = re.compile(r"(?<=\d),(?=\d{3}(?!\d))")
# Leading number glued to a size word ("1-inch", "2-pound")
_SIZE_PREFIX_RE = re.compile(r"^(\d+(?:\.\d+)?|\d+/\d+)-[A-Za-z]")

# --- Functions ---


def parse(raw_text: str) -> ParsedIngredient:
    """Parse one free-text ingredient line into a ParsedIngredient.

    Never raises: lines without a quantity, unit or name degrade to partial
    results (an empty line yields an empty name).

    Args:
        raw_text: Ingredient line as written (e.g., "2 1/2 cups flour, sifted").

    Returns:
        ParsedIngredient with quantity, unit, name, preparation, parenthetical
        notes and any "or" alternatives.

    Examples:
        >>> p = parse("2 cups flour")
        >>> (p.quantity_amount, p.quantity_unit, p.name)
        (2.0, 'cups', 'flour')
    """
    text = normalize_whitespace(raw_text)
    if not text:
        return ParsedIngredient(raw_text=raw_text, name="", display_name="")

    body, preparation = split_preparation(text)
    body, notes = extract_notes(body)

    amount, amount_range, rest = _parse_amount(body)
    unit, rest = _parse_unit(rest, has_amount=amount is not None)
    display_name = clean_ingredient_name(rest)

    if preparation is None:
        display_name, preparation = _split_usage_phrase(display_name)

    fragments = split_alternatives(display_name)
    parsed = [
        ParsedIngredient(
            raw_text=raw_text,
            name=fragment.lower(),
            display_name=fragment,
            quantity_amount=amount,
            quantity_unit=unit,
            quantity_range=amount_range,
            preparation=preparation,
            notes=notes,
        )
        for fragment in fragments
    ]
    primary, alternatives = parsed[0], tuple(parsed[1:])
    if not alternatives:
        return primary
    return ParsedIngredient(
        raw_text=raw_text,
        name=primary.name,
        display_name=primary.display_name,
        quantity_amount=amount,
        quantity_unit=unit,
        quantity_range=amount_range,
        preparation=preparation,
        notes=notes,
        alternatives=alternatives,
    )


def parse_quantity(text: str) -> Tuple[Optional[float], Optional[str], str]:
    """Parse amount, unit and ingredient name from ingredient text.

    Convenience wrapper around parse() for callers that only need the
    leading measurement.

    Returns:
        A tuple containing:
            - amount: Numeric quantity as float, or None if no quantity found
            - unit: Unit token as written, or None if no unit found
            - ingredient_name: Lowercased ingredient name
    """
    parsed = parse(text)
    return parsed.quantity_amount, parsed.quantity_unit, parsed.name


def parse_amount(text: str) -> Optional[float]:
    """Recognise a quantity on its own ("1 1/2", "1½", "0.5", "⅔")."""
    amount, _, rest = _parse_amount(normalize_whitespace(text))
    if rest:
        return None
    return amount


def normalize_whitespace(text: str) -> str:
    """Collapse whitespace and normalise quantity punctuation."""
    text = text.replace(" ", " ").replace("⁄", "/")
    text = re.sub(r"\s+", " ", text).strip()
    return _BULLET_RE.sub("", text)


def _split_top_level(text: str, separator: str) -> List[Tuple[int, int]]:
    """Find (start, end) spans of separator matches outside parentheses."""
    spans = []
    depth = 0
    pattern = re.compile(separator, re.IGNORECASE)
    i = 0
    while i < len(text):
        char = text[i]
        if char == "(":
            depth += 1
        elif char == ")":
            depth = max(depth - 1, 0)
        elif depth == 0:
            match = pattern.match(text, i)
            if match and match.end() > i:
                spans.append((match.start(), match.end()))
                i = match.end()
                continue
        i += 1
    return spans


def split_preparation(text: str) -> Tuple[str, Optional[str]]:
    """Split a trailing preparation clause at the last top-level comma.

    Earlier commas stay part of the ingredient name.

    Examples:
        >>> split_preparation("1 cup flour, sifted")
        ('1 cup flour', 'sifted')
        >>> split_preparation("1 lb boneless, skinless chicken, cubed")
        ('1 lb boneless, skinless chicken', 'cubed')
    """
    spans = _split_top_level(text, _CLAUSE_COMMA)
    if not spans:
        return text, None
    start, end = spans[-1]
    head = text[:start].strip()
    tail = text[end:].strip()
    return head, tail or None


def extract_notes(text: str) -> Tuple[str, Tuple[str, ...]]:
    """Remove parenthetical notes, returning the cleaned text and the notes."""
    notes = tuple(n.strip() for n in re.findall(r"\(([^()]*)\)", text) if n.strip())
    cleaned = re.sub(r"\s*\([^()]*\)", "", text)
    return re.sub(r"\s+", " ", cleaned).strip(), notes


def _tokenize_quantity(text: str) -> List[str]:
    """Split text into words, separating glyphs and units glued to numbers."""
    text = _THOUSANDS_RE.sub("", text)
    text = re.sub(rf"(\d)([{_GLYPHS}])", r"\1 \2", text)
    match = _ATTACHED_UNIT_RE.match(text)
    if match and is_unit(match.group(2)):
        text = f"{match.group(1)} {match.group(2)}{text[match.end():]}"
    return text.split()


def _parse_amount(
    text: str,
) -> Tuple[Optional[float], Optional[Tuple[float, float]], str]:
    """Parse amount from the start of an ingredient string.

    Tries range, mixed-number, simple-number and number-word patterns in
    that order.

    Args:
        text: Ingredient text with a potential quantity at the start.

    Returns:
        A tuple containing:
            - amount: Parsed value (lower bound for ranges), or None
            - range: (low, high) when a range was written, else None
            - rest: Remaining text after the amount
    """
    words = _tokenize_quantity(text)
    if not words:
        return None, None, ""

    try:
        for parser in [
            _parse_number_range,
            _parse_mixed_number,
            _parse_simple_number,
            _parse_size_prefix,
            _parse_number_word,
        ]:
            amount, amount_range, consumed_words = parser(words)
            if amount is not None:
                rest = " ".join(words[consumed_words:])
                return float(amount), amount_range, rest
    except (ValueError, ZeroDivisionError, InvalidOperation):
        # If any parsing fails, no amount can be parsed
        pass

    return None, None, " ".join(words)


def _parse_leading_value(words: List[str]) -> Tuple[Optional[Decimal], int]:
    """Parse a mixed number or single value at the start of words."""
    amount, _, consumed = _parse_mixed_number(words)
    if amount is not None:
        return amount, consumed
    if words and _is_value(words[0]):
        return _parse_value(words[0]), 1
    return None, 0


def _parse_number_range(words: List[str]):
    """Parse number ranges like '2-3', '2 to 3' or '1 1/2 - 2'."""
    # Pattern: "2-3" or "2–3" in a single token
    if words:
        parts = re.split(r"[-–]", words[0])
        if len(parts) == 2 and all(_is_value(p) for p in parts):
            low, high = _parse_value(parts[0]), _parse_value(parts[1])
            return _range_result(low, high, 1)

    # Pattern: "2 to 3", "2 - 3", "1 or 2", "1 1/2 to 2"
    low, consumed = _parse_leading_value(words)
    if low is None or len(words) < consumed + 2:
        return None, None, 0
    if words[consumed].lower() not in RANGE_CONNECTORS:
        return None, None, 0
    high, high_consumed = _parse_leading_value(words[consumed + 1 :])
    if high is None:
        return None, None, 0
    return _range_result(low, high, consumed + 1 + high_consumed)


def _range_result(low: Decimal, high: Decimal, consumed: int):
    low, high = min(low, high), max(low, high)
    return low, (float(low), float(high)), consumed


def _parse_mixed_number(words: List[str]):
    """Parse mixed numbers like '1 1/2' or '1 ½'."""
    if len(words) < 2 or not _is_integer(words[0]):
        return None, None, 0

    whole_part = Decimal(words[0])

    # Pattern: "1 1/2" (whole number + fraction)
    if _is_fraction(words[1]):
        fraction_part = _parse_fraction(words[1])
        if fraction_part < 1:
            return whole_part + fraction_part, None, 2

    # Pattern: "1 ½" (whole number + unicode glyph, also "1½" after tokenizing)
    if _is_vulgar_fraction(words[1]):
        return whole_part + VULGAR_FRACTIONS[words[1]], None, 2

    return None, None, 0


def _parse_simple_number(words: List[str]):
    """Parse simple numbers like '1/2', '½', '2.5', or '3'."""
    if words and _is_value(words[0]):
        return _parse_value(words[0]), None, 1
    return None, None, 0


def _parse_size_prefix(words: List[str]):
    """Take the count from a sized item ("1-inch piece ginger").

    The size word stays in the name, so nothing is consumed.
    """
    match = _SIZE_PREFIX_RE.match(words[0]) if words else None
    if match:
        return _parse_value(match.group(1)), None, 0
    return None, None, 0


def _parse_number_word(words: List[str]):
    """Parse spelled-out quantities like 'two', 'a few' or 'a pinch'."""
    first = words[0].lower()
    if first in NUMBER_WORDS:
        return Decimal(NUMBER_WORDS[first]), None, 1

    if first not in ("a", "an") or len(words) < 2:
        return None, None, 0

    second = words[1].lower()
    if second in ("couple", "few"):
        consumed = 2
        if len(words) > 2 and words[2].lower() == "of":
            consumed = 3
        return Decimal(2 if second == "couple" else 3), None, consumed
    return Decimal(1), None, 1


def _parse_unit(text: str, has_amount: bool = True) -> Tuple[Optional[str], str]:
    """Parse unit from the start of an ingredient string.

    Longest spelling wins ("fl oz" before "fl"). The unit is returned as
    written, minus a trailing period. Without an amount only measure words
    such as "pinch" are consumed, so "whole milk" keeps its name.
    """
    words = text.split()
    if not words:
        return None, text

    for size in range(min(MAX_UNIT_WORDS, len(words)), 0, -1):
        candidate = " ".join(words[:size])
        if not is_unit(candidate):
            continue
        if not has_amount and normalize_unit(candidate) not in AMOUNTLESS_UNITS:
            return None, text
        rest = words[size:]
        if rest and rest[0].lower() == "of":
            rest = rest[1:]
        return candidate.rstrip("."), " ".join(rest)

    # No unit found - return None for unit and the original text
    return None, text


def clean_ingredient_name(name: str) -> str:
    """Clean up ingredient names by removing formatting and notes.

    Examples:
        >>> clean_ingredient_name("fresh lemon juice (about 1 lemon)")
        'fresh lemon juice'
        >>> clean_ingredient_name("of  rice ,")
        'rice'
    """
    name = re.sub(r"\s*\([^)]*\)", "", name)
    name = re.sub(r"\s+", " ", name)
    name = name.strip().strip(",;:").strip()
    name = re.sub(r"^of\s+", "", name, flags=re.IGNORECASE)
    return name


def _split_usage_phrase(name: str) -> Tuple[str, Optional[str]]:
    """Move a trailing usage phrase ("to taste") into the preparation slot."""
    match = USAGE_PHRASE_RE.search(name)
    if not match:
        return name, None
    return name[: match.start()].strip(), match.group(1).lower()


def split_alternatives(name: str) -> List[str]:
    """Split an ingredient name on top-level "or" into name fragments.

    A single descriptor word borrows the shared noun of the last fragment, so
    "purple or green cabbage" gives "purple cabbage" and "green cabbage",
    while "jalapeños or fresno chiles" keeps both names as written.
    Always returns at least one fragment.
    """
    spans = _split_top_level(name, _DISJUNCTION_RE.pattern)
    if not spans:
        return [name]

    fragments = []
    start = 0
    for span_start, span_end in spans:
        fragments.append(name[start:span_start].strip())
        start = span_end
    fragments.append(name[start:].strip())
    fragments = [f for f in fragments if f]
    if len(fragments) < 2:
        return fragments or [name]

    last_words = fragments[-1].split()
    shared = " ".join(last_words[1:])
    if shared:
        fragments = [
            f"{f} {shared}" if _is_descriptor(f) else f for f in fragments[:-1]
        ] + [fragments[-1]]
    return fragments


def _is_descriptor(fragment: str) -> bool:
    words = fragment.split()
    return len(words) == 1 and strip_accents(words[0]).lower() in DESCRIPTORS
