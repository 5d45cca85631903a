import re
from decimal import Decimal

# Unicode vulgar fractions recognised in quantities
VULGAR_FRACTIONS = {
    "¼": Decimal(1) / Decimal(4),
    "½": Decimal(1) / Decimal(2),
    "¾": Decimal(3) / Decimal(4),
    "⅓": Decimal(1) / Decimal(3),
    "⅔": Decimal(2) / Decimal(3),
    "⅛": Decimal(1) / Decimal(8),
    "⅜": Decimal(3) / Decimal(8),
    "⅝": Decimal(5) / Decimal(8),
    "⅞": Decimal(7) / Decimal(8),
}

_NUMBER_RE = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def _is_integer(text: str) -> bool:
    """Check if a string represents a non-negative integer."""
    return text.isdigit()


def _is_number(text: str) -> bool:
    """Check if a string represents a non-negative decimal number."""
    return _NUMBER_RE.fullmatch(text) is not None


def _is_fraction(text: str) -> bool:
    """Check if a string represents a valid fraction (e.g., '1/2')."""
    if "/" not in text:
        return False
    parts = text.split("/")
    return len(parts) == 2 and all(_is_integer(part) for part in parts)


def _is_vulgar_fraction(text: str) -> bool:
    """Check if a string is a single unicode vulgar fraction (e.g., '½')."""
    return text in VULGAR_FRACTIONS


def _parse_fraction(text: str) -> Decimal:
    """Parse a fraction string (e.g., '1/2') into a Decimal."""
    if "/" not in text:
        raise ValueError(f"Not a fraction: {text}")

    numerator_str, denominator_str = text.split("/")
    numerator = Decimal(numerator_str)
    denominator = Decimal(denominator_str)

    if denominator == 0:
        raise ZeroDivisionError("Division by zero in fraction")

    return numerator / denominator


def _parse_value(text: str) -> Decimal:
    """Parse a single quantity token: integer, decimal, fraction or glyph."""
    if _is_vulgar_fraction(text):
        return VULGAR_FRACTIONS[text]
    if _is_fraction(text):
        return _parse_fraction(text)
    if _is_number(text):
        return Decimal(text)
    raise ValueError(f"Not a quantity: {text}")


def _is_value(text: str) -> bool:
    """Check if a token can be parsed by _parse_value."""
    return _is_vulgar_fraction(text) or _is_fraction(text) or _is_number(text)
