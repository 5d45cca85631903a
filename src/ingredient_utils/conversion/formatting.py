"""Display formatting for ingredient amounts."""

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, Optional

# Amounts shown as vulgar-fraction glyphs ("1½") instead of decimals
COMMON_FRACTIONS: Dict[float, str] = {}
for _whole in range(5):
    for _value, _glyph in ((0.25, "¼"), (1 / 3, "⅓"), (0.5, "½"), (2 / 3, "⅔"), (0.75, "¾")):
        COMMON_FRACTIONS[_whole + _value] = f"{_whole}{_glyph}" if _whole else _glyph

FRACTION_TOLERANCE = 0.01


def round_half_up(value: float, places: int = 0) -> float:
    """Round like a cook would: halves go up, not to the nearest even digit.

    Examples:
        >>> round_half_up(2.5)
        3.0
        >>> round_half_up(1.005, 2)
        1.01
    """
    exponent = Decimal(1).scaleb(-places)
    return float(Decimal(str(value)).quantize(exponent, rounding=ROUND_HALF_UP))


def format_amount(value: Optional[float]) -> str:
    """Format an amount for display.

    Common cooking fractions render as Unicode glyphs, whole numbers
    without decimals, and anything else with at most two decimals.

    Examples:
        >>> format_amount(0.5)
        '½'
        >>> format_amount(1.333)
        '1⅓'
        >>> format_amount(473.0)
        '473'
        >>> format_amount(2.1)
        '2.1'
    """
    if value is None:
        return ""

    for fraction, glyph in COMMON_FRACTIONS.items():
        if abs(value - fraction) < FRACTION_TOLERANCE:
            return glyph

    rounded = round_half_up(value, 2)
    if rounded == int(rounded):
        return str(int(rounded))
    return f"{rounded:.2f}".rstrip("0").rstrip(".")

