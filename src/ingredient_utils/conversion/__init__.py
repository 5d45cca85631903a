"""Unit conversion, scaling and amount formatting."""

from .formatting import COMMON_FRACTIONS, format_amount, round_half_up
from .converter import (
    ConversionResult,
    UnitConverter,
    UnitSystem,
    convert,
    default_unit_directory,
)
from .recipe import ConvertedIngredient, convert_recipe_ingredients

__all__ = [
    "COMMON_FRACTIONS",
    "format_amount",
    "round_half_up",
    "ConversionResult",
    "UnitConverter",
    "UnitSystem",
    "convert",
    "default_unit_directory",
    "ConvertedIngredient",
    "convert_recipe_ingredients",
]
