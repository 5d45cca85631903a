"""Unit conversion and scaling between measurement systems."""

import dataclasses
import enum
import functools
import logging
from typing import Optional, Union

from ingredient_utils.conversion.formatting import format_amount, round_half_up
from ingredient_utils.database.directory import DirectoryUnavailable
from ingredient_utils.database.units import MeasurementUnit, UnitDirectory

logger = logging.getLogger(__name__)


class UnitSystem(str, enum.Enum):
    NATIVE = "native"
    METRIC = "metric"
    IMPERIAL = "imperial"


@dataclasses.dataclass(frozen=True)
class ConversionResult:
    amount: Optional[float]
    unit: Optional[str]
    display_text: str


# Units returned unchanged when already in the target system
METRIC_UNITS = {"g", "kg", "mg", "ml", "cl", "dl", "l"}
IMPERIAL_UNITS = {"cup", "tbsp", "tsp", "fl oz", "pint", "quart", "gallon", "oz", "lb"}

GRAMS_PER_OUNCE = 28.35
OUNCES_PER_POUND = 16
ML_PER_CUP = 236.588
ML_PER_TBSP = 14.787
ML_PER_TSP = 4.929


@functools.lru_cache(maxsize=None)
def default_unit_directory() -> UnitDirectory:
    """Shared unit directory backed by the bundled unit data."""
    return UnitDirectory()


def _display_unit(unit: Optional[str], amount: Optional[float]) -> Optional[str]:
    if unit == "cup" and amount is not None and amount > 1:
        return "cups"
    return unit


class UnitConverter:
    """Scales amounts and converts them between unit systems.

    Weight converts through grams and volume through millilitres. Units the
    directory does not know, count units and "native" requests pass through
    with only the scale applied.

    Example:
        >>> converter = UnitConverter()
        >>> converter.convert(2, "cup", UnitSystem.METRIC)
        ConversionResult(amount=473.0, unit='ml', display_text='473 ml')
    """

    def __init__(self, units: Optional[UnitDirectory] = None):
        self.units = units if units is not None else default_unit_directory()

    def convert(
        self,
        amount: Optional[float],
        unit: Optional[str],
        target_system: Union[UnitSystem, str] = UnitSystem.NATIVE,
        scale: float = 1.0,
    ) -> ConversionResult:
        """Scale an amount, then convert it to the target system.

        Args:
            amount: Amount as stored, or None when the line has no quantity.
            unit: Unit token as written, or None.
            target_system: "native", "metric" or "imperial".
            scale: Multiplier applied before conversion.

        Returns:
            ConversionResult. Never raises for unknown units.
        """
        target_system = UnitSystem(target_system)
        scaled = None if amount is None else float(amount) * scale

        if target_system == UnitSystem.NATIVE or scaled is None or not unit:
            return self._make_result(scaled, unit)

        try:
            found = self.units.find(unit)
        except DirectoryUnavailable as e:
            logger.warning(f"Unit directory unavailable, not converting {unit!r}: {e}")
            return self._make_result(scaled, unit)
        if found is None:
            return self._make_result(scaled, unit)

        if target_system == UnitSystem.METRIC:
            converted = self._to_metric(scaled, found)
        else:
            converted = self._to_imperial(scaled, found)
        if converted is None:
            return self._make_result(scaled, unit)
        return self._make_result(*converted)

    def _to_metric(self, amount: float, unit: MeasurementUnit):
        if unit.unit in METRIC_UNITS:
            return None
        if unit.unit_type == "weight" and unit.metric_g is not None:
            grams = amount * unit.metric_g
            if grams >= 1000:
                return round_half_up(grams / 1000, 2), "kg"
            return round_half_up(grams, 0), "g"
        if unit.unit_type == "volume" and unit.metric_ml is not None:
            ml = amount * unit.metric_ml
            if ml >= 1000:
                return round_half_up(ml / 1000, 2), "L"
            return round_half_up(ml, 0), "ml"
        return None

    def _to_imperial(self, amount: float, unit: MeasurementUnit):
        if unit.unit in IMPERIAL_UNITS:
            return None
        if unit.unit_type == "weight" and unit.metric_g is not None:
            ounces = amount * unit.metric_g / GRAMS_PER_OUNCE
            if ounces >= OUNCES_PER_POUND:
                return round_half_up(ounces / OUNCES_PER_POUND, 2), "lb"
            return round_half_up(ounces, 1), "oz"
        if unit.unit_type == "volume" and unit.metric_ml is not None:
            ml = amount * unit.metric_ml
            if ml / ML_PER_CUP >= 1:
                return round_half_up(ml / ML_PER_CUP, 2), "cup"
            if ml / ML_PER_TBSP >= 1:
                return round_half_up(ml / ML_PER_TBSP, 1), "tbsp"
            return round_half_up(ml / ML_PER_TSP, 1), "tsp"
        return None

    @staticmethod
    def _make_result(amount: Optional[float], unit: Optional[str]) -> ConversionResult:
        parts = [format_amount(amount), _display_unit(unit, amount) or ""]
        return ConversionResult(amount, unit, " ".join(p for p in parts if p))


def convert(
    amount: Optional[float],
    unit: Optional[str],
    target_system: Union[UnitSystem, str] = UnitSystem.NATIVE,
    scale: float = 1.0,
    units: Optional[UnitDirectory] = None,
) -> ConversionResult:
    """Convert with a UnitConverter over ``units`` (bundled units by default)."""
    return UnitConverter(units).convert(amount, unit, target_system, scale)
