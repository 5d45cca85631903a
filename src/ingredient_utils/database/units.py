"""Measurement unit directory for ingredient quantity conversion."""

import abc
import dataclasses
import json
import logging
import os
import pathlib
import sqlite3
import threading
from typing import Any, Dict, Iterable, List, Mapping, Optional, Set, Tuple, Union

import numpy as np

from ingredient_utils.database.directory import DirectoryUnavailable
from ingredient_utils.database.utils import get_connection
from ingredient_utils.ingredients.normalization import normalize_unit

logger = logging.getLogger(__name__)

DEFAULT_UNITS_FILE = os.path.join(
    os.path.dirname(__file__), "data", "measurement_units.json"
)

UNIT_TYPES = ("volume", "weight", "count", "other")


@dataclasses.dataclass(frozen=True)
class MeasurementUnit:
    unit: str
    display_singular: str
    display_plural: str
    unit_type: str
    metric_g: Optional[float] = None  # grams per unit (weight)
    metric_ml: Optional[float] = None  # millilitres per unit (volume)
    aliases: Tuple[str, ...] = ()

    @property
    def names(self) -> List[str]:
        """Every spelling this unit can be looked up by."""
        return [self.unit, self.display_singular, self.display_plural, *self.aliases]


def _factor(value: Any) -> Optional[float]:
    if value is None or value == "":
        return None
    value = float(value)
    return None if np.isnan(value) else value


def unit_from_record(record: Mapping[str, Any]) -> MeasurementUnit:
    """Build a MeasurementUnit from a JSON or SQL row mapping.

    ``aliases`` may be a list or a JSON-encoded list.
    """
    aliases = record.get("aliases") or ()
    if isinstance(aliases, str):
        aliases = json.loads(aliases)
    unit_type = record["unit_type"]
    if unit_type not in UNIT_TYPES:
        raise ValueError(f"Unknown unit type {unit_type!r} for {record['unit']!r}")
    return MeasurementUnit(
        unit=record["unit"],
        display_singular=record.get("display_singular") or record["unit"],
        display_plural=record.get("display_plural") or record["unit"],
        unit_type=unit_type,
        metric_g=_factor(record.get("metric_g")),
        metric_ml=_factor(record.get("metric_ml")),
        aliases=tuple(aliases),
    )


class UnitSource(abc.ABC):
    """Storage collaborator that returns every measurement unit row."""

    @abc.abstractmethod
    def load_units(self) -> List[MeasurementUnit]:
        """Load all units.

        Raises:
            DirectoryUnavailable: If the backing store cannot be read.
        """


class JsonUnitSource(UnitSource):
    """Units from a JSON list of records (the bundled file by default)."""

    def __init__(self, path: Union[str, pathlib.Path] = DEFAULT_UNITS_FILE):
        self.path = path

    def load_units(self) -> List[MeasurementUnit]:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                return [unit_from_record(record) for record in json.load(f)]
        except (OSError, KeyError, ValueError) as e:
            raise DirectoryUnavailable(f"Cannot load units from {self.path}: {e}") from e


class SqliteUnitSource(UnitSource):
    """Units from the ``measurement_unit`` table."""

    def __init__(self, db_path: Union[str, pathlib.Path]):
        self.db_path = db_path

    def load_units(self) -> List[MeasurementUnit]:
        conn = None
        try:
            conn = get_connection(self.db_path)
            conn.row_factory = sqlite3.Row
            rows = conn.execute("SELECT * FROM measurement_unit ORDER BY unit").fetchall()
            return [unit_from_record(dict(row)) for row in rows]
        except (sqlite3.Error, ValueError) as e:
            raise DirectoryUnavailable(f"Database error: {e}") from e
        finally:
            if conn is not None:
                conn.close()


class UnitDirectory:
    """Process-wide, read-only cache of measurement units.

    The full unit list is fetched from ``source`` on first use. Concurrent
    first callers wait on the same load instead of each fetching. A failed
    load leaves the cache empty so the next call tries again.

    Example:
        >>> units = UnitDirectory()
        >>> units.find("Tablespoons").unit
        'tbsp'
        >>> round(units.to_pivot(2, "cup"), 2)
        473.18
    """

    def __init__(self, source: Optional[UnitSource] = None):
        self.source = source or JsonUnitSource()
        self._lock = threading.Lock()
        self._units: Optional[List[MeasurementUnit]] = None
        self._index: Dict[str, MeasurementUnit] = {}

    def _ensure_loaded(self) -> None:
        if self._units is not None:
            return
        with self._lock:
            if self._units is not None:
                return
            units = self.source.load_units()
            index: Dict[str, MeasurementUnit] = {}
            for unit in units:
                for name in unit.names:
                    index.setdefault(name.strip().lower(), unit)
            self._index = index
            self._units = units
            logger.debug("Cached %d measurement units", len(units))

    @property
    def is_loaded(self) -> bool:
        return self._units is not None

    def units(self) -> List[MeasurementUnit]:
        self._ensure_loaded()
        return list(self._units)

    def __len__(self) -> int:
        return len(self.units())

    def find(self, name: Optional[str]) -> Optional[MeasurementUnit]:
        """Resolve a unit token by code, display name or alias.

        Falls back to the parser's spelling table, so "T" resolves to
        tablespoons and "t" to teaspoons.

        Raises:
            DirectoryUnavailable: If the units cannot be loaded.
        """
        if not isinstance(name, str) or not name.strip():
            return None
        self._ensure_loaded()
        key = name.strip().lower()
        unit = self._index.get(key) or self._index.get(key.rstrip("."))
        if unit is None:
            unit = self._index.get(normalize_unit(name).lower())
        return unit

    def to_pivot(self, amount: Optional[float], unit: Optional[str]) -> float:
        """Convert an amount to grams (weight) or millilitres (volume).

        Returns:
            The pivot amount, or NaN when the amount is missing or the unit
            has no metric factor.

        Examples:
            >>> UnitDirectory().to_pivot(1, "oz")
            28.35
            >>> UnitDirectory().to_pivot(1, "clove")
            nan
        """
        if amount is None or not isinstance(unit, str):
            return np.nan
        try:
            amount_float = float(amount)
        except (ValueError, TypeError):
            return np.nan
        if np.isnan(amount_float):
            return np.nan

        found = self.find(unit)
        if found is None:
            return np.nan
        factor = found.metric_g if found.unit_type == "weight" else found.metric_ml
        if factor is None:
            return np.nan
        return amount_float * factor


def upsert_measurement_unit(cur: sqlite3.Cursor, unit: MeasurementUnit) -> str:
    """Insert or update a measurement unit row.

    Returns:
        Code of the unit
    """
    cur.execute(
        """
        INSERT INTO measurement_unit(
            unit, display_singular, display_plural, unit_type, metric_g, metric_ml, aliases
        )
        VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(unit) DO UPDATE SET
            display_singular = excluded.display_singular,
            display_plural = excluded.display_plural,
            unit_type = excluded.unit_type,
            metric_g = excluded.metric_g,
            metric_ml = excluded.metric_ml,
            aliases = excluded.aliases
        """,
        (
            unit.unit,
            unit.display_singular,
            unit.display_plural,
            unit.unit_type,
            unit.metric_g,
            unit.metric_ml,
            json.dumps(list(unit.aliases)),
        ),
    )
    return unit.unit


def validate_unit_coverage(units: UnitDirectory, observed: Iterable[str]) -> Set[str]:
    """Check that every observed unit token resolves against the directory.

    Args:
        units: Unit directory to check against
        observed: Unit tokens seen in parsed ingredient lines

    Returns:
        Set of tokens that do not resolve. They pass through conversion
        unchanged.
    """
    observed = {u for u in observed if u}
    unknown_units = {u for u in observed if units.find(u) is None}

    if unknown_units:
        logger.warning(
            "Found %d unknown units: %s", len(unknown_units), ", ".join(sorted(unknown_units))
        )
    else:
        logger.info("All %d units have conversion coverage", len(observed))
    return unknown_units
