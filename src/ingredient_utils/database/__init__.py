"""Directory, unit and audit storage for ingredient interpretation."""

from .schema import DDL, create_schema
from .utils import (
    get_connection,
    transaction,
    upsert_ingredient,
    get_decision_data,
)
from .directory import (
    DirectoryUnavailable,
    IngredientDirectory,
    InMemoryDirectory,
    SqliteDirectory,
    ingredient_from_record,
)
from .units import (
    MeasurementUnit,
    UnitSource,
    JsonUnitSource,
    SqliteUnitSource,
    UnitDirectory,
    upsert_measurement_unit,
    validate_unit_coverage,
)
from .audit import (
    DecisionLog,
    NullDecisionLog,
    MemoryDecisionLog,
    SqliteDecisionLog,
    BackgroundDecisionLog,
)

__all__ = [
    "DDL",
    "create_schema",
    "get_connection",
    "transaction",
    "upsert_ingredient",
    "get_decision_data",
    "DirectoryUnavailable",
    "IngredientDirectory",
    "InMemoryDirectory",
    "SqliteDirectory",
    "ingredient_from_record",
    "MeasurementUnit",
    "UnitSource",
    "JsonUnitSource",
    "SqliteUnitSource",
    "UnitDirectory",
    "upsert_measurement_unit",
    "validate_unit_coverage",
    "DecisionLog",
    "NullDecisionLog",
    "MemoryDecisionLog",
    "SqliteDecisionLog",
    "BackgroundDecisionLog",
]
