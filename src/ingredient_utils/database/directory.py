"""Canonical ingredient directories used by the matcher."""

import abc
import json
import logging
import os
import pathlib
import sqlite3
from typing import Any, Iterable, Iterator, List, Mapping, Union

import pandas as pd

from ingredient_utils.database.utils import get_connection
from ingredient_utils.ingredients.models import CanonicalIngredient
from ingredient_utils.ingredients.normalization import normalize_name

logger = logging.getLogger(__name__)

DEFAULT_DIRECTORY_FILE = os.path.join(
    os.path.dirname(__file__), "data", "ingredient_directory.json"
)


class DirectoryUnavailable(Exception):
    """The backing ingredient or unit directory could not be read."""


class IngredientDirectory(abc.ABC):
    """Read-only query surface over canonical ingredients."""

    @abc.abstractmethod
    def lookup_candidates(self, normalized_name: str) -> List[CanonicalIngredient]:
        """Return ingredients whose name, plural or alias contains the query.

        Args:
            normalized_name: Query already passed through normalize_name().

        Raises:
            DirectoryUnavailable: If the backing store cannot be read.
        """


def _split_aliases(value: Any) -> tuple:
    if value is None or (isinstance(value, float) and pd.isna(value)):
        return ()
    if isinstance(value, str):
        return tuple(a.strip() for a in value.split("|") if a.strip())
    return tuple(str(a).strip() for a in value if str(a).strip())


def _optional(value: Any):
    if value is None:
        return None
    if isinstance(value, float) and pd.isna(value):
        return None
    value = str(value).strip()
    return value or None


def ingredient_from_record(record: Mapping[str, Any]) -> CanonicalIngredient:
    """Build a CanonicalIngredient from a JSON/CSV/SQL row mapping.

    Aliases may be a list or a "|"-separated string.
    """
    return CanonicalIngredient(
        id=str(record["id"]),
        name=str(record["name"]),
        plural_name=_optional(record.get("plural_name")),
        family=_optional(record.get("family")),
        aliases=_split_aliases(record.get("aliases")),
        base_ingredient_id=_optional(record.get("base_ingredient_id")),
    )


def search_keys(ingredient: CanonicalIngredient) -> List[str]:
    """Normalized keys an ingredient can be found under (name, plural, aliases)."""
    keys = [normalize_name(ingredient.name)]
    if ingredient.plural_name:
        keys.append(normalize_name(ingredient.plural_name))
    keys.extend(normalize_name(alias) for alias in ingredient.aliases)
    return [k for k in keys if k]


class InMemoryDirectory(IngredientDirectory):
    """Directory held in memory, typically loaded from a bundled JSON file.

    Example:
        >>> directory = InMemoryDirectory.from_json()
        >>> [c.name for c in directory.lookup_candidates("butter")]
        ['butter']
    """

    def __init__(self, ingredients: Iterable[CanonicalIngredient]):
        self._ingredients = list(ingredients)
        self._keys = [(ingredient, search_keys(ingredient)) for ingredient in self._ingredients]

    def __len__(self) -> int:
        return len(self._ingredients)

    def __iter__(self) -> Iterator[CanonicalIngredient]:
        return iter(self._ingredients)

    def get(self, ingredient_id: str):
        return next((i for i in self._ingredients if i.id == ingredient_id), None)

    def lookup_candidates(self, normalized_name: str) -> List[CanonicalIngredient]:
        if not normalized_name:
            return []
        return [
            ingredient
            for ingredient, keys in self._keys
            if any(normalized_name in key for key in keys)
        ]

    @classmethod
    def from_records(cls, records: Iterable[Mapping[str, Any]]) -> "InMemoryDirectory":
        try:
            return cls(ingredient_from_record(record) for record in records)
        except (KeyError, TypeError) as e:
            raise DirectoryUnavailable(f"Malformed ingredient record: {e}") from e

    @classmethod
    def from_json(
        cls, path: Union[str, pathlib.Path] = DEFAULT_DIRECTORY_FILE
    ) -> "InMemoryDirectory":
        """Load a directory from a JSON list of ingredient records."""
        try:
            with open(path, "r", encoding="utf-8") as f:
                records = json.load(f)
        except (OSError, ValueError) as e:
            raise DirectoryUnavailable(f"Cannot load ingredient directory {path}: {e}") from e
        logger.debug("Loaded %d ingredient records from %s", len(records), path)
        return cls.from_records(records)

    @classmethod
    def from_csv(cls, path: Union[str, pathlib.Path]) -> "InMemoryDirectory":
        """Load a directory from a CSV file with id, name, plural_name,
        family, aliases and base_ingredient_id columns."""
        try:
            df = pd.read_csv(path, dtype=str)
        except (OSError, ValueError) as e:
            raise DirectoryUnavailable(f"Cannot load ingredient directory {path}: {e}") from e
        return cls.from_records(df.to_dict(orient="records"))


class SqliteDirectory(IngredientDirectory):
    """Directory backed by the `ingredient` and `ingredient_alias` tables."""

    def __init__(self, db_path: Union[str, pathlib.Path]):
        self.db_path = db_path

    def lookup_candidates(self, normalized_name: str) -> List[CanonicalIngredient]:
        if not normalized_name:
            return []

        pattern = f"%{normalized_name}%"
        query = """
        SELECT i.id, i.name, i.plural_name, i.family, i.base_ingredient_id,
               GROUP_CONCAT(a.alias, '|') AS aliases
        FROM ingredient i
        LEFT JOIN ingredient_alias a ON a.ingredient_id = i.id
        WHERE i.search_key LIKE :pattern
           OR i.plural_search_key LIKE :pattern
           OR i.id IN (
               SELECT ingredient_id FROM ingredient_alias WHERE search_key LIKE :pattern
           )
        GROUP BY i.id
        ORDER BY i.name
        """

        conn = None
        try:
            conn = get_connection(self.db_path)
            conn.row_factory = sqlite3.Row
            rows = conn.execute(query, {"pattern": pattern}).fetchall()
        except sqlite3.Error as e:
            raise DirectoryUnavailable(f"Database error: {e}") from e
        finally:
            if conn is not None:
                conn.close()

        return [ingredient_from_record(dict(row)) for row in rows]
