"""Database utility functions for ingredient directories."""

import contextlib
import pathlib
import sqlite3
from typing import Generator, Union

import pandas as pd

from ingredient_utils.ingredients.models import CanonicalIngredient
from ingredient_utils.ingredients.normalization import normalize_name


def get_connection(db_path: Union[str, pathlib.Path]) -> sqlite3.Connection:
    """Get a SQLite database connection with foreign keys enabled.

    Args:
        db_path: Path to the SQLite database file

    Returns:
        SQLite connection with foreign keys enabled
    """
    conn = sqlite3.connect(db_path)
    conn.execute("PRAGMA foreign_keys = ON")
    return conn


@contextlib.contextmanager
def transaction(conn: sqlite3.Connection) -> Generator[sqlite3.Cursor, None, None]:
    """Context manager for database transactions.

    Args:
        conn: SQLite database connection

    Yields:
        Database cursor for executing queries

    Example:
        with transaction(conn) as cur:
            upsert_ingredient(cur, CanonicalIngredient(id="salt", name="salt"))
    """
    cur = conn.cursor()
    try:
        yield cur
        conn.commit()
    except Exception:
        conn.rollback()
        raise


def upsert_ingredient(cur: sqlite3.Cursor, ingredient: CanonicalIngredient) -> str:
    """Insert or update a canonical ingredient and its aliases.

    Normalized search keys are stored next to the display values so that
    directory lookups can use plain LIKE queries.

    Args:
        cur: Database cursor
        ingredient: Ingredient to store

    Returns:
        ID of the ingredient
    """
    plural_key = normalize_name(ingredient.plural_name) if ingredient.plural_name else None
    cur.execute(
        """
        INSERT INTO ingredient(
            id, name, plural_name, family, base_ingredient_id, search_key, plural_search_key
        )
        VALUES (?, ?, ?, ?, ?, ?, ?)
        ON CONFLICT(id) DO UPDATE SET
            name = excluded.name,
            plural_name = excluded.plural_name,
            family = excluded.family,
            base_ingredient_id = excluded.base_ingredient_id,
            search_key = excluded.search_key,
            plural_search_key = excluded.plural_search_key
        """,
        (
            ingredient.id,
            ingredient.name,
            ingredient.plural_name,
            ingredient.family,
            ingredient.base_ingredient_id,
            normalize_name(ingredient.name),
            plural_key,
        ),
    )
    cur.execute("DELETE FROM ingredient_alias WHERE ingredient_id = ?", (ingredient.id,))
    cur.executemany(
        "INSERT OR IGNORE INTO ingredient_alias(ingredient_id, alias, search_key) "
        "VALUES (?, ?, ?)",
        [(ingredient.id, alias, normalize_name(alias)) for alias in ingredient.aliases],
    )
    return ingredient.id


def get_decision_data(db_path: Union[str, pathlib.Path]) -> pd.DataFrame:
    """Get all recorded or-pattern decisions for corpus-wide analysis.

    Args:
        db_path: Path to the SQLite database

    Returns:
        DataFrame with one row per decision, oldest first
    """
    conn = get_connection(db_path)
    try:
        df = pd.read_sql_query(
            "SELECT * FROM or_pattern_decision ORDER BY created_at, id", conn
        )
    finally:
        conn.close()
    df["detected_as_equivalent"] = df["detected_as_equivalent"].astype(bool)
    return df
