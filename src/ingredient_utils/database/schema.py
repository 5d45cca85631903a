"""Database schema definitions for ingredient and unit directories."""

import sqlite3

DDL = """
CREATE TABLE IF NOT EXISTS ingredient(
    id                 TEXT PRIMARY KEY,
    name               TEXT UNIQUE NOT NULL,
    plural_name        TEXT,
    family             TEXT,
    base_ingredient_id TEXT,
    search_key         TEXT NOT NULL,
    plural_search_key  TEXT
);

CREATE TABLE IF NOT EXISTS ingredient_alias(
    ingredient_id TEXT NOT NULL,
    alias         TEXT NOT NULL,
    search_key    TEXT NOT NULL,
    PRIMARY KEY(ingredient_id, alias),
    FOREIGN KEY(ingredient_id) REFERENCES ingredient(id) ON DELETE CASCADE
);

CREATE TABLE IF NOT EXISTS measurement_unit(
    unit             TEXT PRIMARY KEY,
    display_singular TEXT NOT NULL,
    display_plural   TEXT NOT NULL,
    unit_type        TEXT NOT NULL
                     CHECK(unit_type IN ('volume', 'weight', 'count', 'other')),
    metric_g         REAL,
    metric_ml        REAL,
    aliases          TEXT
);

CREATE TABLE IF NOT EXISTS or_pattern_decision(
    id                     INTEGER PRIMARY KEY,
    recipe_id              TEXT,
    recipe_title           TEXT,
    original_text          TEXT NOT NULL,
    option_names           TEXT NOT NULL,
    option_ingredient_ids  TEXT NOT NULL,
    detected_as_equivalent INTEGER NOT NULL,
    primary_choice         TEXT,
    parser_confidence      REAL NOT NULL,
    decision_reason        TEXT,
    created_at             TEXT NOT NULL
);

CREATE INDEX IF NOT EXISTS ix_ingredient_search_key ON ingredient(search_key);
"""


def create_schema(conn: sqlite3.Connection) -> None:
    """Create the directory schema.

    Args:
        conn: SQLite database connection
    """
    conn.executescript(DDL)
    conn.execute("PRAGMA foreign_keys = ON")
