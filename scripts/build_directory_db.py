#!/usr/bin/env python3
"""Load the ingredient and measurement unit directories into a SQLite database."""

import argparse
import json

from tqdm import tqdm

from ingredient_utils.database import (
    JsonUnitSource,
    create_schema,
    get_connection,
    ingredient_from_record,
    transaction,
    upsert_ingredient,
    upsert_measurement_unit,
)
from ingredient_utils.database.directory import DEFAULT_DIRECTORY_FILE
from ingredient_utils.database.units import DEFAULT_UNITS_FILE


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("db_path", help="SQLite database to create or update")
    parser.add_argument(
        "--ingredients",
        default=DEFAULT_DIRECTORY_FILE,
        help="JSON list of ingredient records (default: bundled directory)",
    )
    parser.add_argument(
        "--units",
        default=DEFAULT_UNITS_FILE,
        help="JSON list of measurement unit records (default: bundled units)",
    )
    args = parser.parse_args()

    with open(args.ingredients, "r", encoding="utf-8") as f:
        ingredients = [ingredient_from_record(record) for record in json.load(f)]
    units = JsonUnitSource(args.units).load_units()

    conn = get_connection(args.db_path)
    try:
        create_schema(conn)
        with transaction(conn) as cur:
            # Parents first so base_ingredient_id always points at a stored row
            for ingredient in tqdm(
                sorted(ingredients, key=lambda i: not i.is_generic), desc="Ingredients"
            ):
                upsert_ingredient(cur, ingredient)
            for unit in units:
                upsert_measurement_unit(cur, unit)
    finally:
        conn.close()

    print(f"Loaded {len(ingredients)} ingredients and {len(units)} units into {args.db_path}")


if __name__ == "__main__":
    main()
