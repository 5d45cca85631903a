#!/usr/bin/env python3
"""
Parse and match the ingredient lines of a recipe file (one line per ingredient).
Prints each match, optionally converted and scaled, and writes a review CSV.
"""

import argparse
import logging
import pathlib
from typing import List

from ingredient_utils.conversion import (
    UnitConverter,
    UnitSystem,
    convert_recipe_ingredients,
)
from ingredient_utils.database import (
    BackgroundDecisionLog,
    InMemoryDirectory,
    NullDecisionLog,
    SqliteDecisionLog,
    SqliteDirectory,
    SqliteUnitSource,
    UnitDirectory,
    validate_unit_coverage,
)
from ingredient_utils.ingredients import IngredientMatcher
from ingredient_utils.recipes import (
    DEFAULT_MAX_WORKERS,
    extraction_confidence,
    process_recipe_lines,
    write_review_csv,
)


def read_lines(path: pathlib.Path) -> List[str]:
    with open(path, "r", encoding="utf-8") as f:
        return [line.strip() for line in f if line.strip() and not line.startswith("#")]


def main():
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("recipe_file", type=pathlib.Path, help="Text file of ingredient lines")
    parser.add_argument("--db", help="SQLite directory database (default: bundled JSON)")
    parser.add_argument("--title", help="Recipe title recorded with decisions")
    parser.add_argument("--output", help="Write lines needing review to this CSV")
    parser.add_argument("--workers", type=int, default=DEFAULT_MAX_WORKERS, help="Parallel workers")
    parser.add_argument(
        "--system",
        choices=[s.value for s in UnitSystem],
        default=UnitSystem.NATIVE.value,
        help="Unit system for display",
    )
    parser.add_argument("--scale", type=float, default=1.0, help="Recipe scale factor")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args()

    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.WARNING)

    if args.db:
        directory = SqliteDirectory(args.db)
        units = UnitDirectory(SqliteUnitSource(args.db))
        decision_log = BackgroundDecisionLog(SqliteDecisionLog(args.db))
    else:
        directory = InMemoryDirectory.from_json()
        units = UnitDirectory()
        decision_log = NullDecisionLog()

    title = args.title or args.recipe_file.stem
    lines = read_lines(args.recipe_file)
    print(f"Processing {len(lines)} ingredient lines from {args.recipe_file}...")

    matcher = IngredientMatcher(directory, decision_log=decision_log)
    try:
        result = process_recipe_lines(
            lines, matcher, recipe_title=title, max_workers=args.workers, progress=True
        )
    finally:
        if isinstance(decision_log, BackgroundDecisionLog):
            decision_log.close()

    converted = convert_recipe_ingredients(
        result.ingredients, args.system, args.scale, UnitConverter(units)
    )
    for ingredient, display in zip(result.ingredients, converted):
        flag = "!" if ingredient.needs_review else " "
        print(
            f"{flag} {ingredient.sequence_order:>2}. {display.display_text:<45} "
            f"-> {ingredient.match.ingredient_name or '-'} "
            f"({ingredient.match.match_method.value}, {ingredient.match_confidence:.2f})"
        )
    for link in result.alternatives:
        kind = "equivalent" if link.is_equivalent else "substitute"
        print(f"  line {link.sequence_order}: {kind} alternative {link.name}")

    validate_unit_coverage(units, (i.quantity_unit for i in result.ingredients))
    print(f"Extraction confidence: {extraction_confidence(result.ingredients):.1f}%")
    print(f"Lines needing review: {len(result.needs_review)}")

    if args.output:
        written = write_review_csv(result.ingredients, args.output)
        print(f"Wrote {written} lines to {args.output}")


if __name__ == "__main__":
    main()
