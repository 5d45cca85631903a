"""Recipe-level ingestion and review utilities."""

from .ingestion import (
    DEFAULT_MAX_WORKERS,
    AlternativeLink,
    IngestedIngredient,
    IngestionResult,
    alternative_links,
    process_line,
    process_recipe_lines,
)
from .review import (
    extraction_confidence,
    group_by_confidence,
    ingredients_needing_review,
    results_to_dataframe,
    write_review_csv,
)

__all__ = [
    "DEFAULT_MAX_WORKERS",
    "AlternativeLink",
    "IngestedIngredient",
    "IngestionResult",
    "alternative_links",
    "process_line",
    "process_recipe_lines",
    "extraction_confidence",
    "group_by_confidence",
    "ingredients_needing_review",
    "results_to_dataframe",
    "write_review_csv",
]
