"""Review summaries and tabular export for ingested recipes."""

import pathlib
from typing import Dict, List, Optional, Sequence, Union

import pandas as pd

from ingredient_utils.database.units import UnitDirectory
from ingredient_utils.recipes.ingestion import IngestedIngredient

HIGH_CONFIDENCE = 0.8
MEDIUM_CONFIDENCE = 0.5
# Lines below this confidence need review even when not flagged
REVIEW_CONFIDENCE = 0.6


def extraction_confidence(ingredients: Sequence[IngestedIngredient]) -> float:
    """Percentage of lines matched with high confidence (0 to 100)."""
    if not ingredients:
        return 0.0
    confident = sum(1 for i in ingredients if i.match_confidence >= HIGH_CONFIDENCE)
    return round(confident / len(ingredients) * 100, 1)


def ingredients_needing_review(
    ingredients: Sequence[IngestedIngredient],
) -> List[IngestedIngredient]:
    """Lines flagged for review or matched with low confidence."""
    return [
        i for i in ingredients if i.needs_review or i.match_confidence < REVIEW_CONFIDENCE
    ]


def group_by_confidence(
    ingredients: Sequence[IngestedIngredient],
) -> Dict[str, List[IngestedIngredient]]:
    """Bucket lines into "high" (>= 0.8), "medium" (>= 0.5) and "low"."""
    groups: Dict[str, List[IngestedIngredient]] = {"high": [], "medium": [], "low": []}
    for ingredient in ingredients:
        if ingredient.match_confidence >= HIGH_CONFIDENCE:
            groups["high"].append(ingredient)
        elif ingredient.match_confidence >= MEDIUM_CONFIDENCE:
            groups["medium"].append(ingredient)
        else:
            groups["low"].append(ingredient)
    return groups


def results_to_dataframe(
    ingredients: Sequence[IngestedIngredient],
    units: Optional[UnitDirectory] = None,
) -> pd.DataFrame:
    """Flatten ingested lines into a DataFrame, one row per line.

    Args:
        ingredients: Ingested lines.
        units: When given, adds a ``pivot_amount`` column with the amount in
            grams or millilitres (NaN for count units).

    Returns:
        DataFrame ordered by ``sequence_order``.
    """
    ingredients = sorted(ingredients, key=lambda i: i.sequence_order)
    rows = []
    for i in ingredients:
        rows.append(
            {
                "sequence_order": i.sequence_order,
                "original_text": i.raw_text,
                "name": i.name,
                "quantity_amount": i.quantity_amount,
                "quantity_unit": i.quantity_unit,
                "preparation": i.preparation,
                "notes": "; ".join(i.parsed.notes),
                "alternatives": " | ".join(a.name for a in i.parsed.alternatives),
                "ingredient_id": i.ingredient_id,
                "ingredient_name": i.match.ingredient_name,
                "family": i.match.family,
                "match_method": i.match.match_method.value,
                "match_confidence": i.match_confidence,
                "match_notes": i.match.match_notes,
                "needs_review": i.needs_review,
            }
        )

    df = pd.DataFrame(
        rows,
        columns=[
            "sequence_order",
            "original_text",
            "name",
            "quantity_amount",
            "quantity_unit",
            "preparation",
            "notes",
            "alternatives",
            "ingredient_id",
            "ingredient_name",
            "family",
            "match_method",
            "match_confidence",
            "match_notes",
            "needs_review",
        ],
    )
    if units is not None:
        df["pivot_amount"] = [
            units.to_pivot(i.quantity_amount, i.quantity_unit) for i in ingredients
        ]
    return df


def write_review_csv(
    ingredients: Sequence[IngestedIngredient],
    output_file: Union[str, pathlib.Path],
    only_flagged: bool = True,
) -> int:
    """Write lines to a CSV for manual review.

    Returns:
        Number of rows written
    """
    if only_flagged:
        ingredients = ingredients_needing_review(ingredients)
    df = results_to_dataframe(ingredients)
    df.to_csv(output_file, index=False)
    return len(df)
