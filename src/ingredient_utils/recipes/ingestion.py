"""Parse and match every ingredient line of a recipe."""

import dataclasses
import logging
import threading
from concurrent.futures import ThreadPoolExecutor, as_completed
from typing import Dict, List, Optional, Sequence, Tuple

from tqdm import tqdm

from ingredient_utils.ingredients.matching import IngredientMatcher
from ingredient_utils.ingredients.models import (
    MatchMethod,
    MatchResult,
    ParsedIngredient,
    RawLine,
)
from ingredient_utils.ingredients.parsing import parse

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS = 8


@dataclasses.dataclass(frozen=True)
class IngestedIngredient:
    """A parsed line and its match, stored together in recipe order."""

    sequence_order: int  # 1-based position in the recipe's ingredient list
    parsed: ParsedIngredient
    match: MatchResult

    @property
    def raw_text(self) -> str:
        return self.parsed.raw_text

    @property
    def name(self) -> str:
        return self.parsed.name

    @property
    def display_name(self) -> str:
        return self.parsed.display_name

    @property
    def quantity_amount(self) -> Optional[float]:
        return self.parsed.quantity_amount

    @property
    def quantity_unit(self) -> Optional[str]:
        return self.parsed.quantity_unit

    @property
    def preparation(self) -> Optional[str]:
        return self.parsed.preparation

    @property
    def ingredient_id(self) -> Optional[str]:
        return self.match.ingredient_id

    @property
    def match_confidence(self) -> float:
        return self.match.match_confidence

    @property
    def needs_review(self) -> bool:
        return self.match.needs_review


@dataclasses.dataclass(frozen=True)
class AlternativeLink:
    """An extra ingredient offered by an "X or Y" line."""

    sequence_order: int
    ingredient_id: str
    name: str
    is_equivalent: bool
    preference_order: int  # 1 for equal options, 2 for a secondary choice


@dataclasses.dataclass(frozen=True)
class IngestionResult:
    ingredients: List[IngestedIngredient]
    alternatives: List[AlternativeLink]
    cancelled: bool = False

    @property
    def needs_review(self) -> List[IngestedIngredient]:
        return [i for i in self.ingredients if i.needs_review]


def process_line(
    line: RawLine, matcher: IngredientMatcher
) -> Tuple[ParsedIngredient, MatchResult]:
    """Parse and match a single line."""
    parsed = parse(line.text)
    return parsed, matcher.match(parsed, line)


def alternative_links(ingredient: IngestedIngredient) -> List[AlternativeLink]:
    """Links for the resolved fragments of an or-pattern line, primary excluded."""
    match = ingredient.match
    if not match.alternatives:
        return []

    is_equivalent = match.match_method == MatchMethod.OR_PATTERN_EQUIVALENT
    links = []
    fragments = ingredient.parsed.fragments
    for fragment, result in zip(fragments, match.alternatives):
        if not result.is_matched or result.ingredient_id == match.ingredient_id:
            continue
        links.append(
            AlternativeLink(
                sequence_order=ingredient.sequence_order,
                ingredient_id=result.ingredient_id,
                name=fragment.display_name or fragment.name,
                is_equivalent=is_equivalent,
                preference_order=1 if is_equivalent else 2,
            )
        )
    return links


def process_recipe_lines(
    lines: Sequence[str],
    matcher: IngredientMatcher,
    recipe_id: Optional[str] = None,
    recipe_title: Optional[str] = None,
    max_workers: int = DEFAULT_MAX_WORKERS,
    progress: bool = False,
    cancel_event: Optional[threading.Event] = None,
) -> IngestionResult:
    """Parse and match a recipe's ingredient lines concurrently.

    Lines are independent, so they run on a bounded thread pool; the result
    is put back in the original order with 1-based ``sequence_order``.

    Args:
        lines: Raw ingredient lines in recipe order.
        matcher: Matcher over the canonical directory.
        recipe_id: Tracing context passed to decision records.
        recipe_title: Tracing context passed to decision records.
        max_workers: Maximum number of parallel workers.
        progress: Show a tqdm progress bar.
        cancel_event: When set, pending lines are dropped and the lines
            finished so far are returned with ``cancelled=True``.

    Returns:
        IngestionResult with ingredients and alternative links.

    Raises:
        DirectoryUnavailable: If the directory cannot be queried.
    """
    raw_lines = [RawLine(text, recipe_id, recipe_title) for text in lines]
    done: Dict[int, IngestedIngredient] = {}
    cancelled = False

    executor = ThreadPoolExecutor(max_workers=max(1, max_workers))
    try:
        future_to_index = {
            executor.submit(process_line, line, matcher): index
            for index, line in enumerate(raw_lines)
        }
        with tqdm(
            total=len(raw_lines), desc="Matching ingredients", disable=not progress
        ) as pbar:
            for future in as_completed(future_to_index):
                if cancel_event is not None and cancel_event.is_set():
                    cancelled = True
                    break
                index = future_to_index[future]
                parsed, match = future.result()
                done[index] = IngestedIngredient(index + 1, parsed, match)
                pbar.update(1)
    finally:
        executor.shutdown(wait=True, cancel_futures=True)

    if cancelled:
        logger.info(
            "Ingestion of %s cancelled after %d/%d lines",
            recipe_title or recipe_id or "recipe",
            len(done),
            len(raw_lines),
        )

    ingredients = [done[index] for index in sorted(done)]
    alternatives = [link for i in ingredients for link in alternative_links(i)]
    return IngestionResult(ingredients, alternatives, cancelled)
