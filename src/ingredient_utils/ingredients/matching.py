"""Resolve parsed ingredient names against a canonical ingredient directory."""

import dataclasses
import logging
from typing import Dict, List, Optional, Sequence, Tuple

from ingredient_utils.database.audit import DecisionLog, NullDecisionLog
from ingredient_utils.database.directory import IngredientDirectory, search_keys
from ingredient_utils.ingredients.models import (
    CanonicalIngredient,
    DecisionRecord,
    MatchMethod,
    MatchResult,
    ParsedIngredient,
    RawLine,
)
from ingredient_utils.ingredients.normalization import normalize_name, significant_words
from ingredient_utils.ingredients.similarity import (
    ContainmentEditDistanceScorer,
    SimilarityScorer,
)

logger = logging.getLogger(__name__)

EXACT_CONFIDENCE = 1.0
ALIAS_CONFIDENCE = 0.9
FUZZY_MIN_CONFIDENCE = 0.6
FUZZY_MAX_CONFIDENCE = 0.8

# Matches below this confidence are flagged for human review
REVIEW_THRESHOLD = 0.85

# Length of the name prefix queried to reach edit-distance candidates
PREFIX_LENGTH = 4


def _format_amount(value: float) -> str:
    return f"{value:g}"


class IngredientMatcher:
    """Tiered matcher from parsed ingredient names to canonical ingredients.

    Tiers are tried in order and the first hit wins: exact name or plural
    (1.0), alias (0.9), fuzzy (0.6 to 0.8 by similarity). Anything else is
    unmatched (0.0). "X or Y" lines are matched fragment by fragment and
    judged equivalent when every fragment lands on the same ingredient or on
    ingredients of one family.

    Attributes:
        directory: Canonical ingredient directory to query.
        scorer: Similarity function for the fuzzy tier.
        decision_log: Receives one record per or-pattern line.
        review_threshold: Confidence below which results need review.
    """

    def __init__(
        self,
        directory: IngredientDirectory,
        scorer: Optional[SimilarityScorer] = None,
        decision_log: Optional[DecisionLog] = None,
        review_threshold: float = REVIEW_THRESHOLD,
    ):
        self.directory = directory
        self.scorer = scorer or ContainmentEditDistanceScorer()
        self.decision_log = decision_log or NullDecisionLog()
        self.review_threshold = review_threshold

    def match(
        self, parsed: ParsedIngredient, context: Optional[RawLine] = None
    ) -> MatchResult:
        """Match a parsed ingredient line.

        Args:
            parsed: Output of parse().
            context: Optional recipe id/title, passed to decision records.

        Returns:
            MatchResult. An unmatched line is a normal result.

        Raises:
            DirectoryUnavailable: If the directory cannot be queried.
        """
        if parsed.is_or_pattern:
            result = self._match_or_pattern(parsed, context)
        else:
            result = self.match_name(parsed.name)

        if parsed.quantity_range is not None:
            low, high = parsed.quantity_range
            note = (
                f"Quantity range {_format_amount(low)}-{_format_amount(high)}; "
                f"using lower bound {_format_amount(low)}"
            )
            notes = f"{result.match_notes}; {note}" if result.match_notes else note
            result = dataclasses.replace(result, match_notes=notes)
        return result

    def match_name(self, name: str) -> MatchResult:
        """Run the exact, alias and fuzzy tiers for a single name."""
        normalized = normalize_name(name)
        if not normalized:
            return MatchResult(
                ingredient_id=None,
                match_method=MatchMethod.UNMATCHED,
                match_confidence=0.0,
                match_notes="No ingredient name extracted from text",
                needs_review=True,
            )

        candidates = self._candidates(normalized)

        # Tier 1: canonical name or plural
        for candidate in candidates:
            keys = [normalize_name(candidate.name)]
            if candidate.plural_name:
                keys.append(normalize_name(candidate.plural_name))
            if normalized in keys:
                logger.debug("Exact match %r -> %s", name, candidate.id)
                return self._result(candidate, MatchMethod.EXACT, EXACT_CONFIDENCE)

        # Tier 2: registered alias
        for candidate in candidates:
            if normalized in (normalize_name(alias) for alias in candidate.aliases):
                logger.debug("Alias match %r -> %s", name, candidate.id)
                return self._result(
                    candidate,
                    MatchMethod.ALIAS,
                    ALIAS_CONFIDENCE,
                    f"Matched alias of '{candidate.name}'",
                )

        # Tier 3: fuzzy
        best = self._best_fuzzy(normalized, candidates)
        if best is not None:
            candidate, similarity = best
            confidence = FUZZY_MIN_CONFIDENCE + (
                FUZZY_MAX_CONFIDENCE - FUZZY_MIN_CONFIDENCE
            ) * min(max(similarity, 0.0), 1.0)
            logger.debug(
                "Fuzzy match %r -> %s (similarity %.2f)", name, candidate.id, similarity
            )
            return self._result(
                candidate,
                MatchMethod.FUZZY,
                round(confidence, 4),
                f"Fuzzy match '{name}' -> '{candidate.name}' (similarity {similarity:.2f})",
            )

        logger.debug("No match for %r", name)
        return MatchResult(
            ingredient_id=None,
            match_method=MatchMethod.UNMATCHED,
            match_confidence=0.0,
            match_notes=f"No directory entry matched '{name}'",
            needs_review=True,
        )

    def _result(
        self,
        candidate: CanonicalIngredient,
        method: MatchMethod,
        confidence: float,
        notes: Optional[str] = None,
    ) -> MatchResult:
        return MatchResult(
            ingredient_id=candidate.id,
            match_method=method,
            match_confidence=confidence,
            match_notes=notes,
            needs_review=self._review(confidence),
            ingredient_name=candidate.name,
            family=candidate.family,
        )

    def _review(self, confidence: float) -> bool:
        return confidence < self.review_threshold

    def _candidates(self, normalized: str) -> List[CanonicalIngredient]:
        """Query the directory with the full name, its words and a prefix."""
        queries = [normalized]
        queries.extend(significant_words(normalized))
        prefix = normalized[:PREFIX_LENGTH].strip()
        if len(normalized) > PREFIX_LENGTH and len(prefix) == PREFIX_LENGTH:
            queries.append(prefix)

        found: Dict[str, CanonicalIngredient] = {}
        for query in dict.fromkeys(queries):
            for candidate in self.directory.lookup_candidates(query):
                found.setdefault(candidate.id, candidate)
        return list(found.values())

    def _best_fuzzy(
        self, normalized: str, candidates: Sequence[CanonicalIngredient]
    ) -> Optional[Tuple[CanonicalIngredient, float]]:
        scored = []
        for candidate in candidates:
            scores = [self.scorer.score(normalized, key) for key in search_keys(candidate)]
            scores = [s for s in scores if s is not None]
            if scores:
                scored.append((candidate, max(scores)))
        if not scored:
            return None
        # Highest similarity, then generic parents, then shorter names
        scored.sort(key=lambda cs: (-cs[1], not cs[0].is_generic, len(cs[0].name)))
        return scored[0]

    def _match_or_pattern(
        self, parsed: ParsedIngredient, context: Optional[RawLine]
    ) -> MatchResult:
        fragments = parsed.fragments
        names = [f.display_name or f.name for f in fragments]
        results = [self.match_name(f.name) for f in fragments]
        primary = results[0]

        all_resolved = all(r.is_matched for r in results)
        same_ingredient = all_resolved and len({r.ingredient_id for r in results}) == 1
        families = {r.family for r in results}
        same_family = all_resolved and None not in families and len(families) == 1
        quoted = " or ".join(f"'{n}'" for n in names)

        if same_ingredient or same_family:
            confidence = min(r.match_confidence for r in results)
            if same_ingredient:
                reason = f"all options resolve to '{primary.ingredient_name}'"
            else:
                reason = f"all options are in the {primary.family} family"
            result = MatchResult(
                ingredient_id=primary.ingredient_id,
                match_method=MatchMethod.OR_PATTERN_EQUIVALENT,
                match_confidence=confidence,
                match_notes=(
                    f"Or-pattern {quoted} treated as equivalent ({reason}); "
                    f"using '{names[0]}' as primary"
                ),
                needs_review=self._review(confidence),
                ingredient_name=primary.ingredient_name,
                family=primary.family,
                alternatives=tuple(results),
            )
            chosen = names[0]
        else:
            if not all_resolved:
                missing = [n for n, r in zip(names, results) if not r.is_matched]
                reason = "no directory entry for " + ", ".join(f"'{n}'" for n in missing)
            else:
                reason = "different families: " + " vs ".join(
                    f"'{n}' ({r.family or 'unknown'})" for n, r in zip(names, results)
                )
            index = next((i for i, r in enumerate(results) if r.is_matched), 0)
            chosen = names[index]
            result = dataclasses.replace(
                results[index],
                match_notes=f"Ambiguous or-pattern {quoted}: {reason}; keeping '{chosen}'",
                needs_review=True,
                alternatives=tuple(results),
            )

        self._log_decision(
            DecisionRecord(
                raw_text=parsed.raw_text,
                option_names=tuple(names),
                option_ingredient_ids=tuple(r.ingredient_id for r in results),
                detected_as_equivalent=result.match_method
                == MatchMethod.OR_PATTERN_EQUIVALENT,
                primary_choice=chosen,
                confidence=result.match_confidence,
                reason=reason,
                recipe_id=context.recipe_id if context else None,
                recipe_title=context.recipe_title if context else None,
            )
        )
        return result

    def _log_decision(self, decision: DecisionRecord) -> None:
        try:
            self.decision_log.record(decision)
        except Exception as e:
            logger.warning(f"Could not record or-pattern decision: {e}")


def match(
    parsed: ParsedIngredient, directory: IngredientDirectory, **kwargs
) -> MatchResult:
    """Match a parsed ingredient against a directory.

    Keyword arguments are passed to IngredientMatcher.
    """
    return IngredientMatcher(directory, **kwargs).match(parsed)
