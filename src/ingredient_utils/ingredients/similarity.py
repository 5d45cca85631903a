"""Similarity scoring for the fuzzy matching tier."""

import abc
from typing import Optional

from rapidfuzz import fuzz
from rapidfuzz.distance import Levenshtein

from ingredient_utils.ingredients.normalization import strip_descriptors

# Relative edit distance below which two names count as the same ingredient
MAX_EDIT_DISTANCE = 0.34

# Shortest name that may match by containment alone
MIN_CONTAINED_LENGTH = 3


class SimilarityScorer(abc.ABC):
    """Decides whether two normalized names are a fuzzy match and how close.

    Implementations only compare names; the matcher owns tiering, the
    confidence band and review flags.
    """

    @abc.abstractmethod
    def score(self, query: str, candidate: str) -> Optional[float]:
        """Score two normalized names.

        Returns:
            Similarity in [0, 1] when the names match fuzzily, otherwise None.
        """


class ContainmentEditDistanceScorer(SimilarityScorer):
    """Substring containment in either direction, or a small edit distance.

    Names are compared both as written and with descriptor words removed
    ("fresh", "large", colours...). Names that are equal once descriptors
    are removed score 1.0; otherwise the score is the rapidfuzz ratio.

    Example:
        >>> scorer = ContainmentEditDistanceScorer()
        >>> scorer.score("green cabbage", "cabbage")
        1.0
        >>> scorer.score("butter", "olive oil") is None
        True
    """

    def __init__(self, max_distance: float = MAX_EDIT_DISTANCE):
        self.max_distance = max_distance

    def _is_match(self, a: str, b: str) -> bool:
        shorter, longer = sorted((a, b), key=len)
        if len(shorter) >= MIN_CONTAINED_LENGTH and shorter in longer:
            return True
        return Levenshtein.normalized_distance(a, b) < self.max_distance

    def score(self, query: str, candidate: str) -> Optional[float]:
        if not query or not candidate:
            return None

        best = None
        pairs = [(query, candidate), (strip_descriptors(query), strip_descriptors(candidate))]
        for a, b in pairs:
            if not self._is_match(a, b):
                continue
            similarity = 1.0 if a == b else fuzz.ratio(a, b) / 100.0
            best = similarity if best is None else max(best, similarity)
        return best
