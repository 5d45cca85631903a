"""Ingredient parsing, normalization and matching utilities."""

from .models import (
    CanonicalIngredient,
    DecisionRecord,
    MatchMethod,
    MatchResult,
    ParsedIngredient,
    RawLine,
)
from .normalization import (
    normalize_name,
    normalize_unit,
    singularize,
    strip_accents,
    strip_descriptors,
)
from .parsing import (
    clean_ingredient_name,
    parse,
    parse_amount,
    parse_quantity,
    split_alternatives,
    split_preparation,
)
from .similarity import ContainmentEditDistanceScorer, SimilarityScorer
from .matching import REVIEW_THRESHOLD, IngredientMatcher, match
from .mentions import (
    IngredientMention,
    TextPart,
    find_ingredient_mentions,
    split_instruction,
)

__all__ = [
    "CanonicalIngredient",
    "DecisionRecord",
    "MatchMethod",
    "MatchResult",
    "ParsedIngredient",
    "RawLine",
    "normalize_name",
    "normalize_unit",
    "singularize",
    "strip_accents",
    "strip_descriptors",
    "clean_ingredient_name",
    "parse",
    "parse_amount",
    "parse_quantity",
    "split_alternatives",
    "split_preparation",
    "ContainmentEditDistanceScorer",
    "SimilarityScorer",
    "REVIEW_THRESHOLD",
    "IngredientMatcher",
    "match",
    "IngredientMention",
    "TextPart",
    "find_ingredient_mentions",
    "split_instruction",
]
