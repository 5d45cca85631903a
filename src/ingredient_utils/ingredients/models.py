import dataclasses
import enum
from typing import List, Optional, Tuple


class MatchMethod(str, enum.Enum):
    EXACT = "exact"
    ALIAS = "alias"
    FUZZY = "fuzzy"
    OR_PATTERN_EQUIVALENT = "or_pattern_equivalent"
    UNMATCHED = "unmatched"


@dataclasses.dataclass(frozen=True)
class RawLine:
    text: str
    recipe_id: Optional[str] = None
    recipe_title: Optional[str] = None


@dataclasses.dataclass(frozen=True)
class ParsedIngredient:
    """Structured form of one ingredient line.

    ``alternatives`` holds the extra name fragments of an "X or Y" line. Each
    fragment is itself a ParsedIngredient sharing the quantity and unit of the
    line and never carrying alternatives of its own, so the primary fragment
    plus ``alternatives`` is always a flat, ordered list of candidates.
    """

    raw_text: str
    name: str
    display_name: str = ""
    quantity_amount: Optional[float] = None
    quantity_unit: Optional[str] = None
    quantity_range: Optional[Tuple[float, float]] = None
    preparation: Optional[str] = None
    notes: Tuple[str, ...] = ()
    alternatives: Tuple["ParsedIngredient", ...] = ()

    @property
    def is_or_pattern(self) -> bool:
        return bool(self.alternatives)

    @property
    def fragments(self) -> Tuple["ParsedIngredient", ...]:
        """Primary fragment followed by every alternative, in listed order."""
        primary = dataclasses.replace(self, alternatives=())
        return (primary,) + self.alternatives


@dataclasses.dataclass(frozen=True)
class CanonicalIngredient:
    id: str
    name: str
    plural_name: Optional[str] = None
    family: Optional[str] = None
    aliases: Tuple[str, ...] = ()
    base_ingredient_id: Optional[str] = None  # parent for specific types

    @property
    def is_generic(self) -> bool:
        return self.base_ingredient_id is None


@dataclasses.dataclass(frozen=True)
class MatchResult:
    ingredient_id: Optional[str]
    match_method: MatchMethod
    match_confidence: float
    match_notes: Optional[str] = None
    needs_review: bool = False
    ingredient_name: Optional[str] = None
    family: Optional[str] = None
    # per-fragment results of an "X or Y" line, primary first
    alternatives: Tuple["MatchResult", ...] = ()

    @property
    def is_matched(self) -> bool:
        return self.ingredient_id is not None


@dataclasses.dataclass(frozen=True)
class DecisionRecord:
    """Audit entry describing how an or-pattern line was resolved."""

    raw_text: str
    option_names: Tuple[str, ...]
    option_ingredient_ids: Tuple[Optional[str], ...]
    detected_as_equivalent: bool
    primary_choice: Optional[str]
    confidence: float
    reason: str
    recipe_id: Optional[str] = None
    recipe_title: Optional[str] = None

    @property
    def options_found(self) -> List[bool]:
        return [ingredient_id is not None for ingredient_id in self.option_ingredient_ids]
