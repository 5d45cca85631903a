"""Find ingredient mentions in recipe instruction text."""

import dataclasses
import re
from typing import Any, List, Optional, Sequence

from ingredient_utils.ingredients.normalization import DESCRIPTORS

# Characters that may sit on either side of a mention
_BOUNDARY = r"[\s,;.!?()]"

# Extra words dropped when simplifying a name for mention search
_PREPARATION_WORDS = {"chopped", "diced", "sliced", "minced"}


@dataclasses.dataclass(frozen=True)
class IngredientMention:
    start: int
    end: int
    matched_text: str
    ingredient: Any


@dataclasses.dataclass(frozen=True)
class TextPart:
    text: str
    ingredient: Optional[Any] = None

    @property
    def is_ingredient(self) -> bool:
        return self.ingredient is not None


def name_variations(name: str) -> List[str]:
    """Get the spellings of an ingredient name worth looking for.

    Examples:
        >>> name_variations("red bell pepper")
        ['red bell pepper', 'bell pepper']
    """
    variations = [name]

    words = name.lower().split()
    simplified = " ".join(
        w for w in words if w not in DESCRIPTORS and w not in _PREPARATION_WORDS
    )
    if simplified and simplified != name.lower():
        variations.append(simplified)

    # Without the first word ("bell pepper" from "red bell pepper")
    if len(words) > 2:
        variations.append(" ".join(name.split()[1:]))

    seen = set()
    result = []
    for variation in variations:
        key = variation.lower()
        if len(key) > 2 and key not in seen:
            seen.add(key)
            result.append(variation)
    return result


def find_ingredient_mentions(
    instruction: str, ingredients: Sequence[Any]
) -> List[IngredientMention]:
    """Locate word-bounded mentions of ingredients in an instruction.

    Ingredients are tried in order and each name variation in turn; a
    mention never overlaps an earlier one.

    Args:
        instruction: Instruction text.
        ingredients: Objects with a ``name`` attribute (parsed, canonical or
            ingested ingredients).

    Returns:
        Mentions sorted by position.
    """
    mentions: List[IngredientMention] = []
    for ingredient in ingredients:
        name = getattr(ingredient, "name", None)
        if not name:
            continue
        for variation in name_variations(name):
            pattern = re.compile(
                rf"(?:^|(?<={_BOUNDARY})){re.escape(variation)}(?={_BOUNDARY}|$)",
                re.IGNORECASE,
            )
            for match in pattern.finditer(instruction):
                start, end = match.span()
                if any(start < m.end and m.start < end for m in mentions):
                    continue
                mentions.append(
                    IngredientMention(start, end, instruction[start:end], ingredient)
                )
    return sorted(mentions, key=lambda m: m.start)


def split_instruction(instruction: str, ingredients: Sequence[Any]) -> List[TextPart]:
    """Split an instruction into plain text and ingredient parts, in order."""
    mentions = find_ingredient_mentions(instruction, ingredients)
    if not mentions:
        return [TextPart(instruction)]

    parts = []
    position = 0
    for mention in mentions:
        if position < mention.start:
            parts.append(TextPart(instruction[position : mention.start]))
        parts.append(TextPart(mention.matched_text, mention.ingredient))
        position = mention.end
    if position < len(instruction):
        parts.append(TextPart(instruction[position:]))
    return parts
