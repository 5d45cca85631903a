"""Convert and scale every ingredient of a recipe for display."""

import dataclasses
from typing import Any, Iterable, List, Optional, Union

from ingredient_utils.conversion.converter import UnitConverter, UnitSystem


@dataclasses.dataclass(frozen=True)
class ConvertedIngredient:
    name: str
    amount: Optional[float]
    unit: Optional[str]
    quantity_text: str
    preparation: Optional[str] = None

    @property
    def display_text(self) -> str:
        """Full display line, e.g. "473 ml flour, sifted"."""
        text = f"{self.quantity_text} {self.name}".strip()
        if self.preparation:
            text = f"{text}, {self.preparation}"
        return text


def convert_recipe_ingredients(
    ingredients: Iterable[Any],
    target_system: Union[UnitSystem, str] = UnitSystem.NATIVE,
    scale: float = 1.0,
    converter: Optional[UnitConverter] = None,
) -> List[ConvertedIngredient]:
    """Convert a recipe's ingredient list for display.

    Args:
        ingredients: Objects with ``quantity_amount``, ``quantity_unit``,
            ``name`` and optionally ``display_name`` and ``preparation``
            (ParsedIngredient or IngestedIngredient).
        target_system: Unit system to display in.
        scale: Recipe scale factor (2.0 doubles the recipe).
        converter: Converter to use; defaults to one over the bundled units.

    Returns:
        One ConvertedIngredient per input, in the same order.
    """
    converter = converter or UnitConverter()
    converted = []
    for ingredient in ingredients:
        result = converter.convert(
            ingredient.quantity_amount, ingredient.quantity_unit, target_system, scale
        )
        converted.append(
            ConvertedIngredient(
                name=getattr(ingredient, "display_name", None) or ingredient.name,
                amount=result.amount,
                unit=result.unit,
                quantity_text=result.display_text,
                preparation=getattr(ingredient, "preparation", None),
            )
        )
    return converted
