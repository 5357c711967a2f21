"""Normalization of provider records into the canonical Recipe shape.

Every adapter hands over a :class:`ProviderRecipe`; this module fills in
the rest of the contract:

- cuisine label ("Italian Mutfağı", falling back to "Dünya Mutfağı")
- availability flag for every ingredient line
- non-empty preparation steps (generic placeholder when missing)
- protein/carbohydrate/fat formatted as "<int><unit>" or "N/A"
- one-line pairing suggestion
"""

import math
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from pantry_recipes.data_layer.models import (
    NOT_AVAILABLE,
    IngredientAvailability,
    Nutrient,
    NutritionSummary,
    ProviderRecipe,
    Recipe,
)
from pantry_recipes.ingestion.ingredient_matcher import is_available


DEFAULT_TITLE = "Tarif"
DEFAULT_CUISINE = "Dünya Mutfağı"
CUISINE_SUFFIX = " Mutfağı"
DEFAULT_UNIT = "g"

PLACEHOLDER_STEPS: Tuple[str, ...] = (
    "Fırını/ocağı tarifte belirtilen sıcaklığa getirin.",
    "Malzemeleri hazırlayın ve doğrayın.",
    "Tarif talimatlarına göre pişirin.",
    "Servis edin.",
)

PAIRING_TEMPLATE = "Bu {dish_type} yanında hafif bir salata veya içecek ile servis edilebilir."
DEFAULT_PAIRING = (
    "Bu yemeği yan ürünler ve içeceklerle damak zevkinize göre eşleştirebilirsiniz."
)

# Summary field -> accepted nutrient names (lowercase). Spoonacular and
# Edamam use the short names, USDA FoodData Central the long ones.
NUTRIENT_ALIASES: Dict[str, Tuple[str, ...]] = {
    "protein": ("protein",),
    "carbohydrate": ("carbohydrates", "carbohydrate", "carbohydrate, by difference"),
    "fat": ("fat", "total fat", "total lipid (fat)"),
}


def _capitalize(tag: str) -> str:
    return tag[:1].upper() + tag[1:]


def _text(value: Optional[str]) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


def cuisine_label(record: ProviderRecipe) -> str:
    """Derive the display cuisine for a provider record."""
    label = _text(record.cuisine_label)
    if label:
        return label
    cuisine = _text(record.cuisine_tag)
    if cuisine:
        return _capitalize(cuisine) + CUISINE_SUFFIX
    meal_type = _text(record.meal_type_tag)
    if meal_type:
        return _capitalize(meal_type)
    return DEFAULT_CUISINE


def preparation_steps(steps: Iterable[str]) -> Tuple[str, ...]:
    """Return cleaned steps, or the placeholder sequence when none remain."""
    cleaned = tuple(step.strip() for step in steps if _text(step))
    return cleaned or PLACEHOLDER_STEPS


def round_half_up(amount: float) -> int:
    """Round to the nearest integer with .5 going up (14.5 -> 15)."""
    return int(math.floor(amount + 0.5))


def format_nutrient(nutrient: Optional[Nutrient]) -> str:
    """Format a nutrient as "<int><unit>", or "N/A" if unknown.

    Args:
        nutrient: Nutrient entry, or None when the provider omitted it

    Returns:
        e.g. "15g" for Nutrient("Protein", 14.6, "g")
    """
    if nutrient is None:
        return NOT_AVAILABLE
    amount = nutrient.amount
    if isinstance(amount, bool) or not isinstance(amount, (int, float)):
        return NOT_AVAILABLE
    if not math.isfinite(amount):
        return NOT_AVAILABLE
    unit = nutrient.unit if isinstance(nutrient.unit, str) and nutrient.unit else DEFAULT_UNIT
    return f"{round_half_up(amount)}{unit}"


def find_nutrient(nutrients: Sequence[Nutrient], field_name: str) -> Optional[Nutrient]:
    """Find the first nutrient whose name matches a summary field."""
    aliases = NUTRIENT_ALIASES[field_name]
    for nutrient in nutrients:
        if isinstance(nutrient.name, str) and nutrient.name.strip().lower() in aliases:
            return nutrient
    return None


def summarize_nutrition(nutrients: Sequence[Nutrient]) -> NutritionSummary:
    """Build the display summary from a provider nutrient list."""
    return NutritionSummary(
        protein=format_nutrient(find_nutrient(nutrients, "protein")),
        carbohydrate=format_nutrient(find_nutrient(nutrients, "carbohydrate")),
        fat=format_nutrient(find_nutrient(nutrients, "fat")),
    )


def pairing_suggestion(record: ProviderRecipe) -> str:
    text = _text(record.pairing)
    if text:
        return text
    dish_type = _text(record.dish_type_tag)
    if dish_type:
        return PAIRING_TEMPLATE.format(dish_type=dish_type)
    return DEFAULT_PAIRING


def _ingredients(
    record: ProviderRecipe,
    user_ingredients: List[str],
    provides_own_availability: bool
) -> Tuple[IngredientAvailability, ...]:
    lines = record.ingredient_lines
    if provides_own_availability:
        flags = record.ingredient_flags or ()
        return tuple(
            IngredientAvailability(
                name=line,
                available=flags[i] if i < len(flags) and isinstance(flags[i], bool) else False,
            )
            for i, line in enumerate(lines)
        )
    return tuple(
        IngredientAvailability(name=line, available=is_available(user_ingredients, line))
        for line in lines
    )


def normalize(
    record: ProviderRecipe,
    user_ingredients: List[str],
    provides_own_availability: bool = False
) -> Recipe:
    """Build the canonical Recipe for one provider record.

    Args:
        record: Intermediate record from a provider adapter
        user_ingredients: Parsed user ingredients
        provides_own_availability: Trust ``record.ingredient_flags``
            instead of running the availability matcher

    Returns:
        Immutable Recipe
    """
    nutrition = record.nutrition or summarize_nutrition(record.nutrients)
    return Recipe(
        cuisine=cuisine_label(record),
        title=_text(record.title) or DEFAULT_TITLE,
        ingredients=_ingredients(record, user_ingredients, provides_own_availability),
        preparation=preparation_steps(record.steps),
        nutrition=nutrition,
        pairing=pairing_suggestion(record),
        source_url=record.source_url or None,
        image=record.image or None,
    )
