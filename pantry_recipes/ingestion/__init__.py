"""Ingestion layer: ingredient matching, normalization and nutrition lookup."""

from pantry_recipes.ingestion.ingredient_matcher import (
    tokenize,
    parse_user_ingredients,
    is_available,
)

from pantry_recipes.ingestion.recipe_normalizer import (
    normalize,
    format_nutrient,
    summarize_nutrition,
    PLACEHOLDER_STEPS,
)

from pantry_recipes.ingestion.usda_client import (
    USDANutritionClient,
    DishNutrition,
    USDASearchError,
    FoodDataType,
)

__all__ = [
    # Availability matching
    "tokenize",
    "parse_user_ingredients",
    "is_available",
    # Recipe normalization
    "normalize",
    "format_nutrient",
    "summarize_nutrition",
    "PLACEHOLDER_STEPS",
    # USDA API client
    "USDANutritionClient",
    "DishNutrition",
    "USDASearchError",
    "FoodDataType",
]
