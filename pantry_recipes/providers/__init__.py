"""Provider abstraction layer for recipe discovery.

This package decouples the recipe planner and API from concrete upstream
services (Spoonacular, TheMealDB, Edamam, chat-completion LLMs).
"""

from pantry_recipes.providers.recipe_provider import RecipeProvider, MAX_RECIPES
from pantry_recipes.providers.spoonacular_provider import SpoonacularProvider
from pantry_recipes.providers.mealdb_provider import MealDBProvider
from pantry_recipes.providers.edamam_provider import EdamamProvider
from pantry_recipes.providers.llm_provider import LLMProvider
from pantry_recipes.providers.registry import PROVIDERS, create_provider

__all__ = [
    "RecipeProvider",
    "MAX_RECIPES",
    "SpoonacularProvider",
    "MealDBProvider",
    "EdamamProvider",
    "LLMProvider",
    "PROVIDERS",
    "create_provider",
]
