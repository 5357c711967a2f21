"""Recipe suggestion orchestration.

Validates the user's ingredient text, asks the configured provider for
recipes and normalizes at most four of them. Knows nothing about HTTP;
failures are raised as RecipeServiceError subclasses.
"""

import logging
from typing import Any, List

from pantry_recipes.data_layer.exceptions import InvalidInputError, NoMatchError
from pantry_recipes.data_layer.models import Recipe
from pantry_recipes.ingestion.ingredient_matcher import parse_user_ingredients
from pantry_recipes.ingestion.recipe_normalizer import normalize
from pantry_recipes.providers.recipe_provider import MAX_RECIPES, RecipeProvider


logger = logging.getLogger(__name__)


class RecipePlanner:
    """Turns a free-text ingredient list into normalized recipes.

    Usage:
        planner = RecipePlanner(create_provider(settings))
        recipes = planner.suggest("domates, soğan, biber")
    """

    def __init__(self, provider: RecipeProvider):
        self.provider = provider

    def suggest(self, raw_ingredients: Any) -> List[Recipe]:
        """Suggest up to four recipes for the user's ingredients.

        Args:
            raw_ingredients: Comma/newline separated ingredient text

        Returns:
            Between one and four recipes

        Raises:
            InvalidInputError: If the text is missing, not a string, blank,
                or contains no ingredients after splitting
            NoMatchError: If the provider returned no records
            RecipeServiceError: Any provider failure
        """
        if not isinstance(raw_ingredients, str) or not raw_ingredients.strip():
            raise InvalidInputError()

        user_ingredients = parse_user_ingredients(raw_ingredients)
        if not user_ingredients:
            raise InvalidInputError()

        records = self.provider.fetch_recipes(user_ingredients)
        if not records:
            raise NoMatchError(self.provider.name)

        recipes = [
            normalize(record, user_ingredients, self.provider.provides_own_availability)
            for record in records[:MAX_RECIPES]
        ]
        logger.info("Returning %d recipes from %s", len(recipes), self.provider.name)
        return recipes
