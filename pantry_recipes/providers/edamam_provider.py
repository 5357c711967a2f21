"""Edamam recipe-aggregator adapter.

One query call returns up to 20 hits; only the first four are used.
Edamam gives no preparation steps (only a link to the source page), so
the normalizer's placeholder steps apply.

API Reference: https://developer.edamam.com/edamam-docs-recipe-api
"""

import logging
from typing import Any, Dict, List

from pantry_recipes.data_layer.exceptions import NoMatchError
from pantry_recipes.data_layer.models import Nutrient, ProviderRecipe
from pantry_recipes.providers.recipe_provider import MAX_RECIPES, RecipeProvider


logger = logging.getLogger(__name__)

MAX_HITS = 20

# Edamam nutrient code -> name understood by the normalizer
TOTAL_NUTRIENT_CODES = {
    "PROCNT": "Protein",
    "CHOCDF": "Carbohydrates",
    "FAT": "Fat",
}


class EdamamProvider(RecipeProvider):
    """Provider backed by the Edamam Recipe Search API (v2)."""

    name = "edamam"
    BASE_URL = "https://api.edamam.com/api/recipes/v2"

    def fetch_recipes(self, user_ingredients: List[str]) -> List[ProviderRecipe]:
        app_id = self._require(self.settings.edamam_app_id, "EDAMAM_APP_ID")
        app_key = self._require(self.settings.edamam_app_key, "EDAMAM_APP_KEY")
        query = ",".join(user_ingredients)
        logger.info("Calling Edamam API with ingredients: %s", query)

        data = self._get_json(
            self.BASE_URL,
            "recipes/v2",
            params={
                "type": "public",
                "q": query,
                "app_id": app_id,
                "app_key": app_key,
                "to": MAX_HITS,
            },
        )
        hits = data.get("hits") if isinstance(data, dict) else None
        recipes = [
            hit["recipe"] for hit in (hits if isinstance(hits, list) else [])
            if isinstance(hit, dict) and isinstance(hit.get("recipe"), dict)
        ]
        if not recipes:
            raise NoMatchError(self.name)
        return [self._to_record(recipe) for recipe in recipes[:MAX_RECIPES]]

    @staticmethod
    def _first(values: Any) -> Any:
        if isinstance(values, list) and values:
            return values[0]
        return None

    @staticmethod
    def _nutrients(total_nutrients: Any) -> List[Nutrient]:
        if not isinstance(total_nutrients, dict):
            return []
        nutrients = []
        for code, name in TOTAL_NUTRIENT_CODES.items():
            entry = total_nutrients.get(code)
            if isinstance(entry, dict):
                nutrients.append(Nutrient(name=name, amount=entry.get("quantity"), unit=entry.get("unit")))
        return nutrients

    @classmethod
    def _to_record(cls, recipe: Dict[str, Any]) -> ProviderRecipe:
        lines = recipe.get("ingredientLines")
        return ProviderRecipe(
            title=recipe.get("label"),
            cuisine_tag=cls._first(recipe.get("cuisineType")),
            meal_type_tag=cls._first(recipe.get("mealType")),
            ingredient_lines=tuple(
                line for line in (lines if isinstance(lines, list) else []) if isinstance(line, str)
            ),
            nutrients=tuple(cls._nutrients(recipe.get("totalNutrients"))),
            dish_type_tag=cls._first(recipe.get("dishType")),
            source_url=recipe.get("url") or None,
            image=recipe.get("image") or None,
        )
