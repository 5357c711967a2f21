"""Spoonacular recipe-search adapter.

Two steps:
1. ``findByIngredients`` returns up to four recipe ids ranked to maximize
   use of the user's ingredients (pantry staples ignored)
2. ``/{id}/information?includeNutrition=true`` per id, fetched concurrently

API Reference: https://spoonacular.com/food-api/docs
"""

import logging
from typing import Any, Dict, List

from pantry_recipes.data_layer.exceptions import NoMatchError
from pantry_recipes.data_layer.models import Nutrient, ProviderRecipe
from pantry_recipes.providers.recipe_provider import MAX_RECIPES, RecipeProvider


logger = logging.getLogger(__name__)


class SpoonacularProvider(RecipeProvider):
    """Provider backed by the Spoonacular recipe-search API."""

    name = "spoonacular"
    BASE_URL = "https://api.spoonacular.com/recipes"

    def fetch_recipes(self, user_ingredients: List[str]) -> List[ProviderRecipe]:
        api_key = self._require(self.settings.spoonacular_api_key, "SPOONACULAR_API_KEY")
        logger.info("Calling Spoonacular API with ingredients: %s", ", ".join(user_ingredients))

        matches = self._get_json(
            f"{self.BASE_URL}/findByIngredients",
            "findByIngredients",
            params={
                "apiKey": api_key,
                "ingredients": ",".join(user_ingredients),
                "number": MAX_RECIPES,
                "ranking": 1,
                "ignorePantry": "true",
            },
        )
        if not isinstance(matches, list):
            matches = []
        recipe_ids = [
            match["id"] for match in matches[:MAX_RECIPES]
            if isinstance(match, dict) and match.get("id") is not None
        ]
        if not recipe_ids:
            raise NoMatchError(self.name)

        details = self._fan_out(lambda recipe_id: self._fetch_detail(recipe_id, api_key), recipe_ids)
        return [self._to_record(detail) for detail in details]

    def _fetch_detail(self, recipe_id: Any, api_key: str) -> Dict[str, Any]:
        detail = self._get_json(
            f"{self.BASE_URL}/{recipe_id}/information",
            "information",
            params={"includeNutrition": "true", "apiKey": api_key},
        )
        return detail if isinstance(detail, dict) else {}

    @staticmethod
    def _first(values: Any) -> Any:
        if isinstance(values, list) and values:
            return values[0]
        return None

    @classmethod
    def _to_record(cls, detail: Dict[str, Any]) -> ProviderRecipe:
        extended = detail.get("extendedIngredients")
        lines = []
        for ing in extended if isinstance(extended, list) else []:
            if not isinstance(ing, dict):
                continue
            line = ing.get("originalString") or ing.get("original") or ing.get("name") or ""
            lines.append(str(line))

        steps = []
        instructions = cls._first(detail.get("analyzedInstructions"))
        if isinstance(instructions, dict) and isinstance(instructions.get("steps"), list):
            steps = [
                step["step"] for step in instructions["steps"]
                if isinstance(step, dict) and isinstance(step.get("step"), str)
            ]

        nutrients = []
        nutrition = detail.get("nutrition")
        if isinstance(nutrition, dict) and isinstance(nutrition.get("nutrients"), list):
            nutrients = [
                Nutrient(name=n.get("name"), amount=n.get("amount"), unit=n.get("unit"))
                for n in nutrition["nutrients"] if isinstance(n, dict)
            ]

        return ProviderRecipe(
            title=detail.get("title"),
            cuisine_tag=cls._first(detail.get("cuisines")),
            ingredient_lines=tuple(lines),
            steps=tuple(steps),
            nutrients=tuple(nutrients),
            dish_type_tag=cls._first(detail.get("dishTypes")),
            source_url=detail.get("sourceUrl") or detail.get("spoonacularSourceUrl") or None,
            image=detail.get("image") or None,
        )
