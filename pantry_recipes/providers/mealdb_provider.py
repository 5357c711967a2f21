"""TheMealDB adapter with optional USDA nutrition enrichment.

TheMealDB can only filter by one ingredient, so the search uses the
FIRST user ingredient. Up to four matches are looked up in full.

Nutrition is not part of TheMealDB; each recipe title is searched in
USDA FoodData Central instead. That lookup is best effort: without a
USDA_API_KEY, or when a lookup fails, the recipe's nutrition fields are
"N/A" and the request still succeeds.

API Reference: https://www.themealdb.com/api.php
"""

import logging
import re
from typing import Any, Dict, List, Optional, Tuple

import requests

from pantry_recipes.config import Settings
from pantry_recipes.data_layer.exceptions import NoMatchError, RecipeServiceError, UpstreamError
from pantry_recipes.data_layer.models import Nutrient, ProviderRecipe
from pantry_recipes.ingestion.usda_client import USDANutritionClient
from pantry_recipes.providers.recipe_provider import MAX_RECIPES, RecipeProvider


logger = logging.getLogger(__name__)

MAX_INGREDIENT_SLOTS = 20
UNKNOWN_AREA = "Unknown"

_LINE_BREAK = re.compile(r"[\r\n]+")
_STEP_MARKER = re.compile(r"^(step\s*)?\d+[.):]?$", re.IGNORECASE)


class MealDBProvider(RecipeProvider):
    """Provider backed by TheMealDB free recipe database."""

    name = "mealdb"
    BASE_URL = "https://www.themealdb.com/api/json/v1"

    def __init__(
        self,
        settings: Settings,
        session: Optional[requests.Session] = None,
        usda_client: Optional[USDANutritionClient] = None
    ):
        super().__init__(settings, session)
        if usda_client is None and settings.usda_api_key:
            usda_client = USDANutritionClient(
                api_key=settings.usda_api_key,
                session=self._session,
                timeout=settings.request_timeout,
            )
        self._usda = usda_client

    @property
    def _base(self) -> str:
        return f"{self.BASE_URL}/{self.settings.mealdb_api_key}"

    def fetch_recipes(self, user_ingredients: List[str]) -> List[ProviderRecipe]:
        primary = user_ingredients[0].replace(" ", "_")
        logger.info("Calling TheMealDB filter with first ingredient: %s", primary)

        data = self._get_json(f"{self._base}/filter.php", "filter", params={"i": primary})
        meals = data.get("meals") if isinstance(data, dict) else None
        meal_ids = [
            meal["idMeal"] for meal in (meals if isinstance(meals, list) else [])[:MAX_RECIPES]
            if isinstance(meal, dict) and meal.get("idMeal")
        ]
        if not meal_ids:
            raise NoMatchError(self.name)

        details = self._fan_out(self._fetch_detail, meal_ids)
        records = [self._to_record(detail) for detail in details]

        if self._usda is None:
            logger.warning("USDA_API_KEY is not configured; nutrition will be N/A")
            return records

        # Each worker writes to its own record; nutrition never drops a recipe
        self._fan_out(self._attach_nutrients, records)
        return records

    def _fetch_detail(self, meal_id: str) -> Dict[str, Any]:
        data = self._get_json(f"{self._base}/lookup.php", "lookup", params={"i": meal_id})
        meals = data.get("meals") if isinstance(data, dict) else None
        if not isinstance(meals, list) or not meals or not isinstance(meals[0], dict):
            raise UpstreamError(self.name, "lookup", detail=f"No meal returned for id {meal_id}")
        return meals[0]

    def _attach_nutrients(self, record: ProviderRecipe) -> ProviderRecipe:
        record.nutrients = self._lookup_nutrients(record.title or "")
        return record

    def _lookup_nutrients(self, title: str) -> Tuple[Nutrient, ...]:
        try:
            result = self._usda.search_dish(title)
        except RecipeServiceError as e:
            logger.warning("USDA nutrition lookup for %r failed: %s", title, e)
            return ()
        if not result.found:
            logger.warning(
                "No USDA nutrition for %r (%s): %s", title, result.error_code, result.error_message
            )
            return ()
        return result.nutrients

    @staticmethod
    def _ingredient_lines(meal: Dict[str, Any]) -> Tuple[str, ...]:
        lines = []
        for slot in range(1, MAX_INGREDIENT_SLOTS + 1):
            ingredient = meal.get(f"strIngredient{slot}")
            if not isinstance(ingredient, str) or not ingredient.strip():
                continue
            measure = meal.get(f"strMeasure{slot}")
            measure = measure.strip() if isinstance(measure, str) else ""
            lines.append(f"{measure} {ingredient.strip()}".strip())
        return tuple(lines)

    @staticmethod
    def _steps(instructions: Any) -> Tuple[str, ...]:
        if not isinstance(instructions, str):
            return ()
        steps = []
        for line in _LINE_BREAK.split(instructions):
            line = line.strip()
            if line and not _STEP_MARKER.match(line):
                steps.append(line)
        return tuple(steps)

    @classmethod
    def _to_record(cls, meal: Dict[str, Any]) -> ProviderRecipe:
        area = meal.get("strArea")
        return ProviderRecipe(
            title=meal.get("strMeal"),
            cuisine_tag=None if area == UNKNOWN_AREA else area,
            ingredient_lines=cls._ingredient_lines(meal),
            steps=cls._steps(meal.get("strInstructions")),
            dish_type_tag=meal.get("strCategory"),
            source_url=meal.get("strSource") or meal.get("strYoutube") or None,
            image=meal.get("strMealThumb") or None,
        )
