"""USDA FoodData Central search, used to estimate recipe nutrition.

Adapters whose recipe source has no nutrition data (TheMealDB) search the
recipe title here and take the macros of the best matching food.

API Reference: https://fdc.nal.usda.gov/api-guide.html

DESIGN DECISIONS:
- Foods are ranked Survey > SR Legacy > Foundation > Branded. Survey
  (FNDDS) entries describe prepared dishes, which is what a recipe title
  names; branded products come last
- Searches never raise: every outcome is a DishNutrition and the adapter
  decides whether a miss matters (it never does; nutrition is optional)
- Values are per 100 g as reported by USDA, no portion scaling
"""

import logging
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional, Tuple

import requests

from pantry_recipes.data_layer.models import Nutrient


logger = logging.getLogger(__name__)


class FoodDataType(Enum):
    """USDA food data types, declared best-first."""
    SURVEY = "Survey (FNDDS)"
    SR_LEGACY = "SR Legacy"
    FOUNDATION = "Foundation"
    BRANDED = "Branded"

    @classmethod
    def parse(cls, raw: Any) -> Optional["FoodDataType"]:
        try:
            return cls(raw)
        except ValueError:
            return None

    @classmethod
    def rank(cls, data_type: Optional["FoodDataType"]) -> int:
        """Position in declaration order; unknown types sort after Branded."""
        members = list(cls)
        return members.index(data_type) if data_type in members else len(members)


class USDASearchError(Exception):
    """Search failure inside the client; converted to a DishNutrition miss."""

    def __init__(self, code: str, message: str):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}")


@dataclass
class DishNutrition:
    """Outcome of searching one dish name.

    Attributes:
        query: Normalized search text
        food_id: FDC id of the chosen food (None on a miss)
        food_name: USDA description of the chosen food
        data_type: Data type of the chosen food
        nutrients: Nutrients of the chosen food
        total_hits: Number of foods USDA reported for the query
        error_code: INVALID_QUERY, NOT_FOUND, TIMEOUT, CONNECTION_ERROR,
            RATE_LIMITED, AUTH_FAILED or API_ERROR on a miss
        error_message: Diagnostic text on a miss
    """
    query: str
    food_id: Optional[int] = None
    food_name: Optional[str] = None
    data_type: Optional[FoodDataType] = None
    nutrients: Tuple[Nutrient, ...] = ()
    total_hits: int = 0
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @property
    def found(self) -> bool:
        return self.error_code is None

    @classmethod
    def miss(cls, query: str, code: str, message: str) -> "DishNutrition":
        return cls(query=query, error_code=code, error_message=message)


# Status -> (error code, message) for non-200 answers
_STATUS_ERRORS = {
    429: ("RATE_LIMITED", "USDA rate limit reached"),
    401: ("AUTH_FAILED", "USDA API rejected the API key"),
    403: ("AUTH_FAILED", "USDA API rejected the API key"),
}


class USDANutritionClient:
    """Looks up macro nutrients for a dish name.

    Usage:
        client = USDANutritionClient(api_key=settings.usda_api_key)
        result = client.search_dish("Spicy Arrabiata Penne")
        if result.found:
            print(result.food_name, result.nutrients)
    """

    SEARCH_URL = "https://api.nal.usda.gov/fdc/v1/foods/search"
    PAGE_SIZE = 10

    def __init__(
        self,
        api_key: str,
        session: Optional[requests.Session] = None,
        timeout: float = 10.0
    ):
        """Initialize the client.

        Args:
            api_key: USDA FoodData Central API key
            session: HTTP session, shared with the owning adapter
            timeout: Per-request timeout in seconds

        Raises:
            ValueError: If the API key is blank
        """
        api_key = (api_key or "").strip()
        if not api_key:
            raise ValueError("USDA API key is required (https://fdc.nal.usda.gov/api-key-signup.html)")
        self.api_key = api_key
        self.timeout = timeout
        self._session = session or requests.Session()

    def search_dish(self, name: str) -> DishNutrition:
        """Search a dish name and return the nutrients of the best match."""
        query = " ".join((name or "").lower().split())
        if not query:
            return DishNutrition.miss(query, "INVALID_QUERY", "Dish name is empty")

        try:
            payload = self._search(query)
        except USDASearchError as e:
            logger.warning("USDA search for %r failed: %s", query, e)
            return DishNutrition.miss(query, e.code, e.message)

        raw_foods = payload.get("foods") if isinstance(payload, dict) else None
        foods = [f for f in raw_foods if isinstance(f, dict)] if isinstance(raw_foods, list) else []
        if not foods:
            return DishNutrition.miss(query, "NOT_FOUND", f"No USDA food matches '{query}'")

        food = self._pick_food(foods, query)
        logger.debug("USDA match for %r: %s (%s)", query, food.get("description"), food.get("fdcId"))
        return DishNutrition(
            query=query,
            food_id=food.get("fdcId"),
            food_name=food.get("description"),
            data_type=FoodDataType.parse(food.get("dataType")),
            nutrients=self._nutrients(food.get("foodNutrients")),
            total_hits=payload.get("totalHits") or len(foods),
        )

    def _search(self, query: str) -> Any:
        """Call foods/search and return the decoded body.

        Raises:
            USDASearchError: On transport failure, non-200 status or bad JSON
        """
        params = {"api_key": self.api_key, "query": query, "pageSize": self.PAGE_SIZE}
        try:
            response = self._session.request("GET", self.SEARCH_URL, params=params, timeout=self.timeout)
        except requests.exceptions.Timeout:
            raise USDASearchError("TIMEOUT", f"No answer within {self.timeout}s")
        except requests.exceptions.ConnectionError as e:
            raise USDASearchError("CONNECTION_ERROR", f"Could not reach USDA: {e}")
        except requests.exceptions.RequestException as e:
            raise USDASearchError("API_ERROR", f"Request failed: {e}")

        status = response.status_code
        if status != 200:
            code, message = _STATUS_ERRORS.get(status, ("API_ERROR", f"USDA answered {status}"))
            raise USDASearchError(code, message)
        try:
            return response.json()
        except ValueError:
            raise USDASearchError("API_ERROR", "USDA answered with a non-JSON body")

    @staticmethod
    def _nutrients(raw: Any) -> Tuple[Nutrient, ...]:
        """Map search-result nutrients to Nutrient entries ("G" -> "g")."""
        entries = [entry for entry in raw if isinstance(entry, dict)] if isinstance(raw, list) else []
        return tuple(
            Nutrient(
                name=entry.get("nutrientName"),
                amount=entry.get("value"),
                unit=entry["unitName"].lower() if isinstance(entry.get("unitName"), str) else None,
            )
            for entry in entries
        )

    @staticmethod
    def _pick_food(foods: List[Dict[str, Any]], query: str) -> Dict[str, Any]:
        """Choose one food deterministically.

        Ordered by data type rank, then whether the description and the
        query contain one another, then description length, then position.
        """
        def sort_key(indexed: Tuple[int, Dict[str, Any]]) -> Tuple[int, int, int, int]:
            position, food = indexed
            description = str(food.get("description") or "").lower()
            related = query in description or description in query
            return (
                FoodDataType.rank(FoodDataType.parse(food.get("dataType"))),
                0 if related else 1,
                len(description),
                position,
            )

        return min(enumerate(foods), key=sort_key)[1]
