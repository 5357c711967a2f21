"""Tests for the USDA FoodData Central nutrition client.

Tests use mocked API responses to avoid hitting real endpoints.
"""

from unittest.mock import patch

import pytest
import requests

from pantry_recipes.data_layer.models import Nutrient
from pantry_recipes.ingestion.usda_client import (
    DishNutrition,
    FoodDataType,
    USDANutritionClient,
    USDASearchError,
)
from tests.fakes import FakeResponse, FakeSession, usda_search_payload


class TestDishNutrition:
    """Tests for DishNutrition data model."""

    def test_miss_has_error_info(self):
        """Test that a miss carries the error and no food."""
        result = DishNutrition.miss("xyz", "NOT_FOUND", "No USDA food matches 'xyz'")

        assert result.found is False
        assert result.food_id is None
        assert result.nutrients == ()
        assert result.error_code == "NOT_FOUND"

    def test_found_without_error(self):
        assert DishNutrition(query="pasta", food_id=1).found is True


class TestFoodDataType:
    """Tests for FoodDataType enum."""

    def test_parse(self):
        assert FoodDataType.parse("Survey (FNDDS)") == FoodDataType.SURVEY
        assert FoodDataType.parse("Experimental") is None
        assert FoodDataType.parse(None) is None

    def test_rank_order(self):
        """Prepared-dish data ranks first, branded products last."""
        ranks = [FoodDataType.rank(dt) for dt in (
            FoodDataType.SURVEY, FoodDataType.SR_LEGACY, FoodDataType.FOUNDATION, FoodDataType.BRANDED
        )]
        assert ranks == [0, 1, 2, 3]
        assert FoodDataType.rank(None) == 4


class TestUSDANutritionClient:
    """Tests for dish searches."""

    @pytest.fixture
    def mock_api_key(self):
        """Provide test API key."""
        return "TEST_API_KEY_12345"

    @pytest.fixture
    def client(self, mock_api_key):
        """Create a client with a fake session."""
        return USDANutritionClient(api_key=mock_api_key, session=FakeSession())

    @pytest.mark.parametrize("api_key", ["", "  ", None])
    def test_requires_api_key(self, api_key):
        with pytest.raises(ValueError):
            USDANutritionClient(api_key=api_key)

    # === Successful Search Tests ===

    def test_prefers_survey_over_sr_legacy(self, client):
        """Test that prepared-dish (Survey) data wins over SR Legacy."""
        with patch.object(client, '_search', return_value=usda_search_payload()):
            result = client.search_dish("Pasta with tomato sauce")

        assert result.found is True
        assert result.food_id == 2002
        assert result.data_type == FoodDataType.SURVEY
        assert result.total_hits == 2

    def test_nutrients_have_lowercase_units(self, client):
        with patch.object(client, '_search', return_value=usda_search_payload()):
            result = client.search_dish("pasta")

        assert result.nutrients[:3] == (
            Nutrient("Protein", 4.6, "g"),
            Nutrient("Carbohydrate, by difference", 24.5, "g"),
            Nutrient("Total lipid (fat)", 2.2, "g"),
        )
        assert result.nutrients[3].unit == "kcal"

    def test_prefers_description_related_to_query(self, client):
        """Within one data type the description containing the query wins."""
        mock_response = {
            "foods": [
                {"fdcId": 1, "description": "Soup, beef noodle", "dataType": "Survey (FNDDS)"},
                {"fdcId": 2, "description": "Lentil soup, homemade", "dataType": "Survey (FNDDS)"},
            ],
            "totalHits": 2
        }
        with patch.object(client, '_search', return_value=mock_response):
            result = client.search_dish("Lentil Soup")

        assert result.food_id == 2

    def test_shorter_description_breaks_ties(self, client):
        mock_response = {"foods": [
            {"fdcId": 1, "description": "Pizza, cheese, thin crust", "dataType": "Branded"},
            {"fdcId": 2, "description": "Pizza, cheese", "dataType": "Branded"},
        ]}
        with patch.object(client, '_search', return_value=mock_response):
            result = client.search_dish("margherita")

        assert result.food_id == 2
        assert result.total_hits == 2

    def test_normalizes_query(self, client):
        with patch.object(client, '_search', return_value=usda_search_payload()) as mock_search:
            client.search_dish("  Spicy   Arrabiata PENNE ")

        mock_search.assert_called_once_with("spicy arrabiata penne")

    # === Miss Tests ===

    @pytest.mark.parametrize("name", ["", "   ", None])
    def test_empty_name(self, client, name):
        result = client.search_dish(name)

        assert result.found is False
        assert result.error_code == "INVALID_QUERY"

    def test_no_results(self, client):
        with patch.object(client, '_search', return_value={"foods": [], "totalHits": 0}):
            result = client.search_dish("xyzfoodnotexist")

        assert result.found is False
        assert result.error_code == "NOT_FOUND"
        assert "xyzfoodnotexist" in result.error_message

    def test_never_raises(self, client):
        """Test that search errors become misses."""
        error = USDASearchError("RATE_LIMITED", "USDA rate limit reached")
        with patch.object(client, '_search', side_effect=error):
            result = client.search_dish("chicken")

        assert result.found is False
        assert result.error_code == "RATE_LIMITED"
        assert result.query == "chicken"


class TestUSDANutritionClientTransport:
    """Tests for the HTTP request made by the client."""

    def test_request_params(self):
        session = FakeSession({"foods/search": FakeResponse(200, usda_search_payload())})
        USDANutritionClient(api_key="KEY", session=session, timeout=2.5).search_dish("pasta")

        call = session.calls[0]
        assert call["url"] == "https://api.nal.usda.gov/fdc/v1/foods/search"
        assert call["params"] == {"api_key": "KEY", "query": "pasta", "pageSize": 10}
        assert call["timeout"] == 2.5

    @pytest.mark.parametrize("route,error_code", [
        (FakeResponse(429), "RATE_LIMITED"),
        (FakeResponse(401), "AUTH_FAILED"),
        (FakeResponse(403), "AUTH_FAILED"),
        (FakeResponse(500), "API_ERROR"),
        (FakeResponse(200, text="not json"), "API_ERROR"),
        (requests.exceptions.Timeout(), "TIMEOUT"),
        (requests.exceptions.ConnectionError(), "CONNECTION_ERROR"),
    ])
    def test_transport_failures(self, route, error_code):
        session = FakeSession({"foods/search": route})
        result = USDANutritionClient(api_key="KEY", session=session).search_dish("pasta")

        assert result.found is False
        assert result.error_code == error_code
