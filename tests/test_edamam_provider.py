"""Tests for the Edamam adapter."""

import dataclasses

import pytest

from pantry_recipes.config import Settings
from pantry_recipes.data_layer.exceptions import (
    AuthFailedError,
    MissingCredentialError,
    NoMatchError,
    RateLimitedError,
)
from pantry_recipes.ingestion.recipe_normalizer import PLACEHOLDER_STEPS, normalize
from pantry_recipes.providers.edamam_provider import EdamamProvider
from tests.fakes import FakeResponse, FakeSession, edamam_hit


def _session(hits):
    return FakeSession({"recipes/v2": FakeResponse(200, {"from": 1, "to": len(hits), "hits": hits})})


class TestEdamamProvider:
    """Tests for EdamamProvider."""

    def test_query_params(self, settings):
        session = _session([edamam_hit()])
        EdamamProvider(settings, session=session).fetch_recipes(["chicken", "garlic"])

        call = session.calls[0]
        assert call["url"] == "https://api.edamam.com/api/recipes/v2"
        assert call["params"] == {
            "type": "public",
            "q": "chicken,garlic",
            "app_id": "TEST_EDAMAM_ID",
            "app_key": "TEST_EDAMAM_KEY",
            "to": 20,
        }
        assert call["timeout"] == 5.0

    def test_keeps_first_four_hits(self, settings):
        hits = [edamam_hit(f"Recipe {i}") for i in range(6)]
        records = EdamamProvider(settings, session=_session(hits)).fetch_recipes(["chicken"])
        assert [r.title for r in records] == ["Recipe 0", "Recipe 1", "Recipe 2", "Recipe 3"]

    def test_record_fields(self, settings):
        record = EdamamProvider(settings, session=_session([edamam_hit()])).fetch_recipes(["chicken"])[0]

        assert record.title == "Chicken Vesuvio"
        assert record.cuisine_tag == "italian"
        assert record.meal_type_tag == "lunch/dinner"
        assert record.dish_type_tag == "main course"
        assert record.ingredient_lines == (
            "1/2 cup olive oil",
            "5 cloves garlic, peeled",
            "1 whole chicken",
        )
        assert record.steps == ()
        assert record.source_url == "https://example.com/chicken-vesuvio"
        assert record.image == "https://edamam.example/vesuvio.jpg"

    def test_normalized_recipe(self, settings):
        record = EdamamProvider(settings, session=_session([edamam_hit()])).fetch_recipes(["chicken"])[0]
        recipe = normalize(record, ["chicken", "garlic"])

        assert recipe.cuisine == "Italian Mutfağı"
        assert recipe.preparation == PLACEHOLDER_STEPS
        assert recipe.nutrition.to_dict() == {"protein": "242g", "carbohydrate": "103g", "fat": "275g"}
        assert [i.available for i in recipe.ingredients] == [False, True, True]

    def test_meal_type_fallback_for_cuisine(self, settings):
        hit = edamam_hit(cuisineType=[])
        record = EdamamProvider(settings, session=_session([hit])).fetch_recipes(["chicken"])[0]
        assert normalize(record, []).cuisine == "Lunch/dinner"

    def test_missing_nutrients(self, settings):
        hit = edamam_hit(totalNutrients={"PROCNT": {"quantity": 12.0, "unit": "g"}})
        record = EdamamProvider(settings, session=_session([hit])).fetch_recipes(["chicken"])[0]
        assert normalize(record, []).nutrition.to_dict() == {
            "protein": "12g", "carbohydrate": "N/A", "fat": "N/A",
        }

    @pytest.mark.parametrize("missing,env_var", [
        ({"edamam_app_id": None}, "EDAMAM_APP_ID"),
        ({"edamam_app_key": None}, "EDAMAM_APP_KEY"),
    ])
    def test_missing_credentials_make_no_call(self, missing, env_var):
        settings = Settings(edamam_app_id="ID", edamam_app_key="KEY")
        settings = dataclasses.replace(settings, **missing)
        session = _session([edamam_hit()])

        with pytest.raises(MissingCredentialError) as exc_info:
            EdamamProvider(settings, session=session).fetch_recipes(["chicken"])

        assert exc_info.value.env_var == env_var
        assert session.calls == []

    @pytest.mark.parametrize("payload", [{"hits": []}, {}, {"hits": [{"_links": {}}]}])
    def test_no_hits(self, settings, payload):
        session = FakeSession({"recipes/v2": FakeResponse(200, payload)})
        with pytest.raises(NoMatchError):
            EdamamProvider(settings, session=session).fetch_recipes(["taş"])

    @pytest.mark.parametrize("status,error_cls", [
        (401, AuthFailedError),
        (403, AuthFailedError),
        (429, RateLimitedError),
    ])
    def test_status_mapping(self, settings, status, error_cls):
        session = FakeSession({"recipes/v2": FakeResponse(status)})
        with pytest.raises(error_cls):
            EdamamProvider(settings, session=session).fetch_recipes(["chicken"])
