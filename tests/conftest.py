"""Shared pytest fixtures."""

import pytest

from pantry_recipes.config import Settings


@pytest.fixture
def settings():
    """Settings with fake credentials for every provider (USDA unset)."""
    return Settings(
        provider="spoonacular",
        spoonacular_api_key="TEST_SPOONACULAR_KEY",
        edamam_app_id="TEST_EDAMAM_ID",
        edamam_app_key="TEST_EDAMAM_KEY",
        openai_api_key="TEST_OPENAI_KEY",
        openai_model="test-model",
        openai_base_url="https://llm.example/v1",
        request_timeout=5.0,
    )
