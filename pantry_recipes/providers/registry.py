"""Registry selecting the active recipe provider from configuration.

The provider is a configuration-time choice: exactly one adapter serves
every request, there is no runtime fallback between providers.
"""

from typing import Dict, Optional, Type

import requests

from pantry_recipes.config import Settings
from pantry_recipes.providers.edamam_provider import EdamamProvider
from pantry_recipes.providers.llm_provider import LLMProvider
from pantry_recipes.providers.mealdb_provider import MealDBProvider
from pantry_recipes.providers.recipe_provider import RecipeProvider
from pantry_recipes.providers.spoonacular_provider import SpoonacularProvider


PROVIDERS: Dict[str, Type[RecipeProvider]] = {
    SpoonacularProvider.name: SpoonacularProvider,
    MealDBProvider.name: MealDBProvider,
    LLMProvider.name: LLMProvider,
    EdamamProvider.name: EdamamProvider,
}


def create_provider(
    settings: Settings,
    session: Optional[requests.Session] = None
) -> RecipeProvider:
    """Instantiate the adapter named by ``settings.provider``.

    Credentials are not checked here; a missing key surfaces as
    MissingCredentialError on the first request.

    Raises:
        ValueError: If the provider key is unknown
    """
    try:
        provider_cls = PROVIDERS[settings.provider]
    except KeyError:
        known = ", ".join(sorted(PROVIDERS))
        raise ValueError(
            f"Unknown RECIPE_PROVIDER '{settings.provider}'. Expected one of: {known}"
        )
    return provider_cls(settings, session=session)
