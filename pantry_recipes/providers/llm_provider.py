"""Chat-completion (LLM) recipe generation adapter.

The model is asked to invent four distinct recipes that use the supplied
ingredients and to answer with ONE JSON object in the canonical response
shape, including its own ``available`` flag per ingredient. The adapter
therefore declares ``provides_own_availability`` and the availability
matcher is skipped for its records.

Model output is untrusted text:
1. A fenced code block is extracted if present
2. The remainder is parsed as JSON
3. ``recipes`` must be a non-empty list of objects
4. Every field is coerced (wrong types fall back to safe defaults)

Any failure in steps 1-3 raises GenerationError; the raw model text is
logged but never returned to the caller.

Works against any OpenAI-compatible ``/chat/completions`` endpoint.
"""

import json
import logging
import re
from typing import Any, Dict, List, Optional, Tuple

from pantry_recipes.data_layer.exceptions import GenerationError
from pantry_recipes.data_layer.models import NOT_AVAILABLE, NutritionSummary, ProviderRecipe
from pantry_recipes.providers.recipe_provider import MAX_RECIPES, RecipeProvider


logger = logging.getLogger(__name__)

TEMPERATURE = 0.8
RAW_TEXT_LOG_LIMIT = 500

_FENCED_BLOCK = re.compile(r"```(?:json)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)

SYSTEM_PROMPT = """You are an experienced chef who knows authentic dishes from many cuisines.
You answer ONLY with a single JSON object and no other text.
All human-readable text in the JSON must be written in Turkish."""

USER_PROMPT_TEMPLATE = """The user has these ingredients: {ingredients}

Invent exactly {count} authentic recipes that use ALL of these ingredients.
Every recipe must be a different dish, preferably from different cuisines.

Return one JSON object with this exact shape:
{{
  "recipes": [
    {{
      "cuisine": "<cuisine name followed by 'Mutfağı', e.g. 'İtalyan Mutfağı'>",
      "title": "<dish name>",
      "ingredients": [
        {{"name": "<quantity, unit and ingredient>", "available": <true if the user already has it, else false>}}
      ],
      "preparation": ["<step 1>", "<step 2>", "..."],
      "nutrition": {{"protein": "<e.g. 25g>", "carbohydrate": "<e.g. 40g>", "fat": "<e.g. 12g>"}},
      "pairing": "<one sentence suggesting a side dish or drink>"
    }}
  ]
}}"""


def extract_json_payload(text: str) -> str:
    """Return the content of the first fenced code block, or the text itself."""
    match = _FENCED_BLOCK.search(text)
    candidate = match.group(1) if match else text
    return candidate.strip()


def _string(value: Any) -> Optional[str]:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


class LLMProvider(RecipeProvider):
    """Provider that asks a chat-completion model to generate recipes."""

    name = "llm"
    provides_own_availability = True

    def fetch_recipes(self, user_ingredients: List[str]) -> List[ProviderRecipe]:
        api_key = self._require(self.settings.openai_api_key, "OPENAI_API_KEY")
        logger.info(
            "Requesting %d recipes from %s for: %s",
            MAX_RECIPES, self.settings.openai_model, ", ".join(user_ingredients)
        )

        data = self._request_json(
            "POST",
            f"{self.settings.openai_base_url}/chat/completions",
            "chat/completions",
            timeout=self.settings.llm_timeout,
            headers={"Authorization": f"Bearer {api_key}"},
            json={
                "model": self.settings.openai_model,
                "temperature": TEMPERATURE,
                "messages": [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {"role": "user", "content": self.build_prompt(user_ingredients)},
                ],
            },
        )
        content = self._message_content(data)
        return self.parse_recipes(content)

    @staticmethod
    def build_prompt(user_ingredients: List[str]) -> str:
        return USER_PROMPT_TEMPLATE.format(
            ingredients=", ".join(user_ingredients),
            count=MAX_RECIPES,
        )

    def _message_content(self, data: Any) -> str:
        try:
            content = data["choices"][0]["message"]["content"]
        except (KeyError, IndexError, TypeError):
            raise GenerationError(self.name, "Response has no message content")
        if not isinstance(content, str) or not content.strip():
            raise GenerationError(self.name, "Empty message content")
        return content

    def parse_recipes(self, content: str) -> List[ProviderRecipe]:
        """Parse model text into provider records.

        Raises:
            GenerationError: If the text is not JSON or lacks a usable
                ``recipes`` list
        """
        payload = extract_json_payload(content)
        try:
            parsed = json.loads(payload)
        except ValueError as e:
            logger.error("LLM returned unparseable JSON: %s", content[:RAW_TEXT_LOG_LIMIT])
            raise GenerationError(self.name, f"Invalid JSON: {e}") from e

        raw_recipes = parsed.get("recipes") if isinstance(parsed, dict) else None
        if not isinstance(raw_recipes, list):
            logger.error("LLM response has no recipes array: %s", content[:RAW_TEXT_LOG_LIMIT])
            raise GenerationError(self.name, "Missing 'recipes' array")

        records = [self._to_record(item) for item in raw_recipes if isinstance(item, dict)]
        if not records:
            logger.error("LLM response has no recipe objects: %s", content[:RAW_TEXT_LOG_LIMIT])
            raise GenerationError(self.name, "Empty 'recipes' array")
        return records[:MAX_RECIPES]

    @staticmethod
    def _ingredients(raw: Any) -> Tuple[Tuple[str, ...], Tuple[bool, ...]]:
        names = []
        flags = []
        for item in raw if isinstance(raw, list) else []:
            if isinstance(item, str):
                name, available = _string(item), False
            elif isinstance(item, dict):
                name = _string(item.get("name"))
                available = item.get("available") if isinstance(item.get("available"), bool) else False
            else:
                continue
            if name is None:
                continue
            names.append(name)
            flags.append(available)
        return tuple(names), tuple(flags)

    @staticmethod
    def _nutrition(raw: Any) -> NutritionSummary:
        raw = raw if isinstance(raw, dict) else {}
        return NutritionSummary(
            protein=_string(raw.get("protein")) or NOT_AVAILABLE,
            carbohydrate=_string(raw.get("carbohydrate")) or NOT_AVAILABLE,
            fat=_string(raw.get("fat")) or NOT_AVAILABLE,
        )

    @classmethod
    def _to_record(cls, item: Dict[str, Any]) -> ProviderRecipe:
        names, flags = cls._ingredients(item.get("ingredients"))
        preparation = item.get("preparation")
        return ProviderRecipe(
            title=_string(item.get("title")),
            cuisine_label=_string(item.get("cuisine")),
            ingredient_lines=names,
            ingredient_flags=flags,
            steps=tuple(
                step for step in (preparation if isinstance(preparation, list) else [])
                if isinstance(step, str)
            ),
            nutrition=cls._nutrition(item.get("nutrition")),
            pairing=_string(item.get("pairing")),
        )
