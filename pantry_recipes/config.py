"""Runtime configuration for the recipe suggestion service.

All settings come from the process environment (optionally seeded from a
``.env`` file). Credentials are carried on an explicit :class:`Settings`
object handed to each provider adapter, so tests can build one with fake
keys instead of touching ``os.environ``.
"""

import logging
import math
import os
from dataclasses import dataclass
from typing import Mapping, Optional

from dotenv import load_dotenv


DEFAULT_PROVIDER = "spoonacular"
DEFAULT_TIMEOUT_SECONDS = 10.0
DEFAULT_LLM_TIMEOUT_SECONDS = 60.0  # Generating four recipes takes tens of seconds
DEFAULT_OPENAI_MODEL = "gpt-4o-mini"
DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_MEALDB_API_KEY = "1"  # TheMealDB public test key

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _clean(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _seconds(environ: Mapping[str, str], name: str, default: float) -> float:
    """Read a timeout variable.

    Raises:
        ValueError: If the value is not a finite positive number
    """
    raw = _clean(environ.get(name))
    if raw is None:
        return default
    try:
        seconds = float(raw)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {raw!r}")
    if not math.isfinite(seconds) or seconds <= 0:
        raise ValueError(f"{name} must be a finite positive number, got {raw!r}")
    return seconds


@dataclass(frozen=True)
class Settings:
    """Provider selection, credentials and transport limits.

    Attributes:
        provider: Registry key of the active adapter
        spoonacular_api_key: Spoonacular key (required for ``spoonacular``)
        mealdb_api_key: TheMealDB key, defaults to the public test key
        usda_api_key: USDA FoodData Central key (optional, nutrition only)
        edamam_app_id: Edamam application id (required for ``edamam``)
        edamam_app_key: Edamam application key (required for ``edamam``)
        openai_api_key: Chat-completion API key (required for ``llm``)
        openai_model: Chat-completion model name
        openai_base_url: Base URL of an OpenAI-compatible API
        request_timeout: Per-call upstream timeout in seconds
        llm_timeout: Timeout of the chat-completion call in seconds
        log_level: Root logging level name
    """

    provider: str = DEFAULT_PROVIDER
    spoonacular_api_key: Optional[str] = None
    mealdb_api_key: str = DEFAULT_MEALDB_API_KEY
    usda_api_key: Optional[str] = None
    edamam_app_id: Optional[str] = None
    edamam_app_key: Optional[str] = None
    openai_api_key: Optional[str] = None
    openai_model: str = DEFAULT_OPENAI_MODEL
    openai_base_url: str = DEFAULT_OPENAI_BASE_URL
    request_timeout: float = DEFAULT_TIMEOUT_SECONDS
    llm_timeout: float = DEFAULT_LLM_TIMEOUT_SECONDS
    log_level: str = "INFO"

    @classmethod
    def from_env(
        cls,
        environ: Optional[Mapping[str, str]] = None,
        dotenv: bool = True
    ) -> "Settings":
        """Create settings from environment variables.

        Args:
            environ: Mapping to read instead of ``os.environ`` (tests)
            dotenv: Load a ``.env`` file first (ignored when ``environ``
                is given)

        Returns:
            Settings instance

        Raises:
            ValueError: If REQUEST_TIMEOUT_SECONDS or OPENAI_TIMEOUT_SECONDS
                is not a finite positive number
        """
        if environ is None:
            if dotenv:
                load_dotenv()
            environ = os.environ

        return cls(
            provider=(_clean(environ.get("RECIPE_PROVIDER")) or DEFAULT_PROVIDER).lower(),
            spoonacular_api_key=_clean(environ.get("SPOONACULAR_API_KEY")),
            mealdb_api_key=_clean(environ.get("MEALDB_API_KEY")) or DEFAULT_MEALDB_API_KEY,
            usda_api_key=_clean(environ.get("USDA_API_KEY")),
            edamam_app_id=_clean(environ.get("EDAMAM_APP_ID")),
            edamam_app_key=_clean(environ.get("EDAMAM_APP_KEY")),
            openai_api_key=_clean(environ.get("OPENAI_API_KEY")),
            openai_model=_clean(environ.get("OPENAI_MODEL")) or DEFAULT_OPENAI_MODEL,
            openai_base_url=(
                _clean(environ.get("OPENAI_BASE_URL")) or DEFAULT_OPENAI_BASE_URL
            ).rstrip("/"),
            request_timeout=_seconds(environ, "REQUEST_TIMEOUT_SECONDS", DEFAULT_TIMEOUT_SECONDS),
            llm_timeout=_seconds(environ, "OPENAI_TIMEOUT_SECONDS", DEFAULT_LLM_TIMEOUT_SECONDS),
            log_level=(_clean(environ.get("LOG_LEVEL")) or "INFO").upper(),
        )


def configure_logging(level: str = "INFO") -> None:
    """Configure root logging once for the server and CLI entry points."""
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT,
    )
