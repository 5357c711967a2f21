"""Abstract base class for recipe provider adapters.

The planner and API layer depend ONLY on this interface. Concrete
adapters call one upstream API and return provider-neutral
:class:`ProviderRecipe` records; normalization happens downstream.

Upstream HTTP handling lives here so every adapter maps status codes to
the same failure kinds:

    429          -> RateLimitedError
    401 / 403    -> AuthFailedError
    other non-2xx -> UpstreamError
    timeout      -> UpstreamTimeoutError
"""

import logging
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Callable, List, Optional, Sequence, TypeVar

import requests

from pantry_recipes.config import Settings
from pantry_recipes.data_layer.exceptions import (
    AuthFailedError,
    MissingCredentialError,
    RateLimitedError,
    RecipeServiceError,
    UpstreamError,
    UpstreamTimeoutError,
)
from pantry_recipes.data_layer.models import ProviderRecipe


logger = logging.getLogger(__name__)

MAX_RECIPES = 4
ERROR_BODY_LIMIT = 500

T = TypeVar("T")
R = TypeVar("R")


class RecipeProvider(ABC):
    """Abstraction for one upstream recipe source.

    Class attributes:
        name: Registry key, also used in logs and error context
        provides_own_availability: True when the upstream already decides
            which ingredients the user has, so the availability matcher
            must not run
    """

    name: str = ""
    provides_own_availability: bool = False

    def __init__(self, settings: Settings, session: Optional[requests.Session] = None):
        """Initialize adapter.

        Args:
            settings: Credentials and timeout configuration
            session: HTTP session (tests pass a fake one)
        """
        self.settings = settings
        self._session = session or requests.Session()

    @abstractmethod
    def fetch_recipes(self, user_ingredients: List[str]) -> List[ProviderRecipe]:
        """Return up to four provider records for the user's ingredients.

        Args:
            user_ingredients: Lower-cased, trimmed, non-empty ingredients

        Returns:
            Provider records in upstream order

        Raises:
            RecipeServiceError: Any failure of the shared taxonomy
        """
        ...

    # ------------------------------------------------------------------
    # Helpers for subclasses
    # ------------------------------------------------------------------

    def _require(self, value: Optional[str], env_var: str) -> str:
        """Return a configured credential or fail before any HTTP call."""
        if not value:
            logger.error("%s is not configured", env_var)
            raise MissingCredentialError(env_var=env_var, provider=self.name)
        return value

    def _request_json(
        self,
        method: str,
        url: str,
        endpoint: str,
        timeout: Optional[float] = None,
        **kwargs: Any
    ) -> Any:
        """Make an upstream request and return the parsed JSON body.

        Args:
            method: HTTP method
            url: Full request URL
            endpoint: Short endpoint name for logs and error messages
            timeout: Seconds to wait; defaults to ``settings.request_timeout``
            **kwargs: Passed to ``Session.request`` (params, json, headers)

        Returns:
            Parsed JSON response

        Raises:
            RateLimitedError, AuthFailedError, UpstreamTimeoutError,
            UpstreamError
        """
        if timeout is None:
            timeout = self.settings.request_timeout
        try:
            response = self._session.request(method, url, timeout=timeout, **kwargs)
        except requests.exceptions.Timeout as e:
            logger.error("%s API timeout (%s) after %ss", self.name, endpoint, timeout)
            raise UpstreamTimeoutError(self.name, endpoint, timeout) from e
        except requests.exceptions.RequestException as e:
            logger.error("%s API request failed (%s): %s", self.name, endpoint, e)
            raise UpstreamError(self.name, endpoint, detail=f"Request failed: {e}") from e

        status = response.status_code
        if not 200 <= status < 300:
            body = (response.text or "")[:ERROR_BODY_LIMIT]
            logger.error("%s API error (%s): %s %s", self.name, endpoint, status, body)
            if status == 429:
                raise RateLimitedError(self.name, endpoint)
            if status in (401, 403):
                raise AuthFailedError(self.name, status, endpoint)
            raise UpstreamError(
                self.name,
                endpoint,
                detail=f"Upstream returned status {status}",
                status_code=status,
            )

        try:
            return response.json()
        except ValueError as e:
            logger.error("%s API returned invalid JSON (%s)", self.name, endpoint)
            raise UpstreamError(self.name, endpoint, detail="Invalid JSON body") from e

    def _get_json(self, url: str, endpoint: str, params: Optional[dict] = None) -> Any:
        return self._request_json("GET", url, endpoint, params=params)

    def _fan_out(self, fn: Callable[[T], R], items: Sequence[T]) -> List[R]:
        """Run ``fn`` over ``items`` concurrently, keeping input order.

        Failures are isolated per item: a failing item is logged and
        dropped. If every item fails, the failure of the first item is
        raised so the caller still sees a structured error.
        """
        if not items:
            return []

        results: List[Any] = [None] * len(items)
        errors: List[Optional[RecipeServiceError]] = [None] * len(items)
        with ThreadPoolExecutor(max_workers=len(items)) as pool:
            futures = [pool.submit(fn, item) for item in items]
            for index, future in enumerate(futures):
                try:
                    results[index] = future.result()
                except RecipeServiceError as exc:
                    logger.warning(
                        "%s: dropping item %r after failure: %s", self.name, items[index], exc
                    )
                    errors[index] = exc

        kept = [result for result, error in zip(results, errors) if error is None]
        if not kept:
            raise next(error for error in errors if error is not None)
        return kept
