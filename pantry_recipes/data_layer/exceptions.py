"""Structured error types for the recipe suggestion pipeline.

Every failure an adapter or the planner can report is a typed subclass of
:class:`RecipeServiceError`. Each carries:

- ``code``: an :class:`ErrorCode` identifying the failure kind
- ``message``: the user-facing (Turkish) message sent in the error envelope
- ``context``: debugging details (provider, endpoint, upstream status, ...)

Mapping a code to an HTTP status is left to the API layer, which is the
single place that knows about HTTP.

PIPELINE ERROR FLOW:
    ┌─────────────────────────────────────────────────────┐
    │ User Input        → InvalidInputError               │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Configuration     → MissingCredentialError          │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Provider call     → AuthFailedError                 │
    │                   → RateLimitedError                │
    │                   → UpstreamTimeoutError            │
    │                   → UpstreamError                   │
    └─────────────────────────────────────────────────────┘
                              │
                              ▼
    ┌─────────────────────────────────────────────────────┐
    │ Provider payload  → NoMatchError                    │
    │                   → GenerationError (LLM only)      │
    └─────────────────────────────────────────────────────┘
"""

from enum import Enum
from typing import Any, Dict, Optional


INVALID_INPUT_MESSAGE = "Lütfen malzeme listesi girin"
RATE_LIMITED_MESSAGE = "Çok fazla istek gönderildi. Lütfen biraz bekleyin."
AUTH_FAILED_MESSAGE = "Tarif servisi yetkilendirme hatası. API anahtarını kontrol edin."
NO_MATCH_MESSAGE = "Bu malzemelerle tarif bulunamadı. Farklı malzemeler deneyin."
GENERATION_MESSAGE = (
    "Yapay zeka geçerli bir tarif yanıtı üretemedi. Lütfen tekrar deneyin."
)
TIMEOUT_MESSAGE = "Tarif servisi zamanında yanıt vermedi. Lütfen tekrar deneyin."
UNEXPECTED_MESSAGE = "Tarif oluşturulurken bir hata oluştu"
METHOD_NOT_ALLOWED_MESSAGE = "Sadece POST isteklerine izin veriliyor"


class ErrorCode(Enum):
    """Failure kinds shared by every provider adapter."""

    INVALID_INPUT = "INVALID_INPUT"
    MISSING_CREDENTIAL = "MISSING_CREDENTIAL"
    AUTH_FAILED = "AUTH_FAILED"
    RATE_LIMITED = "RATE_LIMITED"
    NO_MATCH = "NO_MATCH"
    UPSTREAM_ERROR = "UPSTREAM_ERROR"
    GENERATION_ERROR = "GENERATION_ERROR"
    UPSTREAM_TIMEOUT = "UPSTREAM_TIMEOUT"


class RecipeServiceError(Exception):
    """Base exception for all recipe pipeline errors.

    Attributes:
        code: ErrorCode identifying the error type
        message: User-facing error description
        context: Dictionary of relevant error context
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        context: Optional[Dict[str, Any]] = None
    ):
        self.code = code
        self.message = message
        self.context = context or {}
        super().__init__(f"[{code.value}] {message}")

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"code={self.code!r}, "
            f"message={self.message!r}, "
            f"context={self.context!r})"
        )

    def to_dict(self) -> Dict[str, Any]:
        """Convert error to a dictionary for logging."""
        return {
            "error_code": self.code.value,
            "message": self.message,
            "context": self.context,
        }


class InvalidInputError(RecipeServiceError):
    """Raised when the ingredient list is missing, not text, or blank."""

    def __init__(self, message: str = INVALID_INPUT_MESSAGE):
        super().__init__(code=ErrorCode.INVALID_INPUT, message=message)


class MissingCredentialError(RecipeServiceError):
    """Raised when a required API key/secret is absent from configuration.

    Raised before any upstream call is attempted.
    """

    def __init__(self, env_var: str, provider: str):
        message = (
            "Tarif servisi yapılandırılmamış. "
            f"Lütfen {env_var} ortam değişkenini ayarlayın."
        )
        super().__init__(
            code=ErrorCode.MISSING_CREDENTIAL,
            message=message,
            context={"env_var": env_var, "provider": provider}
        )
        self.env_var = env_var
        self.provider = provider


class AuthFailedError(RecipeServiceError):
    """Raised when the upstream rejects our credentials (401/403)."""

    def __init__(self, provider: str, status_code: int, endpoint: str = ""):
        super().__init__(
            code=ErrorCode.AUTH_FAILED,
            message=AUTH_FAILED_MESSAGE,
            context={
                "provider": provider,
                "status_code": status_code,
                "endpoint": endpoint,
            }
        )
        self.status_code = status_code


class RateLimitedError(RecipeServiceError):
    """Raised when the upstream answers HTTP 429."""

    def __init__(self, provider: str, endpoint: str = ""):
        super().__init__(
            code=ErrorCode.RATE_LIMITED,
            message=RATE_LIMITED_MESSAGE,
            context={"provider": provider, "endpoint": endpoint}
        )


class NoMatchError(RecipeServiceError):
    """Raised when a well-formed upstream answer contains no recipes."""

    def __init__(self, provider: str):
        super().__init__(
            code=ErrorCode.NO_MATCH,
            message=NO_MATCH_MESSAGE,
            context={"provider": provider}
        )


class UpstreamError(RecipeServiceError):
    """Raised for any other non-success upstream response.

    Context includes:
        - provider: Provider key
        - endpoint: Upstream endpoint name
        - status_code: HTTP status (None for transport failures)
        - detail: Short diagnostic text
    """

    def __init__(
        self,
        provider: str,
        endpoint: str,
        detail: str = "",
        status_code: Optional[int] = None
    ):
        super().__init__(
            code=ErrorCode.UPSTREAM_ERROR,
            message=f"Tarif servisi hatası ({endpoint})",
            context={
                "provider": provider,
                "endpoint": endpoint,
                "status_code": status_code,
                "detail": detail,
            }
        )
        self.status_code = status_code


class GenerationError(RecipeServiceError):
    """Raised when LLM output cannot be parsed into the recipe shape."""

    def __init__(self, provider: str, detail: str):
        super().__init__(
            code=ErrorCode.GENERATION_ERROR,
            message=GENERATION_MESSAGE,
            context={"provider": provider, "detail": detail}
        )


class UpstreamTimeoutError(RecipeServiceError):
    """Raised when an upstream call exceeds the configured timeout."""

    def __init__(self, provider: str, endpoint: str, timeout: float):
        super().__init__(
            code=ErrorCode.UPSTREAM_TIMEOUT,
            message=TIMEOUT_MESSAGE,
            context={
                "provider": provider,
                "endpoint": endpoint,
                "timeout_seconds": timeout,
            }
        )
