"""FastAPI server for the recipe suggestion service.

Routes:
    OPTIONS *                  -> 204, permissive CORS headers, no body
    POST /generate-recipes     -> {"recipes": [...]} or {"error": "..."}
    GET  /health               -> {"status": "ok", "provider": "..."}

Every other method on /generate-recipes answers 405. This module is the
single place where failure kinds are mapped to HTTP status codes.
"""

import logging
from typing import Any, Dict, Optional

import uvicorn
from fastapi import APIRouter, Depends, FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel, StrictStr
from starlette.exceptions import HTTPException as StarletteHTTPException

from pantry_recipes.config import Settings, configure_logging
from pantry_recipes.data_layer.exceptions import (
    INVALID_INPUT_MESSAGE,
    METHOD_NOT_ALLOWED_MESSAGE,
    UNEXPECTED_MESSAGE,
    ErrorCode,
    RecipeServiceError,
)
from pantry_recipes.output.formatters import format_error, format_recipes_json
from pantry_recipes.planning.recipe_planner import RecipePlanner
from pantry_recipes.providers.recipe_provider import RecipeProvider
from pantry_recipes.providers.registry import create_provider


logger = logging.getLogger(__name__)

STATUS_BY_CODE: Dict[ErrorCode, int] = {
    ErrorCode.INVALID_INPUT: 400,
    ErrorCode.MISSING_CREDENTIAL: 500,
    ErrorCode.AUTH_FAILED: 401,
    ErrorCode.RATE_LIMITED: 429,
    ErrorCode.NO_MATCH: 404,
    ErrorCode.UPSTREAM_ERROR: 500,
    ErrorCode.GENERATION_ERROR: 500,
    ErrorCode.UPSTREAM_TIMEOUT: 504,
}

CORS_HEADERS = {"Access-Control-Allow-Origin": "*"}
PREFLIGHT_HEADERS = {
    **CORS_HEADERS,
    "Access-Control-Allow-Methods": "POST, OPTIONS",
    "Access-Control-Allow-Headers": "authorization, x-client-info, apikey, content-type",
}

router = APIRouter()


class GenerateRecipesRequest(BaseModel):
    ingredients: StrictStr


def error_response(
    status_code: int,
    message: str,
    headers: Optional[Dict[str, str]] = None
) -> JSONResponse:
    """Build an error envelope response carrying CORS headers."""
    return JSONResponse(
        status_code=status_code,
        content=format_error(message),
        headers={**(headers or {}), **CORS_HEADERS},
    )


def get_recipe_planner(request: Request) -> RecipePlanner:
    return RecipePlanner(request.app.state.provider)


@router.options("/{path:path}")
def preflight(path: str) -> Response:
    return Response(status_code=204, headers=PREFLIGHT_HEADERS)


@router.post("/generate-recipes")
def generate_recipes(
    payload: GenerateRecipesRequest,
    planner: RecipePlanner = Depends(get_recipe_planner)
) -> Response:
    try:
        recipes = planner.suggest(payload.ingredients)
    except RecipeServiceError as exc:
        status_code = STATUS_BY_CODE.get(exc.code, 500)
        logger.warning("generate-recipes failed with %s: %r", status_code, exc)
        return error_response(status_code, exc.message)
    except Exception:
        logger.exception("Error in generate-recipes")
        return error_response(500, UNEXPECTED_MESSAGE)

    return JSONResponse(content=format_recipes_json(recipes), headers=CORS_HEADERS)


@router.get("/health")
def health(request: Request) -> Dict[str, Any]:
    return {"status": "ok", "provider": request.app.state.provider.name}


async def _http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    if exc.status_code == 405:
        message = METHOD_NOT_ALLOWED_MESSAGE
    else:
        message = str(exc.detail)
    return error_response(exc.status_code, message, headers=getattr(exc, "headers", None))


async def _validation_exception_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    logger.info("Rejected request body: %s", exc.errors())
    return error_response(400, INVALID_INPUT_MESSAGE)


def create_app(
    settings: Optional[Settings] = None,
    provider: Optional[RecipeProvider] = None
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        settings: Configuration (read from the environment if omitted)
        provider: Adapter to serve requests with (built from ``settings``
            if omitted)

    Returns:
        Configured FastAPI app

    Raises:
        ValueError: If ``settings.provider`` names no known adapter
    """
    settings = settings or Settings.from_env()
    app = FastAPI(title="Pantry Recipes API")
    app.state.settings = settings
    app.state.provider = provider or create_provider(settings)
    app.add_exception_handler(StarletteHTTPException, _http_exception_handler)
    app.add_exception_handler(RequestValidationError, _validation_exception_handler)
    app.include_router(router)
    return app


app = create_app()


def main() -> None:
    configure_logging(app.state.settings.log_level)
    uvicorn.run(app, host="0.0.0.0", port=8000)


if __name__ == "__main__":
    main()
