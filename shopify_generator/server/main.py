"""ASGI app exposing the Shopify CSV generator.

This module is a thin shell that:
1. Manages FastAPI app lifecycle
2. Includes routers for all endpoints
3. Sets up middleware and error handlers

Endpoint logic lives in shopify_generator/server/routers/, pipeline logic in
shopify_generator/services/.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from shopify_generator import __version__
from shopify_generator.conf.config import settings
from shopify_generator.core.logging import setup_logging
from shopify_generator.server.dependencies import get_vision_classifier, reset_dependencies
from shopify_generator.server.exceptions import APIError
from shopify_generator.server.middleware import setup_middleware
from shopify_generator.server.routers import generate_router, health_router


logger = logging.getLogger(__name__)

INTERNAL_ERROR_CODE = "INTERNAL_SERVER_ERROR"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan manager for startup/shutdown events."""
    setup_logging(
        level=settings.LOG_LEVEL,
        json_format=settings.LOG_JSON,
        service_name="shopify-generator",
    )

    logger.info("Starting Shopify Product Generator v%s", __version__)
    if not settings.has_api_key:
        logger.warning(
            "OPENROUTER_API_KEY not set. Add it to .env to use the generator."
        )
    if settings.storage_enabled:
        logger.info("Image storage enabled: bucket=%s", settings.SUPABASE_BUCKET)
    else:
        logger.info("Image storage disabled; CSV rows will have an empty Image Src")

    yield

    logger.info("Shutting down Shopify Product Generator")
    if get_vision_classifier.cache_info().currsize:
        await get_vision_classifier().aclose()
    reset_dependencies()


# =============================================================================
# FastAPI App
# =============================================================================

app = FastAPI(
    title="Shopify Product Generator",
    description="Turns product photos into a Shopify product import CSV",
    version=__version__,
    lifespan=lifespan,
)


@app.exception_handler(APIError)
async def api_error_handler(request: Request, exc: APIError) -> JSONResponse:
    """Handle custom API exceptions."""
    return JSONResponse(
        status_code=exc.status_code, content=exc.to_content(), headers=exc.headers
    )


@app.exception_handler(RequestValidationError)
async def request_validation_handler(
    request: Request, exc: RequestValidationError
) -> JSONResponse:
    """Report malformed requests as 400 with the same body shape as other errors."""
    details = [
        f"{'.'.join(str(part) for part in err.get('loc', ()))}: {err.get('msg', '')}"
        for err in exc.errors()
    ]
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"error": "Invalid request.", "details": details},
    )


@app.exception_handler(Exception)
async def unhandled_error_handler(request: Request, exc: Exception) -> JSONResponse:
    """Last-resort handler: surface the message with a stable error code."""
    logger.exception("[%s] Unhandled error: %s", request.url.path, exc)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={
            "error": str(exc) or "Internal server error",
            "code": INTERNAL_ERROR_CODE,
        },
    )


setup_middleware(app, cors_origins=settings.cors_origins, enable_logging=True)

# =============================================================================
# Include Routers
# =============================================================================

app.include_router(health_router)
app.include_router(generate_router)
