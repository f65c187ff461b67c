"""FastAPI middleware: request logging and CORS."""

from __future__ import annotations

import logging
import time
import uuid
from typing import TYPE_CHECKING

from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware


if TYPE_CHECKING:
    from collections.abc import Callable

    from fastapi import FastAPI, Request, Response


logger = logging.getLogger(__name__)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Middleware for logging incoming requests and responses."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        start_time = time.time()
        request_id = request.headers.get("x-request-id") or uuid.uuid4().hex[:12]

        client_ip = request.client.host if request.client else "unknown"
        method = request.method
        path = request.url.path

        response = await call_next(request)

        duration_ms = (time.time() - start_time) * 1000
        response.headers["X-Request-ID"] = request_id

        logger.info(
            "%s %s %d %.2fms client=%s",
            method,
            path,
            response.status_code,
            duration_ms,
            client_ip,
            extra={
                "request_id": request_id,
                "status_code": response.status_code,
                "duration_ms": round(duration_ms, 2),
            },
        )
        return response


def setup_middleware(
    app: FastAPI,
    *,
    cors_origins: list[str] | None = None,
    enable_logging: bool = True,
) -> None:
    """Configure all middleware for the FastAPI application."""
    if enable_logging:
        app.add_middleware(RequestLoggingMiddleware)

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins or ["*"],
        allow_methods=["GET", "POST", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Content-Disposition", "X-Processing-Errors", "X-Request-ID"],
    )
