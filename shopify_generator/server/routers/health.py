"""Health check router."""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter

from shopify_generator.server.dependencies import SettingsDep

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health(settings: SettingsDep) -> dict[str, Any]:
    """Liveness check reporting whether the vision API key is configured."""
    return {"ok": True, "hasApiKey": settings.has_api_key}
