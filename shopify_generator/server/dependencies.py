"""FastAPI dependency injection module.

The vision and storage clients are built once per process from settings and
handed to the orchestrator explicitly, so tests can swap either of them via
``app.dependency_overrides``.
"""

from __future__ import annotations

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from shopify_generator.conf.config import Settings, get_settings
from shopify_generator.services.batch import BatchOrchestrator
from shopify_generator.services.storage_client import ImageUploader
from shopify_generator.services.vision_client import VisionClassifier


SettingsDep = Annotated[Settings, Depends(get_settings)]


@lru_cache(maxsize=1)
def get_vision_classifier() -> VisionClassifier:
    """Get or create the vision classification client."""
    return VisionClassifier.from_settings(get_settings())


@lru_cache(maxsize=1)
def get_image_uploader() -> ImageUploader:
    """Get or create the image uploader (disabled when storage is unconfigured)."""
    return ImageUploader.from_settings(get_settings())


def get_orchestrator(
    settings: SettingsDep,
    classifier: Annotated[VisionClassifier, Depends(get_vision_classifier)],
    uploader: Annotated[ImageUploader, Depends(get_image_uploader)],
) -> BatchOrchestrator:
    """Create a request-scoped orchestrator around the shared clients."""
    return BatchOrchestrator(
        classifier,
        uploader,
        batch_size=settings.BATCH_CONCURRENCY,
        max_files=settings.MAX_FILES,
        max_file_size=settings.MAX_FILE_SIZE_BYTES,
    )


OrchestratorDep = Annotated[BatchOrchestrator, Depends(get_orchestrator)]


def reset_dependencies() -> None:
    """Reset all cached dependencies (useful for testing)."""
    get_vision_classifier.cache_clear()
    get_image_uploader.cache_clear()
