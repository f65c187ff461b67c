"""Batch orchestrator for the image-to-CSV pipeline.

Validates a request's images, runs classification and upload per image in
fixed-size concurrent batches, and collects products and per-image errors.
"""

from __future__ import annotations

import asyncio
import logging
import re
import time
from collections.abc import Sequence
from typing import Protocol

from shopify_generator.core import csv_encoder
from shopify_generator.core.errors import GeneratorError, ValidationError
from shopify_generator.core.logging import log_event
from shopify_generator.core.models import (
    BatchResult,
    ProcessingError,
    ProductRecord,
    UploadedImage,
)


logger = logging.getLogger(__name__)

ALLOWED_MIME_RE = re.compile(r"^image/(jpeg|jpg|png|gif|webp)$", re.IGNORECASE)

DEFAULT_BATCH_SIZE = 4
DEFAULT_MAX_FILES = 50
DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024


class Classifier(Protocol):
    async def classify(self, image_bytes: bytes, mime_type: str, filename: str) -> ProductRecord:
        ...


class Uploader(Protocol):
    async def upload(self, image_bytes: bytes, mime_type: str, filename: str, index: int) -> str:
        ...


def validate_images(
    images: Sequence[UploadedImage],
    *,
    max_files: int = DEFAULT_MAX_FILES,
    max_file_size: int = DEFAULT_MAX_FILE_SIZE,
) -> None:
    """Reject a request whose images break the count, type or size limits.

    Raises:
        ValidationError: listing every offending file in ``details``.
    """
    if not images:
        raise ValidationError("No images uploaded. Please upload at least one image.")
    if len(images) > max_files:
        raise ValidationError(
            f"Too many images. Upload at most {max_files} images per request.",
            details=[f"received {len(images)} images"],
        )

    problems: list[str] = []
    for image in images:
        if not ALLOWED_MIME_RE.match(image.mime_type or ""):
            problems.append(f"{image.filename}: unsupported type {image.mime_type or 'unknown'}")
        elif image.size == 0:
            problems.append(f"{image.filename}: file is empty")
        elif image.size > max_file_size:
            problems.append(f"{image.filename}: exceeds {max_file_size // (1024 * 1024)}MB limit")

    if problems:
        raise ValidationError(
            "Only images (JPEG, PNG, GIF, WebP) up to "
            f"{max_file_size // (1024 * 1024)}MB are allowed.",
            details=problems,
        )


def chunked(items: Sequence[UploadedImage], size: int) -> list[Sequence[UploadedImage]]:
    return [items[start : start + size] for start in range(0, len(items), size)]


class BatchOrchestrator:
    """Turns uploaded images into product records.

    Within a batch all images run concurrently; batches run one after another,
    which bounds the number of in-flight requests to the vision API.
    """

    def __init__(
        self,
        classifier: Classifier,
        uploader: Uploader,
        *,
        batch_size: int = DEFAULT_BATCH_SIZE,
        max_files: int = DEFAULT_MAX_FILES,
        max_file_size: int = DEFAULT_MAX_FILE_SIZE,
    ) -> None:
        if batch_size < 1:
            raise ValueError("batch_size must be >= 1")
        self._classifier = classifier
        self._uploader = uploader
        self.batch_size = batch_size
        self.max_files = max_files
        self.max_file_size = max_file_size

    def validate(self, images: Sequence[UploadedImage]) -> None:
        validate_images(images, max_files=self.max_files, max_file_size=self.max_file_size)

    async def process(self, images: Sequence[UploadedImage]) -> BatchResult:
        """Classify and upload every image; never raises for per-image failures."""
        started = time.monotonic()
        log_event(logger, event="batch_started", images=len(images), batch_size=self.batch_size)

        result = BatchResult()
        for batch in chunked(images, self.batch_size):
            outcomes = await asyncio.gather(*(self._process_one(image) for image in batch))
            for product, errors in outcomes:
                if product is not None:
                    result.products.append(product)
                result.errors.extend(errors)

        log_event(
            logger,
            event="batch_finished",
            images=len(images),
            products=len(result.products),
            errors=len(result.errors),
            duration_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return result

    async def generate(self, images: Sequence[UploadedImage]) -> tuple[BatchResult, str | None]:
        """Validate, process and encode. The CSV is ``None`` when nothing succeeded."""
        self.validate(images)
        result = await self.process(images)
        if not result.ok:
            return result, None

        csv_text = csv_encoder.encode(result.products)
        log_event(logger, event="csv_generated", products=len(result.products))
        return result, csv_text

    async def _process_one(
        self, image: UploadedImage
    ) -> tuple[ProductRecord | None, list[ProcessingError]]:
        try:
            product = await self._classifier.classify(image.content, image.mime_type, image.filename)
        except GeneratorError as e:
            log_event(
                logger,
                event="image_failed",
                level="warning",
                image_file=image.filename,
                reason=e.message,
            )
            return None, [ProcessingError(image.filename, e.message)]
        except Exception as e:
            logger.exception("Unexpected error classifying %s", image.filename)
            return None, [ProcessingError(image.filename, str(e) or type(e).__name__)]

        errors: list[ProcessingError] = []
        try:
            image_url = await self._uploader.upload(
                image.content, image.mime_type, image.filename, image.index
            )
        except Exception as e:
            message = e.message if isinstance(e, GeneratorError) else str(e)
            log_event(
                logger,
                event="image_upload_failed",
                level="warning",
                image_file=image.filename,
                reason=message,
            )
            errors.append(ProcessingError(image.filename, f"Image upload failed: {message}"))
        else:
            if image_url:
                product.image_src = image_url

        return product, errors
