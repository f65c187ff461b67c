"""CSV generation router: product photos in, Shopify CSV out."""

from __future__ import annotations

import logging
import time
from typing import Annotated

from fastapi import APIRouter, File, UploadFile
from fastapi.responses import Response

from shopify_generator.core.errors import ValidationError
from shopify_generator.core.models import UploadedImage
from shopify_generator.server.dependencies import OrchestratorDep
from shopify_generator.server.exceptions import (
    BadRequestError,
    BatchFailedError,
    MethodNotAllowedError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generate"])

NOT_ALLOWED_METHODS = ["GET", "HEAD", "PUT", "PATCH", "DELETE", "TRACE"]


async def to_uploaded_image(upload: UploadFile, index: int) -> UploadedImage:
    """Read one multipart part into memory.

    A part without a Content-Type keeps an empty MIME type so validation
    rejects it.
    """
    content = await upload.read()
    return UploadedImage(
        content=content,
        mime_type=upload.content_type or "",
        filename=upload.filename or f"image-{index}.jpg",
        index=index,
    )


@router.post("/generate")
async def generate_csv(
    orchestrator: OrchestratorDep,
    images: Annotated[list[UploadFile] | None, File()] = None,
) -> Response:
    """Generate a Shopify product CSV from the uploaded ``images`` parts."""
    uploads = images or []
    try:
        uploaded = [await to_uploaded_image(upload, i) for i, upload in enumerate(uploads)]
    finally:
        for upload in uploads:
            await upload.close()

    try:
        result, csv_text = await orchestrator.generate(uploaded)
    except ValidationError as e:
        raise BadRequestError(e.message, details=e.details or None) from e

    if csv_text is None:
        raise BatchFailedError(result.errors)

    for error in result.errors:
        logger.warning("Partial failure for %s: %s", error.file, error.message)

    filename = f"shopify-products-{int(time.time() * 1000)}.csv"
    return Response(
        content=csv_text.encode("utf-8"),
        media_type="text/csv; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{filename}"',
            "X-Processing-Errors": str(len(result.errors)),
        },
    )


@router.options("/generate", include_in_schema=False)
async def generate_preflight() -> Response:
    return Response(status_code=204)


@router.api_route(
    "/generate",
    methods=NOT_ALLOWED_METHODS,
    include_in_schema=False,
)
async def generate_method_not_allowed() -> Response:
    raise MethodNotAllowedError("POST")
