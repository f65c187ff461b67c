"""Blob upload client backed by Supabase Storage.

Uploads product photos to a bucket so the CSV can carry a public Image Src
URL. When storage is not configured every upload is a no-op returning "".
"""

from __future__ import annotations

import asyncio
import logging
import time
import uuid
from pathlib import Path, PurePath
from typing import TYPE_CHECKING

from supabase import Client, create_client

from shopify_generator.core.errors import UpstreamError
from shopify_generator.core.slug import slugify

if TYPE_CHECKING:
    from shopify_generator.conf.config import Settings


logger = logging.getLogger(__name__)

SERVICE_NAME = "Supabase"

MIME_EXTENSIONS: dict[str, str] = {
    "image/png": ".png",
    "image/gif": ".gif",
    "image/webp": ".webp",
}
DEFAULT_EXTENSION = ".jpg"


def get_supabase_client(url: str, api_key: str) -> Client | None:
    """Return a configured Supabase client or ``None`` when disabled."""
    if not url or not api_key:
        missing = []
        if not url:
            missing.append("SUPABASE_URL")
        if not api_key:
            missing.append("SUPABASE_SERVICE_ROLE_KEY")
        logger.warning("Supabase storage disabled - missing env vars: %s", ", ".join(missing))
        return None

    try:
        return create_client(url, api_key)
    except Exception as e:
        logger.error("[SUPABASE] Failed to create client: %s. Storage disabled.", e)
        return None


def resolve_extension(filename: str, mime_type: str) -> str:
    """Extension from the filename, else from the MIME type, else ``.jpg``."""
    suffix = PurePath(filename or "").suffix
    if suffix:
        return suffix
    return MIME_EXTENSIONS.get((mime_type or "").lower(), DEFAULT_EXTENSION)


def build_storage_key(
    filename: str,
    mime_type: str,
    index: int,
    *,
    now_ms: int | None = None,
    random_suffix: str | None = None,
) -> str:
    """Build a unique flat object key.

    Format: ``<epoch-ms>-<index>-<6 random chars>-<slugified base><ext>``.
    """
    ext = resolve_extension(filename, mime_type)
    name = PurePath(filename or "image").name
    base = name[: -len(ext)] if ext and name.endswith(ext) else PurePath(name).stem
    safe_base = slugify(base or "image") or "image"

    timestamp = now_ms if now_ms is not None else int(time.time() * 1000)
    suffix = random_suffix if random_suffix is not None else uuid.uuid4().hex[:6]
    return f"{timestamp}-{index}-{suffix}-{safe_base}{ext}"


class ImageUploader:
    """Uploads image buffers to a Supabase Storage bucket."""

    def __init__(
        self,
        client: Client | None,
        *,
        bucket: str = "product-images",
        local_dir: str | Path | None = None,
    ) -> None:
        self._client = client
        self._bucket = bucket
        self._local_dir = Path(local_dir) if local_dir else None

    @classmethod
    def from_settings(cls, settings: Settings) -> ImageUploader:
        client = get_supabase_client(
            settings.SUPABASE_URL,
            settings.SUPABASE_SERVICE_ROLE_KEY.get_secret_value(),
        )
        return cls(
            client,
            bucket=settings.SUPABASE_BUCKET,
            local_dir=settings.LOCAL_UPLOAD_DIR or None,
        )

    @property
    def enabled(self) -> bool:
        return self._client is not None

    async def upload(self, image_bytes: bytes, mime_type: str, filename: str, index: int) -> str:
        """Upload one image and return its public URL.

        Returns "" when storage is not configured or the provider gives no URL.

        Raises:
            UpstreamError: the upload was rejected or failed.
        """
        if self._client is None:
            return ""

        key = build_storage_key(filename, mime_type, index)

        if self._local_dir is not None:
            self._write_local_copy(key, image_bytes)

        try:
            public_url = await asyncio.to_thread(
                self._upload_sync, key, image_bytes, mime_type or "image/jpeg"
            )
        except Exception as e:
            raise UpstreamError(SERVICE_NAME, f"Supabase upload failed: {e}") from e

        logger.info("Uploaded %s to %s/%s", filename, self._bucket, key)
        return public_url or ""

    def _upload_sync(self, key: str, image_bytes: bytes, mime_type: str) -> str:
        bucket = self._client.storage.from_(self._bucket)
        bucket.upload(
            path=key,
            file=image_bytes,
            file_options={"content-type": mime_type, "upsert": "false"},
        )
        return bucket.get_public_url(key)

    def _write_local_copy(self, key: str, image_bytes: bytes) -> None:
        try:
            self._local_dir.mkdir(parents=True, exist_ok=True)
            (self._local_dir / key).write_bytes(image_bytes)
        except OSError as e:
            logger.warning("Local copy of %s not written: %s", key, e)
