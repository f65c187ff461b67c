"""Configuration for the product generator service.

Reads environment variables (and an optional ``.env`` file) for API access,
storage credentials and runtime tuning.
"""

from __future__ import annotations

import logging
from functools import lru_cache

from pydantic import Field, SecretStr, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)


class Settings(BaseSettings):
    """Runtime configuration loaded from environment."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # =========================================================================
    # VISION MODEL (OpenRouter, OpenAI-compatible chat completions)
    # =========================================================================
    OPENROUTER_API_KEY: SecretStr = Field(
        default=SecretStr(""), description="Bearer token for the vision chat-completion endpoint."
    )
    OPENROUTER_MODEL: str = Field(
        default="qwen/qwen3-vl-30b-a3b-thinking",
        description="Vision-capable model used to write product copy.",
    )
    OPENROUTER_BASE_URL: str = Field(
        default="https://openrouter.ai/api/v1",
        description="Base URL of the OpenAI-compatible API.",
    )
    OPENROUTER_TIMEOUT_SECONDS: float = Field(
        default=60.0, gt=0, description="Timeout for a single vision request."
    )
    VISION_MAX_TOKENS: int = Field(
        default=600, gt=0, description="max_tokens sent with each vision request."
    )
    APP_URL: str = Field(
        default="http://localhost:3001",
        description="Public URL of this app, sent as HTTP-Referer to OpenRouter.",
    )

    # =========================================================================
    # STORAGE (Supabase)
    # =========================================================================
    SUPABASE_URL: str = Field(default="", description="Supabase project URL for image storage.")
    SUPABASE_SERVICE_ROLE_KEY: SecretStr = Field(
        default=SecretStr(""), description="Service role key allowed to write to the bucket."
    )
    SUPABASE_BUCKET: str = Field(
        default="product-images", description="Bucket receiving uploaded product photos."
    )
    LOCAL_UPLOAD_DIR: str = Field(
        default="",
        description="Optional directory that also receives a copy of every uploaded image.",
    )

    # =========================================================================
    # SERVER
    # =========================================================================
    PORT: int = Field(default=3001, description="Port for the long-running server.")
    LOG_LEVEL: str = Field(default="INFO", description="Root log level.")
    LOG_JSON: bool = Field(default=False, description="Emit JSON log lines.")
    CORS_ALLOW_ORIGINS: str = Field(
        default="*", description="Comma-separated list of allowed CORS origins."
    )

    # =========================================================================
    # BATCH LIMITS
    # =========================================================================
    BATCH_CONCURRENCY: int = Field(
        default=4, gt=0, description="Images processed concurrently within one batch."
    )
    MAX_FILES: int = Field(default=50, gt=0, description="Maximum images per request.")
    MAX_FILE_SIZE_BYTES: int = Field(
        default=10 * 1024 * 1024, gt=0, description="Maximum size of a single image."
    )

    @model_validator(mode="after")
    def _validate_log_level(self) -> "Settings":
        level = self.LOG_LEVEL.upper()
        if level not in logging.getLevelNamesMapping():
            raise ValueError(f"LOG_LEVEL must be a standard logging level, got {self.LOG_LEVEL!r}")
        self.LOG_LEVEL = level
        return self

    @property
    def has_api_key(self) -> bool:
        """Check if the vision API key is configured."""
        return bool(self.OPENROUTER_API_KEY.get_secret_value())

    @property
    def storage_enabled(self) -> bool:
        """Check if Supabase storage is configured."""
        return bool(self.SUPABASE_URL and self.SUPABASE_SERVICE_ROLE_KEY.get_secret_value())

    @property
    def cors_origins(self) -> list[str]:
        """Return parsed CORS origins."""
        return [o.strip() for o in self.CORS_ALLOW_ORIGINS.split(",") if o.strip()]


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Return a cached settings instance."""

    return Settings()  # type: ignore[arg-type]


settings = get_settings()
