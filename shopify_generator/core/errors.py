"""Error taxonomy for the image-to-CSV pipeline.

Per-image errors (ConfigurationError, UpstreamError, ParseError) are caught at
the image boundary by the batch orchestrator and turned into ProcessingError
entries. ValidationError rejects a whole request before any image is touched.
"""

from __future__ import annotations


class GeneratorError(Exception):
    """Base class for all pipeline errors."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ConfigurationError(GeneratorError):
    """Raised when a required credential is missing."""


class ValidationError(GeneratorError):
    """Raised when the request shape is invalid (HTTP 400)."""

    def __init__(self, message: str, details: list[str] | None = None):
        super().__init__(message)
        self.details = details or []


class UpstreamError(GeneratorError):
    """Raised when an external API returns non-success or cannot be reached."""

    def __init__(
        self,
        service: str,
        message: str,
        *,
        status_code: int | None = None,
        body: str = "",
    ):
        super().__init__(message)
        self.service = service
        self.status_code = status_code
        self.body = body

    @classmethod
    def from_response(cls, service: str, status_code: int, body: str) -> "UpstreamError":
        """Build the error for a non-success HTTP status."""
        return cls(
            service,
            f"{service} API error ({status_code}): {body}",
            status_code=status_code,
            body=body,
        )


class ParseError(GeneratorError):
    """Raised when the model reply is not a usable JSON object."""

    RAW_PREVIEW_CHARS = 200

    def __init__(self, message: str, raw: str = ""):
        super().__init__(message)
        self.raw = raw[: self.RAW_PREVIEW_CHARS]
