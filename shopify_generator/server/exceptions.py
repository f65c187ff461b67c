"""Custom exception classes for API error handling."""

from __future__ import annotations

from typing import Any

from shopify_generator.core.models import ProcessingError


class APIError(Exception):
    """Base exception for API errors rendered as ``{error, details?}``."""

    def __init__(
        self,
        message: str,
        status_code: int = 400,
        details: Any = None,
        headers: dict[str, str] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.details = details
        self.headers = headers

    def to_content(self) -> dict[str, Any]:
        content: dict[str, Any] = {"error": self.message}
        if self.details:
            content["details"] = self.details
        return content


class BadRequestError(APIError):
    """Raised when the request shape is invalid."""

    def __init__(self, message: str, details: Any = None):
        super().__init__(message, status_code=400, details=details)


class BatchFailedError(APIError):
    """Raised when no image in the request produced a product."""

    def __init__(self, errors: list[ProcessingError]):
        super().__init__(
            "No products could be generated.",
            status_code=400,
            details=[error.to_dict() for error in errors],
        )


class MethodNotAllowedError(APIError):
    """Raised for unsupported HTTP methods on an endpoint."""

    def __init__(self, allowed: str = "POST"):
        super().__init__(
            f"Method not allowed. Use {allowed}.",
            status_code=405,
            headers={"Allow": f"{allowed}, OPTIONS"},
        )
