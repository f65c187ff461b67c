"""Tests for HTTP error bodies and headers."""

from shopify_generator.core.models import ProcessingError
from shopify_generator.server.exceptions import (
    APIError,
    BadRequestError,
    BatchFailedError,
    MethodNotAllowedError,
)


def test_api_error_omits_empty_details():
    assert APIError("Nope.").to_content() == {"error": "Nope."}
    assert BadRequestError("Nope.", details=[]).to_content() == {"error": "Nope."}


def test_batch_failed_lists_every_error():
    error = BatchFailedError(
        [ProcessingError("a.jpg", "boom"), ProcessingError("b.jpg", "bust")]
    )

    assert error.status_code == 400
    assert error.headers is None
    assert error.to_content() == {
        "error": "No products could be generated.",
        "details": [
            {"file": "a.jpg", "message": "boom"},
            {"file": "b.jpg", "message": "bust"},
        ],
    }


def test_method_not_allowed_advertises_allowed_methods():
    error = MethodNotAllowedError("POST")

    assert error.status_code == 405
    assert error.headers == {"Allow": "POST, OPTIONS"}
    assert error.to_content() == {"error": "Method not allowed. Use POST."}
