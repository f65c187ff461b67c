"""Core domain building blocks for the product generator.

This package contains the host-agnostic parts of the pipeline:
- models: UploadedImage, ProductRecord, ProcessingError, BatchResult
- errors: the pipeline error taxonomy
- slug: Shopify handle generation
- csv_encoder: Shopify CSV rendering
- logging: structured logging configuration
"""

from shopify_generator.core.csv_encoder import SHOPIFY_CSV_COLUMNS, encode, escape_field
from shopify_generator.core.errors import (
    ConfigurationError,
    GeneratorError,
    ParseError,
    UpstreamError,
    ValidationError,
)
from shopify_generator.core.models import (
    BatchResult,
    ProcessingError,
    ProductRecord,
    UploadedImage,
)
from shopify_generator.core.slug import slugify


__all__ = [
    # Models
    "BatchResult",
    "ProcessingError",
    "ProductRecord",
    "UploadedImage",
    # Errors
    "ConfigurationError",
    "GeneratorError",
    "ParseError",
    "UpstreamError",
    "ValidationError",
    # Encoding
    "SHOPIFY_CSV_COLUMNS",
    "encode",
    "escape_field",
    "slugify",
]
