"""Data models passed between the pipeline stages."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field


@dataclass(frozen=True)
class UploadedImage:
    """One image part of an incoming request."""

    content: bytes
    mime_type: str
    filename: str
    index: int

    @property
    def size(self) -> int:
        return len(self.content)


@dataclass
class ProductRecord:
    """Product fields generated from one photo.

    ``image_src`` is filled in by the orchestrator after a successful upload.
    """

    handle: str
    title: str
    body_html: str = ""
    vendor: str = ""
    type: str = ""
    tags: str = ""
    price: str = "0.00"
    sku: str = ""
    barcode: str = ""
    image_src: str = ""
    image_alt: str = ""


@dataclass(frozen=True)
class ProcessingError:
    """A per-image failure recorded during a batch."""

    file: str
    message: str

    def to_dict(self) -> dict[str, str]:
        return asdict(self)


@dataclass
class BatchResult:
    """Outcome of processing a batch of images."""

    products: list[ProductRecord] = field(default_factory=list)
    errors: list[ProcessingError] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        """True when at least one product was generated."""
        return bool(self.products)
