import asyncio
import sys
from pathlib import Path

import pytest

# Add project root to path
root = Path(__file__).resolve().parents[1]
project_root = str(root)
if project_root not in sys.path:
    sys.path.insert(0, project_root)

from shopify_generator.core.errors import ParseError, UpstreamError  # noqa: E402
from shopify_generator.core.models import ProductRecord, UploadedImage  # noqa: E402
from shopify_generator.core.slug import slugify  # noqa: E402


class FakeClassifier:
    """Classifier double: titles products after the file name.

    ``failures`` maps a filename to the exception raised for it; ``delays``
    maps a filename to seconds slept before answering.
    """

    def __init__(self, failures=None, delays=None):
        self.failures = failures or {}
        self.delays = delays or {}
        self.calls: list[str] = []
        self.in_flight = 0
        self.max_in_flight = 0

    async def classify(self, image_bytes, mime_type, filename):
        self.calls.append(filename)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            await asyncio.sleep(self.delays.get(filename, 0))
            if filename in self.failures:
                raise self.failures[filename]
            title = f"Product {Path(filename).stem}"
            return ProductRecord(handle=slugify(title), title=title, image_alt=title)
        finally:
            self.in_flight -= 1


class FakeUploader:
    """Uploader double returning a CDN-like URL, or raising for ``failures``."""

    def __init__(self, failures=None, enabled=True):
        self.failures = failures or {}
        self.enabled = enabled
        self.calls: list[tuple[str, int]] = []

    async def upload(self, image_bytes, mime_type, filename, index):
        self.calls.append((filename, index))
        if not self.enabled:
            return ""
        if filename in self.failures:
            raise self.failures[filename]
        return f"https://cdn.example.com/{index}-{filename}"


@pytest.fixture
def make_image():
    def _make(index=0, filename=None, mime_type="image/jpeg", content=b"\xff\xd8\xff\xe0fake-jpeg"):
        return UploadedImage(
            content=content,
            mime_type=mime_type,
            filename=filename or f"photo{index + 1}.jpg",
            index=index,
        )

    return _make


@pytest.fixture
def fake_classifier():
    return FakeClassifier()


@pytest.fixture
def fake_uploader():
    return FakeUploader()


@pytest.fixture
def upstream_error():
    return UpstreamError.from_response("OpenRouter", 502, "bad gateway")


@pytest.fixture
def parse_error():
    return ParseError("Invalid JSON from AI: not json", raw="not json")


@pytest.fixture
def classifier_cls():
    return FakeClassifier


@pytest.fixture
def uploader_cls():
    return FakeUploader
