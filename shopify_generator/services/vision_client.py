"""Vision classification client.

Sends one product photo to an OpenAI-compatible chat-completion endpoint
(OpenRouter by default) and turns the model's JSON reply into a ProductRecord.
"""

from __future__ import annotations

import base64
import json
import logging
import re
from typing import TYPE_CHECKING, Any

import httpx
import openai
from openai import AsyncOpenAI

from shopify_generator.core.errors import ConfigurationError, ParseError, UpstreamError
from shopify_generator.core.logging import safe_preview
from shopify_generator.core.models import ProductRecord
from shopify_generator.core.slug import slugify
from shopify_generator.services.prompts import get_product_prompt

if TYPE_CHECKING:
    from shopify_generator.conf.config import Settings


logger = logging.getLogger(__name__)

SERVICE_NAME = "OpenRouter"
DEFAULT_TITLE = "Untitled Product"
DEFAULT_PRICE = "0.00"

_CODE_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def build_data_url(image_bytes: bytes, mime_type: str) -> str:
    """Encode raw image bytes as a base64 data URL."""
    b64_data = base64.b64encode(image_bytes).decode("ascii")
    return f"data:{mime_type};base64,{b64_data}"


def extract_json_payload(content: str) -> dict[str, Any]:
    """Parse the model reply, tolerating a surrounding markdown code fence."""
    json_str = content.strip()
    fence = _CODE_FENCE_RE.search(json_str)
    if fence:
        json_str = fence.group(1).strip()

    try:
        parsed = json.loads(json_str)
    except json.JSONDecodeError as e:
        raise ParseError(
            f"Invalid JSON from AI: {content[: ParseError.RAW_PREVIEW_CHARS]}", raw=content
        ) from e

    if not isinstance(parsed, dict):
        raise ParseError(
            f"Expected a JSON object from AI: {content[: ParseError.RAW_PREVIEW_CHARS]}",
            raw=content,
        )
    return parsed


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, (list, tuple)):
        return ", ".join(str(item).strip() for item in value if str(item).strip())
    return str(value).strip()


def build_product(parsed: dict[str, Any], filename: str) -> ProductRecord:
    """Map the model's JSON object onto a ProductRecord with defaults applied."""
    title = _as_text(parsed.get("title")) or DEFAULT_TITLE
    handle = slugify(title) or slugify(f"product-{filename}")

    return ProductRecord(
        handle=handle,
        title=title,
        body_html=_as_text(parsed.get("body_html") or parsed.get("bodyHtml")),
        vendor=_as_text(parsed.get("vendor")),
        type=_as_text(parsed.get("type")),
        tags=_as_text(parsed.get("tags")),
        price=_as_text(parsed.get("price")) or DEFAULT_PRICE,
        image_alt=title,
    )


class VisionClassifier:
    """Generates product copy for a single photo using a vision model.

    The underlying ``AsyncOpenAI`` client is created on first use, after the
    API key check, so a missing key never reaches the network layer. Tests
    inject a ready client instead. Failed calls are never retried.
    """

    def __init__(
        self,
        *,
        api_key: str,
        model: str,
        base_url: str | None = None,
        referer: str = "",
        timeout_seconds: float = 60.0,
        max_tokens: int = 600,
        prompt: str | None = None,
        client: AsyncOpenAI | None = None,
        http_client: httpx.AsyncClient | None = None,
    ) -> None:
        self._api_key = api_key
        self._model = model
        self._base_url = base_url
        self._referer = referer
        self._timeout_seconds = timeout_seconds
        self._max_tokens = max_tokens
        self._prompt = prompt
        self._client = client
        self._http_client = http_client

    @classmethod
    def from_settings(cls, settings: Settings) -> VisionClassifier:
        return cls(
            api_key=settings.OPENROUTER_API_KEY.get_secret_value(),
            model=settings.OPENROUTER_MODEL,
            base_url=settings.OPENROUTER_BASE_URL,
            referer=settings.APP_URL,
            timeout_seconds=settings.OPENROUTER_TIMEOUT_SECONDS,
            max_tokens=settings.VISION_MAX_TOKENS,
        )

    @property
    def configured(self) -> bool:
        return bool(self._api_key)

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            headers = {"HTTP-Referer": self._referer} if self._referer else None
            self._client = AsyncOpenAI(
                api_key=self._api_key,
                base_url=self._base_url,
                timeout=self._timeout_seconds,
                default_headers=headers,
                max_retries=0,
                http_client=self._http_client,
            )
        return self._client

    def _build_messages(self, data_url: str) -> list[dict[str, Any]]:
        prompt = self._prompt if self._prompt is not None else get_product_prompt()
        return [
            {
                "role": "user",
                "content": [
                    {"type": "text", "text": prompt},
                    {"type": "image_url", "image_url": {"url": data_url}},
                ],
            }
        ]

    async def classify(self, image_bytes: bytes, mime_type: str, filename: str) -> ProductRecord:
        """Return a ProductRecord generated from one image.

        Raises:
            ConfigurationError: the API key is not configured.
            UpstreamError: the endpoint answered non-success or was unreachable.
            ParseError: the reply was empty or not a JSON object.
        """
        if not self._api_key:
            raise ConfigurationError("OPENROUTER_API_KEY is not set")

        messages = self._build_messages(build_data_url(image_bytes, mime_type))
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self._model,
                messages=messages,
                max_tokens=self._max_tokens,
            )
        except openai.APIStatusError as e:
            body = e.response.text if e.response is not None else str(e)
            raise UpstreamError.from_response(SERVICE_NAME, e.status_code, body) from e
        except openai.APIConnectionError as e:
            raise UpstreamError(SERVICE_NAME, f"{SERVICE_NAME} request failed: {e}") from e

        content = ""
        if response.choices:
            content = (response.choices[0].message.content or "").strip()
        if not content:
            raise ParseError(f"No response from {SERVICE_NAME}")

        logger.debug("Vision reply for %s: %s", filename, safe_preview(content, 500))

        product = build_product(extract_json_payload(content), filename)
        logger.info("Classified %s as %r (handle=%s)", filename, product.title, product.handle)
        return product

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
