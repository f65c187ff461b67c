"""Shopify product CSV encoding.

The output is written for Excel and the Shopify importer: UTF-8 byte-order
mark, CRLF line endings, one header line and one row per product.
"""

from __future__ import annotations

import re
from collections.abc import Iterable

from shopify_generator.core.models import ProductRecord

BOM = "\ufeff"
LINE_SEPARATOR = "\r\n"

SHOPIFY_CSV_COLUMNS: tuple[str, ...] = (
    "Handle",
    "Title",
    "Body (HTML)",
    "Vendor",
    "Type",
    "Tags",
    "Published",
    "Option1 Name",
    "Option1 Value",
    "Option2 Name",
    "Option2 Value",
    "Option3 Name",
    "Option3 Value",
    "Variant SKU",
    "Variant Grams",
    "Variant Inventory Tracker",
    "Variant Inventory Qty",
    "Variant Inventory Policy",
    "Variant Fulfillment Service",
    "Variant Price",
    "Variant Compare-at Price",
    "Variant Requires Shipping",
    "Variant Taxable",
    "Variant Barcode",
    "Image Src",
    "Image Alt Text",
)

_NEEDS_QUOTING_RE = re.compile(r'[,"\r\n]')


def escape_field(value: object) -> str:
    """Quote a field when it contains a comma, quote or line break."""
    if value is None:
        return ""
    text = str(value)
    if _NEEDS_QUOTING_RE.search(text):
        return '"' + text.replace('"', '""') + '"'
    return text


def header_row() -> str:
    return ",".join(escape_field(column) for column in SHOPIFY_CSV_COLUMNS)


def product_row(product: ProductRecord, index: int) -> str:
    """Build one CSV row; ``index`` is the 0-based position used for handle fallback."""
    handle = product.handle or f"product-{index + 1}"
    values = (
        handle,
        product.title,
        product.body_html,
        product.vendor,
        product.type,
        product.tags,
        "true",  # Published
        "",  # Option1 Name
        "Default Title",
        "",  # Option2 Name
        "",
        "",  # Option3 Name
        "",
        product.sku,
        "",  # Variant Grams
        "",  # Variant Inventory Tracker
        "0",
        "deny",
        "manual",
        product.price or "0.00",
        "",  # Variant Compare-at Price
        "true",
        "true",
        product.barcode,
        product.image_src,
        product.image_alt or product.title,
    )
    return ",".join(escape_field(value) for value in values)


def encode(products: Iterable[ProductRecord]) -> str:
    """Render products as a Shopify import CSV document."""
    rows = [header_row()]
    rows.extend(product_row(product, index) for index, product in enumerate(products))
    return BOM + LINE_SEPARATOR.join(rows)
