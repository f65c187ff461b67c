"""Tests for the Shopify CSV encoder."""

from __future__ import annotations

import csv
import io

import pytest

from shopify_generator.core.csv_encoder import (
    BOM,
    SHOPIFY_CSV_COLUMNS,
    encode,
    escape_field,
    header_row,
    product_row,
)
from shopify_generator.core.models import ProductRecord


def _parse(document: str) -> list[list[str]]:
    assert document.startswith(BOM)
    return list(csv.reader(io.StringIO(document[len(BOM) :], newline="")))


@pytest.fixture
def tricky_product() -> ProductRecord:
    return ProductRecord(
        handle="linen-shirt",
        title='Linen Shirt, 15" collar',
        body_html="<p>Soft linen.</p>\n<ul><li>Breathable</li></ul>",
        vendor="Acme",
        type="Apparel",
        tags="summer, linen, white",
        price="39.00",
        image_src="https://cdn.example.com/linen.jpg",
        image_alt='Linen Shirt, 15" collar',
    )


class TestEscapeField:
    """Tests for escape_field function."""

    def test_plain_value_is_raw(self):
        assert escape_field("Apparel") == "Apparel"

    def test_none_becomes_empty(self):
        assert escape_field(None) == ""

    @pytest.mark.parametrize(
        ("value", "expected"),
        [
            ("a,b", '"a,b"'),
            ('say "hi"', '"say ""hi"""'),
            ("line1\nline2", '"line1\nline2"'),
            ("line1\r\nline2", '"line1\r\nline2"'),
        ],
    )
    def test_special_characters_are_quoted(self, value, expected):
        assert escape_field(value) == expected

    @pytest.mark.parametrize(
        "value",
        ['He said "no", then left', "a,b,c", 'multi\nline "quoted", text', '""'],
    )
    def test_round_trips_through_csv_reader(self, value):
        parsed = next(csv.reader(io.StringIO(escape_field(value), newline="")))
        assert parsed == [value]


class TestHeader:
    def test_has_26_shopify_columns(self):
        assert len(SHOPIFY_CSV_COLUMNS) == 26
        assert header_row().split(",")[0] == "Handle"
        assert header_row().split(",")[-1] == "Image Alt Text"


class TestProductRow:
    def test_hardcoded_columns(self):
        row = next(csv.reader([product_row(ProductRecord(handle="mug", title="Mug"), 0)]))
        columns = dict(zip(SHOPIFY_CSV_COLUMNS, row))

        assert columns["Published"] == "true"
        assert columns["Option1 Value"] == "Default Title"
        assert columns["Variant Inventory Qty"] == "0"
        assert columns["Variant Inventory Policy"] == "deny"
        assert columns["Variant Fulfillment Service"] == "manual"
        assert columns["Variant Requires Shipping"] == "true"
        assert columns["Variant Taxable"] == "true"

    def test_fallbacks(self):
        product = ProductRecord(handle="", title="Mug", price="")
        row = next(csv.reader([product_row(product, 2)]))
        columns = dict(zip(SHOPIFY_CSV_COLUMNS, row))

        assert columns["Handle"] == "product-3"
        assert columns["Variant Price"] == "0.00"
        assert columns["Image Alt Text"] == "Mug"


class TestEncode:
    def test_bom_and_crlf(self, tricky_product):
        document = encode([tricky_product, ProductRecord(handle="mug", title="Mug")])

        assert document.startswith("\ufeffHandle,Title,")
        assert document.count("\r\n") >= 2
        assert not document.endswith("\r\n")

    def test_one_row_per_product_with_26_fields(self, tricky_product):
        products = [tricky_product, ProductRecord(handle="mug", title="Mug"), tricky_product]
        rows = _parse(encode(products))

        assert len(rows) == 1 + len(products)
        assert rows[0] == list(SHOPIFY_CSV_COLUMNS)
        assert all(len(row) == 26 for row in rows)

    def test_values_survive_round_trip(self, tricky_product):
        rows = _parse(encode([tricky_product]))
        columns = dict(zip(rows[0], rows[1]))

        assert columns["Title"] == tricky_product.title
        assert columns["Body (HTML)"] == tricky_product.body_html
        assert columns["Tags"] == tricky_product.tags
        assert columns["Image Src"] == tricky_product.image_src

    def test_empty_product_list_is_header_only(self):
        assert encode([]) == BOM + header_row()
