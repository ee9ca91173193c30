"""Tests for catalog_extractor/models/product.py"""

import pytest

from catalog_extractor.models import (
    DEFAULT_VARIANT_TITLE,
    Product,
    ProductVariant,
    build_variant_title,
    clean_image_url,
    normalize_tags,
)


class TestNormalizeTags:
    def test_comma_string(self):
        assert normalize_tags("summer, sale,  new ") == ["summer", "sale", "new"]

    def test_list_passthrough(self):
        assert normalize_tags(["summer", "sale"]) == ["summer", "sale"]

    def test_list_entries_trimmed(self):
        assert normalize_tags([" a ", "", "b"]) == ["a", "b"]

    def test_empty_values(self):
        assert normalize_tags(None) == []
        assert normalize_tags("") == []
        assert normalize_tags([]) == []

    def test_preserves_order(self):
        assert normalize_tags("z, a, m") == ["z", "a", "m"]


class TestCleanImageUrl:
    def test_strips_query(self):
        assert clean_image_url("https://cdn.example.com/a.jpg?v=1&w=2") == "https://cdn.example.com/a.jpg"

    def test_idempotent(self):
        clean = "https://cdn.example.com/a.jpg"
        assert clean_image_url(clean) == clean
        assert clean_image_url(clean_image_url(clean + "?v=1")) == clean

    def test_empty(self):
        assert clean_image_url(None) == ""
        assert clean_image_url("") == ""


class TestBuildVariantTitle:
    def test_joins_options(self):
        assert build_variant_title(["M", "Azul", None]) == "M / Azul"

    def test_at_most_three(self):
        assert build_variant_title(["a", "b", "c", "d"]) == "a / b / c"

    def test_default_when_no_options(self):
        assert build_variant_title([None, None, None]) == DEFAULT_VARIANT_TITLE


class TestProductVariant:
    def test_defaults(self):
        v = ProductVariant(id=1, title="Default Title", price="9.99")
        assert v.compare_at_price is None
        assert v.sku == ""
        assert v.available is False
        assert v.options == [None, None, None]

    def test_numeric_price_stringified(self):
        v = ProductVariant(id=1, title="x", price=12.5, compare_at_price=20)
        assert v.price == "12.5"
        assert v.compare_at_price == "20"

    def test_rejects_negative_price(self):
        with pytest.raises(ValueError, match="non-negative"):
            ProductVariant(id=1, title="x", price="-1.00")

    def test_rejects_unparseable_price(self):
        with pytest.raises(ValueError, match="price"):
            ProductVariant(id=1, title="x", price="free")

    def test_rejects_unparseable_compare_at(self):
        with pytest.raises(ValueError, match="compare_at_price"):
            ProductVariant(id=1, title="x", price="1.00", compare_at_price="n/a")

    def test_none_sku_becomes_empty(self):
        v = ProductVariant(id=1, title="x", price="1.00", sku=None)
        assert v.sku == ""


class TestProduct:
    def test_tags_from_string(self, full_product):
        assert full_product.tags == ["verano", "algodón"]

    def test_tags_always_list_of_strings(self):
        for raw in ("a,b", ["a", "b"], None, ""):
            product = Product(id=1, title="x", tags=raw)
            assert isinstance(product.tags, list)
            assert all(isinstance(tag, str) for tag in product.tags)

    def test_defaults(self, minimal_product):
        assert minimal_product.published_at is None
        assert minimal_product.images == []
        assert minimal_product.tags == []

    def test_keeps_source_id_type(self):
        assert Product(id="gid-7", title="x").id == "gid-7"
        assert Product(id=7, title="x").id == 7

    def test_drops_empty_image_urls(self):
        product = Product(id=1, title="x", images=["https://a/1.jpg", "", None])
        assert product.images == ["https://a/1.jpg"]
