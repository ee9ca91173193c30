"""Tests for catalog_extractor/extraction/catalog_extraction.py"""

import pytest

from catalog_extractor.common.errors import (
    EmptyResult,
    HttpStatusError,
    InvalidInput,
    MalformedResponse,
    Unauthorized,
)
from catalog_extractor.extraction import CatalogExtraction, store_identifier
from catalog_extractor.platforms import StoreCredentials


def shopify_page(*ids):
    return {'products': [
        {'id': i, 'title': f"P{i}", 'variants': [
            {'id': i * 10, 'title': "Default Title", 'price': "1.00", 'available': True},
            {'id': i * 10 + 1, 'title': "Other", 'price': "2.00", 'available': False},
        ]}
        for i in ids
    ]}


class TestStoreIdentifier:
    @pytest.mark.parametrize("platform, credentials, expected", [
        ('shopify', StoreCredentials(store_url="https://www.shop.example.com/x"), "shop.example.com"),
        ('woocommerce', StoreCredentials(store_url="https://tienda.mx"), "tienda.mx"),
        ('shopify-admin', StoreCredentials(store_name="My-Store.myshopify.com"), "my-store"),
        ('vtex', StoreCredentials(account_name="mitienda"), "mitienda"),
        ('vtex', StoreCredentials(), "export"),
        ('tiendanube', StoreCredentials(user_id="123"), "123"),
        ('tiendanube', StoreCredentials(), "tiendanube-user"),
        ('prestashop', StoreCredentials(store_url="not a url"), "export"),
    ])
    def test_identifier(self, platform, credentials, expected):
        assert store_identifier(platform, credentials) == expected


class TestCatalogExtraction:
    def test_successful_run(self, make_fetcher):
        fetcher = make_fetcher([shopify_page(1, 2), shopify_page(3), {'products': []}])
        run = CatalogExtraction('shopify', StoreCredentials(store_url="https://shop.example.com"), fetcher, {})

        result = run.run()

        assert result.platform == 'shopify'
        assert result.store_identifier == "shop.example.com"
        assert [p.id for p in result.products] == [1, 2, 3]
        assert result.variant_count == 6
        assert run.pages_fetched == 2

    def test_empty_catalog(self, make_fetcher):
        fetcher = make_fetcher([{'products': []}])
        run = CatalogExtraction('shopify', StoreCredentials(store_url="https://shop.example.com"), fetcher, {})

        with pytest.raises(EmptyResult, match="No products found"):
            run.run()

    def test_unauthorized_first_page(self, make_fetcher):
        fetcher = make_fetcher([Unauthorized(401)])
        credentials = StoreCredentials(store_name="my-store", access_token="bad")

        with pytest.raises(Unauthorized) as excinfo:
            CatalogExtraction('shopify-admin', credentials, fetcher, {}).run()

        assert "read_products" in excinfo.value.hint
        assert len(fetcher.calls) == 1

    def test_failure_mid_run_discards_products(self, make_fetcher):
        fetcher = make_fetcher([shopify_page(1), HttpStatusError(500)])
        run = CatalogExtraction('shopify', StoreCredentials(store_url="https://shop.example.com"), fetcher, {})

        with pytest.raises(HttpStatusError):
            run.run()
        assert run.pages_fetched == 1

    def test_invalid_input_keeps_hint(self, make_fetcher):
        fetcher = make_fetcher([])
        run = CatalogExtraction('prestashop', StoreCredentials(store_url="https://s.com"), fetcher, {})

        with pytest.raises(InvalidInput) as excinfo:
            run.run()

        assert "webservice" not in excinfo.value.hint
        assert fetcher.calls == []

    def test_unsupported_platform(self, make_fetcher):
        with pytest.raises(InvalidInput, match="Unsupported platform"):
            CatalogExtraction('magento', StoreCredentials(), make_fetcher([]), {}).run()

    def test_runs_are_independent(self, make_fetcher):
        credentials = StoreCredentials(store_url="https://shop.example.com")
        first = CatalogExtraction('shopify', credentials, make_fetcher([shopify_page(1), {'products': []}]), {})
        second = CatalogExtraction('shopify', credentials, make_fetcher([shopify_page(2), {'products': []}]), {})

        assert [p.id for p in first.run().products] == [1]
        assert [p.id for p in second.run().products] == [2]

    def test_unreadable_price_is_malformed(self, make_fetcher):
        page = shopify_page(1)
        page['products'][0]['variants'][0]['price'] = "N/A"
        fetcher = make_fetcher([page])
        run = CatalogExtraction('shopify', StoreCredentials(store_url="https://shop.example.com"), fetcher, {})

        with pytest.raises(MalformedResponse) as excinfo:
            run.run()

        assert "N/A" in excinfo.value.message
        assert isinstance(excinfo.value.__cause__, ValueError)
