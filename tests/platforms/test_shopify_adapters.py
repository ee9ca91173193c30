"""Tests for catalog_extractor/platforms/shopify.py"""

import pytest

from catalog_extractor.common.errors import InvalidInput, MalformedResponse, Unauthorized
from catalog_extractor.fetching import FetchResult
from catalog_extractor.platforms import ShopifyAdminAdapter, ShopifyPublicAdapter, StoreCredentials, extract_all
from catalog_extractor.platforms.shopify import map_shopify_product


def shopify_product(product_id, variants=None, **overrides):
    raw = {
        'id': product_id,
        'title': f"Product {product_id}",
        'handle': f"product-{product_id}",
        'body_html': "<p>Body</p>",
        'vendor': "Acme",
        'product_type': "Shirts",
        'created_at': "2024-01-01T00:00:00Z",
        'published_at': "2024-01-02T00:00:00Z",
        'tags': ["summer", "sale"],
        'variants': variants if variants is not None else [{
            'id': product_id * 10, 'title': "Default Title", 'price': "19.99",
            'compare_at_price': None, 'sku': "SKU", 'available': True,
            'option1': "Default Title", 'option2': None, 'option3': None,
        }],
        'images': [{'src': f"https://cdn.shopify.com/{product_id}.jpg?v=1"}],
    }
    raw.update(overrides)
    return raw


def page(start, count):
    return {'products': [shopify_product(i) for i in range(start, start + count)]}


class TestMapShopifyProduct:
    def test_public_payload(self):
        product = map_shopify_product(shopify_product(1))

        assert product.id == 1
        assert product.handle == "product-1"
        assert product.tags == ["summer", "sale"]
        assert product.images == ["https://cdn.shopify.com/1.jpg?v=1"]
        assert product.variants[0].price == "19.99"
        assert product.variants[0].available is True

    def test_admin_comma_tags(self):
        product = map_shopify_product(shopify_product(1, tags="a, b"), admin=True)
        assert product.tags == ["a", "b"]

    def test_unpublished(self):
        product = map_shopify_product(shopify_product(1, published_at=None))
        assert product.published_at is None

    @pytest.mark.parametrize("variant, expected", [
        ({'inventory_management': None}, True),
        ({'inventory_management': 'shopify', 'inventory_policy': 'continue', 'inventory_quantity': 0}, True),
        ({'inventory_management': 'shopify', 'inventory_policy': 'deny', 'inventory_quantity': 3}, True),
        ({'inventory_management': 'shopify', 'inventory_policy': 'deny', 'inventory_quantity': 0}, False),
    ])
    def test_admin_availability(self, variant, expected):
        variant = dict(variant, id=1, title="Default Title", price="5.00")
        product = map_shopify_product(shopify_product(1, variants=[variant]), admin=True)
        assert product.variants[0].available is expected

    def test_missing_sku_and_options(self):
        variant = {'id': 5, 'title': "Default Title", 'price': "5.00", 'sku': None, 'option1': ""}
        product = map_shopify_product(shopify_product(1, variants=[variant]))
        assert product.variants[0].sku == ""
        assert product.variants[0].option1 is None


class TestShopifyPublicAdapter:
    def test_pages_until_empty(self, make_fetcher):
        fetcher = make_fetcher([page(1, 250), page(251, 37), {'products': []}])
        adapter = ShopifyPublicAdapter(fetcher)

        products = extract_all(adapter, StoreCredentials(store_url="https://shop.example.com/collections/all"))

        assert len(products) == 287
        assert fetcher.urls == [
            "https://shop.example.com/products.json?limit=250&page=1",
            "https://shop.example.com/products.json?limit=250&page=2",
            "https://shop.example.com/products.json?limit=250&page=3",
        ]
        assert all(headers is None for _, headers in fetcher.calls)

    def test_preserves_source_order(self, make_fetcher):
        fetcher = make_fetcher([page(1, 3), {'products': []}])
        products = extract_all(ShopifyPublicAdapter(fetcher), StoreCredentials(store_url="https://s.com"))
        assert [p.id for p in products] == [1, 2, 3]

    def test_yields_one_batch_per_page(self, make_fetcher):
        fetcher = make_fetcher([page(1, 2), page(3, 1), {'products': []}])
        batches = list(ShopifyPublicAdapter(fetcher).iter_batches(StoreCredentials(store_url="https://s.com")))
        assert [len(batch) for batch in batches] == [2, 1]

    def test_unauthorized_propagates(self, make_fetcher):
        fetcher = make_fetcher([Unauthorized(401)])
        with pytest.raises(Unauthorized):
            extract_all(ShopifyPublicAdapter(fetcher), StoreCredentials(store_url="https://s.com"))

    def test_requires_store_url(self, make_fetcher):
        with pytest.raises(InvalidInput, match="store url"):
            extract_all(ShopifyPublicAdapter(make_fetcher([])), StoreCredentials())

    def test_missing_products_key_ends_paging(self, make_fetcher):
        fetcher = make_fetcher([{'unexpected': True}])
        products = extract_all(ShopifyPublicAdapter(fetcher), StoreCredentials(store_url="https://s.com"))
        assert products == []

    def test_non_json_shape(self, make_fetcher):
        fetcher = make_fetcher(["not a catalog"])
        with pytest.raises(MalformedResponse):
            extract_all(ShopifyPublicAdapter(fetcher), StoreCredentials(store_url="https://s.com"))


class TestShopifyAdminAdapter:
    def test_follows_continuation(self, make_fetcher):
        fetcher = make_fetcher([
            FetchResult(page(1, 2), continuation="https://my-store.myshopify.com/next?page_info=abc"),
            FetchResult(page(3, 1), continuation=None),
        ])
        credentials = StoreCredentials(store_name="My-Store.myshopify.com", access_token="shpat_123")

        products = extract_all(ShopifyAdminAdapter(fetcher), credentials)

        assert [p.id for p in products] == [1, 2, 3]
        assert fetcher.urls == [
            "https://my-store.myshopify.com/admin/api/2024-04/products.json?limit=250",
            "https://my-store.myshopify.com/next?page_info=abc",
        ]
        assert all(headers == {'X-Shopify-Access-Token': "shpat_123"} for _, headers in fetcher.calls)

    def test_api_version_from_settings(self, make_fetcher):
        fetcher = make_fetcher([{'products': []}])
        adapter = ShopifyAdminAdapter(fetcher, {'api_version': '2025-01'})
        extract_all(adapter, StoreCredentials(store_name="s", access_token="t"))
        assert "/admin/api/2025-01/" in fetcher.urls[0]

    def test_bad_token_yields_nothing(self, make_fetcher):
        fetcher = make_fetcher([Unauthorized(401)])
        adapter = ShopifyAdminAdapter(fetcher)
        batches = adapter.iter_batches(StoreCredentials(store_name="s", access_token="bad"))

        with pytest.raises(Unauthorized):
            next(batches)

    def test_requires_token(self, make_fetcher):
        with pytest.raises(InvalidInput, match="access token"):
            extract_all(ShopifyAdminAdapter(make_fetcher([])), StoreCredentials(store_name="s"))

    def test_rejects_bad_store_name(self, make_fetcher):
        fetcher = make_fetcher([])
        with pytest.raises(InvalidInput):
            extract_all(ShopifyAdminAdapter(fetcher), StoreCredentials(store_name="bad name", access_token="t"))
        assert fetcher.calls == []
