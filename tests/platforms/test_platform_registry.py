"""Tests for catalog_extractor/platforms/__init__.py and base helpers"""

import pytest

from catalog_extractor.common.errors import InvalidInput, MalformedResponse
from catalog_extractor.platforms import (
    PLATFORM_ADAPTERS,
    ShopifyAdminAdapter,
    StoreCredentials,
    VtexAdapter,
    get_adapter,
)
from catalog_extractor.platforms.base import expect_dict, expect_list, first_localized, option_values


class TestGetAdapter:
    def test_registry_keys(self):
        assert set(PLATFORM_ADAPTERS) == {
            'shopify', 'shopify-admin', 'prestashop', 'vtex', 'tiendanube', 'woocommerce',
        }

    @pytest.mark.parametrize("platform", sorted(PLATFORM_ADAPTERS))
    def test_adapter_platform_matches_key(self, platform):
        assert get_adapter(platform, fetcher=None, settings={}).platform == platform

    def test_platform_settings_applied(self):
        settings = {'platforms': {'vtex': {'page_size': 50}}}
        adapter = get_adapter('vtex', fetcher=None, settings=settings)
        assert isinstance(adapter, VtexAdapter)
        assert adapter.page_size == 50

    def test_defaults_from_config(self):
        adapter = get_adapter('shopify-admin', fetcher=None)
        assert isinstance(adapter, ShopifyAdminAdapter)
        assert adapter.api_version == '2024-04'

    def test_unsupported(self):
        with pytest.raises(ValueError, match="Unsupported platform"):
            get_adapter('magento', fetcher=None, settings={})


class TestStoreCredentials:
    def test_require_missing(self):
        with pytest.raises(InvalidInput, match="Missing access token"):
            StoreCredentials(store_name="s").require('store_name', 'access_token')

    def test_require_blank(self):
        with pytest.raises(InvalidInput):
            StoreCredentials(store_url="   ").require('store_url')

    def test_require_unknown_field(self):
        with pytest.raises(ValueError):
            StoreCredentials().require('password')

    def test_repr_masks_secrets(self):
        text = repr(StoreCredentials(store_name="s", access_token="shpat_secret"))
        assert "shpat_secret" not in text
        assert "store_name='s'" in text


class TestBaseHelpers:
    def test_expect_list_keyed(self):
        assert expect_list({'products': [{'id': 1}]}, 'products', 'u') == [{'id': 1}]

    def test_expect_list_bare_empty(self):
        assert expect_list([], 'products', 'u') == []

    def test_expect_list_wrong_shape(self):
        with pytest.raises(MalformedResponse):
            expect_list({'products': 'x'}, 'products', 'u')
        with pytest.raises(MalformedResponse):
            expect_list({'a': 1}, None, 'u')

    def test_expect_dict(self):
        assert expect_dict({'product': {'id': 1}}, 'product', 'u') == {'id': 1}
        with pytest.raises(MalformedResponse):
            expect_dict([], 'product', 'u')

    def test_option_values(self):
        assert option_values(['S']) == ['S', None, None]
        assert option_values(['a', '', 'c', 'd']) == ['a', None, 'c']

    def test_first_localized(self):
        assert first_localized({'pt': 'Camisa'}, ['es', 'en', 'pt']) == 'Camisa'
        assert first_localized("Plain", ['es']) == "Plain"
        assert first_localized({}, ['es']) == ''
