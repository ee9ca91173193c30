"""
Shopify Adapters

Two ways into a Shopify catalog:
- ShopifyPublicAdapter: the storefront ``/products.json`` feed, paged by number
- ShopifyAdminAdapter: the Admin REST API, paged by ``Link: rel="next"`` cursor
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from ..common.url_utils import normalize_shopify_store_name, parse_store_url
from ..models import Product, ProductVariant
from .base import StoreCredentials, expect_list, option_values, price_or_none

logger = logging.getLogger(__name__)


def map_shopify_variant(raw: Dict[str, Any], available: bool) -> ProductVariant:
    """Map a Shopify variant with minimal transformation."""
    option1, option2, option3 = option_values(
        [raw.get('option1'), raw.get('option2'), raw.get('option3')]
    )
    return ProductVariant(
        id=raw.get('id'),
        title=raw.get('title') or '',
        price=price_or_none(raw.get('price')) or '0',
        compare_at_price=price_or_none(raw.get('compare_at_price')),
        sku=raw.get('sku') or '',
        available=available,
        option1=option1,
        option2=option2,
        option3=option3,
    )


def map_shopify_product(raw: Dict[str, Any], admin: bool = False) -> Product:
    """
    Map a Shopify product payload.

    The storefront feed and the Admin API share a shape except for
    ``tags`` (list vs. comma string) and variant availability.
    """
    is_available = _admin_variant_available if admin else _public_variant_available
    return Product(
        id=raw.get('id'),
        title=raw.get('title') or '',
        handle=raw.get('handle') or '',
        body_html=raw.get('body_html') or '',
        vendor=raw.get('vendor') or '',
        product_type=raw.get('product_type') or '',
        created_at=raw.get('created_at') or '',
        published_at=raw.get('published_at'),
        tags=raw.get('tags'),
        variants=[map_shopify_variant(v, is_available(v)) for v in raw.get('variants') or []],
        images=[img.get('src') for img in raw.get('images') or [] if img.get('src')],
    )


def _public_variant_available(raw: Dict[str, Any]) -> bool:
    return bool(raw.get('available'))


def _admin_variant_available(raw: Dict[str, Any]) -> bool:
    """Admin variants carry inventory data instead of an ``available`` flag."""
    if 'available' in raw:
        return bool(raw['available'])
    if not raw.get('inventory_management'):
        return True
    if raw.get('inventory_policy') == 'continue':
        return True
    return (raw.get('inventory_quantity') or 0) > 0


class ShopifyPublicAdapter:
    """
    Public storefront catalog.

    Pages ``/products.json?limit=250&page=N`` from 1 until a page comes
    back empty. No credentials beyond the store URL.
    """

    platform = 'shopify'

    def __init__(self, fetcher, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.fetcher = fetcher
        self.page_size = settings.get('page_size', 250)

    def page_url(self, origin: str, page: int) -> str:
        return f"{origin}/products.json?limit={self.page_size}&page={page}"

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        credentials.require('store_url')
        origin = parse_store_url(credentials.store_url)

        page = 1
        total = 0
        while True:
            url = self.page_url(origin, page)
            logger.info("Fetching Shopify storefront page %d", page)
            result = self.fetcher.fetch(url)
            records = expect_list(result.data, 'products', url)
            if not records:
                break

            batch = [map_shopify_product(raw) for raw in records]
            total += len(batch)
            logger.info("Found %d products so far", total)
            yield batch
            page += 1


class ShopifyAdminAdapter:
    """
    Private Admin REST API.

    Follows the continuation URL the fetcher extracts from the ``Link``
    header until none is returned. Authenticated with an Admin API token.
    """

    platform = 'shopify-admin'

    API_VERSION = '2024-04'

    def __init__(self, fetcher, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.fetcher = fetcher
        self.page_size = settings.get('page_size', 250)
        self.api_version = settings.get('api_version', self.API_VERSION)

    def first_page_url(self, store_name: str) -> str:
        return (
            f"https://{store_name}.myshopify.com/admin/api/{self.api_version}"
            f"/products.json?limit={self.page_size}"
        )

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        credentials.require('store_name', 'access_token')
        store_name = normalize_shopify_store_name(credentials.store_name)
        headers = {'X-Shopify-Access-Token': credentials.access_token}

        next_url: Optional[str] = self.first_page_url(store_name)
        page = 0
        total = 0
        while next_url:
            page += 1
            logger.info("Fetching Shopify Admin page %d", page)
            result = self.fetcher.fetch(next_url, headers=headers)
            records = expect_list(result.data, 'products', next_url)

            if records:
                batch = [map_shopify_product(raw, admin=True) for raw in records]
                total += len(batch)
                logger.info("Found %d products so far", total)
                yield batch

            next_url = result.continuation
