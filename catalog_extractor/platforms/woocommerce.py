"""
WooCommerce Adapter

REST API v3 paged with ``page``/``per_page`` and authenticated with a
consumer key/secret pair in the query string. Variable products expose
their variations either embedded or as ids resolved with one extra call.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional
from urllib.parse import urlencode

from ..common.url_utils import parse_store_url
from ..models import DEFAULT_VARIANT_TITLE, Product, ProductVariant, build_variant_title
from .base import StoreCredentials, expect_list, option_values, price_or_none

logger = logging.getLogger(__name__)


def _attribute_values(attributes: Any) -> List[Any]:
    """Values of a variation's attributes, in iteration order."""
    if isinstance(attributes, dict):
        return list(attributes.values())
    values = []
    for attribute in attributes or []:
        if isinstance(attribute, dict):
            values.append(attribute.get('option', attribute.get('value')))
        else:
            values.append(attribute)
    return values


def _pricing(raw: Dict[str, Any]):
    """Current price and, when on sale, the regular price as compare-at."""
    regular = price_or_none(raw.get('regular_price'))
    price = price_or_none(raw.get('price')) or regular or '0'
    on_sale = price_or_none(raw.get('sale_price')) is not None
    compare_at = regular if on_sale and regular and regular != price else None
    return price, compare_at


def map_woocommerce_variation(raw: Dict[str, Any]) -> ProductVariant:
    option1, option2, option3 = option_values(_attribute_values(raw.get('attributes')))
    price, compare_at = _pricing(raw)
    return ProductVariant(
        id=raw.get('id'),
        title=build_variant_title([option1, option2, option3]),
        price=price,
        compare_at_price=compare_at,
        sku=raw.get('sku') or '',
        available=raw.get('stock_status') == 'instock',
        option1=option1,
        option2=option2,
        option3=option3,
    )


def map_woocommerce_product(raw: Dict[str, Any], variations: List[Dict[str, Any]]) -> Product:
    """
    Map a product and its variation records.

    Simple products (no variation records) get one default variant
    built from the top-level record.
    """
    if variations:
        variants = [map_woocommerce_variation(v) for v in variations]
    else:
        price, compare_at = _pricing(raw)
        variants = [ProductVariant(
            id=raw.get('id'),
            title=DEFAULT_VARIANT_TITLE,
            price=price,
            compare_at_price=compare_at,
            sku=raw.get('sku') or '',
            available=raw.get('stock_status') == 'instock',
        )]

    categories = raw.get('categories') or []
    brands = raw.get('brands') or []

    return Product(
        id=raw.get('id'),
        title=raw.get('name') or '',
        handle=raw.get('slug') or '',
        body_html=raw.get('description') or '',
        vendor=(brands[0].get('name') if brands else None) or 'N/A',
        product_type=(categories[0].get('name') if categories else None) or 'N/A',
        created_at=raw.get('date_created') or '',
        published_at=raw.get('date_created') if raw.get('status') == 'publish' else None,
        tags=[tag.get('name') for tag in raw.get('tags') or [] if tag.get('name')],
        variants=variants,
        images=[img.get('src') for img in raw.get('images') or [] if img.get('src')],
    )


class WooCommerceAdapter:
    """WooCommerce REST catalog."""

    platform = 'woocommerce'

    def __init__(self, fetcher, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.fetcher = fetcher
        self.page_size = settings.get('page_size', 100)
        self.api_path = settings.get('api_path', 'wp-json/wc/v3').strip('/')

    def _url(self, origin: str, resource: str, credentials: StoreCredentials, **params) -> str:
        query = {
            'consumer_key': credentials.consumer_key,
            'consumer_secret': credentials.consumer_secret,
        }
        query.update(params)
        return f"{origin}/{self.api_path}/{resource}?{urlencode(query)}"

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        credentials.require('store_url', 'consumer_key', 'consumer_secret')
        origin = parse_store_url(credentials.store_url)

        page = 1
        total = 0
        while True:
            url = self._url(origin, 'products', credentials, page=page, per_page=self.page_size)
            logger.info("Fetching WooCommerce page %d", page)
            records = expect_list(self.fetcher.fetch(url).data, None, url)
            if not records:
                break

            batch = [
                map_woocommerce_product(raw, self._variations(raw, origin, credentials))
                for raw in records
            ]
            total += len(batch)
            logger.info("Found %d products so far", total)
            yield batch
            page += 1

    def _variations(
        self, raw: Dict[str, Any], origin: str, credentials: StoreCredentials
    ) -> List[Dict[str, Any]]:
        """Resolve a product's variation records, fetching them when only ids are listed."""
        variations = raw.get('variations') or []
        if not variations:
            return []
        if all(isinstance(v, dict) for v in variations):
            return variations

        logger.debug("Fetching %d variations of product %s", len(variations), raw.get('id'))
        records: List[Dict[str, Any]] = []
        page = 1
        while True:
            url = self._url(
                origin, f"products/{raw.get('id')}/variations", credentials,
                page=page, per_page=self.page_size,
            )
            batch = expect_list(self.fetcher.fetch(url).data, None, url)
            if not batch:
                break
            records.extend(batch)
            page += 1
        return records
