"""
PrestaShop Adapter

The webservice has no product listing with details, so extraction is
two-phase: list product ids, then fetch each product (and each of its
combinations) individually, spaced by a fixed delay.
"""

import logging
import time
from typing import Any, Dict, Iterator, List, Optional

from ..common.errors import NotFound
from ..common.url_utils import parse_store_url
from ..models import DEFAULT_VARIANT_TITLE, Product, ProductVariant
from .base import StoreCredentials, expect_dict, expect_list

logger = logging.getLogger(__name__)


def first_language_value(value: Any) -> str:
    """
    Get the first populated translation of a multi-language field.

    The webservice returns ``[{"id": "1", "value": "..."}]`` on
    multi-language shops and a plain string on single-language ones.
    """
    if isinstance(value, list):
        for entry in value:
            if isinstance(entry, dict) and entry.get('value'):
                return str(entry['value'])
        return ''
    return str(value) if value else ''


def _to_int(value: Any) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        return 0


def _to_float(value: Any) -> float:
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


class PrestaShopAdapter:
    """
    PrestaShop webservice catalog.

    Usage:
        adapter = PrestaShopAdapter(fetcher, {'request_delay': 0.25})
        products = extract_all(adapter, StoreCredentials(store_url=..., api_key=...))
    """

    platform = 'prestashop'

    def __init__(self, fetcher, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.fetcher = fetcher
        self.request_delay = settings.get('request_delay', 0.25)
        self.last_request_time = 0.0

    def _rate_limit(self):
        """Keep per-item requests at least ``request_delay`` apart."""
        now = time.time()
        elapsed = now - self.last_request_time

        if elapsed < self.request_delay:
            time.sleep(self.request_delay - elapsed)

        self.last_request_time = time.time()

    def _url(self, origin: str, resource: str, api_key: str) -> str:
        return f"{origin}/api/{resource}?ws_key={api_key}&output_format=JSON"

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        credentials.require('store_url', 'api_key')
        origin = parse_store_url(credentials.store_url)
        api_key = credentials.api_key

        list_url = self._url(origin, 'products', api_key)
        logger.info("Fetching PrestaShop product list")
        listing = expect_list(self.fetcher.fetch(list_url).data, 'products', list_url)
        product_ids = [entry.get('id') for entry in listing if entry.get('id') is not None]
        if not product_ids:
            logger.info("PrestaShop product list is empty")
            return

        for index, product_id in enumerate(product_ids, 1):
            logger.info("Processing product %d of %d", index, len(product_ids))
            product_url = self._url(origin, f"products/{product_id}", api_key)

            self._rate_limit()
            try:
                result = self.fetcher.fetch(product_url)
            except NotFound:
                # Deleted between the listing and this request
                logger.warning("Product %s no longer exists, skipping", product_id)
                continue

            raw = expect_dict(result.data, 'product', product_url)
            yield [self.map_product(raw, origin, api_key)]

    def map_product(self, raw: Dict[str, Any], origin: str, api_key: str) -> Product:
        """Map a webservice product, fetching its combinations."""
        associations = raw.get('associations') or {}
        handle = first_language_value(raw.get('link_rewrite'))

        combinations = associations.get('combinations') or []
        if combinations:
            variants = [
                self._fetch_combination_variant(ref.get('id'), raw, origin, api_key)
                for ref in combinations
            ]
        else:
            variants = [self._default_variant(raw)]

        images = [
            f"{origin}/{image['id']}/{handle}.jpg"
            for image in associations.get('images') or []
            if image.get('id') is not None
        ]

        return Product(
            id=raw.get('id'),
            title=first_language_value(raw.get('name')),
            handle=handle,
            body_html=first_language_value(raw.get('description')),
            vendor=raw.get('manufacturer_name') or 'N/A',
            product_type=raw.get('category_name') or 'N/A',
            created_at=raw.get('date_add') or '',
            published_at=raw.get('date_upd') if str(raw.get('active')) == '1' else None,
            tags=[],
            variants=variants,
            images=images,
        )

    def _fetch_combination_variant(
        self, combination_id: Any, product: Dict[str, Any], origin: str, api_key: str
    ) -> ProductVariant:
        url = self._url(origin, f"combinations/{combination_id}", api_key)
        self._rate_limit()
        combination = expect_dict(self.fetcher.fetch(url).data, 'combination', url)

        price = _to_float(product.get('price')) + _to_float(combination.get('price'))
        option_refs = (combination.get('associations') or {}).get('product_option_values') or []
        options = ' / '.join(f"ID:{ref.get('id')}" for ref in option_refs)

        return ProductVariant(
            id=combination.get('id'),
            title=options,
            price=f"{max(price, 0.0):.2f}",
            compare_at_price=None,
            sku=combination.get('reference') or '',
            available=_to_int(combination.get('quantity')) > 0,
            option1=options or None,
        )

    def _default_variant(self, product: Dict[str, Any]) -> ProductVariant:
        """Single variant for products without combinations."""
        return ProductVariant(
            id=product.get('id'),
            title=DEFAULT_VARIANT_TITLE,
            price=f"{_to_float(product.get('price')):.2f}",
            compare_at_price=None,
            sku=product.get('reference') or '',
            available=_to_int(product.get('quantity')) > 0,
        )
