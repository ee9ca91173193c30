"""
Tiendanube Adapter

REST catalog paged with ``page``/``per_page``. Text fields are localized
objects (``{"es": ..., "en": ..., "pt": ...}``) and tags arrive as a
comma-separated string.
"""

import logging
from typing import Any, Dict, Iterable, Iterator, List, Optional

from ..common.errors import NotFound
from ..common.url_utils import validate_account_name
from ..models import Product, ProductVariant, build_variant_title
from .base import StoreCredentials, expect_list, first_localized, option_values, price_or_none

logger = logging.getLogger(__name__)

DEFAULT_LOCALES = ('es', 'en', 'pt')


def map_tiendanube_variant(raw: Dict[str, Any], locales: Iterable[str]) -> ProductVariant:
    regular = price_or_none(raw.get('price')) or '0'
    promotional = price_or_none(raw.get('promotional_price'))

    attribute_values = raw.get('values') or raw.get('attribute_values') or []
    option1, option2, option3 = option_values(
        first_localized(value, locales) for value in attribute_values
    )

    if raw.get('stock_management'):
        available = (raw.get('stock') or 0) > 0
    else:
        available = True

    return ProductVariant(
        id=raw.get('id'),
        title=build_variant_title([option1, option2, option3]),
        price=promotional or regular,
        compare_at_price=regular if promotional else None,
        sku=raw.get('sku') or '',
        available=available,
        option1=option1,
        option2=option2,
        option3=option3,
    )


def map_tiendanube_product(raw: Dict[str, Any], locales: Iterable[str] = DEFAULT_LOCALES) -> Product:
    locales = list(locales)
    categories = raw.get('categories') or []
    category = first_localized(categories[0].get('name'), locales) if categories else ''

    published_at = None
    if raw.get('published'):
        published_at = raw.get('published_at') or raw.get('updated_at')

    return Product(
        id=raw.get('id'),
        title=first_localized(raw.get('name'), locales),
        handle=first_localized(raw.get('handle'), locales),
        body_html=first_localized(raw.get('description'), locales),
        vendor=raw.get('brand') or 'N/A',
        product_type=category or 'N/A',
        created_at=raw.get('created_at') or '',
        published_at=published_at,
        tags=raw.get('tags') or '',
        variants=[map_tiendanube_variant(v, locales) for v in raw.get('variants') or []],
        images=[img.get('src') for img in raw.get('images') or [] if img.get('src')],
    )


class TiendanubeAdapter:
    """Tiendanube REST catalog, authenticated with a bearer token."""

    platform = 'tiendanube'

    def __init__(self, fetcher, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.fetcher = fetcher
        self.page_size = settings.get('page_size', 200)
        self.api_base = settings.get('api_base', 'https://api.tiendanube.com/v1').rstrip('/')
        self.locales = settings.get('locales') or list(DEFAULT_LOCALES)
        self.user_agent = settings.get('user_agent', 'Catalog Product Extractor')

    def page_url(self, user_id: str, page: int) -> str:
        return f"{self.api_base}/{user_id}/products?page={page}&per_page={self.page_size}"

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        credentials.require('user_id', 'access_token')
        user_id = validate_account_name(credentials.user_id, 'Tiendanube store id')
        headers = {
            'Authentication': f"bearer {credentials.access_token}",
            'User-Agent': self.user_agent,
        }

        page = 1
        total = 0
        while True:
            url = self.page_url(user_id, page)
            logger.info("Fetching Tiendanube page %d", page)
            try:
                result = self.fetcher.fetch(url, headers=headers)
            except NotFound:
                # Past the last page the API answers 404 ("Last page is N")
                if page == 1:
                    raise
                break

            records = expect_list(result.data, None, url)
            if not records:
                break

            batch = [map_tiendanube_product(raw, self.locales) for raw in records]
            total += len(batch)
            logger.info("Found %d products so far", total)
            yield batch
            page += 1
