"""
VTEX Adapter

Catalog search API paged by ``_from``/``_to`` offsets. Each product
carries its SKUs ("items"); price and stock live in the first seller's
commercial offer.
"""

import logging
from typing import Any, Dict, Iterator, List, Optional

from ..common.url_utils import validate_account_name
from ..models import Product, ProductVariant, build_variant_title
from .base import StoreCredentials, expect_list, option_values, price_or_none

logger = logging.getLogger(__name__)

SEARCH_PATH = "api/catalog_system/pub/products/search"


def _commercial_offer(item: Dict[str, Any]) -> Dict[str, Any]:
    sellers = item.get('sellers') or []
    if not sellers:
        return {}
    return sellers[0].get('commertialOffer') or {}


def _specification_names(product: Dict[str, Any], item: Dict[str, Any]) -> List[str]:
    """
    Names of the SKU-level specifications, in display order.

    Prefers the product's ``skuSpecifications``; falls back to the item's
    own ``variations`` list.
    """
    names = []
    for spec in product.get('skuSpecifications') or []:
        name = (spec.get('field') or {}).get('name')
        if name:
            names.append(name)
    return names or list(item.get('variations') or [])


def _attribute_value(item: Dict[str, Any], name: str) -> Optional[str]:
    value = item.get(name)
    if isinstance(value, list):
        return str(value[0]) if value else None
    return str(value) if value not in (None, '') else None


def _category_label(product: Dict[str, Any]) -> str:
    """Deepest segment of the first category path ("/Ropa/Camisas/" -> "Camisas")."""
    categories = product.get('categories') or []
    if not categories:
        return ''
    segments = [segment for segment in str(categories[0]).split('/') if segment]
    return segments[-1] if segments else ''


def map_vtex_item(product: Dict[str, Any], item: Dict[str, Any]) -> ProductVariant:
    offer = _commercial_offer(item)
    names = _specification_names(product, item)
    option1, option2, option3 = option_values(_attribute_value(item, name) for name in names)

    price = price_or_none(offer.get('Price')) or '0'
    list_price = offer.get('ListPrice')
    compare_at = None
    if list_price is not None and float(list_price) > float(price):
        compare_at = str(list_price)

    references = item.get('referenceId') or []
    sku = references[0].get('Value') if references else ''

    return ProductVariant(
        id=item.get('itemId'),
        title=build_variant_title([option1, option2, option3]),
        price=price,
        compare_at_price=compare_at,
        sku=sku or '',
        available=(offer.get('AvailableQuantity') or 0) > 0,
        option1=option1,
        option2=option2,
        option3=option3,
    )


def map_vtex_product(raw: Dict[str, Any]) -> Product:
    items = raw.get('items') or []

    images: List[str] = []
    for item in items:
        for image in item.get('images') or []:
            url = image.get('imageUrl')
            if url and url not in images:
                images.append(url)

    clusters = raw.get('productClusters') or {}
    tags = list(clusters.values()) if isinstance(clusters, dict) else list(clusters)

    return Product(
        id=raw.get('productId'),
        title=raw.get('productName') or '',
        handle=raw.get('linkText') or '',
        body_html=raw.get('description') or '',
        vendor=raw.get('brand') or '',
        product_type=_category_label(raw),
        created_at=raw.get('releaseDate') or '',
        published_at=raw.get('releaseDate'),
        tags=tags,
        variants=[map_vtex_item(raw, item) for item in items],
        images=images,
    )


class VtexAdapter:
    """VTEX catalog search, authenticated with an app key/token pair."""

    platform = 'vtex'

    def __init__(self, fetcher, settings: Optional[Dict[str, Any]] = None):
        settings = settings or {}
        self.fetcher = fetcher
        self.page_size = settings.get('page_size', 100)
        self.environment = settings.get('environment', 'vtexcommercestable.com.br')

    def page_url(self, account: str, offset: int) -> str:
        return (
            f"https://{account}.{self.environment}/{SEARCH_PATH}"
            f"?_from={offset}&_to={offset + self.page_size - 1}"
        )

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        credentials.require('account_name', 'app_key', 'app_token')
        account = validate_account_name(credentials.account_name, 'VTEX account name')
        headers = {
            'X-VTEX-API-AppKey': credentials.app_key,
            'X-VTEX-API-AppToken': credentials.app_token,
        }

        offset = 0
        total = 0
        while True:
            url = self.page_url(account, offset)
            logger.info("Fetching VTEX products %d-%d", offset, offset + self.page_size - 1)
            records = expect_list(self.fetcher.fetch(url, headers=headers).data, None, url)
            if not records:
                break

            batch = [map_vtex_product(raw) for raw in records]
            total += len(batch)
            logger.info("Found %d products so far", total)
            yield batch
            offset += self.page_size
