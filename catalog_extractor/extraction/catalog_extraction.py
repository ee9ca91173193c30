"""
Catalog Extraction Run

Coordinates one extraction: validates input, drives the platform adapter,
accumulates products and turns failures into one user-facing error.

All state belongs to the run object; nothing is shared between runs.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from ..common.errors import CatalogError, EmptyResult, InvalidInput, MalformedResponse
from ..common.url_utils import hostname_identifier, normalize_shopify_store_name
from ..models import Product
from ..platforms import StoreCredentials, get_adapter

logger = logging.getLogger(__name__)

FALLBACK_IDENTIFIER = 'export'

# Extra remediation advice appended to failures, per platform
PLATFORM_HINTS = {
    'prestashop': (
        "Also check that the webservice is enabled and the API key has "
        "read access to products and combinations."
    ),
    'shopify-admin': (
        "Check that the custom app has the read_products scope."
    ),
    'woocommerce': (
        "Check that the REST API keys have read permission."
    ),
}


def store_identifier(platform: str, credentials: StoreCredentials) -> str:
    """
    Derive the store identifier used in export filenames.

    Returns the hostname (without "www.") for URL-based platforms, the
    store or account name otherwise, and "export" when nothing parses.
    """
    try:
        if platform == 'shopify-admin':
            return normalize_shopify_store_name(credentials.store_name)
        if platform == 'vtex':
            return credentials.account_name.strip() or FALLBACK_IDENTIFIER
        if platform == 'tiendanube':
            return credentials.user_id.strip() or 'tiendanube-user'
        return hostname_identifier(credentials.store_url)
    except InvalidInput:
        return FALLBACK_IDENTIFIER


@dataclass
class ExtractionResult:
    """Products of one completed run."""
    platform: str
    store_identifier: str
    products: List[Product] = field(default_factory=list)

    @property
    def variant_count(self) -> int:
        return sum(len(p.variants) for p in self.products)


class CatalogExtraction:
    """
    One extraction run.

    Usage:
        run = CatalogExtraction('shopify', StoreCredentials(store_url=url), fetcher)
        result = run.run()
    """

    def __init__(
        self,
        platform: str,
        credentials: StoreCredentials,
        fetcher,
        settings: Optional[Dict[str, Any]] = None,
    ):
        self.platform = platform
        self.credentials = credentials
        self.fetcher = fetcher
        self.settings = settings
        self.pages_fetched = 0

    def run(self) -> ExtractionResult:
        """
        Extract the full catalog.

        Raises:
            InvalidInput: Before any request, on bad store details
            EmptyResult: If the store returned no products
            CatalogError: The first fatal fetch/adapter error, with a hint
        """
        try:
            adapter = get_adapter(self.platform, self.fetcher, self.settings)
        except ValueError as e:
            raise InvalidInput(str(e))

        logger.info("Starting %s extraction", self.platform)
        products: List[Product] = []
        try:
            self._drain(adapter, products)
        except CatalogError as e:
            # No partial results: the accumulated products die with this frame
            logger.error("Extraction failed after %d products: %s", len(products), e.message)
            extra = PLATFORM_HINTS.get(self.platform)
            if extra and not isinstance(e, InvalidInput):
                e.with_hint(f"{e.hint} {extra}".strip())
            raise

        if not products:
            raise EmptyResult("No products found.")

        result = ExtractionResult(
            platform=self.platform,
            store_identifier=store_identifier(self.platform, self.credentials),
            products=products,
        )
        logger.info("Extracted %d products (%d variants)", len(products), result.variant_count)
        return result

    def _drain(self, adapter, products: List[Product]) -> None:
        """Accumulate every batch; records that fail model validation are malformed data."""
        try:
            for batch in adapter.iter_batches(self.credentials):
                self.pages_fetched += 1
                products.extend(batch)
        except ValueError as e:
            raise MalformedResponse(f"Unreadable product data: {e}") from e
