"""
Platform adapters.

Modules:
    base        - StoreCredentials, the CatalogAdapter interface, mapping helpers
    shopify     - Shopify storefront feed and Admin API
    prestashop  - PrestaShop webservice (list then per-item)
    vtex        - VTEX catalog search (offset paging)
    tiendanube  - Tiendanube REST API
    woocommerce - WooCommerce REST API
"""

from typing import Any, Dict, Optional

from ..common.config_loader import get_platform_settings
from .base import CatalogAdapter, StoreCredentials, extract_all
from .prestashop import PrestaShopAdapter
from .shopify import ShopifyAdminAdapter, ShopifyPublicAdapter
from .tiendanube import TiendanubeAdapter
from .vtex import VtexAdapter
from .woocommerce import WooCommerceAdapter

# Registry of supported platforms
PLATFORM_ADAPTERS = {
    'shopify': ShopifyPublicAdapter,
    'shopify-admin': ShopifyAdminAdapter,
    'prestashop': PrestaShopAdapter,
    'vtex': VtexAdapter,
    'tiendanube': TiendanubeAdapter,
    'woocommerce': WooCommerceAdapter,
}


def get_adapter(platform: str, fetcher, settings: Optional[Dict[str, Any]] = None) -> CatalogAdapter:
    """
    Build the adapter for a platform.

    Args:
        platform: Registry key (e.g., 'shopify', 'vtex')
        fetcher: Fetcher every request goes through
        settings: Full settings dict (if None, loads from config)

    Raises:
        ValueError: If platform is not supported
    """
    adapter_class = PLATFORM_ADAPTERS.get(platform)
    if adapter_class is None:
        supported = ', '.join(PLATFORM_ADAPTERS)
        raise ValueError(f"Unsupported platform: {platform}. Supported: {supported}")
    return adapter_class(fetcher, get_platform_settings(settings, platform))


__all__ = [
    'PLATFORM_ADAPTERS',
    'CatalogAdapter',
    'StoreCredentials',
    'extract_all',
    'get_adapter',
    'PrestaShopAdapter',
    'ShopifyAdminAdapter',
    'ShopifyPublicAdapter',
    'TiendanubeAdapter',
    'VtexAdapter',
    'WooCommerceAdapter',
]
