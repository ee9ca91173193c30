"""
URL Utilities

Validation and normalization of store URLs and identifiers.
"""

import re
from urllib.parse import urlparse

from .errors import InvalidInput

_STORE_NAME_RE = re.compile(r'^[a-z0-9][a-z0-9-]*$')


def parse_store_url(raw_url: str) -> str:
    """
    Validate a store URL and reduce it to its origin.

    Args:
        raw_url: URL as typed by the user (any path is ignored)

    Returns:
        Origin without trailing slash (e.g., "https://shop.example.com")

    Raises:
        InvalidInput: If the URL has no http(s) scheme or no host
    """
    if not raw_url or not raw_url.strip():
        raise InvalidInput("A store URL is required.")

    parsed = urlparse(raw_url.strip())
    if parsed.scheme not in ('http', 'https') or not parsed.hostname:
        raise InvalidInput(
            f"Invalid store URL: {raw_url!r}.",
            hint="Use the full address, e.g. https://mystore.com",
        )

    origin = f"{parsed.scheme}://{parsed.hostname}"
    if parsed.port:
        origin += f":{parsed.port}"
    return origin


def hostname_identifier(raw_url: str) -> str:
    """
    Get a store identifier from its URL's hostname.

    Example:
        >>> hostname_identifier("https://www.shop.example.com/collections/all")
        'shop.example.com'
    """
    hostname = urlparse(parse_store_url(raw_url)).hostname
    if hostname.startswith('www.'):
        hostname = hostname[len('www.'):]
    return hostname


def normalize_shopify_store_name(store: str) -> str:
    """
    Normalize a Shopify store name.

    Accepts "my-store", "my-store.myshopify.com" or a full admin URL.

    Raises:
        InvalidInput: If no valid store name remains
    """
    if not store or not store.strip():
        raise InvalidInput("A Shopify store name is required.")

    name = store.strip().lower()
    name = name.replace("https://", "").replace("http://", "")
    name = name.split("/")[0]
    if ".myshopify.com" in name:
        name = name.split(".myshopify.com")[0]

    if not _STORE_NAME_RE.match(name):
        raise InvalidInput(
            f"Invalid Shopify store name: {store!r}.",
            hint="Use the name before .myshopify.com, e.g. my-store",
        )
    return name


def validate_account_name(name: str, label: str) -> str:
    """Validate a platform account/user identifier used inside a hostname or path."""
    if not name or not str(name).strip():
        raise InvalidInput(f"A {label} is required.")
    value = str(name).strip()
    if not re.fullmatch(r'[A-Za-z0-9][A-Za-z0-9-]*', value):
        raise InvalidInput(f"Invalid {label}: {name!r}.")
    return value
