"""
Adapter interface and shared mapping helpers.

Adapters are independent classes that satisfy ``CatalogAdapter``; the only
thing they share is the output contract, so there is no base class.
"""

from dataclasses import dataclass, fields
from typing import Any, Dict, Iterable, Iterator, List, Optional, Protocol

from ..common.errors import InvalidInput, MalformedResponse
from ..models import Product


@dataclass
class StoreCredentials:
    """
    Everything a user may supply to reach a store.

    Each adapter uses a subset and checks it with ``require``.
    """
    store_url: str = ""          # shopify, prestashop, woocommerce
    store_name: str = ""         # shopify-admin (name before .myshopify.com)
    access_token: str = ""       # shopify-admin, tiendanube
    api_key: str = ""            # prestashop webservice key
    user_id: str = ""            # tiendanube store id
    account_name: str = ""       # vtex account
    app_key: str = ""            # vtex
    app_token: str = ""          # vtex
    consumer_key: str = ""       # woocommerce
    consumer_secret: str = ""    # woocommerce

    def require(self, *names: str) -> None:
        """
        Check that the named credentials are present.

        Raises:
            InvalidInput: Naming the first missing credential
        """
        known = {f.name for f in fields(self)}
        for name in names:
            if name not in known:
                raise ValueError(f"Unknown credential: {name}")
            value = getattr(self, name)
            if not value or not str(value).strip():
                label = name.replace('_', ' ')
                raise InvalidInput(f"Missing {label}.", hint=f"Provide the store's {label}.")

    def __repr__(self) -> str:
        # Never leak secrets into logs or tracebacks
        shown = ', '.join(
            f"{f.name}={'***' if f.name in _SECRET_FIELDS else getattr(self, f.name)!r}"
            for f in fields(self) if getattr(self, f.name)
        )
        return f"StoreCredentials({shown})"


_SECRET_FIELDS = {'access_token', 'api_key', 'app_key', 'app_token', 'consumer_key', 'consumer_secret'}


class CatalogAdapter(Protocol):
    """Interface every platform adapter implements."""

    platform: str

    def iter_batches(self, credentials: StoreCredentials) -> Iterator[List[Product]]:
        """Yield canonical products one page (or item) at a time."""
        ...


def extract_all(adapter: CatalogAdapter, credentials: StoreCredentials) -> List[Product]:
    """Drain an adapter into a single list, starting pagination from scratch."""
    products: List[Product] = []
    for batch in adapter.iter_batches(credentials):
        products.extend(batch)
    return products


def expect_list(data: Any, key: Optional[str], url: str) -> List[Dict[str, Any]]:
    """
    Pull a record list out of a JSON body.

    Args:
        data: Parsed JSON body
        key: Wrapping key (e.g., "products"), or None when the body is the list
        url: Requested URL, for the error message

    Raises:
        MalformedResponse: If the body does not have the expected shape
    """
    if key is not None:
        if isinstance(data, dict):
            data = data.get(key) or []
        elif data == []:
            # Some APIs answer an empty collection with a bare list
            return []
        else:
            raise MalformedResponse(f"Unexpected response shape from {url}: missing '{key}'.")

    if not isinstance(data, list):
        raise MalformedResponse(f"Unexpected response shape from {url}: expected a list.")
    return data


def expect_dict(data: Any, key: str, url: str) -> Dict[str, Any]:
    """Pull a single record out of a JSON body."""
    record = data.get(key) if isinstance(data, dict) else None
    if not isinstance(record, dict):
        raise MalformedResponse(f"Unexpected response shape from {url}: missing '{key}'.")
    return record


def price_or_none(value: Any) -> Optional[str]:
    """Stringify a price, treating None and blank as absent."""
    if value is None or str(value).strip() == '':
        return None
    return str(value)


def option_values(values: Iterable[Any]) -> List[Optional[str]]:
    """Pad/truncate option values to exactly three, blanks as None."""
    result = [str(v) if v not in (None, '') else None for v in list(values)[:3]]
    return result + [None] * (3 - len(result))


def first_localized(value: Any, locales: Iterable[str]) -> str:
    """
    Pick the first populated locale from a localized field.

    Example:
        >>> first_localized({'en': 'Shirt', 'es': ''}, ['es', 'en', 'pt'])
        'Shirt'
    """
    if value is None:
        return ''
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        for locale in locales:
            if value.get(locale):
                return str(value[locale])
        return ''
    return str(value)
