"""
HTTP fetching.

Modules:
    http_fetcher - Direct, relay and public-relay-chain fetchers
"""

from .http_fetcher import (
    NEXT_PAGE_HEADER,
    DirectFetcher,
    FetchResult,
    ProxyChainFetcher,
    RelayFetcher,
    build_fetcher,
    classify_response,
    parse_next_link,
)

__all__ = [
    'NEXT_PAGE_HEADER',
    'DirectFetcher',
    'FetchResult',
    'ProxyChainFetcher',
    'RelayFetcher',
    'build_fetcher',
    'classify_response',
    'parse_next_link',
]
