"""
HTTP Fetchers

Issue catalog requests, enforce a bounded wait and classify failures.

Three strategies share one contract, ``fetch(url, headers) -> FetchResult``:
- DirectFetcher: requests the upstream itself (server-side / CLI use)
- RelayFetcher: forwards through the backend relay endpoint
- ProxyChainFetcher: tries an ordered list of public relays
"""

import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional
from urllib.parse import quote, urljoin

import requests
from requests.utils import parse_header_links

from ..common.config_loader import DEFAULT_TIMEOUT, get_fetch_timeout
from ..common.errors import (
    AllProxiesFailed,
    CatalogError,
    HttpStatusError,
    MalformedResponse,
    NetworkUnreachable,
    NotFound,
    RequestTimeout,
    Unauthorized,
    UpstreamRedirect,
)

logger = logging.getLogger(__name__)

# Response header the relay uses to re-expose the upstream "next page" link
NEXT_PAGE_HEADER = "X-Next-Page-Url"

DEFAULT_USER_AGENT = "Catalog-Product-Extractor/1.0"


@dataclass
class FetchResult:
    """Parsed JSON body plus an optional continuation URL."""
    data: Any
    continuation: Optional[str] = None


def parse_next_link(link_header: Optional[str]) -> Optional[str]:
    """
    Extract the rel="next" URL from an RFC 5988 Link header.

    Example:
        >>> parse_next_link('<https://s.com/p.json?page_info=abc>; rel="next"')
        'https://s.com/p.json?page_info=abc'
    """
    if not link_header:
        return None
    for link in parse_header_links(link_header):
        if link.get("rel") == "next" and link.get("url"):
            return link["url"]
    return None


def _error_detail(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text[:200] if response.text else ""
    if isinstance(body, dict) and body.get("error"):
        return str(body["error"])
    return ""


def classify_response(response: requests.Response, url: str) -> Any:
    """
    Turn a response into parsed JSON or raise the matching error.

    Raises:
        UpstreamRedirect: On 3xx with a Location (only seen when redirects are not followed)
        Unauthorized: On 401/403
        NotFound: On 404
        HttpStatusError: On any other status >= 400
        MalformedResponse: If the body is not JSON
    """
    status = response.status_code

    location = response.headers.get("Location")
    if 300 <= status < 400 and location:
        raise UpstreamRedirect(status, urljoin(url, location))
    if status in (401, 403):
        raise Unauthorized(status, f"Unauthorized access (HTTP {status}).")
    if status == 404:
        raise NotFound(f"Not found: {url}")
    if status >= 400:
        detail = _error_detail(response)
        message = f"Upstream returned HTTP {status}."
        if detail:
            message = f"{message} {detail}"
        raise HttpStatusError(status, message)

    try:
        return response.json()
    except ValueError:
        raise MalformedResponse(f"Response from {url} is not valid JSON.")


class _SessionFetcher:
    """Shared session handling and transport error mapping."""

    def __init__(
        self,
        timeout: float = DEFAULT_TIMEOUT,
        user_agent: str = DEFAULT_USER_AGENT,
        session: Optional[requests.Session] = None,
    ):
        self.timeout = timeout
        self.session = session or requests.Session()
        self.session.headers.update({
            "Accept": "application/json",
            "User-Agent": user_agent,
        })
        self.requests_made = 0

    def __enter__(self):
        return self

    def __exit__(self, *args):
        self.session.close()

    def close(self):
        self.session.close()

    def _send(self, method: str, url: str, **kwargs) -> requests.Response:
        """Send one request, mapping transport failures to catalog errors."""
        self.requests_made += 1
        logger.debug("%s %s", method, url)

        try:
            return self.session.request(method, url, timeout=self.timeout, **kwargs)
        except requests.exceptions.Timeout:
            logger.warning("Request timeout after %ss: %s", self.timeout, url)
            raise RequestTimeout(f"Request timed out after {self.timeout} seconds.")
        except requests.exceptions.ConnectionError as e:
            logger.warning("Connection failed: %s", e)
            raise NetworkUnreachable(f"Could not connect to {url}.")
        except requests.exceptions.RequestException as e:
            logger.warning("Request failed: %s", e)
            raise NetworkUnreachable(f"Request to {url} failed: {e}")


class DirectFetcher(_SessionFetcher):
    """
    Fetches upstream URLs directly.

    Used by the relay endpoint and by the command line, where requests
    already run server-side and secret headers never leave the process.
    With ``follow_redirects=False`` a 3xx raises ``UpstreamRedirect`` so
    the caller can vet the new location before requesting it.

    Usage:
        with DirectFetcher(timeout=20) as fetcher:
            result = fetcher.fetch("https://shop.example.com/products.json")
    """

    def __init__(self, *args, extra_headers: Optional[Dict[str, str]] = None,
                 follow_redirects: bool = True, **kwargs):
        super().__init__(*args, **kwargs)
        self.follow_redirects = follow_redirects
        if extra_headers:
            self.session.headers.update(extra_headers)

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> FetchResult:
        response = self._send(
            "GET", url, headers=headers, allow_redirects=self.follow_redirects
        )
        try:
            data = classify_response(response, url)
        except CatalogError as e:
            logger.warning("Fetch failed for %s: %s", url, e.message)
            raise
        return FetchResult(data, parse_next_link(response.headers.get("Link")))


class RelayFetcher(_SessionFetcher):
    """
    Fetches upstream URLs through the backend relay.

    Requests without headers use ``GET <relay>?url=<target>``; requests
    carrying headers use ``POST <relay>`` with ``{"url", "options"}`` so
    credentials travel in the body rather than the query string. The
    relay's continuation header is passed through untouched.
    """

    def __init__(self, relay_url: str, *args, **kwargs):
        super().__init__(*args, **kwargs)
        self.relay_url = relay_url

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> FetchResult:
        if headers:
            response = self._send(
                "POST", self.relay_url,
                json={"url": url, "options": {"headers": headers}},
            )
        else:
            response = self._send("GET", self.relay_url, params={"url": url})

        # The relay reports an upstream timeout as 504
        if response.status_code == 504:
            logger.warning("Relay timed out waiting for %s", url)
            raise RequestTimeout("The store did not answer the relay in time.")

        try:
            data = classify_response(response, url)
        except CatalogError as e:
            logger.warning("Relay fetch failed for %s: %s", url, e.message)
            raise
        return FetchResult(data, response.headers.get(NEXT_PAGE_HEADER) or None)


class ProxyChainFetcher(_SessionFetcher):
    """
    Fetches upstream URLs through an ordered list of public relays.

    The first relay that answers successfully wins. Authorization and
    not-found answers come from the upstream itself, so they are raised
    immediately instead of trying further relays.
    """

    def __init__(self, proxies: List[str], *args, **kwargs):
        super().__init__(*args, **kwargs)
        if not proxies:
            raise ValueError("At least one relay prefix is required")
        self.proxies = list(proxies)

    def fetch(self, url: str, headers: Optional[Dict[str, str]] = None) -> FetchResult:
        last_error: Optional[CatalogError] = None

        for index, prefix in enumerate(self.proxies, 1):
            proxied_url = f"{prefix}{quote(url, safe='')}"
            try:
                response = self._send("GET", proxied_url, headers=headers)
                data = classify_response(response, url)
            except (Unauthorized, NotFound):
                raise
            except CatalogError as e:
                logger.warning("Relay %d/%d failed for %s: %s",
                               index, len(self.proxies), url, e.message)
                last_error = e
                continue

            return FetchResult(data, parse_next_link(response.headers.get("Link")))

        raise AllProxiesFailed(last_error, attempts=len(self.proxies))


def build_fetcher(settings: Dict[str, Any], relay_url: Optional[str] = None):
    """
    Build the fetcher selected in settings.

    Args:
        settings: Full settings dict
        relay_url: Overrides fetch.relay_url and forces the relay strategy

    Returns:
        A DirectFetcher, RelayFetcher or ProxyChainFetcher
    """
    fetch_settings = settings.get("fetch") or {}
    timeout = get_fetch_timeout(settings)
    user_agent = fetch_settings.get("user_agent") or DEFAULT_USER_AGENT
    relay_url = relay_url or fetch_settings.get("relay_url")
    strategy = "relay" if relay_url else fetch_settings.get("strategy", "direct")

    if strategy == "relay":
        if not relay_url:
            raise ValueError("fetch.strategy is 'relay' but no relay_url is configured")
        logger.info("Fetching through relay %s", relay_url)
        return RelayFetcher(relay_url, timeout=timeout, user_agent=user_agent)
    if strategy == "proxy_chain":
        proxies = fetch_settings.get("public_proxies") or []
        logger.info("Fetching through %d public relays", len(proxies))
        return ProxyChainFetcher(proxies, timeout=timeout, user_agent=user_agent)
    if strategy == "direct":
        return DirectFetcher(timeout=timeout, user_agent=user_agent)

    raise ValueError(f"Unknown fetch strategy: {strategy}")
