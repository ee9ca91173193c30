"""
Backend Relay

Small HTTP endpoint that forwards catalog requests server-side, so that
credentials stay off the client and cross-origin limits do not apply.

    GET  /?url=<https target>
    POST /   {"url": "<https target>", "options": {"headers": {...}}}

Upstream JSON is returned as-is. A "next page" Link from the upstream is
re-exposed under the X-Next-Page-Url header.
"""

import http.server
import ipaddress
import json
import logging
import socket
import urllib.parse
from typing import Any, Callable, Dict, List, Optional, Tuple

from ..common.config_loader import get_fetch_timeout
from ..common.errors import CatalogError, HttpStatusError, InvalidInput, RequestTimeout, UpstreamRedirect
from ..fetching import NEXT_PAGE_HEADER, DirectFetcher

logger = logging.getLogger(__name__)

MAX_BODY_BYTES = 64 * 1024
MAX_REDIRECTS = 5

# Client headers that may be forwarded upstream (lowercase)
FORWARDED_HEADERS = frozenset({
    'authentication',
    'authorization',
    'x-shopify-access-token',
    'x-vtex-api-appkey',
    'x-vtex-api-apptoken',
})

RelayResponse = Tuple[int, Dict[str, str], Dict[str, Any]]


def _resolve_host(hostname: str) -> List[str]:
    """Resolve a hostname to every address it maps to."""
    infos = socket.getaddrinfo(hostname, 443, proto=socket.IPPROTO_TCP)
    return [info[4][0] for info in infos]


def _is_public_address(address: str) -> bool:
    ip = ipaddress.ip_address(address.split('%')[0])
    return not (
        ip.is_private or ip.is_loopback or ip.is_link_local
        or ip.is_reserved or ip.is_multicast or ip.is_unspecified
    )


def validate_target_url(
    url: Optional[str],
    resolve: Callable[[str], List[str]] = _resolve_host,
) -> str:
    """
    Check that a relay target is safe to request.

    Only HTTPS URLs without embedded credentials whose host resolves
    exclusively to public addresses are accepted.

    Raises:
        InvalidInput: Describing why the target was rejected
    """
    if not url or not isinstance(url, str):
        raise InvalidInput("URL parameter is required and must be a string.")

    try:
        parsed = urllib.parse.urlparse(url)
    except ValueError:
        raise InvalidInput("Invalid URL format provided.")

    if parsed.scheme != 'https':
        raise InvalidInput("Only HTTPS URLs are allowed.")
    if not parsed.hostname:
        raise InvalidInput("Invalid URL format provided.")
    if parsed.username or parsed.password:
        raise InvalidInput("URLs with credentials are not allowed.")

    try:
        addresses = resolve(parsed.hostname)
    except (socket.gaierror, UnicodeError):
        raise InvalidInput(f"Could not resolve host: {parsed.hostname}")

    if not addresses or not all(_is_public_address(a) for a in addresses):
        raise InvalidInput("Target host is not allowed.")

    return url


def forwardable_headers(headers: Any) -> Dict[str, str]:
    """Keep only the client headers the relay passes upstream."""
    if not isinstance(headers, dict):
        return {}
    return {
        str(name): str(value)
        for name, value in headers.items()
        if str(name).lower() in FORWARDED_HEADERS and value is not None
    }


def handle_relay_request(
    fetcher,
    url: Optional[str],
    headers: Optional[Dict[str, str]] = None,
    cache_max_age: int = 300,
    resolve: Callable[[str], List[str]] = _resolve_host,
) -> RelayResponse:
    """
    Relay one request and build the response to send back.

    The fetcher must not follow redirects itself: every hop is checked
    with ``validate_target_url`` before it is requested, and forwarded
    headers are dropped once a redirect leaves the original host.

    Returns:
        (status, response headers, JSON body)
    """
    try:
        validate_target_url(url, resolve)
    except InvalidInput as e:
        logger.warning("Rejected relay target %r: %s", url, e.message)
        return 400, {}, {'error': e.message}

    origin_host = urllib.parse.urlparse(url).hostname
    upstream_headers = forwardable_headers(headers) or None
    target = url
    redirects = 0

    try:
        while True:
            try:
                result = fetcher.fetch(target, headers=upstream_headers)
                break
            except UpstreamRedirect as e:
                redirects += 1
                if redirects > MAX_REDIRECTS:
                    logger.warning("Too many redirects from %s", url)
                    return 502, {}, {'error': 'Upstream redirected too many times.'}
                try:
                    target = validate_target_url(e.location, resolve)
                except InvalidInput as rejected:
                    logger.warning("Refused redirect %s -> %r: %s", url, e.location, rejected.message)
                    return 502, {}, {'error': 'Upstream redirected to a disallowed URL.'}
                if urllib.parse.urlparse(target).hostname != origin_host:
                    upstream_headers = None
                logger.debug("Following redirect to %s", target)
    except HttpStatusError as e:
        return e.status_code, {}, {
            'error': f"Failed to fetch from upstream: {e.status_code}",
        }
    except RequestTimeout:
        return 504, {}, {'error': 'Upstream request timed out.'}
    except CatalogError as e:
        logger.error("Relay error for %s: %s", url, e.message)
        return 502, {}, {'error': f"Could not process the request: {e.message}"}

    response_headers = {
        'Cache-Control': f"s-maxage={cache_max_age}, stale-while-revalidate",
    }
    if result.continuation:
        response_headers[NEXT_PAGE_HEADER] = result.continuation
    return 200, response_headers, result.data


class RelayHandler(http.server.BaseHTTPRequestHandler):
    """
    Handle relay requests.

    Each request builds its own fetcher (and so its own session) from
    ``fetcher_factory``; request threads never share a session.
    """

    fetcher_factory: Optional[Callable[[], DirectFetcher]] = None
    cache_max_age = 300

    def _relay(self, url: Optional[str], headers: Optional[Dict[str, str]]) -> RelayResponse:
        with self.fetcher_factory() as fetcher:
            return handle_relay_request(fetcher, url, headers, self.cache_max_age)

    def do_GET(self):
        """Handle GET /?url=..."""
        params = urllib.parse.parse_qs(urllib.parse.urlparse(self.path).query)
        url = params.get('url', [None])[0]
        self._respond(*self._relay(url, None))

    def do_POST(self):
        """Handle POST with a JSON {url, options} body."""
        length = int(self.headers.get('Content-Length') or 0)
        if length > MAX_BODY_BYTES:
            self._respond(413, {}, {'error': 'Request body too large.'})
            return

        try:
            body = json.loads(self.rfile.read(length) or b'{}')
        except ValueError:
            self._respond(400, {}, {'error': 'Request body must be JSON.'})
            return
        if not isinstance(body, dict):
            self._respond(400, {}, {'error': 'Request body must be a JSON object.'})
            return

        options = body.get('options') or {}
        headers = options.get('headers') if isinstance(options, dict) else None
        self._respond(*self._relay(body.get('url'), headers))

    def _respond(self, status: int, headers: Dict[str, str], body: Any):
        payload = json.dumps(body, ensure_ascii=False).encode('utf-8')
        self.send_response(status)
        self.send_header('Content-Type', 'application/json; charset=utf-8')
        self.send_header('Content-Length', str(len(payload)))
        for name, value in headers.items():
            self.send_header(name, value)
        self.end_headers()
        self.wfile.write(payload)

    def log_message(self, format, *args):
        """Route access logs through logging."""
        logger.debug("%s - %s", self.address_string(), format % args)


def create_relay_server(settings: Dict[str, Any], host: Optional[str] = None,
                        port: Optional[int] = None) -> http.server.ThreadingHTTPServer:
    """
    Build a relay server from settings.

    Server-side secret headers come from relay.upstream_headers.
    """
    relay_settings = settings.get('relay') or {}
    fetch_settings = settings.get('fetch') or {}

    timeout = get_fetch_timeout(settings)
    user_agent = fetch_settings.get('user_agent') or 'Catalog-Product-Extractor/1.0'
    upstream_headers = relay_settings.get('upstream_headers') or None

    def fetcher_factory() -> DirectFetcher:
        return DirectFetcher(
            timeout=timeout,
            user_agent=user_agent,
            extra_headers=upstream_headers,
            follow_redirects=False,
        )

    handler = type('ConfiguredRelayHandler', (RelayHandler,), {
        'fetcher_factory': staticmethod(fetcher_factory),
        'cache_max_age': relay_settings.get('cache_max_age', 300),
    })

    address = (host or relay_settings.get('host', '127.0.0.1'),
               relay_settings.get('port', 8787) if port is None else port)
    return http.server.ThreadingHTTPServer(address, handler)
