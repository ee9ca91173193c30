# Common utilities
from .config_loader import (
    get_fetch_timeout,
    get_platform_settings,
    load_config,
    load_settings,
)
from .errors import (
    AllProxiesFailed,
    CatalogError,
    EmptyResult,
    HttpStatusError,
    InvalidInput,
    MalformedResponse,
    NetworkUnreachable,
    NotFound,
    RequestTimeout,
    Unauthorized,
    UpstreamRedirect,
)
from .log_config import setup_logging
from .text_utils import clean_html_description, to_proper_case
from .url_utils import hostname_identifier, normalize_shopify_store_name, parse_store_url
