"""
Logging Configuration

All package loggers hang off the ``catalog_extractor`` logger, which
writes to stderr so stdout stays free for the export summary.

PrestaShop and WooCommerce authenticate with query-string keys, so the
handler masks those parameters in any logged URL.
"""

import logging
import re
import sys

LOGGER_NAME = "catalog_extractor"

LOG_FORMAT = "%(levelname)-8s %(name)s: %(message)s"

# Query parameters that carry credentials, plain or percent-encoded (proxy chain)
_SECRET_PARAM_RE = re.compile(
    r'((?:ws_key|consumer_key|consumer_secret)(?:=|%3D))[^&%\s\'"]+',
    re.IGNORECASE,
)


def mask_secrets(text: str) -> str:
    """
    Replace credential query values with ``***``.

    Example:
        >>> mask_secrets("https://s.com/api/products?ws_key=ABC&output_format=JSON")
        'https://s.com/api/products?ws_key=***&output_format=JSON'
    """
    return _SECRET_PARAM_RE.sub(r'\1***', text)


class SecretMaskingFilter(logging.Filter):
    """Masks credential query parameters in the formatted message."""

    def filter(self, record: logging.LogRecord) -> bool:
        message = record.getMessage()
        masked = mask_secrets(message)
        if masked != message:
            record.msg = masked
            record.args = None
        return True


def setup_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Route package logs to stderr.

    Args:
        verbose: DEBUG level (every request URL is logged)
        quiet: WARNING level (failures only)

    Calling it again replaces the previous handler.
    """
    if verbose:
        level = logging.DEBUG
    elif quiet:
        level = logging.WARNING
    else:
        level = logging.INFO

    handler = logging.StreamHandler(sys.stderr)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(SecretMaskingFilter())

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(level)
    logger.handlers.clear()
    logger.addHandler(handler)
