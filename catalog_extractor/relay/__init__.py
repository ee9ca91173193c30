"""
Backend relay endpoint.

Modules:
    relay_server - Request validation, forwarding and the HTTP handler
"""

from .relay_server import (
    RelayHandler,
    create_relay_server,
    forwardable_headers,
    handle_relay_request,
    validate_target_url,
)

__all__ = [
    'RelayHandler',
    'create_relay_server',
    'forwardable_headers',
    'handle_relay_request',
    'validate_target_url',
]
