"""HTTP transport for tile downloads."""
from tilestitch.infrastructure.http.client import (
    AiohttpTransport,
    TileTransport,
    build_request_headers,
    make_http_session,
)

__all__ = [
    'AiohttpTransport',
    'TileTransport',
    'build_request_headers',
    'make_http_session',
]
