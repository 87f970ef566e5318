"""Handler layer for HTTP endpoints.

Handlers depend on services (business logic), not directly on repositories.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .proxy_handler import CORS_HEADERS, ProxyHandler

__all__ = [
    "CORS_HEADERS",
    "ProxyHandler",
]
