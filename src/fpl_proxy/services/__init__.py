"""Service layer for business logic.

Services depend on protocols (interfaces), not concrete implementations,
making them testable and flexible.

Architecture:
    Handler -> Service -> Repository
    (HTTP)  -> (Business) -> (Data Access)
"""

from .allow_list import AllowListGate
from .proxy_service import ProxyService

__all__ = [
    "AllowListGate",
    "ProxyService",
]
