"""Domain entities for internal representation.

These are pure dataclasses (frozen) used internally by services
and repositories. They are NOT used for API contracts - use DTOs
from the dto package for that.
"""

from .cache_entry import CacheEntryEntity
from .proxy_result import CacheStatus, ProxyResultEntity
from .upstream_request import RequestKind, UpstreamRequestEntity, UpstreamResponseEntity

__all__ = [
    "CacheEntryEntity",
    "CacheStatus",
    "ProxyResultEntity",
    "RequestKind",
    "UpstreamRequestEntity",
    "UpstreamResponseEntity",
]
