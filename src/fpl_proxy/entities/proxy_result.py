"""Proxy result domain entity."""

from dataclasses import dataclass
from enum import Enum


class CacheStatus(str, Enum):
    """Value of the X-Cache response header."""

    HIT = "HIT"
    MISS = "MISS"


@dataclass(frozen=True)
class ProxyResultEntity:
    """Outcome of a successfully proxied request.

    Attributes:
        payload: Body bytes, served verbatim
        content_type: MIME type to send to the client
        cache_status: HIT when served from the cache store, MISS otherwise
        ttl: Freshness window in seconds, echoed as Cache-Control max-age
        key: Cache key the payload is (or would be) stored under
    """

    payload: bytes
    content_type: str
    cache_status: CacheStatus
    ttl: int
    key: str
