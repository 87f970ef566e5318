"""Repository layer for data access.

This layer abstracts external dependencies (the filesystem, the FPL
origins) behind protocol-based interfaces. This enables:
- In-memory cache and fake upstream doubles in tests
- Clear separation of concerns

The repositories are protocol-based (structural typing), not inheritance-based.
"""

from fpl_proxy.protocols import CacheStore, UpstreamFetcher

from .file_cache_repository import FileCacheRepository
from .http_upstream_fetcher import HttpUpstreamFetcher
from .memory_cache_repository import InMemoryCacheRepository

__all__ = [
    "CacheStore",
    "UpstreamFetcher",
    "FileCacheRepository",
    "HttpUpstreamFetcher",
    "InMemoryCacheRepository",
]
