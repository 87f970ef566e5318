"""Protocol interfaces for swappable implementations.

Protocols enable:
- Swapping the file-backed cache for an in-memory double in tests
- Swapping the httpx fetcher for a fake upstream
- Clear separation of concerns

Usage:
    ```python
    from fpl_proxy.protocols import CacheStore, UpstreamFetcher

    store: CacheStore = FileCacheRepository.create()      # works
    store: CacheStore = InMemoryCacheRepository()         # also works
    ```
"""

from .cache_store import CacheStore
from .upstream_fetcher import UpstreamFetcher

__all__ = [
    "CacheStore",
    "UpstreamFetcher",
]
