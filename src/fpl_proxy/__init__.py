"""FPL Cache Proxy - cache-fronted fetch proxy for the Fantasy Premier League.

Forwards allow-listed API endpoint and image requests from the dashboard
to the FPL origins and caches the responses on disk.

Layers:
    - protocols: Interface contracts (CacheStore, UpstreamFetcher)
    - repositories: File/in-memory cache stores and the httpx fetcher
    - services: Allow-list gate and proxy orchestration
    - handlers: HTTP response mapping
    - dto: JSON API contracts
    - entities: Domain models (internal)

For HTTP API:
    ```python
    from fpl_proxy.api.app import app, create_app
    ```
"""

from fpl_proxy.config import Settings, get_settings, settings
from fpl_proxy.entities import (
    CacheEntryEntity,
    CacheStatus,
    ProxyResultEntity,
    RequestKind,
    UpstreamRequestEntity,
)
from fpl_proxy.exceptions import (
    InvalidRequestError,
    ProxyError,
    StorageFailureError,
    UpstreamFailureError,
)
from fpl_proxy.handlers import ProxyHandler
from fpl_proxy.protocols import CacheStore, UpstreamFetcher
from fpl_proxy.repositories import (
    FileCacheRepository,
    HttpUpstreamFetcher,
    InMemoryCacheRepository,
)
from fpl_proxy.services import AllowListGate, ProxyService

__all__ = [
    # Configuration
    "Settings",
    "settings",
    "get_settings",
    # Protocols (interfaces)
    "CacheStore",
    "UpstreamFetcher",
    # Services (business logic)
    "AllowListGate",
    "ProxyService",
    # Handlers (HTTP)
    "ProxyHandler",
    # Repositories (data access)
    "FileCacheRepository",
    "HttpUpstreamFetcher",
    "InMemoryCacheRepository",
    # Entities (domain models)
    "CacheEntryEntity",
    "CacheStatus",
    "ProxyResultEntity",
    "RequestKind",
    "UpstreamRequestEntity",
    # Errors
    "ProxyError",
    "InvalidRequestError",
    "UpstreamFailureError",
    "StorageFailureError",
]
