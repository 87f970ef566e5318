"""Proxy service for core business logic.

This service orchestrates one proxied request end to end:

    GATE -> LOOKUP -> fresh hit: serve cached bytes (HIT)
                   -> miss or stale: FETCH -> STORE -> serve (MISS)

The gate runs before any cache or network access. Upstream failures are
never cached. A failed cache write is logged and the fetched bytes are
still returned, so the store only ever degrades to always-miss.
"""

import asyncio
import logging
import time
from collections.abc import Callable

from fpl_proxy.config import settings
from fpl_proxy.entities import (
    CacheStatus,
    ProxyResultEntity,
    RequestKind,
    UpstreamRequestEntity,
)
from fpl_proxy.exceptions import InvalidRequestError, StorageFailureError
from fpl_proxy.protocols import CacheStore, UpstreamFetcher
from fpl_proxy.services.allow_list import AllowListGate

logger = logging.getLogger(__name__)

DEFAULT_IMAGE_CONTENT_TYPE = "image/png"
API_CONTENT_TYPE = "application/json"


class ProxyService:
    """Core proxy orchestration service.

    Depends on PROTOCOLS, not concrete implementations:
    - CacheStore: flat files on disk, or in memory for tests
    - UpstreamFetcher: httpx, or a fake for tests

    Example:
        ```python
        service = ProxyService.create(
            store=FileCacheRepository.create(),
            fetcher=HttpUpstreamFetcher.create(),
        )
        result = await service.resolve(RequestKind.API, "bootstrap-static/")
        ```
    """

    def __init__(
        self,
        store: CacheStore,
        fetcher: UpstreamFetcher,
        gate: AllowListGate | None = None,
        image_ttl: int | None = None,
        api_ttl: int | None = None,
        clock: Callable[[], float] | None = None,
    ) -> None:
        """Initialize the proxy service.

        Args:
            store: Cache storage backend (required).
            fetcher: Upstream fetcher (required).
            gate: Allow-list gate. Defaults to one built from settings.
            image_ttl: Freshness window for images in seconds. Defaults to settings.
            api_ttl: Freshness window for API responses in seconds. Defaults to settings.
            clock: Returns the current Unix time. Defaults to time.time.
        """
        self._store = store
        self._fetcher = fetcher
        self._gate = gate or AllowListGate.create()
        self._image_ttl = image_ttl or settings.cache_ttl
        self._api_ttl = api_ttl or settings.effective_api_cache_ttl
        self._clock = clock or time.time

    @classmethod
    def create(
        cls,
        store: CacheStore,
        fetcher: UpstreamFetcher,
        gate: AllowListGate | None = None,
        image_ttl: int | None = None,
        api_ttl: int | None = None,
        clock: Callable[[], float] | None = None,
    ) -> "ProxyService":
        """Factory method to create ProxyService with sensible defaults."""
        return cls(
            store=store,
            fetcher=fetcher,
            gate=gate,
            image_ttl=image_ttl,
            api_ttl=api_ttl,
            clock=clock,
        )

    def ttl_for(self, kind: RequestKind) -> int:
        return self._image_ttl if kind is RequestKind.IMAGE else self._api_ttl

    def check(self, kind: RequestKind, identifier: str | None) -> UpstreamRequestEntity:
        """Run the allow-list gate.

        Raises:
            InvalidRequestError: If the identifier is missing or not allowed
        """
        request = self._gate.check(kind, identifier)
        if not request.allowed:
            logger.info("Rejected %s request: %r", kind.value, identifier)
            raise InvalidRequestError(f"Identifier not allowed: {identifier!r}")
        return request

    async def resolve(self, kind: RequestKind, identifier: str | None) -> ProxyResultEntity:
        """Serve a request from the cache or the upstream.

        Args:
            kind: API endpoint or image passthrough
            identifier: Endpoint name or image URL as supplied by the client

        Returns:
            ProxyResultEntity with the body, content type and HIT/MISS status

        Raises:
            InvalidRequestError: If the identifier fails the allow-list
            UpstreamFailureError: If the upstream fetch fails
        """
        request = self.check(kind, identifier)
        ttl = self.ttl_for(kind)
        key = self._store.key_for(request.target)

        entry = await asyncio.to_thread(self._store.lookup, key)
        if entry is not None and entry.is_fresh(self._clock(), ttl):
            logger.info("Cache HIT: %s", request.target)
            return ProxyResultEntity(
                payload=entry.payload,
                content_type=entry.content_type,
                cache_status=CacheStatus.HIT,
                ttl=ttl,
                key=key,
            )

        if entry is not None:
            logger.debug("Cache entry stale: %s", request.target)

        upstream = await self._fetcher.fetch(request)
        content_type = self._content_type_for(kind, upstream.content_type)

        try:
            await asyncio.to_thread(self._store.store, key, upstream.content, content_type)
        except StorageFailureError as e:
            logger.warning("Cache write failed, serving uncached: %s", e)

        logger.info("Cache MISS: %s (%d bytes)", request.target, len(upstream.content))
        return ProxyResultEntity(
            payload=upstream.content,
            content_type=content_type,
            cache_status=CacheStatus.MISS,
            ttl=ttl,
            key=key,
        )

    @staticmethod
    def _content_type_for(kind: RequestKind, upstream_content_type: str | None) -> str:
        if kind is RequestKind.API:
            return API_CONTENT_TYPE
        return upstream_content_type or DEFAULT_IMAGE_CONTENT_TYPE

    def get_stats(self) -> dict:
        """Get cache statistics.

        Returns:
            Dictionary with store statistics and freshness windows
        """
        stats = self._store.get_stats()
        stats["image_ttl"] = self._image_ttl
        stats["api_ttl"] = self._api_ttl
        stats["allowed_endpoints"] = list(self._gate.allowed_endpoints)
        return stats

    def is_healthy(self) -> bool:
        return self._store.health_check()

    async def close(self) -> None:
        await self._fetcher.close()

    @property
    def store(self) -> CacheStore:
        """Get the underlying store (for testing)."""
        return self._store

    @property
    def fetcher(self) -> UpstreamFetcher:
        """Get the underlying fetcher (for testing)."""
        return self._fetcher
