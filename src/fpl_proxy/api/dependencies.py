"""Wiring for the proxy app.

The lifespan builds the gate, cache store, fetcher, service and handler from
the app's Settings (or the process-wide settings when none were given) and
keeps them on app.state. Route dependencies read the handler back from
the request, so tests can swap the store or fetcher per app instance.
"""

import logging
from contextlib import asynccontextmanager
from typing import Annotated

from fastapi import Depends, FastAPI, Request

from fpl_proxy.config import Settings, get_settings
from fpl_proxy.handlers import ProxyHandler
from fpl_proxy.repositories import FileCacheRepository, HttpUpstreamFetcher
from fpl_proxy.services import AllowListGate, ProxyService


def get_handler(request: Request) -> ProxyHandler:
    """Dependency injection for ProxyHandler from app.state.

    Raises:
        RuntimeError: If handler is not initialized
    """
    handler = getattr(request.app.state, "proxy_handler", None)
    if handler is None:
        raise RuntimeError("ProxyHandler not initialized. Check lifespan setup.")
    return handler


def build_proxy_service(app_settings: Settings, store=None, fetcher=None) -> ProxyService:
    """Wire the proxy service from settings.

    Args:
        app_settings: Settings to build from
        store: Optional CacheStore overriding the file-backed default
        fetcher: Optional UpstreamFetcher overriding the httpx default
    """
    gate = AllowListGate(
        image_host=app_settings.image_host,
        allowed_endpoints=app_settings.allowed_endpoints,
        api_base_url=app_settings.api_base_url,
        strict_endpoint_matching=app_settings.strict_endpoint_matching,
    )
    return ProxyService.create(
        store=store or FileCacheRepository.create(cache_dir=app_settings.cache_dir),
        fetcher=fetcher or HttpUpstreamFetcher.create(
            user_agent=app_settings.upstream_user_agent,
            referer=app_settings.upstream_referer,
            api_timeout=app_settings.api_timeout,
            image_timeout=app_settings.image_timeout,
        ),
        gate=gate,
        image_ttl=app_settings.cache_ttl,
        api_ttl=app_settings.effective_api_cache_ttl,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan context manager for FastAPI app.

    Initializes all layers and stores them in app.state:
    1. Repositories (file cache, httpx fetcher) unless overridden
    2. Service - stored in app.state.proxy_service
    3. Handler - stored in app.state.proxy_handler

    A ``store`` or ``fetcher`` already placed on app.state (tests) is used
    instead of the defaults.
    """
    app_settings: Settings = getattr(app.state, "settings", None) or get_settings()
    logging.basicConfig(
        level=app_settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    proxy_service = build_proxy_service(
        app_settings,
        store=getattr(app.state, "store", None),
        fetcher=getattr(app.state, "fetcher", None),
    )
    app.state.proxy_service = proxy_service
    app.state.proxy_handler = ProxyHandler(proxy_service=proxy_service)

    print("✓ Proxy service initialized")
    print(f"✓ Cache TTL: images {app_settings.cache_ttl}s, API {app_settings.effective_api_cache_ttl}s")
    print(f"✓ Health: {proxy_service.is_healthy()}")

    yield

    await proxy_service.close()
    del app.state.proxy_handler
    del app.state.proxy_service
    print("✓ Proxy service shut down")


# Type aliases for cleaner dependency injection
HandlerDep = Annotated[ProxyHandler, Depends(get_handler)]
