from typing import Any

from fastapi import FastAPI, Query, Response

from fpl_proxy.api.dependencies import HandlerDep, lifespan
from fpl_proxy.config import Settings, settings
from fpl_proxy.dto import CacheStatsResponse, HealthCheckResponse

API_VERSION = "0.1.0"


def create_app(
    app_settings: Settings | None = None,
    store=None,
    fetcher=None,
) -> FastAPI:
    """Build the FastAPI application.

    Args:
        app_settings: Settings override. Defaults to environment settings.
        store: Optional CacheStore override (tests).
        fetcher: Optional UpstreamFetcher override (tests).
    """
    app = FastAPI(
        title="FPL Cache Proxy",
        description="Caching proxy for the Fantasy Premier League API and player images",
        version=API_VERSION,
        lifespan=lifespan,
    )
    app.state.settings = app_settings
    app.state.store = store
    app.state.fetcher = fetcher

    @app.get("/")
    async def root() -> dict[str, Any]:
        """Root endpoint with API information."""
        return {
            "name": "FPL Cache Proxy",
            "version": API_VERSION,
            "endpoints": {
                "proxy": "/proxy?endpoint=<name> | /proxy?image=<url>",
                "img_proxy": "/img-proxy?url=<url>",
                "stats": "/stats",
                "health": "/health",
            },
        }

    @app.get("/proxy")
    async def proxy(
        handler: HandlerDep,
        endpoint: str = Query("", description="FPL API endpoint name, e.g. bootstrap-static/"),
        image: str = Query("", description="Full Premier League image URL"),
    ) -> Response:
        """Proxy an FPL API endpoint or a player/team image."""
        return await handler.proxy(endpoint=endpoint, image=image)

    @app.options("/proxy")
    async def proxy_preflight(handler: HandlerDep) -> Response:
        return await handler.preflight()

    @app.get("/img-proxy")
    async def img_proxy(
        handler: HandlerDep,
        url: str = Query("", description="Full Premier League image URL"),
    ) -> Response:
        """Proxy a player/team image with on-disk caching."""
        return await handler.image_proxy(url=url)

    @app.options("/img-proxy")
    async def img_proxy_preflight(handler: HandlerDep) -> Response:
        return await handler.preflight()

    @app.get("/stats", response_model=CacheStatsResponse)
    async def stats(handler: HandlerDep) -> CacheStatsResponse:
        """Get cache statistics."""
        return await handler.get_stats()

    @app.get("/health", response_model=HealthCheckResponse)
    async def health(handler: HandlerDep) -> HealthCheckResponse:
        """Health check endpoint."""
        return await handler.health_check()

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "fpl_proxy.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        reload=settings.api_reload,
    )
