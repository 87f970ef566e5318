"""HTTP handlers for proxy operations.

Handlers convert service results and domain errors into HTTP responses.
They own the wire details: status codes, error bodies, X-Cache,
Cache-Control and the CORS headers the dashboard depends on.
"""

from fastapi import Response, status
from fastapi.responses import JSONResponse, PlainTextResponse

from fpl_proxy.dto import CacheStatsResponse, ErrorResponse, HealthCheckResponse
from fpl_proxy.entities import ProxyResultEntity, RequestKind
from fpl_proxy.exceptions import InvalidRequestError, UpstreamFailureError
from fpl_proxy.services import ProxyService

CORS_HEADERS = {
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Methods": "GET, OPTIONS",
    "Access-Control-Allow-Headers": "Content-Type",
}


class ProxyHandler:
    """HTTP handlers for the proxy endpoints.

    Example:
        ```python
        handler = ProxyHandler(proxy_service=service)

        @app.get("/proxy")
        async def proxy(endpoint: str = "", image: str = ""):
            return await handler.proxy(endpoint=endpoint, image=image)
        ```
    """

    def __init__(self, proxy_service: ProxyService) -> None:
        """Initialize the proxy handler.

        Args:
            proxy_service: The proxy service for business logic (required).
        """
        self._proxy = proxy_service

    async def proxy(self, endpoint: str | None = None, image: str | None = None) -> Response:
        """Handle GET /proxy requests.

        A non-empty ``image`` parameter selects image passthrough; otherwise
        ``endpoint`` is treated as an API endpoint name.
        """
        if image:
            return await self._image(
                image,
                invalid_message="Invalid image URL",
                failure_message="Failed to fetch image",
            )
        return await self._endpoint(endpoint)

    async def image_proxy(self, url: str | None = None) -> Response:
        """Handle GET /img-proxy requests."""
        return await self._image(
            url,
            invalid_message="Invalid URL",
            failure_message="Failed to fetch image",
        )

    async def preflight(self) -> Response:
        """Handle OPTIONS requests: empty 200 with CORS headers."""
        return Response(status_code=status.HTTP_200_OK, headers=dict(CORS_HEADERS))

    async def get_stats(self) -> CacheStatsResponse:
        """Handle GET /stats requests."""
        return CacheStatsResponse(**self._proxy.get_stats())

    async def health_check(self) -> HealthCheckResponse:
        """Handle GET /health requests."""
        is_healthy = self._proxy.is_healthy()
        return HealthCheckResponse(
            status="healthy" if is_healthy else "unhealthy",
            cache_healthy=is_healthy,
        )

    async def _endpoint(self, endpoint: str | None) -> Response:
        try:
            result = await self._proxy.resolve(RequestKind.API, endpoint)
        except InvalidRequestError:
            return self._json_error(status.HTTP_400_BAD_REQUEST, "Invalid endpoint")
        except UpstreamFailureError:
            return self._json_error(status.HTTP_502_BAD_GATEWAY, "Failed to fetch from FPL API")
        return self._success(result)

    async def _image(self, url: str | None, invalid_message: str, failure_message: str) -> Response:
        try:
            result = await self._proxy.resolve(RequestKind.IMAGE, url)
        except InvalidRequestError:
            return self._text_error(status.HTTP_400_BAD_REQUEST, invalid_message)
        except UpstreamFailureError:
            return self._text_error(status.HTTP_502_BAD_GATEWAY, failure_message)
        return self._success(result)

    @staticmethod
    def _success(result: ProxyResultEntity) -> Response:
        return Response(
            content=result.payload,
            media_type=result.content_type,
            headers={
                **CORS_HEADERS,
                "X-Cache": result.cache_status.value,
                "Cache-Control": f"public, max-age={result.ttl}",
            },
        )

    @staticmethod
    def _json_error(status_code: int, message: str) -> JSONResponse:
        return JSONResponse(
            status_code=status_code,
            content=ErrorResponse(error=message).model_dump(),
            headers=dict(CORS_HEADERS),
        )

    @staticmethod
    def _text_error(status_code: int, message: str) -> PlainTextResponse:
        return PlainTextResponse(message, status_code=status_code, headers=dict(CORS_HEADERS))
