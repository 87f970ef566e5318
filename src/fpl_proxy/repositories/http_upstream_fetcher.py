"""httpx-based upstream fetcher.

Performs the outbound GET against an allow-listed target while looking like
a browser: the FPL origins reject or throttle requests that lack a
realistic User-Agent and a Referer pointing at the fantasy site.

Key features:
- One pooled async client shared by all requests
- Separate header profile and timeout for images and API endpoints
- Redirects followed, TLS certificates verified
- Timeout bounds the whole request, body included
- No retries; failures surface as UpstreamFailureError
"""

import asyncio
import logging

import httpx

from fpl_proxy.config import settings
from fpl_proxy.entities import RequestKind, UpstreamRequestEntity, UpstreamResponseEntity
from fpl_proxy.exceptions import UpstreamFailureError

logger = logging.getLogger(__name__)


class HttpUpstreamFetcher:
    """httpx implementation of the UpstreamFetcher protocol.

    Example:
        ```python
        fetcher = HttpUpstreamFetcher.create()
        response = await fetcher.fetch(request)
        await fetcher.close()
        ```
    """

    IMAGE_HEADERS = {
        "Accept": "image/avif,image/webp,image/apng,image/svg+xml,image/*,*/*;q=0.8",
        "Sec-Fetch-Dest": "image",
        "Sec-Fetch-Mode": "no-cors",
        "Sec-Fetch-Site": "cross-site",
    }

    API_HEADERS = {
        "Accept": "application/json, text/plain, */*",
    }

    def __init__(
        self,
        user_agent: str | None = None,
        referer: str | None = None,
        api_timeout: float | None = None,
        image_timeout: float | None = None,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            user_agent: Browser User-Agent string. Defaults to settings.
            referer: Referer header value. Defaults to settings.
            api_timeout: Timeout for API requests in seconds. Defaults to settings.
            image_timeout: Timeout for image requests in seconds. Defaults to settings.
            client: Pre-built client, mainly for tests. Created lazily if None.
        """
        self._user_agent = user_agent or settings.upstream_user_agent
        self._referer = referer or settings.upstream_referer
        self._api_timeout = api_timeout or settings.api_timeout
        self._image_timeout = image_timeout or settings.image_timeout
        self._client = client

    @classmethod
    def create(
        cls,
        user_agent: str | None = None,
        referer: str | None = None,
        api_timeout: float | None = None,
        image_timeout: float | None = None,
    ) -> "HttpUpstreamFetcher":
        """Factory method to create HttpUpstreamFetcher with defaults."""
        return cls(
            user_agent=user_agent,
            referer=referer,
            api_timeout=api_timeout,
            image_timeout=image_timeout,
        )

    @property
    def client(self) -> httpx.AsyncClient:
        """Lazy-load the async HTTP client.

        Returns:
            The httpx.AsyncClient instance
        """
        if self._client is None:
            self._client = httpx.AsyncClient(
                follow_redirects=True,
                verify=True,
                limits=httpx.Limits(max_connections=100, max_keepalive_connections=20),
            )
        return self._client

    def headers_for(self, kind: RequestKind) -> dict[str, str]:
        """Build the outbound header profile for a request kind."""
        headers = {
            "User-Agent": self._user_agent,
            "Accept-Language": "en-US,en;q=0.9",
            "Referer": self._referer,
        }
        if kind is RequestKind.IMAGE:
            headers.update(self.IMAGE_HEADERS)
        else:
            headers.update(self.API_HEADERS)
        return headers

    def timeout_for(self, kind: RequestKind) -> float:
        return self._image_timeout if kind is RequestKind.IMAGE else self._api_timeout

    async def fetch(self, request: UpstreamRequestEntity) -> UpstreamResponseEntity:
        """Fetch an allowed target.

        Args:
            request: The resolved upstream request

        Returns:
            The upstream response

        Raises:
            UpstreamFailureError: On timeout, network error, non-200 status or empty body
        """
        if not request.allowed:
            # The gate runs first; reaching here is a programming error.
            raise UpstreamFailureError(f"Refusing to fetch disallowed target: {request.identifier!r}")

        timeout = self.timeout_for(request.kind)
        try:
            # httpx applies the timeout per phase; wait_for caps the total.
            response = await asyncio.wait_for(
                self.client.get(
                    request.target,
                    headers=self.headers_for(request.kind),
                    timeout=timeout,
                ),
                timeout=timeout,
            )
        except (httpx.TimeoutException, asyncio.TimeoutError) as e:
            logger.warning("Upstream timeout: %s", request.target)
            raise UpstreamFailureError(f"Upstream timeout: {request.target}") from e
        except httpx.InvalidURL as e:
            logger.warning("Invalid upstream URL %r: %s", request.target, e)
            raise UpstreamFailureError("Invalid upstream URL") from e
        except httpx.HTTPError as e:
            logger.warning("Upstream fetch error for %s: %s", request.target, e)
            raise UpstreamFailureError(f"Upstream fetch error: {e}") from e

        if response.status_code != 200:
            logger.warning("Upstream returned %s for %s", response.status_code, request.target)
            raise UpstreamFailureError(
                f"Upstream returned HTTP {response.status_code}",
                status_code=response.status_code,
            )

        if not response.content:
            logger.warning("Upstream returned an empty body for %s", request.target)
            raise UpstreamFailureError("Upstream returned an empty body", status_code=200)

        return UpstreamResponseEntity(
            status_code=response.status_code,
            content=response.content,
            content_type=response.headers.get("content-type"),
        )

    async def close(self) -> None:
        """Close the async HTTP client.

        Should be called when shutting down the application.
        """
        if self._client is not None:
            await self._client.aclose()
            self._client = None
