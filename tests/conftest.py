"""
Shared fixtures for the FPL cache proxy tests.
"""

import asyncio

import httpx
import pytest

from fpl_proxy.entities import UpstreamResponseEntity
from fpl_proxy.repositories import InMemoryCacheRepository
from fpl_proxy.services import AllowListGate

IMAGE_URL = "https://resources.premierleague.com/premierleague/badges/70/t1@x2.png"
PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-badge-bytes"
BOOTSTRAP_URL = "https://fantasy.premierleague.com/api/bootstrap-static/"
BOOTSTRAP_BODY = b'{"events": [{"id": 1, "is_current": true}], "teams": []}'


class FakeClock:
    """Manually advanced time source."""

    def __init__(self, now: float = 1_700_000_000.0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeFetcher:
    """Upstream fetcher double returning queued responses or raising queued errors."""

    def __init__(self, *results) -> None:
        self._results = list(results)
        self.calls = []
        self.closed = False

    async def fetch(self, request):
        self.calls.append(request)
        result = self._results.pop(0) if len(self._results) > 1 else self._results[0]
        if isinstance(result, Exception):
            raise result
        return result

    async def close(self) -> None:
        self.closed = True


def slow_drip_client(chunk_count: int = 5, delay: float = 0.1) -> httpx.AsyncClient:
    """Client whose upstream sends a 200 body one byte at a time.

    Each byte arrives well inside any per-read timeout, but the whole body
    takes chunk_count * delay seconds.
    """

    async def drip():
        for _ in range(chunk_count):
            await asyncio.sleep(delay)
            yield b"x"

    async def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, content=drip(), headers={"Content-Type": "image/png"})

    return httpx.AsyncClient(transport=httpx.MockTransport(handler))


def upstream(content: bytes, content_type: str | None = "image/png") -> UpstreamResponseEntity:
    return UpstreamResponseEntity(status_code=200, content=content, content_type=content_type)


@pytest.fixture
def clock():
    """A fake clock starting at a fixed instant."""
    return FakeClock()


@pytest.fixture
def memory_store(clock):
    """In-memory cache store sharing the fake clock."""
    return InMemoryCacheRepository(clock=clock)


@pytest.fixture
def gate():
    """Allow-list gate with the default FPL configuration."""
    return AllowListGate(
        image_host="resources.premierleague.com",
        allowed_endpoints=("bootstrap-static", "fixtures", "event", "entry", "dream-team"),
        api_base_url="https://fantasy.premierleague.com/api/",
        strict_endpoint_matching=False,
    )
