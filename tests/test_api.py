"""
Tests for the FPL cache proxy HTTP API.
"""

import hashlib
import os
import time

import httpx
import pytest
import respx
from fastapi.testclient import TestClient

from fpl_proxy.api.app import create_app
from fpl_proxy.config import Settings
from fpl_proxy.repositories import HttpUpstreamFetcher

from conftest import BOOTSTRAP_BODY, BOOTSTRAP_URL, IMAGE_URL, PNG_BYTES, slow_drip_client


@pytest.fixture
def cache_dir(tmp_path):
    return tmp_path / "img-cache"


@pytest.fixture
def client(cache_dir):
    """Create a test client backed by a temporary cache directory."""
    app_settings = Settings(cache_dir=str(cache_dir), cache_ttl=86400, api_cache_ttl=86400)
    with TestClient(create_app(app_settings)) as test_client:
        yield test_client


@pytest.fixture
def upstream():
    """Mock the FPL origins; unmatched URLs are not called."""
    with respx.mock(assert_all_called=False) as respx_mock:
        yield respx_mock


def assert_cors(response):
    assert response.headers["access-control-allow-origin"] == "*"
    assert "GET" in response.headers["access-control-allow-methods"]
    assert "Content-Type" in response.headers["access-control-allow-headers"]


def test_root(client):
    """Test root endpoint."""
    response = client.get("/")
    assert response.status_code == 200
    assert response.json()["name"] == "FPL Cache Proxy"


def test_image_miss_then_hit(client, upstream, cache_dir):
    """Empty cache: MISS and a file named by the URL digest; repeat: HIT, same bytes."""
    route = upstream.get(IMAGE_URL).mock(
        return_value=httpx.Response(200, content=PNG_BYTES, headers={"Content-Type": "image/png"})
    )

    first = client.get("/proxy", params={"image": IMAGE_URL})
    assert first.status_code == 200
    assert first.headers["x-cache"] == "MISS"
    assert first.headers["content-type"] == "image/png"
    assert first.headers["cache-control"] == "public, max-age=86400"
    assert first.content == PNG_BYTES
    assert_cors(first)
    assert (cache_dir / hashlib.sha256(IMAGE_URL.encode()).hexdigest()).is_file()

    second = client.get("/proxy", params={"image": IMAGE_URL})
    assert second.status_code == 200
    assert second.headers["x-cache"] == "HIT"
    assert second.content == first.content
    assert route.call_count == 1


def test_img_proxy_route(client, upstream):
    """The dedicated image route shares the cache with /proxy?image=."""
    upstream.get(IMAGE_URL).mock(
        return_value=httpx.Response(200, content=PNG_BYTES, headers={"Content-Type": "image/png"})
    )

    first = client.get("/img-proxy", params={"url": IMAGE_URL})
    second = client.get("/proxy", params={"image": IMAGE_URL})

    assert first.headers["x-cache"] == "MISS"
    assert second.headers["x-cache"] == "HIT"


def test_stale_file_is_refetched(client, upstream, cache_dir):
    """An entry older than the window is fetched again and overwritten."""
    route = upstream.get(IMAGE_URL).mock(
        side_effect=[
            httpx.Response(200, content=b"old-bytes", headers={"Content-Type": "image/png"}),
            httpx.Response(200, content=b"new-bytes", headers={"Content-Type": "image/png"}),
        ]
    )
    client.get("/proxy", params={"image": IMAGE_URL})

    path = cache_dir / hashlib.sha256(IMAGE_URL.encode()).hexdigest()
    two_days_ago = time.time() - 2 * 86400
    os.utime(path, (two_days_ago, two_days_ago))

    response = client.get("/proxy", params={"image": IMAGE_URL})
    assert response.headers["x-cache"] == "MISS"
    assert response.content == b"new-bytes"
    assert route.call_count == 2
    assert path.read_bytes().endswith(b"new-bytes")


@pytest.mark.parametrize(
    "path, params, body",
    [
        ("/proxy", {"image": "https://example.com/t1.png"}, "Invalid image URL"),
        ("/img-proxy", {"url": "https://example.com/t1.png"}, "Invalid URL"),
        ("/img-proxy", {}, "Invalid URL"),
    ],
)
def test_invalid_image_is_400_text(client, upstream, path, params, body):
    """Non-allow-listed image URLs get a plain-text 400 and no upstream call."""
    response = client.get(path, params=params)
    assert response.status_code == 400
    assert response.headers["content-type"].startswith("text/plain")
    assert response.text == body
    assert_cors(response)
    assert upstream.calls.call_count == 0


def test_bootstrap_passthrough(client, upstream):
    """Endpoint JSON is forwarded verbatim with application/json."""
    route = upstream.get(BOOTSTRAP_URL).mock(
        return_value=httpx.Response(200, content=BOOTSTRAP_BODY, headers={"Content-Type": "application/json"})
    )

    response = client.get("/proxy", params={"endpoint": "bootstrap-static/"})
    assert response.status_code == 200
    assert response.headers["content-type"] == "application/json"
    assert response.headers["x-cache"] == "MISS"
    assert response.content == BOOTSTRAP_BODY
    assert_cors(response)
    assert route.call_count == 1


def test_suffixed_endpoint_passthrough(client, upstream):
    """Prefix matching admits IDs and trailing path segments."""
    live_url = "https://fantasy.premierleague.com/api/event/5/live/"
    upstream.get(live_url).mock(return_value=httpx.Response(200, content=b'{"elements": []}'))

    response = client.get("/proxy", params={"endpoint": "event/5/live/"})
    assert response.status_code == 200
    assert response.json() == {"elements": []}


@pytest.mark.parametrize("params", [{"endpoint": "not-allowed"}, {}, {"endpoint": ""}, {"image": ""}])
def test_invalid_endpoint_is_400_json(client, upstream, params):
    """Unknown or missing endpoints get a JSON 400 and no upstream call."""
    response = client.get("/proxy", params=params)
    assert response.status_code == 400
    assert response.json() == {"error": "Invalid endpoint"}
    assert_cors(response)
    assert upstream.calls.call_count == 0


def test_endpoint_upstream_failure_is_502_json(client, upstream, cache_dir):
    """Upstream non-200 maps to a JSON 502 and nothing is cached."""
    upstream.get(BOOTSTRAP_URL).mock(return_value=httpx.Response(500, content=b"oops"))

    response = client.get("/proxy", params={"endpoint": "bootstrap-static/"})
    assert response.status_code == 502
    assert response.json() == {"error": "Failed to fetch from FPL API"}
    assert_cors(response)
    assert not cache_dir.exists() or not any(cache_dir.iterdir())


def test_image_empty_body_is_502_text(client, upstream, cache_dir):
    """An empty upstream body maps to a plain-text 502 and nothing is cached."""
    upstream.get(IMAGE_URL).mock(return_value=httpx.Response(200, content=b""))

    response = client.get("/proxy", params={"image": IMAGE_URL})
    assert response.status_code == 502
    assert response.text == "Failed to fetch image"
    assert not cache_dir.exists() or not any(cache_dir.iterdir())


def test_upstream_timeout_is_502(client, upstream):
    upstream.get(IMAGE_URL).mock(side_effect=httpx.ReadTimeout("slow"))

    response = client.get("/img-proxy", params={"url": IMAGE_URL})
    assert response.status_code == 502


@pytest.mark.parametrize(
    "path",
    ["/proxy", "/proxy?endpoint=not-allowed", "/proxy?image=https://example.com/x.png", "/img-proxy"],
)
def test_options_preflight(client, upstream, path):
    """Preflight is an empty 200 with CORS headers regardless of parameters."""
    response = client.options(path)
    assert response.status_code == 200
    assert response.content == b""
    assert_cors(response)
    assert upstream.calls.call_count == 0


def test_stats(client, upstream, cache_dir):
    """Test stats endpoint."""
    upstream.get(IMAGE_URL).mock(return_value=httpx.Response(200, content=PNG_BYTES))
    client.get("/proxy", params={"image": IMAGE_URL})

    response = client.get("/stats")
    assert response.status_code == 200
    data = response.json()
    assert data["backend"] == "file"
    assert data["total_entries"] == 1
    assert data["cache_dir"] == str(cache_dir)
    assert data["image_ttl"] == 86400


def test_health(client):
    """Test health check endpoint."""
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "healthy", "cache_healthy": True}


@pytest.mark.parametrize(
    "path, params",
    [
        ("/img-proxy", {"url": "https://resources.premierleague.com\x00/x.png"}),
        ("/proxy", {"image": "https://resources.premierleague.com\x00/x.png"}),
    ],
)
def test_unparseable_image_url_is_502_text(client, upstream, path, params):
    """An allow-listed URL that httpx cannot parse is a 502, not a server error."""
    response = client.get(path, params=params)
    assert response.status_code == 502
    assert response.text == "Failed to fetch image"
    assert_cors(response)
    assert upstream.calls.call_count == 0


def test_unparseable_endpoint_is_502_json(client, upstream):
    """An allow-listed endpoint name that yields an unparseable URL is a JSON 502."""
    response = client.get("/proxy", params={"endpoint": "event/\x00"})
    assert response.status_code == 502
    assert response.json() == {"error": "Failed to fetch from FPL API"}
    assert upstream.calls.call_count == 0


def test_slow_drip_upstream_is_502_within_bound(cache_dir):
    """A body trickling in past the image timeout ends in a 502 within the bound."""
    app_settings = Settings(cache_dir=str(cache_dir), cache_ttl=86400, image_timeout=0.2)
    fetcher = HttpUpstreamFetcher(image_timeout=0.2, api_timeout=0.2, client=slow_drip_client(10, 0.1))

    with TestClient(create_app(app_settings, fetcher=fetcher)) as slow_client:
        started = time.monotonic()
        response = slow_client.get("/img-proxy", params={"url": IMAGE_URL})
        elapsed = time.monotonic() - started

    assert response.status_code == 502
    assert response.text == "Failed to fetch image"
    assert elapsed < 0.8
    assert not cache_dir.exists() or not any(cache_dir.iterdir())
