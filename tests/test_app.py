import logging

import pytest
from fastapi.testclient import TestClient

from app import create_app
from errors import FetchError
from services.fetcher import FetchResult

CORS = {
    "access-control-allow-origin": "*",
    "access-control-allow-methods": "GET, OPTIONS",
    "access-control-allow-headers": "Content-Type",
}


@pytest.fixture
def client(service) -> TestClient:
    return TestClient(create_app(video_service=service))


def assert_cors(response) -> None:
    for name, value in CORS.items():
        assert response.headers[name] == value


def test_missing_target_url_is_client_error(client, fetcher):
    response = client.get("/api/fetch")

    assert response.status_code == 400
    assert response.json() == {"error": "Please provide ?TARGET_URL=<video_url>"}
    assert_cors(response)
    assert fetcher.calls == []


def test_preflight_returns_bare_ok(client):
    response = client.options("/api/fetch")

    assert response.status_code == 200
    assert response.content == b""
    assert_cors(response)


def test_cache_hit_does_not_call_fetcher(client, cache, fetcher):
    cache.store("https://x.test/v/1", {"title": "cached"}, ttl_seconds=42)

    response = client.get("/api/fetch", params={"TARGET_URL": "https://x.test/v/1"})

    assert response.status_code == 200
    assert response.json() == {
        "status": "success",
        "cached": True,
        "ttl": 42,
        "requested_url": "https://x.test/v/1",
        "response": {"title": "cached"},
    }
    assert_cors(response)
    assert fetcher.calls == []


def test_cache_miss_fetches_and_stores(client, cache, fetcher):
    fetcher.result = FetchResult(status=200, data={"title": "fresh"})

    response = client.get("/api/fetch", params={"url": "https://x.test/v/2"})

    assert response.status_code == 200
    body = response.json()
    assert body["cached"] is False
    assert body["ttl"] == 300
    assert body["api_status"] == 200
    assert body["response"] == {"title": "fresh"}
    assert body["requested_url"] == "https://x.test/v/2"
    assert fetcher.calls == ["https://x.test/v/2"]
    assert cache.lookup("https://x.test/v/2").value == {"title": "fresh"}

    again = client.get("/api/fetch", params={"target_url": "https://x.test/v/2"})
    assert again.json()["cached"] is True
    assert len(fetcher.calls) == 1


def test_upstream_error_status_is_passed_through(client, fetcher):
    fetcher.result = FetchResult(status=429, data={"raw": "Too Many Requests"})

    response = client.get("/api/fetch", params={"TARGET_URL": "https://x.test/v/3"})

    assert response.status_code == 200
    assert response.json()["api_status"] == 429
    assert response.json()["response"] == {"raw": "Too Many Requests"}


def test_fetch_failure_is_server_error(client, cache, fetcher):
    fetcher.error = FetchError("net::ERR_NAME_NOT_RESOLVED at https://getindevice.com/")

    response = client.get("/api/fetch", params={"TARGET_URL": "https://x.test/v/4"})

    assert response.status_code == 500
    assert response.json() == {"error": "net::ERR_NAME_NOT_RESOLVED at https://getindevice.com/"}
    assert_cors(response)
    assert len(cache) == 0


def test_ready_and_health(client, cache):
    cache.store("k", "v")

    ready = client.get("/ready")
    assert ready.status_code == 200
    assert ready.json()["service"] == "video-data-proxy"

    health = client.get("/health").json()
    assert health["status"] == "ok"
    assert health["cache"] == {"entries": 1, "max_entries": 10}


def test_unwrapped_fetcher_error_keeps_its_message(service, cache, fetcher):
    fetcher.error = RuntimeError("browser crashed")
    client = TestClient(create_app(video_service=service), raise_server_exceptions=False)

    response = client.get("/api/fetch", params={"url": "https://x.test/v/5"})

    assert response.status_code == 500
    assert response.json() == {"error": "browser crashed"}
    assert_cors(response)
    assert len(cache) == 0


def test_unexpected_error_still_sets_cors(service, monkeypatch):
    async def explode(target_url):
        raise KeyError("state corrupted")

    monkeypatch.setattr(service, "get_video_data", explode)
    client = TestClient(create_app(video_service=service), raise_server_exceptions=False)

    response = client.get("/api/fetch", params={"url": "https://x.test/v/6"})

    assert response.status_code == 500
    assert response.json() == {"error": "Internal server error"}
    assert_cors(response)


def test_invalid_capacity_is_reported_before_cache_is_built(monkeypatch, caplog):
    import app as app_module

    monkeypatch.setattr(app_module.settings, "cache_max_entries", 0)

    with caplog.at_level(logging.WARNING, logger="app"):
        with pytest.raises(ValueError):
            create_app()

    assert "CACHE_MAX_ENTRIES must be >= 1" in caplog.text
