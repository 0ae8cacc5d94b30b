"""Error Translation — store, network and unexpected failures become envelopes.

Invariants:
    - StoreError → 500 "Database error" with the store message as details
    - UnreachableError → 503 "Service Unavailable"
    - Uncaught exception → 500 "Internal Server Error"
    - 503/500-unknown details only echoed in development
    - Unknown routes and unsupported methods → 404 listing the four routes
    - Oversized bodies → 413 before parsing, declared length or chunked
    - CORS headers are present on 413 and 500 responses
"""

import pytest

from app.core.domain_types import AVAILABLE_ROUTES
from app.core.errors import StoreError, UnreachableError
from app.main import app


async def test_store_error_is_500_database_error(client, fake_store):
    fake_store.fail_with = StoreError(
        'relation "posts" does not exist', "select", store_code="42P01",
    )

    res = await client.get("/api/posts")

    assert res.status_code == 500
    assert res.json()["success"] is False
    assert res.json()["error"] == "Database error"
    assert res.json()["details"] == 'relation "posts" does not exist'
    assert "timestamp" in res.json()


async def test_store_error_details_kept_in_production(client, fake_store, environment):
    environment("production")
    fake_store.fail_with = StoreError("boom", "insert")

    res = await client.post(
        "/api/posts", json={"title": "a", "body": "b", "user_id": 1},
    )

    assert res.status_code == 500
    assert res.json()["details"] == "boom"


async def test_unreachable_is_503_with_details_in_development(
    client, fake_store, environment,
):
    environment("development")
    fake_store.fail_with = UnreachableError("[Errno -2] Name not known", "select")

    res = await client.get("/api/posts/1")

    assert res.status_code == 503
    assert res.json()["error"] == "Service Unavailable"
    assert res.json()["details"] == "[Errno -2] Name not known"


async def test_unreachable_hides_details_in_production(
    client, fake_store, environment,
):
    environment("production")
    fake_store.fail_with = UnreachableError("connection refused", "select")

    res = await client.get("/api/posts")

    assert res.status_code == 503
    assert "details" not in res.json()
    assert "timestamp" in res.json()


async def test_unexpected_exception_is_500_internal(client, fake_store, environment):
    environment("development")
    fake_store.fail_with = RuntimeError("kaboom")

    res = await client.get("/api/posts")

    assert res.status_code == 500
    assert res.json()["error"] == "Internal Server Error"
    assert res.json()["details"] == "kaboom"


async def test_unexpected_exception_hides_details_in_production(
    client, fake_store, environment,
):
    environment("production")
    fake_store.fail_with = RuntimeError("secret internals")

    res = await client.get("/api/posts")

    assert res.status_code == 500
    assert res.json()["error"] == "Internal Server Error"
    assert "details" not in res.json()


@pytest.mark.parametrize("method, path", [
    ("DELETE", "/api/posts/1"),
    ("PUT", "/api/posts/1"),
    ("GET", "/api/users"),
    ("POST", "/api/health"),
])
async def test_undefined_route_is_404_with_route_list(client, method, path):
    res = await client.request(method, path)

    assert res.status_code == 404
    body = res.json()
    assert body["success"] is False
    assert body["error"] == "Route not found"
    assert body["details"] == f"The requested route {method} {path} does not exist"
    assert body["availableRoutes"] == list(AVAILABLE_ROUTES)


async def test_route_not_found_details_include_query(client):
    res = await client.get("/nope?x=1")
    assert res.json()["details"] == "The requested route GET /nope?x=1 does not exist"


async def test_oversized_body_is_413(client, fake_store, monkeypatch):
    monkeypatch.setattr(
        app.state, "settings",
        app.state.settings.model_copy(update={"max_body_bytes": 16}),
    )

    res = await client.post(
        "/api/posts",
        json={"title": "a" * 64, "body": "b", "user_id": 1},
    )

    assert res.status_code == 413
    assert res.json()["error"] == "Payload Too Large"
    assert fake_store.calls == []


async def _chunks(*parts: bytes):
    for part in parts:
        yield part


def _limit_body(monkeypatch, limit: int) -> None:
    monkeypatch.setattr(
        app.state, "settings",
        app.state.settings.model_copy(update={"max_body_bytes": limit}),
    )


async def test_oversized_chunked_body_is_413(client, fake_store, monkeypatch):
    _limit_body(monkeypatch, 16)

    res = await client.post(
        "/api/posts",
        content=_chunks(b'{"title": "', b"a" * 64, b'", "body": "b", "user_id": 1}'),
        headers={"Content-Type": "application/json"},
    )

    assert res.status_code == 413
    assert res.json()["error"] == "Payload Too Large"
    assert fake_store.calls == []


async def test_chunked_body_within_limit_is_accepted(client, fake_store):
    res = await client.post(
        "/api/posts",
        content=_chunks(b'{"title": "Hi", ', b'"body": "World", "user_id": 1}'),
        headers={"Content-Type": "application/json"},
    )

    assert res.status_code == 201
    assert fake_store.created[0].title == "Hi"


async def test_unexpected_exception_response_carries_cors_headers(
    client, fake_store,
):
    fake_store.fail_with = RuntimeError("kaboom")

    res = await client.get(
        "/api/posts", headers={"Origin": "http://frontend.test"},
    )

    assert res.status_code == 500
    assert res.json()["error"] == "Internal Server Error"
    assert "access-control-allow-origin" in res.headers


async def test_oversized_body_response_carries_cors_headers(client, monkeypatch):
    _limit_body(monkeypatch, 16)

    res = await client.post(
        "/api/posts",
        json={"title": "a" * 64, "body": "b", "user_id": 1},
        headers={"Origin": "http://frontend.test"},
    )

    assert res.status_code == 413
    assert "access-control-allow-origin" in res.headers


async def test_cors_preflight_allows_implemented_methods(client):
    res = await client.options(
        "/api/posts",
        headers={
            "Origin": "http://frontend.test",
            "Access-Control-Request-Method": "POST",
        },
    )

    assert res.status_code == 200
    allowed = res.headers["access-control-allow-methods"]
    assert "POST" in allowed
    assert "DELETE" not in allowed
    assert "PUT" not in allowed
