"""API test fixtures — FastAPI test client over an in-memory PostStore.

Invariants:
    - Every test gets a fresh FakePostStore
    - get_post_store dependency overridden; the lifespan (and its real
      httpx client) never runs under ASGITransport
    - Unhandled exceptions are rendered by the app, not re-raised into the test

Design Decisions:
    - raise_app_exceptions=False: anything that escapes the middleware reaches
      the catch-all handler, which Starlette re-raises after responding; the
      test only cares about the response
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.infrastructure.postgrest_store import get_post_store
from app.main import app

from tests.api.fake_store import FakePostStore


@pytest.fixture
def fake_store():
    return FakePostStore()


@pytest.fixture
async def client(fake_store):
    """FastAPI test client with the store dependency overridden."""
    app.dependency_overrides[get_post_store] = lambda: fake_store
    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
    app.dependency_overrides.clear()


@pytest.fixture
def environment(monkeypatch):
    """Switch app settings to another environment for one test."""
    def _use(name: str):
        monkeypatch.setattr(
            app.state, "settings",
            app.state.settings.model_copy(update={"environment": name}),
        )
    return _use
