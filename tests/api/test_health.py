"""Health Probe — static liveness envelope, no store access."""

from datetime import datetime


async def test_health_returns_static_envelope(client, fake_store):
    res = await client.get("/api/health")

    assert res.status_code == 200
    body = res.json()
    assert body["success"] is True
    assert body["message"] == "XPosts API is running"
    assert body["version"] == "1.0.0"
    datetime.fromisoformat(body["timestamp"])
    assert fake_store.calls == []
