import asyncio

import pytest
from fastapi.testclient import TestClient

from landing_cloner import main
from landing_cloner.config import Settings
from landing_cloner.models import CloneResult


@pytest.fixture
def client():
    with TestClient(main.app) as c:
        yield c


def test_health(client):
    resp = client.get("/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "active_pages": 0}


def test_clone_adds_scheme_and_returns_camel_case(client, monkeypatch):
    calls = []

    async def fake_clone(url, user_message=None, *, pool=None, settings=None):
        calls.append((url, user_message, pool))
        return CloneResult(success=False, source_url=url, error="Failed to load")

    monkeypatch.setattr(main, "clone_website", fake_clone)

    resp = client.post("/clone", json={"url": "  acme.test ", "message": "make it like this"})

    assert resp.status_code == 200
    body = resp.json()
    assert body["sourceUrl"] == "https://acme.test"
    assert body["success"] is False
    assert calls[0][:2] == ("https://acme.test", "make it like this")
    assert calls[0][2] is main.app.state.browser_pool


def test_clone_requires_url(client):
    assert client.post("/clone", json={"url": "   "}).status_code == 422
    assert client.post("/clone", json={}).status_code == 422


def test_clone_timeout_maps_to_504(client, monkeypatch):
    async def slow_clone(url, user_message=None, *, pool=None, settings=None):
        await asyncio.sleep(5)

    monkeypatch.setattr(main, "clone_website", slow_clone)
    monkeypatch.setattr(main, "get_settings", lambda: Settings(_env_file=None, clone_timeout=0))

    resp = client.post("/clone", json={"url": "https://acme.test"})
    assert resp.status_code == 504
