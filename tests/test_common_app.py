import pytest

import common_app
from queuepanel.utils.interspection import get_factory_by_path

from conftest import FakeStore


def test_get_factory_by_path_accepts_both_separators():
    assert get_factory_by_path("conftest:demo_queues") is get_factory_by_path("conftest.demo_queues")


def test_get_factory_by_path_rejects_missing_objects():
    with pytest.raises(AttributeError):
        get_factory_by_path("conftest:no_such_factory")
    with pytest.raises(TypeError):
        get_factory_by_path("queuepanel.constants.STATUSES")


@pytest.mark.asyncio
async def test_build_app_from_environment(monkeypatch):
    import httpx

    monkeypatch.setenv("QUEUE_PANEL_BASE_PATH", "/ops")
    monkeypatch.setenv("QUEUE_PANEL_QUEUES_FACTORY", "conftest:demo_queues")
    app = common_app.build_app()

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://panel.test") as client:
            r = await client.get("/ops/queues")
            assert r.status_code == 200, r.text
            assert [d["name"] for d in r.json()["data"]] == ["imported"]


@pytest.mark.asyncio
async def test_stats_from_dedicated_redis_connection(monkeypatch):
    import httpx
    from redis.asyncio import Redis

    class FakeRedis(FakeStore):
        closed = False

        async def ping(self):
            return True

        async def aclose(self):
            FakeRedis.closed = True

    monkeypatch.setattr(Redis, "from_url", classmethod(lambda cls, url, **kwargs: FakeRedis({"redis_version": "7.4.0"})))
    monkeypatch.setenv("QUEUE_PANEL_QUEUES_FACTORY", "conftest:demo_queues")
    monkeypatch.setenv("QUEUE_PANEL_USE_REDIS_STATS", "1")
    app = common_app.build_app()

    async with app.router.lifespan_context(app):
        transport = httpx.ASGITransport(app=app)
        async with httpx.AsyncClient(transport=transport, base_url="http://panel.test") as client:
            r = await client.get("/queues")
            assert r.json()["stats"] == {"redis_version": "7.4.0"}

    assert FakeRedis.closed is True
