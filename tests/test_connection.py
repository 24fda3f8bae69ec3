"""Connection lifecycle tests — eager vs lazy connect, reuse, retry."""

import pytest
from httpx import ASGITransport, AsyncClient

from app.core.errors import StoreUnavailableError
from app.main import create_app
from app.services.waitlist_store import ensure_indexes

from tests.fakes import (
    COLLECTION,
    DB_NAME,
    FakeClientFactory,
    make_connection,
    make_settings,
)


@pytest.mark.asyncio
async def test_connect_reuses_single_client():
    factory = FakeClientFactory()
    connection = make_connection(factory, make_settings())

    first = await connection.connect()
    second = await connection.connect()
    assert first is second
    assert len(factory.clients) == 1
    assert factory.clients[0].kwargs == {"serverSelectionTimeoutMS": 5000, "tz_aware": True}
    assert "email" in factory.collection(DB_NAME, COLLECTION).unique_fields


@pytest.mark.asyncio
async def test_ensure_indexes_is_idempotent():
    collection = FakeClientFactory().collection(DB_NAME, COLLECTION)
    await ensure_indexes(collection)
    await ensure_indexes(collection)
    assert collection.create_index_calls == 2
    assert collection.unique_fields == {"email"}


@pytest.mark.asyncio
async def test_failed_connect_is_not_cached():
    factory = FakeClientFactory(reachable=False)
    connection = make_connection(factory, make_settings())

    with pytest.raises(StoreUnavailableError):
        await connection.connect()
    assert connection.is_connected is False
    assert factory.clients[0].closed is True

    factory.reachable = True
    await connection.connect()
    assert connection.is_connected is True
    assert len(factory.clients) == 2


@pytest.mark.asyncio
async def test_server_mode_startup_fails_when_unreachable():
    factory = FakeClientFactory(reachable=False)
    settings = make_settings(DEPLOYMENT_MODE="server")
    app = create_app(settings, make_connection(factory, settings))

    with pytest.raises(StoreUnavailableError):
        async with app.router.lifespan_context(app):
            pass


@pytest.mark.asyncio
async def test_server_mode_lifespan_connects_and_closes():
    factory = FakeClientFactory()
    settings = make_settings(DEPLOYMENT_MODE="server")
    connection = make_connection(factory, settings)
    app = create_app(settings, connection)

    async with app.router.lifespan_context(app):
        assert connection.is_connected is True
    assert connection.is_connected is False
    assert factory.clients[0].closed is True


@pytest.mark.asyncio
async def test_serverless_mode_connects_lazily_and_retries():
    factory = FakeClientFactory(reachable=False)
    settings = make_settings(DEPLOYMENT_MODE="serverless")
    connection = make_connection(factory, settings)
    app = create_app(settings, connection)

    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as c:
        r = await c.get("/api/waitlist/stats")
        assert r.status_code == 500
        assert r.json() == {"success": False, "message": "Database connection failed"}

        r = await c.get("/api/health")
        assert r.status_code == 200
        assert r.json()["database"] == "Disconnected"

        factory.reachable = True
        r = await c.post("/api/waitlist", json={"email": "late@example.com"})
        assert r.status_code == 201

        r = await c.get("/api/health")
        assert r.json()["database"] == "Connected"

    # one failed stats attempt, one failed health attempt, one success
    assert len(factory.clients) == 3


def test_cors_origins_follow_app_env():
    assert make_settings(APP_ENV="production").cors_origins == ["https://www.abowe.ae"]
    assert make_settings(APP_ENV="development").cors_origins == [
        "http://localhost:5173",
        "http://localhost:3000",
    ]
