"""Shared fixtures — app wired to an in-memory Mongo stand-in.

Design Decisions:
    - httpx ASGITransport does not run the lifespan, so server-mode fixtures
      connect explicitly before yielding the client
    - Each test builds its own app via create_app; nothing is shared between tests
"""

import pytest
from httpx import ASGITransport, AsyncClient

from app.main import create_app
from app.services.waitlist_store import WaitlistStore

from tests.fakes import (
    COLLECTION,
    DB_NAME,
    FakeClientFactory,
    make_connection,
    make_settings,
)


@pytest.fixture
def factory():
    return FakeClientFactory()


@pytest.fixture
def collection(factory):
    return factory.collection(DB_NAME, COLLECTION)


@pytest.fixture
async def store(factory, collection):
    connection = make_connection(factory, make_settings())
    await connection.connect()
    yield WaitlistStore(connection.collection)
    connection.close()


@pytest.fixture
async def client(factory):
    settings = make_settings()
    connection = make_connection(factory, settings)
    await connection.connect()
    app = create_app(settings, connection)
    async with AsyncClient(
        transport=ASGITransport(app=app), base_url="http://test",
    ) as c:
        yield c
    connection.close()
