"""Test fixtures for the hotel backend."""
from __future__ import annotations

import os
from collections.abc import AsyncIterator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import create_async_engine

os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///./test.db")

from hotel_api.core.config import get_settings
from hotel_api.db.base import Base
from hotel_api.db.session import dispose_engine
from hotel_api.main import app
from hotel_api.models import Guest, Reservation, Room  # noqa: F401


@pytest.fixture(scope="session")
def db_url(tmp_path_factory: pytest.TempPathFactory) -> str:
    """Provide a temporary SQLite database URL for the test session."""
    db_path = tmp_path_factory.mktemp("db") / "test.db"
    return f"sqlite+aiosqlite:///{db_path}"


@pytest_asyncio.fixture()
async def reset_database(db_url: str) -> AsyncIterator[None]:
    """Drop and recreate the database schema for an isolated test."""
    os.environ["DATABASE_URL"] = db_url
    get_settings.cache_clear()
    get_settings()

    await dispose_engine(db_url)
    engine = create_async_engine(db_url, future=True)
    async with engine.begin() as connection:
        await connection.run_sync(Base.metadata.drop_all)
        await connection.run_sync(Base.metadata.create_all)
    await engine.dispose()
    yield
    await dispose_engine(db_url)


@pytest_asyncio.fixture()
async def client(reset_database: None) -> AsyncIterator[AsyncClient]:
    """Yield an async client bound to a freshly created schema."""
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


@pytest_asyncio.fixture()
async def hotel(client: AsyncClient) -> dict[str, object]:
    """Create two rooms and two guests through the API."""
    rooms = []
    for number, room_type, price in (
        ("101", "Double", "100.00"),
        ("201", "Suite", "250.00"),
    ):
        response = await client.post(
            "/api/v1/rooms",
            json={
                "room_number": number,
                "room_type": room_type,
                "price_per_night": price,
            },
        )
        assert response.status_code == 201, response.text
        rooms.append(response.json())

    guests = []
    for name, email in (
        ("Jane Doe", "jane@example.com"),
        ("Pierre Martin", "pierre@example.fr"),
    ):
        response = await client.post(
            "/api/v1/guests",
            json={"name": name, "email": email, "phone": "555-0100"},
        )
        assert response.status_code == 201, response.text
        guests.append(response.json())

    return {"client": client, "rooms": rooms, "guests": guests}
