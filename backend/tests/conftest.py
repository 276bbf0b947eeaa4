"""
Pytest fixtures for test database, client, and authentication.

Every test runs the configured engine from its own temporary directory, so
the default SQLite file is fresh per test and concurrent requests get
separate connections exactly as in a running server. The app's DB, session
store and inventory lock dependencies are overridden per test.
"""

from datetime import datetime, timezone, timedelta
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport
from sqlalchemy.ext.asyncio import AsyncEngine, AsyncSession, async_sessionmaker

from eventspot.main import app
from eventspot.core.config import get_settings
from eventspot.db.base import Base
from eventspot.db.session import get_db, build_engine, build_sessionmaker
from eventspot.core.security import hash_password
from eventspot.models import Artist, Category, Event, User, Venue
from eventspot.services.interfaces.memory_session_store import InMemorySessionStore
from eventspot.services.inventory_locks import InventoryLocks, get_inventory_locks
from eventspot.services.session_factory import get_session_store

TEST_PASSWORD = "testpassword123"


@pytest_asyncio.fixture
async def engine(tmp_path, monkeypatch) -> AsyncGenerator[AsyncEngine, None]:
    """
    Engine for the configured DATABASE_URL, run from a temporary directory so
    the default relative SQLite file is fresh for every test.
    """
    monkeypatch.chdir(tmp_path)
    engine = build_engine(get_settings().DATABASE_URL)
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine: AsyncEngine) -> async_sessionmaker[AsyncSession]:
    return build_sessionmaker(engine)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
def session_store() -> InMemorySessionStore:
    return InMemorySessionStore(ttl_seconds=3600)


@pytest.fixture
def inventory_locks() -> InventoryLocks:
    return InventoryLocks()


@pytest_asyncio.fixture
async def client(session_factory, session_store, inventory_locks) -> AsyncGenerator[AsyncClient, None]:
    """HTTP client whose requests each get their own session on the test database."""

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_session_store] = lambda: session_store
    app.dependency_overrides[get_inventory_locks] = lambda: inventory_locks

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


@pytest_asyncio.fixture
async def test_user(db_session: AsyncSession) -> User:
    user = User(
        username="testuser",
        password=hash_password(TEST_PASSWORD),
        name="Test User",
        email="test@example.com",
        phone="9876543210",
        city="Delhi",
    )
    db_session.add(user)
    await db_session.commit()
    await db_session.refresh(user)
    return user


@pytest_asyncio.fixture
async def logged_in(client: AsyncClient, test_user: User) -> User:
    """Log the test user in; the session cookie stays in the client's jar."""
    response = await client.post("/api/auth/login", json={
        "username": "testuser",
        "password": TEST_PASSWORD,
    })
    assert response.status_code == 200
    return test_user


@pytest_asyncio.fixture
async def catalog(db_session: AsyncSession) -> dict:
    """One category, venue and artist for events to point at."""
    category = Category(name="Comedy", icon="fa-laugh-beam", color="accent")
    venue = Venue(
        name="Siri Fort Auditorium",
        address="August Kranti Marg",
        city="Delhi",
        state="Delhi",
        capacity=2000,
        image="https://example.com/venue.jpg",
    )
    artist = Artist(name="Vir Das", type="Comedian", image="https://example.com/artist.jpg")
    db_session.add_all([category, venue, artist])
    await db_session.commit()
    return {"category": category, "venue": venue, "artist": artist}


async def _make_event(db_session: AsyncSession, catalog: dict, **overrides) -> Event:
    fields = dict(
        title="Comedy Nights with Vir Das",
        description="An evening of laughter and wit",
        image="https://example.com/event.jpg",
        date=datetime.now(timezone.utc) + timedelta(days=30),
        price=800,
        venue_id=catalog["venue"].id,
        category_id=catalog["category"].id,
        artist_id=catalog["artist"].id,
        is_featured=True,
        is_trending=False,
        total_seats=500,
        available_seats=200,
    )
    fields.update(overrides)
    event = Event(**fields)
    db_session.add(event)
    await db_session.commit()
    await db_session.refresh(event)
    return event


@pytest_asyncio.fixture
async def test_event(db_session: AsyncSession, catalog: dict) -> Event:
    """500 seats in total, 200 still available, 800 per seat."""
    return await _make_event(db_session, catalog)


@pytest_asyncio.fixture
async def small_event(db_session: AsyncSession, catalog: dict) -> Event:
    """Five seats, all available, for seat numbering tests."""
    return await _make_event(
        db_session,
        catalog,
        title="Intimate Set",
        is_featured=False,
        total_seats=5,
        available_seats=5,
        price=500,
    )


@pytest_asyncio.fixture
async def sold_out_event(db_session: AsyncSession, catalog: dict) -> Event:
    return await _make_event(
        db_session,
        catalog,
        title="Sold Out Show",
        is_featured=False,
        total_seats=50,
        available_seats=0,
    )
