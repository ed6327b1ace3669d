"""Shared fixtures: in-memory database, seeded rooms/users and an API client."""

from collections.abc import AsyncGenerator
from datetime import date, datetime, timedelta

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

import app.models  # noqa: F401  registers tables on Base.metadata
from app.core.timezone import BusinessClock
from app.database import Base, get_db
from app.domain.booking_rules import BookingPolicy
from app.main import app as fastapi_app
from app.models.room import Amenity, Room, RoomAmenity
from app.models.user import User
from app.services.availability_service import AvailabilityService
from app.services.booking_service import BookingService

TIMEZONE = "Africa/Johannesburg"


@pytest.fixture
def clock() -> BusinessClock:
    return BusinessClock(TIMEZONE)


@pytest.fixture
def policy() -> BookingPolicy:
    return BookingPolicy()


@pytest.fixture
def booking_service(clock, policy) -> BookingService:
    return BookingService(clock=clock, policy=policy)


@pytest.fixture
def availability_service(clock, policy) -> AvailabilityService:
    return AvailabilityService(clock=clock, policy=policy)


@pytest.fixture
def future_day(clock) -> date:
    """A local calendar day safely in the future."""
    return clock.to_local_display(clock.now()).date() + timedelta(days=7)


def at(day: date, hour: int, minute: int = 0) -> datetime:
    """Naive business-local wall-clock time."""
    return datetime(day.year, day.month, day.day, hour, minute)


@pytest.fixture
async def session_factory() -> AsyncGenerator[async_sessionmaker[AsyncSession], None]:
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        await _seed(session)

    yield factory

    await engine.dispose()


@pytest.fixture
async def db(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


@pytest.fixture
async def client(session_factory) -> AsyncGenerator[AsyncClient, None]:
    async def override_get_db() -> AsyncGenerator[AsyncSession, None]:
        async with session_factory() as session:
            yield session

    fastapi_app.dependency_overrides[get_db] = override_get_db
    transport = ASGITransport(app=fastapi_app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    fastapi_app.dependency_overrides.clear()


async def _seed(session: AsyncSession) -> None:
    amenities = {
        name: Amenity(name=name)
        for name in ("Projector", "Whiteboard", "Video Conference", "Phone", "TV Screen")
    }
    session.add_all(amenities.values())

    board_room = Room(name="Board Room", capacity=12, location="3rd Floor")
    room_a = Room(name="Small Meeting Room A", capacity=4, location="2nd Floor")
    session.add_all([board_room, room_a])
    session.add_all([User(name="John Doe"), User(name="Jane Smith")])
    await session.flush()

    for name in ("Projector", "Whiteboard"):
        session.add(RoomAmenity(room_id=board_room.id, amenity_id=amenities[name].id))
    session.add(RoomAmenity(room_id=room_a.id, amenity_id=amenities["TV Screen"].id))
    await session.commit()
