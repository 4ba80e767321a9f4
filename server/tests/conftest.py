"""Test configuration and fixtures."""

import os

# Settings are read at import time, so point them at SQLite before the app loads.
os.environ.setdefault("DATABASE_URL", "sqlite+aiosqlite:///:memory:")
os.environ.setdefault("JWT_SECRET", "test-secret-key-with-at-least-32-bytes")

import itertools

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from hotel_booking.core.database import Base, get_db
from hotel_booking.core.dependencies import create_session_token
from hotel_booking.models import (
    Booking,
    Enrollment,
    Hotel,
    Room,
    Session,
    Ticket,
    TicketStatus,
    TicketType,
    User,
)

# Test database URL (in-memory SQLite for speed)
TEST_DATABASE_URL = "sqlite+aiosqlite:///:memory:"

_sequence = itertools.count(1)


@pytest_asyncio.fixture(scope="function")
async def test_engine():
    """Create a test database engine."""
    engine = create_async_engine(
        TEST_DATABASE_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # Create tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine

    # Drop tables
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)

    await engine.dispose()


@pytest_asyncio.fixture(scope="function")
async def test_session(test_engine):
    """Create a test database session."""
    async_session = async_sessionmaker(
        test_engine,
        class_=AsyncSession,
        expire_on_commit=False,
    )

    async with async_session() as session:
        yield session


@pytest_asyncio.fixture(scope="function")
async def test_app(test_session):
    """Create the application with its database dependency bound to the test session."""
    from hotel_booking.main import create_app

    app = create_app()

    # Override database dependency
    async def override_get_db():
        yield test_session

    app.dependency_overrides[get_db] = override_get_db

    yield app

    # Clean up
    app.dependency_overrides.clear()


@pytest_asyncio.fixture(scope="function")
async def test_client(test_app):
    """Create a test HTTP client."""
    transport = ASGITransport(app=test_app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client


class DataFactory:
    """Builds persisted rows for a test; every helper flushes so ids are set."""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def _save(self, obj):
        self.session.add(obj)
        await self.session.flush()
        return obj

    async def user(self) -> User:
        n = next(_sequence)
        return await self._save(User(email=f"user{n}@example.com", password="hashed-password"))

    async def session_token(self, user: User) -> str:
        token = create_session_token(user.id)
        await self._save(Session(user_id=user.id, token=token))
        return token

    async def auth_headers(self, user: User) -> dict[str, str]:
        return {"Authorization": f"Bearer {await self.session_token(user)}"}

    async def enrollment(self, user: User) -> Enrollment:
        n = next(_sequence)
        return await self._save(Enrollment(
            user_id=user.id,
            name=f"Attendee {n}",
            cpf=f"{n:011d}",
            phone="+5511999999999",
        ))

    async def ticket_type(self, is_remote: bool = False, includes_hotel: bool = True) -> TicketType:
        return await self._save(TicketType(
            name="In person + hotel" if includes_hotel else "Ticket",
            price=60000,
            is_remote=is_remote,
            includes_hotel=includes_hotel,
        ))

    async def ticket(
        self,
        enrollment: Enrollment,
        ticket_type: TicketType,
        status: TicketStatus = TicketStatus.PAID,
    ) -> Ticket:
        return await self._save(Ticket(
            enrollment_id=enrollment.id,
            ticket_type_id=ticket_type.id,
            status=status,
        ))

    async def hotel(self) -> Hotel:
        n = next(_sequence)
        return await self._save(Hotel(name=f"Hotel {n}", image=f"https://example.com/hotel-{n}.png"))

    async def room(self, hotel: Hotel, capacity: int = 3) -> Room:
        n = next(_sequence)
        return await self._save(Room(name=f"{n}", capacity=capacity, hotel_id=hotel.id))

    async def booking(self, user: User, room: Room) -> Booking:
        return await self._save(Booking(user_id=user.id, room_id=room.id))

    async def eligible_user(self) -> User:
        """A user whose paid, in person ticket includes the hotel."""
        user = await self.user()
        enrollment = await self.enrollment(user)
        await self.ticket(enrollment, await self.ticket_type())
        return user


@pytest_asyncio.fixture(scope="function")
async def factory(test_session):
    """Row factory bound to the test session."""
    return DataFactory(test_session)


@pytest.fixture
def missing_id():
    """An id no row in a fresh database will have."""
    return 999999
