"""
Shared test fixtures.

Uses an in-memory SQLite database (via aiosqlite) so tests run without
Docker / PostgreSQL.  The production ORM models are used unchanged; a
``StaticPool`` keeps the single in-memory connection alive across sessions.
"""

from datetime import date
from decimal import Decimal
from typing import AsyncGenerator

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)
from sqlalchemy.pool import StaticPool

from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.enums import (
    AvailabilityStatus,
    BookingStatus,
    Role,
    VehicleType,
)
from vehicle_rental.infrastructure.database import Base
from vehicle_rental.infrastructure.models import BookingModel, UserModel, VehicleModel
from vehicle_rental.infrastructure.security import create_access_token

TEST_DB_URL = "sqlite+aiosqlite:///:memory:"


# ── Database ──────────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def test_engine():
    engine = create_async_engine(
        TEST_DB_URL,
        echo=False,
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
def session_factory(test_engine):
    return async_sessionmaker(test_engine, class_=AsyncSession, expire_on_commit=False)


@pytest_asyncio.fixture
async def db_session(session_factory) -> AsyncGenerator[AsyncSession, None]:
    async with session_factory() as session:
        yield session


# ── Factories ─────────────────────────────────────────────────────────


async def add_user(
    session: AsyncSession,
    *,
    name: str = "Test Customer",
    email: str = "customer@mail.com",
    role: Role = Role.CUSTOMER,
    password: str = "not-a-real-hash",
) -> UserModel:
    user = UserModel(name=name, email=email, phone="0123456789", role=role, password=password)
    session.add(user)
    await session.commit()
    return user


async def add_vehicle(
    session: AsyncSession,
    *,
    registration_number: str = "REG-001",
    daily_rent_price: Decimal = Decimal("50.00"),
    availability_status: AvailabilityStatus = AvailabilityStatus.AVAILABLE,
) -> VehicleModel:
    vehicle = VehicleModel(
        vehicle_name="Toyota Corolla",
        type=VehicleType.CAR,
        registration_number=registration_number,
        daily_rent_price=daily_rent_price,
        availability_status=availability_status,
    )
    session.add(vehicle)
    await session.commit()
    return vehicle


async def add_booking(
    session: AsyncSession,
    *,
    customer: UserModel,
    vehicle: VehicleModel,
    start: date = date(2024, 1, 1),
    end: date = date(2024, 1, 4),
    status: BookingStatus = BookingStatus.ACTIVE,
) -> BookingModel:
    booking = BookingModel(
        customer_id=customer.id,
        vehicle_id=vehicle.id,
        rent_start_date=start,
        rent_end_date=end,
        total_price=Decimal("150.00"),
        status=status,
    )
    session.add(booking)
    await session.commit()
    return booking


def caller_for(user: UserModel) -> Caller:
    return Caller(id=user.id, role=user.role)


def auth_header(user: UserModel) -> dict[str, str]:
    token = create_access_token(
        user_id=user.id, name=user.name, email=user.email, role=user.role
    )
    return {"Authorization": f"Bearer {token}"}


# ── HTTP client ───────────────────────────────────────────────────────


@pytest_asyncio.fixture
async def client(session_factory):
    """AsyncClient backed by the SQLite test database."""
    from vehicle_rental.api.app import create_app
    from vehicle_rental.api.dependencies import get_db
    from vehicle_rental.api.middleware import limiter

    async def _test_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app = create_app()
    app.dependency_overrides[get_db] = _test_db
    limiter.enabled = False

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    limiter.enabled = True
