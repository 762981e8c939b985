"""
Concurrency safety tests.

Demonstrates:
1. The compare-and-swap on the availability flag rejects a booking whose
   vehicle was taken after it was read (lost check-then-act race).
2. A failure half-way through a booking transaction leaves no partial state.
3. The partial unique index refuses a second active booking per vehicle.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from types import SimpleNamespace
from unittest.mock import AsyncMock

import pytest
from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError

from tests.conftest import add_booking, add_user, add_vehicle, caller_for
from vehicle_rental.domain.enums import AvailabilityStatus, BookingStatus
from vehicle_rental.domain.errors import Conflict
from vehicle_rental.infrastructure.models import BookingModel, VehicleModel
from vehicle_rental.infrastructure.repositories import VehicleRepository
from vehicle_rental.services.bookings import BookingEngine


class TestConditionalReserve:
    @pytest.mark.asyncio
    async def test_reserve_only_succeeds_once(self, db_session):
        vehicle = await add_vehicle(db_session)
        repo = VehicleRepository(db_session)

        assert await repo.reserve(vehicle.id) is True
        assert await repo.reserve(vehicle.id) is False

    @pytest.mark.asyncio
    async def test_reserve_unknown_vehicle(self, db_session):
        assert await VehicleRepository(db_session).reserve(12345) is False

    @pytest.mark.asyncio
    async def test_stale_read_loses_the_race(self, db_session, session_factory):
        """Engine read ``available`` but another transaction booked it first."""
        customer = await add_user(db_session)
        rival = await add_user(db_session, email="rival@mail.com")
        vehicle = await add_vehicle(db_session)

        winner = BookingEngine(db_session)
        await winner.create_booking(
            caller_for(rival),
            vehicle_id=vehicle.id,
            rent_start_date=date(2024, 1, 1),
            rent_end_date=date(2024, 1, 3),
        )

        loser = BookingEngine(db_session)
        stale = SimpleNamespace(
            id=vehicle.id,
            availability_status=AvailabilityStatus.AVAILABLE,
            daily_rent_price=Decimal("50.00"),
        )
        loser.vehicles.get_by_id = AsyncMock(return_value=stale)

        with pytest.raises(Conflict):
            await loser.create_booking(
                caller_for(customer),
                vehicle_id=vehicle.id,
                rent_start_date=date(2024, 1, 1),
                rent_end_date=date(2024, 1, 3),
            )

        async with session_factory() as session:
            result = await session.execute(
                select(func.count()).select_from(BookingModel)
            )
            assert result.scalar() == 1


class TestAtomicity:
    @pytest.mark.asyncio
    async def test_failed_insert_rolls_back_vehicle_flag(self, db_session, session_factory):
        customer = await add_user(db_session)
        vehicle = await add_vehicle(db_session)
        vehicle_id = vehicle.id

        engine = BookingEngine(db_session)
        engine.bookings.create = AsyncMock(side_effect=RuntimeError("connection lost"))

        with pytest.raises(RuntimeError, match="connection lost"):
            await engine.create_booking(
                caller_for(customer),
                vehicle_id=vehicle_id,
                rent_start_date=date(2024, 1, 1),
                rent_end_date=date(2024, 1, 3),
            )

        async with session_factory() as session:
            fresh = await session.get(VehicleModel, vehicle_id)
            assert fresh.availability_status == AvailabilityStatus.AVAILABLE
            count = await session.execute(select(func.count()).select_from(BookingModel))
            assert count.scalar() == 0

    @pytest.mark.asyncio
    async def test_failed_status_sync_rolls_back_booking(self, db_session, session_factory):
        customer = await add_user(db_session)
        vehicle = await add_vehicle(db_session)
        engine = BookingEngine(db_session, today=lambda: date(2023, 12, 1))
        created = await engine.create_booking(
            caller_for(customer),
            vehicle_id=vehicle.id,
            rent_start_date=date(2024, 1, 1),
            rent_end_date=date(2024, 1, 3),
        )

        booking_id, vehicle_id = created.booking.id, vehicle.id
        engine.vehicles.set_availability = AsyncMock(side_effect=RuntimeError("boom"))
        with pytest.raises(RuntimeError, match="boom"):
            await engine.update_booking_status(
                booking_id, "cancelled", caller_for(customer)
            )

        async with session_factory() as session:
            booking = await session.get(BookingModel, booking_id)
            assert booking.status == BookingStatus.ACTIVE
            fresh = await session.get(VehicleModel, vehicle_id)
            assert fresh.availability_status == AvailabilityStatus.BOOKED


class TestActiveBookingIndex:
    @pytest.mark.asyncio
    async def test_second_active_booking_rejected_by_database(self, db_session):
        customer = await add_user(db_session)
        vehicle = await add_vehicle(db_session)
        await add_booking(db_session, customer=customer, vehicle=vehicle)

        with pytest.raises(IntegrityError):
            await add_booking(db_session, customer=customer, vehicle=vehicle)
        await db_session.rollback()

    @pytest.mark.asyncio
    async def test_historical_bookings_do_not_count(self, db_session):
        customer = await add_user(db_session)
        vehicle = await add_vehicle(db_session)
        await add_booking(
            db_session, customer=customer, vehicle=vehicle, status=BookingStatus.RETURNED
        )
        await add_booking(
            db_session, customer=customer, vehicle=vehicle, status=BookingStatus.CANCELLED
        )
        booking = await add_booking(db_session, customer=customer, vehicle=vehicle)
        assert booking.status == BookingStatus.ACTIVE
