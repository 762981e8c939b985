"""
Booking Lifecycle Engine
========================

Creates bookings and moves them through their lifecycle while keeping each
vehicle's availability flag consistent with its bookings.

Concurrency safety
------------------
* Every operation re-reads current state; nothing is cached between calls.
* Booking creation flips the vehicle with a **compare-and-swap** update
  (``... WHERE availability_status = 'available'``) inside the same
  transaction as the booking insert.  Zero affected rows means another
  transaction won the race and the request fails with ``Conflict``.
* The partial unique index on active bookings per vehicle is the last line:
  an ``IntegrityError`` on insert is reported as the same ``Conflict``.
* Booking and vehicle writes commit together or are rolled back together.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Callable, Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.enums import AvailabilityStatus, BookingStatus, Role
from vehicle_rental.domain.errors import Conflict, Forbidden, InvalidInput, NotFound
from vehicle_rental.domain.lifecycle import next_status, require_fields
from vehicle_rental.domain.pricing import calculate_total_price
from vehicle_rental.infrastructure.models import BookingModel, UserModel, VehicleModel
from vehicle_rental.infrastructure.repositories import (
    BookingRepository,
    UserRepository,
    VehicleRepository,
)
from .transaction import atomic

logger = logging.getLogger(__name__)

VEHICLE_UNAVAILABLE = "Vehicle is not available for booking"


@dataclass
class BookingResult:
    """A booking together with the rows it was joined with."""

    booking: BookingModel
    vehicle: VehicleModel
    customer: Optional[UserModel] = None


def _as_date(value: Any, field: str) -> date:
    """Coerce a date or datetime to a date; anything else is ``InvalidInput``."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise InvalidInput(f"{field} must be a date (YYYY-MM-DD)")


class BookingEngine:
    """Orchestrates booking creation and status transitions.

    ``today`` is injectable so the cancellation cut-off can be tested
    against a fixed calendar date.
    """

    def __init__(
        self, session: AsyncSession, today: Callable[[], date] = date.today
    ):
        self.session = session
        self.today = today
        self.bookings = BookingRepository(session)
        self.vehicles = VehicleRepository(session)
        self.users = UserRepository(session)

    # ── Creation ──────────────────────────────────────────────────────

    async def create_booking(
        self,
        caller: Caller,
        *,
        customer_id: Optional[int] = None,
        vehicle_id: Optional[int] = None,
        rent_start_date: Any = None,
        rent_end_date: Any = None,
    ) -> BookingResult:
        # Customers always book for themselves.
        if caller.role == Role.CUSTOMER:
            customer_id = caller.id

        require_fields(
            {
                "customer_id": customer_id,
                "vehicle_id": vehicle_id,
                "rent_start_date": rent_start_date,
                "rent_end_date": rent_end_date,
            }
        )

        async with atomic(self.session):
            vehicle = await self.vehicles.get_by_id(vehicle_id)
            if vehicle is None:
                raise NotFound("vehicle")
            if vehicle.availability_status != AvailabilityStatus.AVAILABLE:
                raise Conflict(VEHICLE_UNAVAILABLE)

            customer = await self.users.get_by_id(customer_id)
            if customer is None:
                raise NotFound("customer")

            start = _as_date(rent_start_date, "rent_start_date")
            end = _as_date(rent_end_date, "rent_end_date")
            total_price = calculate_total_price(vehicle.daily_rent_price, start, end)

            if not await self.vehicles.reserve(vehicle.id):
                raise Conflict(VEHICLE_UNAVAILABLE)
            try:
                booking = await self.bookings.create(
                    BookingModel(
                        customer_id=customer.id,
                        vehicle_id=vehicle.id,
                        rent_start_date=start,
                        rent_end_date=end,
                        total_price=total_price,
                        status=BookingStatus.ACTIVE,
                    )
                )
            except IntegrityError:
                raise Conflict(VEHICLE_UNAVAILABLE) from None
            vehicle = await self.vehicles.refresh(vehicle)

        logger.info(
            "Booking %d created: vehicle=%d customer=%d %s..%s total=%s",
            booking.id, vehicle.id, customer.id, start, end, total_price,
        )
        return BookingResult(booking=booking, vehicle=vehicle, customer=customer)

    # ── Reads ─────────────────────────────────────────────────────────

    async def list_bookings(self, caller: Caller) -> list[BookingResult]:
        if caller.is_admin:
            rows = await self.bookings.list_for_admin()
            return [
                BookingResult(booking=b, customer=u, vehicle=v) for b, u, v in rows
            ]
        rows = await self.bookings.list_for_customer(caller.id)
        return [BookingResult(booking=b, vehicle=v) for b, v in rows]

    async def get_booking(self, booking_id: int, caller: Caller) -> BookingResult:
        booking = await self.bookings.get_by_id(booking_id)
        if booking is None:
            raise NotFound("booking")
        if not caller.is_admin and not caller.owns(booking.customer_id):
            raise Forbidden("You can only view your own bookings")
        vehicle = await self.vehicles.get_by_id(booking.vehicle_id)
        return BookingResult(booking=booking, vehicle=vehicle)

    # ── Transitions ───────────────────────────────────────────────────

    async def update_booking_status(
        self, booking_id: int, requested_status: Any, caller: Caller
    ) -> BookingResult:
        async with atomic(self.session):
            booking = await self.bookings.get_by_id(booking_id)
            if booking is None:
                raise NotFound("booking")

            previous = BookingStatus(booking.status)
            booking.status = next_status(
                caller,
                customer_id=booking.customer_id,
                current=previous,
                rent_start_date=booking.rent_start_date,
                requested=requested_status,
                today=self.today(),
            )
            booking = await self.bookings.save(booking)
            await self._sync_vehicle_availability(booking.vehicle_id)
            vehicle = await self.vehicles.get_by_id(booking.vehicle_id)

        logger.info(
            "Booking %d %s -> %s by %s %d (vehicle %d now %s)",
            booking.id, previous.value, booking.status.value,
            caller.role.value, caller.id, vehicle.id,
            vehicle.availability_status.value,
        )
        return BookingResult(booking=booking, vehicle=vehicle)

    async def _sync_vehicle_availability(self, vehicle_id: int) -> None:
        """Derive the flag from the bookings: booked iff one is still active."""
        still_active = await self.bookings.has_active_for_vehicle(vehicle_id)
        await self.vehicles.set_availability(
            vehicle_id,
            AvailabilityStatus.BOOKED if still_active else AvailabilityStatus.AVAILABLE,
        )
