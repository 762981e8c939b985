"""Fleet management.  Availability is owned by the booking engine."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.domain.enums import AvailabilityStatus, VehicleType
from vehicle_rental.domain.errors import (
    Conflict,
    DuplicateKey,
    InvalidInput,
    NotFound,
)
from vehicle_rental.domain.lifecycle import require_fields
from vehicle_rental.infrastructure.models import VehicleModel
from vehicle_rental.infrastructure.repositories import (
    BookingRepository,
    VehicleRepository,
)
from .transaction import atomic

logger = logging.getLogger(__name__)

VEHICLE_FIELDS = ("vehicle_name", "type", "registration_number", "daily_rent_price")
DUPLICATE_REGISTRATION = "Vehicle with this registration number already exists"


def _vehicle_type(value) -> VehicleType:
    try:
        return VehicleType(value)
    except ValueError:
        allowed = ", ".join(t.value for t in VehicleType)
        raise InvalidInput(f"type must be one of: {allowed}") from None


def _price(value) -> Decimal:
    try:
        price = Decimal(str(value))
    except InvalidOperation:
        raise InvalidInput("daily_rent_price must be a number") from None
    if price <= 0:
        raise InvalidInput("daily_rent_price must be positive")
    return price


class VehicleService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.vehicles = VehicleRepository(session)
        self.bookings = BookingRepository(session)

    async def create_vehicle(self, data: Mapping[str, Any]) -> VehicleModel:
        require_fields(data, fields=VEHICLE_FIELDS)
        vehicle = VehicleModel(
            vehicle_name=data["vehicle_name"],
            type=_vehicle_type(data["type"]),
            registration_number=data["registration_number"],
            daily_rent_price=_price(data["daily_rent_price"]),
            availability_status=AvailabilityStatus.AVAILABLE,
        )

        async with atomic(self.session):
            if await self.vehicles.registration_taken(vehicle.registration_number):
                raise DuplicateKey("registration_number", DUPLICATE_REGISTRATION)
            try:
                vehicle = await self.vehicles.create(vehicle)
            except IntegrityError:
                raise DuplicateKey("registration_number", DUPLICATE_REGISTRATION) from None

        logger.info("Vehicle %d registered (%s)", vehicle.id, vehicle.registration_number)
        return vehicle

    async def list_vehicles(self) -> list[VehicleModel]:
        return await self.vehicles.list_all()

    async def get_vehicle(self, vehicle_id: int) -> VehicleModel:
        vehicle = await self.vehicles.get_by_id(vehicle_id)
        if vehicle is None:
            raise NotFound("vehicle")
        return vehicle

    async def update_vehicle(
        self, vehicle_id: int, changes: Mapping[str, Any]
    ) -> VehicleModel:
        async with atomic(self.session):
            vehicle = await self.vehicles.get_by_id(vehicle_id)
            if vehicle is None:
                raise NotFound("vehicle")

            registration = changes.get("registration_number")
            if registration is not None and registration != vehicle.registration_number:
                if await self.vehicles.registration_taken(registration, exclude_id=vehicle.id):
                    raise DuplicateKey(
                        "registration_number",
                        "Registration number already exists for another vehicle",
                    )
                vehicle.registration_number = registration
            if changes.get("vehicle_name") is not None:
                vehicle.vehicle_name = changes["vehicle_name"]
            if changes.get("type") is not None:
                vehicle.type = _vehicle_type(changes["type"])
            if changes.get("daily_rent_price") is not None:
                # Existing bookings keep the price frozen at creation.
                vehicle.daily_rent_price = _price(changes["daily_rent_price"])

            try:
                vehicle = await self.vehicles.save(vehicle)
            except IntegrityError:
                raise DuplicateKey("registration_number", DUPLICATE_REGISTRATION) from None

        return vehicle

    async def delete_vehicle(self, vehicle_id: int) -> VehicleModel:
        async with atomic(self.session):
            vehicle = await self.vehicles.get_by_id(vehicle_id)
            if vehicle is None:
                raise NotFound("vehicle")
            if await self.bookings.has_active_for_vehicle(vehicle.id):
                raise Conflict("Cannot delete vehicle with active bookings")

            removed = await self.bookings.delete_for_vehicle(vehicle.id)
            await self.vehicles.delete(vehicle)

        logger.info("Vehicle %d deleted (%d past bookings removed)", vehicle_id, removed)
        return vehicle
