"""
Repository Pattern -- abstracts DB access so domain logic stays DB-agnostic.

Each repository receives an ``AsyncSession`` (unit-of-work) and exposes
domain-relevant queries only.  Repositories never commit; transaction
boundaries belong to the services.
"""

from __future__ import annotations

from typing import Optional

from sqlalchemy import delete, exists, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from .models import BookingModel, UserModel, VehicleModel
from vehicle_rental.domain.enums import AvailabilityStatus, BookingStatus


class UserRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, user: UserModel) -> UserModel:
        self.session.add(user)
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def save(self, user: UserModel) -> UserModel:
        await self.session.flush()
        await self.session.refresh(user)
        return user

    async def get_by_id(self, user_id: int) -> Optional[UserModel]:
        return await self.session.get(UserModel, user_id)

    async def get_by_email(self, email: str) -> Optional[UserModel]:
        result = await self.session.execute(
            select(UserModel).where(UserModel.email == email.lower())
        )
        return result.scalar_one_or_none()

    async def email_taken(self, email: str, exclude_id: int | None = None) -> bool:
        query = select(UserModel.id).where(UserModel.email == email.lower())
        if exclude_id is not None:
            query = query.where(UserModel.id != exclude_id)
        result = await self.session.execute(select(query.exists()))
        return bool(result.scalar())

    async def list_all(self) -> list[UserModel]:
        result = await self.session.execute(
            select(UserModel).order_by(UserModel.created_at.desc(), UserModel.id.desc())
        )
        return list(result.scalars().all())

    async def delete(self, user: UserModel) -> None:
        await self.session.delete(user)
        await self.session.flush()


class VehicleRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, vehicle: VehicleModel) -> VehicleModel:
        self.session.add(vehicle)
        await self.session.flush()
        await self.session.refresh(vehicle)
        return vehicle

    async def save(self, vehicle: VehicleModel) -> VehicleModel:
        await self.session.flush()
        await self.session.refresh(vehicle)
        return vehicle

    async def get_by_id(self, vehicle_id: int) -> Optional[VehicleModel]:
        return await self.session.get(
            VehicleModel, vehicle_id, populate_existing=True
        )

    async def refresh(self, vehicle: VehicleModel) -> VehicleModel:
        await self.session.refresh(vehicle)
        return vehicle

    async def registration_taken(
        self, registration_number: str, exclude_id: int | None = None
    ) -> bool:
        query = select(VehicleModel.id).where(
            VehicleModel.registration_number == registration_number
        )
        if exclude_id is not None:
            query = query.where(VehicleModel.id != exclude_id)
        result = await self.session.execute(select(query.exists()))
        return bool(result.scalar())

    async def list_all(self) -> list[VehicleModel]:
        result = await self.session.execute(
            select(VehicleModel).order_by(
                VehicleModel.created_at.desc(), VehicleModel.id.desc()
            )
        )
        return list(result.scalars().all())

    async def reserve(self, vehicle_id: int) -> bool:
        """Compare-and-swap ``available -> booked``.

        Returns False when no row matched, i.e. the vehicle was booked by a
        concurrent transaction after it was read.
        """
        result = await self.session.execute(
            update(VehicleModel)
            .where(
                VehicleModel.id == vehicle_id,
                VehicleModel.availability_status == AvailabilityStatus.AVAILABLE,
            )
            .values(availability_status=AvailabilityStatus.BOOKED)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount == 1

    async def set_availability(
        self, vehicle_id: int, status: AvailabilityStatus
    ) -> None:
        await self.session.execute(
            update(VehicleModel)
            .where(VehicleModel.id == vehicle_id)
            .values(availability_status=status)
            .execution_options(synchronize_session=False)
        )

    async def delete(self, vehicle: VehicleModel) -> None:
        await self.session.delete(vehicle)
        await self.session.flush()


class BookingRepository:
    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, booking: BookingModel) -> BookingModel:
        self.session.add(booking)
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def save(self, booking: BookingModel) -> BookingModel:
        await self.session.flush()
        await self.session.refresh(booking)
        return booking

    async def get_by_id(self, booking_id: int) -> Optional[BookingModel]:
        return await self.session.get(
            BookingModel, booking_id, populate_existing=True
        )

    async def has_active_for_vehicle(
        self, vehicle_id: int, exclude_id: int | None = None
    ) -> bool:
        query = select(BookingModel.id).where(
            BookingModel.vehicle_id == vehicle_id,
            BookingModel.status == BookingStatus.ACTIVE,
        )
        if exclude_id is not None:
            query = query.where(BookingModel.id != exclude_id)
        result = await self.session.execute(select(query.exists()))
        return bool(result.scalar())

    async def has_active_for_customer(self, customer_id: int) -> bool:
        result = await self.session.execute(
            select(
                exists().where(
                    BookingModel.customer_id == customer_id,
                    BookingModel.status == BookingStatus.ACTIVE,
                )
            )
        )
        return bool(result.scalar())

    async def list_for_admin(
        self,
    ) -> list[tuple[BookingModel, UserModel, VehicleModel]]:
        """Every booking joined with its customer and vehicle, newest first."""
        result = await self.session.execute(
            select(BookingModel, UserModel, VehicleModel)
            .join(UserModel, BookingModel.customer_id == UserModel.id)
            .join(VehicleModel, BookingModel.vehicle_id == VehicleModel.id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        return [tuple(row) for row in result.all()]

    async def list_for_customer(
        self, customer_id: int
    ) -> list[tuple[BookingModel, VehicleModel]]:
        result = await self.session.execute(
            select(BookingModel, VehicleModel)
            .join(VehicleModel, BookingModel.vehicle_id == VehicleModel.id)
            .where(BookingModel.customer_id == customer_id)
            .order_by(BookingModel.created_at.desc(), BookingModel.id.desc())
        )
        return [tuple(row) for row in result.all()]

    async def delete_for_customer(self, customer_id: int) -> int:
        result = await self.session.execute(
            delete(BookingModel)
            .where(BookingModel.customer_id == customer_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    async def delete_for_vehicle(self, vehicle_id: int) -> int:
        result = await self.session.execute(
            delete(BookingModel)
            .where(BookingModel.vehicle_id == vehicle_id)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount
