"""User management: listing, profile updates and guarded deletion."""

from __future__ import annotations

import logging
from typing import Any, Mapping

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.errors import Conflict, DuplicateKey, Forbidden, NotFound
from vehicle_rental.infrastructure.models import UserModel
from vehicle_rental.infrastructure.repositories import BookingRepository, UserRepository
from vehicle_rental.infrastructure.security import hash_password
from .auth import check_password, parse_role
from .transaction import atomic

logger = logging.getLogger(__name__)


class UserService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)
        self.bookings = BookingRepository(session)

    async def list_users(self) -> list[UserModel]:
        return await self.users.list_all()

    async def update_user(
        self, user_id: int, changes: Mapping[str, Any], caller: Caller
    ) -> UserModel:
        """Apply a partial update; keys absent from *changes* stay untouched."""
        if not caller.is_admin and not caller.owns(user_id):
            raise Forbidden("You can only update your own profile")
        if changes.get("role") is not None and not caller.is_admin:
            raise Forbidden("Only admin can change user roles")

        async with atomic(self.session):
            user = await self.users.get_by_id(user_id)
            if user is None:
                raise NotFound("user")

            if changes.get("name") is not None:
                user.name = changes["name"]
            if changes.get("phone") is not None:
                user.phone = changes["phone"]
            if changes.get("role") is not None:
                user.role = parse_role(changes["role"])
            if changes.get("email") is not None:
                email = changes["email"].strip().lower()
                if email != user.email and await self.users.email_taken(
                    email, exclude_id=user.id
                ):
                    raise DuplicateKey("email", "Email already exists for another user")
                user.email = email
            if changes.get("password"):
                check_password(changes["password"])
                user.password = hash_password(changes["password"])

            try:
                user = await self.users.save(user)
            except IntegrityError:
                raise DuplicateKey("email", "Email already exists for another user") from None

        return user

    async def delete_user(self, user_id: int) -> UserModel:
        async with atomic(self.session):
            user = await self.users.get_by_id(user_id)
            if user is None:
                raise NotFound("user")
            if await self.bookings.has_active_for_customer(user.id):
                raise Conflict("Cannot delete user with active bookings")

            removed = await self.bookings.delete_for_customer(user.id)
            await self.users.delete(user)

        logger.info("User %d deleted (%d past bookings removed)", user_id, removed)
        return user
