"""Sign-up and sign-in."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.domain.enums import Role
from vehicle_rental.domain.errors import (
    DuplicateKey,
    InvalidInput,
    Unauthenticated,
)
from vehicle_rental.domain.lifecycle import require_fields
from vehicle_rental.infrastructure.models import UserModel
from vehicle_rental.infrastructure.repositories import UserRepository
from vehicle_rental.infrastructure.security import (
    create_access_token,
    hash_password,
    verify_password,
)
from .transaction import atomic

logger = logging.getLogger(__name__)

MIN_PASSWORD_LENGTH = 6


def parse_role(value) -> Role:
    try:
        return Role(value)
    except ValueError:
        raise InvalidInput('Role must be either "admin" or "customer"') from None


def check_password(password: str) -> None:
    if len(password) < MIN_PASSWORD_LENGTH:
        raise InvalidInput(
            f"Password must be at least {MIN_PASSWORD_LENGTH} characters"
        )


@dataclass
class SignInResult:
    token: str
    user: UserModel


class AuthService:
    def __init__(self, session: AsyncSession):
        self.session = session
        self.users = UserRepository(session)

    async def sign_up(
        self,
        *,
        name: Optional[str],
        email: Optional[str],
        password: Optional[str],
        phone: Optional[str],
        role: Optional[str] = None,
    ) -> UserModel:
        require_fields(
            {"name": name, "email": email, "password": password, "phone": phone},
            fields=("name", "email", "password", "phone"),
        )
        check_password(password)
        user_role = parse_role(role or Role.CUSTOMER)
        email = email.strip().lower()

        async with atomic(self.session):
            if await self.users.email_taken(email):
                raise DuplicateKey("email", "User already exists")
            try:
                user = await self.users.create(
                    UserModel(
                        name=name,
                        email=email,
                        phone=phone,
                        role=user_role,
                        password=hash_password(password),
                    )
                )
            except IntegrityError:
                raise DuplicateKey("email", "User already exists") from None

        logger.info("User %d signed up as %s", user.id, user.role.value)
        return user

    async def sign_in(self, *, email: Optional[str], password: Optional[str]) -> SignInResult:
        require_fields(
            {"email": email, "password": password}, fields=("email", "password")
        )
        user = await self.users.get_by_email(email.strip())
        if user is None or not verify_password(password, user.password):
            raise Unauthenticated("Invalid email or password")

        token = create_access_token(
            user_id=user.id, name=user.name, email=user.email, role=user.role
        )
        return SignInResult(token=token, user=user)
