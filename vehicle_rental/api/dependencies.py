"""FastAPI dependency injection helpers."""

from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.enums import Role
from vehicle_rental.domain.errors import Forbidden, Unauthenticated
from vehicle_rental.infrastructure.database import async_session_factory
from vehicle_rental.infrastructure.security import decode_access_token
from vehicle_rental.services.bookings import BookingEngine


async def get_db() -> AsyncSession:  # type: ignore[misc]
    """Yield an async DB session; commit on success, rollback on error."""
    async with async_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise


def get_booking_engine(db: AsyncSession = Depends(get_db)) -> BookingEngine:
    return BookingEngine(db)


def get_current_caller(
    authorization: Optional[str] = Header(None),
) -> Caller:
    """Resolve ``Authorization: Bearer <jwt>`` (bare tokens accepted)."""
    if not authorization:
        raise Unauthenticated()
    token = authorization.strip()
    if token.lower().startswith("bearer "):
        token = token[7:].strip()
    return decode_access_token(token)


def require_roles(*roles: Role):
    """Dependency factory: the caller must hold one of *roles*."""

    def _check(caller: Caller = Depends(get_current_caller)) -> Caller:
        if roles and caller.role not in roles:
            raise Forbidden("You are not authorized to access this resource!")
        return caller

    return _check


any_user = require_roles(Role.ADMIN, Role.CUSTOMER)
admin_only = require_roles(Role.ADMIN)
