"""
Password hashing (bcrypt via passlib) and JWT issuance / verification
(python-jose).
"""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from vehicle_rental.config import settings
from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.enums import Role
from vehicle_rental.domain.errors import Unauthenticated

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain: str, hashed: str) -> bool:
    return pwd_context.verify(plain, hashed)


def create_access_token(
    *, user_id: int, name: str, email: str, role: Role,
    expires_delta: timedelta | None = None,
) -> str:
    expire = datetime.now(timezone.utc) + (
        expires_delta or timedelta(days=settings.jwt_expires_days)
    )
    claims = {
        "sub": str(user_id),
        "name": name,
        "email": email,
        "role": Role(role).value,
        "exp": expire,
    }
    return jwt.encode(claims, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> Caller:
    """Resolve a token to the caller identity or raise ``Unauthenticated``."""
    try:
        payload = jwt.decode(
            token, settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
    except ExpiredSignatureError:
        raise Unauthenticated("Token has expired!") from None
    except JWTError:
        raise Unauthenticated("Invalid token!") from None

    try:
        return Caller(id=int(payload["sub"]), role=Role(payload["role"]))
    except (KeyError, TypeError, ValueError):
        raise Unauthenticated("Invalid token!") from None
