"""Unit tests for password hashing and access tokens."""

from datetime import timedelta

import pytest
from jose import jwt

from vehicle_rental.config import settings
from vehicle_rental.domain.enums import Role
from vehicle_rental.domain.errors import Unauthenticated
from vehicle_rental.infrastructure.security import (
    create_access_token,
    decode_access_token,
    hash_password,
    verify_password,
)


class TestPasswords:
    def test_hash_is_not_plaintext(self):
        hashed = hash_password("secret123")
        assert hashed != "secret123"
        assert hashed.startswith("$2")

    def test_verify(self):
        hashed = hash_password("secret123")
        assert verify_password("secret123", hashed)
        assert not verify_password("wrong-pass", hashed)


class TestAccessTokens:
    def _token(self, **kwargs):
        return create_access_token(
            user_id=42, name="Alice", email="alice@mail.com", role=Role.CUSTOMER, **kwargs
        )

    def test_round_trip_resolves_caller(self):
        caller = decode_access_token(self._token())
        assert caller.id == 42
        assert caller.role == Role.CUSTOMER

    def test_claims_carry_profile(self):
        claims = jwt.decode(
            self._token(), settings.jwt_secret, algorithms=[settings.jwt_algorithm]
        )
        assert claims["sub"] == "42"
        assert claims["email"] == "alice@mail.com"
        assert claims["role"] == "customer"

    def test_expired_token(self):
        token = self._token(expires_delta=timedelta(seconds=-5))
        with pytest.raises(Unauthenticated, match="expired"):
            decode_access_token(token)

    def test_tampered_token(self):
        with pytest.raises(Unauthenticated, match="Invalid token"):
            decode_access_token(self._token() + "x")

    def test_foreign_secret(self):
        token = jwt.encode({"sub": "1", "role": "admin"}, "other-secret", algorithm="HS256")
        with pytest.raises(Unauthenticated):
            decode_access_token(token)

    def test_unknown_role(self):
        token = jwt.encode(
            {"sub": "1", "role": "superuser"},
            settings.jwt_secret,
            algorithm=settings.jwt_algorithm,
        )
        with pytest.raises(Unauthenticated):
            decode_access_token(token)
