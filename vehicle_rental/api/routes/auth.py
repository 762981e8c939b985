"""
Auth endpoints
==============

POST /api/v1/auth/signup -- register a customer (or admin)
POST /api/v1/auth/signin -- exchange credentials for a JWT
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.api.dependencies import get_db
from vehicle_rental.api.middleware import limiter
from vehicle_rental.api.schemas import (
    Envelope,
    SignInRequest,
    SignInResponse,
    SignUpRequest,
    UserResponse,
)
from vehicle_rental.config import settings
from vehicle_rental.services.auth import AuthService

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post(
    "/signup",
    status_code=201,
    response_model=Envelope[UserResponse],
    summary="Register a new user",
)
@limiter.limit(settings.rate_limit)
async def sign_up(
    request: Request,
    body: SignUpRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await AuthService(db).sign_up(
        name=body.name,
        email=body.email,
        password=body.password,
        phone=body.phone,
        role=body.role,
    )
    return Envelope(
        message="User registered successfully",
        data=UserResponse.model_validate(user),
    )


@router.post(
    "/signin",
    response_model=Envelope[SignInResponse],
    summary="Sign in and receive an access token",
)
@limiter.limit(settings.rate_limit)
async def sign_in(
    request: Request,
    body: SignInRequest,
    db: AsyncSession = Depends(get_db),
):
    result = await AuthService(db).sign_in(email=body.email, password=body.password)
    return Envelope(
        message="Login successful",
        data=SignInResponse(
            token=result.token, user=UserResponse.model_validate(result.user)
        ),
    )
