"""
User endpoints
==============

GET    /api/v1/users           -- list users (admin)
PUT    /api/v1/users/{user_id} -- update a profile (admin, or the user itself)
DELETE /api/v1/users/{user_id} -- delete a user without active bookings (admin)
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.api.dependencies import admin_only, any_user, get_db
from vehicle_rental.api.middleware import limiter
from vehicle_rental.api.schemas import Envelope, UserResponse, UserUpdateRequest
from vehicle_rental.config import settings
from vehicle_rental.domain.entities import Caller
from vehicle_rental.services.users import UserService

router = APIRouter(prefix="/users", tags=["users"])


@router.get("", response_model=Envelope[list[UserResponse]], summary="List users")
@limiter.limit(settings.rate_limit)
async def list_users(
    request: Request,
    caller: Caller = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    users = await UserService(db).list_users()
    return Envelope(
        message="Users retrieved successfully" if users else "No users found",
        data=[UserResponse.model_validate(u) for u in users],
    )


@router.put(
    "/{user_id}", response_model=Envelope[UserResponse], summary="Update a user"
)
@limiter.limit(settings.rate_limit)
async def update_user(
    request: Request,
    user_id: int,
    body: UserUpdateRequest,
    caller: Caller = Depends(any_user),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).update_user(
        user_id, body.model_dump(exclude_unset=True), caller
    )
    return Envelope(
        message="User updated successfully", data=UserResponse.model_validate(user)
    )


@router.delete(
    "/{user_id}", response_model=Envelope[UserResponse], summary="Delete a user"
)
@limiter.limit(settings.rate_limit)
async def delete_user(
    request: Request,
    user_id: int,
    caller: Caller = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    user = await UserService(db).delete_user(user_id)
    return Envelope(
        message="User deleted successfully", data=UserResponse.model_validate(user)
    )
