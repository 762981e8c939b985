"""
Vehicle endpoints
=================

POST   /api/v1/vehicles              -- register a vehicle (admin)
GET    /api/v1/vehicles              -- list the fleet
GET    /api/v1/vehicles/{vehicle_id} -- vehicle details
PUT    /api/v1/vehicles/{vehicle_id} -- update a vehicle (admin)
DELETE /api/v1/vehicles/{vehicle_id} -- delete a vehicle without active bookings (admin)
"""

from fastapi import APIRouter, Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from vehicle_rental.api.dependencies import admin_only, get_db
from vehicle_rental.api.middleware import limiter
from vehicle_rental.api.schemas import (
    Envelope,
    VehicleCreateRequest,
    VehicleResponse,
    VehicleUpdateRequest,
)
from vehicle_rental.config import settings
from vehicle_rental.domain.entities import Caller
from vehicle_rental.services.vehicles import VehicleService

router = APIRouter(prefix="/vehicles", tags=["vehicles"])


@router.post(
    "",
    status_code=201,
    response_model=Envelope[VehicleResponse],
    summary="Register a vehicle",
)
@limiter.limit(settings.rate_limit)
async def create_vehicle(
    request: Request,
    body: VehicleCreateRequest,
    caller: Caller = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(db).create_vehicle(body.model_dump())
    return Envelope(
        message="Vehicle created successfully",
        data=VehicleResponse.model_validate(vehicle),
    )


@router.get("", response_model=Envelope[list[VehicleResponse]], summary="List vehicles")
@limiter.limit(settings.rate_limit)
async def list_vehicles(request: Request, db: AsyncSession = Depends(get_db)):
    vehicles = await VehicleService(db).list_vehicles()
    return Envelope(
        message="Vehicles retrieved successfully" if vehicles else "No vehicles found",
        data=[VehicleResponse.model_validate(v) for v in vehicles],
    )


@router.get(
    "/{vehicle_id}", response_model=Envelope[VehicleResponse], summary="Get a vehicle"
)
@limiter.limit(settings.rate_limit)
async def get_vehicle(
    request: Request, vehicle_id: int, db: AsyncSession = Depends(get_db)
):
    vehicle = await VehicleService(db).get_vehicle(vehicle_id)
    return Envelope(
        message="Vehicle retrieved successfully",
        data=VehicleResponse.model_validate(vehicle),
    )


@router.put(
    "/{vehicle_id}", response_model=Envelope[VehicleResponse], summary="Update a vehicle"
)
@limiter.limit(settings.rate_limit)
async def update_vehicle(
    request: Request,
    vehicle_id: int,
    body: VehicleUpdateRequest,
    caller: Caller = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    vehicle = await VehicleService(db).update_vehicle(
        vehicle_id, body.model_dump(exclude_unset=True)
    )
    return Envelope(
        message="Vehicle updated successfully",
        data=VehicleResponse.model_validate(vehicle),
    )


@router.delete(
    "/{vehicle_id}", response_model=Envelope[None], summary="Delete a vehicle"
)
@limiter.limit(settings.rate_limit)
async def delete_vehicle(
    request: Request,
    vehicle_id: int,
    caller: Caller = Depends(admin_only),
    db: AsyncSession = Depends(get_db),
):
    await VehicleService(db).delete_vehicle(vehicle_id)
    return Envelope(message="Vehicle deleted successfully")
