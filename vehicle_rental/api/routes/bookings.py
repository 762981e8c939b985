"""
Booking endpoints
=================

POST /api/v1/bookings              -- book an available vehicle (admin, customer)
GET  /api/v1/bookings              -- all bookings (admin) or own bookings (customer)
GET  /api/v1/bookings/{booking_id} -- one booking (admin, or its customer)
PUT  /api/v1/bookings/{booking_id} -- cancel (customer) or mark returned (admin)
"""

from fastapi import APIRouter, Depends, Request

from vehicle_rental.api.dependencies import any_user, get_booking_engine
from vehicle_rental.api.middleware import limiter
from vehicle_rental.api.schemas import (
    BookingCreateRequest,
    BookingResponse,
    BookingStatusRequest,
    CustomerSummary,
    Envelope,
    VehicleSummary,
)
from vehicle_rental.config import settings
from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.enums import BookingStatus
from vehicle_rental.services.bookings import BookingEngine, BookingResult

router = APIRouter(prefix="/bookings", tags=["bookings"])


def _present(result: BookingResult, *vehicle_fields: str, with_customer=False):
    response = BookingResponse.model_validate(result.booking)
    response.vehicle = VehicleSummary(
        **{f: getattr(result.vehicle, f) for f in vehicle_fields}
    )
    if with_customer and result.customer is not None:
        response.customer = CustomerSummary(
            name=result.customer.name, email=result.customer.email
        )
    return response


@router.post(
    "",
    status_code=201,
    response_model=Envelope[BookingResponse],
    response_model_exclude_none=True,
    summary="Create a booking",
    description=(
        "Books an available vehicle for the given dates.  The total price is "
        "computed once (rental days x daily rate) and the vehicle becomes "
        "booked in the same transaction.  Customers always book for themselves."
    ),
)
@limiter.limit(settings.rate_limit)
async def create_booking(
    request: Request,
    body: BookingCreateRequest,
    caller: Caller = Depends(any_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    result = await engine.create_booking(
        caller,
        customer_id=body.customer_id,
        vehicle_id=body.vehicle_id,
        rent_start_date=body.rent_start_date,
        rent_end_date=body.rent_end_date,
    )
    return Envelope(
        message="Booking created successfully",
        data=_present(result, "vehicle_name", "daily_rent_price"),
    )


@router.get(
    "",
    response_model=Envelope[list[BookingResponse]],
    response_model_exclude_none=True,
    summary="List bookings visible to the caller",
)
@limiter.limit(settings.rate_limit)
async def list_bookings(
    request: Request,
    caller: Caller = Depends(any_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    results = await engine.list_bookings(caller)
    if caller.is_admin:
        data = [
            _present(r, "vehicle_name", "registration_number", with_customer=True)
            for r in results
        ]
    else:
        data = [
            _present(r, "vehicle_name", "registration_number", "type")
            for r in results
        ]
    return Envelope(message="Bookings retrieved successfully", data=data)


@router.get(
    "/{booking_id}",
    response_model=Envelope[BookingResponse],
    response_model_exclude_none=True,
    summary="Get a booking",
)
@limiter.limit(settings.rate_limit)
async def get_booking(
    request: Request,
    booking_id: int,
    caller: Caller = Depends(any_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    result = await engine.get_booking(booking_id, caller)
    return Envelope(
        message="Booking retrieved successfully",
        data=_present(
            result, "vehicle_name", "registration_number", "availability_status"
        ),
    )


@router.put(
    "/{booking_id}",
    response_model=Envelope[BookingResponse],
    response_model_exclude_none=True,
    summary="Cancel or return a booking",
    description=(
        "Customers may cancel their own active booking before its start date. "
        "Admins may mark a booking as returned.  Either way the vehicle's "
        "availability is updated in the same transaction."
    ),
)
@limiter.limit(settings.rate_limit)
async def update_booking(
    request: Request,
    booking_id: int,
    body: BookingStatusRequest,
    caller: Caller = Depends(any_user),
    engine: BookingEngine = Depends(get_booking_engine),
):
    result = await engine.update_booking_status(booking_id, body.status, caller)
    if result.booking.status == BookingStatus.RETURNED:
        message = "Booking marked as returned. Vehicle is now available"
    else:
        message = "Booking cancelled successfully"
    return Envelope(
        message=message, data=_present(result, "availability_status")
    )
