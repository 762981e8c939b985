"""
Booking lifecycle rules.

Pure guard functions used by the booking engine.  They take plain values
(never ORM rows) so every rule can be exercised without a database.

State machine
-------------
============  ==================  ==============================  ==========
State         Event (role)        Guard                           Next
============  ==================  ==============================  ==========
active        cancel (customer)   owner and today < start date    cancelled
any           return (admin)      none                            returned
============  ==================  ==============================  ==========
"""

from __future__ import annotations

from datetime import date
from typing import Any, Mapping, Optional

from .entities import Caller
from .enums import BOOKING_TRANSITIONS, ROLE_TARGET_STATUS, BookingStatus, Role
from .errors import Conflict, Forbidden, MissingField

BOOKING_FIELDS = ("customer_id", "vehicle_id", "rent_start_date", "rent_end_date")


def require_fields(payload: Mapping[str, Any], fields=BOOKING_FIELDS) -> None:
    """Raise ``MissingField`` naming every absent / empty field."""
    missing = [f for f in fields if payload.get(f) in (None, "")]
    if missing:
        raise MissingField(missing)


def _as_status(value: Any) -> Optional[BookingStatus]:
    try:
        return BookingStatus(value)
    except ValueError:
        return None


def next_status(
    caller: Caller,
    *,
    customer_id: int,
    current: BookingStatus,
    rent_start_date: date,
    requested: Any,
    today: date,
) -> BookingStatus:
    """Validate *requested* for *caller* and return the status to apply.

    *requested* is the raw client value; anything other than the caller's
    role target (unknown strings and ``None`` included) is ``Forbidden``.
    """
    allowed_target = ROLE_TARGET_STATUS[caller.role]
    requested = _as_status(requested)
    if requested != allowed_target:
        if caller.role == Role.CUSTOMER:
            raise Forbidden("Customers may only cancel bookings")
        raise Forbidden("Admins may only mark bookings as returned")

    if caller.role == Role.CUSTOMER:
        if not caller.owns(customer_id):
            raise Forbidden("You can only cancel your own bookings")
        if current != BookingStatus.ACTIVE:
            raise Conflict(f"Booking cannot be cancelled in status {current.value}")
        if not today < rent_start_date:
            raise Conflict("Booking cannot be cancelled after start date")

    if requested not in BOOKING_TRANSITIONS.get(current, set()):
        raise Conflict(f"Cannot transition from {current.value} to {requested.value}")
    return requested
