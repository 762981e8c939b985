"""Domain enumerations and state-transition rules."""

import enum


class Role(str, enum.Enum):
    ADMIN = "admin"
    CUSTOMER = "customer"


class VehicleType(str, enum.Enum):
    CAR = "car"
    BIKE = "bike"
    VAN = "van"
    SUV = "SUV"


class AvailabilityStatus(str, enum.Enum):
    AVAILABLE = "available"
    BOOKED = "booked"


class BookingStatus(str, enum.Enum):
    ACTIVE = "active"
    CANCELLED = "cancelled"
    RETURNED = "returned"


# State machine: maps current status -> set of valid next statuses.
# Admins may mark a booking returned from any status (see DESIGN.md).
BOOKING_TRANSITIONS: dict[BookingStatus, set[BookingStatus]] = {
    BookingStatus.ACTIVE: {BookingStatus.CANCELLED, BookingStatus.RETURNED},
    BookingStatus.CANCELLED: {BookingStatus.RETURNED},
    BookingStatus.RETURNED: {BookingStatus.RETURNED},
}

# The single status each role is allowed to request.
ROLE_TARGET_STATUS: dict[Role, BookingStatus] = {
    Role.CUSTOMER: BookingStatus.CANCELLED,
    Role.ADMIN: BookingStatus.RETURNED,
}
