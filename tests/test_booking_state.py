"""Unit tests for booking lifecycle rules (no database)."""

from datetime import date

import pytest

from vehicle_rental.domain.entities import Caller
from vehicle_rental.domain.enums import BookingStatus, Role
from vehicle_rental.domain.errors import (
    Conflict,
    ErrorKind,
    Forbidden,
    MissingField,
)
from vehicle_rental.domain.lifecycle import next_status, require_fields

CUSTOMER = Caller(id=7, role=Role.CUSTOMER)
OTHER_CUSTOMER = Caller(id=8, role=Role.CUSTOMER)
ADMIN = Caller(id=1, role=Role.ADMIN)
START = date(2024, 1, 1)


def _next(caller, requested, *, current=BookingStatus.ACTIVE, today=date(2023, 12, 30)):
    return next_status(
        caller,
        customer_id=CUSTOMER.id,
        current=current,
        rent_start_date=START,
        requested=requested,
        today=today,
    )


class TestCustomerCancel:
    def test_owner_cancels_before_start(self):
        assert _next(CUSTOMER, BookingStatus.CANCELLED) == BookingStatus.CANCELLED

    def test_cancel_on_start_date_fails(self):
        with pytest.raises(Conflict):
            _next(CUSTOMER, BookingStatus.CANCELLED, today=START)

    def test_cancel_after_start_fails(self):
        with pytest.raises(Conflict):
            _next(CUSTOMER, BookingStatus.CANCELLED, today=date(2024, 1, 2))

    def test_other_customer_forbidden(self):
        with pytest.raises(Forbidden):
            _next(OTHER_CUSTOMER, BookingStatus.CANCELLED)

    def test_customer_cannot_return(self):
        with pytest.raises(Forbidden):
            _next(CUSTOMER, BookingStatus.RETURNED)

    def test_customer_cannot_reactivate(self):
        with pytest.raises(Forbidden):
            _next(CUSTOMER, BookingStatus.ACTIVE)

    @pytest.mark.parametrize("current", [BookingStatus.CANCELLED, BookingStatus.RETURNED])
    def test_terminal_booking_cannot_be_cancelled(self, current):
        with pytest.raises(Conflict):
            _next(CUSTOMER, BookingStatus.CANCELLED, current=current)


class TestAdminReturn:
    def test_admin_returns_active_booking(self):
        assert _next(ADMIN, BookingStatus.RETURNED) == BookingStatus.RETURNED

    def test_admin_returns_after_start(self):
        result = _next(ADMIN, BookingStatus.RETURNED, today=date(2024, 2, 1))
        assert result == BookingStatus.RETURNED

    @pytest.mark.parametrize("current", [BookingStatus.CANCELLED, BookingStatus.RETURNED])
    def test_admin_return_is_permissive_on_terminal_states(self, current):
        assert _next(ADMIN, BookingStatus.RETURNED, current=current) == BookingStatus.RETURNED

    def test_admin_cannot_cancel(self):
        with pytest.raises(Forbidden):
            _next(ADMIN, BookingStatus.CANCELLED)


class TestPayloadHelpers:
    def test_require_fields_lists_every_missing_field(self):
        with pytest.raises(MissingField) as exc:
            require_fields({"customer_id": 1, "vehicle_id": None, "rent_start_date": ""})
        assert exc.value.fields == ["vehicle_id", "rent_start_date", "rent_end_date"]
        assert exc.value.kind == ErrorKind.MISSING_FIELD

    def test_require_fields_accepts_complete_payload(self):
        require_fields(
            {
                "customer_id": 1,
                "vehicle_id": 2,
                "rent_start_date": START,
                "rent_end_date": date(2024, 1, 3),
            }
        )


class TestRequestedStatusValues:
    @pytest.mark.parametrize("requested", ["completed", None, "", "CANCELLED"])
    def test_customer_unknown_or_missing_status_forbidden(self, requested):
        with pytest.raises(Forbidden):
            _next(CUSTOMER, requested)

    @pytest.mark.parametrize("requested", ["completed", None, "active"])
    def test_admin_unknown_or_missing_status_forbidden(self, requested):
        with pytest.raises(Forbidden):
            _next(ADMIN, requested)

    def test_raw_strings_accepted(self):
        assert _next(CUSTOMER, "cancelled") == BookingStatus.CANCELLED
        assert _next(ADMIN, "returned") == BookingStatus.RETURNED
