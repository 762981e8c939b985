"""Unit tests for the rental pricing calculator."""

from datetime import date, datetime
from decimal import Decimal

import pytest

from vehicle_rental.domain.errors import InvalidDateRange, InvalidInput
from vehicle_rental.domain.pricing import calculate_total_price, rental_days


class TestRentalDays:
    def test_whole_days(self):
        assert rental_days(date(2024, 1, 1), date(2024, 1, 4)) == 3

    def test_single_day(self):
        assert rental_days(date(2024, 1, 1), date(2024, 1, 2)) == 1

    def test_partial_day_rounds_up(self):
        start = datetime(2024, 1, 1, 10, 0)
        end = datetime(2024, 1, 3, 11, 0)  # 2 days + 1 hour
        assert rental_days(start, end) == 3

    def test_spans_month_boundary(self):
        assert rental_days(date(2024, 1, 30), date(2024, 2, 2)) == 3

    def test_same_day_rejected(self):
        with pytest.raises(InvalidDateRange):
            rental_days(date(2024, 1, 1), date(2024, 1, 1))

    def test_end_before_start_rejected(self):
        with pytest.raises(InvalidDateRange):
            rental_days(date(2024, 1, 5), date(2024, 1, 1))


class TestCalculateTotalPrice:
    def test_rate_times_days(self):
        price = calculate_total_price(Decimal("100"), date(2024, 1, 1), date(2024, 1, 4))
        assert price == Decimal("300.00")

    def test_scenario_price(self):
        price = calculate_total_price(Decimal("50.00"), date(2024, 1, 1), date(2024, 1, 4))
        assert price == Decimal("150.00")

    def test_fractional_rate_rounded_to_cents(self):
        price = calculate_total_price(Decimal("33.335"), date(2024, 1, 1), date(2024, 1, 2))
        assert price == Decimal("33.34")

    def test_accepts_float_rate_exactly(self):
        price = calculate_total_price(19.99, date(2024, 1, 1), date(2024, 1, 4))
        assert price == Decimal("59.97")

    def test_result_has_currency_precision(self):
        price = calculate_total_price(Decimal("10"), date(2024, 1, 1), date(2024, 1, 2))
        assert price.as_tuple().exponent == -2

    def test_non_positive_rate_rejected(self):
        with pytest.raises(InvalidInput):
            calculate_total_price(Decimal("0"), date(2024, 1, 1), date(2024, 1, 2))

    def test_invalid_range_rejected_before_pricing(self):
        with pytest.raises(InvalidDateRange):
            calculate_total_price(Decimal("10"), date(2024, 1, 2), date(2024, 1, 1))
