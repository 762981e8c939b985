"""
Rental pricing
==============

Formula
-------
Total = ceil(rental days) x Daily_Rate

* Rental days are measured from ``rent_start_date`` to ``rent_end_date``;
  a partial day (only possible with datetimes) counts as a whole day.
* The result is quantized to currency precision (0.01, half-up).

Complexity: O(1) per price calculation.
"""

from __future__ import annotations

import math
from datetime import date, datetime
from decimal import ROUND_HALF_UP, Decimal
from typing import Union

from .errors import InvalidDateRange, InvalidInput

CURRENCY_PRECISION = Decimal("0.01")
SECONDS_PER_DAY = 86_400

DateLike = Union[date, datetime]


def rental_days(start: DateLike, end: DateLike) -> int:
    """Number of billable days between *start* and *end* (end exclusive)."""
    if end <= start:
        raise InvalidDateRange()
    delta = end - start
    return math.ceil(delta.total_seconds() / SECONDS_PER_DAY)


def calculate_total_price(
    daily_rate: Union[Decimal, int, float, str], start: DateLike, end: DateLike
) -> Decimal:
    rate = Decimal(str(daily_rate))
    if rate <= 0:
        raise InvalidInput("daily_rent_price must be positive")
    days = rental_days(start, end)
    return (rate * days).quantize(CURRENCY_PRECISION, rounding=ROUND_HALF_UP)
