from datetime import datetime, timedelta, timezone
from decimal import Decimal

import pytest

from conftest import at
from shared.domain.value_objects import Interval, Money
from apps.bookings.domain.entities import RentalMode
from apps.bookings.domain.exceptions import InvalidDurationError, InvalidRangeError
from apps.bookings.domain.pricing import HOURLY_CHOICES, RateCard, calculate_price, rental_window

RATES = RateCard(hourly_rate=Money(Decimal("100")), daily_rate=Money(Decimal("600")))


def test_daily_price_is_the_daily_rate():
    assert calculate_price(RentalMode.DAILY, RATES) == Money(Decimal("600"))


@pytest.mark.parametrize("hours", HOURLY_CHOICES)
def test_hourly_price_is_rate_times_hours(hours):
    assert calculate_price(RentalMode.HOURLY, RATES, hours) == Money(Decimal("100") * hours)


def test_price_is_deterministic():
    assert calculate_price(RentalMode.HOURLY, RATES, 4) == calculate_price(RentalMode.HOURLY, RATES, 4)


def test_hourly_price_accepts_counts_outside_the_offered_choices():
    assert calculate_price(RentalMode.HOURLY, RATES, 3) == Money(Decimal("300"))


@pytest.mark.parametrize("hours", [None, 0, -2, 2.5, True, "4"])
def test_hourly_price_needs_a_positive_whole_hour_count(hours):
    with pytest.raises(InvalidDurationError) as exc_info:
        calculate_price(RentalMode.HOURLY, RATES, hours)

    assert exc_info.value.code == "invalid_duration"


def test_rate_card_rejects_mixed_currencies():
    with pytest.raises(ValueError):
        RateCard(hourly_rate=Money(100, "INR"), daily_rate=Money(600, "USD"))


def test_rental_window_follows_the_mode():
    start = at(1, 9)

    assert rental_window(start, RentalMode.HOURLY, 4) == Interval(start, start + timedelta(hours=4))
    assert rental_window(start, RentalMode.DAILY) == Interval(start, start + timedelta(days=1))

    with pytest.raises(InvalidDurationError):
        rental_window(start, RentalMode.HOURLY)


@pytest.mark.parametrize("hours", [10**8, 10**12])
def test_hourly_window_past_the_calendar_is_invalid_duration(hours):
    with pytest.raises(InvalidDurationError):
        rental_window(at(1, 9), RentalMode.HOURLY, hours)


def test_daily_window_past_the_calendar_is_invalid_range():
    start = datetime.max.replace(tzinfo=timezone.utc) - timedelta(hours=1)

    with pytest.raises(InvalidRangeError):
        rental_window(start, RentalMode.DAILY)
