"""
Pricing

Pure functions deriving a booking's price and rental window from its
rental mode. Both are deterministic so a stored price can always be
reproduced from the stored mode, hours and rate card.
"""

from dataclasses import dataclass
from datetime import datetime, timedelta

from shared.domain.base import ValueObject
from shared.domain.value_objects import Interval, Money
from apps.bookings.domain.entities import RentalMode
from apps.bookings.domain.exceptions import InvalidDurationError, InvalidRangeError

# Hour counts offered to renters. The calculator accepts any positive integer.
HOURLY_CHOICES = (2, 4, 6, 8, 10, 12)

DAILY_WINDOW = timedelta(hours=24)


@dataclass(frozen=True)
class RateCard(ValueObject):
    """Hourly and daily rates of one piece of equipment."""
    hourly_rate: Money
    daily_rate: Money

    def __post_init__(self):
        if self.hourly_rate.currency != self.daily_rate.currency:
            raise ValueError(
                f"Rate card mixes currencies: {self.hourly_rate.currency} "
                f"and {self.daily_rate.currency}"
            )

    @property
    def currency(self) -> str:
        return self.daily_rate.currency


def _validated_hours(hours) -> int:
    if hours is None:
        raise InvalidDurationError("Hourly rentals need an hour count.")
    if isinstance(hours, bool) or not isinstance(hours, int):
        raise InvalidDurationError(f"Hour count must be a whole number, got {hours!r}.")
    if hours <= 0:
        raise InvalidDurationError(f"Hour count must be positive, got {hours}.")
    return hours


def calculate_price(mode: RentalMode, rate_card: RateCard, hours: int | None = None) -> Money:
    """
    Total price of a rental

    daily  -> the daily rate, for one 24h day
    hourly -> hourly rate * hours

    Raises:
        InvalidDurationError: hourly mode without a positive integer hour count
    """
    if mode is RentalMode.DAILY:
        return rate_card.daily_rate
    if mode is RentalMode.HOURLY:
        return rate_card.hourly_rate * _validated_hours(hours)
    raise ValueError(f"Unknown rental mode: {mode!r}")


def rental_window(start: datetime, mode: RentalMode, hours: int | None = None) -> Interval:
    """
    Interval covered by a rental beginning at ``start``

    A daily rental covers 24 hours, an hourly one the given hour count.

    Raises:
        InvalidDurationError: hourly mode with a bad hour count, or one
            reaching past the last representable instant
        InvalidRangeError: daily mode starting too late to end
    """
    if mode is RentalMode.DAILY:
        try:
            return Interval(start, start + DAILY_WINDOW)
        except OverflowError as exc:
            raise InvalidRangeError(f"A daily rental starting at {start.isoformat()} cannot end.") from exc
    if mode is RentalMode.HOURLY:
        count = _validated_hours(hours)
        try:
            return Interval(start, start + timedelta(hours=count))
        except OverflowError as exc:
            raise InvalidDurationError(f"{count} hours from {start.isoformat()} is out of range.") from exc
    raise ValueError(f"Unknown rental mode: {mode!r}")
