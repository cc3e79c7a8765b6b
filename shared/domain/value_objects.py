"""
Common Value Objects

Value objects used across multiple domains:
- Money: Represents monetary amounts with currency
- Interval: Represents a half-open range of instants (start to end)
"""

from dataclasses import dataclass
from datetime import datetime, timedelta
from decimal import Decimal

from shared.domain.base import ValueObject
from shared.domain.exceptions import InvalidRangeError

DEFAULT_CURRENCY = 'INR'


@dataclass(frozen=True)
class Money(ValueObject):
    """
    Money value object

    Represents a non-negative, finite monetary amount with currency.
    Immutable and supports arithmetic operations.
    """
    amount: Decimal
    currency: str = DEFAULT_CURRENCY

    def __post_init__(self):
        # Normalise ints and numeric strings so equality is by value
        if not isinstance(self.amount, Decimal):
            if isinstance(self.amount, bool) or not isinstance(self.amount, (int, str)):
                raise TypeError("Money amount must be a Decimal, int or numeric string")
            object.__setattr__(self, 'amount', Decimal(self.amount))
        if not self.amount.is_finite():
            raise ValueError("Amount must be a finite number")
        if self.amount < 0:
            raise ValueError("Amount cannot be negative")
        if not self.currency or len(self.currency) != 3:
            raise ValueError(f"Currency must be a three-letter code, got {self.currency!r}")

    def __add__(self, other: 'Money') -> 'Money':
        """Add two money objects"""
        if not isinstance(other, Money):
            raise TypeError("Can only add Money to Money")
        if self.currency != other.currency:
            raise ValueError(f"Cannot add different currencies: {self.currency} and {other.currency}")
        return Money(self.amount + other.amount, self.currency)

    def __mul__(self, factor: int) -> 'Money':
        """Multiply money by a whole number of units"""
        if isinstance(factor, bool) or not isinstance(factor, (int, Decimal)):
            raise TypeError("Can only multiply Money by an int or Decimal")
        return Money(self.amount * factor, self.currency)

    def __str__(self):
        return f"{self.amount:,.2f} {self.currency}"

    def __repr__(self):
        return f"Money({self.amount}, '{self.currency}')"


@dataclass(frozen=True)
class Interval(ValueObject):
    """
    Interval value object

    Represents a range from start (inclusive) to end (exclusive).
    Used for rental windows and availability checks.
    """
    start: datetime
    end: datetime

    def __post_init__(self):
        if self.start >= self.end:
            raise InvalidRangeError(
                f"Start ({self.start.isoformat()}) must be before end ({self.end.isoformat()})"
            )

    def overlaps(self, other: 'Interval') -> bool:
        """
        Check if this interval overlaps with another

        End is exclusive, so an interval ending exactly when another
        begins does not overlap it.

        Examples:
            - [09:00, 13:00) overlaps [11:00, 15:00) -> True
            - [09:00, 13:00) overlaps [13:00, 15:00) -> False (adjacent)
        """
        if not isinstance(other, Interval):
            raise TypeError("Can only check overlap with another Interval")

        return self.start < other.end and other.start < self.end

    def contains(self, instant: datetime) -> bool:
        """
        Check if an instant is within this interval

        Note: start is inclusive, end is exclusive
        """
        return self.start <= instant < self.end

    @property
    def duration(self) -> timedelta:
        return self.end - self.start

    def __str__(self):
        return f"[{self.start.isoformat()}, {self.end.isoformat()})"

    def __repr__(self):
        return f"Interval({self.start.isoformat()}, {self.end.isoformat()})"
