"""
Booking Domain Exceptions

Typed failures reported by the booking engine. None of them is retried
inside the engine; StoreUnavailableError is the only kind where a retry
by the caller can succeed without a changed request.
"""

from shared.domain.exceptions import DomainError, InvalidRangeError

__all__ = [
    'BookingConflictError',
    'DomainError',
    'ForbiddenError',
    'InactiveEquipmentError',
    'InvalidDurationError',
    'InvalidRangeError',
    'InvalidTransitionError',
    'NotFoundError',
    'SelfBookingError',
    'StoreUnavailableError',
]


class InvalidDurationError(DomainError, ValueError):
    """Hourly rental without a positive whole number of hours."""

    code = 'invalid_duration'
    default_message = 'Hourly rentals need a positive whole number of hours.'


class NotFoundError(DomainError):
    """Equipment or booking does not exist."""

    code = 'not_found'
    default_message = 'The requested item was not found.'


class InactiveEquipmentError(DomainError):
    """Equipment exists but is not offered for rent."""

    code = 'inactive'
    default_message = 'This equipment is not available for rent right now.'


class SelfBookingError(DomainError):
    """Owner tried to rent their own equipment."""

    code = 'self_booking'
    default_message = 'You cannot book your own equipment.'


class BookingConflictError(DomainError):
    """Requested window overlaps an active booking of the same equipment."""

    code = 'conflict'
    default_message = 'This date is already booked.'


class InvalidTransitionError(DomainError):
    """Status change not listed in the lifecycle transition table."""

    code = 'invalid_transition'
    default_message = 'This booking can no longer be changed.'


class ForbiddenError(DomainError):
    """Actor is not allowed to perform the transition."""

    code = 'forbidden'
    default_message = 'Only the equipment owner can do that.'


class StoreUnavailableError(DomainError):
    """Wraps any failure of the durable booking store."""

    code = 'store_unavailable'
    default_message = 'Bookings are temporarily unavailable. Please try again.'
    retryable = True
