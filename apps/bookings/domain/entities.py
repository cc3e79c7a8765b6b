"""
Booking Domain Entities

Core business entities for the booking domain:
- Booking: Main aggregate representing a reservation
- BookingStatus: FSM states for booking lifecycle
- RentalMode, PaymentMethod: closed tags stored on a booking
- Actor: an already-authenticated identity with its roles
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, FrozenSet, Hashable, Tuple
from uuid import UUID

from shared.domain.base import Aggregate
from shared.domain.value_objects import Interval, Money
from apps.bookings.domain.events import BookingAccepted, BookingRejected, BookingRequested
from apps.bookings.domain.exceptions import (
    ForbiddenError,
    InvalidDurationError,
    InvalidTransitionError,
)


class BookingStatus(Enum):
    """
    Booking Status Finite State Machine

    State transitions:
    - REQUESTED -> ACCEPTED (owner accepted, window still free)
    - REQUESTED -> REJECTED (owner rejected)

    ACCEPTED and REJECTED are terminal.
    """
    REQUESTED = 'requested'
    ACCEPTED = 'accepted'
    REJECTED = 'rejected'


class RentalMode(Enum):
    HOURLY = 'hourly'
    DAILY = 'daily'


class PaymentMethod(Enum):
    CASH_ON_DELIVERY = 'cod'
    ONLINE = 'online'


class Role(Enum):
    RENTER = 'renter'
    OWNER = 'owner'
    ADMIN = 'admin'


# Bookings in these states count against availability
ACTIVE_STATUSES: FrozenSet[BookingStatus] = frozenset({
    BookingStatus.REQUESTED,
    BookingStatus.ACCEPTED,
})

# (from, to) -> event emitted. Anything not listed is an invalid transition.
TRANSITIONS: Dict[Tuple[BookingStatus, BookingStatus], type] = {
    (BookingStatus.REQUESTED, BookingStatus.ACCEPTED): BookingAccepted,
    (BookingStatus.REQUESTED, BookingStatus.REJECTED): BookingRejected,
}


@dataclass(frozen=True)
class Actor:
    """Opaque identity and granted roles, resolved outside the engine."""
    id: Hashable
    roles: FrozenSet[Role] = field(default_factory=frozenset)

    def has_role(self, role: Role) -> bool:
        return role in self.roles


def is_terminal(status: BookingStatus) -> bool:
    return not any(source == status for source, _ in TRANSITIONS)


@dataclass(eq=False)
class Booking(Aggregate):
    """
    Booking Aggregate Root

    Represents a renter's reservation of one piece of equipment for one
    interval.

    Key invariants:
    - Interval, mode, hours and price are fixed at creation
    - Only transitions listed in TRANSITIONS are allowed
    - Only the equipment owner can accept or reject
    """

    equipment_id: UUID
    renter_id: Hashable
    owner_id: Hashable
    interval: Interval
    mode: RentalMode
    total_price: Money
    payment_method: PaymentMethod
    hours: int | None = None
    status: BookingStatus = BookingStatus.REQUESTED

    def __post_init__(self):
        if self.mode is RentalMode.HOURLY:
            if isinstance(self.hours, bool) or not isinstance(self.hours, int) or self.hours <= 0:
                raise InvalidDurationError()
        elif self.hours is not None:
            raise InvalidDurationError("Daily rentals do not take an hour count.")

    @classmethod
    def request(cls, **fields) -> 'Booking':
        """Create a booking in REQUESTED state and record the event."""
        booking = cls(status=BookingStatus.REQUESTED, **fields)
        booking.add_event(BookingRequested(
            aggregate_id=booking.id,
            booking_id=booking.id,
            equipment_id=booking.equipment_id,
            renter_id=booking.renter_id,
            owner_id=booking.owner_id,
            interval=booking.interval,
            total_price=booking.total_price,
        ))
        return booking

    def ensure_can_transition(self, target: BookingStatus, actor: Actor) -> None:
        """
        Validate a transition without applying it

        The transition table is consulted before the actor, so a
        terminal booking reports InvalidTransitionError to everyone.
        """
        if (self.status, target) not in TRANSITIONS:
            raise InvalidTransitionError(
                f"Cannot move booking {self.id} from {self.status.value} to {target.value}."
            )
        if actor.id != self.owner_id:
            raise ForbiddenError()

    def transition_to(self, target: BookingStatus, actor: Actor) -> BookingStatus:
        """
        Apply a lifecycle transition and emit its event

        Returns the previous status so the caller can persist the change
        with compare-and-swap semantics.
        """
        self.ensure_can_transition(target, actor)

        previous = self.status
        event_type = TRANSITIONS[(previous, target)]
        self.status = target

        if event_type is BookingAccepted:
            event = BookingAccepted(
                aggregate_id=self.id,
                booking_id=self.id,
                equipment_id=self.equipment_id,
                accepted_by=actor.id,
            )
        else:
            event = BookingRejected(
                aggregate_id=self.id,
                booking_id=self.id,
                equipment_id=self.equipment_id,
                rejected_by=actor.id,
            )
        self.add_event(event)
        return previous

    def accept(self, actor: Actor) -> BookingStatus:
        return self.transition_to(BookingStatus.ACCEPTED, actor)

    def reject(self, actor: Actor) -> BookingStatus:
        return self.transition_to(BookingStatus.REJECTED, actor)

    @property
    def is_active(self) -> bool:
        """Check if booking counts against availability"""
        return self.status in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return is_terminal(self.status)

    def __str__(self):
        return f"Booking {self.id} ({self.status.value})"

    def __repr__(self):
        return (
            f"Booking(id={self.id}, equipment_id={self.equipment_id}, "
            f"status={self.status.value}, interval={self.interval})"
        )
