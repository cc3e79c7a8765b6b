"""Booking state machine rules."""

from decimal import Decimal
from uuid import uuid4

import pytest

from conftest import OWNER, RENTER, window
from shared.domain.value_objects import Money
from apps.bookings.domain.entities import (
    Actor,
    Booking,
    BookingStatus,
    PaymentMethod,
    RentalMode,
    Role,
    is_terminal,
)
from apps.bookings.domain.events import BookingAccepted, BookingRejected, BookingRequested
from apps.bookings.domain.exceptions import (
    ForbiddenError,
    InvalidDurationError,
    InvalidTransitionError,
)

owner = Actor(id=OWNER, roles=frozenset({Role.OWNER}))
renter = Actor(id=RENTER, roles=frozenset({Role.RENTER}))
admin = Actor(id="admin-1", roles=frozenset({Role.ADMIN}))


def make_booking(**overrides) -> Booking:
    fields = dict(
        equipment_id=uuid4(),
        renter_id=RENTER,
        owner_id=OWNER,
        interval=window(9, 13),
        mode=RentalMode.HOURLY,
        hours=4,
        total_price=Money(Decimal("400")),
        payment_method=PaymentMethod.CASH_ON_DELIVERY,
    )
    fields.update(overrides)
    return Booking.request(**fields)


def test_new_booking_is_requested_and_emits_event():
    booking = make_booking()

    assert booking.status is BookingStatus.REQUESTED
    assert booking.is_active
    [event] = booking.events
    assert isinstance(event, BookingRequested)
    assert event.booking_id == booking.id
    assert event.to_dict()["total_price"] == "400"


def test_owner_accepts_requested_booking():
    booking = make_booking()
    booking.clear_events()

    previous = booking.accept(owner)

    assert previous is BookingStatus.REQUESTED
    assert booking.status is BookingStatus.ACCEPTED
    assert booking.is_terminal
    [event] = booking.events
    assert isinstance(event, BookingAccepted)
    assert event.accepted_by == OWNER


def test_owner_rejects_requested_booking():
    booking = make_booking()
    booking.clear_events()

    booking.reject(owner)

    assert booking.status is BookingStatus.REJECTED
    assert not booking.is_active
    assert isinstance(booking.events[0], BookingRejected)


@pytest.mark.parametrize("actor", [renter, admin])
def test_only_the_owner_can_transition(actor):
    booking = make_booking()

    with pytest.raises(ForbiddenError):
        booking.accept(actor)

    assert booking.status is BookingStatus.REQUESTED


@pytest.mark.parametrize("terminal", [BookingStatus.ACCEPTED, BookingStatus.REJECTED])
@pytest.mark.parametrize("actor", [owner, renter, admin])
@pytest.mark.parametrize("target", list(BookingStatus))
def test_terminal_bookings_refuse_every_transition(terminal, actor, target):
    booking = make_booking()
    booking.transition_to(terminal, owner)
    booking.clear_events()

    with pytest.raises(InvalidTransitionError):
        booking.transition_to(target, actor)

    assert booking.status is terminal
    assert booking.events == []


def test_requested_to_requested_is_not_a_transition():
    with pytest.raises(InvalidTransitionError):
        make_booking().transition_to(BookingStatus.REQUESTED, owner)


def test_terminal_states():
    assert not is_terminal(BookingStatus.REQUESTED)
    assert is_terminal(BookingStatus.ACCEPTED)
    assert is_terminal(BookingStatus.REJECTED)


def test_hours_must_match_mode():
    with pytest.raises(InvalidDurationError):
        make_booking(hours=None)
    with pytest.raises(InvalidDurationError):
        make_booking(mode=RentalMode.DAILY, hours=4)

    daily = make_booking(mode=RentalMode.DAILY, hours=None, total_price=Money(Decimal("600")))
    assert daily.hours is None
