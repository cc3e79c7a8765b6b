"""End-to-end booking flows against the in-process store."""

from decimal import Decimal
from uuid import uuid4

import pytest

from conftest import OTHER_RENTER, OWNER, RENTER, at, make_equipment, window
from shared.application.message_bus import MessageBus
from shared.domain.value_objects import Money
from apps.bookings.domain.entities import Actor, Booking, BookingStatus, PaymentMethod, RentalMode, Role
from apps.bookings.domain.events import BookingAccepted, BookingRejected, BookingRequested
from apps.bookings.domain.exceptions import (
    BookingConflictError,
    ForbiddenError,
    InactiveEquipmentError,
    InvalidDurationError,
    InvalidTransitionError,
    NotFoundError,
    SelfBookingError,
)
from apps.bookings.domain.pricing import rental_window
from apps.bookings.infrastructure.memory import InMemoryBookingStore, InMemoryEquipmentLookup
from apps.bookings.services import BookingService

owner = Actor(id=OWNER, roles=frozenset({Role.OWNER}))
renter = Actor(id=RENTER, roles=frozenset({Role.RENTER}))


def request_hourly(service, equipment_id, interval, renter_id=RENTER):
    hours = int(interval.duration.total_seconds() // 3600)
    return service.request_booking(equipment_id, renter_id, interval, RentalMode.HOURLY, hours=hours)


def test_hourly_request_is_priced_and_pending(service, tractor, published):
    booking = request_hourly(service, tractor.id, window(9, 13))

    assert booking.status is BookingStatus.REQUESTED
    assert booking.total_price == Money(Decimal("400"))
    assert booking.owner_id == OWNER
    assert booking.payment_method is PaymentMethod.CASH_ON_DELIVERY
    assert service.get_booking(booking.id) == booking
    assert [type(e) for e in published] == [BookingRequested]


def test_daily_request_uses_daily_rate_and_window(service, tractor):
    booking = service.request_booking_from(tractor.id, RENTER, at(2, 6), RentalMode.DAILY)

    assert booking.total_price == Money(Decimal("600"))
    assert booking.interval.start == at(2, 6)
    assert booking.interval.end == at(3, 6)
    assert booking.hours is None


def test_overlapping_request_conflicts(service, tractor):
    request_hourly(service, tractor.id, window(9, 13))

    with pytest.raises(BookingConflictError) as exc_info:
        request_hourly(service, tractor.id, window(11, 13), renter_id=OTHER_RENTER)

    assert exc_info.value.message == "This date is already booked."
    assert len(service.list_active(tractor.id)) == 1


def test_back_to_back_requests_are_allowed(service, tractor):
    request_hourly(service, tractor.id, window(9, 13))
    request_hourly(service, tractor.id, window(13, 15), renter_id=OTHER_RENTER)

    assert [b.interval for b in service.list_active(tractor.id)] == [window(9, 13), window(13, 15)]


def test_rejected_window_can_be_requested_again(service, tractor):
    booking = request_hourly(service, tractor.id, window(9, 13))
    service.reject(booking.id, owner)

    again = request_hourly(service, tractor.id, window(10, 12), renter_id=OTHER_RENTER)

    assert again.status is BookingStatus.REQUESTED


def test_unknown_equipment(service):
    with pytest.raises(NotFoundError):
        request_hourly(service, uuid4(), window(9, 13))


def test_inactive_equipment(service, equipment_lookup):
    parked = make_equipment(is_active=False)
    equipment_lookup.add(parked)

    with pytest.raises(InactiveEquipmentError):
        request_hourly(service, parked.id, window(9, 13))


def test_owner_cannot_book_own_equipment(service, tractor):
    with pytest.raises(SelfBookingError):
        request_hourly(service, tractor.id, window(9, 13), renter_id=OWNER)


def test_missing_hours_is_invalid_duration(service, tractor, store):
    with pytest.raises(InvalidDurationError):
        service.request_booking(tractor.id, RENTER, window(9, 13), RentalMode.HOURLY)

    assert store.find_by_renter(RENTER) == []


def test_conflict_is_reported_before_invalid_duration(service, tractor):
    request_hourly(service, tractor.id, window(9, 13))

    with pytest.raises(BookingConflictError):
        service.request_booking(tractor.id, OTHER_RENTER, window(9, 13), RentalMode.HOURLY)


def test_owner_accepts_then_cannot_accept_again(service, tractor, published):
    booking = request_hourly(service, tractor.id, window(9, 13))

    accepted = service.accept(booking.id, owner)
    assert accepted.status is BookingStatus.ACCEPTED

    with pytest.raises(InvalidTransitionError):
        service.accept(booking.id, owner)
    with pytest.raises(InvalidTransitionError):
        service.reject(booking.id, owner)

    assert service.get_booking(booking.id).status is BookingStatus.ACCEPTED
    assert [type(e) for e in published] == [BookingRequested, BookingAccepted]


def test_renter_cannot_accept(service, tractor):
    booking = request_hourly(service, tractor.id, window(9, 13))

    with pytest.raises(ForbiddenError):
        service.accept(booking.id, renter)

    assert service.get_booking(booking.id).status is BookingStatus.REQUESTED


def test_transition_of_unknown_booking(service):
    with pytest.raises(NotFoundError):
        service.accept(uuid4(), owner)


def test_disjoint_windows_are_both_accepted(service, tractor):
    first = request_hourly(service, tractor.id, window(9, 13))
    second = request_hourly(service, tractor.id, window(14, 16), renter_id=OTHER_RENTER)

    service.accept(first.id, owner)
    service.accept(second.id, owner)

    statuses = {b.id: b.status for b in service.list_active(tractor.id)}
    assert statuses == {first.id: BookingStatus.ACCEPTED, second.id: BookingStatus.ACCEPTED}


def test_accept_rechecks_against_accepted_bookings(service, store, tractor, published):
    first = request_hourly(service, tractor.id, window(9, 13))

    # Written directly, as if it slipped past the request-time check
    overlapping = Booking(
        equipment_id=tractor.id,
        renter_id=OTHER_RENTER,
        owner_id=OWNER,
        interval=window(11, 15),
        mode=RentalMode.HOURLY,
        hours=4,
        total_price=Money(Decimal("400")),
        payment_method=PaymentMethod.ONLINE,
    )
    store.insert(overlapping)

    service.accept(first.id, owner)

    with pytest.raises(BookingConflictError):
        service.accept(overlapping.id, owner)
    assert service.get_booking(overlapping.id).status is BookingStatus.REQUESTED

    service.reject(overlapping.id, owner)
    assert service.get_booking(overlapping.id).status is BookingStatus.REJECTED
    assert [type(e) for e in published] == [BookingRequested, BookingAccepted, BookingRejected]


def test_projections(service, tractor):
    first = request_hourly(service, tractor.id, window(9, 13))
    second = request_hourly(service, tractor.id, window(14, 16), renter_id=OTHER_RENTER)
    service.reject(second.id, owner)

    assert [b.id for b in service.bookings_for_renter(RENTER)] == [first.id]
    assert {b.id for b in service.bookings_for_owner(OWNER)} == {first.id, second.id}
    assert [b.id for b in service.list_active(tractor.id)] == [first.id]
    assert service.bookings_for_renter("nobody") == []


def test_get_unknown_booking(service):
    with pytest.raises(NotFoundError):
        service.get_booking(uuid4())


def test_failed_request_publishes_nothing(service, tractor, published):
    with pytest.raises(SelfBookingError):
        request_hourly(service, tractor.id, window(9, 13), renter_id=OWNER)

    assert published == []


def test_hour_count_past_the_calendar_is_invalid_duration(service, tractor, store):
    with pytest.raises(InvalidDurationError):
        service.request_booking_from(tractor.id, RENTER, at(1, 9), RentalMode.HOURLY, hours=10**8)

    assert store.find_by_renter(RENTER) == []


def test_daily_request_ignores_an_hour_count(service, tractor):
    booking = service.request_booking(
        tractor.id, RENTER, rental_window(at(2, 6), RentalMode.DAILY), RentalMode.DAILY, hours=4,
    )

    assert booking.total_price == Money(Decimal("600"))
    assert booking.hours is None


def test_default_wiring_writes_the_audit_log(tractor, audit_records):
    store = InMemoryBookingStore()
    service = BookingService(store, InMemoryEquipmentLookup([tractor]))

    booking = request_hourly(service, tractor.id, window(9, 13))
    service.accept(booking.id, owner)

    assert store.bus is service.bus
    logged = [r.booking_event for r in audit_records]
    assert [e["event_type"] for e in logged] == ["BookingRequested", "BookingAccepted"]
    assert {e["booking_id"] for e in logged} == {str(booking.id)}


def test_store_bound_to_another_bus_is_refused(tractor):
    store = InMemoryBookingStore(bus=MessageBus())

    with pytest.raises(ValueError):
        BookingService(store, InMemoryEquipmentLookup([tractor]), bus=MessageBus())


def test_service_adopts_the_store_bus(tractor):
    bus = MessageBus()
    service = BookingService(InMemoryBookingStore(bus=bus), InMemoryEquipmentLookup([tractor]))

    assert service.bus is bus
