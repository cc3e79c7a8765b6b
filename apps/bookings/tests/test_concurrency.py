"""Concurrent requests and transitions on the in-process store."""

import random
import threading
from concurrent.futures import ThreadPoolExecutor

from conftest import OWNER, make_equipment, window
from apps.bookings.domain.entities import Actor, BookingStatus, RentalMode
from apps.bookings.domain.exceptions import BookingConflictError, DomainError, InvalidTransitionError

owner = Actor(id=OWNER)


def run_together(count, func):
    """Start ``count`` calls of ``func(i)`` at the same moment and collect outcomes."""
    barrier = threading.Barrier(count)

    def call(i):
        barrier.wait()
        try:
            return func(i)
        except DomainError as exc:
            return exc

    with ThreadPoolExecutor(max_workers=count) as pool:
        return list(pool.map(call, range(count)))


def assert_pairwise_disjoint(bookings):
    for i, a in enumerate(bookings):
        for b in bookings[i + 1:]:
            assert not a.interval.overlaps(b.interval), (a, b)


def test_same_window_admits_exactly_one_request(service, tractor):
    outcomes = run_together(
        16,
        lambda i: service.request_booking(
            tractor.id, f"renter-{i}", window(9, 13), RentalMode.HOURLY, hours=4,
        ),
    )

    conflicts = [o for o in outcomes if isinstance(o, BookingConflictError)]
    assert len(conflicts) == 15
    assert len(service.list_active(tractor.id)) == 1


def test_random_overlapping_requests_keep_active_set_disjoint(service, tractor):
    rng = random.Random(7)
    windows = []
    for _ in range(24):
        start = rng.randrange(0, 20)
        windows.append(window(start, start + rng.choice((2, 4))))

    outcomes = run_together(
        len(windows),
        lambda i: service.request_booking(
            tractor.id,
            f"renter-{i}",
            windows[i],
            RentalMode.HOURLY,
            hours=int(windows[i].duration.total_seconds() // 3600),
        ),
    )

    assert all(not isinstance(o, DomainError) or isinstance(o, BookingConflictError) for o in outcomes)
    active = service.list_active(tractor.id)
    assert active
    assert_pairwise_disjoint(active)


def test_different_equipment_do_not_contend(service, equipment_lookup):
    machines = [make_equipment() for _ in range(8)]
    for machine in machines:
        equipment_lookup.add(machine)

    outcomes = run_together(
        len(machines),
        lambda i: service.request_booking(
            machines[i].id, "renter-1", window(9, 13), RentalMode.HOURLY, hours=4,
        ),
    )

    assert all(o.status is BookingStatus.REQUESTED for o in outcomes)


def test_concurrent_accepts_of_one_booking_succeed_once(service, tractor, published):
    booking = service.request_booking(tractor.id, "renter-1", window(9, 13), RentalMode.HOURLY, hours=4)

    outcomes = run_together(8, lambda i: service.accept(booking.id, owner))

    winners = [o for o in outcomes if not isinstance(o, DomainError)]
    assert len(winners) == 1
    assert all(isinstance(o, InvalidTransitionError) for o in outcomes if o not in winners)
    assert service.get_booking(booking.id).status is BookingStatus.ACCEPTED
    assert sum(1 for e in published if type(e).__name__ == "BookingAccepted") == 1


def test_accept_and_reject_race_ends_in_one_terminal_state(service, tractor):
    booking = service.request_booking(tractor.id, "renter-1", window(9, 13), RentalMode.HOURLY, hours=4)
    targets = [BookingStatus.ACCEPTED, BookingStatus.REJECTED] * 4

    outcomes = run_together(len(targets), lambda i: service.transition(booking.id, owner, targets[i]))

    winners = [o for o in outcomes if not isinstance(o, DomainError)]
    assert len(winners) == 1
    assert service.get_booking(booking.id).status is winners[0].status
