"""
Availability Index

This is the CRITICAL component for preventing double bookings.
Every booking request and every acceptance asks it whether a window is
still free for a piece of equipment.

The index holds no state of its own. Each query rebuilds the
equipment's schedule from the booking store, so it cannot drift from
the store under concurrent writers. Callers that need check-then-write
atomicity query it inside the store's per-equipment unit of work.
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Iterable, List
from uuid import UUID

from shared.domain.value_objects import Interval
from apps.bookings.domain.entities import ACTIVE_STATUSES, Booking, BookingStatus

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from apps.bookings.application.ports import AbstractBookingStore


@dataclass(frozen=True)
class Allocation:
    """A window held by one booking"""
    booking_id: UUID
    interval: Interval
    status: BookingStatus


@dataclass
class EquipmentSchedule:
    """
    Snapshot of the windows blocking one piece of equipment

    A linear scan is enough for the expected tens to low hundreds of
    allocations; the contract does not depend on allocation order.
    """

    equipment_id: UUID
    allocations: List[Allocation] = field(default_factory=list)

    @classmethod
    def from_bookings(cls, equipment_id: UUID, bookings: Iterable[Booking]) -> 'EquipmentSchedule':
        return cls(
            equipment_id=equipment_id,
            allocations=[
                Allocation(booking_id=b.id, interval=b.interval, status=b.status)
                for b in bookings
            ],
        )

    def conflicts(self, interval: Interval, excluding: UUID | None = None) -> List[Allocation]:
        """All allocations overlapping ``interval``, except ``excluding``"""
        return [
            a for a in self.allocations
            if a.booking_id != excluding and a.interval.overlaps(interval)
        ]

    def can_allocate(self, interval: Interval, excluding: UUID | None = None) -> bool:
        for allocation in self.allocations:
            if allocation.booking_id == excluding:
                continue
            if allocation.interval.overlaps(interval):
                return False
        return True

    @property
    def intervals(self) -> List[Interval]:
        return [a.interval for a in self.allocations]

    def __len__(self) -> int:
        return len(self.allocations)


class AvailabilityIndex:
    """Read-through view of active bookings per equipment."""

    def __init__(self, store: 'AbstractBookingStore'):
        self.store = store

    def rebuild(
        self,
        equipment_id: UUID,
        statuses: Iterable[BookingStatus] = ACTIVE_STATUSES,
    ) -> EquipmentSchedule:
        """Reconstruct the schedule from the durable store"""
        bookings = self.store.find_by_equipment(equipment_id, frozenset(statuses))
        return EquipmentSchedule.from_bookings(equipment_id, bookings)

    def is_available(
        self,
        equipment_id: UUID,
        candidate: Interval,
        excluding_booking_id: UUID | None = None,
        blocking_statuses: Iterable[BookingStatus] = ACTIVE_STATUSES,
    ) -> bool:
        """
        Check whether ``candidate`` is free for the equipment

        Only bookings in ``blocking_statuses`` (requested and accepted by
        default) are considered. ``excluding_booking_id`` lets a booking
        re-check its own window.
        """
        schedule = self.rebuild(equipment_id, blocking_statuses)
        return schedule.can_allocate(candidate, excluding=excluding_booking_id)

    def conflicts(
        self,
        equipment_id: UUID,
        candidate: Interval,
        excluding_booking_id: UUID | None = None,
        blocking_statuses: Iterable[BookingStatus] = ACTIVE_STATUSES,
    ) -> List[Allocation]:
        schedule = self.rebuild(equipment_id, blocking_statuses)
        return schedule.conflicts(candidate, excluding=excluding_booking_id)
