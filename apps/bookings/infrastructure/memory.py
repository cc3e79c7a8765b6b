"""
In-process booking store

A thread-safe implementation of the store ports for tests and for
embedding the engine without a database. Each equipment id gets its own
lock, so units of work on different equipment never contend. Writes made
inside a unit of work are staged and applied on commit only.
"""

from dataclasses import replace
from typing import Callable, Dict, FrozenSet, Hashable, List
from uuid import UUID
import logging
import threading

from shared.application.uow import AbstractUnitOfWork
from apps.bookings.application.ports import (
    AbstractBookingStore,
    AbstractEquipmentLookup,
    EquipmentSnapshot,
)
from apps.bookings.domain.entities import Booking, BookingStatus

logger = logging.getLogger(__name__)


def _detached(booking: Booking) -> Booking:
    # Fresh instance without collected events; callers never share state with the store
    return replace(booking)


class InMemoryUnitOfWork(AbstractUnitOfWork):

    def __init__(self, store: 'InMemoryBookingStore', equipment_id: UUID, lock: threading.Lock, bus=None):
        super().__init__(bus=bus)
        self._store = store
        self._equipment_id = equipment_id
        self._lock = lock
        self._staged: List[Callable[[], None]] = []
        self._pending = []

    def __enter__(self):
        self._lock.acquire()
        self._store._local.uow = self
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            super().__exit__(exc_type, exc_val, exc_tb)
        finally:
            self._store._local.uow = None
            self._lock.release()
        if self._pending:
            events, self._pending = self._pending, []
            self._publish_events(events)

    def stage(self, write: Callable[[], None]):
        self._staged.append(write)

    def commit(self):
        with self._store._data_lock:
            for write in self._staged:
                write()
        logger.debug(
            "Committed %d writes for equipment %s", len(self._staged), self._equipment_id,
        )
        self._staged.clear()
        self._pending = self._take_events()

    def rollback(self):
        logger.debug(
            "Discarding %d writes for equipment %s", len(self._staged), self._equipment_id,
        )
        self._staged.clear()
        self._events.clear()


class InMemoryBookingStore(AbstractBookingStore):

    def __init__(self, bus=None):
        self.bus = bus
        self._bookings: Dict[UUID, Booking] = {}
        self._data_lock = threading.Lock()
        self._registry_lock = threading.Lock()
        self._equipment_locks: Dict[UUID, threading.Lock] = {}
        self._local = threading.local()

    def _lock_for(self, equipment_id: UUID) -> threading.Lock:
        with self._registry_lock:
            return self._equipment_locks.setdefault(equipment_id, threading.Lock())

    def _write(self, write: Callable[[], None]):
        uow = getattr(self._local, 'uow', None)
        if uow is not None:
            uow.stage(write)
        else:
            with self._data_lock:
                write()

    def unit_of_work(self, equipment_id: UUID) -> InMemoryUnitOfWork:
        return InMemoryUnitOfWork(self, equipment_id, self._lock_for(equipment_id), bus=self.bus)

    def insert(self, booking: Booking) -> None:
        snapshot = _detached(booking)

        def write():
            if snapshot.id in self._bookings:
                raise ValueError(f"Booking {snapshot.id} already exists")
            self._bookings[snapshot.id] = snapshot

        self._write(write)

    def get(self, booking_id: UUID) -> Booking | None:
        with self._data_lock:
            booking = self._bookings.get(booking_id)
        return _detached(booking) if booking is not None else None

    def compare_and_set_status(
        self,
        booking_id: UUID,
        expected: BookingStatus,
        new: BookingStatus,
    ) -> bool:
        with self._data_lock:
            current = self._bookings.get(booking_id)
            if current is None or current.status is not expected:
                return False
            if getattr(self._local, 'uow', None) is None:
                self._bookings[booking_id] = replace(current, status=new)
                return True

        def write():
            stored = self._bookings[booking_id]
            self._bookings[booking_id] = replace(stored, status=new)

        self._write(write)
        return True

    def find_by_equipment(
        self,
        equipment_id: UUID,
        statuses: FrozenSet[BookingStatus],
    ) -> List[Booking]:
        with self._data_lock:
            matches = [
                b for b in self._bookings.values()
                if b.equipment_id == equipment_id and b.status in statuses
            ]
        return [_detached(b) for b in matches]

    def _newest_first(self, predicate) -> List[Booking]:
        with self._data_lock:
            matches = [b for b in self._bookings.values() if predicate(b)]
        matches.sort(key=lambda b: b.created_at, reverse=True)
        return [_detached(b) for b in matches]

    def find_by_renter(self, renter_id: Hashable) -> List[Booking]:
        return self._newest_first(lambda b: b.renter_id == renter_id)

    def find_by_owner(self, owner_id: Hashable) -> List[Booking]:
        return self._newest_first(lambda b: b.owner_id == owner_id)


class InMemoryEquipmentLookup(AbstractEquipmentLookup):

    def __init__(self, equipment=()):
        self._equipment: Dict[UUID, EquipmentSnapshot] = {e.id: e for e in equipment}

    def add(self, equipment: EquipmentSnapshot) -> None:
        self._equipment[equipment.id] = equipment

    def get(self, equipment_id: UUID) -> EquipmentSnapshot | None:
        return self._equipment.get(equipment_id)
