"""Read-only projections over stored bookings."""

from typing import Hashable, List
from uuid import UUID

from apps.bookings.application.ports import AbstractBookingStore
from apps.bookings.domain.entities import ACTIVE_STATUSES, Booking
from apps.bookings.domain.exceptions import NotFoundError


class BookingQueries:

    def __init__(self, store: AbstractBookingStore):
        self.store = store

    def get_booking(self, booking_id: UUID) -> Booking:
        booking = self.store.get(booking_id)
        if booking is None:
            raise NotFoundError(f"Booking {booking_id} not found.")
        return booking

    def list_active(self, equipment_id: UUID) -> List[Booking]:
        """Requested and accepted bookings of the equipment, earliest first"""
        bookings = self.store.find_by_equipment(equipment_id, ACTIVE_STATUSES)
        return sorted(bookings, key=lambda b: b.interval.start)

    def bookings_for_renter(self, renter_id: Hashable) -> List[Booking]:
        return self.store.find_by_renter(renter_id)

    def bookings_for_owner(self, owner_id: Hashable) -> List[Booking]:
        return self.store.find_by_owner(owner_id)
