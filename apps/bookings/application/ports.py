"""
Ports consumed by the booking engine

The engine never talks to a database directly. It needs an equipment
lookup and a durable booking store offering insert, compare-and-swap
status updates and queries by equipment and status set. Adapters live
in apps.bookings.infrastructure.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import FrozenSet, Hashable, List
from uuid import UUID

from shared.application.uow import AbstractUnitOfWork
from apps.bookings.domain.entities import Booking, BookingStatus
from apps.bookings.domain.pricing import RateCard


@dataclass(frozen=True)
class EquipmentSnapshot:
    """What the engine needs to know about a piece of equipment"""
    id: UUID
    owner_id: Hashable
    rate_card: RateCard
    is_active: bool


class AbstractEquipmentLookup(ABC):

    @abstractmethod
    def get(self, equipment_id: UUID) -> EquipmentSnapshot | None:
        """Return the equipment or None if it does not exist"""


class AbstractBookingStore(ABC):
    """
    Durable source of truth for bookings

    Units of work publish committed events on ``bus``. The service that
    drives the store binds its own bus here when none was given.
    """

    bus = None

    @abstractmethod
    def unit_of_work(self, equipment_id: UUID) -> AbstractUnitOfWork:
        """
        Open an atomic region serialised per equipment

        Operations on the same equipment run one at a time inside it;
        operations on different equipment must not contend. Nothing
        written inside is observable if the region exits with an error.
        """

    @abstractmethod
    def insert(self, booking: Booking) -> None:
        pass

    @abstractmethod
    def get(self, booking_id: UUID) -> Booking | None:
        pass

    @abstractmethod
    def compare_and_set_status(
        self,
        booking_id: UUID,
        expected: BookingStatus,
        new: BookingStatus,
    ) -> bool:
        """Set ``new`` only if the stored status is still ``expected``"""

    @abstractmethod
    def find_by_equipment(
        self,
        equipment_id: UUID,
        statuses: FrozenSet[BookingStatus],
    ) -> List[Booking]:
        pass

    @abstractmethod
    def find_by_renter(self, renter_id: Hashable) -> List[Booking]:
        """Renter's bookings, newest first"""

    @abstractmethod
    def find_by_owner(self, owner_id: Hashable) -> List[Booking]:
        """Bookings of the owner's equipment, newest first"""
