"""
Booking Domain Events

Events that represent things that have happened in the booking domain.
These are published after successful transaction commits.
"""

from dataclasses import dataclass
from typing import Hashable
from uuid import UUID

from shared.domain.base import DomainEvent
from shared.domain.value_objects import Interval, Money


@dataclass(frozen=True)
class BookingRequested(DomainEvent):
    """
    Event: A renter requested a booking (-> REQUESTED)

    The window now counts against the equipment's availability.
    """
    booking_id: UUID
    equipment_id: UUID
    renter_id: Hashable
    owner_id: Hashable
    interval: Interval
    total_price: Money

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'equipment_id': str(self.equipment_id),
            'renter_id': str(self.renter_id),
            'owner_id': str(self.owner_id),
            'start': self.interval.start.isoformat(),
            'end': self.interval.end.isoformat(),
            'total_price': str(self.total_price.amount),
            'currency': self.total_price.currency,
        })
        return data


@dataclass(frozen=True)
class BookingAccepted(DomainEvent):
    """Event: The owner accepted a booking (REQUESTED -> ACCEPTED)"""
    booking_id: UUID
    equipment_id: UUID
    accepted_by: Hashable

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'equipment_id': str(self.equipment_id),
            'accepted_by': str(self.accepted_by),
        })
        return data


@dataclass(frozen=True)
class BookingRejected(DomainEvent):
    """
    Event: The owner rejected a booking (REQUESTED -> REJECTED)

    The window no longer counts against availability.
    """
    booking_id: UUID
    equipment_id: UUID
    rejected_by: Hashable

    def to_dict(self) -> dict:
        data = super().to_dict()
        data.update({
            'booking_id': str(self.booking_id),
            'equipment_id': str(self.equipment_id),
            'rejected_by': str(self.rejected_by),
        })
        return data
