"""Entry points of the booking engine.

``BookingService`` exposes the operations collaborators call:
``request_booking``, ``transition`` and ``list_active``, plus the renter
and owner projections. Commands are routed through a message bus so the
same handlers serve every store implementation.
"""

from __future__ import annotations

import logging
from datetime import datetime
from functools import lru_cache
from typing import Hashable, List
from uuid import UUID

from shared.application.message_bus import MessageBus
from shared.domain.value_objects import Interval
from apps.bookings.application.command_handlers import (
    RequestBookingCommand,
    RequestBookingHandler,
    TransitionBookingCommand,
    TransitionBookingHandler,
)
from apps.bookings.application.event_handlers import register_event_handlers
from apps.bookings.application.ports import AbstractBookingStore, AbstractEquipmentLookup
from apps.bookings.application.queries import BookingQueries
from apps.bookings.domain.entities import Actor, Booking, BookingStatus, PaymentMethod, RentalMode
from apps.bookings.domain.pricing import rental_window

logger = logging.getLogger(__name__)


def build_message_bus(
    store: AbstractBookingStore,
    equipment_lookup: AbstractEquipmentLookup,
    bus: MessageBus | None = None,
) -> MessageBus:
    bus = bus or MessageBus()
    bus.register_command_handler(
        RequestBookingCommand,
        RequestBookingHandler(store, equipment_lookup).handle,
    )
    bus.register_command_handler(
        TransitionBookingCommand,
        TransitionBookingHandler(store).handle,
    )
    register_event_handlers(bus)
    return bus


class BookingService:
    """
    Facade over the booking command handlers and projections

    The service and its store share one bus, so events committed by the
    store reach the handlers registered here. A store without a bus is
    bound to the service's; a store already bound elsewhere is refused.
    """

    def __init__(
        self,
        store: AbstractBookingStore,
        equipment_lookup: AbstractEquipmentLookup,
        bus: MessageBus | None = None,
    ):
        if bus is None:
            bus = store.bus if store.bus is not None else MessageBus()
        if store.bus is None:
            store.bus = bus
        elif store.bus is not bus:
            raise ValueError("The booking store publishes on a different message bus than the service.")
        self.store = store
        self.bus = build_message_bus(store, equipment_lookup, bus)
        self.queries = BookingQueries(store)

    def request_booking(
        self,
        equipment_id: UUID,
        renter_id: Hashable,
        interval: Interval,
        mode: RentalMode,
        hours: int | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ) -> Booking:
        return self.bus.handle_command(RequestBookingCommand(
            equipment_id=equipment_id,
            renter_id=renter_id,
            interval=interval,
            mode=mode,
            hours=hours,
            payment_method=payment_method,
        ))

    def request_booking_from(
        self,
        equipment_id: UUID,
        renter_id: Hashable,
        start: datetime,
        mode: RentalMode,
        hours: int | None = None,
        payment_method: PaymentMethod = PaymentMethod.CASH_ON_DELIVERY,
    ) -> Booking:
        """Request a booking whose window is derived from its start and mode"""
        return self.request_booking(
            equipment_id,
            renter_id,
            rental_window(start, mode, hours),
            mode,
            hours=hours,
            payment_method=payment_method,
        )

    def transition(self, booking_id: UUID, actor: Actor, target_status: BookingStatus) -> Booking:
        return self.bus.handle_command(TransitionBookingCommand(
            booking_id=booking_id,
            actor=actor,
            target_status=target_status,
        ))

    def accept(self, booking_id: UUID, actor: Actor) -> Booking:
        return self.transition(booking_id, actor, BookingStatus.ACCEPTED)

    def reject(self, booking_id: UUID, actor: Actor) -> Booking:
        return self.transition(booking_id, actor, BookingStatus.REJECTED)

    def get_booking(self, booking_id: UUID) -> Booking:
        return self.queries.get_booking(booking_id)

    def list_active(self, equipment_id: UUID) -> List[Booking]:
        return self.queries.list_active(equipment_id)

    def bookings_for_renter(self, renter_id: Hashable) -> List[Booking]:
        return self.queries.bookings_for_renter(renter_id)

    def bookings_for_owner(self, owner_id: Hashable) -> List[Booking]:
        return self.queries.bookings_for_owner(owner_id)


@lru_cache(maxsize=1)
def get_booking_service() -> BookingService:
    """Process-wide service wired to the Django ORM."""

    from apps.bookings.infrastructure.django_store import DjangoBookingStore, DjangoEquipmentLookup

    logger.debug("Wiring booking service to the Django store")
    return BookingService(DjangoBookingStore(), DjangoEquipmentLookup())
