"""
Booking Command Handlers

These are the use cases for the booking domain.
They orchestrate domain operations within per-equipment units of work.

Commands:
- RequestBookingCommand: A renter asks for an equipment window
- TransitionBookingCommand: The owner accepts or rejects a request
"""

from dataclasses import dataclass
from typing import Hashable
from uuid import UUID
import logging

from shared.domain.value_objects import Interval
from apps.bookings.application.ports import AbstractBookingStore, AbstractEquipmentLookup
from apps.bookings.domain.availability import AvailabilityIndex
from apps.bookings.domain.entities import (
    Actor,
    Booking,
    BookingStatus,
    PaymentMethod,
    RentalMode,
)
from apps.bookings.domain.exceptions import (
    BookingConflictError,
    InactiveEquipmentError,
    InvalidTransitionError,
    NotFoundError,
    SelfBookingError,
)
from apps.bookings.domain.pricing import calculate_price

logger = logging.getLogger(__name__)


# ===== Commands =====

@dataclass(frozen=True)
class RequestBookingCommand:
    """
    Command to request a new booking

    This is the primary entry point for creating bookings.
    """
    equipment_id: UUID
    renter_id: Hashable
    interval: Interval
    mode: RentalMode
    payment_method: PaymentMethod
    hours: int | None = None


@dataclass(frozen=True)
class TransitionBookingCommand:
    """Command to move a booking to another lifecycle status"""
    booking_id: UUID
    actor: Actor
    target_status: BookingStatus


# ===== Command Handlers =====

class RequestBookingHandler:
    """
    Handler for RequestBooking command

    Steps, all inside one unit of work serialised on the equipment:
    1. Load equipment (NotFound / Inactive)
    2. Refuse owners booking their own equipment (SelfBooking)
    3. Check the window against active bookings (Conflict)
    4. Lock in the price (InvalidDuration)
    5. Insert the booking in REQUESTED state
    """

    def __init__(self, store: AbstractBookingStore, equipment_lookup: AbstractEquipmentLookup):
        self.store = store
        self.equipment_lookup = equipment_lookup
        self.availability = AvailabilityIndex(store)

    def handle(self, command: RequestBookingCommand) -> Booking:
        logger.info(
            "Requesting booking of equipment %s by renter %s for %s (%s)",
            command.equipment_id, command.renter_id, command.interval, command.mode.value,
        )

        with self.store.unit_of_work(command.equipment_id) as uow:
            equipment = self.equipment_lookup.get(command.equipment_id)
            if equipment is None:
                raise NotFoundError(f"Equipment {command.equipment_id} not found.")
            if not equipment.is_active:
                raise InactiveEquipmentError()

            if command.renter_id == equipment.owner_id:
                raise SelfBookingError()

            overlapping = self.availability.conflicts(command.equipment_id, command.interval)
            if overlapping:
                logger.info(
                    "Equipment %s busy for %s: overlaps booking(s) %s",
                    command.equipment_id, command.interval,
                    ", ".join(str(a.booking_id) for a in overlapping),
                )
                raise BookingConflictError()

            # A daily rental is one day whatever hour count came with it
            hours = None if command.mode is RentalMode.DAILY else command.hours
            total_price = calculate_price(command.mode, equipment.rate_card, hours)

            booking = Booking.request(
                equipment_id=equipment.id,
                renter_id=command.renter_id,
                owner_id=equipment.owner_id,
                interval=command.interval,
                mode=command.mode,
                hours=hours,
                total_price=total_price,
                payment_method=command.payment_method,
            )
            uow.collect_events(booking)
            self.store.insert(booking)

        logger.info("Booking %s requested for %s", booking.id, total_price)
        return booking


class TransitionBookingHandler:
    """
    Handler for TransitionBooking command

    The booking is re-read inside the equipment's unit of work. An
    acceptance re-confirms that no other accepted booking overlaps,
    which guards the gap between request time and accept time. The
    status write is a compare-and-swap, so a concurrent transition that
    got there first surfaces as InvalidTransitionError.
    """

    def __init__(self, store: AbstractBookingStore):
        self.store = store
        self.availability = AvailabilityIndex(store)

    def handle(self, command: TransitionBookingCommand) -> Booking:
        logger.info(
            "Transition of booking %s to %s by actor %s",
            command.booking_id, command.target_status.value, command.actor.id,
        )

        located = self.store.get(command.booking_id)
        if located is None:
            raise NotFoundError(f"Booking {command.booking_id} not found.")

        with self.store.unit_of_work(located.equipment_id) as uow:
            booking = self.store.get(command.booking_id)
            if booking is None:
                raise NotFoundError(f"Booking {command.booking_id} not found.")

            booking.ensure_can_transition(command.target_status, command.actor)

            if command.target_status is BookingStatus.ACCEPTED:
                # Overlapping requests stay pending for the owner to reject
                if not self.availability.is_available(
                    booking.equipment_id,
                    booking.interval,
                    excluding_booking_id=booking.id,
                    blocking_statuses={BookingStatus.ACCEPTED},
                ):
                    raise BookingConflictError()

            previous = booking.transition_to(command.target_status, command.actor)
            if not self.store.compare_and_set_status(booking.id, previous, booking.status):
                raise InvalidTransitionError(
                    f"Booking {booking.id} was changed concurrently."
                )
            uow.collect_events(booking)

        logger.info("Booking %s is now %s", booking.id, booking.status.value)
        return booking
