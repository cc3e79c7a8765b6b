"""Django ORM adapters for the booking engine ports."""

from __future__ import annotations

import logging
from contextlib import contextmanager
from typing import FrozenSet, Hashable, List
from uuid import UUID

from django.conf import settings  # type: ignore
from django.db import DatabaseError, connections, router  # type: ignore
from django.utils import timezone  # type: ignore

from shared.application.uow import DjangoUnitOfWork
from shared.domain.value_objects import DEFAULT_CURRENCY, Interval, Money
from apps.bookings.application.ports import (
    AbstractBookingStore,
    AbstractEquipmentLookup,
    EquipmentSnapshot,
)
from apps.bookings.domain.entities import Booking, BookingStatus, PaymentMethod, RentalMode
from apps.bookings.domain.exceptions import InvalidDurationError, StoreUnavailableError
from apps.bookings.domain.pricing import RateCard
from apps.bookings.models import MAX_HOURS, MAX_TOTAL_PRICE, Booking as BookingModel
from apps.equipment.models import Equipment as EquipmentModel

logger = logging.getLogger(__name__)


@contextmanager
def store_errors(operation: str):
    """Report any database failure as StoreUnavailableError."""

    try:
        yield
    except DatabaseError as exc:
        logger.error("Booking store failure during %s: %s", operation, exc, exc_info=True)
        raise StoreUnavailableError() from exc


def _currency() -> str:
    return getattr(settings, "RENTAL_CURRENCY", DEFAULT_CURRENCY)


def _lock_queryset_if_possible(queryset):
    """Apply select_for_update when the backend supports it."""

    connection = connections[queryset.db]
    if not connection.in_atomic_block or not connection.features.has_select_for_update:
        return queryset
    return queryset.select_for_update()


class EquipmentUnitOfWork(DjangoUnitOfWork):
    """
    Transaction holding a row lock on one equipment

    Every check-then-write on the equipment's bookings runs while the
    lock is held, so they are serialised per equipment. Other equipment
    rows stay unlocked.
    """

    def __init__(self, equipment_id: UUID, bus=None):
        super().__init__(bus=bus, using=router.db_for_write(BookingModel))
        self.equipment_id = equipment_id

    def acquire(self):
        queryset = EquipmentModel.objects.filter(pk=self.equipment_id)
        list(_lock_queryset_if_possible(queryset).values_list("pk", flat=True))

    def __enter__(self):
        with store_errors("begin"):
            return super().__enter__()

    def __exit__(self, exc_type, exc_val, exc_tb):
        with store_errors("commit"):
            return super().__exit__(exc_type, exc_val, exc_tb)


class DjangoEquipmentLookup(AbstractEquipmentLookup):

    def get(self, equipment_id: UUID) -> EquipmentSnapshot | None:
        with store_errors("equipment lookup"):
            row = (
                EquipmentModel.objects.filter(pk=equipment_id)
                .values("id", "owner_id", "hourly_rate", "daily_rate", "is_active")
                .first()
            )
        if row is None:
            return None
        currency = _currency()
        return EquipmentSnapshot(
            id=row["id"],
            owner_id=row["owner_id"],
            rate_card=RateCard(
                hourly_rate=Money(row["hourly_rate"], currency),
                daily_rate=Money(row["daily_rate"], currency),
            ),
            is_active=row["is_active"],
        )


def booking_from_row(row: BookingModel) -> Booking:
    return Booking(
        id=row.id,
        created_at=row.created_at,
        equipment_id=row.equipment_id,
        renter_id=row.renter_id,
        owner_id=row.owner_id,
        interval=Interval(row.start_at, row.end_at),
        mode=RentalMode(row.rental_mode),
        hours=row.hours,
        total_price=Money(row.total_price, row.currency),
        payment_method=PaymentMethod(row.payment_method),
        status=BookingStatus(row.status),
    )


class DjangoBookingStore(AbstractBookingStore):
    """Booking store backed by the ``bookings_booking`` table."""

    def __init__(self, bus=None):
        self.bus = bus

    def unit_of_work(self, equipment_id: UUID) -> EquipmentUnitOfWork:
        return EquipmentUnitOfWork(equipment_id, bus=self.bus)

    def insert(self, booking: Booking) -> None:
        if booking.hours is not None and booking.hours > MAX_HOURS:
            raise InvalidDurationError(f"Bookings are limited to {MAX_HOURS} hours.")
        if booking.total_price.amount > MAX_TOTAL_PRICE:
            raise InvalidDurationError(
                f"A {booking.total_price} booking exceeds the largest storable price."
            )
        with store_errors("insert"):
            BookingModel.objects.create(
                id=booking.id,
                equipment_id=booking.equipment_id,
                renter_id=booking.renter_id,
                owner_id=booking.owner_id,
                start_at=booking.interval.start,
                end_at=booking.interval.end,
                rental_mode=booking.mode.value,
                hours=booking.hours,
                total_price=booking.total_price.amount,
                currency=booking.total_price.currency,
                payment_method=booking.payment_method.value,
                status=booking.status.value,
                created_at=booking.created_at,
            )

    def get(self, booking_id: UUID) -> Booking | None:
        with store_errors("get"):
            row = BookingModel.objects.filter(pk=booking_id).first()
        return booking_from_row(row) if row is not None else None

    def compare_and_set_status(
        self,
        booking_id: UUID,
        expected: BookingStatus,
        new: BookingStatus,
    ) -> bool:
        with store_errors("status update"):
            updated = BookingModel.objects.filter(pk=booking_id, status=expected.value).update(
                status=new.value,
                updated_at=timezone.now(),
            )
        return updated == 1

    def find_by_equipment(
        self,
        equipment_id: UUID,
        statuses: FrozenSet[BookingStatus],
    ) -> List[Booking]:
        with store_errors("equipment query"):
            rows = list(
                BookingModel.objects.filter(
                    equipment_id=equipment_id,
                    status__in=[s.value for s in statuses],
                ).order_by("start_at")
            )
        return [booking_from_row(row) for row in rows]

    def find_by_renter(self, renter_id: Hashable) -> List[Booking]:
        with store_errors("renter query"):
            rows = list(BookingModel.objects.filter(renter_id=renter_id).order_by("-created_at"))
        return [booking_from_row(row) for row in rows]

    def find_by_owner(self, owner_id: Hashable) -> List[Booking]:
        with store_errors("owner query"):
            rows = list(BookingModel.objects.filter(owner_id=owner_id).order_by("-created_at"))
        return [booking_from_row(row) for row in rows]
