import logging
from datetime import datetime, timezone
from decimal import Decimal
from uuid import uuid4

import pytest

from shared.application.message_bus import MessageBus
from shared.domain.value_objects import Interval, Money
from apps.bookings.application.event_handlers import audit_logger
from apps.bookings.application.ports import EquipmentSnapshot
from apps.bookings.domain.events import BookingAccepted, BookingRejected, BookingRequested
from apps.bookings.domain.pricing import RateCard
from apps.bookings.infrastructure.memory import InMemoryBookingStore, InMemoryEquipmentLookup
from apps.bookings.services import BookingService

OWNER = "owner-1"
RENTER = "renter-1"
OTHER_RENTER = "renter-2"


def at(day: int, hour: int = 0) -> datetime:
    return datetime(2025, 1, day, hour, tzinfo=timezone.utc)


def window(start_hour: int, end_hour: int, day: int = 1) -> Interval:
    return Interval(at(day, start_hour), at(day, end_hour))


def make_equipment(owner_id=OWNER, hourly="100", daily="600", is_active=True) -> EquipmentSnapshot:
    return EquipmentSnapshot(
        id=uuid4(),
        owner_id=owner_id,
        rate_card=RateCard(hourly_rate=Money(Decimal(hourly)), daily_rate=Money(Decimal(daily))),
        is_active=is_active,
    )


@pytest.fixture
def bus():
    return MessageBus()


@pytest.fixture
def store(bus):
    return InMemoryBookingStore(bus=bus)


@pytest.fixture
def tractor():
    return make_equipment()


@pytest.fixture
def equipment_lookup(tractor):
    return InMemoryEquipmentLookup([tractor])


@pytest.fixture
def service(store, equipment_lookup, bus):
    return BookingService(store, equipment_lookup, bus=bus)


@pytest.fixture
def published(bus):
    """Events delivered through the bus, in order."""
    events = []
    for event_type in (BookingRequested, BookingAccepted, BookingRejected):
        bus.register_event_handler(event_type, events.append)
    return events


@pytest.fixture
def audit_records():
    """Records written to the booking audit log during the test."""
    records = []

    class _Collector(logging.Handler):
        def emit(self, record):
            records.append(record)

    handler = _Collector(level=logging.INFO)
    previous_level = audit_logger.level
    audit_logger.setLevel(logging.INFO)
    audit_logger.addHandler(handler)
    yield records
    audit_logger.removeHandler(handler)
    audit_logger.setLevel(previous_level)
