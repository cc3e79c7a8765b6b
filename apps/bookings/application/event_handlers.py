"""
Booking Event Handlers

Subscribers run after the unit of work commits. Delivery of
notifications is left to integrators; the engine itself keeps an audit
trail of every lifecycle change in the log.
"""

import logging

from apps.bookings.domain.events import BookingAccepted, BookingRejected, BookingRequested

audit_logger = logging.getLogger('apps.bookings.audit')


def log_booking_event(event) -> None:
    audit_logger.info("%s", type(event).__name__, extra={'booking_event': event.to_dict()})


def register_event_handlers(bus) -> None:
    for event_type in (BookingRequested, BookingAccepted, BookingRejected):
        bus.register_event_handler(event_type, log_booking_event)
