"""
Unit of Work Pattern

Manages database transactions and ensures that domain events
are published only after successful transaction commit.
"""

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

if TYPE_CHECKING:  # pragma: no cover - type checking only
    from shared.application.message_bus import MessageBus

logger = logging.getLogger(__name__)


class AbstractUnitOfWork(ABC):
    """Abstract Unit of Work pattern"""

    def __init__(self, bus: 'MessageBus | None' = None):
        self._events: List[DomainEvent] = []
        self._bus = bus

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.commit()
        else:
            self.rollback()

    @abstractmethod
    def commit(self):
        """Commit the transaction"""
        pass

    @abstractmethod
    def rollback(self):
        """Rollback the transaction"""
        pass

    def collect_events(self, aggregate):
        """
        Collect events from aggregate root

        Extracts all domain events from the aggregate and
        clears them from the aggregate.
        """
        if hasattr(aggregate, 'events'):
            new_events = aggregate.events
            if new_events:
                self._events.extend(new_events)
                aggregate.clear_events()
                logger.debug(
                    "Collected %d events from %s (ID: %s)",
                    len(new_events), aggregate.__class__.__name__, aggregate.id,
                )

    def _take_events(self) -> List[DomainEvent]:
        events = self._events.copy()
        self._events.clear()
        return events

    def _publish_events(self, events: List[DomainEvent]):
        """
        Publish collected events to message bus

        Called after successful transaction commit.
        """
        if self._bus is None:
            logger.warning("No message bus bound, %d events not published", len(events))
            return

        logger.info("Publishing %d domain events after commit", len(events))

        try:
            self._bus.publish_events(events)
        except Exception as e:
            # Events are already committed to database
            logger.error("Error publishing events: %s", e, exc_info=True)


class DjangoUnitOfWork(AbstractUnitOfWork):
    """
    Django implementation of Unit of Work

    Manages Django database transactions and ensures domain events
    are published after successful commit.

    Subclasses may override ``acquire()`` to take row locks as soon as
    the transaction has started.

    Usage:
        with DjangoUnitOfWork() as uow:
            booking = store.get(booking_id)
            booking.accept(actor)
            uow.collect_events(booking)
            store.compare_and_set_status(...)
            # Transaction commits here
        # Events are published after commit
    """

    def __init__(self, bus: 'MessageBus | None' = None, using: str | None = None):
        super().__init__(bus=bus)
        self._using = using
        self._transaction = None

    def __enter__(self):
        """Start database transaction"""
        self._transaction = transaction.atomic(using=self._using)
        self._transaction.__enter__()
        try:
            self.acquire()
        except BaseException as exc:
            self._transaction.__exit__(type(exc), exc, exc.__traceback__)
            raise
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Complete or rollback transaction"""
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            if self._transaction:
                self._transaction.__exit__(exc_type, exc_val, exc_tb)

    def acquire(self):
        """Hook executed right after the transaction opens"""
        pass

    def commit(self):
        """
        Commit changes and publish events

        Events are published using Django's transaction.on_commit()
        to ensure they're only sent after database commit succeeds.
        """
        events = self._take_events()
        logger.debug("Committing transaction with %d events", len(events))

        if events:
            transaction.on_commit(lambda: self._publish_events(events), using=self._using)

    def rollback(self):
        """Rollback changes and discard events"""
        logger.warning("Rolling back transaction, discarding %d events", len(self._events))
        self._events.clear()
