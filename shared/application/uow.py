"""
Unit of Work

One database transaction plus the domain events it produced. Events are
handed to the message bus from ``transaction.on_commit`` so subscribers
never observe a change that was rolled back.

    with DjangoUnitOfWork() as uow:
        reconciler.apply_delta(room.pk, 1)
        booking = Booking.objects.create(...)
        uow.add_event(BookingCreated(...))
"""

from typing import List
import logging

from django.db import transaction

from shared.domain.base import DomainEvent

logger = logging.getLogger(__name__)


class DjangoUnitOfWork:
    """
    Context manager around ``transaction.atomic()``.

    Nested units of work become savepoints; their events are still
    delivered only when the outermost transaction commits.
    """

    def __init__(self):
        self._events: List[DomainEvent] = []
        self._atomic = None

    def __enter__(self):
        self._atomic = transaction.atomic()
        self._atomic.__enter__()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        try:
            if exc_type is None:
                self.commit()
            else:
                self.rollback()
        finally:
            self._atomic.__exit__(exc_type, exc_val, exc_tb)
            self._atomic = None

    def add_event(self, event: DomainEvent):
        self._events.append(event)

    @property
    def pending_events(self) -> List[DomainEvent]:
        return list(self._events)

    def commit(self):
        events, self._events = self._events, []
        if events:
            logger.debug(f"Queueing {len(events)} events for after commit")
            transaction.on_commit(lambda: self._publish(events))

    def rollback(self):
        if self._events:
            logger.info(f"Transaction rolled back, dropping {len(self._events)} events")
        self._events = []

    @staticmethod
    def _publish(events: List[DomainEvent]):
        from shared.application.message_bus import message_bus

        # Already committed: a delivery failure is reported, never raised.
        try:
            message_bus.publish_events(events)
        except Exception as e:
            logger.error(f"Publishing {len(events)} events failed: {e}", exc_info=True)
