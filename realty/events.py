"""
Property change events.

Published after a property mutation has been committed so that listeners
(cache invalidation, search indexing) can react. Delivery is synchronous and
in-process; there is no persistence and no retry.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Callable, List
import enum
import logging
import uuid

from realty.database import utc_now

logger = logging.getLogger(__name__)


class EventKind(str, enum.Enum):
    CREATED = "created"
    UPDATED = "updated"
    DELETED = "deleted"


@dataclass(frozen=True)
class PropertyEvent:
    """A property was created, updated or deleted."""
    kind: EventKind
    property_id: uuid.UUID
    occurred_at: datetime = field(default_factory=utc_now)


Subscriber = Callable[[PropertyEvent], None]


class EventChannel:
    """Fan-out of PropertyEvent values to registered callbacks."""

    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Subscriber:
        """Register a callback; returns it so this can be used as a decorator."""
        if callback not in self._subscribers:
            self._subscribers.append(callback)
        return callback

    def unsubscribe(self, callback: Subscriber) -> None:
        if callback in self._subscribers:
            self._subscribers.remove(callback)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def publish(self, event: PropertyEvent) -> None:
        """
        Deliver an event to every subscriber in registration order.
        A failing subscriber is logged and skipped.
        """
        logger.debug(f"Publishing {event.kind.value} event for property {event.property_id}")
        for callback in list(self._subscribers):
            try:
                callback(event)
            except Exception as e:
                logger.error(
                    f"Property event subscriber {getattr(callback, '__name__', callback)} failed: {e}",
                    exc_info=True
                )


# Application-wide channel used by the property service
property_events = EventChannel()
