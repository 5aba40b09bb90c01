"""Event types and an in-process, synchronous event bus.

Usage:
    bus = EventBus()
    bus.subscribe(EventType.FRAMING_ARRIVED, on_arrived)
    bus.publish(EventType.FRAMING_ARRIVED, {"position": [0, 0, -4]})

Handlers run on the publishing thread, in registration order.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)


class EventType(str, Enum):
    """All events emitted by the framing core."""

    # Camera motion
    MOVE_REQUESTED = "move.requested"
    FRAMING_ARRIVED = "framing.arrived"
    PROJECTION_TOGGLED = "projection.toggled"

    # Visibility report
    REPORT_UPDATED = "report.updated"
    REPORT_RESET = "report.reset"


EventHandler = Callable[[EventType, dict], None]


class EventBus:
    """Synchronous publish/subscribe dispatcher.

    A handler that raises is logged and skipped; remaining handlers still run.
    """

    def __init__(self):
        self._handlers: dict[EventType, list[EventHandler]] = {}
        self._published: dict[EventType, int] = {}

    def subscribe(self, event_type: EventType, handler: EventHandler) -> None:
        self._handlers.setdefault(EventType(event_type), []).append(handler)

    def unsubscribe(self, event_type: EventType, handler: EventHandler) -> bool:
        """Remove a handler. Returns False if it was not subscribed."""
        handlers = self._handlers.get(EventType(event_type), [])
        try:
            handlers.remove(handler)
        except ValueError:
            return False
        return True

    def publish(self, event_type: EventType, payload: Optional[dict[str, Any]] = None) -> int:
        """Deliver an event to its handlers. Returns the number that ran cleanly."""
        event_type = EventType(event_type)
        payload = payload or {}
        self._published[event_type] = self._published.get(event_type, 0) + 1
        delivered = 0
        for handler in list(self._handlers.get(event_type, [])):
            try:
                handler(event_type, payload)
                delivered += 1
            except Exception as e:
                logger.error("Handler %r failed for %s: %s", handler, event_type.value, e)
        return delivered

    def published_count(self, event_type: EventType) -> int:
        return self._published.get(EventType(event_type), 0)
