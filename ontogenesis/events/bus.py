"""Event Bus — typed pub/sub with wildcard matching.

The scheduler and breeding engine emit events; dashboards and scoring
services subscribe. Subscribers receive copies of engine data and cannot
reach engine state through an event.

Patterns match event type values: "kernel-*" matches "kernel-created" and
"kernel-activated", "*" matches everything.
"""

from __future__ import annotations

import fnmatch
import logging
from collections import defaultdict
from datetime import datetime
from typing import Any, Callable

from pydantic import BaseModel, Field

from ontogenesis.genome.models import utcnow
from ontogenesis.types import EventType, new_id

_logger = logging.getLogger(__name__)

EventHandler = Callable[["Event"], None]


class Event(BaseModel):
    """An engine event."""

    id: str = Field(default_factory=new_id)
    type: EventType
    data: dict[str, Any] = Field(default_factory=dict)
    source: str = ""
    timestamp: datetime = Field(default_factory=utcnow)


def _pattern(pattern: EventType | str) -> str:
    return pattern.value if isinstance(pattern, EventType) else pattern


class EventBus:
    """Synchronous pub/sub event bus.

    A handler that raises is logged and skipped; the publisher and the
    remaining handlers are unaffected.
    """

    def __init__(self, history_limit: int = 500) -> None:
        self._subscribers: dict[str, list[EventHandler]] = defaultdict(list)
        self._history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(self, pattern: EventType | str, handler: EventHandler) -> None:
        """Subscribe to events matching an event type or pattern."""
        self._subscribers[_pattern(pattern)].append(handler)

    def unsubscribe(self, pattern: EventType | str, handler: EventHandler) -> None:
        """Remove a subscription."""
        handlers = self._subscribers.get(_pattern(pattern), [])
        if handler in handlers:
            handlers.remove(handler)

    def emit(
        self,
        event_type: EventType,
        data: dict[str, Any] | None = None,
        source: str = "",
    ) -> Event:
        """Emit an event to all matching subscribers."""
        event = Event(type=event_type, data=data or {}, source=source)

        if self._history_limit > 0:
            self._history.append(event)
            if len(self._history) > self._history_limit:
                self._history = self._history[-self._history_limit:]

        # Snapshot handlers so subscribe/unsubscribe inside a handler is safe
        matching = [
            handler
            for pattern, handlers in list(self._subscribers.items())
            if fnmatch.fnmatch(event_type.value, pattern)
            for handler in list(handlers)
        ]
        for handler in matching:
            try:
                handler(event)
            except Exception:
                _logger.exception(
                    "Event handler %r failed for %s", handler, event_type.value
                )

        return event

    def history(self, type_filter: EventType | str = "*", limit: int = 50) -> list[Event]:
        """Get recent events (newest first), optionally filtered by pattern."""
        pattern = _pattern(type_filter)
        if pattern == "*":
            events = self._history
        else:
            events = [e for e in self._history if fnmatch.fnmatch(e.type.value, pattern)]
        return list(reversed(events[-limit:]))

    @property
    def subscriber_count(self) -> int:
        return sum(len(h) for h in self._subscribers.values())

    def types(self) -> list[EventType]:
        """Get all event types that have been emitted."""
        return list({e.type for e in self._history})
