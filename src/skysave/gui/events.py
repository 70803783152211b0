"""
Event bus for panel communication.
Decoupled pub/sub pattern for cross-panel events.
"""

import logging
from typing import Any, Callable, Dict, List

logger = logging.getLogger(__name__)


class EventBus:
    """Central event system for panel communication."""

    _subscribers: Dict[str, List[Callable]] = {}

    @classmethod
    def subscribe(cls, event: str, callback: Callable):
        """Subscribe to an event."""
        cls._subscribers.setdefault(event, []).append(callback)

    @classmethod
    def publish(cls, event: str, data: Any = None):
        """Publish an event to all subscribers."""
        for cb in list(cls._subscribers.get(event, [])):
            try:
                cb(data)
            except Exception:
                # keep delivering to the remaining subscribers
                logger.exception("EventBus error on '%s'", event)

    @classmethod
    def unsubscribe(cls, event: str, callback: Callable):
        """Unsubscribe from an event."""
        if event in cls._subscribers:
            try:
                cls._subscribers[event].remove(callback)
            except ValueError:
                pass

    @classmethod
    def clear(cls):
        """Clear all subscriptions."""
        cls._subscribers.clear()


class Events:
    """Event name constants."""
    # File requests (menu -> state)
    OPEN_REQUESTED = "save.open_requested"
    WRITE_REQUESTED = "save.write_requested"

    # Save lifecycle (state -> panels)
    SAVE_OPENED = "save.opened"
    SAVE_MODIFIED = "save.modified"
    SAVE_WRITTEN = "save.written"
    SAVE_FAILED = "save.failed"

    STATUS_UPDATE = "status.update"
