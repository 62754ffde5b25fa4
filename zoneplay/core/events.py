"""
Lightweight event bus for decoupled inter-module communication.

The frame loop publishes what happened (status changes, applied actions,
source swaps); loggers and the dashboard subscribe without the loop
knowing about them.

Usage:
    bus = EventBus()
    bus.subscribe(Events.ACTION_APPLIED, my_handler)
    bus.emit(Events.ACTION_APPLIED, action=Action.PLAY)
"""

import time
import logging
from collections import defaultdict
from typing import Callable

logger = logging.getLogger(__name__)


class EventBus:
    """Synchronous publish/subscribe bus with priority ordering.

    One bus per session. Everything runs on the frame-loop thread, so
    listeners are called inline in priority order.
    """

    def __init__(self, max_history: int = 100):
        self._listeners = defaultdict(list)  # event_name -> [(priority, callback)]
        self._event_history = []
        self._max_history = max_history
        self._enabled = True

    def subscribe(self, event_name: str, callback: Callable, priority: int = 0):
        """Register a listener for an event.

        Args:
            event_name: Event to listen for
            callback: Function to call. Receives **kwargs from emit().
            priority: Higher priority callbacks run first (default 0)
        """
        self._listeners[event_name].append((priority, callback))
        self._listeners[event_name].sort(key=lambda x: -x[0])
        logger.debug("Subscribed to '%s': %s (priority=%d)",
                     event_name, getattr(callback, "__name__", callback), priority)

    def unsubscribe(self, event_name: str, callback: Callable):
        """Remove a listener for an event."""
        self._listeners[event_name] = [
            (p, cb) for p, cb in self._listeners[event_name] if cb is not callback
        ]

    def emit(self, event_name: str, **kwargs):
        """Emit an event to all registered listeners.

        A failing listener is logged and skipped; it never breaks the
        frame loop.
        """
        if not self._enabled:
            return

        listeners = list(self._listeners.get(event_name, []))

        self._event_history.append({
            "event": event_name,
            "time": time.time(),
            "data_keys": list(kwargs.keys()),
        })
        if len(self._event_history) > self._max_history:
            self._event_history = self._event_history[-self._max_history:]

        for _priority, callback in listeners:
            try:
                callback(**kwargs)
            except Exception as e:
                logger.error("Event handler error [%s -> %s]: %s",
                             event_name, getattr(callback, "__name__", callback), e)

    def clear(self, event_name: str = None):
        """Remove all listeners, optionally for a specific event."""
        if event_name:
            self._listeners.pop(event_name, None)
        else:
            self._listeners.clear()

    @property
    def listener_count(self) -> int:
        """Total number of registered listeners."""
        return sum(len(cbs) for cbs in self._listeners.values())

    def get_history(self, last_n: int = 10) -> list:
        """Get recent event history."""
        return self._event_history[-last_n:]


# =============================================================================
# Standard Event Names (constants to avoid typos)
# =============================================================================

class Events:
    """Standard event names used throughout the system."""

    # Initialisation
    SOURCE_READY = "source_ready"
    MODEL_READY = "model_ready"
    INIT_FAILED = "init_failed"

    # Per-frame
    STATUS_CHANGED = "status_changed"
    ACTION_APPLIED = "action_applied"

    # Session
    MEDIA_CHANGED = "media_changed"
    MODE_CHANGED = "mode_changed"
    STREAM_ENDED = "stream_ended"
    SYSTEM_STARTED = "system_started"
    SYSTEM_SHUTDOWN = "system_shutdown"
