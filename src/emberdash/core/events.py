"""
Event bus for the director.

Provides synchronous pub/sub messaging so a presentation layer can react
to spawns, phase changes and speed bumps without polling.
"""

from dataclasses import dataclass, field
from typing import Any, Callable
from enum import Enum, auto
import logging
from collections import defaultdict

logger = logging.getLogger(__name__)


class EventType(Enum):
    """Built-in event types."""
    # Lifecycle
    SESSION_STARTED = auto()
    SESSION_ENDED = auto()

    # Spawns
    OBSTACLE_SPAWNED = auto()
    CLUSTER_SPAWNED = auto()
    BUNDLE_SPAWNED = auto()

    # Feedback from the presentation layer
    OBSTACLE_PASSED = auto()
    NEAR_MISS = auto()

    # Progression
    PHASE_CHANGED = auto()
    SPEED_INCREASED = auto()
    SPACING_INCREASED = auto()
    CLUSTERS_UNLOCKED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: Event type
        data: Event payload
        source: Component that emitted the event
        timestamp: Session clock in milliseconds when the event was created
    """
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)
    source: str = "director"
    timestamp: float = 0.0


Handler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for director/presentation communication.

    Handlers run synchronously inside ``emit``; the director never waits
    on anything, so there is no queue.
    """

    def __init__(self, history_limit: int = 100) -> None:
        self._handlers: dict[EventType, list[Handler]] = defaultdict(list)
        self._global_handlers: list[Handler] = []
        self._event_history: list[Event] = []
        self._history_limit = history_limit

    def subscribe(self, event_type: EventType, handler: Handler) -> Callable[[], None]:
        """
        Subscribe to an event type.

        Args:
            event_type: Type of event to listen for
            handler: Callback function

        Returns:
            Unsubscribe function
        """
        self._handlers[event_type].append(handler)
        logger.debug(f"Handler subscribed to {event_type}")

        def unsubscribe() -> None:
            if handler in self._handlers[event_type]:
                self._handlers[event_type].remove(handler)
                logger.debug(f"Handler unsubscribed from {event_type}")

        return unsubscribe

    def subscribe_all(self, handler: Handler) -> Callable[[], None]:
        """Subscribe to all events."""
        self._global_handlers.append(handler)

        def unsubscribe() -> None:
            if handler in self._global_handlers:
                self._global_handlers.remove(handler)

        return unsubscribe

    def emit(self, event: Event) -> None:
        """Emit an event to every matching handler."""
        self._add_to_history(event)

        handlers = self._handlers.get(event.type, []) + self._global_handlers
        for handler in handlers:
            try:
                handler(event)
            except Exception as e:
                logger.error(f"Error in event handler for {event.type.name}: {e}")

    def _add_to_history(self, event: Event) -> None:
        """Add event to history, maintaining limit."""
        self._event_history.append(event)
        if len(self._event_history) > self._history_limit:
            self._event_history.pop(0)

    def get_history(
        self,
        event_type: EventType | None = None,
        limit: int = 10
    ) -> list[Event]:
        """Get recent events from history."""
        history = self._event_history
        if event_type is not None:
            history = [e for e in history if e.type == event_type]
        return history[-limit:]

    def clear_history(self) -> None:
        """Clear event history."""
        self._event_history.clear()
