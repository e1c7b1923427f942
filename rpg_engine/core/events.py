"""
Typed event bus for decoupled communication.

Uses Enums for event types to prevent magic strings. The battle
resolver never talks to the presentation layer directly: the battle
system publishes what happened and whoever displays it subscribes.

Usage:
    # Subscribe
    event_bus.subscribe(BattleEvent.DAMAGE_DEALT, on_damage)

    # Publish
    event_bus.publish(BattleEvent.DAMAGE_DEALT, actor="Fighter", damage=8)
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable
from weakref import WeakMethod, ref


logger = logging.getLogger(__name__)


class EngineEvent(Enum):
    """Built-in engine events."""
    # Lifecycle
    GAME_PAUSE = auto()
    GAME_RESUME = auto()

    # Host mode (overworld, battle, game over)
    MODE_CHANGED = auto()


class BattleEvent(Enum):
    """Battle events, published in resolution order."""
    BATTLE_STARTED = auto()
    SELECTION_OPENED = auto()
    CHOICE_QUEUED = auto()
    MESSAGE = auto()
    DAMAGE_DEALT = auto()
    ROSTER_UPDATED = auto()
    ROUND_ENDED = auto()
    BATTLE_ENDED = auto()


@dataclass
class Event:
    """
    Event data container.

    Attributes:
        type: The event type (Enum member)
        data: Dictionary of event-specific data
        consumed: Whether the event has been handled
    """
    type: Enum
    data: dict[str, Any] = field(default_factory=dict)
    consumed: bool = False

    def consume(self) -> None:
        """Mark event as consumed (stops propagation)."""
        self.consumed = True

    def get(self, key: str, default: Any = None) -> Any:
        """Get event data by key."""
        return self.data.get(key, default)

    def __getitem__(self, key: str) -> Any:
        """Get event data by key (dict-style)."""
        return self.data[key]


# Type alias for event handlers
EventHandler = Callable[[Event], None]


class EventBus:
    """
    Central event bus for publish/subscribe messaging.

    Features:
    - Typed events (Enum-based)
    - Priority ordering
    - Weak references (auto-cleanup when handlers are deleted)
    - One-shot handlers
    - Event consumption (stops propagation)
    """

    def __init__(self):
        # Map of event type -> list of (priority, handler, one_shot)
        self._handlers: dict[Enum, list[tuple[int, Any, bool]]] = {}
        # Queue for events published during handling
        self._event_queue: list[Event] = []
        self._is_publishing = False

    def subscribe(
        self,
        event_type: Enum,
        handler: EventHandler,
        priority: int = 0,
        one_shot: bool = False,
        weak: bool = True,
    ) -> None:
        """
        Subscribe to an event type.

        Args:
            event_type: The event type to listen for
            handler: Callback function(event: Event)
            priority: Higher priority handlers are called first (default 0)
            one_shot: If True, handler is removed after first call
            weak: If True, use weak reference (handler auto-removed if deleted)
        """
        if event_type not in self._handlers:
            self._handlers[event_type] = []

        if weak:
            if hasattr(handler, '__self__'):
                handler_ref = WeakMethod(handler)
            else:
                handler_ref = ref(handler)
        else:
            handler_ref = handler

        # Insert sorted by priority (highest first, stable for equal priority)
        handlers = self._handlers[event_type]
        entry = (priority, handler_ref, one_shot)

        insert_idx = len(handlers)
        for i, (p, _, _) in enumerate(handlers):
            if priority > p:
                insert_idx = i
                break

        handlers.insert(insert_idx, entry)

    def subscribe_all(
        self,
        event_types: type[Enum],
        handler: EventHandler,
        priority: int = 0,
        weak: bool = True,
    ) -> None:
        """Subscribe one handler to every member of an event Enum."""
        for event_type in event_types:
            self.subscribe(event_type, handler, priority=priority, weak=weak)

    def unsubscribe(self, event_type: Enum, handler: EventHandler) -> None:
        """
        Unsubscribe from an event type.

        Args:
            event_type: The event type
            handler: The handler to remove
        """
        if event_type not in self._handlers:
            return

        handlers = self._handlers[event_type]
        self._handlers[event_type] = [
            (p, h, o) for p, h, o in handlers
            if self._get_handler(h) != handler
        ]

    def publish(self, event_type: Enum, **data: Any) -> Event:
        """
        Publish an event.

        Args:
            event_type: The event type
            **data: Event data as keyword arguments

        Returns:
            The Event object (check .consumed to see if it was handled)
        """
        event = Event(type=event_type, data=data)
        self.publish_event(event)
        return event

    def publish_event(self, event: Event) -> None:
        """
        Publish a pre-created event.

        Events published from inside a handler are queued and
        dispatched after the current one, preserving order.
        """
        if self._is_publishing:
            self._event_queue.append(event)
        else:
            self._dispatch(event)

    def has_subscribers(self, event_type: Enum) -> bool:
        """Check whether any live handler listens for an event type."""
        return any(
            self._get_handler(h) is not None
            for _, h, _ in self._handlers.get(event_type, [])
        )

    def _dispatch(self, event: Event) -> None:
        """Dispatch event to handlers, then drain the queue."""
        self._is_publishing = True
        try:
            self._call_handlers(event)
            while self._event_queue:
                self._call_handlers(self._event_queue.pop(0))
        finally:
            self._is_publishing = False

    def _call_handlers(self, event: Event) -> None:
        if event.type not in self._handlers:
            return

        handlers = self._handlers[event.type]
        to_remove: list[tuple[int, Any, bool]] = []

        # Iterate over a snapshot; handlers may subscribe while we dispatch
        for entry in list(handlers):
            _, handler_ref, one_shot = entry
            handler = self._get_handler(handler_ref)

            if handler is None:
                # Weak reference was garbage collected
                to_remove.append(entry)
                continue

            try:
                handler(event)
            except Exception:
                # Log but don't crash the publisher
                logger.exception("Error in event handler for %s", event.type)

            if one_shot:
                to_remove.append(entry)

            if event.consumed:
                break

        if to_remove:
            self._handlers[event.type] = [
                e for e in handlers
                if not any(e is r for r in to_remove)
            ]

    def _get_handler(self, handler_ref: Any) -> EventHandler | None:
        """Resolve handler from reference."""
        if isinstance(handler_ref, (ref, WeakMethod)):
            return handler_ref()
        return handler_ref
