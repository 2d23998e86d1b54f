from __future__ import annotations

import contextlib
import logging
from collections.abc import Callable
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

logger = logging.getLogger("boostly.events")


class EventType(str, Enum):
    TASK_ADDED = "taskAdded"
    TASK_TOGGLED = "taskToggled"
    TASK_EDITED = "taskEdited"
    TASK_DELETED = "taskDeleted"
    TASKS_REORDERED = "tasksReordered"
    POINTS_CHANGED = "pointsChanged"
    LEVEL_UP = "levelUp"
    PRODUCTIVITY_INCREMENTED = "productivityIncremented"
    TIMER_TICK = "timerTick"
    TIMER_EXPIRED = "timerExpired"
    STATE_RESET = "stateReset"
    PERSISTENCE_FAILED = "persistenceFailed"


@dataclass(frozen=True)
class Event:
    type: EventType
    data: dict[str, Any] = field(default_factory=dict)


EventHandler = Callable[[Event], Any]


class EventBus:
    """In-memory pub/sub bus between the engine and its presentation layer."""

    def __init__(self) -> None:
        self._handlers: list[EventHandler] = []

    def subscribe(self, handler: EventHandler) -> Callable[[], None]:
        self._handlers.append(handler)

        def _unsubscribe() -> None:
            with contextlib.suppress(ValueError):
                self._handlers.remove(handler)

        return _unsubscribe

    def publish(self, event_type: EventType, **data: Any) -> Event:
        event = Event(event_type, data)
        self._dispatch(event)
        return event

    def _dispatch(self, event: Event) -> None:
        for handler in list(self._handlers):
            try:
                handler(event)
            except Exception:
                # A broken renderer must not corrupt an already-applied mutation
                logger.exception("Event handler failed for %s", event.type.value)
