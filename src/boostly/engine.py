"""BoostlyEngine: the single owner of the AppState.

Wires the Task Store, Reward Engine and focus timer around one state
object, saves after every mutation and reports save failures as
``persistenceFailed`` events instead of raising.
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from .errors import PersistenceError
from .events import EventBus, EventType
from .persistence import StateGateway
from .rewards import RewardEngine
from .state import AppState, Priority, Task
from .tasks import TaskStore, epoch_ms
from .timer import FocusTimer, TickResult, TimerMode

logger = logging.getLogger("boostly.engine")


class BoostlyEngine:
    def __init__(
        self,
        gateway: StateGateway,
        *,
        bus: EventBus | None = None,
        timer: FocusTimer | None = None,
        today: Callable[[], date] = date.today,
        now_ms: Callable[[], int] = epoch_ms,
    ):
        self.gateway = gateway
        self.bus = bus or EventBus()
        self.timer = timer or FocusTimer()
        self._today = today
        self._now_ms = now_ms
        self.persistence_ok = True

        state = gateway.load()
        if state is None:
            logger.info("No saved state, starting fresh")
            state = AppState()
        self._bind(state)

    def _bind(self, state: AppState) -> None:
        self._state = state
        self.tasks = TaskStore(state, self.bus, self.save, now_ms=self._now_ms)
        self.rewards = RewardEngine(state, self.bus, self.save, today=self._today)

    # ---- State access ----

    def snapshot(self) -> AppState:
        return self._state.snapshot()

    def save(self) -> bool:
        """Write the full state through the gateway. Returns False on failure."""
        try:
            self.gateway.save(self._state)
        except PersistenceError as e:
            logger.warning("Save failed, changes are only in memory: %s", e)
            self.persistence_ok = False
            self.bus.publish(EventType.PERSISTENCE_FAILED, error=str(e))
            return False
        self.persistence_ok = True
        return True

    def reset(self) -> None:
        """Replace everything with the default zero-state."""
        self._bind(AppState())
        self.save()
        logger.info("App reset")
        self.bus.publish(EventType.STATE_RESET)

    # ---- Tasks ----

    def add_task(self, text: str, priority: Priority | str | None = Priority.MEDIUM) -> int:
        return self.tasks.add_task(text, priority)

    def toggle_done(self, index: int) -> bool:
        done = self.tasks.toggle_done(index)
        if done:
            self.rewards.on_task_completed()
        else:
            self.rewards.on_task_uncompleted()
        return done

    def edit_text(self, index: int, new_text: str) -> bool:
        return self.tasks.edit_text(index, new_text)

    def delete_task(self, index: int) -> Task:
        return self.tasks.delete_task(index)

    def reorder(self, from_index: int, to_index: int) -> None:
        self.tasks.reorder(from_index, to_index)

    def award_points(self, n: int) -> int:
        return self.rewards.award_points(n)

    # ---- Timer ----

    def select_timer_mode(self, mode: TimerMode | str, custom_minutes: int | None = None) -> None:
        self.timer.select_mode(mode, custom_minutes)

    def start_timer(self) -> bool:
        started = self.timer.start()
        if started:
            logger.info("Focus timer running, %ds left", self.timer.remaining_seconds)
        return started

    def pause_timer(self) -> bool:
        return self.timer.pause()

    def reset_timer(self) -> None:
        self.timer.reset()

    def tick_timer(self) -> TickResult:
        result = self.timer.tick()
        if not result.events:
            return result

        logger.debug("Timer tick: %ds left", result.remaining_seconds)
        self.bus.publish(
            EventType.TIMER_TICK,
            remaining=result.remaining_seconds,
            progress=result.progress,
        )
        if result.expired:
            self.bus.publish(EventType.TIMER_EXPIRED)
            self.rewards.on_timer_expired()
        return result
