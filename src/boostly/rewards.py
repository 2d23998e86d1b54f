"""Points, experience, levels and the weekly histogram."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import date

from .errors import ValidationError
from .events import EventBus, EventType
from .state import LEVEL_THRESHOLD, AppState, weekday_index

logger = logging.getLogger("boostly.rewards")

TASK_POINTS = 10
FOCUS_SESSION_POINTS = 50


class RewardEngine:
    def __init__(
        self,
        state: AppState,
        bus: EventBus,
        persist: Callable[[], None],
        today: Callable[[], date] = date.today,
    ):
        self._state = state
        self._bus = bus
        self._persist = persist
        self._today = today

    def award_points(self, n: int) -> int:
        """Add ``n`` to points and experience, rolling overflow into levels.

        Returns the number of level-ups triggered.
        """
        old_points = self._state.points
        new_levels = self._apply_award(n)
        self._persist()
        self._announce(old_points, new_levels)
        return len(new_levels)

    def _apply_award(self, n: int) -> list[int]:
        if n < 0:
            raise ValidationError(f"Cannot award a negative amount ({n})")

        state = self._state
        state.points += n
        state.experience += n

        new_levels: list[int] = []
        while state.experience >= LEVEL_THRESHOLD:
            state.experience -= LEVEL_THRESHOLD
            state.level += 1
            new_levels.append(state.level)
        return new_levels

    def _announce(self, old_points: int, new_levels: list[int]) -> None:
        self._bus.publish(EventType.POINTS_CHANGED, old=old_points, new=self._state.points)
        for level in new_levels:
            logger.info("Level up: %d", level)
            self._bus.publish(EventType.LEVEL_UP, level=level)

    def on_task_completed(self) -> None:
        old_points = self._state.points
        new_levels = self._apply_award(TASK_POINTS)

        index = weekday_index(self._today())
        self._state.productivity[index] += 1
        self._persist()

        self._announce(old_points, new_levels)
        self._bus.publish(
            EventType.PRODUCTIVITY_INCREMENTED,
            weekday=index,
            count=self._state.productivity[index],
        )

    def on_task_uncompleted(self) -> None:
        # Experience and the histogram keep what was earned
        state = self._state
        old_points = state.points
        state.points = max(0, state.points - TASK_POINTS)
        self._persist()
        self._bus.publish(EventType.POINTS_CHANGED, old=old_points, new=state.points)

    def on_timer_expired(self) -> None:
        logger.info("Focus session complete, +%d points", FOCUS_SESSION_POINTS)
        self.award_points(FOCUS_SESSION_POINTS)
