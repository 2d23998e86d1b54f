"""Focus timer engine — pure logic, no I/O.

All time values are integer seconds. Ticks are driven from outside
(see ticker.py) so the state machine is deterministically testable.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

from .errors import ValidationError


class TimerMode(str, Enum):
    POMODORO = "pomodoro"
    CUSTOM = "custom"


class TimerStatus(str, Enum):
    IDLE = "idle"
    RUNNING = "running"
    PAUSED = "paused"
    EXPIRED = "expired"  # transient, never observed after tick() returns


class TimerEvent(Enum):
    TICK = "tick"
    EXPIRED = "expired"


@dataclass
class TickResult:
    events: list[TimerEvent] = field(default_factory=list)
    remaining_seconds: int = 0
    progress: float = 0.0

    @property
    def expired(self) -> bool:
        return TimerEvent.EXPIRED in self.events


POMODORO_SECONDS = 25 * 60
DEFAULT_CUSTOM_MINUTES = 25


def mode_duration(mode: TimerMode, custom_minutes: int | None = None) -> int:
    """Full length in seconds of a fresh run in ``mode``."""
    if mode == TimerMode.POMODORO:
        return POMODORO_SECONDS
    return (custom_minutes or DEFAULT_CUSTOM_MINUTES) * 60


class FocusTimer:
    """Countdown state machine: Idle -> Running <-> Paused, Running -> Idle on expiry."""

    def __init__(self, mode: TimerMode | str = TimerMode.POMODORO, custom_minutes: int | None = None):
        self._mode, self._custom_minutes = self._validate(mode, custom_minutes)
        self._status: TimerStatus = TimerStatus.IDLE
        self._total_seconds: int = mode_duration(self._mode, self._custom_minutes)
        self._remaining_seconds: int = self._total_seconds

    # ---- Read-only properties ----

    @property
    def mode(self) -> TimerMode:
        return self._mode

    @property
    def custom_minutes(self) -> int | None:
        return self._custom_minutes

    @property
    def status(self) -> TimerStatus:
        return self._status

    @property
    def remaining_seconds(self) -> int:
        return self._remaining_seconds

    @property
    def total_seconds(self) -> int:
        """Length of the current run (or of the next one while idle)."""
        return self._total_seconds

    @property
    def selected_duration(self) -> int:
        return mode_duration(self._mode, self._custom_minutes)

    @property
    def progress(self) -> float:
        total = self._total_seconds
        if total <= 0:
            return 0.0
        return min(1.0, max(0.0, (total - self._remaining_seconds) / total))

    # ---- Transitions ----

    def select_mode(self, mode: TimerMode | str, custom_minutes: int | None = None) -> None:
        """Change the mode used by the next fresh run.

        A countdown that is running or paused keeps its remaining time.
        """
        self._mode, self._custom_minutes = self._validate(mode, custom_minutes)
        if self._status == TimerStatus.IDLE:
            self._restart_countdown()

    def start(self) -> bool:
        """Start or resume. Returns False if already running."""
        if self._status == TimerStatus.RUNNING:
            return False
        if self._status == TimerStatus.IDLE:
            self._restart_countdown()
        self._status = TimerStatus.RUNNING
        return True

    def pause(self) -> bool:
        """Stop ticking but keep the remaining time. Returns False if not running."""
        if self._status != TimerStatus.RUNNING:
            return False
        self._status = TimerStatus.PAUSED
        return True

    def reset(self) -> None:
        self._status = TimerStatus.IDLE
        self._restart_countdown()

    def tick(self) -> TickResult:
        """Advance one second. A no-op unless running."""
        if self._status != TimerStatus.RUNNING:
            return self._result()

        self._remaining_seconds = max(0, self._remaining_seconds - 1)
        result = self._result()
        result.events.append(TimerEvent.TICK)

        if self._remaining_seconds == 0:
            self._status = TimerStatus.EXPIRED
            result.events.append(TimerEvent.EXPIRED)
            self._status = TimerStatus.IDLE
            self._restart_countdown()
        return result

    # ---- Internal ----

    def _result(self) -> TickResult:
        return TickResult(remaining_seconds=self._remaining_seconds, progress=self.progress)

    def _restart_countdown(self) -> None:
        self._total_seconds = self.selected_duration
        self._remaining_seconds = self._total_seconds

    @staticmethod
    def _validate(mode: TimerMode | str, custom_minutes: int | None) -> tuple[TimerMode, int | None]:
        try:
            mode = TimerMode(mode)
        except ValueError:
            valid = ", ".join(m.value for m in TimerMode)
            raise ValidationError(f"Unknown timer mode '{mode}'. Valid options: {valid}") from None
        if custom_minutes is not None and custom_minutes < 0:
            raise ValidationError(f"Custom minutes must not be negative ({custom_minutes})")
        return mode, custom_minutes
