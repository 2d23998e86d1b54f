"""AppState, the single persisted snapshot.

Pure data, no I/O. Serialization keeps the browser-era JSON layout
(``exp`` for experience) so old snapshots load unchanged.
"""

from __future__ import annotations

import copy
from dataclasses import dataclass, field
from datetime import date
from enum import Enum

from .errors import ValidationError


STORAGE_KEY = "boostly_app_v1"

LEVEL_THRESHOLD = 100
WEEK_DAYS = 7
WEEKDAY_LABELS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")


class Priority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def parse(cls, value: "Priority | str | None") -> "Priority":
        """Accept a Priority or its string value; None means medium."""
        if value is None:
            return cls.MEDIUM
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            valid = ", ".join(p.value for p in cls)
            raise ValidationError(f"Unknown priority '{value}'. Valid options: {valid}") from None


@dataclass
class Task:
    id: int
    text: str
    done: bool = False
    priority: Priority = Priority.MEDIUM

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "done": self.done,
            "priority": self.priority.value,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "Task":
        try:
            priority = Priority.parse(data.get("priority"))
        except ValidationError:
            priority = Priority.MEDIUM
        return cls(
            id=int(data["id"]),
            text=str(data.get("text", "")),
            done=bool(data.get("done", False)),
            priority=priority,
        )


@dataclass
class AppState:
    points: int = 0
    streak: int = 0
    level: int = 1
    experience: int = 0
    tasks: list[Task] = field(default_factory=list)
    productivity: list[int] = field(default_factory=lambda: [0] * WEEK_DAYS)

    # ---- Derived values ----

    @property
    def completed_count(self) -> int:
        return sum(1 for task in self.tasks if task.done)

    @property
    def completion_percent(self) -> int:
        """Share of tasks marked done, 0-100. An empty list counts as 0%."""
        total = len(self.tasks) or 1
        return round(self.completed_count / total * 100)

    @property
    def chart_ceiling(self) -> int:
        """Upper bound for the weekly histogram axis."""
        return max(3, max(self.productivity) + 1)

    def snapshot(self) -> "AppState":
        """Deep copy handed to renderers so they cannot mutate engine state."""
        return copy.deepcopy(self)

    # ---- Serialization ----

    def to_dict(self) -> dict:
        return {
            "points": self.points,
            "streak": self.streak,
            "level": self.level,
            "exp": self.experience,
            "tasks": [task.to_dict() for task in self.tasks],
            "productivity": list(self.productivity),
        }

    @classmethod
    def from_dict(cls, data: dict) -> "AppState":
        """Restore a snapshot, filling gaps with zero-state defaults."""
        productivity = [max(0, int(n or 0)) for n in data.get("productivity") or []]
        productivity = (productivity + [0] * WEEK_DAYS)[:WEEK_DAYS]

        level = max(1, int(data.get("level", 1)))
        experience = max(0, int(data.get("exp", data.get("experience", 0))))
        # Older snapshots could hold experience past the threshold
        level += experience // LEVEL_THRESHOLD
        experience %= LEVEL_THRESHOLD

        tasks = [Task.from_dict(t) for t in data.get("tasks") or []]
        # Ids must stay unique; later duplicates get fresh ids
        seen: set[int] = set()
        next_id = max((task.id for task in tasks), default=0)
        for task in tasks:
            if task.id in seen:
                next_id += 1
                task.id = next_id
            seen.add(task.id)

        return cls(
            points=max(0, int(data.get("points", 0))),
            streak=max(0, int(data.get("streak", 0))),
            level=level,
            experience=experience,
            tasks=tasks,
            productivity=productivity,
        )


def weekday_index(day: date) -> int:
    """Monday=0 ... Sunday=6."""
    return day.weekday()


def format_clock(seconds: int) -> str:
    """Format seconds as 'M:SS' (minutes are not padded)."""
    seconds = max(0, int(seconds))
    return f"{seconds // 60}:{seconds % 60:02d}"
