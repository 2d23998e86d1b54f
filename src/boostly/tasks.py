"""Ordered task list owned by an AppState.

Every mutation is all-or-nothing: arguments are validated before the
list is touched, then the full state is persisted through ``persist``.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable

from .errors import NotFoundError, ValidationError
from .events import EventBus, EventType
from .state import AppState, Priority, Task

logger = logging.getLogger("boostly.tasks")


def epoch_ms() -> int:
    return int(time.time() * 1000)


class TaskStore:
    def __init__(
        self,
        state: AppState,
        bus: EventBus,
        persist: Callable[[], None],
        now_ms: Callable[[], int] = epoch_ms,
    ):
        self._state = state
        self._bus = bus
        self._persist = persist
        self._now_ms = now_ms
        self._last_id: int = max((task.id for task in state.tasks), default=0)

    @property
    def tasks(self) -> list[Task]:
        return self._state.tasks

    def __len__(self) -> int:
        return len(self._state.tasks)

    # ---- Mutations ----

    def add_task(self, text: str, priority: Priority | str | None = Priority.MEDIUM) -> int:
        """Prepend a new open task and return its id."""
        text = (text or "").strip()
        if not text:
            raise ValidationError("Please enter a task")
        priority = Priority.parse(priority)

        task = Task(id=self._next_id(), text=text, priority=priority)
        self._state.tasks.insert(0, task)
        self._persist()

        logger.info("Task added: %s [%s]", task.text, task.priority.value)
        self._bus.publish(EventType.TASK_ADDED, id=task.id, text=task.text, priority=task.priority.value)
        return task.id

    def toggle_done(self, index: int) -> bool:
        """Flip ``done`` at ``index`` and return the new value."""
        task = self._get(index)
        task.done = not task.done
        self._persist()

        logger.info("Task %s: %s", "completed" if task.done else "reopened", task.text)
        self._bus.publish(
            EventType.TASK_TOGGLED,
            index=index,
            id=task.id,
            done=task.done,
            priority=task.priority.value,
        )
        return task.done

    def edit_text(self, index: int, new_text: str) -> bool:
        """Replace the text at ``index``. Blank input keeps the old text.

        Returns True if the text was replaced.
        """
        task = self._get(index)
        new_text = (new_text or "").strip()
        if not new_text:
            return False

        task.text = new_text
        self._persist()
        self._bus.publish(EventType.TASK_EDITED, index=index, id=task.id, text=task.text)
        return True

    def delete_task(self, index: int) -> Task:
        self._get(index)
        task = self._state.tasks.pop(index)
        self._persist()

        logger.info("Task deleted: %s", task.text)
        self._bus.publish(EventType.TASK_DELETED, index=index, id=task.id)
        return task

    def reorder(self, from_index: int, to_index: int) -> None:
        """Move the task at ``from_index`` so it ends up at ``to_index``."""
        self._get(from_index)
        self._get(to_index)
        if from_index == to_index:
            return

        tasks = self._state.tasks
        tasks.insert(to_index, tasks.pop(from_index))
        self._persist()
        self._bus.publish(EventType.TASKS_REORDERED, from_index=from_index, to_index=to_index)

    # ---- Internal ----

    def _get(self, index: int) -> Task:
        if isinstance(index, bool) or not isinstance(index, int):
            raise NotFoundError(f"Invalid task index: {index!r}")
        if not 0 <= index < len(self._state.tasks):
            raise NotFoundError(f"No task at index {index} (have {len(self._state.tasks)})")
        return self._state.tasks[index]

    def _next_id(self) -> int:
        self._last_id = max(self._now_ms(), self._last_id + 1)
        return self._last_id
