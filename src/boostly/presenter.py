"""Terminal presentation layer built on rich.

ConsolePresenter turns engine events into short toasts; the render_*
helpers draw read-only AppState snapshots.
"""

from __future__ import annotations

from rich.console import Console, Group
from rich.progress_bar import ProgressBar
from rich.table import Table
from rich.text import Text

from .events import Event, EventType
from .state import LEVEL_THRESHOLD, WEEKDAY_LABELS, AppState, Priority, format_clock

PRIORITY_STYLES = {
    Priority.HIGH.value: "bold red",
    Priority.MEDIUM.value: "yellow",
    Priority.LOW.value: "cyan",
}

COMPLETION_TOASTS = {
    Priority.HIGH.value: "Crushed it! +10 points",
    Priority.MEDIUM.value: "Nice! +10 points",
    Priority.LOW.value: "Done. +10 points",
}


class ConsolePresenter:
    """Event subscriber that prints one line per user-visible change."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console()

    def __call__(self, event: Event) -> None:
        data = event.data
        if event.type == EventType.TASK_ADDED:
            self._toast("Task added", "green")
        elif event.type == EventType.TASK_TOGGLED:
            if data.get("done"):
                priority = data.get("priority", Priority.MEDIUM.value)
                self._toast(COMPLETION_TOASTS.get(priority, COMPLETION_TOASTS["medium"]), PRIORITY_STYLES.get(priority, "green"))
            else:
                self._toast("Task reopened", "dim")
        elif event.type == EventType.TASK_EDITED:
            self._toast("Task updated", "green")
        elif event.type == EventType.TASK_DELETED:
            self._toast("Task deleted", "dim")
        elif event.type == EventType.TASKS_REORDERED:
            self._toast("Tasks reordered", "dim")
        elif event.type == EventType.LEVEL_UP:
            self._toast(f"Level Up! 🎉 You reached level {data['level']}", "bold magenta")
        elif event.type == EventType.TIMER_EXPIRED:
            self.console.bell()
            self._toast("⏰ Focus session complete! +50 points", "bold green")
        elif event.type == EventType.STATE_RESET:
            self._toast("App reset", "yellow")
        elif event.type == EventType.PERSISTENCE_FAILED:
            self._toast(f"Warning: progress not saved ({data.get('error')})", "bold yellow")

    def _toast(self, message: str, style: str) -> None:
        self.console.print(Text(message, style=style))


def render_header(state: AppState) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(justify="right", style="bold")
    table.add_column()

    table.add_row("Points", str(state.points))
    table.add_row("Streak", str(state.streak))
    table.add_row("Level", str(state.level))
    table.add_row(
        "XP",
        Group(
            ProgressBar(total=LEVEL_THRESHOLD, completed=state.experience, width=30),
            Text(f"{state.experience}/{LEVEL_THRESHOLD}", style="dim"),
        ),
    )
    table.add_row(
        "Tasks",
        Group(
            ProgressBar(total=100, completed=state.completion_percent, width=30),
            Text(f"{state.completed_count}/{len(state.tasks)} done ({state.completion_percent}%)", style="dim"),
        ),
    )
    return table


def render_tasks(state: AppState) -> Table | Text:
    if not state.tasks:
        return Text("No tasks yet. Add one with: boostly add \"...\"", style="dim")

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right", width=3)
    table.add_column("", width=1)
    table.add_column("Task", no_wrap=False)
    table.add_column("Priority", width=8)

    for position, task in enumerate(state.tasks, start=1):
        text = Text(task.text, style="strike dim" if task.done else "")
        table.add_row(
            str(position),
            "✔" if task.done else "·",
            text,
            Text(task.priority.value, style=PRIORITY_STYLES[task.priority.value]),
        )
    return table


def render_week(state: AppState, width: int = 30) -> Table:
    ceiling = state.chart_ceiling
    table = Table.grid(padding=(0, 1))
    table.add_column(style="bold")
    table.add_column()
    table.add_column(justify="right")

    for label, count in zip(WEEKDAY_LABELS, state.productivity):
        bar = "█" * round(count / ceiling * width)
        table.add_row(label, Text(bar, style="cyan"), str(count))
    return table


def render_timer(remaining_seconds: int, progress: float, status: str) -> Table:
    table = Table.grid(padding=(0, 2))
    table.add_column(style="bold")
    table.add_column()
    table.add_column(style="dim")
    table.add_row(
        format_clock(remaining_seconds),
        ProgressBar(total=1.0, completed=progress, width=30),
        status,
    )
    return table
