from io import StringIO

from rich.console import Console

from boostly.events import Event, EventType
from boostly.presenter import ConsolePresenter, render_header, render_tasks, render_timer, render_week
from boostly.state import AppState, Priority, Task


def make_console() -> Console:
    return Console(file=StringIO(), width=100, color_system=None)


def output(console: Console) -> str:
    return console.file.getvalue()


def test_completion_toast_depends_on_priority() -> None:
    console = make_console()
    presenter = ConsolePresenter(console)
    presenter(Event(EventType.TASK_TOGGLED, {"done": True, "priority": Priority.HIGH.value}))
    presenter(Event(EventType.TASK_TOGGLED, {"done": True, "priority": Priority.LOW.value}))
    text = output(console)
    assert "Crushed it! +10 points" in text
    assert "Done. +10 points" in text


def test_level_up_and_session_toasts() -> None:
    console = make_console()
    presenter = ConsolePresenter(console)
    presenter(Event(EventType.LEVEL_UP, {"level": 4}))
    presenter(Event(EventType.TIMER_EXPIRED))
    text = output(console)
    assert "Level Up!" in text
    assert "level 4" in text
    assert "Focus session complete! +50 points" in text


def test_persistence_warning() -> None:
    console = make_console()
    ConsolePresenter(console)(Event(EventType.PERSISTENCE_FAILED, {"error": "disk full"}))
    assert "progress not saved (disk full)" in output(console)


def test_tick_events_are_silent() -> None:
    console = make_console()
    ConsolePresenter(console)(Event(EventType.TIMER_TICK, {"remaining": 10, "progress": 0.5}))
    assert output(console) == ""


def test_render_views() -> None:
    state = AppState(
        points=120,
        level=2,
        experience=20,
        tasks=[Task(id=1, text="Write report", priority=Priority.HIGH), Task(id=2, text="Stretch", done=True)],
        productivity=[2, 0, 5, 0, 0, 0, 1],
    )
    console = make_console()
    console.print(render_header(state))
    console.print(render_tasks(state))
    console.print(render_week(state))
    console.print(render_timer(65, 0.5, "running"))
    text = output(console)
    assert "120" in text
    assert "20/100" in text
    assert "1/2 done (50%)" in text
    assert "Write report" in text
    assert "Wed" in text
    assert "1:05" in text


def test_render_empty_task_list() -> None:
    console = make_console()
    console.print(render_tasks(AppState()))
    assert "No tasks yet" in output(console)
