from datetime import date

import pytest

from boostly.errors import ValidationError
from boostly.events import EventBus, EventType
from boostly.state import AppState, Priority, Task, format_clock, weekday_index


# ---- format_clock ----

class TestFormatClock:
    def test_zero(self):
        assert format_clock(0) == "0:00"

    def test_full_pomodoro(self):
        assert format_clock(1500) == "25:00"

    def test_pads_seconds_only(self):
        assert format_clock(65) == "1:05"

    def test_negative_clamps(self):
        assert format_clock(-3) == "0:00"


# ---- weekday_index ----

@pytest.mark.parametrize(
    "day,index",
    [
        (date(2026, 10, 19), 0),
        (date(2026, 10, 20), 1),
        (date(2026, 10, 24), 5),
        (date(2026, 10, 25), 6),
    ],
)
def test_weekday_index(day, index):
    assert weekday_index(day) == index


# ---- Derived values ----

class TestDerived:
    def test_completion_percent_empty(self):
        assert AppState().completion_percent == 0

    def test_completion_percent(self):
        state = AppState(tasks=[
            Task(id=1, text="a", done=True),
            Task(id=2, text="b"),
            Task(id=3, text="c"),
        ])
        assert state.completed_count == 1
        assert state.completion_percent == 33

    def test_chart_ceiling_minimum(self):
        assert AppState().chart_ceiling == 3

    def test_chart_ceiling_follows_peak(self):
        assert AppState(productivity=[0, 7, 2, 0, 0, 0, 0]).chart_ceiling == 8


# ---- Priority ----

class TestPriority:
    def test_parse_values(self):
        assert Priority.parse("high") == Priority.HIGH
        assert Priority.parse(" LOW ") == Priority.LOW
        assert Priority.parse(None) == Priority.MEDIUM
        assert Priority.parse(Priority.MEDIUM) == Priority.MEDIUM

    def test_parse_rejects_unknown(self):
        with pytest.raises(ValidationError, match="Valid options"):
            Priority.parse("urgent")


# ---- EventBus ----

class TestEventBus:
    def test_publish_reaches_subscribers(self):
        bus = EventBus()
        seen = []
        bus.subscribe(seen.append)
        event = bus.publish(EventType.LEVEL_UP, level=2)
        assert seen == [event]
        assert event.data == {"level": 2}

    def test_unsubscribe(self):
        bus = EventBus()
        seen = []
        unsubscribe = bus.subscribe(seen.append)
        unsubscribe()
        unsubscribe()
        bus.publish(EventType.TIMER_EXPIRED)
        assert seen == []

    def test_failing_handler_does_not_block_others(self, caplog):
        bus = EventBus()
        seen = []

        def broken(event):
            raise RuntimeError("renderer crashed")

        bus.subscribe(broken)
        bus.subscribe(seen.append)
        bus.publish(EventType.TASK_ADDED, id=1)
        assert len(seen) == 1
        assert "Event handler failed" in caplog.text

    def test_event_names(self):
        assert EventType.TASK_TOGGLED.value == "taskToggled"
        assert EventType.PRODUCTIVITY_INCREMENTED.value == "productivityIncremented"
