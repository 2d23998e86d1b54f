import json
import sqlite3
from pathlib import Path

import pytest

from boostly.errors import PersistenceError
from boostly.persistence import JsonFileGateway, MemoryGateway, SqliteGateway
from boostly.state import STORAGE_KEY, AppState, Priority, Task


def sample_state() -> AppState:
    return AppState(
        points=120,
        streak=2,
        level=3,
        experience=20,
        tasks=[
            Task(id=2, text="Write report", done=False, priority=Priority.HIGH),
            Task(id=1, text="Stretch", done=True, priority=Priority.LOW),
        ],
        productivity=[1, 0, 3, 0, 0, 0, 2],
    )


class TestJsonFileGateway:
    def test_missing_file_loads_none(self, tmp_path: Path) -> None:
        assert JsonFileGateway(tmp_path / "boostly.json").load() is None

    def test_save_then_load(self, tmp_path: Path) -> None:
        gateway = JsonFileGateway(tmp_path / "nested" / "boostly.json")
        gateway.save(sample_state())
        assert gateway.load() == sample_state()

    def test_file_uses_browser_layout(self, tmp_path: Path) -> None:
        path = tmp_path / "boostly.json"
        JsonFileGateway(path).save(sample_state())
        data = json.loads(path.read_text(encoding="utf-8"))
        assert set(data) == {"points", "streak", "level", "exp", "tasks", "productivity"}
        assert data["exp"] == 20
        assert data["tasks"][0] == {"id": 2, "text": "Write report", "done": False, "priority": "high"}

    def test_loads_legacy_snapshot(self, tmp_path: Path) -> None:
        path = tmp_path / "boostly.json"
        path.write_text(
            json.dumps({
                "points": 30,
                "streak": 0,
                "level": 1,
                "exp": 30,
                "tasks": [{"id": 1712000000000, "text": "Old task", "done": True, "priority": "medium"}],
                "productivity": [0, 1, 0, 0, 2, 0, 0],
            }),
            encoding="utf-8",
        )
        state = JsonFileGateway(path).load()
        assert state.points == 30
        assert state.experience == 30
        assert state.tasks[0].id == 1712000000000
        assert state.tasks[0].done is True
        assert state.productivity == [0, 1, 0, 0, 2, 0, 0]

    def test_no_temp_files_left_behind(self, tmp_path: Path) -> None:
        gateway = JsonFileGateway(tmp_path / "boostly.json")
        gateway.save(sample_state())
        gateway.save(AppState())
        assert [p.name for p in tmp_path.iterdir()] == ["boostly.json"]

    def test_corrupt_file_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "boostly.json"
        path.write_text("{oops", encoding="utf-8")
        with pytest.raises(PersistenceError):
            JsonFileGateway(path).load()

    def test_non_object_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "boostly.json"
        path.write_text("[1, 2, 3]", encoding="utf-8")
        with pytest.raises(PersistenceError):
            JsonFileGateway(path).load()

    def test_unwritable_location_raises(self, tmp_path: Path) -> None:
        blocker = tmp_path / "blocker"
        blocker.write_text("", encoding="utf-8")
        gateway = JsonFileGateway(blocker / "boostly.json")
        with pytest.raises(PersistenceError):
            gateway.save(AppState())


class TestSqliteGateway:
    def test_empty_database_loads_none(self, tmp_path: Path) -> None:
        assert SqliteGateway(tmp_path / "boostly.db").load() is None

    def test_save_then_load(self, tmp_path: Path) -> None:
        gateway = SqliteGateway(tmp_path / "boostly.db")
        gateway.save(sample_state())
        assert gateway.load() == sample_state()

    def test_save_overwrites_single_row(self, tmp_path: Path) -> None:
        db_path = tmp_path / "boostly.db"
        gateway = SqliteGateway(db_path)
        gateway.save(sample_state())
        gateway.save(AppState(points=5))
        assert gateway.load().points == 5

        conn = sqlite3.connect(db_path)
        try:
            rows = conn.execute("SELECT key FROM app_state").fetchall()
        finally:
            conn.close()
        assert rows == [(STORAGE_KEY,)]

    def test_corrupt_payload_raises(self, tmp_path: Path) -> None:
        db_path = tmp_path / "boostly.db"
        gateway = SqliteGateway(db_path)
        gateway.save(AppState())
        conn = sqlite3.connect(db_path)
        with conn:
            conn.execute("UPDATE app_state SET payload = 'garbage'")
        conn.close()
        with pytest.raises(PersistenceError):
            gateway.load()


class TestMemoryGateway:
    def test_counts_saves(self) -> None:
        gateway = MemoryGateway()
        gateway.save(AppState())
        gateway.save(AppState(points=1))
        assert gateway.saves == 2
        assert gateway.load().points == 1


class TestSnapshotNormalization:
    def test_missing_keys_use_defaults(self) -> None:
        assert AppState.from_dict({}) == AppState()

    def test_short_productivity_is_padded(self) -> None:
        state = AppState.from_dict({"productivity": [1, 2]})
        assert state.productivity == [1, 2, 0, 0, 0, 0, 0]

    def test_long_productivity_is_truncated(self) -> None:
        state = AppState.from_dict({"productivity": list(range(10))})
        assert state.productivity == [0, 1, 2, 3, 4, 5, 6]

    def test_overflowing_experience_rolls_into_levels(self) -> None:
        state = AppState.from_dict({"level": 1, "exp": 250})
        assert (state.level, state.experience) == (3, 50)

    def test_unknown_priority_defaults_to_medium(self) -> None:
        state = AppState.from_dict({"tasks": [{"id": 1, "text": "a", "priority": "urgent"}]})
        assert state.tasks[0].priority == Priority.MEDIUM

    def test_negative_points_clamped(self) -> None:
        assert AppState.from_dict({"points": -5}).points == 0

    def test_duplicate_task_ids_are_renumbered(self) -> None:
        state = AppState.from_dict({
            "tasks": [
                {"id": 5, "text": "a"},
                {"id": 5, "text": "b"},
                {"id": 3, "text": "c"},
                {"id": 3, "text": "d"},
            ]
        })
        assert [t.id for t in state.tasks] == [5, 6, 3, 7]
        assert [t.text for t in state.tasks] == ["a", "b", "c", "d"]
