"""Persistence gateways for the AppState snapshot.

A gateway returns None from load() when nothing has been saved yet and
raises PersistenceError when storage cannot be read or written.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import tempfile
from datetime import datetime
from pathlib import Path
from typing import Protocol

from .errors import PersistenceError
from .state import STORAGE_KEY, AppState

logger = logging.getLogger("boostly.persistence")


class StateGateway(Protocol):
    def load(self) -> AppState | None: ...

    def save(self, state: AppState) -> None: ...


def _decode(payload: str, source: str) -> AppState:
    try:
        data = json.loads(payload)
        if not isinstance(data, dict):
            raise TypeError(f"expected an object, got {type(data).__name__}")
        return AppState.from_dict(data)
    except (ValueError, TypeError, KeyError, AttributeError) as e:
        raise PersistenceError(f"Unreadable snapshot in {source}: {e}") from e


class MemoryGateway:
    """Keeps the last saved snapshot in memory as JSON text."""

    def __init__(self, initial: AppState | None = None):
        self.payload: str | None = None
        self.saves = 0
        if initial is not None:
            self.payload = json.dumps(initial.to_dict())

    def load(self) -> AppState | None:
        if self.payload is None:
            return None
        return _decode(self.payload, "memory")

    def save(self, state: AppState) -> None:
        self.payload = json.dumps(state.to_dict())
        self.saves += 1


class JsonFileGateway:
    """Single JSON document on disk, replaced atomically on every save."""

    def __init__(self, path: Path):
        self.path = Path(path)

    def load(self) -> AppState | None:
        if not self.path.exists():
            return None
        try:
            payload = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise PersistenceError(f"Failed to read {self.path}: {e}") from e
        return _decode(payload, str(self.path))

    def save(self, state: AppState) -> None:
        payload = json.dumps(state.to_dict(), indent=2)
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(dir=self.path.parent, prefix=f".{self.path.name}.", suffix=".tmp")
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                os.replace(tmp_name, self.path)
            except BaseException:
                Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as e:
            raise PersistenceError(f"Failed to write {self.path}: {e}") from e
        logger.debug("Saved snapshot to %s", self.path)


class SqliteGateway:
    """Snapshot stored as one JSON row in a small key/value table."""

    def __init__(self, db_path: Path, key: str = STORAGE_KEY):
        self.db_path = Path(db_path)
        self.key = key

    def _connect(self) -> sqlite3.Connection:
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        conn = sqlite3.connect(self.db_path)
        conn.execute("PRAGMA busy_timeout=5000")
        conn.execute("""
            CREATE TABLE IF NOT EXISTS app_state (
                key TEXT PRIMARY KEY,
                payload TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)
        return conn

    def load(self) -> AppState | None:
        try:
            conn = self._connect()
            try:
                row = conn.execute("SELECT payload FROM app_state WHERE key = ?", (self.key,)).fetchone()
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Failed to read {self.db_path}: {e}") from e
        if row is None:
            return None
        return _decode(row[0], f"{self.db_path}:{self.key}")

    def save(self, state: AppState) -> None:
        payload = json.dumps(state.to_dict())
        try:
            conn = self._connect()
            try:
                with conn:
                    conn.execute(
                        """INSERT INTO app_state (key, payload, updated_at) VALUES (?, ?, ?)
                           ON CONFLICT(key) DO UPDATE SET payload = excluded.payload,
                                                          updated_at = excluded.updated_at""",
                        (self.key, payload, datetime.now().isoformat()),
                    )
            finally:
                conn.close()
        except (OSError, sqlite3.Error) as e:
            raise PersistenceError(f"Failed to write {self.db_path}: {e}") from e
        logger.debug("Saved snapshot to %s", self.db_path)
