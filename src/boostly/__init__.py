"""Boostly: task list, points and levels, weekly histogram and a focus timer."""

from .engine import BoostlyEngine
from .errors import BoostlyError, NotFoundError, PersistenceError, ValidationError
from .events import Event, EventBus, EventType
from .persistence import JsonFileGateway, MemoryGateway, SqliteGateway, StateGateway
from .rewards import FOCUS_SESSION_POINTS, TASK_POINTS, RewardEngine
from .state import LEVEL_THRESHOLD, AppState, Priority, Task
from .tasks import TaskStore
from .timer import FocusTimer, TimerMode, TimerStatus

__all__ = [
    "AppState",
    "BoostlyEngine",
    "BoostlyError",
    "Event",
    "EventBus",
    "EventType",
    "FOCUS_SESSION_POINTS",
    "FocusTimer",
    "JsonFileGateway",
    "LEVEL_THRESHOLD",
    "MemoryGateway",
    "NotFoundError",
    "PersistenceError",
    "Priority",
    "RewardEngine",
    "SqliteGateway",
    "StateGateway",
    "TASK_POINTS",
    "Task",
    "TaskStore",
    "TimerMode",
    "TimerStatus",
    "ValidationError",
]
