"""Drives the focus timer once per second on the asyncio loop.

The tick job is a coroutine, so APScheduler runs it directly on the loop
rather than in an executor thread; every tick stays on one thread.
"""

from __future__ import annotations

import logging

from apscheduler.schedulers.asyncio import AsyncIOScheduler
from apscheduler.triggers.interval import IntervalTrigger

from .engine import BoostlyEngine
from .timer import TimerStatus

logger = logging.getLogger("boostly.ticker")

TICK_JOB_ID = "boostly-focus-tick"


class FocusTicker:
    def __init__(self, engine: BoostlyEngine, scheduler: AsyncIOScheduler, interval_seconds: float = 1):
        self.engine = engine
        self.scheduler = scheduler
        self.interval_seconds = interval_seconds

    @property
    def scheduled(self) -> bool:
        return self.scheduler.get_job(TICK_JOB_ID) is not None

    def start(self) -> bool:
        if not self.engine.start_timer():
            return False
        self.scheduler.add_job(
            self._tick,
            trigger=IntervalTrigger(seconds=self.interval_seconds),
            id=TICK_JOB_ID,
            replace_existing=True,
            coalesce=True,
            max_instances=1,
        )
        return True

    def pause(self) -> bool:
        paused = self.engine.pause_timer()
        self._cancel()
        return paused

    def reset(self) -> None:
        self.engine.reset_timer()
        self._cancel()

    async def _tick(self) -> None:
        self.engine.tick_timer()
        if self.engine.timer.status != TimerStatus.RUNNING:
            self._cancel()

    def _cancel(self) -> None:
        if self.scheduler.get_job(TICK_JOB_ID) is not None:
            self.scheduler.remove_job(TICK_JOB_ID)
            logger.debug("Tick job cancelled")
