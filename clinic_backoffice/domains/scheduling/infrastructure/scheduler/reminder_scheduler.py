"""Reminder Scheduler Runner.

APScheduler-based periodic driver for the reminder pipeline. Every
interval it opens a fresh database scope, builds a ReminderWindowScheduler
and runs one tick under a timeout.

Overlapping ticks are skipped (not queued), and ``stop()`` halts future
ticks while letting an in-flight tick finish.
"""

import asyncio
import logging
from collections.abc import Callable
from contextlib import AbstractAsyncContextManager
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from apscheduler.schedulers.asyncio import AsyncIOScheduler  # type: ignore[import-not-found]
from apscheduler.triggers.interval import IntervalTrigger  # type: ignore[import-not-found]
from pytz import utc

if TYPE_CHECKING:
    from ...application.dto.scheduling_dtos import TickResult
    from ...application.services.reminder_window_scheduler import ReminderWindowScheduler

logger = logging.getLogger(__name__)

TICK_JOB_ID = "reminder_tick"

TickScopeFactory = Callable[[], AbstractAsyncContextManager["ReminderWindowScheduler"]]


class ReminderSchedulerRunner:
    """Scheduler periódico de recordatorios por WhatsApp.

    Runs immediately on start, then every ``interval_seconds``.
    """

    def __init__(
        self,
        tick_scope: TickScopeFactory,
        interval_seconds: int = 300,
        timeout_seconds: int = 300,
        enabled: bool = True,
    ):
        """Initialize runner.

        Args:
            tick_scope: Factory of an async context manager yielding a
                ReminderWindowScheduler bound to a fresh database session.
            interval_seconds: Period between ticks.
            timeout_seconds: Maximum duration of a tick before it is abandoned.
            enabled: Whether the runner starts at all.
        """
        self._tick_scope = tick_scope
        self.interval_seconds = interval_seconds
        self.timeout_seconds = timeout_seconds
        self.enabled = enabled

        self._scheduler: AsyncIOScheduler | None = None
        self._is_running = False
        self._tick_lock = asyncio.Lock()
        self._inflight: set[asyncio.Task[Any]] = set()
        self._last_result: "TickResult | None" = None

    async def start(self) -> None:
        """Start the scheduler."""
        if not self.enabled:
            logger.info("ReminderSchedulerRunner is disabled, skipping start")
            return

        if self._is_running:
            logger.warning("ReminderSchedulerRunner already running")
            return

        scheduler = AsyncIOScheduler(timezone=utc)
        self._scheduler = scheduler

        scheduler.add_job(
            self._on_trigger,
            IntervalTrigger(seconds=self.interval_seconds, timezone=utc),
            id=TICK_JOB_ID,
            replace_existing=True,
            name="WhatsApp Appointment Reminders",
            max_instances=1,
            coalesce=True,
            next_run_time=datetime.now(UTC),
        )

        scheduler.start()
        self._is_running = True
        logger.info(
            f"ReminderSchedulerRunner started (interval={self.interval_seconds}s, timeout={self.timeout_seconds}s)"
        )

    async def stop(self) -> None:
        """Stop future ticks, then wait for a tick already in flight."""
        if self._scheduler and self._is_running:
            self._scheduler.shutdown(wait=False)
            self._is_running = False
            logger.info("ReminderSchedulerRunner stopped scheduling new ticks")

        if self._inflight:
            logger.info("Waiting for in-flight reminder tick to finish")
            await asyncio.gather(*self._inflight, return_exceptions=True)

        # A tick started outside the scheduler (trigger_manual) also holds the lock
        async with self._tick_lock:
            pass

    async def _on_trigger(self) -> None:
        """APScheduler job: run the tick in its own task so shutdown cannot cancel it."""
        task = asyncio.ensure_future(self.run_once())
        self._inflight.add(task)
        task.add_done_callback(self._inflight.discard)
        await asyncio.shield(task)

    async def run_once(self, now: datetime | None = None) -> "TickResult | None":
        """Run one tick unless another one is in progress.

        Returns:
            The tick result, or None if the tick was skipped, timed out or failed.
        """
        if self._tick_lock.locked():
            logger.info("Previous reminder tick still running, skipping this one")
            return None

        async with self._tick_lock:
            try:
                result = await asyncio.wait_for(self._run_tick(now), timeout=self.timeout_seconds)
            except asyncio.TimeoutError:
                logger.error(f"Reminder tick exceeded {self.timeout_seconds}s and was abandoned")
                return None
            except Exception as e:
                logger.error(f"Error running reminder tick: {e}", exc_info=True)
                return None

            self._last_result = result
            return result

    async def _run_tick(self, now: datetime | None) -> "TickResult":
        async with self._tick_scope() as window_scheduler:
            return await window_scheduler.run_tick(now)

    async def trigger_manual(self, now: datetime | None = None) -> "TickResult | None":
        """Manually trigger a tick (for testing/admin)."""
        logger.info("Manual reminder tick requested")
        return await self.run_once(now)

    @property
    def is_running(self) -> bool:
        """Check if scheduler is running."""
        return self._is_running

    @property
    def tick_in_progress(self) -> bool:
        return self._tick_lock.locked()

    @property
    def last_result(self) -> "TickResult | None":
        return self._last_result

    def get_jobs_info(self) -> list[dict[str, Any]]:
        """Get information about scheduled jobs."""
        if not self._scheduler:
            return []

        jobs = []
        for job in self._scheduler.get_jobs():
            jobs.append(
                {
                    "id": job.id,
                    "name": job.name,
                    "next_run": job.next_run_time.isoformat() if job.next_run_time else None,
                }
            )
        return jobs


# Singleton instance
_runner_instance: ReminderSchedulerRunner | None = None


def get_reminder_scheduler_runner(
    tick_scope: TickScopeFactory | None = None,
    interval_seconds: int = 300,
    timeout_seconds: int = 300,
    enabled: bool = True,
) -> ReminderSchedulerRunner:
    """Get or create the singleton runner instance.

    Args:
        tick_scope: Required on first call.
        interval_seconds: Period between ticks.
        timeout_seconds: Tick timeout.
        enabled: Whether the runner is enabled.

    Returns:
        ReminderSchedulerRunner singleton instance.
    """
    global _runner_instance

    if _runner_instance is None:
        if tick_scope is None:
            raise ValueError("tick_scope is required to create the reminder scheduler runner")
        _runner_instance = ReminderSchedulerRunner(
            tick_scope=tick_scope,
            interval_seconds=interval_seconds,
            timeout_seconds=timeout_seconds,
            enabled=enabled,
        )

    return _runner_instance


async def shutdown_reminder_scheduler_runner() -> None:
    """Shutdown the runner singleton."""
    global _runner_instance

    if _runner_instance:
        await _runner_instance.stop()
        _runner_instance = None
