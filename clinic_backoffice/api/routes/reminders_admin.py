"""
Reminder scheduler admin endpoints.

  - GET /admin/reminders/status → runner state, scheduled jobs, last tick
  - POST /admin/reminders/run   → run one tick now
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends

from clinic_backoffice.api.dependencies import get_reminder_runner
from clinic_backoffice.domains.scheduling.infrastructure.scheduler import ReminderSchedulerRunner

router = APIRouter(prefix="/admin/reminders", tags=["Reminders Admin"])
logger = logging.getLogger(__name__)


@router.get("/status")
async def get_reminder_status(
    runner: ReminderSchedulerRunner = Depends(get_reminder_runner),  # noqa: B008
) -> dict[str, Any]:
    last = runner.last_result
    return {
        "enabled": runner.enabled,
        "running": runner.is_running,
        "tick_in_progress": runner.tick_in_progress,
        "jobs": runner.get_jobs_info(),
        "last_tick": last.to_dict() if last else None,
    }


@router.post("/run")
async def run_reminder_tick(
    runner: ReminderSchedulerRunner = Depends(get_reminder_runner),  # noqa: B008
) -> dict[str, Any]:
    """Run a reminder tick now (skipped if one is already in progress)."""
    result = await runner.trigger_manual()
    if result is None:
        return {"skipped": True, "result": None}
    return {"skipped": False, "result": result.to_dict()}
