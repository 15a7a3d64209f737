"""Reminder scheduling infrastructure (APScheduler)."""

from .reminder_scheduler import (
    ReminderSchedulerRunner,
    get_reminder_scheduler_runner,
    shutdown_reminder_scheduler_runner,
)

__all__ = [
    "ReminderSchedulerRunner",
    "get_reminder_scheduler_runner",
    "shutdown_reminder_scheduler_runner",
]
