# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Data Transfer Objects for booking and reminder operations.
# ============================================================================
"""Scheduling DTOs.

Request DTOs for the booking use cases and result DTOs reported by the
reminder pipeline.
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

# =============================================================================
# Request DTOs
# =============================================================================


@dataclass(frozen=True)
class BookAppointmentRequest:
    """Request DTO for booking a new appointment."""

    start: datetime
    duration_minutes: int
    patient_id: int | None = None
    patient_name: str = ""
    notes: str = ""


@dataclass(frozen=True)
class RescheduleAppointmentRequest:
    """Request DTO for moving an existing appointment."""

    appointment_id: int
    new_start: datetime
    duration_minutes: int | None = None


# =============================================================================
# Result DTOs
# =============================================================================


@dataclass(frozen=True)
class DispatchResult:
    """Outcome of a single reminder send attempt."""

    appointment_id: int
    message_type: str
    success: bool
    provider_message_id: str | None = None
    error_code: str | None = None
    error_message: str | None = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "appointment_id": self.appointment_id,
            "message_type": self.message_type,
            "success": self.success,
            "provider_message_id": self.provider_message_id,
            "error_code": self.error_code,
            "error_message": self.error_message,
        }


@dataclass
class TickResult:
    """Counters for one reminder scheduler tick."""

    started_at: datetime
    executed: bool = True
    scanned: int = 0
    dispatched: int = 0
    skipped: int = 0
    failed: int = 0
    retried: int = 0
    windows: dict[str, int] = field(default_factory=dict)

    @classmethod
    def noop(cls, started_at: datetime) -> "TickResult":
        return cls(started_at=started_at, executed=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "started_at": self.started_at.isoformat(),
            "executed": self.executed,
            "scanned": self.scanned,
            "dispatched": self.dispatched,
            "skipped": self.skipped,
            "failed": self.failed,
            "retried": self.retried,
            "windows": dict(self.windows),
        }
