from .scheduling_dtos import (
    BookAppointmentRequest,
    DispatchResult,
    RescheduleAppointmentRequest,
    TickResult,
)

__all__ = [
    "BookAppointmentRequest",
    "RescheduleAppointmentRequest",
    "DispatchResult",
    "TickResult",
]
