# ============================================================================
# SCOPE: APPLICATION LAYER (Scheduling)
# Description: Use cases for booking, the reminder pipeline and its configuration.
# ============================================================================
from .book_appointment import BookAppointmentUseCase, RescheduleAppointmentUseCase
from .dispatch_reminder import NotificationDispatcher
from .retry_reminders import RetryCoordinator
from .track_delivery_status import DeliveryStatusTracker
from .update_messaging_config import UpdateMessagingConfigUseCase

__all__ = [
    "BookAppointmentUseCase",
    "RescheduleAppointmentUseCase",
    "NotificationDispatcher",
    "RetryCoordinator",
    "DeliveryStatusTracker",
    "UpdateMessagingConfigUseCase",
]
