from .appointment import Appointment
from .notification import NotificationRecord

__all__ = ["Appointment", "NotificationRecord"]
