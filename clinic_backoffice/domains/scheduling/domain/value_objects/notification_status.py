"""Notification Status Value Object.

Lifecycle of a reminder notification as reported by dispatch and by
WhatsApp status callbacks.
"""

from clinic_backoffice.core.domain.value_objects import StatusEnum


class NotificationStatus(StatusEnum):
    """Estado de un recordatorio enviado por WhatsApp."""

    PENDING = "pending"  # Registrado, aún sin intento exitoso
    SENT = "sent"  # Aceptado por la API de WhatsApp
    DELIVERED = "delivered"  # Entregado al dispositivo
    READ = "read"  # Leído por el paciente
    FAILED = "failed"  # Rechazado o no entregable

    @property
    def rank(self) -> int:
        """Position in the delivery lifecycle; status never moves to a lower rank."""
        ranks = {
            "pending": 0,
            "sent": 1,
            "failed": 1,
            "delivered": 2,
            "read": 3,
        }
        return ranks[self.value]

    def is_terminal_success(self) -> bool:
        """¿El recordatorio ya fue aceptado por el proveedor?"""
        return self.value in ["sent", "delivered", "read"]

    def is_retryable(self) -> bool:
        return self.value in ["pending", "failed"]

    def can_advance_to(self, new_status: "NotificationStatus") -> bool:
        """A callback may only keep or raise the lifecycle rank."""
        return new_status.rank >= self.rank
