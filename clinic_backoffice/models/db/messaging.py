# ============================================================================
# SCOPE: MESSAGING
# Description: WhatsApp Cloud API configuration, reminder notification
#              records and raw webhook logs.
# ============================================================================
"""
WhatsApp messaging models.

whatsapp_notifications holds one row per (appointment_id, message_type).
That pair is the idempotency key of a reminder: every dispatch attempt
upserts the same row and delivery callbacks update it in place.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any

from sqlalchemy import (
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin

NOTIFICATION_STATUSES = ("pending", "sent", "delivered", "read", "failed")


class WhatsAppConfigModel(Base, TimestampMixin):
    """
    Process-wide WhatsApp configuration (single row).

    Loaded once per scheduler tick; the reminder_* flags enable each
    reminder offset individually.
    """

    __tablename__ = "whatsapp_config"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    phone_number_id: Mapped[str] = mapped_column(String(50), nullable=False, comment="Cloud API phone number id")

    access_token: Mapped[str] = mapped_column(Text, nullable=False, comment="Permanent access token")

    business_account_id: Mapped[str | None] = mapped_column(String(50), nullable=True)

    webhook_verify_token: Mapped[str] = mapped_column(
        String(255),
        nullable=False,
        comment="Secret echoed by Meta on webhook subscription",
    )

    is_active: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    reminder_enabled: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    reminder_3_days_before: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    reminder_1_day_before: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)

    reminder_2_hours_before: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    template_name_reminder: Mapped[str] = mapped_column(
        String(100),
        nullable=False,
        default="appointment_reminder",
        comment="Approved template name used for reminders",
    )

    template_lang_code: Mapped[str] = mapped_column(String(10), nullable=False, default="es_AR")

    def __repr__(self) -> str:
        return f"<WhatsAppConfigModel(phone_number_id='{self.phone_number_id}', active={self.is_active})>"


class WhatsAppNotificationModel(Base, TimestampMixin):
    """Reminder delivery record keyed by (appointment_id, message_type)."""

    __tablename__ = "whatsapp_notifications"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    appointment_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("appointments.id", ondelete="CASCADE"),
        nullable=False,
        comment="Appointment this reminder belongs to",
    )

    message_type: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        comment="Reminder kind: 3_days, 1_day, 2_hours",
    )

    status: Mapped[str] = mapped_column(
        String(20),
        nullable=False,
        default="pending",
        comment="pending, sent, delivered, read, failed",
    )

    provider_message_id: Mapped[str | None] = mapped_column(
        String(255),
        nullable=True,
        comment="wamid returned by the Cloud API",
    )

    error_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    attempts: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=0,
        server_default="0",
        comment="Dispatch attempts made for this key",
    )

    sent_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    delivered_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    read_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)

    __table_args__ = (
        UniqueConstraint("appointment_id", "message_type", name="uq_whatsapp_notifications_appointment_type"),
        CheckConstraint(
            "status IN ('pending', 'sent', 'delivered', 'read', 'failed')",
            name="valid_status",
        ),
        Index("idx_whatsapp_notifications_provider_id", "provider_message_id"),
        Index("idx_whatsapp_notifications_status", "status", "attempts"),
    )

    def __repr__(self) -> str:
        return (
            f"<WhatsAppNotificationModel(appointment_id={self.appointment_id}, "
            f"type='{self.message_type}', status='{self.status}')>"
        )


class WhatsAppWebhookLogModel(Base):
    """Raw inbound webhook payloads, stored before processing."""

    __tablename__ = "whatsapp_webhook_logs"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)

    event_type: Mapped[str] = mapped_column(String(50), nullable=False, comment="statuses, messages or unknown")

    payload: Mapped[dict[str, Any]] = mapped_column(JSONB, nullable=False)

    processed: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)

    __table_args__ = (Index("idx_whatsapp_webhook_logs_created_at", "created_at"),)
