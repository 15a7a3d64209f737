"""Initial schema - scheduling and WhatsApp reminders.

Revision ID: 001_initial_schema
Revises: None
Create Date: 2025-02-03

Tables created:
- patients, appointments
- business_hours, business_hour_overrides
- whatsapp_config, whatsapp_notifications, whatsapp_webhook_logs

appointments carries a GiST exclusion constraint on
tstzrange(start_at, end_at) so overlapping rows cannot be committed even
if two bookings pass validation concurrently.
"""

from typing import Sequence, Union

import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "001_initial_schema"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    op.create_table(
        "patients",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("first_name", sa.String(length=100), nullable=False),
        sa.Column("last_name", sa.String(length=100), server_default="", nullable=False),
        sa.Column("phone", sa.String(length=30), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_patients")),
    )

    op.create_table(
        "appointments",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("patient_id", sa.Integer(), nullable=True),
        sa.Column("patient_name", sa.String(length=200), nullable=True),
        sa.Column("start_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("end_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("duration_minutes", sa.Integer(), nullable=False),
        sa.Column("notes", sa.Text(), nullable=True),
        *_timestamps(),
        sa.CheckConstraint("duration_minutes > 0", name=op.f("ck_appointments_positive_duration")),
        sa.CheckConstraint("end_at > start_at", name=op.f("ck_appointments_end_after_start")),
        sa.ForeignKeyConstraint(
            ["patient_id"],
            ["patients.id"],
            name=op.f("fk_appointments_patient_id_patients"),
            ondelete="SET NULL",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_appointments")),
    )
    op.create_index("idx_appointments_start_at", "appointments", ["start_at"])
    op.create_index(op.f("ix_appointments_patient_id"), "appointments", ["patient_id"])
    op.execute(
        """
        ALTER TABLE appointments
        ADD CONSTRAINT ex_appointments_no_overlap
        EXCLUDE USING gist (tstzrange(start_at, end_at, '[)') WITH &&)
        """
    )

    op.create_table(
        "business_hours",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("weekday", sa.SmallInteger(), nullable=False),
        sa.Column("opens_at", sa.Time(), nullable=False),
        sa.Column("closes_at", sa.Time(), nullable=False),
        *_timestamps(),
        sa.CheckConstraint("weekday BETWEEN 1 AND 7", name=op.f("ck_business_hours_iso_weekday")),
        sa.CheckConstraint("opens_at < closes_at", name=op.f("ck_business_hours_opens_before_closes")),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_business_hours")),
    )
    op.create_index("idx_business_hours_weekday", "business_hours", ["weekday"])

    op.create_table(
        "business_hour_overrides",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("date", sa.Date(), nullable=False),
        sa.Column("opens_at", sa.Time(), nullable=True),
        sa.Column("closes_at", sa.Time(), nullable=True),
        sa.Column("reason", sa.String(length=200), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "(opens_at IS NULL AND closes_at IS NULL) OR (opens_at < closes_at)",
            name=op.f("ck_business_hour_overrides_closed_or_valid_interval"),
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_business_hour_overrides")),
    )
    op.create_index(op.f("ix_business_hour_overrides_date"), "business_hour_overrides", ["date"])

    op.create_table(
        "whatsapp_config",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("phone_number_id", sa.String(length=50), nullable=False),
        sa.Column("access_token", sa.Text(), nullable=False),
        sa.Column("business_account_id", sa.String(length=50), nullable=True),
        sa.Column("webhook_verify_token", sa.String(length=255), nullable=False),
        sa.Column("is_active", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("reminder_enabled", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("reminder_3_days_before", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("reminder_1_day_before", sa.Boolean(), server_default=sa.true(), nullable=False),
        sa.Column("reminder_2_hours_before", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column(
            "template_name_reminder",
            sa.String(length=100),
            server_default="appointment_reminder",
            nullable=False,
        ),
        sa.Column("template_lang_code", sa.String(length=10), server_default="es_AR", nullable=False),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_whatsapp_config")),
    )

    op.create_table(
        "whatsapp_notifications",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("appointment_id", sa.Integer(), nullable=False),
        sa.Column("message_type", sa.String(length=20), nullable=False),
        sa.Column("status", sa.String(length=20), server_default="pending", nullable=False),
        sa.Column("provider_message_id", sa.String(length=255), nullable=True),
        sa.Column("error_message", sa.Text(), nullable=True),
        sa.Column("attempts", sa.Integer(), server_default="0", nullable=False),
        sa.Column("sent_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("delivered_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("read_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.CheckConstraint(
            "status IN ('pending', 'sent', 'delivered', 'read', 'failed')",
            name=op.f("ck_whatsapp_notifications_valid_status"),
        ),
        sa.ForeignKeyConstraint(
            ["appointment_id"],
            ["appointments.id"],
            name=op.f("fk_whatsapp_notifications_appointment_id_appointments"),
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_whatsapp_notifications")),
        sa.UniqueConstraint(
            "appointment_id",
            "message_type",
            name="uq_whatsapp_notifications_appointment_type",
        ),
    )
    op.create_index("idx_whatsapp_notifications_provider_id", "whatsapp_notifications", ["provider_message_id"])
    op.create_index("idx_whatsapp_notifications_status", "whatsapp_notifications", ["status", "attempts"])

    op.create_table(
        "whatsapp_webhook_logs",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("event_type", sa.String(length=50), nullable=False),
        sa.Column("payload", postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column("processed", sa.Boolean(), server_default=sa.false(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint("id", name=op.f("pk_whatsapp_webhook_logs")),
    )
    op.create_index("idx_whatsapp_webhook_logs_created_at", "whatsapp_webhook_logs", ["created_at"])


def downgrade() -> None:
    op.drop_table("whatsapp_webhook_logs")
    op.drop_table("whatsapp_notifications")
    op.drop_table("whatsapp_config")
    op.drop_table("business_hour_overrides")
    op.drop_table("business_hours")
    op.drop_table("appointments")
    op.drop_table("patients")
