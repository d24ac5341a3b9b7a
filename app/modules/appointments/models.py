"""Appointment ORM models."""

from __future__ import annotations

from datetime import date as date_type, datetime
from enum import Enum
from uuid import UUID

from sqlalchemy import Date, DateTime, Enum as SAEnum, ForeignKey, Index, String, Text, text
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin
from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum, WeekdayEnum

ACTIVE_SLOT_INDEX_NAME = "uq_appointments_active_slot"


def _enum_column(enum_cls: type[Enum], name: str) -> SAEnum:
    return SAEnum(
        enum_cls,
        name=name,
        native_enum=False,
        values_callable=lambda members: [member.value for member in members],
    )


class Appointment(BaseModelMixin, Base):
    """Concrete teacher/student appointment."""

    __tablename__ = "appointments"
    __table_args__ = (
        # At most one active appointment per teacher, date and slot.
        Index(
            ACTIVE_SLOT_INDEX_NAME,
            "teacher_id",
            "date",
            "time_slot",
            unique=True,
            postgresql_where=text("status IN ('pending', 'confirmed', 'booked')"),
        ),
        Index("ix_appointments_teacher_id_date", "teacher_id", "date"),
    )

    teacher_id: Mapped[UUID] = mapped_column(
        ForeignKey("teacher_profiles.id", ondelete="RESTRICT"),
        nullable=False,
    )
    weekday: Mapped[WeekdayEnum] = mapped_column(_enum_column(WeekdayEnum, "weekday_enum"), nullable=False)
    time_slot: Mapped[str] = mapped_column(String(64), nullable=False)
    date: Mapped[date_type] = mapped_column(Date, nullable=False)

    student_name: Mapped[str] = mapped_column(String(128), nullable=False)
    student_email: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    student_phone: Mapped[str | None] = mapped_column(String(32), nullable=True)
    student_subject: Mapped[str | None] = mapped_column(String(128), nullable=True)
    student_message: Mapped[str | None] = mapped_column(Text, nullable=True)

    created_by: Mapped[AppointmentCreatorEnum] = mapped_column(
        _enum_column(AppointmentCreatorEnum, "appointment_creator_enum"),
        nullable=False,
    )
    status: Mapped[AppointmentStatusEnum] = mapped_column(
        _enum_column(AppointmentStatusEnum, "appointment_status_enum"),
        nullable=False,
        index=True,
    )
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)

    response_message: Mapped[str | None] = mapped_column(String(512), nullable=True)
    responded_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    cancellation_reason: Mapped[str | None] = mapped_column(String(512), nullable=True)
    cancelled_by: Mapped[str | None] = mapped_column(String(32), nullable=True)
    cancelled_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    completed_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
