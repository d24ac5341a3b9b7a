"""Appointment schemas."""

from __future__ import annotations

from datetime import date as date_type, datetime
from enum import StrEnum
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum, WeekdayEnum


class AppointmentDecision(StrEnum):
    """Teacher answer to a pending student request."""

    ACCEPT = "accept"
    REJECT = "reject"


class StudentInfo(BaseModel):
    """Student contact block.

    Name and email are optional at the schema level so that the booking
    validator can report every missing field in one response.
    """

    name: str | None = Field(default=None, max_length=128)
    email: str | None = Field(default=None, max_length=255)
    phone: str | None = Field(default=None, max_length=32)
    subject: str | None = Field(default=None, max_length=128)
    message: str | None = Field(default=None, max_length=2000)


class AppointmentCreate(BaseModel):
    """Student appointment request."""

    teacher_id: UUID
    weekday: str
    time_slot: str = Field(max_length=64)
    date: date_type | None = None
    student: StudentInfo | None = None


class TeacherBookingCreate(AppointmentCreate):
    """Direct booking made by a teacher."""

    notes: str | None = Field(default=None, max_length=2000)


class AppointmentRespondRequest(BaseModel):
    """Accept or reject a pending request."""

    decision: AppointmentDecision
    response_message: str | None = Field(default=None, max_length=512)


class AppointmentCancelRequest(BaseModel):
    """Cancel appointment request."""

    reason: str | None = Field(default=None, max_length=512)


class AppointmentRead(BaseModel):
    """Appointment response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    teacher_id: UUID
    weekday: WeekdayEnum
    time_slot: str
    date: date_type
    student_name: str
    student_email: str
    student_phone: str | None
    student_subject: str | None
    student_message: str | None
    created_by: AppointmentCreatorEnum
    status: AppointmentStatusEnum
    notes: str | None
    response_message: str | None
    responded_at: datetime | None
    cancellation_reason: str | None
    cancelled_by: str | None
    cancelled_at: datetime | None
    completed_at: datetime | None
    created_at: datetime
    updated_at: datetime


class AppointmentStatusChangeRead(BaseModel):
    """One recorded status change of an appointment."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    event_type: str
    payload: dict
    occurred_at: datetime


class AppointmentStatsRead(BaseModel):
    """Aggregated appointment counters."""

    total: int
    pending_requests: int
    confirmed: int
    direct_bookings: int
    rejected: int
    cancelled: int
    completed: int
    recent: int
    upcoming: int
