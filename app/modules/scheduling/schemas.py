"""Scheduling schemas."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from pydantic import BaseModel

from app.core.enums import AvailabilitySourceEnum, WeekdayEnum


class DaySlotsRead(BaseModel):
    """Slots offered on one weekday with its next concrete date."""

    day: WeekdayEnum
    next_date: date
    slots: list[str]


class WeeklyAvailabilityRead(BaseModel):
    """Resolved weekly availability of a teacher."""

    teacher_id: UUID
    source: AvailabilitySourceEnum
    is_default: bool
    days: list[DaySlotsRead]
