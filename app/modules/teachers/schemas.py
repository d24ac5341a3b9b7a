"""Teachers schemas."""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator

from app.core.enums import WeekdayEnum
from app.modules.scheduling.availability import DEFAULT_TIME_SLOTS
from app.modules.scheduling.calendar import normalize_weekday
from app.shared.exceptions import InvalidWeekdayException


def _check_slot_labels(slots: list[str]) -> list[str]:
    unknown = [slot for slot in slots if slot not in DEFAULT_TIME_SLOTS]
    if unknown:
        raise ValueError(f"Invalid availability slot(s): {', '.join(unknown)}")
    return slots


class DayAvailability(BaseModel):
    """Slots offered on one weekday."""

    day: WeekdayEnum
    slots: list[str] = Field(default_factory=list)

    @field_validator("day", mode="before")
    @classmethod
    def normalize_day(cls, value: object) -> object:
        """Accept weekday names in any case."""
        try:
            return normalize_weekday(value)
        except InvalidWeekdayException as exc:
            raise ValueError(exc.message) from exc

    @field_validator("slots")
    @classmethod
    def validate_slots(cls, value: list[str]) -> list[str]:
        return _check_slot_labels([slot.strip() for slot in value])


class AvailabilityUpdate(BaseModel):
    """Replace teacher availability.

    Either a per-day structure or a flat slot list applied to weekdays;
    ``None`` clears it so the default template applies again.
    """

    availability: list[DayAvailability] | list[str] | None = None

    @field_validator("availability")
    @classmethod
    def validate_flat_slots(cls, value: object) -> object:
        if isinstance(value, list) and value and all(isinstance(item, str) for item in value):
            return _check_slot_labels([item.strip() for item in value])
        return value

    def to_storage(self) -> Any | None:
        """Return JSON-serializable value for the profile column."""
        if self.availability is None:
            return None
        return [
            item.model_dump(mode="json") if isinstance(item, DayAvailability) else item
            for item in self.availability
        ]


class TeacherProfileCreate(AvailabilityUpdate):
    """Create teacher profile request."""

    display_name: str = Field(min_length=2, max_length=128)
    email: EmailStr
    subject: str = Field(default="", max_length=128)
    bio: str = Field(default="", max_length=500)


class TeacherProfileRead(BaseModel):
    """Teacher profile response schema."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    display_name: str
    email: str
    subject: str
    bio: str
    is_active: bool
    availability: Any | None
    created_at: datetime
    updated_at: datetime


class TeacherStatusUpdate(BaseModel):
    """Activate or deactivate a teacher profile."""

    is_active: bool
