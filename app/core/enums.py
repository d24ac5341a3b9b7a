"""Core enums used across modules."""

from enum import StrEnum


class RoleEnum(StrEnum):
    """Caller roles carried in the bearer token.

    Student tokens come from the shared identity provider; they are decoded
    like any other but grant no teacher or admin operation.
    """

    STUDENT = "student"
    TEACHER = "teacher"
    ADMIN = "admin"


class WeekdayEnum(StrEnum):
    """Canonical weekday names, Monday first to match ``date.weekday()``."""

    MONDAY = "Monday"
    TUESDAY = "Tuesday"
    WEDNESDAY = "Wednesday"
    THURSDAY = "Thursday"
    FRIDAY = "Friday"
    SATURDAY = "Saturday"
    SUNDAY = "Sunday"


class AppointmentStatusEnum(StrEnum):
    """Appointment lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    BOOKED = "booked"
    REJECTED = "rejected"
    CANCELLED = "cancelled"
    COMPLETED = "completed"


class AppointmentCreatorEnum(StrEnum):
    """Which side created the appointment."""

    STUDENT = "student"
    TEACHER = "teacher"


class AvailabilitySourceEnum(StrEnum):
    """Where resolved weekly availability came from."""

    EXPLICIT = "explicit"
    FLAT = "flat"
    DEFAULT = "default"


class OutboxStatusEnum(StrEnum):
    """Outbox event status for integration publishing.

    Rows are written as PENDING; the notification worker draining
    ``outbox_events`` moves them to PROCESSED or FAILED.
    """

    PENDING = "pending"
    PROCESSED = "processed"
    FAILED = "failed"
