"""Checks applied to a proposed booking before it reaches the record store."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date

from email_validator import EmailNotValidError, validate_email

from app.core.enums import WeekdayEnum
from app.modules.appointments.schemas import StudentInfo
from app.modules.scheduling.availability import WeeklyAvailability
from app.modules.scheduling.calendar import next_date_for, normalize_weekday, weekday_of
from app.shared.exceptions import FieldViolation, SlotNotAvailableException, ValidationException
from app.shared.utils import clean_text


@dataclass(frozen=True, slots=True)
class StudentContact:
    """Normalized student value object stored on the appointment."""

    name: str
    email: str
    phone: str | None = None
    subject: str | None = None
    message: str | None = None


@dataclass(frozen=True, slots=True)
class ValidatedBooking:
    """Booking input that passed every check."""

    weekday: WeekdayEnum
    time_slot: str
    date: date
    student: StudentContact


def _resolve_date(
    weekday: WeekdayEnum,
    explicit_date: date | None,
    today: date,
    violations: list[FieldViolation],
) -> date | None:
    if explicit_date is None:
        return next_date_for(weekday, today)

    valid = True
    if explicit_date < today:
        violations.append(FieldViolation("date", "Date must be today or in the future"))
        valid = False
    if weekday_of(explicit_date) != weekday:
        violations.append(
            FieldViolation("date", f"Date {explicit_date.isoformat()} does not fall on {weekday}"),
        )
        valid = False
    return explicit_date if valid else None


def _validate_student(
    student: StudentInfo | None,
    violations: list[FieldViolation],
) -> StudentContact | None:
    if student is None:
        student = StudentInfo()
    name = clean_text(student.name)
    email = clean_text(student.email)

    if name is None:
        violations.append(FieldViolation("student.name", "Student name is required"))
    if email is None:
        violations.append(FieldViolation("student.email", "Student email is required"))
    else:
        try:
            validate_email(email, check_deliverability=False)
        except EmailNotValidError as exc:
            violations.append(FieldViolation("student.email", f"Student email is invalid: {exc}"))
            email = None

    if name is None or email is None:
        return None
    return StudentContact(
        name=name,
        email=email.lower(),
        phone=clean_text(student.phone),
        subject=clean_text(student.subject),
        message=clean_text(student.message),
    )


def validate_booking(
    availability: WeeklyAvailability,
    weekday: str,
    time_slot: str,
    explicit_date: date | None,
    student: StudentInfo | None,
    today: date,
) -> ValidatedBooking:
    """Validate a booking proposal against availability, dates and student data.

    Raises InvalidWeekdayException or SlotNotAvailableException first; date and
    student problems are then collected and raised together as one
    ValidationException.
    """
    canonical_weekday = normalize_weekday(weekday)
    label = time_slot.strip()
    if not label:
        raise ValidationException([FieldViolation("time_slot", "Time slot is required")])
    if not availability.offers(canonical_weekday, label):
        raise SlotNotAvailableException(canonical_weekday, label)

    violations: list[FieldViolation] = []
    booking_date = _resolve_date(canonical_weekday, explicit_date, today, violations)
    contact = _validate_student(student, violations)
    if violations:
        raise ValidationException(violations)

    return ValidatedBooking(
        weekday=canonical_weekday,
        time_slot=label,
        date=booking_date,
        student=contact,
    )
