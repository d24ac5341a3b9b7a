"""Weekday normalization and next-occurrence resolution."""

from __future__ import annotations

from datetime import date, datetime, timedelta

from app.core.enums import WeekdayEnum
from app.shared.exceptions import InvalidWeekdayException

WEEKDAYS: tuple[WeekdayEnum, ...] = tuple(WeekdayEnum)
BUSINESS_WEEKDAYS: tuple[WeekdayEnum, ...] = WEEKDAYS[:5]

_WEEKDAYS_BY_KEY = {weekday.value.lower(): weekday for weekday in WEEKDAYS}


def normalize_weekday(value: object) -> WeekdayEnum:
    """Map a case-insensitive weekday name to its canonical form."""
    if isinstance(value, WeekdayEnum):
        return value
    if not isinstance(value, str):
        raise InvalidWeekdayException(value)
    weekday = _WEEKDAYS_BY_KEY.get(value.strip().lower())
    if weekday is None:
        raise InvalidWeekdayException(value)
    return weekday


def weekday_of(day: date) -> WeekdayEnum:
    """Return canonical weekday of a calendar date."""
    return WEEKDAYS[day.weekday()]


def next_date_for(weekday: object, reference_date: date | datetime) -> date:
    """Return the next date falling on ``weekday`` strictly after ``reference_date``.

    A reference date already on the requested weekday resolves to the same
    weekday of the following week, never to the reference date itself.
    """
    target = normalize_weekday(weekday)
    if isinstance(reference_date, datetime):
        reference_date = reference_date.date()

    delta = WEEKDAYS.index(target) - reference_date.weekday()
    if delta <= 0:
        delta += 7
    return reference_date + timedelta(days=delta)
