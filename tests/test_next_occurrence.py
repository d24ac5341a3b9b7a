from __future__ import annotations

from datetime import UTC, date, datetime, timedelta

import pytest

from app.core.enums import WeekdayEnum
from app.modules.scheduling.calendar import next_date_for, normalize_weekday, weekday_of
from app.shared.exceptions import InvalidWeekdayException

# 2026-10-14 is a Wednesday.
WEDNESDAY = date(2026, 10, 14)


def test_same_weekday_rolls_to_next_week() -> None:
    assert next_date_for("Wednesday", WEDNESDAY) == date(2026, 10, 21)


def test_later_weekday_resolves_within_same_week() -> None:
    assert next_date_for("Friday", WEDNESDAY) == date(2026, 10, 16)


def test_earlier_weekday_resolves_to_following_week() -> None:
    assert next_date_for("Monday", WEDNESDAY) == date(2026, 10, 19)


@pytest.mark.parametrize("weekday", list(WeekdayEnum))
def test_result_falls_on_weekday_within_seven_days(weekday: WeekdayEnum) -> None:
    resolved = next_date_for(weekday, WEDNESDAY)

    assert weekday_of(resolved) == weekday
    assert WEDNESDAY < resolved <= WEDNESDAY + timedelta(days=7)


def test_resolution_is_deterministic_for_fixed_reference() -> None:
    assert next_date_for("Sunday", WEDNESDAY) == next_date_for("Sunday", WEDNESDAY)


def test_datetime_reference_uses_its_calendar_date() -> None:
    reference = datetime(2026, 10, 14, 23, 30, tzinfo=UTC)
    assert next_date_for("Thursday", reference) == date(2026, 10, 15)


def test_weekday_names_are_case_insensitive() -> None:
    assert normalize_weekday("  tUeSdAy ") == WeekdayEnum.TUESDAY
    assert next_date_for("saturday", WEDNESDAY) == date(2026, 10, 17)


@pytest.mark.parametrize("value", ["Funday", "", "Mon", None, 3])
def test_unknown_weekday_is_rejected(value: object) -> None:
    with pytest.raises(InvalidWeekdayException):
        next_date_for(value, WEDNESDAY)
