from __future__ import annotations

from types import SimpleNamespace

from app.core.enums import AvailabilitySourceEnum, WeekdayEnum
from app.modules.scheduling.availability import (
    DEFAULT_TEMPLATE_SLOTS,
    default_weekly_availability,
    resolve_availability,
)

BUSINESS_DAYS = [
    WeekdayEnum.MONDAY,
    WeekdayEnum.TUESDAY,
    WeekdayEnum.WEDNESDAY,
    WeekdayEnum.THURSDAY,
    WeekdayEnum.FRIDAY,
]


def make_teacher(availability: object) -> SimpleNamespace:
    return SimpleNamespace(availability=availability)


def test_per_day_list_is_used_as_is() -> None:
    resolved = resolve_availability(
        make_teacher(
            [
                {"day": "Monday", "slots": ["9:00 AM - 10:00 AM", "10:00 AM - 11:00 AM"]},
                {"day": "thursday", "slots": ["2:00 PM - 3:00 PM"]},
            ],
        ),
    )

    assert resolved.source == AvailabilitySourceEnum.EXPLICIT
    assert resolved.is_default is False
    assert resolved.weekdays == (WeekdayEnum.MONDAY, WeekdayEnum.THURSDAY)
    assert resolved.slots_for(WeekdayEnum.MONDAY) == ("9:00 AM - 10:00 AM", "10:00 AM - 11:00 AM")
    assert resolved.offers(WeekdayEnum.THURSDAY, "2:00 PM - 3:00 PM")
    assert not resolved.offers(WeekdayEnum.TUESDAY, "9:00 AM - 10:00 AM")


def test_per_day_mapping_is_accepted() -> None:
    resolved = resolve_availability({"availability": {"Friday": ["4:00 PM - 5:00 PM"]}})

    assert resolved.source == AvailabilitySourceEnum.EXPLICIT
    assert resolved.as_dict() == {"Friday": ["4:00 PM - 5:00 PM"]}


def test_invalid_days_are_dropped_and_empty_day_kept() -> None:
    resolved = resolve_availability(
        make_teacher(
            [
                {"day": "Caturday", "slots": ["9:00 AM - 10:00 AM"]},
                {"day": "Tuesday", "slots": []},
            ],
        ),
    )

    assert resolved.source == AvailabilitySourceEnum.EXPLICIT
    assert resolved.weekdays == (WeekdayEnum.TUESDAY,)
    assert resolved.slots_for(WeekdayEnum.TUESDAY) == ()


def test_flat_list_applies_to_business_days_in_given_order() -> None:
    resolved = resolve_availability(
        make_teacher(["3:00 PM - 4:00 PM", "9:00 AM - 10:00 AM", "3:00 PM - 4:00 PM", "whatever"]),
    )

    assert resolved.source == AvailabilitySourceEnum.FLAT
    assert list(resolved.weekdays) == BUSINESS_DAYS
    for weekday in BUSINESS_DAYS:
        assert resolved.slots_for(weekday) == ("3:00 PM - 4:00 PM", "9:00 AM - 10:00 AM")
    assert resolved.slots_for(WeekdayEnum.SATURDAY) == ()


def test_flat_list_of_words_is_not_mistaken_for_slots() -> None:
    for raw in (
        ["Samstag", "Gamma", "Campus", "Spam"],
        ["Monday", "Tuesday"],
        ["am", "pm", "AMPM"],
    ):
        resolved = resolve_availability(make_teacher(raw))

        assert resolved.is_default is True
        assert resolved.source == AvailabilitySourceEnum.DEFAULT


def test_flat_list_accepts_24_hour_and_bare_meridiem_labels() -> None:
    resolved = resolve_availability(make_teacher(["14:00 - 15:00", "9 AM - 10 AM", "Gamma"]))

    assert resolved.source == AvailabilitySourceEnum.FLAT
    assert resolved.slots_for(WeekdayEnum.MONDAY) == ("14:00 - 15:00", "9 AM - 10 AM")


def test_missing_availability_falls_back_to_default_template() -> None:
    resolved = resolve_availability(make_teacher(None))

    assert resolved == default_weekly_availability()
    assert resolved.is_default is True
    assert list(resolved.weekdays) == BUSINESS_DAYS
    assert resolved.slots_for(WeekdayEnum.WEDNESDAY) == DEFAULT_TEMPLATE_SLOTS
    assert "12:00 PM - 1:00 PM" not in DEFAULT_TEMPLATE_SLOTS


def test_unrecognized_shapes_fall_back_to_default_template() -> None:
    for raw in ("Monday 9am", 42, [], [{"day": "Nope"}], {"weekday": "Monday"}):
        assert resolve_availability(make_teacher(raw)).is_default is True


def test_record_without_availability_attribute_uses_default() -> None:
    assert resolve_availability(object()).is_default is True
    assert resolve_availability(None).is_default is True
