"""Normalization of teacher weekly availability into one canonical shape."""

from __future__ import annotations

import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

from app.core.enums import AvailabilitySourceEnum, WeekdayEnum
from app.modules.scheduling.calendar import BUSINESS_WEEKDAYS, normalize_weekday
from app.shared.exceptions import InvalidWeekdayException

# Slot vocabulary accepted when a teacher configures availability.
DEFAULT_TIME_SLOTS: tuple[str, ...] = (
    "9:00 AM - 10:00 AM",
    "10:00 AM - 11:00 AM",
    "11:00 AM - 12:00 PM",
    "12:00 PM - 1:00 PM",
    "1:00 PM - 2:00 PM",
    "2:00 PM - 3:00 PM",
    "3:00 PM - 4:00 PM",
    "4:00 PM - 5:00 PM",
    "5:00 PM - 6:00 PM",
)

# Offered on every business weekday to teachers with nothing configured.
DEFAULT_TEMPLATE_SLOTS: tuple[str, ...] = (
    "9:00 AM - 10:00 AM",
    "10:00 AM - 11:00 AM",
    "11:00 AM - 12:00 PM",
    "1:00 PM - 2:00 PM",
    "2:00 PM - 3:00 PM",
    "3:00 PM - 4:00 PM",
    "4:00 PM - 5:00 PM",
)


# A clock time such as "9:00" or "9 AM"; meridiem markers are upper case.
_SLOT_TIME_PATTERN = re.compile(r"\b\d{1,2}(?::\d{2}\s*(?:AM|PM)?|\s*(?:AM|PM))\b")


@dataclass(frozen=True, slots=True)
class WeeklyAvailability:
    """Ordered weekday to slot labels mapping for one teacher."""

    days: tuple[tuple[WeekdayEnum, tuple[str, ...]], ...]
    source: AvailabilitySourceEnum = field(default=AvailabilitySourceEnum.EXPLICIT)

    @property
    def is_default(self) -> bool:
        """True when the teacher configured nothing and the template was used."""
        return self.source == AvailabilitySourceEnum.DEFAULT

    @property
    def weekdays(self) -> tuple[WeekdayEnum, ...]:
        return tuple(weekday for weekday, _ in self.days)

    def slots_for(self, weekday: WeekdayEnum) -> tuple[str, ...]:
        for day, slots in self.days:
            if day == weekday:
                return slots
        return ()

    def offers(self, weekday: WeekdayEnum, time_slot: str) -> bool:
        return time_slot in self.slots_for(weekday)

    def as_dict(self) -> dict[str, list[str]]:
        return {str(weekday): list(slots) for weekday, slots in self.days}


def default_weekly_availability() -> WeeklyAvailability:
    """Return the system-wide fallback template."""
    return WeeklyAvailability(
        days=tuple((weekday, DEFAULT_TEMPLATE_SLOTS) for weekday in BUSINESS_WEEKDAYS),
        source=AvailabilitySourceEnum.DEFAULT,
    )


def _clean_slots(raw_slots: Any) -> tuple[str, ...]:
    if isinstance(raw_slots, str) or not isinstance(raw_slots, Iterable):
        return ()
    cleaned: list[str] = []
    for slot in raw_slots:
        if not isinstance(slot, str):
            continue
        label = slot.strip()
        if label and label not in cleaned:
            cleaned.append(label)
    return tuple(cleaned)


def _is_slot_label(value: Any) -> bool:
    return isinstance(value, str) and _SLOT_TIME_PATTERN.search(value) is not None


def _day_entries(raw: Any) -> list[tuple[Any, Any]]:
    """Extract ``(day, slots)`` pairs from either per-day shape."""
    if isinstance(raw, Mapping):
        return list(raw.items())
    if isinstance(raw, str) or not isinstance(raw, Iterable):
        return []
    return [
        (item.get("day"), item.get("slots"))
        for item in raw
        if isinstance(item, Mapping)
    ]


def _resolve_per_day(raw: Any) -> WeeklyAvailability | None:
    days: dict[WeekdayEnum, tuple[str, ...]] = {}
    for day, slots in _day_entries(raw):
        try:
            weekday = normalize_weekday(day)
        except InvalidWeekdayException:
            continue
        days.setdefault(weekday, _clean_slots(slots))
    if not days:
        return None
    return WeeklyAvailability(days=tuple(days.items()), source=AvailabilitySourceEnum.EXPLICIT)


def _resolve_flat(raw: Any) -> WeeklyAvailability | None:
    if isinstance(raw, (str, Mapping)) or not isinstance(raw, Iterable):
        return None
    slots = _clean_slots(item for item in raw if _is_slot_label(item))
    if not slots:
        return None
    return WeeklyAvailability(
        days=tuple((weekday, slots) for weekday in BUSINESS_WEEKDAYS),
        source=AvailabilitySourceEnum.FLAT,
    )


def _raw_availability(teacher_record: Any) -> Any:
    if teacher_record is None:
        return None
    if isinstance(teacher_record, Mapping):
        return teacher_record.get("availability")
    return getattr(teacher_record, "availability", None)


def resolve_availability(teacher_record: Any) -> WeeklyAvailability:
    """Resolve whatever a teacher record stores into ``WeeklyAvailability``.

    Accepts a per-day structure (``[{"day": ..., "slots": [...]}]`` or
    ``{"Monday": [...]}``), a flat list of slot labels applied to Monday
    through Friday, or nothing at all, in which case the default template is
    returned. Never raises.
    """
    raw = _raw_availability(teacher_record)
    if raw is None:
        return default_weekly_availability()

    resolved = _resolve_per_day(raw) or _resolve_flat(raw)
    if resolved is None:
        return default_weekly_availability()
    return resolved
