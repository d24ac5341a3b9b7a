from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Any
from uuid import UUID, uuid4

import pytest
from pydantic import ValidationError

from app.core.enums import AvailabilitySourceEnum, RoleEnum, WeekdayEnum
from app.core.security import Actor
from app.modules.scheduling.availability import resolve_availability
from app.modules.scheduling.service import SchedulingService
from app.modules.teachers.schemas import AvailabilityUpdate, TeacherProfileCreate, TeacherStatusUpdate
from app.modules.teachers.service import TeachersService
from app.shared.exceptions import ConflictException, NotFoundException, UnauthorizedException


@dataclass
class FakeProfile:
    display_name: str
    email: str
    subject: str
    bio: str
    availability: Any | None
    is_active: bool = True
    id: UUID = field(default_factory=uuid4)


class FakeTeachersRepository:
    def __init__(self) -> None:
        self._profiles: dict[UUID, FakeProfile] = {}

    async def create_profile(self, **fields: Any) -> FakeProfile:
        profile = FakeProfile(**fields)
        self._profiles[profile.id] = profile
        return profile

    async def get_profile_by_id(self, profile_id: UUID) -> FakeProfile | None:
        return self._profiles.get(profile_id)

    async def get_profile_by_email(self, email: str) -> FakeProfile | None:
        return next((item for item in self._profiles.values() if item.email == email), None)

    async def set_availability(self, profile: FakeProfile, availability: Any | None) -> FakeProfile:
        profile.availability = availability
        return profile

    async def set_active(self, profile: FakeProfile, is_active: bool) -> FakeProfile:
        profile.is_active = is_active
        return profile


def admin_actor() -> Actor:
    return Actor(id=uuid4(), role=RoleEnum.ADMIN)


def make_create_payload(**overrides: Any) -> TeacherProfileCreate:
    values: dict[str, Any] = {
        "display_name": " Maria Garcia ",
        "email": "Maria.Garcia@School.org",
        "subject": "Mathematics",
    }
    values.update(overrides)
    return TeacherProfileCreate(**values)


@pytest.mark.asyncio
async def test_admin_creates_profile_with_lowercased_email() -> None:
    repo = FakeTeachersRepository()
    service = TeachersService(repo)

    profile = await service.create_profile(
        make_create_payload(availability=[{"day": "monday", "slots": ["9:00 AM - 10:00 AM"]}]),
        admin_actor(),
    )

    assert profile.display_name == "Maria Garcia"
    assert profile.email == "maria.garcia@school.org"
    assert profile.availability == [{"day": "Monday", "slots": ["9:00 AM - 10:00 AM"]}]
    assert resolve_availability(profile).source == AvailabilitySourceEnum.EXPLICIT


@pytest.mark.asyncio
async def test_duplicate_email_conflicts() -> None:
    service = TeachersService(FakeTeachersRepository())
    await service.create_profile(make_create_payload(), admin_actor())

    with pytest.raises(ConflictException):
        await service.create_profile(make_create_payload(email="maria.garcia@school.org"), admin_actor())


@pytest.mark.asyncio
async def test_only_admin_creates_profiles() -> None:
    service = TeachersService(FakeTeachersRepository())

    with pytest.raises(UnauthorizedException):
        await service.create_profile(make_create_payload(), Actor(id=uuid4(), role=RoleEnum.TEACHER))


@pytest.mark.asyncio
async def test_teacher_updates_own_availability_only() -> None:
    service = TeachersService(FakeTeachersRepository())
    profile = await service.create_profile(make_create_payload(), admin_actor())
    other = await service.create_profile(make_create_payload(email="other@school.org"), admin_actor())

    updated = await service.update_availability(
        profile.id,
        AvailabilityUpdate(availability=["1:00 PM - 2:00 PM"]),
        Actor(id=profile.id, role=RoleEnum.TEACHER),
    )
    assert updated.availability == ["1:00 PM - 2:00 PM"]
    assert resolve_availability(updated).source == AvailabilitySourceEnum.FLAT

    with pytest.raises(UnauthorizedException):
        await service.update_availability(
            other.id,
            AvailabilityUpdate(availability=None),
            Actor(id=profile.id, role=RoleEnum.TEACHER),
        )


@pytest.mark.asyncio
async def test_unknown_profile_is_not_found() -> None:
    service = TeachersService(FakeTeachersRepository())

    with pytest.raises(NotFoundException):
        await service.get_profile(uuid4())


def test_availability_rejects_unknown_slot_labels() -> None:
    with pytest.raises(ValidationError):
        AvailabilityUpdate(availability=[{"day": "Monday", "slots": ["7:00 AM - 8:00 AM"]}])
    with pytest.raises(ValidationError):
        AvailabilityUpdate(availability=["noon-ish"])


def test_availability_rejects_unknown_weekday() -> None:
    with pytest.raises(ValidationError):
        AvailabilityUpdate(availability=[{"day": "Caturday", "slots": []}])


@pytest.mark.asyncio
async def test_scheduling_view_lists_next_dates_for_default_template() -> None:
    repo = FakeTeachersRepository()
    profile = await TeachersService(repo).create_profile(make_create_payload(), admin_actor())
    service = SchedulingService(repo)

    view = await service.describe_availability(profile.id, reference_date=date(2026, 10, 14))

    assert view.is_default is True
    assert [item.day for item in view.days] == [
        WeekdayEnum.MONDAY,
        WeekdayEnum.TUESDAY,
        WeekdayEnum.WEDNESDAY,
        WeekdayEnum.THURSDAY,
        WeekdayEnum.FRIDAY,
    ]
    assert view.days[2].next_date == date(2026, 10, 21)


@pytest.mark.asyncio
async def test_admin_deactivates_teacher_and_availability_is_hidden() -> None:
    repo = FakeTeachersRepository()
    teachers = TeachersService(repo)
    profile = await teachers.create_profile(make_create_payload(), admin_actor())

    with pytest.raises(UnauthorizedException):
        await teachers.set_status(
            profile.id,
            TeacherStatusUpdate(is_active=False),
            Actor(id=profile.id, role=RoleEnum.TEACHER),
        )

    updated = await teachers.set_status(profile.id, TeacherStatusUpdate(is_active=False), admin_actor())
    assert updated.is_active is False

    with pytest.raises(NotFoundException):
        await SchedulingService(repo).get_weekly_availability(profile.id)

    await teachers.set_status(profile.id, TeacherStatusUpdate(is_active=True), admin_actor())
    assert (await SchedulingService(repo).get_weekly_availability(profile.id)).is_default is True
