"""Scheduling business logic layer."""

from __future__ import annotations

from datetime import date
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.modules.scheduling.availability import WeeklyAvailability, resolve_availability
from app.modules.scheduling.calendar import next_date_for
from app.modules.scheduling.schemas import DaySlotsRead, WeeklyAvailabilityRead
from app.modules.teachers.repository import TeachersRepository
from app.shared.exceptions import NotFoundException
from app.shared.utils import utc_today


class SchedulingService:
    """Read-only view of teacher availability."""

    def __init__(self, teachers_repository: TeachersRepository) -> None:
        self.teachers_repository = teachers_repository

    async def get_weekly_availability(self, teacher_id: UUID) -> WeeklyAvailability:
        """Resolve availability of an existing, active teacher."""
        teacher = await self.teachers_repository.get_profile_by_id(teacher_id)
        if teacher is None or not teacher.is_active:
            raise NotFoundException("Teacher not found")
        return resolve_availability(teacher)

    async def describe_availability(
        self,
        teacher_id: UUID,
        reference_date: date | None = None,
    ) -> WeeklyAvailabilityRead:
        """Resolved availability with the next bookable date of every weekday."""
        availability = await self.get_weekly_availability(teacher_id)
        today = reference_date or utc_today()
        return WeeklyAvailabilityRead(
            teacher_id=teacher_id,
            source=availability.source,
            is_default=availability.is_default,
            days=[
                DaySlotsRead(day=weekday, next_date=next_date_for(weekday, today), slots=list(slots))
                for weekday, slots in availability.days
            ],
        )


async def get_scheduling_service(session: AsyncSession = Depends(get_db_session)) -> SchedulingService:
    """Dependency provider for scheduling service."""
    return SchedulingService(TeachersRepository(session))
