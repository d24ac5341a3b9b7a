"""Scheduling API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends

from app.modules.scheduling.schemas import WeeklyAvailabilityRead
from app.modules.scheduling.service import SchedulingService, get_scheduling_service

router = APIRouter(prefix="/scheduling", tags=["scheduling"])


@router.get("/teachers/{teacher_id}/availability", response_model=WeeklyAvailabilityRead)
async def get_teacher_availability(
    teacher_id: UUID,
    service: SchedulingService = Depends(get_scheduling_service),
) -> WeeklyAvailabilityRead:
    """Return resolved weekly availability of a teacher."""
    return await service.describe_availability(teacher_id)
