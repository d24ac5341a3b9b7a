"""Teachers API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, status

from app.core.security import get_current_actor
from app.modules.teachers.schemas import (
    AvailabilityUpdate,
    TeacherProfileCreate,
    TeacherProfileRead,
    TeacherStatusUpdate,
)
from app.modules.teachers.service import TeachersService, get_teachers_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/teachers", tags=["teachers"])


@router.post("/profiles", response_model=TeacherProfileRead, status_code=status.HTTP_201_CREATED)
async def create_profile(
    payload: TeacherProfileCreate,
    service: TeachersService = Depends(get_teachers_service),
    current_actor=Depends(get_current_actor),
) -> TeacherProfileRead:
    """Create teacher profile."""
    profile = await service.create_profile(payload, current_actor)
    return TeacherProfileRead.model_validate(profile)


@router.get("/profiles/{profile_id}", response_model=TeacherProfileRead)
async def get_profile(
    profile_id: UUID,
    service: TeachersService = Depends(get_teachers_service),
) -> TeacherProfileRead:
    """Get teacher profile by id."""
    profile = await service.get_profile(profile_id)
    return TeacherProfileRead.model_validate(profile)


@router.put("/profiles/{profile_id}/availability", response_model=TeacherProfileRead)
async def update_availability(
    profile_id: UUID,
    payload: AvailabilityUpdate,
    service: TeachersService = Depends(get_teachers_service),
    current_actor=Depends(get_current_actor),
) -> TeacherProfileRead:
    """Replace teacher weekly availability."""
    profile = await service.update_availability(profile_id, payload, current_actor)
    return TeacherProfileRead.model_validate(profile)


@router.put("/profiles/{profile_id}/status", response_model=TeacherProfileRead)
async def update_status(
    profile_id: UUID,
    payload: TeacherStatusUpdate,
    service: TeachersService = Depends(get_teachers_service),
    current_actor=Depends(get_current_actor),
) -> TeacherProfileRead:
    """Activate or deactivate a teacher profile."""
    profile = await service.set_status(profile_id, payload, current_actor)
    return TeacherProfileRead.model_validate(profile)

@router.get("/profiles", response_model=Page[TeacherProfileRead])
async def list_profiles(
    pagination=Depends(get_pagination_params),
    service: TeachersService = Depends(get_teachers_service),
) -> Page[TeacherProfileRead]:
    """List teacher profiles."""
    items, total = await service.list_profiles(pagination.limit, pagination.offset)
    serialized = [TeacherProfileRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
