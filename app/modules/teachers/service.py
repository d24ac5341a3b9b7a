"""Teachers business logic layer."""

from __future__ import annotations

import logging
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.core.security import Actor
from app.modules.teachers.models import TeacherProfile
from app.modules.teachers.repository import TeachersRepository
from app.modules.teachers.schemas import AvailabilityUpdate, TeacherProfileCreate, TeacherStatusUpdate
from app.shared.exceptions import ConflictException, NotFoundException, UnauthorizedException

logger = logging.getLogger(__name__)


class TeachersService:
    """Teachers domain service."""

    def __init__(self, repository: TeachersRepository) -> None:
        self.repository = repository

    async def create_profile(self, payload: TeacherProfileCreate, actor: Actor) -> TeacherProfile:
        """Create teacher profile (admin only)."""
        if actor.role != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can create teacher profiles")

        email = payload.email.strip().lower()
        existing = await self.repository.get_profile_by_email(email)
        if existing is not None:
            raise ConflictException("Teacher with this email already exists")

        profile = await self.repository.create_profile(
            display_name=payload.display_name.strip(),
            email=email,
            subject=payload.subject.strip(),
            bio=payload.bio.strip(),
            availability=payload.to_storage(),
        )
        logger.info("Teacher profile created: %s", profile.id)
        return profile

    async def get_profile(self, profile_id: UUID) -> TeacherProfile:
        """Return teacher profile or raise NotFound."""
        profile = await self.repository.get_profile_by_id(profile_id)
        if profile is None:
            raise NotFoundException("Teacher not found")
        return profile

    async def update_availability(
        self,
        profile_id: UUID,
        payload: AvailabilityUpdate,
        actor: Actor,
    ) -> TeacherProfile:
        """Replace weekly availability of a teacher."""
        profile = await self.get_profile(profile_id)
        if actor.role != RoleEnum.ADMIN and actor.id != profile.id:
            raise UnauthorizedException("Only admin or the teacher can update availability")
        return await self.repository.set_availability(profile, payload.to_storage())

    async def set_status(
        self,
        profile_id: UUID,
        payload: TeacherStatusUpdate,
        actor: Actor,
    ) -> TeacherProfile:
        """Activate or deactivate a teacher (admin only).

        Inactive teachers drop out of listings and take no new bookings;
        their existing appointments are left as they are.
        """
        if actor.role != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can change teacher status")
        profile = await self.get_profile(profile_id)
        profile = await self.repository.set_active(profile, payload.is_active)
        logger.info("Teacher profile %s is_active=%s", profile.id, profile.is_active)
        return profile

    async def list_profiles(self, limit: int, offset: int) -> tuple[list[TeacherProfile], int]:
        """List active teacher profiles."""
        return await self.repository.list_profiles(limit=limit, offset=offset)


async def get_teachers_service(session: AsyncSession = Depends(get_db_session)) -> TeachersService:
    """Dependency provider for teachers service."""
    return TeachersService(TeachersRepository(session))
