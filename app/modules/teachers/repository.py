"""Teachers repository layer."""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.modules.teachers.models import TeacherProfile


class TeachersRepository:
    """DB operations for teachers domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def create_profile(
        self,
        display_name: str,
        email: str,
        subject: str,
        bio: str,
        availability: Any | None,
    ) -> TeacherProfile:
        profile = TeacherProfile(
            display_name=display_name,
            email=email,
            subject=subject,
            bio=bio,
            availability=availability,
        )
        self.session.add(profile)
        await self.session.flush()
        return profile

    async def get_profile_by_id(self, profile_id: UUID) -> TeacherProfile | None:
        stmt = select(TeacherProfile).where(TeacherProfile.id == profile_id)
        return await self.session.scalar(stmt)

    async def get_profile_by_email(self, email: str) -> TeacherProfile | None:
        stmt = select(TeacherProfile).where(TeacherProfile.email == email)
        return await self.session.scalar(stmt)

    async def list_profiles(self, limit: int, offset: int) -> tuple[list[TeacherProfile], int]:
        base_stmt: Select[tuple[TeacherProfile]] = select(TeacherProfile).where(
            TeacherProfile.is_active.is_(True),
        )
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        stmt = base_stmt.order_by(TeacherProfile.display_name.asc()).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def set_availability(self, profile: TeacherProfile, availability: Any | None) -> TeacherProfile:
        profile.availability = availability
        await self.session.flush()
        return profile

    async def set_active(self, profile: TeacherProfile, is_active: bool) -> TeacherProfile:
        profile.is_active = is_active
        await self.session.flush()
        return profile
