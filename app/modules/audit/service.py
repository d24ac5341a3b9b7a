"""Outbox read access."""

from __future__ import annotations

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import get_db_session
from app.core.enums import RoleEnum
from app.core.security import Actor
from app.modules.audit.models import OutboxEvent
from app.modules.audit.repository import AuditRepository
from app.shared.exceptions import UnauthorizedException


class AuditService:
    """Service exposing pending events to notification consumers."""

    def __init__(self, repository: AuditRepository) -> None:
        self.repository = repository

    async def list_pending_outbox(self, actor: Actor, limit: int = 100) -> list[OutboxEvent]:
        """List events not yet picked up by a consumer (admin only)."""
        if actor.role != RoleEnum.ADMIN:
            raise UnauthorizedException("Only admin can read outbox")
        return await self.repository.list_pending_outbox(limit=limit)


async def get_audit_service(session: AsyncSession = Depends(get_db_session)) -> AuditService:
    """Dependency provider for audit service."""
    return AuditService(AuditRepository(session))
