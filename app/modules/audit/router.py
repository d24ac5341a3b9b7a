"""Outbox API router."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query

from app.core.security import get_current_actor
from app.modules.audit.schemas import OutboxEventRead
from app.modules.audit.service import AuditService, get_audit_service

router = APIRouter(prefix="/audit", tags=["audit"])


@router.get("/outbox/pending", response_model=list[OutboxEventRead])
async def list_pending_outbox(
    limit: int = Query(default=100, ge=1, le=500),
    service: AuditService = Depends(get_audit_service),
    current_actor=Depends(get_current_actor),
) -> list[OutboxEventRead]:
    """List pending outbox events."""
    items = await service.list_pending_outbox(current_actor, limit=limit)
    return [OutboxEventRead.model_validate(item) for item in items]
