"""Appointments API router."""

from __future__ import annotations

from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum
from app.core.security import get_current_actor
from app.modules.appointments.schemas import (
    AppointmentCancelRequest,
    AppointmentCreate,
    AppointmentRead,
    AppointmentRespondRequest,
    AppointmentStatsRead,
    AppointmentStatusChangeRead,
    TeacherBookingCreate,
)
from app.modules.appointments.service import AppointmentService, get_appointment_service
from app.shared.pagination import Page, build_page, get_pagination_params

router = APIRouter(prefix="/appointments", tags=["appointments"])


@router.post("/request", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
async def request_appointment(
    payload: AppointmentCreate,
    service: AppointmentService = Depends(get_appointment_service),
) -> AppointmentRead:
    """Student requests an appointment (needs teacher approval)."""
    appointment = await service.request_appointment(payload)
    return AppointmentRead.model_validate(appointment)


@router.post("/book", response_model=AppointmentRead, status_code=status.HTTP_201_CREATED)
async def teacher_book_appointment(
    payload: TeacherBookingCreate,
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> AppointmentRead:
    """Teacher books an appointment directly."""
    appointment = await service.teacher_book_appointment(payload, current_actor)
    return AppointmentRead.model_validate(appointment)


@router.get("/stats", response_model=AppointmentStatsRead)
async def get_appointment_stats(
    teacher_id: UUID | None = Query(default=None),
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> AppointmentStatsRead:
    """Appointment counters, globally or for one teacher."""
    return await service.get_stats(current_actor, teacher_id)


@router.get("/teacher/{teacher_id}/pending", response_model=Page[AppointmentRead])
async def list_pending_requests(
    teacher_id: UUID,
    pagination=Depends(get_pagination_params),
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> Page[AppointmentRead]:
    """Pending student requests for a teacher."""
    items, total = await service.list_pending_requests(
        teacher_id,
        current_actor,
        pagination.limit,
        pagination.offset,
    )
    serialized = [AppointmentRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.get("/teacher/{teacher_id}", response_model=Page[AppointmentRead])
async def list_teacher_appointments(
    teacher_id: UUID,
    status_filter: AppointmentStatusEnum | None = Query(default=None, alias="status"),
    created_by: AppointmentCreatorEnum | None = Query(default=None),
    pagination=Depends(get_pagination_params),
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> Page[AppointmentRead]:
    """Teacher agenda sorted by date."""
    items, total = await service.list_teacher_appointments(
        teacher_id,
        current_actor,
        status_filter,
        created_by,
        pagination.limit,
        pagination.offset,
    )
    serialized = [AppointmentRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)


@router.post("/{appointment_id}/respond", response_model=AppointmentRead)
async def respond_to_request(
    appointment_id: UUID,
    payload: AppointmentRespondRequest,
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> AppointmentRead:
    """Accept or reject a pending request."""
    appointment = await service.respond_to_request(appointment_id, payload, current_actor)
    return AppointmentRead.model_validate(appointment)


@router.post("/{appointment_id}/cancel", response_model=AppointmentRead)
async def cancel_appointment(
    appointment_id: UUID,
    payload: AppointmentCancelRequest,
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> AppointmentRead:
    """Cancel an active appointment."""
    appointment = await service.cancel_appointment(appointment_id, payload, current_actor)
    return AppointmentRead.model_validate(appointment)


@router.post("/{appointment_id}/complete", response_model=AppointmentRead)
async def complete_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> AppointmentRead:
    """Mark appointment as completed."""
    appointment = await service.complete_appointment(appointment_id, current_actor)
    return AppointmentRead.model_validate(appointment)


@router.get("/{appointment_id}/history", response_model=list[AppointmentStatusChangeRead])
async def get_appointment_history(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> list[AppointmentStatusChangeRead]:
    """Status changes of an appointment, oldest first."""
    events = await service.get_history(appointment_id, current_actor)
    return [AppointmentStatusChangeRead.model_validate(event) for event in events]


@router.get("/{appointment_id}", response_model=AppointmentRead)
async def get_appointment(
    appointment_id: UUID,
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> AppointmentRead:
    """Get appointment by id."""
    appointment = await service.get_appointment(appointment_id, current_actor)
    return AppointmentRead.model_validate(appointment)


@router.get("", response_model=Page[AppointmentRead])
async def list_appointments(
    teacher_id: UUID | None = Query(default=None),
    status_filter: AppointmentStatusEnum | None = Query(default=None, alias="status"),
    created_by: AppointmentCreatorEnum | None = Query(default=None),
    pagination=Depends(get_pagination_params),
    service: AppointmentService = Depends(get_appointment_service),
    current_actor=Depends(get_current_actor),
) -> Page[AppointmentRead]:
    """List appointments with optional filters."""
    items, total = await service.list_appointments(
        current_actor,
        teacher_id,
        status_filter,
        created_by,
        pagination.limit,
        pagination.offset,
    )
    serialized = [AppointmentRead.model_validate(item) for item in items]
    return build_page(serialized, total, pagination)
