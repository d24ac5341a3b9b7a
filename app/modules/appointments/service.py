"""Appointment business logic layer."""

from __future__ import annotations

import logging
from datetime import timedelta
from uuid import UUID

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import get_db_session
from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum, RoleEnum
from app.core.metrics import APPOINTMENT_CONFLICTS_TOTAL, record_status_change
from app.core.security import Actor
from app.modules.appointments.models import Appointment
from app.modules.appointments.repository import AppointmentRepository
from app.modules.appointments.schemas import (
    AppointmentCancelRequest,
    AppointmentCreate,
    AppointmentDecision,
    AppointmentRespondRequest,
    AppointmentStatsRead,
    TeacherBookingCreate,
)
from app.modules.appointments.state_machine import AppointmentAction, initial_status, next_status
from app.modules.appointments.validation import ValidatedBooking, validate_booking
from app.modules.audit.models import OutboxEvent
from app.modules.audit.repository import AuditRepository
from app.modules.scheduling.availability import resolve_availability
from app.modules.teachers.repository import TeachersRepository
from app.shared.exceptions import (
    ConflictException,
    FieldViolation,
    InvalidTransitionException,
    NotFoundException,
    UnauthorizedException,
    ValidationException,
)
from app.shared.utils import clean_text, utc_now, utc_today

settings = get_settings()
logger = logging.getLogger(__name__)

STATUS_CHANGED_EVENT = "appointment.status_changed"
DEFAULT_ACCEPT_MESSAGE = "Request accepted"

_DECISION_ACTIONS = {
    AppointmentDecision.ACCEPT: AppointmentAction.ACCEPT,
    AppointmentDecision.REJECT: AppointmentAction.REJECT,
}


class AppointmentService:
    """Appointment domain service: creation paths and status transitions."""

    def __init__(
        self,
        appointment_repository: AppointmentRepository,
        teachers_repository: TeachersRepository,
        audit_repository: AuditRepository,
    ) -> None:
        self.appointment_repository = appointment_repository
        self.teachers_repository = teachers_repository
        self.audit_repository = audit_repository

    def _ensure_teacher_access(self, teacher_id: UUID, actor: Actor) -> None:
        if actor.role == RoleEnum.ADMIN:
            return
        if actor.role == RoleEnum.TEACHER and actor.id == teacher_id:
            return
        raise UnauthorizedException("You can only manage your own appointments")

    async def _get_appointment(self, appointment_id: UUID) -> Appointment:
        appointment = await self.appointment_repository.get_appointment_by_id(appointment_id)
        if appointment is None:
            raise NotFoundException("Appointment not found")
        return appointment

    async def _emit_status_changed(
        self,
        appointment: Appointment,
        old_status: AppointmentStatusEnum | None,
    ) -> None:
        """Record status change for notification consumers; delivery is not awaited."""
        await self.audit_repository.create_outbox_event(
            aggregate_type="appointment",
            aggregate_id=str(appointment.id),
            event_type=STATUS_CHANGED_EVENT,
            payload={
                "appointment_id": str(appointment.id),
                "teacher_id": str(appointment.teacher_id),
                "old_status": str(old_status) if old_status is not None else None,
                "new_status": str(appointment.status),
            },
        )
        record_status_change(old_status, appointment.status)

    def _slot_conflict(
        self,
        booking: ValidatedBooking,
        teacher_id: UUID,
        existing_id: UUID | None,
    ) -> ConflictException:
        APPOINTMENT_CONFLICTS_TOTAL.inc()
        logger.warning(
            "Slot conflict for teacher %s on %s %s (existing appointment %s)",
            teacher_id,
            booking.date.isoformat(),
            booking.time_slot,
            existing_id,
        )
        return ConflictException(
            "This time slot is already booked or has a pending request",
            existing_appointment_id=existing_id,
        )

    async def _create(
        self,
        payload: AppointmentCreate,
        created_by: AppointmentCreatorEnum,
        notes: str | None = None,
    ) -> Appointment:
        teacher = await self.teachers_repository.get_profile_by_id(payload.teacher_id)
        if teacher is None or not teacher.is_active:
            raise NotFoundException("Teacher not found")

        booking = validate_booking(
            availability=resolve_availability(teacher),
            weekday=payload.weekday,
            time_slot=payload.time_slot,
            explicit_date=payload.date,
            student=payload.student,
            today=utc_today(),
        )

        existing = await self.appointment_repository.find_active_for_slot(
            teacher.id,
            booking.date,
            booking.time_slot,
        )
        if existing is not None:
            raise self._slot_conflict(booking, teacher.id, existing.id)

        appointment = await self.appointment_repository.create_appointment(
            teacher_id=teacher.id,
            weekday=booking.weekday,
            time_slot=booking.time_slot,
            date=booking.date,
            student_name=booking.student.name,
            student_email=booking.student.email,
            student_phone=booking.student.phone,
            student_subject=booking.student.subject,
            student_message=booking.student.message,
            created_by=created_by,
            status=initial_status(created_by),
            notes=notes,
        )
        if appointment is None:
            # Lost the race against a concurrent creation for the same slot.
            winner = await self.appointment_repository.find_active_for_slot(
                teacher.id,
                booking.date,
                booking.time_slot,
            )
            raise self._slot_conflict(booking, teacher.id, winner.id if winner is not None else None)

        logger.info(
            "Appointment %s created by %s with status %s",
            appointment.id,
            created_by,
            appointment.status,
        )
        await self._emit_status_changed(appointment, None)
        return appointment

    async def _transition(
        self,
        appointment: Appointment,
        action: AppointmentAction,
        **changes,
    ) -> Appointment:
        current = appointment.status
        target = next_status(current, action)
        updated = await self.appointment_repository.transition_status(
            appointment.id,
            current,
            target,
            **changes,
        )
        if updated is None:
            latest = await self.appointment_repository.get_appointment_by_id(appointment.id)
            raise InvalidTransitionException(latest.status if latest is not None else current, target)

        logger.info("Appointment %s moved from %s to %s", updated.id, current, target)
        await self._emit_status_changed(updated, current)
        return updated

    async def request_appointment(self, payload: AppointmentCreate) -> Appointment:
        """Student request; waits in PENDING until the teacher responds."""
        return await self._create(payload, AppointmentCreatorEnum.STUDENT)

    async def teacher_book_appointment(self, payload: TeacherBookingCreate, actor: Actor) -> Appointment:
        """Direct teacher booking; lands in BOOKED without an approval step."""
        self._ensure_teacher_access(payload.teacher_id, actor)
        return await self._create(payload, AppointmentCreatorEnum.TEACHER, notes=clean_text(payload.notes))

    async def respond_to_request(
        self,
        appointment_id: UUID,
        payload: AppointmentRespondRequest,
        actor: Actor,
    ) -> Appointment:
        """Accept or reject a pending student request."""
        appointment = await self._get_appointment(appointment_id)
        self._ensure_teacher_access(appointment.teacher_id, actor)

        action = _DECISION_ACTIONS[payload.decision]
        # Illegal moves are reported before message problems.
        next_status(appointment.status, action)

        message = clean_text(payload.response_message)
        if message is None:
            if action == AppointmentAction.REJECT:
                raise ValidationException(
                    [FieldViolation("response_message", "A response message is required to reject a request")],
                )
            message = DEFAULT_ACCEPT_MESSAGE
        if len(message) > settings.appointment_response_message_max_length:
            raise ValidationException(
                [
                    FieldViolation(
                        "response_message",
                        "Response message cannot exceed "
                        f"{settings.appointment_response_message_max_length} characters",
                    ),
                ],
            )

        return await self._transition(
            appointment,
            action,
            response_message=message,
            responded_at=utc_now(),
        )

    async def cancel_appointment(
        self,
        appointment_id: UUID,
        payload: AppointmentCancelRequest,
        actor: Actor,
    ) -> Appointment:
        """Cancel an active appointment, keeping it as history."""
        appointment = await self._get_appointment(appointment_id)
        self._ensure_teacher_access(appointment.teacher_id, actor)
        return await self._transition(
            appointment,
            AppointmentAction.CANCEL,
            cancellation_reason=clean_text(payload.reason),
            cancelled_by=str(actor.role),
            cancelled_at=utc_now(),
        )

    async def complete_appointment(self, appointment_id: UUID, actor: Actor) -> Appointment:
        """Mark confirmed or booked appointment as held."""
        appointment = await self._get_appointment(appointment_id)
        self._ensure_teacher_access(appointment.teacher_id, actor)
        return await self._transition(appointment, AppointmentAction.COMPLETE, completed_at=utc_now())

    async def get_appointment(self, appointment_id: UUID, actor: Actor) -> Appointment:
        """Read one appointment."""
        appointment = await self._get_appointment(appointment_id)
        self._ensure_teacher_access(appointment.teacher_id, actor)
        return appointment

    async def get_history(self, appointment_id: UUID, actor: Actor) -> list[OutboxEvent]:
        """Return recorded status changes of an appointment, oldest first."""
        appointment = await self.get_appointment(appointment_id, actor)
        return await self.audit_repository.list_events_for_aggregate("appointment", str(appointment.id))

    async def list_appointments(
        self,
        actor: Actor,
        teacher_id: UUID | None,
        status: AppointmentStatusEnum | None,
        created_by: AppointmentCreatorEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Appointment], int]:
        """List appointments; teachers only ever see their own."""
        if actor.role == RoleEnum.TEACHER:
            if teacher_id is not None and teacher_id != actor.id:
                raise UnauthorizedException("You can only view your own appointments")
            teacher_id = actor.id
        elif actor.role != RoleEnum.ADMIN:
            raise UnauthorizedException("Only teachers and admins can list appointments")

        return await self.appointment_repository.list_appointments(
            teacher_id=teacher_id,
            status=status,
            created_by=created_by,
            limit=limit,
            offset=offset,
        )

    async def list_teacher_appointments(
        self,
        teacher_id: UUID,
        actor: Actor,
        status: AppointmentStatusEnum | None,
        created_by: AppointmentCreatorEnum | None,
        limit: int,
        offset: int,
    ) -> tuple[list[Appointment], int]:
        """Teacher agenda ordered by date."""
        self._ensure_teacher_access(teacher_id, actor)
        return await self.appointment_repository.list_appointments(
            teacher_id=teacher_id,
            status=status,
            created_by=created_by,
            order_by_date=True,
            limit=limit,
            offset=offset,
        )

    async def list_pending_requests(
        self,
        teacher_id: UUID,
        actor: Actor,
        limit: int,
        offset: int,
    ) -> tuple[list[Appointment], int]:
        """Student requests still waiting for the teacher's answer."""
        self._ensure_teacher_access(teacher_id, actor)
        return await self.appointment_repository.list_appointments(
            teacher_id=teacher_id,
            status=AppointmentStatusEnum.PENDING,
            created_by=AppointmentCreatorEnum.STUDENT,
            limit=limit,
            offset=offset,
        )

    async def get_stats(self, actor: Actor, teacher_id: UUID | None = None) -> AppointmentStatsRead:
        """Counters per status plus recent and upcoming activity."""
        if teacher_id is None:
            if actor.role != RoleEnum.ADMIN:
                raise UnauthorizedException("Only admin can view global statistics")
        else:
            self._ensure_teacher_access(teacher_id, actor)

        counts = await self.appointment_repository.count_by_creator_and_status(teacher_id)

        def by_status(status: AppointmentStatusEnum) -> int:
            return sum(count for (_, item_status), count in counts.items() if item_status == status)

        window = timedelta(days=settings.appointment_stats_window_days)
        today = utc_today()
        recent = await self.appointment_repository.count_created_since(teacher_id, utc_now() - window)
        upcoming = await self.appointment_repository.count_scheduled_between(
            teacher_id,
            today,
            today + window,
            frozenset({AppointmentStatusEnum.CONFIRMED, AppointmentStatusEnum.BOOKED}),
        )

        return AppointmentStatsRead(
            total=sum(counts.values()),
            pending_requests=counts.get((AppointmentCreatorEnum.STUDENT, AppointmentStatusEnum.PENDING), 0),
            confirmed=by_status(AppointmentStatusEnum.CONFIRMED),
            direct_bookings=counts.get((AppointmentCreatorEnum.TEACHER, AppointmentStatusEnum.BOOKED), 0),
            rejected=by_status(AppointmentStatusEnum.REJECTED),
            cancelled=by_status(AppointmentStatusEnum.CANCELLED),
            completed=by_status(AppointmentStatusEnum.COMPLETED),
            recent=recent,
            upcoming=upcoming,
        )


async def get_appointment_service(session: AsyncSession = Depends(get_db_session)) -> AppointmentService:
    """Dependency provider for appointment service."""
    return AppointmentService(
        appointment_repository=AppointmentRepository(session),
        teachers_repository=TeachersRepository(session),
        audit_repository=AuditRepository(session),
    )
