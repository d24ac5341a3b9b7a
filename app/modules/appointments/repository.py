"""Appointment repository layer."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any
from uuid import UUID

from sqlalchemy import Select, func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum
from app.modules.appointments.models import ACTIVE_SLOT_INDEX_NAME, Appointment
from app.modules.appointments.state_machine import ACTIVE_STATUSES
from app.shared.utils import utc_now


def _is_active_slot_violation(exc: IntegrityError) -> bool:
    orig = getattr(exc, "orig", None)
    # asyncpg errors arrive wrapped by the SQLAlchemy adapter.
    driver_error = getattr(orig, "__cause__", None) or orig
    constraint_name = getattr(driver_error, "constraint_name", None)
    if constraint_name:
        return constraint_name == ACTIVE_SLOT_INDEX_NAME
    return ACTIVE_SLOT_INDEX_NAME in str(orig)


class AppointmentRepository:
    """DB operations for appointments domain."""

    def __init__(self, session: AsyncSession) -> None:
        self.session = session

    async def find_active_for_slot(
        self,
        teacher_id: UUID,
        appointment_date: date,
        time_slot: str,
    ) -> Appointment | None:
        stmt = select(Appointment).where(
            Appointment.teacher_id == teacher_id,
            Appointment.date == appointment_date,
            Appointment.time_slot == time_slot,
            Appointment.status.in_(ACTIVE_STATUSES),
        )
        return await self.session.scalar(stmt)

    async def create_appointment(self, **fields: Any) -> Appointment | None:
        """Insert appointment; return None if an active one already holds the slot."""
        appointment = Appointment(**fields)
        try:
            async with self.session.begin_nested():
                self.session.add(appointment)
                await self.session.flush()
        except IntegrityError as exc:
            if _is_active_slot_violation(exc):
                return None
            raise
        return appointment

    async def get_appointment_by_id(self, appointment_id: UUID) -> Appointment | None:
        stmt = select(Appointment).where(Appointment.id == appointment_id)
        return await self.session.scalar(stmt)

    async def transition_status(
        self,
        appointment_id: UUID,
        expected_status: AppointmentStatusEnum,
        new_status: AppointmentStatusEnum,
        **changes: Any,
    ) -> Appointment | None:
        """Compare-and-swap status; return None if it no longer matches ``expected_status``."""
        stmt = (
            update(Appointment)
            .where(Appointment.id == appointment_id, Appointment.status == expected_status)
            .values(status=new_status, updated_at=utc_now(), **changes)
            .returning(Appointment)
            .execution_options(populate_existing=True)
        )
        return (await self.session.scalars(stmt)).one_or_none()

    def _filtered(
        self,
        teacher_id: UUID | None,
        status: AppointmentStatusEnum | None,
        created_by: AppointmentCreatorEnum | None,
    ) -> Select[tuple[Appointment]]:
        stmt: Select[tuple[Appointment]] = select(Appointment)
        if teacher_id is not None:
            stmt = stmt.where(Appointment.teacher_id == teacher_id)
        if status is not None:
            stmt = stmt.where(Appointment.status == status)
        if created_by is not None:
            stmt = stmt.where(Appointment.created_by == created_by)
        return stmt

    async def list_appointments(
        self,
        *,
        teacher_id: UUID | None = None,
        status: AppointmentStatusEnum | None = None,
        created_by: AppointmentCreatorEnum | None = None,
        order_by_date: bool = False,
        limit: int,
        offset: int,
    ) -> tuple[list[Appointment], int]:
        base_stmt = self._filtered(teacher_id, status, created_by)
        count_stmt = select(func.count()).select_from(base_stmt.subquery())
        total = int((await self.session.scalar(count_stmt)) or 0)

        if order_by_date:
            ordering = (Appointment.date.asc(), Appointment.time_slot.asc())
        else:
            ordering = (Appointment.created_at.desc(),)
        stmt = base_stmt.order_by(*ordering).limit(limit).offset(offset)
        items = (await self.session.scalars(stmt)).all()
        return items, total

    async def count_by_creator_and_status(
        self,
        teacher_id: UUID | None,
    ) -> dict[tuple[AppointmentCreatorEnum, AppointmentStatusEnum], int]:
        stmt = select(Appointment.created_by, Appointment.status, func.count()).group_by(
            Appointment.created_by,
            Appointment.status,
        )
        if teacher_id is not None:
            stmt = stmt.where(Appointment.teacher_id == teacher_id)
        rows = (await self.session.execute(stmt)).all()
        return {(created_by, status): int(count) for created_by, status, count in rows}

    async def count_created_since(self, teacher_id: UUID | None, since: datetime) -> int:
        stmt = select(func.count()).where(Appointment.created_at >= since)
        if teacher_id is not None:
            stmt = stmt.where(Appointment.teacher_id == teacher_id)
        return int((await self.session.scalar(stmt)) or 0)

    async def count_scheduled_between(
        self,
        teacher_id: UUID | None,
        start: date,
        end: date,
        statuses: frozenset[AppointmentStatusEnum],
    ) -> int:
        stmt = select(func.count()).where(
            Appointment.date >= start,
            Appointment.date <= end,
            Appointment.status.in_(statuses),
        )
        if teacher_id is not None:
            stmt = stmt.where(Appointment.teacher_id == teacher_id)
        return int((await self.session.scalar(stmt)) or 0)
