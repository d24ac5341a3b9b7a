from __future__ import annotations

from contextlib import asynccontextmanager
from datetime import date
from uuid import uuid4

import pytest
from sqlalchemy.exc import IntegrityError

from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum, WeekdayEnum
from app.modules.appointments.models import ACTIVE_SLOT_INDEX_NAME
from app.modules.appointments.repository import AppointmentRepository, _is_active_slot_violation


class DriverUniqueViolation(Exception):
    def __init__(self, message: str, constraint_name: str | None = None) -> None:
        super().__init__(message)
        self.constraint_name = constraint_name


def integrity_error(constraint_name: str | None, message: str = "duplicate key value") -> IntegrityError:
    adapted = Exception(f"<class 'asyncpg.exceptions.UniqueViolationError'>: {message}")
    adapted.__cause__ = DriverUniqueViolation(message, constraint_name)
    return IntegrityError("INSERT INTO appointments", {}, adapted)


class FakeSession:
    def __init__(self, flush_error: Exception | None = None) -> None:
        self.flush_error = flush_error
        self.added: list[object] = []
        self.rolled_back_savepoints = 0

    @asynccontextmanager
    async def _savepoint(self):
        try:
            yield
        except IntegrityError:
            self.rolled_back_savepoints += 1
            raise

    def begin_nested(self):
        return self._savepoint()

    def add(self, instance: object) -> None:
        self.added.append(instance)

    async def flush(self) -> None:
        if self.flush_error is not None:
            raise self.flush_error


def appointment_fields() -> dict:
    return {
        "teacher_id": uuid4(),
        "weekday": WeekdayEnum.MONDAY,
        "time_slot": "9:00 AM - 10:00 AM",
        "date": date(2026, 10, 19),
        "student_name": "Ana Lopez",
        "student_email": "ana@school.org",
        "created_by": AppointmentCreatorEnum.STUDENT,
        "status": AppointmentStatusEnum.PENDING,
    }


def test_active_slot_index_violation_is_recognized_by_constraint_name() -> None:
    assert _is_active_slot_violation(integrity_error(ACTIVE_SLOT_INDEX_NAME)) is True


def test_other_constraint_violation_is_not_a_slot_conflict() -> None:
    error = integrity_error("appointments_teacher_id_fkey", message=f"mentions {ACTIVE_SLOT_INDEX_NAME}")

    assert _is_active_slot_violation(error) is False


def test_missing_constraint_name_falls_back_to_message_text() -> None:
    matching = integrity_error(
        None,
        message=f'duplicate key value violates unique constraint "{ACTIVE_SLOT_INDEX_NAME}"',
    )
    unrelated = integrity_error(None, message='null value in column "student_name"')

    assert _is_active_slot_violation(matching) is True
    assert _is_active_slot_violation(unrelated) is False


def test_plain_driver_error_without_cause_is_inspected_directly() -> None:
    error = IntegrityError("INSERT", {}, DriverUniqueViolation("duplicate", ACTIVE_SLOT_INDEX_NAME))

    assert _is_active_slot_violation(error) is True


@pytest.mark.asyncio
async def test_create_appointment_returns_instance_when_insert_succeeds() -> None:
    session = FakeSession()
    fields = appointment_fields()

    appointment = await AppointmentRepository(session).create_appointment(**fields)

    assert appointment is not None
    assert session.added == [appointment]
    assert appointment.teacher_id == fields["teacher_id"]
    assert session.rolled_back_savepoints == 0


@pytest.mark.asyncio
async def test_create_appointment_returns_none_when_slot_index_rejects_insert() -> None:
    session = FakeSession(flush_error=integrity_error(ACTIVE_SLOT_INDEX_NAME))

    appointment = await AppointmentRepository(session).create_appointment(**appointment_fields())

    assert appointment is None
    assert session.rolled_back_savepoints == 1


@pytest.mark.asyncio
async def test_create_appointment_reraises_other_integrity_errors() -> None:
    error = integrity_error("appointments_teacher_id_fkey")
    session = FakeSession(flush_error=error)

    with pytest.raises(IntegrityError) as exc:
        await AppointmentRepository(session).create_appointment(**appointment_fields())

    assert exc.value is error
    assert session.rolled_back_savepoints == 1
