"""Seed idempotent demo data for local/non-production environments."""

from __future__ import annotations

import argparse
import asyncio
from dataclasses import dataclass, field
from typing import Any
from uuid import uuid4

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import SessionLocal, close_engine
from app.core.enums import AppointmentStatusEnum, RoleEnum
from app.core.security import Actor, create_access_token
from app.modules.appointments.models import Appointment
from app.modules.appointments.repository import AppointmentRepository
from app.modules.appointments.schemas import AppointmentCreate, StudentInfo, TeacherBookingCreate
from app.modules.appointments.service import AppointmentService
from app.modules.appointments.state_machine import ACTIVE_STATUSES
from app.modules.audit.repository import AuditRepository
from app.modules.teachers.models import TeacherProfile
from app.modules.teachers.repository import TeachersRepository

DEMO_TEACHERS: tuple[dict[str, Any], ...] = (
    {
        "display_name": "Demo Math Teacher",
        "email": "demo-math@edumeet.dev",
        "subject": "Mathematics",
        "bio": "Algebra and calculus, weekday mornings.",
        "availability": [
            {"day": "Monday", "slots": ["9:00 AM - 10:00 AM", "10:00 AM - 11:00 AM"]},
            {"day": "Wednesday", "slots": ["2:00 PM - 3:00 PM"]},
        ],
    },
    {
        "display_name": "Demo Physics Teacher",
        "email": "demo-physics@edumeet.dev",
        "subject": "Physics",
        "bio": "Mechanics and optics.",
        "availability": ["1:00 PM - 2:00 PM", "3:00 PM - 4:00 PM"],
    },
    {
        "display_name": "Demo History Teacher",
        "email": "demo-history@edumeet.dev",
        "subject": "History",
        "bio": "No availability configured; uses the default template.",
        "availability": None,
    },
)

DEMO_STUDENT = StudentInfo(
    name="Demo Student",
    email="demo-student@edumeet.dev",
    subject="Algebra",
    message="Looking forward to the session.",
)


@dataclass(slots=True)
class SeedStats:
    teachers_created: int = 0
    teachers_updated: int = 0
    appointments_created: int = 0
    teacher_ids: list[str] = field(default_factory=list)


async def _ensure_teacher(session: AsyncSession, values: dict[str, Any]) -> tuple[TeacherProfile, bool]:
    repository = TeachersRepository(session)
    profile = await repository.get_profile_by_email(values["email"])
    if profile is None:
        profile = await repository.create_profile(**values)
        return profile, True

    profile.display_name = values["display_name"]
    profile.subject = values["subject"]
    profile.bio = values["bio"]
    profile.is_active = True
    await repository.set_availability(profile, values["availability"])
    return profile, False


async def _has_active_appointments(session: AsyncSession, teacher: TeacherProfile) -> bool:
    existing = await session.scalar(
        select(Appointment.id).where(
            Appointment.teacher_id == teacher.id,
            Appointment.status.in_(ACTIVE_STATUSES),
        ),
    )
    return existing is not None


async def _ensure_demo_appointments(session: AsyncSession, teacher: TeacherProfile) -> int:
    if await _has_active_appointments(session, teacher):
        return 0

    service = AppointmentService(
        appointment_repository=AppointmentRepository(session),
        teachers_repository=TeachersRepository(session),
        audit_repository=AuditRepository(session),
    )
    await service.request_appointment(
        AppointmentCreate(
            teacher_id=teacher.id,
            weekday="Monday",
            time_slot="9:00 AM - 10:00 AM",
            student=DEMO_STUDENT,
        ),
    )
    booked = await service.teacher_book_appointment(
        TeacherBookingCreate(
            teacher_id=teacher.id,
            weekday="Wednesday",
            time_slot="2:00 PM - 3:00 PM",
            student=DEMO_STUDENT,
            notes="Bring last week's worksheet.",
        ),
        Actor(id=teacher.id, role=RoleEnum.TEACHER),
    )
    if booked.status != AppointmentStatusEnum.BOOKED:
        raise RuntimeError(f"Unexpected status for demo booking: {booked.status}")
    return 2


async def _run_seed(*, allow_production: bool) -> SeedStats:
    settings = get_settings()
    app_env = settings.app_env.strip().lower()
    if app_env in {"production", "prod"} and not allow_production:
        raise RuntimeError(
            "Refusing to seed demo data in production. "
            "Re-run with --allow-production only if you are absolutely sure.",
        )

    stats = SeedStats()

    async with SessionLocal() as session:
        try:
            teachers: list[TeacherProfile] = []
            for values in DEMO_TEACHERS:
                teacher, created = await _ensure_teacher(session, values)
                teachers.append(teacher)
                if created:
                    stats.teachers_created += 1
                else:
                    stats.teachers_updated += 1
                stats.teacher_ids.append(str(teacher.id))

            stats.appointments_created = await _ensure_demo_appointments(session, teachers[0])

            await session.commit()
        except Exception:
            await session.rollback()
            raise

    return stats


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description=(
            "Seed idempotent demo data for EduMeet (teacher profiles with every "
            "availability shape, one pending request and one direct booking)."
        ),
    )
    parser.add_argument(
        "--allow-production",
        action="store_true",
        help="Allow seeding even when APP_ENV is production/prod.",
    )
    return parser


def _print_summary(stats: SeedStats) -> None:
    print("Demo seed completed.")
    print(f"- Teachers created: {stats.teachers_created}")
    print(f"- Teachers updated: {stats.teachers_updated}")
    print(f"- Appointments created: {stats.appointments_created}")
    print("")
    print("Demo bearer tokens (non-production only):")
    print(f"- admin:   {create_access_token(str(uuid4()), RoleEnum.ADMIN)}")
    for teacher_id in stats.teacher_ids:
        print(f"- teacher {teacher_id}: {create_access_token(teacher_id, RoleEnum.TEACHER)}")


def main() -> int:
    parser = _build_parser()
    args = parser.parse_args()

    try:
        stats = asyncio.run(_run_seed(allow_production=args.allow_production))
    except Exception as exc:
        print(f"Demo seed failed: {exc}")
        return 1
    finally:
        asyncio.run(close_engine())

    _print_summary(stats)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
