"""Teachers ORM models."""

from __future__ import annotations

from typing import Any

from sqlalchemy import Boolean, String, Text
from sqlalchemy.dialects.postgresql import JSONB
from sqlalchemy.orm import Mapped, mapped_column

from app.core.database import Base, BaseModelMixin


class TeacherProfile(BaseModelMixin, Base):
    """Teacher directory entry with raw weekly availability."""

    __tablename__ = "teacher_profiles"

    display_name: Mapped[str] = mapped_column(String(128), nullable=False)
    email: Mapped[str] = mapped_column(String(255), unique=True, nullable=False, index=True)
    subject: Mapped[str] = mapped_column(String(128), default="", nullable=False)
    bio: Mapped[str] = mapped_column(Text, default="", nullable=False)
    is_active: Mapped[bool] = mapped_column(Boolean, default=True, nullable=False)
    # Per-day list/mapping, flat slot list or NULL; resolved by the scheduling module.
    availability: Mapped[Any | None] = mapped_column(JSONB, nullable=True)
