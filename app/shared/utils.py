"""Shared utility functions."""

from __future__ import annotations

from datetime import date, datetime, timezone


def utc_now() -> datetime:
    """Return aware UTC datetime."""
    return datetime.now(timezone.utc)


def utc_today() -> date:
    """Return current calendar date in UTC."""
    return utc_now().date()


def clean_text(value: str | None) -> str | None:
    """Strip surrounding whitespace, mapping blank strings to None."""
    if value is None:
        return None
    stripped = value.strip()
    return stripped or None
