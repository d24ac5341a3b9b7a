from __future__ import annotations

import pytest

from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum
from app.modules.appointments.state_machine import (
    ACTIVE_STATUSES,
    TERMINAL_STATUSES,
    AppointmentAction,
    can_transition,
    initial_status,
    is_active,
    is_terminal,
    next_status,
)
from app.shared.exceptions import InvalidTransitionException


def test_initial_status_depends_on_creator() -> None:
    assert initial_status(AppointmentCreatorEnum.STUDENT) == AppointmentStatusEnum.PENDING
    assert initial_status(AppointmentCreatorEnum.TEACHER) == AppointmentStatusEnum.BOOKED


@pytest.mark.parametrize(
    ("current", "action", "expected"),
    [
        (AppointmentStatusEnum.PENDING, AppointmentAction.ACCEPT, AppointmentStatusEnum.CONFIRMED),
        (AppointmentStatusEnum.PENDING, AppointmentAction.REJECT, AppointmentStatusEnum.REJECTED),
        (AppointmentStatusEnum.PENDING, AppointmentAction.CANCEL, AppointmentStatusEnum.CANCELLED),
        (AppointmentStatusEnum.CONFIRMED, AppointmentAction.COMPLETE, AppointmentStatusEnum.COMPLETED),
        (AppointmentStatusEnum.CONFIRMED, AppointmentAction.CANCEL, AppointmentStatusEnum.CANCELLED),
        (AppointmentStatusEnum.BOOKED, AppointmentAction.COMPLETE, AppointmentStatusEnum.COMPLETED),
        (AppointmentStatusEnum.BOOKED, AppointmentAction.CANCEL, AppointmentStatusEnum.CANCELLED),
    ],
)
def test_allowed_transitions(
    current: AppointmentStatusEnum,
    action: AppointmentAction,
    expected: AppointmentStatusEnum,
) -> None:
    assert can_transition(current, action) is True
    assert next_status(current, action) == expected


@pytest.mark.parametrize("current", sorted(TERMINAL_STATUSES))
@pytest.mark.parametrize("action", list(AppointmentAction))
def test_terminal_statuses_allow_no_action(
    current: AppointmentStatusEnum,
    action: AppointmentAction,
) -> None:
    assert can_transition(current, action) is False
    with pytest.raises(InvalidTransitionException) as exc:
        next_status(current, action)
    assert exc.value.current_status == current


def test_booked_cannot_be_accepted_or_rejected() -> None:
    with pytest.raises(InvalidTransitionException) as exc:
        next_status(AppointmentStatusEnum.BOOKED, AppointmentAction.ACCEPT)
    assert exc.value.attempted_status == AppointmentStatusEnum.CONFIRMED

    with pytest.raises(InvalidTransitionException):
        next_status(AppointmentStatusEnum.BOOKED, AppointmentAction.REJECT)


def test_pending_cannot_be_completed() -> None:
    with pytest.raises(InvalidTransitionException) as exc:
        next_status(AppointmentStatusEnum.PENDING, AppointmentAction.COMPLETE)
    assert exc.value.details() == {"current_status": "pending", "attempted_status": "completed"}


def test_active_and_terminal_statuses_partition_all_statuses() -> None:
    assert ACTIVE_STATUSES | TERMINAL_STATUSES == set(AppointmentStatusEnum)
    assert not ACTIVE_STATUSES & TERMINAL_STATUSES
    assert is_active(AppointmentStatusEnum.BOOKED)
    assert is_terminal(AppointmentStatusEnum.COMPLETED)
    assert not is_terminal(AppointmentStatusEnum.CONFIRMED)
