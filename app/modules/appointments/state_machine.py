"""Appointment status transitions."""

from __future__ import annotations

from enum import StrEnum

from app.core.enums import AppointmentCreatorEnum, AppointmentStatusEnum
from app.shared.exceptions import InvalidTransitionException


class AppointmentAction(StrEnum):
    """Triggers that move an existing appointment between statuses."""

    ACCEPT = "accept"
    REJECT = "reject"
    COMPLETE = "complete"
    CANCEL = "cancel"


ACTIVE_STATUSES: frozenset[AppointmentStatusEnum] = frozenset(
    {
        AppointmentStatusEnum.PENDING,
        AppointmentStatusEnum.CONFIRMED,
        AppointmentStatusEnum.BOOKED,
    },
)

TERMINAL_STATUSES: frozenset[AppointmentStatusEnum] = frozenset(
    {
        AppointmentStatusEnum.REJECTED,
        AppointmentStatusEnum.CANCELLED,
        AppointmentStatusEnum.COMPLETED,
    },
)

INITIAL_STATUS: dict[AppointmentCreatorEnum, AppointmentStatusEnum] = {
    AppointmentCreatorEnum.STUDENT: AppointmentStatusEnum.PENDING,
    AppointmentCreatorEnum.TEACHER: AppointmentStatusEnum.BOOKED,
}

ACTION_TARGETS: dict[AppointmentAction, AppointmentStatusEnum] = {
    AppointmentAction.ACCEPT: AppointmentStatusEnum.CONFIRMED,
    AppointmentAction.REJECT: AppointmentStatusEnum.REJECTED,
    AppointmentAction.COMPLETE: AppointmentStatusEnum.COMPLETED,
    AppointmentAction.CANCEL: AppointmentStatusEnum.CANCELLED,
}

TRANSITIONS: dict[AppointmentStatusEnum, dict[AppointmentAction, AppointmentStatusEnum]] = {
    AppointmentStatusEnum.PENDING: {
        AppointmentAction.ACCEPT: AppointmentStatusEnum.CONFIRMED,
        AppointmentAction.REJECT: AppointmentStatusEnum.REJECTED,
        AppointmentAction.CANCEL: AppointmentStatusEnum.CANCELLED,
    },
    AppointmentStatusEnum.CONFIRMED: {
        AppointmentAction.COMPLETE: AppointmentStatusEnum.COMPLETED,
        AppointmentAction.CANCEL: AppointmentStatusEnum.CANCELLED,
    },
    AppointmentStatusEnum.BOOKED: {
        AppointmentAction.COMPLETE: AppointmentStatusEnum.COMPLETED,
        AppointmentAction.CANCEL: AppointmentStatusEnum.CANCELLED,
    },
    AppointmentStatusEnum.REJECTED: {},
    AppointmentStatusEnum.CANCELLED: {},
    AppointmentStatusEnum.COMPLETED: {},
}


def initial_status(created_by: AppointmentCreatorEnum) -> AppointmentStatusEnum:
    """Status a freshly created appointment starts in."""
    return INITIAL_STATUS[created_by]


def can_transition(current: AppointmentStatusEnum, action: AppointmentAction) -> bool:
    return action in TRANSITIONS[current]


def next_status(current: AppointmentStatusEnum, action: AppointmentAction) -> AppointmentStatusEnum:
    """Return the status ``action`` leads to, or raise InvalidTransitionException."""
    target = TRANSITIONS[current].get(action)
    if target is None:
        raise InvalidTransitionException(current, ACTION_TARGETS[action])
    return target


def is_active(status: AppointmentStatusEnum) -> bool:
    return status in ACTIVE_STATUSES


def is_terminal(status: AppointmentStatusEnum) -> bool:
    return status in TERMINAL_STATUSES
