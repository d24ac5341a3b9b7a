"""Custom exception hierarchy and handlers."""

from __future__ import annotations

import logging
from dataclasses import asdict, dataclass
from typing import Any
from uuid import UUID

from fastapi import HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

logger = logging.getLogger(__name__)


class AppException(Exception):
    """Base application exception."""

    status_code = 400
    code = "app_error"

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(message)

    def details(self) -> dict[str, Any] | None:
        """Structured payload exposed to callers next to the message."""
        return None


class NotFoundException(AppException):
    """Raised when entity is not found."""

    status_code = 404
    code = "not_found"


class ConflictException(AppException):
    """Raised when an active appointment already holds the requested slot."""

    status_code = 409
    code = "conflict"

    def __init__(self, message: str, existing_appointment_id: UUID | None = None) -> None:
        super().__init__(message)
        self.existing_appointment_id = existing_appointment_id

    def details(self) -> dict[str, Any] | None:
        if self.existing_appointment_id is None:
            return None
        return {"existing_appointment_id": str(self.existing_appointment_id)}


class UnauthorizedException(AppException):
    """Raised when user has no rights for operation."""

    status_code = 403
    code = "forbidden"


class BusinessRuleException(AppException):
    """Raised when business rule validation fails."""

    status_code = 422
    code = "business_rule_violation"


@dataclass(frozen=True, slots=True)
class FieldViolation:
    """Single field-level validation failure."""

    field: str
    message: str


class ValidationException(BusinessRuleException):
    """Raised with every field violation found in a request."""

    code = "validation_error"

    def __init__(self, violations: list[FieldViolation]) -> None:
        self.violations = list(violations)
        summary = "; ".join(f"{item.field}: {item.message}" for item in self.violations)
        super().__init__(f"Validation failed: {summary}")

    def details(self) -> dict[str, Any] | None:
        return {"violations": [asdict(item) for item in self.violations]}


class InvalidWeekdayException(BusinessRuleException):
    """Raised when a weekday name is not one of the seven canonical names."""

    code = "invalid_weekday"

    def __init__(self, weekday: object) -> None:
        self.weekday = weekday
        super().__init__(f"Invalid weekday: {weekday!r}")


class SlotNotAvailableException(BusinessRuleException):
    """Raised when a teacher does not offer the slot on the requested weekday."""

    code = "slot_not_available"

    def __init__(self, weekday: str, time_slot: str) -> None:
        self.weekday = weekday
        self.time_slot = time_slot
        super().__init__(f"Time slot '{time_slot}' is not available on {weekday}")

    def details(self) -> dict[str, Any] | None:
        return {"weekday": self.weekday, "time_slot": self.time_slot}


class InvalidTransitionException(AppException):
    """Raised on an illegal appointment status change."""

    status_code = 409
    code = "invalid_transition"

    def __init__(self, current_status: str, attempted_status: str) -> None:
        self.current_status = current_status
        self.attempted_status = attempted_status
        super().__init__(
            f"Cannot move appointment from '{current_status}' to '{attempted_status}'",
        )

    def details(self) -> dict[str, Any] | None:
        return {
            "current_status": str(self.current_status),
            "attempted_status": str(self.attempted_status),
        }


async def app_exception_handler(_: Request, exc: AppException) -> JSONResponse:
    """Handle custom domain exceptions."""
    error: dict[str, Any] = {"code": exc.code, "message": exc.message}
    details = exc.details()
    if details is not None:
        error["details"] = details
    return JSONResponse(status_code=exc.status_code, content={"error": error})


async def http_exception_handler(_: Request, exc: HTTPException) -> JSONResponse:
    """Handle FastAPI HTTP exceptions in unified shape."""
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": {"code": "http_error", "message": str(exc.detail)}},
    )


async def request_validation_exception_handler(_: Request, exc: RequestValidationError) -> JSONResponse:
    """Render request body and query parsing failures as field violations."""
    violations = [
        {
            "field": ".".join(str(part) for part in error["loc"] if part not in ("body", "query", "path")),
            "message": error["msg"],
        }
        for error in exc.errors()
    ]
    return JSONResponse(
        status_code=422,
        content={
            "error": {
                "code": ValidationException.code,
                "message": "Request validation failed",
                "details": {"violations": violations},
            },
        },
    )


async def unhandled_exception_handler(_: Request, exc: Exception) -> JSONResponse:
    """Handle unexpected exceptions."""
    logger.exception("Unhandled error: %s", exc)
    return JSONResponse(
        status_code=500,
        content={"error": {"code": "internal_error", "message": "Internal server error"}},
    )


def register_exception_handlers(app) -> None:
    """Register global exception handlers."""
    app.add_exception_handler(AppException, app_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, request_validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
