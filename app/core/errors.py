"""
Central error handling for HR Admin Backend

Services raise the domain exceptions below; the handlers registered in
app.main turn every failure into the standard response envelope
{success, message, code, errors?}.
"""
import logging
from typing import Any, Dict, List, Optional

from fastapi import HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError

logger = logging.getLogger(__name__)


class AppError(Exception):
    """Base class for errors that map to a client-facing status code."""

    status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR
    default_message: str = "Internal server error"

    def __init__(self, message: Optional[str] = None, errors: Optional[Dict[str, List[str]]] = None):
        self.message = message or self.default_message
        self.errors = errors
        super().__init__(self.message)


class Unauthenticated(AppError):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_message = "Unauthorized"


class Forbidden(AppError):
    status_code = status.HTTP_403_FORBIDDEN
    default_message = "You do not have sufficient privileges to perform this action."


class NotFound(AppError):
    status_code = status.HTTP_404_NOT_FOUND
    default_message = "Resource not found"


class ValidationFailed(AppError):
    """Malformed input; carries field-level errors."""

    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Validation errors"

    @classmethod
    def for_field(cls, field: str, message: str) -> "ValidationFailed":
        return cls(errors={field: [message]})


class BusinessRuleViolation(AppError):
    status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
    default_message = "Request violates a business rule"


class DuplicateEntity(BusinessRuleViolation):
    default_message = "Entity already exists"


class EntityInUse(BusinessRuleViolation):
    default_message = "Entity is still referenced"


class PolicyMissing(BusinessRuleViolation):
    default_message = "No policy set for this leave type"


class InsufficientBalance(BusinessRuleViolation):
    default_message = "Insufficient remaining days"


class AlreadyDecided(BusinessRuleViolation):
    default_message = "Already decided"


class LeaveNotPending(BusinessRuleViolation):
    default_message = "Only pending leaves can be edited"


class ApprovedLeaveNotDeletable(BusinessRuleViolation):
    default_message = "Cannot delete approved leave"


def error_body(message: str, code: int, errors: Optional[Any] = None) -> Dict[str, Any]:
    body: Dict[str, Any] = {"success": False, "message": message, "code": code}
    if errors:
        body["errors"] = errors
    return body


async def app_error_handler(request: Request, exc: AppError) -> JSONResponse:
    """Map a domain exception to its status code and envelope."""
    if exc.status_code >= 500:
        logger.error("Application error on %s: %s", request.url.path, exc.message)
    else:
        logger.info("%s on %s: %s", type(exc).__name__, request.url.path, exc.message)
    headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, Unauthenticated) else None
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(exc.message, exc.status_code, exc.errors),
        headers=headers,
    )


async def http_exception_handler(request: Request, exc: HTTPException) -> JSONResponse:
    """
    Handle HTTPException (raised by FastAPI/Starlette itself, e.g. 404 for
    unknown routes or 405) with the same envelope
    """
    message = exc.detail if isinstance(exc.detail, str) else "Request failed"
    return JSONResponse(
        status_code=exc.status_code,
        content=error_body(message, exc.status_code),
        headers=getattr(exc, "headers", None),
    )


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """
    Handle RequestValidationError as field-level errors

    loc is usually ("body", "field") or ("query", "field"); the last element
    names the field. Model-level validators report under "__root__".
    """
    errors: Dict[str, List[str]] = {}
    for error in exc.errors():
        loc = [str(part) for part in error.get("loc", ()) if part not in ("body", "query", "path")]
        field = ".".join(loc) if loc else "__root__"
        message = error.get("msg", "Invalid value")
        if message.startswith("Value error, "):
            message = message[len("Value error, "):]
        errors.setdefault(field, []).append(message)

    logger.info("Validation error on %s: %s", request.url.path, errors)
    return JSONResponse(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        content=error_body("Validation errors", 422, errors),
    )


async def generic_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    """
    Handle unexpected exceptions (storage errors included)

    Does not leak internal error details in production.
    """
    from app.core.config import settings

    logger.error("Unhandled exception on %s: %s", request.url.path, exc, exc_info=True)

    if settings.APP_ENV == "prod" or isinstance(exc, SQLAlchemyError):
        message = "Internal server error"
    else:
        message = str(exc) or "Internal server error"

    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content=error_body(message, 500),
    )
