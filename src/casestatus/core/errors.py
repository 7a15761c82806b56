"""Application errors and their JSON response shape.

Collaborators raise these; the access gate and the case resolver turn the
lookup-related ones into Denied / NotFound outcomes, and everything that
reaches a route becomes a JSON error via the exception handlers.
"""

from typing import Any, ClassVar, Optional

from pydantic import BaseModel, Field


class ErrorDetail(BaseModel):
    """Standardized error response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")
    details: Optional[dict[str, Any]] = Field(None, description="Additional context")


class AppError(Exception):
    """Base exception for all app-level errors."""

    default_code: ClassVar[str] = "INTERNAL_ERROR"
    default_status: ClassVar[int] = 500

    def __init__(
        self,
        code: Optional[str] = None,
        message: str = "Internal error",
        status_code: Optional[int] = None,
        details: Optional[dict[str, Any]] = None,
    ):
        self.code = code or self.default_code
        self.message = message
        self.status_code = status_code or self.default_status
        self.details = details or {}
        super().__init__(self.message)

    def to_response(self) -> ErrorDetail:
        return ErrorDetail(
            code=self.code,
            message=self.message,
            details=self.details or None,
        )


class NotFoundError(AppError):
    """A lookup found no matching record. A genuine miss, not a failure."""

    default_code = "NOT_FOUND"
    default_status = 404

    def __init__(self, resource: str, resource_id: str):
        super().__init__(
            message=f"{resource} with ID {resource_id} not found",
            details={"resource": resource, "resource_id": resource_id},
        )


class ConflictError(AppError):
    """Duplicate registration number or a write that clashes with stored data."""

    default_code = "CONFLICT"
    default_status = 409

    def __init__(self, message: str, details: Optional[dict] = None):
        super().__init__(message=message, details=details)


class UnauthenticatedError(AppError):
    """No valid session: missing, expired, or pointing at an inactive user."""

    default_code = "UNAUTHENTICATED"
    default_status = 401

    def __init__(self, message: str = "Not authenticated"):
        super().__init__(message=message)


class CollaboratorError(AppError):
    """A backend (identity store, admin registry, case store, PDF renderer) could not answer."""

    default_code = "COLLABORATOR_ERROR"
    default_status = 503

    def __init__(self, collaborator: str, message: str = "Backend unavailable"):
        super().__init__(message=message, details={"collaborator": collaborator})
        self.collaborator = collaborator
