"""
Base exception classes for application-wide error handling.

Exception Hierarchy:
    BaseApplicationError (base)
    ├── ValidationError - Input validation failures
    └── NotFoundError - Resource not found

Usage:
    from core.exceptions import NotFoundError, ValidationError

    raise ValidationError("limit must be positive", error_code="INVALID_LIMIT")

    try:
        ...
    except BaseApplicationError as e:
        return Response(e.to_dict(), status=400)

Note:
    These exceptions are for domain errors raised inside services.
    DRF handles API-layer exceptions (serialization, authentication, etc.).
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from typing import Any


class BaseApplicationError(Exception):
    """
    Base exception for all application-specific errors.

    Attributes:
        message: Human-readable error description
        error_code: Machine-readable code for client-side handling
        details: Additional error context (field errors, ids, etc.)
    """

    default_error_code: str = "APPLICATION_ERROR"

    def __init__(
        self,
        message: str,
        error_code: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        self.message = message
        self.error_code = error_code or self.default_error_code
        self.details = details or {}
        super().__init__(message)

    def to_dict(self) -> dict[str, Any]:
        """
        Convert exception to dictionary for API response.

        Example:
            {
                "error": "limit must be between 1 and 100",
                "error_code": "INVALID_LIMIT",
                "details": {"limit": 500}
            }
        """
        result: dict[str, Any] = {
            "error": self.message,
            "error_code": self.error_code,
        }
        if self.details:
            result["details"] = self.details
        return result

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"error_code={self.error_code!r}, "
            f"details={self.details!r})"
        )


class ValidationError(BaseApplicationError):
    """
    Raised when service-layer input validation fails.

    Example:
        raise ValidationError(
            "offset must not be negative",
            error_code="INVALID_OFFSET",
            details={"offset": offset},
        )
    """

    default_error_code: str = "VALIDATION_ERROR"


class NotFoundError(BaseApplicationError):
    """
    Raised when a record that an operation depends on does not exist.

    Example:
        student = StudentProfile.objects.filter(id=student_id).first()
        if student is None:
            raise NotFoundError(
                f"Student {student_id} not found",
                error_code="STUDENT_NOT_FOUND",
                details={"student_id": student_id},
            )
    """

    default_error_code: str = "NOT_FOUND"
