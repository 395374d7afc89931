"""
Core Exceptions
================

Custom exceptions for the application following clean architecture principles.

Every exception carries an ``ErrorKind`` tag. The API boundary maps the tag
to a transport status code in one place, so no caller ever has to inspect
an error message to decide what happened.
"""

from enum import Enum
from typing import Optional


class ErrorKind(str, Enum):
    """Error taxonomy shared by all layers."""
    VALIDATION = "VALIDATION"
    AUTH = "AUTH"
    FORBIDDEN = "FORBIDDEN"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    UNEXPECTED = "UNEXPECTED"


class ApplicationException(Exception):
    """Base exception for all application errors."""

    kind: ErrorKind = ErrorKind.UNEXPECTED

    def __init__(self, message: str, details: Optional[dict] = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)


class DomainException(ApplicationException):
    """Base exception for domain logic violations."""


class ValidationException(ApplicationException):
    """Exception for validation errors."""

    kind = ErrorKind.VALIDATION


class AuthenticationException(ApplicationException):
    """Missing, malformed or expired credentials."""

    kind = ErrorKind.AUTH


class PermissionDeniedException(ApplicationException):
    """Authenticated caller lacks the role required for the operation."""

    kind = ErrorKind.FORBIDDEN


class ResourceNotFoundException(ApplicationException):
    """Exception when a requested resource is not found."""

    kind = ErrorKind.NOT_FOUND

    def __init__(
        self,
        resource_type: str,
        resource_id: Optional[str] = None,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        message = f"{resource_type}"
        if resource_id:
            message += f" with id '{resource_id}'"
        message += " not found"
        super().__init__(message, details)


class ConcurrencyConflictException(DomainException):
    """Raised when a write is attempted against a stale version of a record."""

    kind = ErrorKind.CONFLICT

    def __init__(
        self,
        resource_type: str,
        resource_id: str,
        expected_version: int,
        details: Optional[dict] = None
    ):
        self.resource_type = resource_type
        self.resource_id = resource_id
        self.expected_version = expected_version
        super().__init__(
            f"Conflict: This {resource_type.lower()} has been updated by someone else. "
            "Please refresh and try again.",
            details or {"resource_id": resource_id, "expected_version": expected_version}
        )
