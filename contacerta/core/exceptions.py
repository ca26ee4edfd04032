"""
Centralized Exception Handling Module
=====================================

Defines custom exception classes for the application.

Two families live here:
- ContaCertaException and its subclasses, raised by the HTTP surface and
  the organization session core.
- BackendError, the single error type raised by the backend collaborator.
  Services convert it into a ServiceResult at the operation boundary.

Usage:
    raise AuthenticationError("Invalid token")
    raise BackendError("23505", "duplicate key value violates unique constraint")
"""

from typing import Any, Dict, Optional
from fastapi import status


class ContaCertaException(Exception):
    """
    Base exception class for the ContaCerta application.

    All custom exceptions should inherit from this class.
    """

    def __init__(
        self,
        message: str,
        status_code: int = status.HTTP_500_INTERNAL_SERVER_ERROR,
        details: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.status_code = status_code
        self.details = details or {}
        super().__init__(self.message)


# ==========================
# Authentication Exceptions
# ==========================

class AuthenticationError(ContaCertaException):
    """Raised when authentication fails."""

    def __init__(
        self,
        message: str = "Could not validate credentials",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_401_UNAUTHORIZED,
            details=details,
        )


class TokenInvalidError(AuthenticationError):
    """Raised when a JWT token is invalid or expired."""

    def __init__(self, reason: str = "Invalid token"):
        super().__init__(
            message="Invalid token",
            details={"reason": reason}
        )


# ==========================
# Authorization Exceptions
# ==========================

class AuthorizationError(ContaCertaException):
    """Raised when the identity lacks required permissions."""

    def __init__(
        self,
        message: str = "Insufficient permissions",
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(
            message=message,
            status_code=status.HTTP_403_FORBIDDEN,
            details=details,
        )


class NotAMemberError(AuthorizationError):
    """Raised when switching to an organization absent from the directory."""

    def __init__(self, organization_id: Optional[str] = None):
        super().__init__(
            message="You are not a member of this organization",
            details={"organization_id": organization_id} if organization_id else None,
        )


# ==========================
# Organization Session Exceptions
# ==========================

class DirectoryFetchError(ContaCertaException):
    """Raised when the organization directory cannot be refreshed."""

    def __init__(self, message: str, code: Optional[str] = None):
        super().__init__(
            message=message,
            status_code=status.HTTP_502_BAD_GATEWAY,
            details={"code": code} if code else None,
        )
        self.code = code


# ==========================
# Backend Collaborator Errors
# ==========================

# Codes follow the Postgres SQLSTATE / PostgREST vocabulary
NOT_NULL_VIOLATION = "23502"
FOREIGN_KEY_VIOLATION = "23503"
UNIQUE_VIOLATION = "23505"
CHECK_VIOLATION = "23514"
INVALID_TEXT_REPRESENTATION = "22P02"
INSUFFICIENT_PRIVILEGE = "42501"
RAISE_EXCEPTION = "P0001"
NO_ROWS = "PGRST116"
UNKNOWN_COLUMN = "PGRST204"
UNKNOWN_FUNCTION = "PGRST202"
UNKNOWN_TABLE = "PGRST205"
MISSING_FILTER = "21000"
NETWORK_ERROR = "NETWORK_ERROR"
INVALID_RESPONSE = "INVALID_RESPONSE"

_BACKEND_STATUS_CODES = {
    NOT_NULL_VIOLATION: status.HTTP_400_BAD_REQUEST,
    FOREIGN_KEY_VIOLATION: status.HTTP_409_CONFLICT,
    UNIQUE_VIOLATION: status.HTTP_409_CONFLICT,
    CHECK_VIOLATION: status.HTTP_400_BAD_REQUEST,
    INVALID_TEXT_REPRESENTATION: status.HTTP_400_BAD_REQUEST,
    INSUFFICIENT_PRIVILEGE: status.HTTP_403_FORBIDDEN,
    RAISE_EXCEPTION: status.HTTP_400_BAD_REQUEST,
    NO_ROWS: status.HTTP_406_NOT_ACCEPTABLE,
    UNKNOWN_COLUMN: status.HTTP_400_BAD_REQUEST,
    UNKNOWN_FUNCTION: status.HTTP_404_NOT_FOUND,
    UNKNOWN_TABLE: status.HTTP_404_NOT_FOUND,
    MISSING_FILTER: status.HTTP_400_BAD_REQUEST,
}


class BackendError(Exception):
    """
    Error reported by the backend collaborator.

    Attributes:
        code: SQLSTATE / PostgREST style error code
        message: Raw backend message (never shown to users as-is)
        details: Optional backend details (constraint name, column...)
        hint: Optional backend hint
    """

    def __init__(
        self,
        code: str,
        message: str,
        details: Optional[str] = None,
        hint: Optional[str] = None,
    ):
        self.code = code
        self.message = message
        self.details = details
        self.hint = hint
        super().__init__(f"[{code}] {message}")

    @property
    def status_code(self) -> int:
        return _BACKEND_STATUS_CODES.get(self.code, status.HTTP_500_INTERNAL_SERVER_ERROR)

    def to_dict(self) -> dict:
        return {
            "code": self.code,
            "message": self.message,
            "details": self.details,
            "hint": self.hint,
        }

