"""
Service Result Module
=====================

Value-level outcome returned by every service operation.

Backend failures are caught at the operation boundary and turned into a
failed result carrying a human-readable message; only unexpected
exceptions cross component boundaries.
"""

from dataclasses import dataclass
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """
    Data-or-error pair.

    Attributes:
        data: Payload when the operation succeeded
        error: Human-readable message when it failed
        code: Machine-readable failure code (backend code or validation key)
    """

    data: Optional[T] = None
    error: Optional[str] = None
    code: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    @classmethod
    def success(cls, data: T) -> "ServiceResult[T]":
        return cls(data=data)

    @classmethod
    def failure(cls, message: str, code: Optional[str] = None) -> "ServiceResult[T]":
        return cls(error=message, code=code)
