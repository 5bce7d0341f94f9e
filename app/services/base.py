"""
Service Result Types

Business-rule outcomes are returned, not raised. Every service call that
can be rejected hands back a ServiceResult carrying either the value or
an ErrorKind plus a human-readable message; the HTTP layer maps the kind
to a status code.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    """Discriminator for rejected service calls."""
    VALIDATION_FAILURE = "validation_failure"
    EMPTY_ORDER = "empty_order"
    BELOW_MINIMUM = "below_minimum"
    PRODUCT_NOT_FOUND = "product_not_found"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    IMAGE_FETCH_ERROR = "image_fetch_error"
    IMAGE_UNREACHABLE = "image_unreachable"


@dataclass
class ServiceResult(Generic[T]):
    """
    Standardized result from a service call.

    Attributes:
        success: Whether the call was accepted
        value: Payload on success
        error_kind: Why the call was rejected
        error_message: Message returned to the client on rejection
    """
    success: bool
    value: Optional[T] = None
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "ServiceResult[T]":
        return cls(success=True, value=value)

    @classmethod
    def fail(cls, kind: ErrorKind, message: str) -> "ServiceResult[T]":
        return cls(success=False, error_kind=kind, error_message=message)

    def to_dict(self) -> dict:
        """Convert to dictionary for logging."""
        return {
            "success": self.success,
            "error_kind": self.error_kind.value if self.error_kind else None,
            "error_message": self.error_message,
        }
