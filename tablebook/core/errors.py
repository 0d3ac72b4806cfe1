"""
Domain errors for the reservation platform.

Every business-rule failure is raised as a subclass of `TableBookError`,
which carries the HTTP status and a stable machine-readable code. The API
layer renders them as `{"error": code, "message": message}`.
"""
from typing import Any, Dict, Optional

from fastapi import status


class TableBookError(Exception):
    """Base class for all expected, client-facing failures."""

    status_code: int = status.HTTP_400_BAD_REQUEST
    code: str = "BAD_REQUEST"
    message: str = "Bad request"

    def __init__(
        self,
        message: Optional[str] = None,
        code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message or self.message
        self.code = code or self.code
        self.context = context or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        return {"error": self.code, "message": self.message}


class InvalidRequestError(TableBookError):
    """Malformed input: bad date/time format, non-numeric party size, etc."""
    code = "VALIDATION_ERROR"
    message = "Validation failed"


class MissingParamsError(TableBookError):
    code = "MISSING_PARAMS"
    message = "Required parameters are missing"


class NotFoundError(TableBookError):
    status_code = status.HTTP_404_NOT_FOUND
    code = "NOT_FOUND"
    message = "Resource not found"

    @classmethod
    def for_resource(cls, resource: str, code: Optional[str] = None) -> "NotFoundError":
        return cls(f"{resource} not found", code=code)


class ConflictError(TableBookError):
    status_code = status.HTTP_409_CONFLICT
    code = "CONFLICT"
    message = "Resource conflict"


class AccessDeniedError(TableBookError):
    status_code = status.HTTP_403_FORBIDDEN
    code = "ACCESS_DENIED"
    message = "Access denied"


class CannotCancelError(TableBookError):
    code = "CANNOT_CANCEL"
    message = "Cannot cancel this reservation"


class PartySizeTooLargeError(TableBookError):
    code = "PARTY_SIZE_TOO_LARGE"
    message = "Party size exceeds table capacity"


class PartySizeTooSmallError(TableBookError):
    code = "PARTY_SIZE_TOO_SMALL"
    message = "Party size below minimum table capacity"


class BusinessRuleError(TableBookError):
    """A request that is well-formed but not allowed in the current state."""
    code = "BUSINESS_RULE_VIOLATION"
    message = "Operation not allowed"
