"""
Shared error handling for the Vehicles access layer.
"""

from typing import Dict, Any, Optional
from pydantic import BaseModel, Field


class ErrorResponse(BaseModel):
    """Standard error response format."""

    request_id: Optional[str] = None
    code: str
    message: str
    details: Dict[str, Any] = Field(default_factory=dict)


class AccessLayerException(Exception):
    """Base exception for Vehicles access layer services."""

    status_code = 400

    def __init__(self, code: str, message: str, details: Optional[Dict[str, Any]] = None):
        self.code = code
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def to_response(self, request_id: Optional[str] = None) -> ErrorResponse:
        """Convert to error response."""
        return ErrorResponse(
            request_id=request_id,
            code=self.code,
            message=self.message,
            details=self.details
        )


class ValidationError(AccessLayerException):
    """Malformed caller input. Never retried."""

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        code: str = "VALIDATION_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.field = field
        details = dict(details or {})
        if field is not None:
            details.setdefault("field", field)
        super().__init__(code, message, details)


class InvalidIdentifierError(ValidationError):
    """Identifier is not a positive integer."""

    def __init__(self, field: str = "id", value: Any = None):
        super().__init__(
            f"{field} must be a positive integer",
            field=field,
            code="INVALID_ID",
            details={"value": value}
        )


class MissingFieldError(ValidationError):
    """Required field is null or blank."""

    def __init__(self, field: str):
        super().__init__(
            f"{field} is required",
            field=field,
            code="MISSING_FIELD"
        )


class StoreError(AccessLayerException):
    """Durable store failure. Always propagated to the caller."""

    status_code = 500

    def __init__(
        self,
        message: str = "Store error",
        details: Optional[Dict[str, Any]] = None,
        code: str = "STORE_ERROR"
    ):
        super().__init__(code, message, details)


class RecordNotFoundError(StoreError):
    """Mutation targeted a record the store does not hold."""

    status_code = 404

    def __init__(self, record_id: int, resource: str = "vehicle"):
        self.record_id = record_id
        super().__init__(
            f"{resource} {record_id} not found",
            details={"id": record_id, "resource": resource},
            code="RECORD_NOT_FOUND"
        )


class CacheUnavailable(AccessLayerException):
    """Cache backend unreachable or erroring. Absorbed by the coordinator."""

    status_code = 503

    def __init__(self, operation: str, key: Optional[str] = None, message: str = "Cache unavailable"):
        self.operation = operation
        self.key = key
        super().__init__(
            "CACHE_UNAVAILABLE",
            message,
            {"operation": operation, "key": key}
        )
