"""
Sales Service Exceptions

Typed errors raised by the sales mutation service. Callers branch on the
class (or on ``code``) and on ``retryable`` to decide between retrying,
showing the message, or aborting.
"""

from typing import Any, Dict, Optional


class SalesServiceError(Exception):
    """Base exception for sales service errors."""

    retryable = False

    def __init__(
        self,
        message: str,
        code: str = "SALES_SERVICE_ERROR",
        details: Optional[Dict[str, Any]] = None
    ):
        self.message = message
        self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for API responses."""
        return {
            "error": self.code,
            "message": self.message,
            "details": self.details,
            "retryable": self.retryable,
        }


class NotFoundError(SalesServiceError):
    """Raised when a referenced sale, seller or inventory row does not exist."""

    def __init__(
        self,
        entity: str,
        entity_id: Any = None,
        message: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        msg = message or f"{entity} not found: {entity_id}"
        error_details = details or {}
        error_details.update({"entity": entity, "id": entity_id})
        super().__init__(message=msg, code="NOT_FOUND", details=error_details)


class ConstraintViolationError(SalesServiceError):
    """Raised when a proposed change breaks a business or database constraint."""

    def __init__(
        self,
        message: str,
        rule: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        error_details = details or {}
        if rule:
            error_details["rule"] = rule
        super().__init__(message=message, code="CONSTRAINT_VIOLATION", details=error_details)


class ConflictError(SalesServiceError):
    """Raised when a sale was modified concurrently (version mismatch)."""

    retryable = True

    def __init__(
        self,
        sale_id: Any,
        expected_version: int = None,
        message: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        msg = message or f"Sale {sale_id} was modified concurrently"
        error_details = details or {}
        error_details["sale_id"] = sale_id
        if expected_version is not None:
            error_details["expected_version"] = expected_version
        super().__init__(message=msg, code="CONFLICT", details=error_details)


class StoreTimeoutError(SalesServiceError):
    """Raised when the database did not answer within the configured timeout."""

    retryable = True

    def __init__(
        self,
        operation: str,
        message: str = None,
        details: Optional[Dict[str, Any]] = None
    ):
        msg = message or f"Store operation timed out: {operation}"
        error_details = details or {}
        error_details["operation"] = operation
        super().__init__(message=msg, code="TIMEOUT", details=error_details)
