"""Error Hierarchy — typed, categorized exceptions for all API failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by every error handler
    - No internal details leaked in user-facing messages

Design Decisions:
    - Single hierarchy with CanteenError base: FastAPI global handler catches all
    - details dict carries structured extras (unavailable items, valid ID range, ...)
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    BUSINESS_RULE = "business_rule"
    AUTHENTICATION = "authentication"
    PERMISSION = "permission"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    EXTERNAL_API = "external_api"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    order_id: str | None = None
    canteen_id: str | None = None
    user_id: str | None = None


class CanteenError(Exception):
    """Base exception for all canteen API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details or {}

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        if self.details:
            body["details"] = self.details
        return {"error": body}


# ─── Client Errors (400-level) ──────────────────────────────────

class RequestValidationFailed(CanteenError):
    """Request data failed a check Pydantic cannot express."""
    def __init__(
        self, message: str, field: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, None, 400, details,
        )
        self.field = field


class BusinessRuleError(CanteenError):
    """Request is well-formed but violates an ordering rule."""
    def __init__(
        self, message: str, code: str,
        details: dict[str, Any] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400, details,
        )


class PriorityValidationError(BusinessRuleError):
    """Priority order failed exam eligibility checks."""
    def __init__(
        self, message: str, error_type: str,
        details: dict[str, Any] | None = None,
    ):
        super().__init__(
            f"Priority order validation failed: {message}", error_type, details,
        )
        self.error_type = error_type


class AuthenticationError(CanteenError):
    """Caller is not authenticated or credentials are wrong."""
    def __init__(self, message: str = "Not authorized"):
        super().__init__(
            message, "AUTHENTICATION_ERROR", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, None, 401,
        )


class PermissionDeniedError(CanteenError):
    """Caller is authenticated but may not perform this action."""
    def __init__(self, message: str):
        super().__init__(
            message, "PERMISSION_DENIED", ErrorCategory.PERMISSION,
            ErrorSeverity.WARNING, None, 403,
        )


class ResourceNotFoundError(CanteenError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str | None = None,
        details: dict[str, Any] | None = None,
    ):
        message = (
            f"{resource_type} '{resource_id}' not found"
            if resource_id else f"{resource_type} not found"
        )
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, None, 404, details,
        )
        self.resource_type = resource_type


class DuplicateResourceError(CanteenError):
    """A uniqueness rule would be violated."""
    def __init__(self, message: str):
        super().__init__(
            message, "DUPLICATE_RESOURCE", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, None, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(CanteenError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class PaymentGatewayError(CanteenError):
    """Payment gateway call failed or gateway is not configured."""
    def __init__(
        self, message: str, operation: str,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"Payment gateway {operation} failed: {message}",
            "PAYMENT_GATEWAY_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.operation = operation


class ImageStorageError(CanteenError):
    """Image hosting call failed."""
    def __init__(self, message: str, operation: str):
        super().__init__(
            f"Image {operation} failed: {message}",
            "IMAGE_STORAGE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.ERROR, None, 502,
        )
        self.operation = operation
