"""Error Hierarchy — typed, categorized exceptions for every failure a route can surface.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) return their message verbatim; server errors
      (500-level) return a generic message — internal text never reaches the client
    - to_response() produces the flat REST envelope {"error": str, "details"?: list}

Design Decisions:
    - Single hierarchy with RestaurantError base: one global handler catches all (uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

GENERIC_ERROR_MESSAGE = "Internal server error"


class ErrorSeverity(str, Enum):
    """Error severity for observability and client handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    VALIDATION = "validation"
    AUTHENTICATION = "authentication"
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    DATABASE = "database"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    user_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class RestaurantError(Exception):
    """Base exception for all restaurant API errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        details: list[dict[str, Any]] | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.details = details

    @property
    def is_client_error(self) -> bool:
        return 400 <= self.http_status < 500

    def public_message(self) -> str:
        """Message safe to send to the client."""
        return self.message if self.is_client_error else GENERIC_ERROR_MESSAGE

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body: dict[str, Any] = {"error": self.public_message()}
        if self.details and self.is_client_error:
            body["details"] = self.details
        return body


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidInputError(RestaurantError):
    """Missing or malformed request input."""
    def __init__(
        self,
        message: str,
        field: str | None = None,
        details: list[dict[str, Any]] | None = None,
        context: ErrorContext | None = None,
    ):
        if details is None and field is not None:
            details = [{"field": field, "message": message}]
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400, details,
        )
        self.field = field


class UnauthenticatedError(RestaurantError):
    """No valid identity on the request."""
    def __init__(
        self, message: str = "Unauthorized",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(RestaurantError):
    """Identity resolved but lacks the required role."""
    def __init__(
        self, message: str = "Insufficient permissions",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class ResourceNotFoundError(RestaurantError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class ConflictError(RestaurantError):
    """Write conflicts with existing state (e.g. duplicate unique key)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(RestaurantError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
