"""Error Hierarchy — typed, categorized exceptions for all TaskFlow failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (4xx) are raised by handlers and propagate through the pipeline unchanged
    - AccessDenied never discloses why access was refused
    - to_response() produces the REST envelope; no internal details in user-facing messages

Design Decisions:
    - Single hierarchy with TaskFlowError base: FastAPI global handler catches all
    - ErrorContext as dataclass: request-scoped observability without coupling to logging
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone


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
    MESSAGING = "messaging"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    request_type: str | None = None
    user_id: str | None = None
    debug_info: dict[str, Any] | None = None


@dataclass(frozen=True)
class FieldError:
    """One field-level validation message."""
    field: str
    message: str

    def to_dict(self) -> dict:
        return {"field": self.field, "message": self.message}


class TaskFlowError(Exception):
    """Base exception for all TaskFlow errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
            }
        }


# ─── Domain Errors (4xx) ────────────────────────────────────────

class ValidationFailed(TaskFlowError):
    """Request failed structural validation. Raised before any store access."""
    def __init__(self, errors: list[FieldError], context: ErrorContext | None = None):
        summary = "; ".join(f"{e.field}: {e.message}" for e in errors)
        super().__init__(
            f"Validation failed: {summary}", "VALIDATION_FAILED",
            ErrorCategory.VALIDATION, ErrorSeverity.WARNING, context, 400,
        )
        self.errors = list(errors)

    @classmethod
    def single(cls, field_name: str, message: str) -> "ValidationFailed":
        return cls([FieldError(field_name, message)])

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = [e.to_dict() for e in self.errors]
        return response


class Unauthenticated(TaskFlowError):
    """No caller identity present (or credentials rejected)."""
    def __init__(
        self, message: str = "Authentication required",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class AccessDenied(TaskFlowError):
    """Caller lacks rights. The message is fixed."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Permission denied", "ACCESS_DENIED", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class NotFound(TaskFlowError):
    """Referenced entity does not exist."""
    def __init__(
        self, resource_type: str, resource_id: object,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found", "NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.WARNING,
            context, 404,
        )
        self.resource_type = resource_type
        self.resource_id = str(resource_id)


class Conflict(TaskFlowError):
    """Request conflicts with current state (duplicate email, existing member)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.WARNING, context, 409,
        )


# ─── Infrastructure Errors (5xx) ────────────────────────────────

class DatabaseError(TaskFlowError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class TransportUnavailableError(TaskFlowError):
    """Event transport cannot accept events. Recovered by the publisher."""
    def __init__(self, message: str = "Event transport is not running", context: ErrorContext | None = None):
        super().__init__(
            message, "TRANSPORT_UNAVAILABLE", ErrorCategory.MESSAGING,
            ErrorSeverity.ERROR, context, 503,
        )


class HandlerNotRegisteredError(TaskFlowError):
    """Pipeline received a request type with no registered handler."""
    def __init__(self, request_type: str, context: ErrorContext | None = None):
        super().__init__(
            f"No handler registered for {request_type}",
            "HANDLER_NOT_REGISTERED", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.request_type = request_type
