"""Error Hierarchy — typed, categorized exceptions for all iPerformance failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Filter/id errors (400-level) are surfaced with their specific reason
    - Persistence errors (500-level) carry a generic message; details only go to logs
    - to_response() always includes a top-level "message" field

Design Decisions:
    - Single hierarchy with IPerformanceError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability fields without coupling to logging
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    company_domain: str | None = None
    entity: str | None = None
    debug_info: dict[str, Any] | None = None


class IPerformanceError(Exception):
    """Base exception for all iPerformance errors."""

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
            "message": self.message,
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "entity": self.context.entity,
                    **(self.context.debug_info or {}),
                },
            },
        }


# ─── Request Errors (400-level) ─────────────────────────────────

class InvalidFilterError(IPerformanceError):
    """A filter parameter could not be decoded into its expected shape."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_FILTER", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class InvalidIdError(IPerformanceError):
    """An id in a filter, path, or body is not a well-formed identifier."""
    def __init__(self, value: object, field: str, context: ErrorContext | None = None):
        super().__init__(
            f"Invalid id '{value}' in {field}",
            "INVALID_ID", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.value = value
        self.field = field


class TenantContextMissingError(IPerformanceError):
    """Request reached the core without an authenticated tenant context."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Company domain missing", "TENANT_CONTEXT_MISSING",
            ErrorCategory.AUTHENTICATION, ErrorSeverity.ERROR, context, 401,
        )


class NotFoundError(IPerformanceError):
    """Requested resource does not exist within the tenant."""
    def __init__(
        self, message: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class DuplicateKeyError(IPerformanceError):
    """Unique constraint violated (duplicate title, name, or human code)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "DUPLICATE_KEY", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class ConstraintViolationError(IPerformanceError):
    """A write broke a storage constraint other than uniqueness (e.g. a required column)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONSTRAINT_VIOLATION", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class PersistenceError(IPerformanceError):
    """Storage operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation
