"""Error Hierarchy: typed, categorized exceptions for every todo-backend failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors carry 400-level statuses; store failures carry 503
    - to_response() produces the REST envelope consumed by the global handlers
    - User-facing messages never include driver output or SQL

Design Decisions:
    - Single hierarchy with TodoError base: one FastAPI handler renders all of them
    - ErrorContext as dataclass: observability fields travel with the error, not the logger
"""

from dataclasses import dataclass, field
from enum import Enum
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    LIFECYCLE = "lifecycle"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Request-scoped context attached to an error."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    item_id: str | None = None
    operation: str | None = None


class TodoError(Exception):
    """Base exception for all todo-backend errors."""

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
                "context": {
                    "item_id": self.context.item_id,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(TodoError):
    """Requested resource does not exist."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )
        self.resource_id = resource_id


class ItemNotFoundError(ResourceNotFoundError):
    """Todo item id is absent from the collection."""
    def __init__(self, item_id: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.item_id = item_id
        super().__init__("Item", item_id, ctx)


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(TodoError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = operation
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class StoreUnavailableError(DatabaseError, ConnectionError):
    """Store could not be reached while initializing. Fatal at startup."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(message, "connect", context)
        self.code = "STORE_UNAVAILABLE"


class LifecycleError(TodoError):
    """Illegal server lifecycle transition."""
    def __init__(self, current: str, target: str):
        super().__init__(
            f"Cannot move from {current} to {target}",
            "ILLEGAL_TRANSITION", ErrorCategory.LIFECYCLE,
            ErrorSeverity.CRITICAL, None, 500,
        )
        self.current = current
        self.target = target
