"""Error Hierarchy: typed, categorized exceptions for board sync failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Caller errors (400-level) leave the board untouched; store errors (500-level)
      never roll back an optimistic mutation
    - to_response() produces the REST error envelope
    - Coercion problems in cell data are never raised (resolved by codec defaults)

Design Decisions:
    - Single hierarchy with BoardSyncError base: FastAPI global handler catches all
    - ErrorContext as dataclass: table/operation travel with the error into logs
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
    CONFIGURATION = "configuration"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    table_name: str | None = None
    operation: str | None = None
    entity_id: str | None = None


class BoardSyncError(Exception):
    """Base exception for all board sync errors."""

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
                    "table": self.context.table_name,
                    "operation": self.context.operation,
                    "entity_id": self.context.entity_id,
                },
            }
        }


# ─── Caller Errors (400-level) ──────────────────────────────────

class BoardValidationError(BoardSyncError):
    """A create/update payload names an unknown field or an invalid value."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field


class ResourceNotFoundError(BoardSyncError):
    """Requested entity does not exist in the active board."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.entity_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type


# ─── Store Errors (500-level) ───────────────────────────────────

class ConfigurationError(BoardSyncError):
    """Backing store unidentified or unreachable. Fatal to the sync attempt, never retried."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 503,
        )


class TransientIOError(BoardSyncError):
    """A single table read, clear or write failed."""
    def __init__(
        self,
        message: str,
        operation: str,
        table: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.operation = operation
        if table is not None:
            ctx.table_name = table
        super().__init__(
            f"Table {operation} failed: {message}",
            "TRANSIENT_IO_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.ERROR, ctx, 503,
        )
        self.operation = operation

    @property
    def table(self) -> str | None:
        return self.context.table_name
