"""Error Hierarchy — typed, categorized exceptions for docstore failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Ordinary "not found" inside the query engine is a None return, never an exception;
      ResourceNotFoundError only exists at the HTTP boundary
    - Persistence errors (500-level) leave the in-memory store untouched (no rollback)
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with DocStoreError base: FastAPI global handler catches all
      (ADR: uniform error shape)
    - ErrorContext as dataclass: rich observability without coupling to logging framework
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
    RESOURCE_NOT_FOUND = "resource_not_found"
    PERSISTENCE = "persistence"
    SNAPSHOT_FORMAT = "snapshot_format"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    collection: str | None = None
    item_id: str | None = None
    path: str | None = None
    debug_info: dict[str, Any] | None = None


class DocStoreError(Exception):
    """Base exception for all docstore errors."""

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
                    "collection": self.context.collection,
                    "item_id": self.context.item_id,
                    "path": self.context.path,
                },
            }
        }


# ─── Boundary Errors (400-level) ────────────────────────────────

class ResourceNotFoundError(DocStoreError):
    """Requested collection or record does not exist (or has the wrong kind)."""
    def __init__(
        self, collection: str, item_id: str | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.collection = collection
        ctx.item_id = item_id
        target = f"{collection}/{item_id}" if item_id is not None else collection
        super().__init__(
            f"Resource '{target}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class InvalidPayloadError(DocStoreError):
    """Request body or parameters rejected before reaching the store."""
    def __init__(self, details: list[dict], context: ErrorContext | None = None):
        super().__init__(
            "Invalid request data",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.details = details

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details
        return response


# ─── Infrastructure Errors (500-level) ──────────────────────────

class InternalError(DocStoreError):
    """Unexpected failure; the message never carries internal details."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL, context, 500,
        )


class PersistenceError(DocStoreError):
    """Reading or writing the persisted snapshot failed (I/O)."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Persistence {operation} failed: {message}",
            "PERSISTENCE_ERROR", ErrorCategory.PERSISTENCE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class SnapshotFormatError(DocStoreError):
    """Persisted snapshot could not be parsed or does not have the store shape."""
    def __init__(self, message: str, source: str | None = None, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.path = source
        super().__init__(
            f"Malformed snapshot: {message}",
            "SNAPSHOT_FORMAT_ERROR", ErrorCategory.SNAPSHOT_FORMAT,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
