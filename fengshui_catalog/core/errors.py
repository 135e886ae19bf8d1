"""Error Hierarchy: typed, categorized exceptions for all catalog failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - No error is fatal: the catalog stays usable with its last in-memory state
    - context.user_message always holds the Vietnamese notification text
    - to_response() produces the REST envelope; to_notification() the user alert

Design Decisions:
    - Single hierarchy with CatalogError base: FastAPI global handler catches all
    - ErrorContext as dataclass: observability without coupling to logging
"""

from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from fengshui_catalog.core import messages


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
    STORAGE = "storage"
    IMPORT = "import"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs and client display."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    category: str | None = None
    record_id: str | None = None
    file_name: str | None = None
    user_message: str | None = None
    debug_info: dict[str, Any] | None = None


class CatalogError(Exception):
    """Base exception for all catalog errors."""

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
                "user_message": self.context.user_message or self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "category": self.context.category,
                    "record_id": self.context.record_id,
                    "file_name": self.context.file_name,
                },
            }
        }

    def to_notification(self) -> dict:
        """Convert to the blocking alert shown to the user."""
        return {
            "type": "error",
            "code": self.code,
            "message": self.context.user_message or self.message,
            "severity": self.severity.value,
        }


def _with_user_message(context: ErrorContext | None, text: str) -> ErrorContext:
    ctx = context or ErrorContext()
    if ctx.user_message is None:
        ctx.user_message = text
    return ctx


# ─── Domain Errors (400-level) ──────────────────────────────────

class ImportParseError(CatalogError):
    """Import document is not valid JSON or not shaped like a catalog."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Import failed: {detail}",
            "IMPORT_PARSE_ERROR", ErrorCategory.IMPORT,
            ErrorSeverity.ERROR,
            _with_user_message(context, messages.import_failed(detail)), 400,
        )
        self.detail = detail


class FileReadError(CatalogError):
    """Underlying file IO failed while reading an import file."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"File read failed: {detail}",
            "FILE_READ_ERROR", ErrorCategory.IMPORT,
            ErrorSeverity.ERROR,
            _with_user_message(context, messages.FILE_READ_FAILED), 400,
        )
        self.detail = detail


class ResourceNotFoundError(CatalogError):
    """Requested record does not exist."""
    def __init__(
        self, category: str, record_id: str, context: ErrorContext | None = None,
    ):
        ctx = _with_user_message(
            context, messages.record_not_found(category, record_id),
        )
        ctx.category = category
        ctx.record_id = record_id
        super().__init__(
            f"{category} '{record_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.WARNING, ctx, 404,
        )


class InvalidInputError(CatalogError):
    """Request body or parameters failed validation at the API boundary."""
    def __init__(
        self, details: list[dict[str, Any]], context: ErrorContext | None = None,
    ):
        super().__init__(
            "Invalid request data",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING,
            _with_user_message(context, messages.INVALID_INPUT), 400,
        )
        self.details = details

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["details"] = self.details
        return response


# ─── Storage Errors (500-level) ─────────────────────────────────

class DecodeError(CatalogError):
    """Persisted catalog document is corrupt."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Persisted catalog could not be decoded: {detail}",
            "DECODE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.ERROR,
            _with_user_message(context, messages.DECODE_FAILED), 500,
        )
        self.detail = detail


class WriteError(CatalogError):
    """Persistence layer rejected a write."""
    def __init__(self, detail: str, context: ErrorContext | None = None):
        super().__init__(
            f"Catalog write failed: {detail}",
            "WRITE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.WARNING,
            _with_user_message(context, messages.WRITE_FAILED), 507,
        )
        self.detail = detail


class InternalError(CatalogError):
    """Anything unexpected. The message never carries internal details."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "An unexpected error occurred",
            "INTERNAL_ERROR", ErrorCategory.INTERNAL,
            ErrorSeverity.CRITICAL,
            _with_user_message(context, messages.UNEXPECTED), 500,
        )
