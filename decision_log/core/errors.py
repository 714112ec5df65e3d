"""Error Hierarchy — typed, categorized exceptions for every Decision Log failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Domain errors (400-level) are recoverable; infrastructure errors (500-level) are critical
    - to_response() produces the REST envelope used by the API error handlers
    - RecordValidationError always carries the full per-record diagnostic list

Design Decisions:
    - Single hierarchy with DecisionLogError base: one global handler covers all of them
    - ErrorContext as dataclass: observability fields without coupling to the logging setup
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
    FORMAT = "format"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    CRYPTO = "crypto"
    DATABASE = "database"
    STORAGE = "storage"
    EXTERNAL_API = "external_api"


@dataclass
class ErrorContext:
    """Extra context attached to an error for logs and responses."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    resource_id: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class DecisionLogError(Exception):
    """Base exception for all Decision Log errors."""

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

    def details(self) -> Any:
        """Structured details for the response body (overridden by subclasses)."""
        return None

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        body = {
            "code": self.code,
            "message": self.message,
            "category": self.category.value,
            "severity": self.severity.value,
            "timestamp": self.context.timestamp.isoformat(),
        }
        details = self.details()
        if details is not None:
            body["details"] = details
        return {"error": body}


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(DecisionLogError):
    """Lookup by id failed (decision, backup, category)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.resource_id = resource_id
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, ctx, 404,
        )
        self.resource_type = resource_type
        self.resource_id = resource_id


class InvalidInputError(DecisionLogError):
    """A single caller-supplied value is missing or out of range."""
    def __init__(self, message: str, field: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_INPUT", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.field = field

    def details(self) -> Any:
        return {"field": self.field}


class RecordValidationError(DecisionLogError):
    """One or more imported records failed the field rules."""
    def __init__(self, errors: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Validation errors: {', '.join(errors)}",
            "VALIDATION_ERROR", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400,
        )
        self.errors = errors

    def details(self) -> Any:
        return self.errors


class ImportFormatError(DecisionLogError):
    """Payload is not JSON (kind='json') or not a recognized envelope (kind='format')."""
    def __init__(self, message: str, kind: str, context: ErrorContext | None = None):
        super().__init__(
            message, "INVALID_JSON" if kind == "json" else "INVALID_FORMAT",
            ErrorCategory.FORMAT, ErrorSeverity.ERROR, context, 400,
        )
        self.kind = kind


class CryptoError(DecisionLogError):
    """Stored credential could not be decrypted (wrong passphrase or tampered data)."""
    def __init__(self, message: str = "Cannot decrypt token", context: ErrorContext | None = None):
        super().__init__(
            message, "CRYPTO_ERROR", ErrorCategory.CRYPTO,
            ErrorSeverity.ERROR, context, 400,
        )


class CategoryInUseError(DecisionLogError):
    """Custom category deletion refused while decisions still use the name."""
    def __init__(self, name: str, usage_count: int, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot delete \"{name}\" - it's being used by {usage_count} decision(s)",
            "CATEGORY_IN_USE", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )
        self.name = name
        self.usage_count = usage_count


class CategoryConflictError(DecisionLogError):
    """Target category name already exists."""
    def __init__(self, name: str, context: ErrorContext | None = None):
        super().__init__(
            f"Category \"{name}\" already exists",
            "CATEGORY_CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )
        self.name = name


class MissingCredentialError(DecisionLogError):
    """A remote operation was requested without an unlocked access token."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "No access token available. Unlock or provide a token first.",
            "CREDENTIAL_MISSING", ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 401,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(DecisionLogError):
    """Persistent store operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class StorageError(DecisionLogError):
    """Key-value file store (backups, credentials) could not be read or written."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation


class RemoteServiceError(DecisionLogError):
    """Remote document service answered with a non-success status."""
    def __init__(
        self, message: str, status_code: int, body: str = "",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{message}: {body}" if body else message,
            "REMOTE_SERVICE_ERROR", ErrorCategory.EXTERNAL_API,
            ErrorSeverity.CRITICAL, context, 502,
        )
        self.status_code = status_code
        self.body = body

    def details(self) -> Any:
        return {"status_code": self.status_code}
