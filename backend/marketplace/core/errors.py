"""Error Hierarchy — typed, categorized exceptions for every marketplace failure mode.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Client errors (400-level) are recoverable; StorageError (500) is critical
    - to_response() produces the REST envelope; `detail` is the only free-form field
    - NotFoundError never reveals whether an id was malformed or merely absent

Design Decisions:
    - Single hierarchy with MarketplaceError base: one FastAPI handler catches all
    - TooManyFilesError / InvalidUploadError subclass DomainValidationError so callers
      handling "bad business data" also catch upload violations
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
    AUTHORIZATION = "authorization"
    RESOURCE_NOT_FOUND = "resource_not_found"
    CONFLICT = "conflict"
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Context attached to an error for logs, never shown to clients."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    listing_id: str | None = None
    username: str | None = None
    debug_info: dict[str, Any] | None = None


class MarketplaceError(Exception):
    """Base exception for all marketplace errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
        http_status: int = 500,
        detail: str | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()
        self.http_status = http_status
        self.detail = detail

    def to_response(self) -> dict:
        """Convert to standardized REST error response."""
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "detail": self.detail,
            }
        }


# ─── Client Errors (400-level) ──────────────────────────────────

class InvalidShapeError(MarketplaceError):
    """Payload is not the expected shape (extraneous keys, wrong container/type)."""
    def __init__(
        self,
        detail: str | None = None,
        fields: list[str] | None = None,
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "Invalid request body", "INVALID_SHAPE", ErrorCategory.VALIDATION,
            ErrorSeverity.ERROR, context, 400, detail,
        )
        self.fields = fields or []


class DomainValidationError(MarketplaceError):
    """Payload is well-formed but violates a business rule."""
    def __init__(
        self,
        detail: str | None = None,
        code: str = "DOMAIN_VALIDATION",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            "Invalid request body", code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 400, detail,
        )


class TooManyFilesError(DomainValidationError):
    """More images were supplied than a listing may hold."""
    def __init__(self, received: int, limit: int, context: ErrorContext | None = None):
        super().__init__(
            f"Too many files: received {received}, at most {limit} allowed.",
            "TOO_MANY_FILES", context,
        )
        self.received = received
        self.limit = limit


class InvalidUploadError(DomainValidationError):
    """At least one uploaded file is not an image."""
    def __init__(self, rejected: list[str], context: ErrorContext | None = None):
        super().__init__(
            f"Only image files are accepted. Rejected: {', '.join(rejected)}",
            "INVALID_UPLOAD", context,
        )
        self.rejected = rejected


class UnauthenticatedError(MarketplaceError):
    """No valid principal present on a protected operation."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Unauthorized", "UNAUTHENTICATED", ErrorCategory.AUTHENTICATION,
            ErrorSeverity.WARNING, context, 401,
        )


class ForbiddenError(MarketplaceError):
    """Principal present but not allowed to mutate the resource."""
    def __init__(self, context: ErrorContext | None = None):
        super().__init__(
            "Access Forbidden", "FORBIDDEN", ErrorCategory.AUTHORIZATION,
            ErrorSeverity.WARNING, context, 403,
        )


class NotFoundError(MarketplaceError):
    """Resource absent, or its identifier is not syntactically valid."""
    def __init__(self, resource_type: str = "Resource", context: ErrorContext | None = None):
        super().__init__(
            f"{resource_type} not found", "NOT_FOUND",
            ErrorCategory.RESOURCE_NOT_FOUND, ErrorSeverity.INFO, context, 404,
        )
        self.resource_type = resource_type


class ConflictError(MarketplaceError):
    """A uniqueness constraint was violated."""
    def __init__(self, field_name: str, context: ErrorContext | None = None):
        super().__init__(
            "Conflict", "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409, f"{field_name} already in use.",
        )
        self.field_name = field_name


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(MarketplaceError):
    """Database or file storage operation failed. Fatal, never retried."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, context, 500,
        )
        self.operation = operation

    def to_response(self) -> dict:
        """Storage failures surface as a generic server error."""
        response = super().to_response()
        response["error"]["message"] = "Something went wrong"
        return response
