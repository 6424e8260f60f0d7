"""Error Hierarchy — typed, categorized exceptions for inventory failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Ordinary invalid form input is NEVER an exception (see field_validator.Invalid)
    - Only configuration defects, missing resources, state conflicts and IO use this path
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with InventoryError base: FastAPI global handler catches all (ADR: uniform error shape)
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
    CONFIGURATION = "configuration"
    BUSINESS_RULE = "business_rule"
    RESOURCE_NOT_FOUND = "resource_not_found"
    DATABASE = "database"
    INTERNAL = "internal"
    CONFLICT = "conflict"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    organization_id: str | None = None
    entity: str | None = None
    field_name: str | None = None
    debug_info: dict[str, Any] | None = None


class InventoryError(Exception):
    """Base exception for all inventory errors."""

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
                    "organization_id": self.context.organization_id,
                    "entity": self.context.entity,
                    "field_name": self.context.field_name,
                },
            }
        }


# ─── Configuration Errors ───────────────────────────────────────

class SchemaConfigurationError(InventoryError):
    """A custom field definition cannot be turned into a validation rule."""
    def __init__(
        self, message: str, field_name: str, context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.field_name = field_name
        super().__init__(
            message, "SCHEMA_CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, ctx, 500,
        )
        self.field_name = field_name


# ─── Domain Errors (400-level) ──────────────────────────────────

class ResourceNotFoundError(InventoryError):
    """Requested resource does not exist (or belongs to another organization)."""
    def __init__(
        self, resource_type: str, resource_id: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            f"{resource_type} '{resource_id}' not found",
            "RESOURCE_NOT_FOUND", ErrorCategory.RESOURCE_NOT_FOUND,
            ErrorSeverity.ERROR, context, 404,
        )


class ConflictError(InventoryError):
    """Request conflicts with existing data (duplicate or reserved names)."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFLICT", ErrorCategory.CONFLICT,
            ErrorSeverity.ERROR, context, 409,
        )


class BookingStatusError(InventoryError):
    """Booking operation not allowed in the booking's current status."""
    def __init__(
        self, message: str, code: str, context: ErrorContext | None = None,
    ):
        super().__init__(
            message, code, ErrorCategory.BUSINESS_RULE,
            ErrorSeverity.ERROR, context, 409,
        )


class MissingOrganizationError(InventoryError):
    """Request did not identify its organization."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "ORGANIZATION_REQUIRED", ErrorCategory.VALIDATION,
            ErrorSeverity.WARNING, context, 400,
        )


# ─── Infrastructure Errors (500-level) ──────────────────────────

class DatabaseError(InventoryError):
    """Database operation failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        super().__init__(
            f"Database {operation} failed: {message}",
            "DATABASE_ERROR", ErrorCategory.DATABASE,
            ErrorSeverity.CRITICAL, context, 503,
        )
        self.operation = operation
