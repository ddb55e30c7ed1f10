"""Error Hierarchy: typed, categorized exceptions for all quota engine failure modes.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Configuration and storage errors are 500-level and never user-recoverable
    - Capacity denials are NOT errors: they are LimitExceededResult values
    - to_response() produces the REST envelope; no internal details leaked

Design Decisions:
    - Single hierarchy with QuotaEngineError base: FastAPI global handler catches all
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
    STORAGE = "storage"
    INTERNAL = "internal"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    tenant_id: str | None = None
    source: str | None = None
    operation: str | None = None
    debug_info: dict[str, Any] | None = None


class QuotaEngineError(Exception):
    """Base exception for all quota engine errors."""

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
                    "tenant_id": self.context.tenant_id,
                    "source": self.context.source,
                    "operation": self.context.operation,
                },
            }
        }


# ─── Configuration Errors (500-level) ───────────────────────────

class ConfigurationError(QuotaEngineError):
    """Plan catalog or settings are inconsistent with what the engine was asked."""
    def __init__(self, message: str, context: ErrorContext | None = None):
        super().__init__(
            message, "CONFIGURATION_ERROR", ErrorCategory.CONFIGURATION,
            ErrorSeverity.CRITICAL, context, 500,
        )


class UnknownPlanError(ConfigurationError):
    """Plan tier has no entry in the plan catalog."""
    def __init__(self, plan: object, context: ErrorContext | None = None):
        super().__init__(f"Unknown plan tier: {plan!r}", context)
        self.code = "UNKNOWN_PLAN"
        self.plan = plan


# ─── Infrastructure Errors (500-level) ──────────────────────────

class StorageError(QuotaEngineError):
    """Record store operation (count, fetch, delete) failed."""
    def __init__(self, message: str, operation: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.operation = ctx.operation or operation
        super().__init__(
            f"Storage {operation} failed: {message}",
            "STORAGE_ERROR", ErrorCategory.STORAGE,
            ErrorSeverity.CRITICAL, ctx, 503,
        )
        self.operation = operation


class PartialEnforcementError(StorageError):
    """A per-source delete failed after other sources already deleted rows.

    `result` holds what actually happened; it is the source of truth.
    """
    def __init__(self, result: Any, failed_source: str, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.source = failed_source
        super().__init__(
            f"delete on '{failed_source}' failed after {result.deleted} row(s) were removed",
            "delete", ctx,
        )
        self.code = "PARTIAL_ENFORCEMENT"
        self.result = result
        self.failed_source = failed_source

    def to_response(self) -> dict:
        response = super().to_response()
        response["error"]["result"] = self.result.to_dict()
        return response
