"""Error Hierarchy — typed, categorized exceptions for guard misuse and undo failure.

Invariants:
    - Every error has a code (str), category (ErrorCategory), severity (ErrorSeverity)
    - Usage errors signal caller logic bugs and are never retried or suppressed
    - Operation failures are caller data and never appear in this hierarchy
    - to_dict() produces a log-friendly envelope

Design Decisions:
    - Single hierarchy with RevertibleError base: callers can catch every guard failure at once
    - ErrorContext as dataclass: rich observability without coupling to logging framework
    - DoubleResolutionError subclasses GuardResolvedError: both mean "this guard is spent"
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any
from datetime import datetime, timezone

from revertible.core.domain_types import GuardId, Resolution


class ErrorSeverity(str, Enum):
    """Error severity for observability and caller handling."""
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class ErrorCategory(str, Enum):
    """High-level error categories."""
    USAGE = "usage"
    BORROW = "borrow"
    UNDO = "undo"


@dataclass
class ErrorContext:
    """Rich context for error observability and debugging."""
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    guard_id: GuardId | None = None
    resolution: Resolution | None = None
    debug_info: dict[str, Any] | None = None


class RevertibleError(Exception):
    """Base exception for all guard errors."""

    def __init__(
        self,
        message: str,
        code: str,
        category: ErrorCategory,
        severity: ErrorSeverity = ErrorSeverity.ERROR,
        context: ErrorContext | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.severity = severity
        self.context = context or ErrorContext()

    def to_dict(self) -> dict:
        """Convert to a structured error envelope."""
        resolution = self.context.resolution
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "category": self.category.value,
                "severity": self.severity.value,
                "timestamp": self.context.timestamp.isoformat(),
                "context": {
                    "guard_id": str(self.context.guard_id) if self.context.guard_id else None,
                    "resolution": resolution.value if resolution else None,
                    "debug_info": self.context.debug_info,
                },
            }
        }


# ─── Usage Errors ───────────────────────────────────────────────

class GuardResolvedError(RevertibleError):
    """Pending value accessed after the guard was committed or abandoned."""
    def __init__(
        self,
        message: str | None = None,
        code: str = "GUARD_RESOLVED",
        context: ErrorContext | None = None,
    ):
        super().__init__(
            message or "Guard is already resolved; its pending value is gone.",
            code, ErrorCategory.USAGE, ErrorSeverity.ERROR, context,
        )


class DoubleResolutionError(GuardResolvedError):
    """commit() or abandon() called on a guard that is already disarmed."""
    def __init__(self, attempted: str, context: ErrorContext | None = None):
        resolution = context.resolution.value if context and context.resolution else "resolved"
        super().__init__(
            f"Cannot {attempted} guard: it was already {resolution}.",
            "DOUBLE_RESOLUTION", context,
        )
        self.attempted = attempted


class BorrowConflictError(RevertibleError):
    """Container accessed while a guard derived from it is still live."""
    def __init__(self, attempted: str, holder: GuardId, context: ErrorContext | None = None):
        ctx = context or ErrorContext()
        ctx.guard_id = holder
        super().__init__(
            f"Cannot {attempted}: container is exclusively held by guard {holder}.",
            "BORROW_CONFLICT", ErrorCategory.BORROW, ErrorSeverity.ERROR, ctx,
        )
        self.attempted = attempted
        self.holder = holder


class ContainerConsumedError(RevertibleError):
    """Container used after into_inner() gave its value away."""
    def __init__(self, attempted: str, context: ErrorContext | None = None):
        super().__init__(
            f"Cannot {attempted}: container was consumed by into_inner().",
            "CONTAINER_CONSUMED", ErrorCategory.USAGE, ErrorSeverity.ERROR, context,
        )
        self.attempted = attempted


# ─── Undo Errors ────────────────────────────────────────────────

class UndoActionError(RevertibleError):
    """The undo action raised while abandoning a guard.

    The undo failure is the __cause__. When abandonment was triggered by an
    exception leaving a `with` block, that exception is kept on `in_flight`.
    """
    def __init__(
        self,
        guard_id: GuardId,
        in_flight: BaseException | None = None,
        context: ErrorContext | None = None,
    ):
        ctx = context or ErrorContext()
        ctx.guard_id = guard_id
        ctx.resolution = Resolution.ABANDONED
        message = f"Undo action failed while abandoning guard {guard_id}"
        if in_flight is not None:
            message += f" (abandoned because of {type(in_flight).__name__}: {in_flight})"
        super().__init__(
            message, "UNDO_FAILED", ErrorCategory.UNDO,
            ErrorSeverity.CRITICAL, ctx,
        )
        self.in_flight = in_flight
