"""
Domain exceptions for Questline.

Purpose
-------
Define the structured, domain-specific exception hierarchy for the
progression and day-cycle engine. Services raise these for business rule
violations; the QuestEngine boundary converts them into tagged Outcomes so
they never escape to the transport layer.

Design Notes
------------
- All domain exceptions inherit from `QuestlineDomainException`.
- Each exception carries:
  - `message`: human-readable description
  - `details`: additional structured context (dict-like)
  - `severity`: `ErrorSeverity` value for logging/alerting
  - `is_retryable`: whether the operation can be retried
  - `error_code`: short, stable identifier for programmatic use
  - `kind`: taxonomy bucket (validation, precondition,
    insufficient_resource, conflict)
- Every error kind is recoverable by the caller; none is fatal to the engine.
- Helper functions (`is_transient_error`, `get_error_severity`, `should_alert`)
  centralize common exception handling patterns.

Hierarchy
---------
QuestlineDomainException
├── ValidationError
├── PreconditionError
│   ├── DayNotStartedError
│   ├── NotFoundError
│   └── QuestAlreadyCompletedError
├── InsufficientResourcesError
└── ConcurrentModificationError
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, Optional


class ErrorSeverity(Enum):
    """Error severity levels for logging and alerting."""

    DEBUG = "debug"  # Expected, not concerning
    INFO = "info"  # Normal operation (e.g., validation failures)
    WARNING = "warning"  # Concerning but handled (e.g., retryable errors)
    ERROR = "error"  # Unexpected errors requiring attention
    CRITICAL = "critical"  # System-level failures requiring immediate action


class ErrorKind(str, Enum):
    """Taxonomy of recoverable engine failures."""

    VALIDATION = "validation"
    PRECONDITION = "precondition"
    INSUFFICIENT_RESOURCE = "insufficient_resource"
    CONFLICT = "conflict"


class QuestlineDomainException(Exception):
    """
    Base exception for all Questline domain-level errors.

    Args:
        message: Human-readable error message
        details: Additional structured data about the error (dict-like)
        severity: Error severity level for logging handlers
        is_retryable: Whether the operation can be retried
        error_code: Optional code for programmatic handling

    Example:
        >>> raise QuestlineDomainException(
        ...     "Quest rejected",
        ...     {"reason": "bad input"}
        ... )
    """

    DEFAULT_SEVERITY: ErrorSeverity = ErrorSeverity.ERROR
    DEFAULT_RETRYABLE: bool = False
    KIND: ErrorKind = ErrorKind.PRECONDITION

    def __init__(
        self,
        message: str,
        details: Optional[Dict[str, Any]] = None,
        severity: Optional[ErrorSeverity] = None,
        is_retryable: Optional[bool] = None,
        error_code: Optional[str] = None,
    ) -> None:
        self.message: str = message
        self.details: Dict[str, Any] = details or {}
        self.severity: ErrorSeverity = severity or self.DEFAULT_SEVERITY
        self.is_retryable: bool = (
            is_retryable if is_retryable is not None else self.DEFAULT_RETRYABLE
        )
        self.error_code: str = error_code or self.__class__.__name__
        super().__init__(self.message)

    @property
    def kind(self) -> ErrorKind:
        return self.KIND

    def to_dict(self) -> Dict[str, Any]:
        """Convert exception to dictionary for logging/serialization."""
        return {
            "error_type": self.__class__.__name__,
            "error_kind": self.kind.value,
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "severity": self.severity.value,
            "is_retryable": self.is_retryable,
        }

    def __str__(self) -> str:
        details_str = f" | Details: {self.details}" if self.details else ""
        return f"[{self.error_code}] {self.message}{details_str}"

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}("
            f"message={self.message!r}, "
            f"details={self.details!r}, "
            f"severity={self.severity.value!r}, "
            f"is_retryable={self.is_retryable!r}"
            ")"
        )


class ValidationError(QuestlineDomainException):
    """
    Raised when caller input fails domain validation.

    Bad title length, unknown quest type or stat key, minutes outside the
    allowed range, non-integer allocation points. Never mutates state.

    Args:
        field: Name of the field that failed validation
        message: Explanation of why validation failed
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    KIND = ErrorKind.VALIDATION

    def __init__(self, field: str, message: str, **details: Any) -> None:
        self.field = field
        self.validation_message = message
        super().__init__(
            message,
            details={"field": field, **details},
            error_code=f"VALIDATION_{field.upper()}",
        )


class PreconditionError(QuestlineDomainException):
    """
    Raised when an operation's required state does not hold.

    Checked before any state change, so no partial mutation occurs.
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    KIND = ErrorKind.PRECONDITION


class DayNotStartedError(PreconditionError):
    """Raised when a quest operation runs without an active day."""

    def __init__(self, action: str) -> None:
        self.action = action
        super().__init__(
            "Day not started",
            details={"action": action},
            error_code="DAY_NOT_STARTED",
        )


class NotFoundError(PreconditionError):
    """
    Raised when a quest or template cannot be found.

    Archived templates are reported as not found.

    Args:
        resource_type: Type of resource (e.g., "Quest", "Template")
        identifier: Optional identifier for the missing resource
    """

    def __init__(self, resource_type: str, identifier: Optional[Any] = None) -> None:
        self.resource_type = resource_type
        self.identifier = identifier

        if identifier is not None:
            message = f"{resource_type} not found: {identifier}"
        else:
            message = f"{resource_type} not found"

        super().__init__(
            message,
            details={
                "resource_type": resource_type,
                "identifier": identifier,
            },
            error_code=f"{resource_type.upper()}_NOT_FOUND",
        )


class QuestAlreadyCompletedError(PreconditionError):
    """Raised when completing a quest that is already completed."""

    def __init__(self, quest_id: str) -> None:
        self.quest_id = quest_id
        super().__init__(
            "Quest already completed",
            details={"quest_id": quest_id},
            error_code="QUEST_ALREADY_COMPLETED",
        )


class InsufficientResourcesError(QuestlineDomainException):
    """
    Raised when a player lacks the resources for an action.

    Args:
        resource: Name of the resource type (e.g., "stat_points")
        required: Amount required for the action
        current: Amount player currently has
    """

    DEFAULT_SEVERITY = ErrorSeverity.INFO
    KIND = ErrorKind.INSUFFICIENT_RESOURCE

    def __init__(self, resource: str, required: int, current: int) -> None:
        self.resource = resource
        self.required = required
        self.current = current
        readable = resource.replace("_", " ")
        super().__init__(
            f"Not enough {readable}: need {required:,}, have {current:,}",
            details={
                "resource": resource,
                "required": required,
                "current": current,
                "deficit": required - current,
            },
            error_code=f"INSUFFICIENT_{resource.upper()}",
        )


class ConcurrentModificationError(QuestlineDomainException):
    """
    Raised when a player record kept changing underneath an operation.

    The save lost the optimistic version check on every attempt; the caller
    may retry the request.
    """

    DEFAULT_SEVERITY = ErrorSeverity.WARNING
    DEFAULT_RETRYABLE = True
    KIND = ErrorKind.CONFLICT

    def __init__(self, account_id: str, attempts: int) -> None:
        self.account_id = account_id
        self.attempts = attempts
        super().__init__(
            "Player record was modified concurrently, please retry",
            details={"account_id": account_id, "attempts": attempts},
            error_code="CONCURRENT_MODIFICATION",
        )


# Utility functions for exception handling patterns


def is_transient_error(exc: Exception) -> bool:
    """Check if an exception represents a transient error that can be retried."""
    if isinstance(exc, QuestlineDomainException):
        return exc.is_retryable
    return False


def get_error_severity(exc: Exception) -> ErrorSeverity:
    """Get the severity level of an exception for logging."""
    if isinstance(exc, QuestlineDomainException):
        return exc.severity
    return ErrorSeverity.ERROR


def should_alert(exc: Exception) -> bool:
    """True if severity is ERROR or CRITICAL."""
    return get_error_severity(exc) in (ErrorSeverity.ERROR, ErrorSeverity.CRITICAL)
