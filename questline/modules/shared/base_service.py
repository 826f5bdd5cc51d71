"""
Base Service Foundation

Purpose
-------
Provides the foundational class for the engine services. Services implement
pure game rules over an in-memory Player aggregate; they neither load nor
save records.

Design Notes
------------
This base class provides:
- Structured logging with operation context
- Severity-aware logging of domain failures

What this class does NOT do:
- Manage database transactions (that's DatabaseService's job)
- Convert exceptions into outcomes (that's QuestEngine's job)

Usage
-----
    class DayCycleService(BaseService):
        def start_day(self, player):
            ...
            self.log_operation("day.start", account_id=player.id)
"""

from __future__ import annotations

import logging
from typing import Any, Optional

from questline.core.logging.logger import get_logger
from questline.modules.shared.exceptions import (
    ErrorSeverity,
    QuestlineDomainException,
    get_error_severity,
    should_alert,
)

_SEVERITY_LEVELS = {
    ErrorSeverity.DEBUG: logging.DEBUG,
    ErrorSeverity.INFO: logging.INFO,
    ErrorSeverity.WARNING: logging.WARNING,
    ErrorSeverity.ERROR: logging.ERROR,
    ErrorSeverity.CRITICAL: logging.CRITICAL,
}


class BaseService:
    """
    Base class for all engine services.

    Args:
        logger: Structured logger instance (defaults to the subclass module's)
    """

    def __init__(self, logger: Optional[logging.Logger] = None) -> None:
        self.log = logger or get_logger(type(self).__module__)

    def log_operation(self, operation: str, **context: Any) -> None:
        """
        Log a service operation with structured context.

        Args:
            operation: Name of the operation being performed
            **context: Additional context data
        """
        self.log.info(
            f"Service operation: {operation}",
            extra={"operation": operation, **context},
        )

    def log_error(self, operation: str, error: Exception, **context: Any) -> None:
        """
        Log a service failure at the level its severity calls for.

        Domain exceptions are expected outcomes and log at their own
        severity (usually INFO); anything else logs at ERROR with traceback.
        """
        level = _SEVERITY_LEVELS[get_error_severity(error)]
        extra = {
            "operation": operation,
            "error_type": type(error).__name__,
            "error_message": str(error),
            **context,
        }
        if isinstance(error, QuestlineDomainException):
            extra["error_code"] = error.error_code
            extra["error_kind"] = error.kind.value
            self.log.log(
                level,
                f"Service rejected {operation}: {error.message}",
                extra=extra,
                exc_info=error if should_alert(error) else None,
            )
        else:
            self.log.log(level, f"Service error during {operation}: {error}", extra=extra, exc_info=error)
