"""
Questline Logging Infrastructure

Structured, queue-backed logging with ContextVar-bound account and
operation context (`LogContext`).
"""

from questline.core.logging.logger import (
    ContextFilter,
    JSONFormatter,
    LogContext,
    current_log_context,
    get_logger,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    "setup_logging",
    "shutdown_logging",
    "get_logger",
    "LogContext",
    "current_log_context",
    "ContextFilter",
    "JSONFormatter",
]
