"""
Database subsystem for Questline.

Exports the async engine/session service, the declarative base, and the
retry policy used for optimistic-version conflicts.
"""

from questline.core.database.base import Base, TimestampMixin
from questline.core.database.retry_policy import DatabaseRetryConfig, DatabaseRetryPolicy
from questline.core.database.service import (
    DatabaseInitializationError,
    DatabaseNotInitializedError,
    DatabaseService,
)

__all__ = [
    "Base",
    "TimestampMixin",
    "DatabaseService",
    "DatabaseInitializationError",
    "DatabaseNotInitializedError",
    "DatabaseRetryConfig",
    "DatabaseRetryPolicy",
]
