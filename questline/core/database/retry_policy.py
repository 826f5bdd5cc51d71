"""
Retry policy for player-record units of work.

Player records are saved read-modify-write behind an optimistic version
check. The loser of a race gets StaleDataError (or IntegrityError when two
first inserts collide); the policy re-runs the whole unit of work so the
operation is re-applied to fresh state, or rejected by the engine when it
no longer applies.

Backoff: min(initial * 2^(attempt-1), max) + random(0, jitter) ms.
"""

from __future__ import annotations

import asyncio
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Optional, Tuple, Type, TypeVar

from sqlalchemy.exc import DBAPIError
from sqlalchemy.orm.exc import StaleDataError

from questline.core.config.config import Config
from questline.core.logging.logger import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


@dataclass
class DatabaseRetryConfig:
    max_attempts: int
    initial_backoff_ms: int
    max_backoff_ms: int
    jitter_ms: int
    # DBAPIError covers IntegrityError and connection-level OperationalError
    retriable_exceptions: Tuple[Type[BaseException], ...] = (StaleDataError, DBAPIError)

    @classmethod
    def from_config(cls) -> DatabaseRetryConfig:
        return cls(
            max_attempts=max(1, int(Config.DATABASE_RETRY_MAX_ATTEMPTS)),
            initial_backoff_ms=int(Config.DATABASE_RETRY_INITIAL_BACKOFF_MS),
            max_backoff_ms=int(Config.DATABASE_RETRY_MAX_BACKOFF_MS),
            jitter_ms=int(Config.DATABASE_RETRY_JITTER_MS),
        )


class DatabaseRetryPolicy:
    """
    Run a zero-argument coroutine factory until it succeeds, a
    non-retriable error occurs, or max_attempts is reached.

    >>> policy = DatabaseRetryPolicy.from_config()
    >>> outcome = await policy.execute(unit_of_work, operation_name="player.complete_quest")
    """

    def __init__(self, config: DatabaseRetryConfig) -> None:
        self._config = config

    @classmethod
    def from_config(cls) -> DatabaseRetryPolicy:
        return cls(DatabaseRetryConfig.from_config())

    @property
    def max_attempts(self) -> int:
        return self._config.max_attempts

    def is_retriable(self, exc: BaseException) -> bool:
        return isinstance(exc, self._config.retriable_exceptions)

    def _compute_backoff_ms(self, attempt: int) -> int:
        backoff = min(self._config.initial_backoff_ms * 2 ** (attempt - 1), self._config.max_backoff_ms)
        if self._config.jitter_ms > 0:
            backoff += random.randint(0, self._config.jitter_ms)
        return backoff

    async def execute(
        self,
        operation: Callable[[], Awaitable[T]],
        *,
        operation_name: str,
        context: Optional[Dict[str, Any]] = None,
    ) -> T:
        """
        Raises:
            The last retriable error once attempts run out, or any
            non-retriable error immediately.
        """
        extra = {**(context or {}), "operation": operation_name}

        for attempt in range(1, self._config.max_attempts + 1):
            try:
                return await operation()
            except Exception as exc:
                if not self.is_retriable(exc) or attempt == self._config.max_attempts:
                    raise
                backoff_ms = self._compute_backoff_ms(attempt)
                logger.info(
                    "Retrying unit of work",
                    extra={
                        **extra,
                        "attempt": attempt,
                        "error_type": type(exc).__name__,
                        "backoff_ms": backoff_ms,
                    },
                )
                await asyncio.sleep(backoff_ms / 1000.0)

        raise AssertionError("unreachable: max_attempts is at least 1")
