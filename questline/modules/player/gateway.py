"""
Player Gateway - per-account unit of work
=========================================

Purpose
-------
Run one engine operation against one persisted player record with no lost
updates: load -> reconcile -> operate -> save, inside one transaction.

Concurrency
-----------
Records are versioned (optimistic locking). If another request saved the
same account after this one loaded it, the save fails with StaleDataError
and the whole unit of work is retried on freshly loaded state, so the
operation is re-validated against what the winner wrote (a quest the
winner completed is reported as already completed, never rewarded twice).
When retries run out the caller gets a `conflict` Outcome.

Observability
-------------
Every call runs inside a LogContext (account_id, operation). Domain events
buffered on the aggregate are published only after the transaction
commits: logged, then handed to any subscribed listeners.
"""

from __future__ import annotations

from typing import Any, Callable, List, Optional, Tuple

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm.exc import StaleDataError

from questline.core.database.retry_policy import DatabaseRetryPolicy
from questline.core.database.service import DatabaseService
from questline.core.logging.logger import LogContext, get_logger
from questline.domain.models.base import DomainEvent
from questline.modules.engine import Operation, QuestEngine
from questline.modules.player.repository import PlayerRepository
from questline.modules.shared.exceptions import (
    ConcurrentModificationError,
    QuestlineDomainException,
    ValidationError,
)
from questline.modules.shared.outcome import Outcome

logger = get_logger(__name__)

EventListener = Callable[[DomainEvent], None]


class PlayerGateway:
    """
    Async boundary between callers and the synchronous engine.

    Args:
        engine: QuestEngine applying the game rules
        repository: PlayerRepository for record access
        retry_policy: Policy for stale/transient write failures
    """

    def __init__(
        self,
        engine: QuestEngine,
        repository: Optional[PlayerRepository] = None,
        retry_policy: Optional[DatabaseRetryPolicy] = None,
    ) -> None:
        self._engine = engine
        self._repository = repository or PlayerRepository()
        self._retry = retry_policy or DatabaseRetryPolicy.from_config()
        self._listeners: List[EventListener] = []

    @classmethod
    def from_config(cls) -> PlayerGateway:
        return cls(QuestEngine.from_config())

    def subscribe(self, listener: EventListener) -> None:
        """Receive each domain event after its transaction commits."""
        self._listeners.append(listener)

    async def execute(self, account_id: str, operation: Operation | str, **arguments: Any) -> Outcome:
        """
        Apply one operation to the account's persisted player.

        Returns:
            The engine's Outcome, or a conflict Outcome when concurrent
            writers kept winning the version race.

        Raises:
            OperationalError / DBAPIError: Database unavailable after retries
        """
        try:
            op = Operation.parse(operation)
        except ValidationError as exc:
            return Outcome.failure(exc)

        async with LogContext(account_id=account_id, operation=op.value, component="player_gateway"):
            try:
                outcome, events = await self._retry.execute(
                    lambda: self._unit_of_work(account_id, op, arguments),
                    operation_name=f"player.{op.value}",
                    context={"account_id": account_id},
                )
            except (StaleDataError, IntegrityError) as exc:
                conflict = ConcurrentModificationError(account_id, self._retry.max_attempts)
                logger.warning(
                    "Player update lost every version race",
                    extra={
                        "account_id": account_id,
                        "attempts": self._retry.max_attempts,
                        "error_type": type(exc).__name__,
                    },
                )
                return Outcome.failure(conflict)

            self._publish(events)
            return outcome

    async def _unit_of_work(
        self, account_id: str, op: Operation, arguments: dict[str, Any]
    ) -> Tuple[Outcome, List[DomainEvent]]:
        async with DatabaseService.get_transaction() as session:
            try:
                loaded = await self._repository.load(session, account_id)
            except QuestlineDomainException as exc:
                logger.error(
                    "Stored player snapshot is unreadable",
                    extra={"account_id": account_id, **exc.to_dict()},
                )
                return Outcome.failure(exc), []

            outcome = self._engine.execute(loaded.player, op, **arguments)
            if outcome.changed:
                await self._repository.save(session, loaded)

            return outcome, loaded.player.clear_domain_events()

    def _publish(self, events: List[DomainEvent]) -> None:
        for event in events:
            logger.info(
                f"Domain event: {event.event_name}",
                extra={"event_name": event.event_name, "event_payload": event.payload},
            )
            for listener in self._listeners:
                listener(event)
