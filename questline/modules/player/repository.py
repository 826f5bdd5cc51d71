"""
Player Repository

Purpose
-------
Load and save whole Player aggregates, one PlayerRecord row per account.

Design Notes
------------
- Session-first: callers own the transaction (DatabaseService.get_transaction)
- No business logic; snapshot conversion is the aggregate's job
- Saves are version-checked by the ORM; a concurrent writer surfaces as
  StaleDataError on flush, which the gateway retries
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING, Optional

from questline.core.logging.logger import get_logger
from questline.database.models.player_record import PlayerRecord
from questline.domain.models.player import Player

if TYPE_CHECKING:
    from logging import Logger

    from sqlalchemy.ext.asyncio import AsyncSession


@dataclass
class LoadedPlayer:
    """A Player plus the row it came from (None for a new account)."""

    player: Player
    record: Optional[PlayerRecord]

    @property
    def version(self) -> Optional[int]:
        return self.record.version if self.record is not None else None


class PlayerRepository:
    """Data access for PlayerRecord rows."""

    def __init__(self, logger: Optional[Logger] = None) -> None:
        self.log = logger or get_logger(__name__)

    async def get(self, session: AsyncSession, account_id: str) -> Optional[PlayerRecord]:
        record = await session.get(PlayerRecord, account_id, populate_existing=True)
        self.log.debug(
            "Repository.get: PlayerRecord",
            extra={"account_id": account_id, "found": record is not None},
        )
        return record

    async def load(self, session: AsyncSession, account_id: str) -> LoadedPlayer:
        """
        Load the account's Player, or a fresh level-1 Player if none exists.

        Raises:
            ValidationError: If the stored snapshot is malformed
        """
        record = await self.get(session, account_id)
        payload = record.payload if record is not None else None
        return LoadedPlayer(player=Player.from_snapshot(account_id, payload), record=record)

    async def save(self, session: AsyncSession, loaded: LoadedPlayer) -> PlayerRecord:
        """
        Write the player snapshot back and flush.

        Raises:
            StaleDataError: The row changed since it was loaded
            IntegrityError: Another writer created the row first
        """
        snapshot = loaded.player.to_snapshot()

        if loaded.record is None:
            record = PlayerRecord(account_id=loaded.player.account_id, payload=snapshot)
            session.add(record)
            loaded.record = record
        else:
            loaded.record.payload = snapshot

        await session.flush()
        self.log.debug(
            "Repository.save: PlayerRecord",
            extra={"account_id": loaded.player.account_id, "version": loaded.record.version},
        )
        return loaded.record
