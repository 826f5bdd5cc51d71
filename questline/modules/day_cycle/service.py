"""
Day Cycle Manager

Purpose
-------
Define "what day is it" for quest-list validity and keep each player's
active day consistent with that definition.

Responsibilities
----------------
- Compute the canonical YYYY-MM-DD day key for a moment in time
- Reconcile a stale active day (silently discarding its quest list)
- Idempotent day start

Non-Responsibilities
--------------------
- Quest creation or completion (QuestService)
- Persistence (PlayerGateway)

Design Notes
------------
There is exactly one definition of "today": the server clock converted to
the configured timezone, shifted back by the configured boundary hour.
Reconciliation and day start both go through `today_key()`, so an active
day can never flip-flop between the two.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Callable, Optional

from questline.core.config import Config
from questline.domain.models.player import ActiveDay, Player
from questline.modules.shared.base_service import BaseService

Clock = Callable[[], datetime]


def utc_clock() -> datetime:
    return datetime.now(timezone.utc)


@dataclass(frozen=True)
class DayStartResult:
    """Outcome of start_day."""

    active_day: ActiveDay
    already_started: bool
    reset_stale_day: bool


class DayCycleService(BaseService):
    """
    Day key computation and active-day lifecycle.

    Args:
        boundary_hour: Hour (0..23) at which a new day begins
        tz: Timezone the day key is computed in
        clock: Source of the current time (timezone-aware)
    """

    def __init__(
        self,
        boundary_hour: int = 0,
        tz: Optional[tzinfo] = None,
        clock: Clock = utc_clock,
    ) -> None:
        super().__init__()
        if not 0 <= boundary_hour <= 23:
            raise ValueError(f"boundary_hour must be within 0..23, got {boundary_hour}")
        self.boundary_hour = boundary_hour
        self.tz = tz or timezone.utc
        self.clock = clock

    @classmethod
    def from_config(cls, clock: Clock = utc_clock) -> DayCycleService:
        return cls(
            boundary_hour=Config.DAY_BOUNDARY_HOUR,
            tz=Config.day_timezone(),
            clock=clock,
        )

    def now(self) -> datetime:
        return self.clock()

    def compute_day_key(self, now: datetime) -> str:
        """
        Map a moment to its day key.

        Naive datetimes are taken as UTC. With a boundary hour of 4,
        03:59 still belongs to the previous day.

        Example:
            >>> DayCycleService(boundary_hour=4).compute_day_key(
            ...     datetime(2024, 3, 10, 3, 59, tzinfo=timezone.utc))
            '2024-03-09'
        """
        if now.tzinfo is None:
            now = now.replace(tzinfo=timezone.utc)
        shifted = now.astimezone(self.tz) - timedelta(hours=self.boundary_hour)
        return shifted.date().isoformat()

    def today_key(self) -> str:
        return self.compute_day_key(self.now())

    def reconcile(self, player: Player) -> bool:
        """
        Invalidate the player's active day if it is no longer today.

        Returns
        -------
        bool
            True if the active day and its quests were discarded.
        """
        if player.active_day is None:
            return False

        today = self.today_key()
        if player.active_day.day_key == today:
            return False

        stale_key = player.active_day.day_key
        discarded = len(player.quests)
        player.clear_day()
        player.add_domain_event(
            "player.day_reset",
            {
                "account_id": player.account_id,
                "stale_day_key": stale_key,
                "today_key": today,
                "discarded_quests": discarded,
            },
        )
        self.log.info(
            "Stale active day discarded",
            extra={
                "account_id": player.account_id,
                "stale_day_key": stale_key,
                "today_key": today,
                "discarded_quests": discarded,
            },
        )
        return True

    def start_day(self, player: Player) -> DayStartResult:
        """
        Start today's day for the player.

        Reconciles first. Starting an already-started day is a no-op that
        reports `already_started` and keeps the existing quests.
        """
        reset = self.reconcile(player)

        if player.active_day is not None:
            return DayStartResult(
                active_day=player.active_day,
                already_started=True,
                reset_stale_day=reset,
            )

        now = self.now()
        player.active_day = ActiveDay(day_key=self.compute_day_key(now), started_at=now)
        player.quests = []
        player.add_domain_event(
            "player.day_started",
            {"account_id": player.account_id, "day_key": player.active_day.day_key},
        )
        self.log_operation(
            "day.start",
            account_id=player.account_id,
            day_key=player.active_day.day_key,
        )
        return DayStartResult(
            active_day=player.active_day,
            already_started=False,
            reset_stale_day=reset,
        )
