"""
Progression Engine

Purpose
-------
Apply earned XP and gold to a player and resolve level-ups.

Business Rules
--------------
- Gold is added directly; it has no leveling effect
- XP is added, then while xp >= xp_to_next(level): subtract the
  threshold, gain a level, gain 3 stat points
- The threshold is re-read from the *current* level each iteration
- Never fails: inputs are validated upstream
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from questline.domain.models.player import Player
from questline.modules.shared.base_service import BaseService
from questline.modules.shared.constants import STAT_POINTS_PER_LEVEL
from questline.modules.shared.formulas import xp_to_next


@dataclass(frozen=True)
class ProgressionSnapshot:
    level: int
    xp: int
    gold: int
    stat_points: int

    @classmethod
    def of(cls, player: Player) -> ProgressionSnapshot:
        return cls(level=player.level, xp=player.xp, gold=player.gold, stat_points=player.stat_points)

    def to_dict(self) -> Dict[str, int]:
        return {
            "level": self.level,
            "xp": self.xp,
            "gold": self.gold,
            "statPoints": self.stat_points,
        }


@dataclass(frozen=True)
class LevelUpResult:
    """What applying a reward did to the player's progression."""

    leveled_up: bool
    levels_gained: int
    before: ProgressionSnapshot
    after: ProgressionSnapshot

    def to_dict(self) -> Dict[str, Any]:
        return {
            "leveledUp": self.leveled_up,
            "levelsGained": self.levels_gained,
            "before": self.before.to_dict(),
            "after": self.after.to_dict(),
        }


class ProgressionService(BaseService):
    """Reward application and the level-up loop."""

    def apply_rewards(self, player: Player, xp: int, gold: int) -> LevelUpResult:
        """
        Add XP and gold, then level up as many times as the XP covers.

        Parameters
        ----------
        player : Player
            Player to mutate
        xp, gold : int
            Non-negative amounts

        Returns
        -------
        LevelUpResult
            Level-up flag and count with before/after snapshots

        Examples
        --------
        >>> player = Player("acct-1", xp=90)
        >>> ProgressionService().apply_rewards(player, xp=20, gold=0).levels_gained
        1
        >>> player.level, player.xp, player.stat_points
        (2, 10, 3)
        """
        before = ProgressionSnapshot.of(player)

        player.gold += gold
        player.xp += xp

        levels_gained = 0
        while player.xp >= xp_to_next(player.level):
            player.xp -= xp_to_next(player.level)
            player.level += 1
            player.stat_points += STAT_POINTS_PER_LEVEL
            levels_gained += 1
            player.add_domain_event(
                "player.leveled_up",
                {
                    "account_id": player.account_id,
                    "old_level": player.level - 1,
                    "new_level": player.level,
                },
            )

        after = ProgressionSnapshot.of(player)
        player.add_domain_event(
            "player.rewards_applied",
            {"account_id": player.account_id, "xp": xp, "gold": gold, "levels_gained": levels_gained},
        )

        if levels_gained:
            self.log.info(
                f"Player {player.account_id} leveled up: {before.level} -> {after.level}",
                extra={
                    "account_id": player.account_id,
                    "levels_gained": levels_gained,
                    "stat_points": player.stat_points,
                },
            )

        return LevelUpResult(
            leveled_up=levels_gained > 0,
            levels_gained=levels_gained,
            before=before,
            after=after,
        )
