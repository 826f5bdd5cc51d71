"""
Reward Calculator

Purpose
-------
Turn a quest's type and requested duration into validated minutes and the
rewards frozen onto the quest, and at completion time apply the separate
bonus earned from the player's current stats.

Design Notes
------------
The two steps are intentionally distinct:

1. `quote()` runs at creation. Its rewards are stored on the quest so the
   promised reward never changes afterwards.
2. `completion_reward()` runs at completion. It multiplies the stored
   rewards by bonuses from the player's *current* stats, rewarding stat
   investment made before finishing queued quests. Its result is applied
   to the player but never written back to the quest.

Stateless: every method is a pure function of its arguments.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Dict

from questline.domain.models.enums import Attribute
from questline.domain.models.player import PlayerStats
from questline.domain.models.quest import Quest
from questline.modules.shared import formulas
from questline.modules.shared.constants import (
    GOLD_REWARD_MAX,
    GOLD_REWARD_MIN,
    XP_REWARD_MAX,
    XP_REWARD_MIN,
)
from questline.modules.shared.validators import validate_minutes


@dataclass(frozen=True)
class RewardQuote:
    """Validated duration and creation-time rewards."""

    minutes: int
    xp_reward: int
    gold_reward: int
    max_minutes: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            "minutes": self.minutes,
            "xpReward": self.xp_reward,
            "goldReward": self.gold_reward,
            "maxMinutes": self.max_minutes,
        }


@dataclass(frozen=True)
class CompletionReward:
    """Rewards actually applied to the player when a quest completes."""

    xp: int
    gold: int
    xp_multiplier: float
    gold_multiplier: float

    def to_dict(self) -> Dict[str, Any]:
        return {
            "xp": self.xp,
            "gold": self.gold,
            "xpMultiplier": self.xp_multiplier,
            "goldMultiplier": self.gold_multiplier,
        }


class RewardCalculator:
    """Pure reward and minute-cap rules."""

    @staticmethod
    def max_minutes_for(quest_type: Attribute, stats: PlayerStats) -> int:
        """Minute cap for a quest type, from the stat keyed by that type."""
        return formulas.max_minutes_for_stat(stats.value_of(quest_type))

    @staticmethod
    def minute_caps(stats: PlayerStats) -> Dict[str, int]:
        return {
            attribute.value: RewardCalculator.max_minutes_for(attribute, stats)
            for attribute in Attribute
        }

    @staticmethod
    def compute_base_reward(quest_type: Attribute, minutes: int) -> tuple[int, int]:
        """
        Creation-time (xp, gold), clamped to [1, 999] and [0, 99].

        Example:
            >>> RewardCalculator.compute_base_reward(Attribute.PHYSICAL, 25)
            (50, 2)
        """
        xp = formulas.clamp(
            formulas.round_half_up(formulas.base_xp(quest_type, minutes)),
            XP_REWARD_MIN,
            XP_REWARD_MAX,
        )
        gold = formulas.clamp(
            formulas.round_half_up(formulas.base_gold(quest_type, minutes)),
            GOLD_REWARD_MIN,
            GOLD_REWARD_MAX,
        )
        return xp, gold

    @staticmethod
    def quote(quest_type: Attribute, raw_minutes: Any, stats: PlayerStats) -> RewardQuote:
        """
        Validate requested minutes against the cap and price the quest.

        Raises:
            ValidationError: If the minutes are not numeric or out of range
        """
        max_minutes = RewardCalculator.max_minutes_for(quest_type, stats)
        minutes = validate_minutes(raw_minutes, max_minutes)
        xp, gold = RewardCalculator.compute_base_reward(quest_type, minutes)
        return RewardQuote(
            minutes=minutes,
            xp_reward=xp,
            gold_reward=gold,
            max_minutes=max_minutes,
        )

    @staticmethod
    def completion_bonus_percents(quest_type: Attribute, stats: PlayerStats) -> tuple[int, int]:
        """
        Completion-time bonus percents (xp, gold) from current stats.

        Example:
            >>> RewardCalculator.completion_bonus_percents(
            ...     Attribute.SPIRITUAL, PlayerStats(spiritual=5))
            (10, 10)
        """
        xp_bonus = formulas.xp_bonus_percent(quest_type, stats.physical, stats.spiritual)
        gold_bonus = formulas.gold_bonus_percent(quest_type, stats.intellectual, stats.spiritual)
        return xp_bonus, gold_bonus

    @staticmethod
    def completion_reward(quest: Quest, stats: PlayerStats) -> CompletionReward:
        """Apply current-stat bonuses to a quest's frozen rewards."""
        xp_bonus, gold_bonus = RewardCalculator.completion_bonus_percents(quest.type, stats)
        return CompletionReward(
            xp=max(0, formulas.apply_bonus_percent(quest.xp_reward, xp_bonus)),
            gold=max(0, formulas.apply_bonus_percent(quest.gold_reward, gold_bonus)),
            xp_multiplier=1 + xp_bonus / 100,
            gold_multiplier=1 + gold_bonus / 100,
        )
