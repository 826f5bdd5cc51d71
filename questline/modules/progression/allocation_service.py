"""
Player stat allocation.

Stat points are earned on level-up and spent here, one attribute per call.
This is the only way stats change; stats in turn raise minute caps and
completion bonuses.
"""

from __future__ import annotations

from typing import Any, Dict

from questline.core.logging.logger import get_logger
from questline.domain.models.player import Player
from questline.modules.rewards.calculator import RewardCalculator
from questline.modules.shared.validators import (
    parse_attribute,
    validate_points,
    validate_resource_cost,
)

logger = get_logger(__name__)


class AllocationService:
    """Stat allocation for player customization."""

    @staticmethod
    def allocate_points(player: Player, stat: Any, points: Any) -> Dict[str, Any]:
        """
        Spend stat points on one attribute.

        Args:
            player: Player to mutate
            stat: Attribute or its name ("physical", "intellectual", "spiritual")
            points: Positive integer amount

        Returns:
            {
                "stat": "physical",
                "allocated": 2,
                "stats": {"physical": 2, "intellectual": 0, "spiritual": 0},
                "statPoints": 1,
                "maxMinutes": 35
            }

        Raises:
            ValidationError: Unknown stat or non-positive/non-integer points
            InsufficientResourcesError: More points requested than available
        """
        attribute = parse_attribute(stat, field="stat")
        amount = validate_points(points)
        validate_resource_cost("stat_points", required=amount, available=player.stat_points)

        player.stat_points -= amount
        player.stats.increase(attribute, amount)

        player.add_domain_event(
            "player.stats_allocated",
            {
                "account_id": player.account_id,
                "stat": attribute.value,
                "points": amount,
                "new_value": player.stats.value_of(attribute),
            },
        )
        logger.info(
            f"Player {player.account_id} allocated {amount} point(s) to {attribute.value}, "
            f"remaining={player.stat_points}",
            extra={"account_id": player.account_id, "stat": attribute.value, "points": amount},
        )

        return {
            "stat": attribute.value,
            "allocated": amount,
            "stats": player.stats.to_dict(),
            "statPoints": player.stat_points,
            "maxMinutes": RewardCalculator.max_minutes_for(attribute, player.stats),
        }
