"""
Questline Game Formulas

Purpose
-------
Pure calculation functions for game mechanics: the leveling curve, minute
caps, creation-time base rewards, and completion-time stat bonuses.

Design Notes
------------
- Pure functions only (no side effects)
- No database access
- No config access (all parameters passed in)
- Integer arithmetic wherever a result is rounded, so half-way values
  round up exactly instead of drifting with float error

Usage
-----
    from questline.modules.shared.formulas import xp_to_next, max_minutes_for_stat

    threshold = xp_to_next(3)
    cap = max_minutes_for_stat(4)
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal

from questline.domain.models.enums import Attribute
from questline.modules.shared.constants import (
    DEFAULT_XP_PER_MINUTE,
    GOLD_BONUS_MINUTES,
    INTELLECTUAL_GOLD_BASE,
    INTELLECTUAL_GOLD_BONUS_CAP_PERCENT,
    MINUTE_CAP_BASE,
    MINUTE_CAP_CEILING,
    MINUTE_CAP_FLOOR,
    MINUTE_CAP_PER_STAT,
    PHYSICAL_GOLD_BASE,
    PHYSICAL_XP_BONUS_CAP_PERCENT,
    PHYSICAL_XP_PER_MINUTE,
    SPIRITUAL_BONUS_CAP_PERCENT,
    SPIRITUAL_GOLD_BASE,
    STAT_BONUS_PERCENT_PER_POINT,
    XP_CURVE_BASE,
    XP_CURVE_STEP,
)

_GOLD_BASE = {
    Attribute.PHYSICAL: PHYSICAL_GOLD_BASE,
    Attribute.INTELLECTUAL: INTELLECTUAL_GOLD_BASE,
    Attribute.SPIRITUAL: SPIRITUAL_GOLD_BASE,
}


def clamp(value: int, minimum: int, maximum: int) -> int:
    """
    Constrain value to the closed range [minimum, maximum].

    Example:
        >>> clamp(200, 25, 180)
        180
    """
    return max(minimum, min(maximum, value))


def round_half_up(value: int | float | Decimal) -> int:
    """
    Round to the nearest integer, with halves rounding away from zero.

    Python's built-in round() uses banker's rounding (round(2.5) == 2),
    which is not what players expect from a reward display.

    Example:
        >>> round_half_up(2.5)
        3
        >>> round_half_up(42.4)
        42
    """
    if isinstance(value, int):
        return value
    if not isinstance(value, Decimal):
        value = Decimal(str(value))
    return int(value.quantize(Decimal(1), rounding=ROUND_HALF_UP))


def xp_to_next(level: int) -> int:
    """
    XP required to clear the given level.

    Linear and strictly increasing, so the level-up loop always terminates.

    Example:
        >>> xp_to_next(1)
        100
        >>> xp_to_next(2)
        125
    """
    return XP_CURVE_BASE + (level - 1) * XP_CURVE_STEP


def max_minutes_for_stat(stat_value: int) -> int:
    """
    Longest quest duration allowed by the stat tied to a quest's type.

    Example:
        >>> max_minutes_for_stat(0)
        25
        >>> max_minutes_for_stat(10)
        75
        >>> max_minutes_for_stat(100)
        180
    """
    return clamp(
        MINUTE_CAP_BASE + stat_value * MINUTE_CAP_PER_STAT,
        MINUTE_CAP_FLOOR,
        MINUTE_CAP_CEILING,
    )


def xp_per_minute(quest_type: Attribute) -> int:
    if quest_type is Attribute.PHYSICAL:
        return PHYSICAL_XP_PER_MINUTE
    return DEFAULT_XP_PER_MINUTE


def gold_base(quest_type: Attribute) -> int:
    return _GOLD_BASE[quest_type]


def base_xp(quest_type: Attribute, minutes: int) -> int:
    """
    Unclamped creation-time XP.

    Example:
        >>> base_xp(Attribute.PHYSICAL, 25)
        50
    """
    return minutes * xp_per_minute(quest_type)


def base_gold(quest_type: Attribute, minutes: int) -> int:
    """
    Unclamped creation-time gold: type base plus one per full 30 minutes.

    Example:
        >>> base_gold(Attribute.INTELLECTUAL, 60)
        7
    """
    return gold_base(quest_type) + minutes // GOLD_BONUS_MINUTES


def stat_bonus_percent(stat_value: int, cap_percent: int) -> int:
    """
    Percent bonus granted by a stat, capped.

    Example:
        >>> stat_bonus_percent(5, 30)
        10
        >>> stat_bonus_percent(50, 20)
        20
    """
    return clamp(stat_value * STAT_BONUS_PERCENT_PER_POINT, 0, cap_percent)


def xp_bonus_percent(quest_type: Attribute, physical: int, spiritual: int) -> int:
    """Completion XP bonus: physical and spiritual quests only."""
    if quest_type is Attribute.PHYSICAL:
        return stat_bonus_percent(physical, PHYSICAL_XP_BONUS_CAP_PERCENT)
    if quest_type is Attribute.SPIRITUAL:
        return stat_bonus_percent(spiritual, SPIRITUAL_BONUS_CAP_PERCENT)
    return 0


def gold_bonus_percent(quest_type: Attribute, intellectual: int, spiritual: int) -> int:
    """Completion gold bonus: intellectual and spiritual quests only."""
    if quest_type is Attribute.INTELLECTUAL:
        return stat_bonus_percent(intellectual, INTELLECTUAL_GOLD_BONUS_CAP_PERCENT)
    if quest_type is Attribute.SPIRITUAL:
        return stat_bonus_percent(spiritual, SPIRITUAL_BONUS_CAP_PERCENT)
    return 0


def apply_bonus_percent(amount: int, bonus_percent: int) -> int:
    """
    Multiply amount by (1 + bonus_percent / 100), rounding half up.

    Example:
        >>> apply_bonus_percent(50, 10)
        55
        >>> apply_bonus_percent(25, 2)
        26
    """
    scaled = amount * (100 + bonus_percent)
    return (scaled * 2 + 100) // 200
