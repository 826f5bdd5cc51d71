"""
Questline Gameplay Constants

Purpose
-------
Gameplay constants for rewards, leveling, minute caps, and input limits.
Infrastructure concerns (database pools, logging) belong in
questline.core.config.

Design Notes
------------
- Values are annotated with typing.Final to signal immutability
- Grouped by game system
- No side effects at import time
"""

from __future__ import annotations

from typing import Final

# ============================================================================
# LEVELING SYSTEM
# ============================================================================

STARTING_LEVEL: Final[int] = 1
XP_CURVE_BASE: Final[int] = 100  # XP needed to clear level 1
XP_CURVE_STEP: Final[int] = 25  # Extra XP needed per level above 1
STAT_POINTS_PER_LEVEL: Final[int] = 3

# ============================================================================
# MINUTE CAPS
# ============================================================================

DEFAULT_QUEST_MINUTES: Final[int] = 25
MIN_QUEST_MINUTES: Final[int] = 1
MINUTE_CAP_BASE: Final[int] = 25
MINUTE_CAP_PER_STAT: Final[int] = 5
MINUTE_CAP_FLOOR: Final[int] = 25
MINUTE_CAP_CEILING: Final[int] = 180

# ============================================================================
# CREATION-TIME REWARDS (frozen onto the quest)
# ============================================================================

PHYSICAL_XP_PER_MINUTE: Final[int] = 2
DEFAULT_XP_PER_MINUTE: Final[int] = 1

PHYSICAL_GOLD_BASE: Final[int] = 2
INTELLECTUAL_GOLD_BASE: Final[int] = 5
SPIRITUAL_GOLD_BASE: Final[int] = 4
GOLD_BONUS_MINUTES: Final[int] = 30  # +1 gold per full block of minutes

XP_REWARD_MIN: Final[int] = 1
XP_REWARD_MAX: Final[int] = 999
GOLD_REWARD_MIN: Final[int] = 0
GOLD_REWARD_MAX: Final[int] = 99

# ============================================================================
# COMPLETION-TIME MULTIPLIERS (current stats)
# ============================================================================

# Bonuses are whole percents so multiplied rewards round exactly.
STAT_BONUS_PERCENT_PER_POINT: Final[int] = 2
PHYSICAL_XP_BONUS_CAP_PERCENT: Final[int] = 30
INTELLECTUAL_GOLD_BONUS_CAP_PERCENT: Final[int] = 30
SPIRITUAL_BONUS_CAP_PERCENT: Final[int] = 20

# ============================================================================
# INPUT LIMITS
# ============================================================================

TITLE_MIN_LENGTH: Final[int] = 3
TITLE_MAX_LENGTH: Final[int] = 120
NOTE_MAX_LENGTH: Final[int] = 500
