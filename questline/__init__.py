"""
Questline: a gamified daily task list.

Players log quests, complete them for XP and gold, level up, and spend stat
points to unlock longer quests. The progression and day-cycle engine lives
in ``questline.modules``; ``questline.modules.player.gateway`` wires it to
per-account persistence.
"""

__version__ = "1.0.0"
