"""
Closed enumerations shared by the domain models.

Quest types and stat keys are the same three attributes: a quest's type
selects both its reward formula and the stat that caps its duration.
"""

from __future__ import annotations

from enum import Enum


class Attribute(str, Enum):
    """The three trainable attributes (quest type and stat key)."""

    PHYSICAL = "physical"
    INTELLECTUAL = "intellectual"
    SPIRITUAL = "spiritual"

    @classmethod
    def values(cls) -> list[str]:
        return [member.value for member in cls]


class QuestKind(str, Enum):
    """How a quest was created."""

    TEMPLATE = "template"
    QUICK = "quick"
