"""
Rich domain models for Questline.

Models here hold state and structural invariants; the game rules that
mutate them live in questline.modules.
"""

from questline.domain.models.base import AggregateRoot, DomainEvent, Entity
from questline.domain.models.enums import Attribute, QuestKind
from questline.domain.models.player import ActiveDay, Player, PlayerStats
from questline.domain.models.quest import Quest, QuestTemplate

__all__ = [
    "ActiveDay",
    "AggregateRoot",
    "Attribute",
    "DomainEvent",
    "Entity",
    "Player",
    "PlayerStats",
    "Quest",
    "QuestKind",
    "QuestTemplate",
]
