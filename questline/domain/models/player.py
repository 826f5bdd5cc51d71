"""
Player Domain Model for Questline.

Purpose
-------
Rich domain model for one account's game state: progression counters,
attribute stats, the active day with its quest list, and the template
library. The whole aggregate is loaded and saved as a unit.

Responsibilities
----------------
- Hold player state with its structural invariants
- Quest list and template library lookups and mutations
- Convert to and from the plain snapshot exchanged with callers and
  stored by the repository
- Buffer domain events raised by the engine services

Non-Responsibilities
--------------------
- Game rules: rewards, leveling, day rollover (engine services)
- Persistence (PlayerRepository)

Usage Example
-------------
>>> player = Player.new("acct-1")
>>> player.level, player.xp, player.stats.physical
(1, 0, 0)
>>> Player.from_snapshot("acct-1", player.to_snapshot()).level
1
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, List, Optional

from questline.domain.models.base import AggregateRoot
from questline.domain.models.enums import Attribute
from questline.domain.models.quest import Quest, QuestTemplate
from questline.modules.shared.exceptions import ValidationError


# ============================================================================
# VALUE OBJECTS
# ============================================================================


@dataclass
class PlayerStats:
    """
    Invested attribute points, one counter per Attribute.

    Only stat allocation changes these; they feed minute caps and
    completion bonuses.
    """

    physical: int = 0
    intellectual: int = 0
    spiritual: int = 0

    def value_of(self, attribute: Attribute) -> int:
        return getattr(self, attribute.value)

    def increase(self, attribute: Attribute, points: int) -> None:
        setattr(self, attribute.value, self.value_of(attribute) + points)

    def to_dict(self) -> Dict[str, int]:
        return {attribute.value: self.value_of(attribute) for attribute in Attribute}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> PlayerStats:
        data = data or {}
        return cls(**{attribute.value: int(data.get(attribute.value, 0)) for attribute in Attribute})


@dataclass(frozen=True)
class ActiveDay:
    """Marks that the day identified by day_key has been started."""

    day_key: str
    started_at: datetime

    def to_dict(self) -> Dict[str, str]:
        return {"dayKey": self.day_key, "startedAt": self.started_at.isoformat()}

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> Optional[ActiveDay]:
        """Stored records encode "no active day" as null or as {"dayKey": null}."""
        if not data or not data.get("dayKey"):
            return None
        return cls(day_key=data["dayKey"], started_at=datetime.fromisoformat(data["startedAt"]))


# ============================================================================
# AGGREGATE ROOT
# ============================================================================


class Player(AggregateRoot):
    """
    Player aggregate root, keyed by account id.

    Attributes are mutated in place by the engine services, which also
    record the domain events describing each change.

    Invariants
    ----------
    - level >= 1; xp, gold, stat_points and every stat >= 0
    - quests is empty whenever active_day is None
    - quests are ordered most recent first
    """

    def __init__(
        self,
        account_id: str,
        *,
        level: int = 1,
        xp: int = 0,
        gold: int = 0,
        stat_points: int = 0,
        stats: Optional[PlayerStats] = None,
        active_day: Optional[ActiveDay] = None,
        quests: Optional[List[Quest]] = None,
        templates: Optional[List[QuestTemplate]] = None,
    ) -> None:
        super().__init__(account_id)
        self.level = level
        self.xp = xp
        self.gold = gold
        self.stat_points = stat_points
        self.stats = stats or PlayerStats()
        self.active_day = active_day
        self.quests: List[Quest] = list(quests or [])
        self.templates: List[QuestTemplate] = list(templates or [])

    @classmethod
    def new(cls, account_id: str) -> Player:
        """Fresh level-1 player with no active day."""
        return cls(account_id)

    @property
    def account_id(self) -> str:
        return self.id

    # ========================================================================
    # QUESTS
    # ========================================================================

    def find_quest(self, quest_id: str) -> Optional[Quest]:
        return next((quest for quest in self.quests if quest.id == quest_id), None)

    def add_quest(self, quest: Quest) -> None:
        self.quests.insert(0, quest)

    def remove_quest(self, quest: Quest) -> None:
        self.quests = [q for q in self.quests if q.id != quest.id]

    def pending_quests(self) -> List[Quest]:
        return [quest for quest in self.quests if not quest.completed]

    def clear_day(self) -> None:
        """Drop the active day and its whole quest list."""
        self.active_day = None
        self.quests = []

    # ========================================================================
    # TEMPLATES
    # ========================================================================

    def find_template(self, template_id: str) -> Optional[QuestTemplate]:
        """Return the template only if it exists and is not archived."""
        for template in self.templates:
            if template.id == template_id and not template.archived:
                return template
        return None

    def add_template(self, template: QuestTemplate) -> None:
        self.templates.insert(0, template)

    def active_templates(self) -> List[QuestTemplate]:
        return [template for template in self.templates if not template.archived]

    # ========================================================================
    # SNAPSHOT CONVERSION
    # ========================================================================

    def to_snapshot(self) -> Dict[str, Any]:
        """Plain, JSON-serializable view of the whole aggregate."""
        return {
            "accountId": self.account_id,
            "level": self.level,
            "xp": self.xp,
            "gold": self.gold,
            "statPoints": self.stat_points,
            "stats": self.stats.to_dict(),
            "activeDay": self.active_day.to_dict() if self.active_day else None,
            "quests": [quest.to_dict() for quest in self.quests],
            "templates": [template.to_dict() for template in self.templates],
        }

    @classmethod
    def from_snapshot(cls, account_id: str, snapshot: Optional[Dict[str, Any]]) -> Player:
        """
        Rebuild a Player from a snapshot.

        Raises
        ------
        ValidationError
            If the snapshot is malformed or breaks a structural invariant.
        """
        if not snapshot:
            return cls.new(account_id)

        try:
            player = cls(
                account_id,
                level=int(snapshot.get("level", 1)),
                xp=int(snapshot.get("xp", 0)),
                gold=int(snapshot.get("gold", 0)),
                stat_points=int(snapshot.get("statPoints", 0)),
                stats=PlayerStats.from_dict(snapshot.get("stats")),
                active_day=ActiveDay.from_dict(snapshot.get("activeDay")),
                quests=[Quest.from_dict(q) for q in snapshot.get("quests") or []],
                templates=[QuestTemplate.from_dict(t) for t in snapshot.get("templates") or []],
            )
        except (KeyError, TypeError, ValueError) as exc:
            raise ValidationError("player", f"Malformed player snapshot: {exc}") from exc

        player._check_invariants()
        return player

    def _check_invariants(self) -> None:
        if self.level < 1:
            raise ValidationError("player", "level must be at least 1", level=self.level)
        counters = {"xp": self.xp, "gold": self.gold, "statPoints": self.stat_points, **self.stats.to_dict()}
        for name, value in counters.items():
            if value < 0:
                raise ValidationError("player", f"{name} cannot be negative", **{name: value})
        # Imported here: formulas depends on the domain enums
        from questline.modules.shared.formulas import xp_to_next

        threshold = xp_to_next(self.level)
        if self.xp >= threshold:
            raise ValidationError("player", f"xp must be below {threshold} at level {self.level}", xp=self.xp)
        if self.active_day is None and self.quests:
            raise ValidationError("player", "quests require an active day")
        quest_ids = [quest.id for quest in self.quests]
        if len(quest_ids) != len(set(quest_ids)):
            raise ValidationError("player", "quest ids must be unique")

    def __repr__(self) -> str:
        return (
            f"Player(account_id={self.account_id!r}, level={self.level}, xp={self.xp}, "
            f"gold={self.gold}, stat_points={self.stat_points})"
        )
