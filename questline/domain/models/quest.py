"""
Quest and template domain models.

A Quest lives only inside the current active day's list. Its minutes and
rewards are frozen at creation; the completion-time stat bonus is computed
separately and never written back onto the quest.

A QuestTemplate is a reusable blueprint with its own lifecycle. Archiving
is a soft delete: archived templates stay in the player record so quests
that reference them keep a valid template_id.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional

from questline.domain.models.enums import Attribute, QuestKind


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value is not None else None


def _parse_iso(value: Optional[str]) -> Optional[datetime]:
    return datetime.fromisoformat(value) if value else None


@dataclass
class Quest:
    """
    A unit of declared work for the current day.

    Attributes
    ----------
    id : str
        Unique within the player's quest list
    kind : QuestKind
        Quick (ad hoc) or created from a template
    type : Attribute
        Selects the reward formula and minute cap
    title : str
        Trimmed, 3..120 characters
    minutes : int
        Duration validated against the cap at creation time
    xp_reward, gold_reward : int
        Creation-time rewards (clamped)
    template_id : Optional[str]
        Template this quest was created from, if any
    note : str
        Optional free text
    completed : bool
        One-way False -> True
    completed_at : Optional[datetime]
        Set exactly once, on completion
    """

    id: str
    kind: QuestKind
    type: Attribute
    title: str
    minutes: int
    xp_reward: int
    gold_reward: int
    template_id: Optional[str] = None
    note: str = ""
    completed: bool = False
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None

    def mark_completed(self, at: datetime) -> None:
        """Callers check `completed` first; a second completion is a bug."""
        if self.completed:
            raise RuntimeError(f"quest {self.id} is already completed")
        self.completed = True
        self.completed_at = at

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "kind": self.kind.value,
            "templateId": self.template_id,
            "type": self.type.value,
            "title": self.title,
            "note": self.note,
            "minutes": self.minutes,
            "xpReward": self.xp_reward,
            "goldReward": self.gold_reward,
            "completed": self.completed,
            "completedAt": _iso(self.completed_at),
            "createdAt": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> Quest:
        return cls(
            id=str(data["id"]),
            kind=QuestKind(data.get("kind", QuestKind.QUICK.value)),
            type=Attribute(data["type"]),
            title=data["title"],
            minutes=int(data["minutes"]),
            xp_reward=int(data["xpReward"]),
            gold_reward=int(data["goldReward"]),
            template_id=data.get("templateId"),
            note=data.get("note") or "",
            completed=bool(data.get("completed", False)),
            completed_at=_parse_iso(data.get("completedAt")),
            created_at=_parse_iso(data.get("createdAt")),
        )


@dataclass
class QuestTemplate:
    """Reusable quest blueprint; `minutes` is a default re-validated on use."""

    id: str
    title: str
    type: Attribute
    minutes: int
    archived: bool = False
    created_at: Optional[datetime] = None

    def archive(self) -> None:
        self.archived = True

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "title": self.title,
            "type": self.type.value,
            "minutes": self.minutes,
            "archived": self.archived,
            "createdAt": _iso(self.created_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> QuestTemplate:
        return cls(
            id=str(data["id"]),
            title=data["title"],
            type=Attribute(data["type"]),
            minutes=int(data["minutes"]),
            archived=bool(data.get("archived", False)),
            created_at=_parse_iso(data.get("createdAt")),
        )
