"""
Quest & Template Lifecycle Service
==================================

Purpose
-------
The operations exposed to callers: quest creation (quick or from a
template), one-time completion, deletion, and the template library. Each
operation orchestrates the Day Cycle Manager, Reward Calculator and
Progression Engine over one in-memory Player.

Domain
------
- Quest state machine: created -> completed (terminal) or
  created -> deleted (terminal, removed from the list)
- Quests are prepended (most recent first)
- Templates are soft-deleted (archived) and never used once archived
- Read models for the day and the player

Design Notes
------------
Every operation validates all of its inputs and preconditions before the
first mutation, so a raised domain exception always leaves the player
exactly as it was. Day reconciliation is the caller's first step
(QuestEngine) and is not repeated here.

Raises NotFoundError, ValidationError, DayNotStartedError,
QuestAlreadyCompletedError.
"""

from __future__ import annotations

import uuid
from typing import Any, Callable, Dict, List, Optional

from questline.domain.models.enums import QuestKind
from questline.domain.models.player import Player
from questline.domain.models.quest import Quest, QuestTemplate
from questline.modules.day_cycle.service import DayCycleService
from questline.modules.progression.service import ProgressionService
from questline.modules.rewards.calculator import RewardCalculator
from questline.modules.shared.exceptions import (
    DayNotStartedError,
    NotFoundError,
    QuestAlreadyCompletedError,
)
from questline.modules.shared.base_service import BaseService
from questline.modules.shared.formulas import xp_to_next
from questline.modules.shared.validators import (
    parse_attribute,
    validate_note,
    validate_title,
)


def new_id() -> str:
    return uuid.uuid4().hex


class QuestService(BaseService):
    """
    Quest and template lifecycle over a Player aggregate.

    Public Methods
    --------------
    - create_quick_quest() -> Ad hoc quest, optionally saved as template
    - create_quest_from_template() -> Quest from a non-archived template
    - complete_quest() -> Mark done, apply completion reward
    - delete_quest() -> Remove a quest from today's list
    - create_template() / archive_template() / list_templates()
    - pending_quests() / day_view() / player_view() -> Read models
    """

    def __init__(
        self,
        day_cycle: DayCycleService,
        progression: Optional[ProgressionService] = None,
        id_factory: Callable[[], str] = new_id,
    ) -> None:
        super().__init__()
        self._day_cycle = day_cycle
        self._progression = progression or ProgressionService()
        self._new_id = id_factory

    # ========================================================================
    # PUBLIC API - Quests
    # ========================================================================

    def create_quick_quest(
        self,
        player: Player,
        title: Any,
        quest_type: Any,
        minutes_raw: Any = None,
        save_as_template: bool = False,
        note: Any = None,
    ) -> Dict[str, Any]:
        """
        Create an ad hoc quest for today.

        Args:
            player: Player to mutate
            title: Quest title (trimmed, 3..120 characters)
            quest_type: "physical", "intellectual" or "spiritual"
            minutes_raw: Requested minutes; blank defaults to 25 (or the cap)
            save_as_template: Also store a template with the same
                title, type and minutes
            note: Optional free text

        Returns:
            {"quest": {...}, "quests": [...], "template": {...} | None}
        """
        self._require_active_day(player, "quest.create_quick")
        clean_title = validate_title(title)
        attribute = parse_attribute(quest_type, field="type")
        clean_note = validate_note(note)
        quote = RewardCalculator.quote(attribute, minutes_raw, player.stats)

        now = self._day_cycle.now()
        quest = Quest(
            id=self._new_id(),
            kind=QuestKind.QUICK,
            type=attribute,
            title=clean_title,
            minutes=quote.minutes,
            xp_reward=quote.xp_reward,
            gold_reward=quote.gold_reward,
            note=clean_note,
            created_at=now,
        )
        player.add_quest(quest)
        self._record_quest_created(player, quest)

        template: Optional[QuestTemplate] = None
        if save_as_template:
            template = QuestTemplate(
                id=self._new_id(),
                title=clean_title,
                type=attribute,
                minutes=quote.minutes,
                created_at=now,
            )
            player.add_template(template)
            self._record_template_created(player, template)

        return {
            "quest": quest.to_dict(),
            "quests": self._quest_list(player),
            "template": template.to_dict() if template else None,
        }

    def create_quest_from_template(
        self,
        player: Player,
        template_id: str,
        minutes_override_raw: Any = None,
        note: Any = None,
    ) -> Dict[str, Any]:
        """
        Create today's quest from a template.

        The template's default minutes are used unless an override is
        given; either way they are re-validated against the current cap.
        The quest keeps template_id for traceability only.

        Returns:
            {"quest": {...}, "quests": [...]}
        """
        self._require_active_day(player, "quest.create_from_template")
        template = player.find_template(template_id)
        if template is None:
            raise NotFoundError("Template", template_id)
        clean_note = validate_note(note)

        raw_minutes = minutes_override_raw
        if raw_minutes is None or (isinstance(raw_minutes, str) and not raw_minutes.strip()):
            raw_minutes = template.minutes
        quote = RewardCalculator.quote(template.type, raw_minutes, player.stats)

        quest = Quest(
            id=self._new_id(),
            kind=QuestKind.TEMPLATE,
            type=template.type,
            title=template.title,
            minutes=quote.minutes,
            xp_reward=quote.xp_reward,
            gold_reward=quote.gold_reward,
            template_id=template.id,
            note=clean_note,
            created_at=self._day_cycle.now(),
        )
        player.add_quest(quest)
        self._record_quest_created(player, quest)

        return {"quest": quest.to_dict(), "quests": self._quest_list(player)}

    def complete_quest(self, player: Player, quest_id: str) -> Dict[str, Any]:
        """
        Complete a quest and apply its reward.

        The frozen quest rewards are multiplied by bonuses from the
        player's current stats; that multiplied reward is what the player
        receives.

        Returns:
            {"quest": {...}, "reward": {...}, "levelUp": {...}, "quests": [...]}

        Raises:
            DayNotStartedError: No active day
            NotFoundError: Unknown quest id
            QuestAlreadyCompletedError: Quest was completed before
        """
        self._require_active_day(player, "quest.complete")
        quest = player.find_quest(quest_id)
        if quest is None:
            raise NotFoundError("Quest", quest_id)
        if quest.completed:
            raise QuestAlreadyCompletedError(quest_id)

        quest.mark_completed(self._day_cycle.now())
        reward = RewardCalculator.completion_reward(quest, player.stats)
        level_up = self._progression.apply_rewards(player, xp=reward.xp, gold=reward.gold)

        player.add_domain_event(
            "quest.completed",
            {
                "account_id": player.account_id,
                "quest_id": quest.id,
                "type": quest.type.value,
                "xp": reward.xp,
                "gold": reward.gold,
            },
        )
        self.log_operation(
            "quest.complete",
            account_id=player.account_id,
            quest_id=quest.id,
            xp=reward.xp,
            gold=reward.gold,
            leveled_up=level_up.leveled_up,
        )

        return {
            "quest": quest.to_dict(),
            "reward": reward.to_dict(),
            "levelUp": level_up.to_dict(),
            "quests": self._quest_list(player),
        }

    def delete_quest(self, player: Player, quest_id: str) -> Dict[str, Any]:
        """
        Remove a quest from today's list.

        Completed quests can be deleted too; rewards already applied stay.

        Returns:
            {"deletedId": "...", "quests": [...]}
        """
        self._require_active_day(player, "quest.delete")
        quest = player.find_quest(quest_id)
        if quest is None:
            raise NotFoundError("Quest", quest_id)

        player.remove_quest(quest)
        player.add_domain_event(
            "quest.deleted",
            {"account_id": player.account_id, "quest_id": quest.id, "was_completed": quest.completed},
        )
        self.log_operation("quest.delete", account_id=player.account_id, quest_id=quest.id)
        return {"deletedId": quest.id, "quests": self._quest_list(player)}

    # ========================================================================
    # PUBLIC API - Templates
    # ========================================================================

    def create_template(
        self,
        player: Player,
        title: Any,
        quest_type: Any,
        minutes_raw: Any = None,
    ) -> Dict[str, Any]:
        """
        Add a template to the player's library.

        Does not require an active day. Minutes are validated against the
        current cap for the type.

        Returns:
            {"template": {...}, "templates": [...]}
        """
        clean_title = validate_title(title)
        attribute = parse_attribute(quest_type, field="type")
        quote = RewardCalculator.quote(attribute, minutes_raw, player.stats)

        template = QuestTemplate(
            id=self._new_id(),
            title=clean_title,
            type=attribute,
            minutes=quote.minutes,
            created_at=self._day_cycle.now(),
        )
        player.add_template(template)
        self._record_template_created(player, template)
        return {"template": template.to_dict(), "templates": self.list_templates(player)}

    def archive_template(self, player: Player, template_id: str) -> Dict[str, Any]:
        """
        Soft-delete a template.

        Quests already created from it are unaffected.

        Raises:
            NotFoundError: Unknown or already archived template
        """
        template = player.find_template(template_id)
        if template is None:
            raise NotFoundError("Template", template_id)

        template.archive()
        player.add_domain_event(
            "template.archived",
            {"account_id": player.account_id, "template_id": template.id},
        )
        self.log_operation("template.archive", account_id=player.account_id, template_id=template.id)
        return {"archivedId": template.id, "templates": self.list_templates(player)}

    def list_templates(self, player: Player) -> List[Dict[str, Any]]:
        """Non-archived templates, newest first."""
        return [template.to_dict() for template in player.active_templates()]

    # ========================================================================
    # PUBLIC API - Read models
    # ========================================================================

    def pending_quests(self, player: Player) -> List[Dict[str, Any]]:
        return [quest.to_dict() for quest in player.pending_quests()]

    def day_view(self, player: Player) -> Dict[str, Any]:
        return {
            "todayKey": self._day_cycle.today_key(),
            "day": player.active_day.to_dict() if player.active_day else None,
            "quests": self._quest_list(player),
        }

    def player_view(self, player: Player) -> Dict[str, Any]:
        return {
            "accountId": player.account_id,
            "level": player.level,
            "xp": player.xp,
            "xpToNext": xp_to_next(player.level),
            "gold": player.gold,
            "statPoints": player.stat_points,
            "stats": player.stats.to_dict(),
            "maxMinutes": RewardCalculator.minute_caps(player.stats),
        }

    # ========================================================================
    # PRIVATE HELPERS
    # ========================================================================

    @staticmethod
    def _require_active_day(player: Player, action: str) -> None:
        if player.active_day is None:
            raise DayNotStartedError(action)

    @staticmethod
    def _quest_list(player: Player) -> List[Dict[str, Any]]:
        return [quest.to_dict() for quest in player.quests]

    def _record_quest_created(self, player: Player, quest: Quest) -> None:
        player.add_domain_event(
            "quest.created",
            {
                "account_id": player.account_id,
                "quest_id": quest.id,
                "kind": quest.kind.value,
                "type": quest.type.value,
                "minutes": quest.minutes,
            },
        )
        self.log_operation(
            "quest.create",
            account_id=player.account_id,
            quest_id=quest.id,
            kind=quest.kind.value,
            minutes=quest.minutes,
        )

    def _record_template_created(self, player: Player, template: QuestTemplate) -> None:
        player.add_domain_event(
            "template.created",
            {"account_id": player.account_id, "template_id": template.id, "type": template.type.value},
        )
        self.log_operation("template.create", account_id=player.account_id, template_id=template.id)
