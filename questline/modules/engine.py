"""
Quest Engine - boundary facade
==============================

Purpose
-------
Single entry point for callers holding a player record. Every operation
runs the same pipeline:

1. Reconcile the active day (a stale day and its quests are discarded)
2. Run exactly one lifecycle operation
3. Report the result as an Outcome carrying the player snapshot

Domain exceptions never escape; they become failed Outcomes. Anything else
is a bug and propagates after being logged.

`Outcome.changed` tells the caller whether to persist: it is True after a
successful mutating operation, and also after a failed one whose
reconciliation step discarded a stale day.

Usage
-----
    engine = QuestEngine.from_config()
    outcome = engine.execute(player, Operation.COMPLETE_QUEST, quest_id="ab12")
    if outcome.ok:
        ...
"""

from __future__ import annotations

import inspect
from enum import Enum
from functools import partial
from typing import Any, Callable, Dict, Optional

from questline.domain.models.player import Player
from questline.modules.day_cycle.service import DayCycleService
from questline.modules.progression.allocation_service import AllocationService
from questline.modules.progression.service import ProgressionService
from questline.modules.quests.service import QuestService
from questline.modules.shared.base_service import BaseService
from questline.modules.shared.exceptions import QuestlineDomainException, ValidationError
from questline.modules.shared.outcome import Outcome


class Operation(str, Enum):
    """Closed set of engine operations."""

    START_DAY = "start_day"
    CREATE_QUICK_QUEST = "create_quick_quest"
    CREATE_QUEST_FROM_TEMPLATE = "create_quest_from_template"
    COMPLETE_QUEST = "complete_quest"
    DELETE_QUEST = "delete_quest"
    CREATE_TEMPLATE = "create_template"
    ARCHIVE_TEMPLATE = "archive_template"
    ALLOCATE_STAT_POINTS = "allocate_stat_points"
    LIST_TEMPLATES = "list_templates"
    PENDING_QUESTS = "pending_quests"
    DAY_VIEW = "day_view"
    PLAYER_VIEW = "player_view"

    @classmethod
    def parse(cls, raw: Any) -> Operation:
        try:
            return cls(raw)
        except ValueError:
            raise ValidationError("operation", f"Unknown operation: {raw}", value=raw) from None

    @property
    def is_read_only(self) -> bool:
        return self in _READ_ONLY


_READ_ONLY = frozenset(
    {
        Operation.LIST_TEMPLATES,
        Operation.PENDING_QUESTS,
        Operation.DAY_VIEW,
        Operation.PLAYER_VIEW,
    }
)


class QuestEngine(BaseService):
    """
    Reconcile-then-operate facade returning tagged Outcomes.

    Args:
        day_cycle: Day Cycle Manager (owns the clock and day boundary)
        quests: Lifecycle service; built from day_cycle when omitted
    """

    def __init__(self, day_cycle: DayCycleService, quests: Optional[QuestService] = None) -> None:
        super().__init__()
        self.day_cycle = day_cycle
        self.quests = quests or QuestService(day_cycle, ProgressionService())
        self._handlers: Dict[Operation, Callable[..., Dict[str, Any]]] = {
            Operation.START_DAY: self._start_day,
            Operation.CREATE_QUICK_QUEST: self.quests.create_quick_quest,
            Operation.CREATE_QUEST_FROM_TEMPLATE: self.quests.create_quest_from_template,
            Operation.COMPLETE_QUEST: self.quests.complete_quest,
            Operation.DELETE_QUEST: self.quests.delete_quest,
            Operation.CREATE_TEMPLATE: self.quests.create_template,
            Operation.ARCHIVE_TEMPLATE: self.quests.archive_template,
            Operation.ALLOCATE_STAT_POINTS: AllocationService.allocate_points,
            Operation.LIST_TEMPLATES: lambda player: {"templates": self.quests.list_templates(player)},
            Operation.PENDING_QUESTS: lambda player: {"quests": self.quests.pending_quests(player)},
            Operation.DAY_VIEW: self.quests.day_view,
            Operation.PLAYER_VIEW: self.quests.player_view,
        }

    @classmethod
    def from_config(cls) -> QuestEngine:
        return cls(DayCycleService.from_config())

    # ========================================================================
    # DISPATCH
    # ========================================================================

    def execute(self, player: Player, operation: Operation | str, **arguments: Any) -> Outcome:
        """
        Reconcile the player's day, then run one operation.

        Args:
            player: Player aggregate (mutated in place on success)
            operation: Operation or its string value
            **arguments: Operation-specific arguments

        Returns:
            Outcome with the operation payload and the player snapshot
            under "player"
        """
        try:
            op = Operation.parse(operation)
            call = self._bind(op, player, arguments)
        except ValidationError as exc:
            self.log_error("execute", exc, account_id=player.account_id)
            return Outcome.failure(exc, data={"player": player.to_snapshot()})

        reconciled = self.day_cycle.reconcile(player)

        try:
            payload = call()
        except QuestlineDomainException as exc:
            self.log_error(op.value, exc, account_id=player.account_id)
            return Outcome.failure(exc, data={"player": player.to_snapshot()}, changed=reconciled)

        changed = reconciled or not op.is_read_only
        if op is Operation.START_DAY and payload.get("alreadyStarted"):
            changed = reconciled
        return Outcome.success({**payload, "player": player.to_snapshot()}, changed=changed)

    def execute_snapshot(
        self,
        account_id: str,
        snapshot: Optional[Dict[str, Any]],
        operation: Operation | str,
        **arguments: Any,
    ) -> Outcome:
        """
        Run an operation against a plain snapshot.

        A malformed snapshot yields a failed validation Outcome.
        """
        try:
            player = Player.from_snapshot(account_id, snapshot)
        except QuestlineDomainException as exc:
            self.log_error("load_snapshot", exc, account_id=account_id)
            return Outcome.failure(exc, data={"player": snapshot})
        return self.execute(player, operation, **arguments)

    def _bind(self, op: Operation, player: Player, arguments: Dict[str, Any]) -> Callable[[], Dict[str, Any]]:
        """Check the caller's arguments against the handler before anything runs."""
        handler = self._handlers[op]
        try:
            inspect.signature(handler).bind(player, **arguments)
        except TypeError as exc:
            raise ValidationError(
                "arguments", f"Invalid arguments for {op.value}: {exc}", arguments=sorted(arguments)
            ) from None
        return partial(handler, player, **arguments)

    # ========================================================================
    # OPERATIONS
    # ========================================================================

    def start_day(self, player: Player) -> Outcome:
        return self.execute(player, Operation.START_DAY)

    def create_quick_quest(
        self,
        player: Player,
        title: Any,
        quest_type: Any,
        minutes_raw: Any = None,
        save_as_template: bool = False,
        note: Any = None,
    ) -> Outcome:
        return self.execute(
            player,
            Operation.CREATE_QUICK_QUEST,
            title=title,
            quest_type=quest_type,
            minutes_raw=minutes_raw,
            save_as_template=save_as_template,
            note=note,
        )

    def create_quest_from_template(
        self,
        player: Player,
        template_id: str,
        minutes_override_raw: Any = None,
        note: Any = None,
    ) -> Outcome:
        return self.execute(
            player,
            Operation.CREATE_QUEST_FROM_TEMPLATE,
            template_id=template_id,
            minutes_override_raw=minutes_override_raw,
            note=note,
        )

    def complete_quest(self, player: Player, quest_id: str) -> Outcome:
        return self.execute(player, Operation.COMPLETE_QUEST, quest_id=quest_id)

    def delete_quest(self, player: Player, quest_id: str) -> Outcome:
        return self.execute(player, Operation.DELETE_QUEST, quest_id=quest_id)

    def create_template(self, player: Player, title: Any, quest_type: Any, minutes_raw: Any = None) -> Outcome:
        return self.execute(
            player,
            Operation.CREATE_TEMPLATE,
            title=title,
            quest_type=quest_type,
            minutes_raw=minutes_raw,
        )

    def archive_template(self, player: Player, template_id: str) -> Outcome:
        return self.execute(player, Operation.ARCHIVE_TEMPLATE, template_id=template_id)

    def allocate_stat_points(self, player: Player, stat: Any, points: Any) -> Outcome:
        return self.execute(player, Operation.ALLOCATE_STAT_POINTS, stat=stat, points=points)

    def list_templates(self, player: Player) -> Outcome:
        return self.execute(player, Operation.LIST_TEMPLATES)

    def pending_quests(self, player: Player) -> Outcome:
        return self.execute(player, Operation.PENDING_QUESTS)

    def day_view(self, player: Player) -> Outcome:
        return self.execute(player, Operation.DAY_VIEW)

    def player_view(self, player: Player) -> Outcome:
        return self.execute(player, Operation.PLAYER_VIEW)

    def _start_day(self, player: Player) -> Dict[str, Any]:
        result = self.day_cycle.start_day(player)
        return {
            "day": result.active_day.to_dict(),
            "alreadyStarted": result.already_started,
            "quests": [quest.to_dict() for quest in player.quests],
        }
