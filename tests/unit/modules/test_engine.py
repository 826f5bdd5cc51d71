"""
Unit Tests for the QuestEngine boundary
=======================================

Test Coverage
-------------
- Domain failures become tagged Outcomes (never raised)
- Reconciliation runs before every operation
- `changed` flag semantics for persistence
- End-to-end gameplay scenarios
"""

import pytest

from questline.domain.models.player import Player
from questline.modules.engine import Operation


@pytest.mark.unit
class TestOutcomes:
    def test_success_carries_payload_and_snapshot(self, engine, player):
        # Act
        outcome = engine.start_day(player)

        # Assert
        assert outcome.ok is True
        assert outcome.changed is True
        assert outcome.data["alreadyStarted"] is False
        assert outcome.data["player"]["activeDay"]["dayKey"] == "2024-03-10"

    def test_failure_is_tagged_not_raised(self, engine, player):
        # Act
        outcome = engine.create_quick_quest(player, "Morning run", "physical", 25)

        # Assert
        assert outcome.ok is False
        assert outcome.message == "Day not started"
        assert outcome.error_kind == "precondition"
        assert outcome.error_code == "DAY_NOT_STARTED"
        assert outcome.changed is False
        assert outcome.data["player"] == player.to_snapshot()

    def test_to_dict_for_transport(self, engine, player):
        payload = engine.allocate_stat_points(player, "physical", 5).to_dict()

        assert payload["ok"] is False
        assert payload["error_kind"] == "insufficient_resource"
        assert "player" in payload

    def test_operation_accepts_string_name(self, engine, player):
        assert engine.execute(player, "start_day").ok is True

    def test_unknown_operation_is_validation_failure(self, engine, player):
        outcome = engine.execute(player, "fly_to_moon")

        assert outcome.ok is False
        assert outcome.error_code == "VALIDATION_OPERATION"
        assert outcome.message == "Unknown operation: fly_to_moon"
        assert outcome.changed is False

    def test_unexpected_argument_is_validation_failure(self, engine, started_player):
        outcome = engine.execute(started_player, Operation.COMPLETE_QUEST, quest_id="q1", bonus=10)

        assert outcome.ok is False
        assert outcome.error_code == "VALIDATION_ARGUMENTS"
        assert started_player.quests == []

    def test_missing_argument_is_validation_failure(self, engine, started_player):
        outcome = engine.execute(started_player, Operation.ALLOCATE_STAT_POINTS, stat="physical")

        assert outcome.ok is False
        assert outcome.error_kind == "validation"

    def test_snapshot_with_null_active_day_can_start(self, engine):
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot["activeDay"] = {"dayKey": None, "startedAt": None}

        outcome = engine.execute_snapshot("acct-1", snapshot, Operation.START_DAY)

        assert outcome.ok is True
        assert outcome.data["player"]["activeDay"]["dayKey"] == "2024-03-10"

    def test_malformed_snapshot_is_validation_failure(self, engine):
        outcome = engine.execute_snapshot("acct-1", {"level": "not-a-number"}, Operation.PLAYER_VIEW)

        assert outcome.ok is False
        assert outcome.error_kind == "validation"


@pytest.mark.unit
class TestChangedFlag:
    def test_read_only_operation_unchanged(self, engine, started_player):
        assert engine.player_view(started_player).changed is False
        assert engine.list_templates(started_player).changed is False

    def test_repeated_start_day_unchanged(self, engine, started_player):
        outcome = engine.start_day(started_player)

        assert outcome.data["alreadyStarted"] is True
        assert outcome.changed is False

    def test_failed_operation_after_rollover_still_changed(self, engine, quest_service, started_player, clock):
        # Arrange
        quest_id = quest_service.create_quick_quest(started_player, "Morning run", "physical")["quest"]["id"]
        clock.advance(days=1)

        # Act
        outcome = engine.complete_quest(started_player, quest_id)

        # Assert: stale day discarded, completion refused, record must be saved
        assert outcome.ok is False
        assert outcome.error_code == "DAY_NOT_STARTED"
        assert outcome.changed is True
        assert outcome.data["player"]["activeDay"] is None
        assert outcome.data["player"]["quests"] == []


@pytest.mark.unit
class TestScenarios:
    def test_physical_quest_with_zero_stats(self, engine, player):
        """Creation reward 50 xp / 2 gold; no stat bonus at completion."""
        engine.start_day(player)
        created = engine.create_quick_quest(player, "Push-ups", "physical", 25)

        outcome = engine.complete_quest(player, created.data["quest"]["id"])

        assert (created.data["quest"]["xpReward"], created.data["quest"]["goldReward"]) == (50, 2)
        assert outcome.data["reward"]["xp"] == 50
        assert outcome.data["reward"]["gold"] == 2
        assert (player.xp, player.gold) == (50, 2)

    def test_level_up_from_90_xp(self, engine):
        player = Player("acct-1", xp=90)
        engine.start_day(player)
        quest_id = engine.create_quick_quest(player, "Stretching", "spiritual", 20).data["quest"]["id"]

        outcome = engine.complete_quest(player, quest_id)

        assert outcome.data["levelUp"]["leveledUp"] is True
        assert outcome.data["levelUp"]["levelsGained"] == 1
        assert (player.level, player.xp, player.stat_points) == (2, 10, 3)

    def test_minutes_over_cap_rejected(self, engine):
        player = Player("acct-1", stat_points=40)
        engine.start_day(player)
        engine.allocate_stat_points(player, "physical", 40)

        outcome = engine.create_quick_quest(player, "Marathon", "physical", 200)

        assert outcome.ok is False
        assert outcome.error_kind == "validation"
        assert outcome.message == "Minutes must be between 1 and 180"
        assert player.quests == []

    def test_huge_minutes_become_validation_outcome(self, engine, started_player):
        outcome = engine.create_quick_quest(started_player, "Run far", "physical", "1e30")

        assert outcome.ok is False
        assert outcome.error_kind == "validation"
        assert outcome.message == "Minutes must be between 1 and 25"
        assert started_player.quests == []

    def test_over_allocation_rejected(self, engine):
        player = Player("acct-1", stat_points=3)

        outcome = engine.allocate_stat_points(player, "intellectual", 5)

        assert outcome.ok is False
        assert outcome.error_kind == "insufficient_resource"
        assert player.stats.intellectual == 0
        assert player.stat_points == 3

    def test_completion_is_one_way(self, engine, player):
        engine.start_day(player)
        quest_id = engine.create_quick_quest(player, "Push-ups", "physical").data["quest"]["id"]
        engine.complete_quest(player, quest_id)

        again = engine.complete_quest(player, quest_id)

        assert again.ok is False
        assert again.error_kind == "precondition"
        assert again.error_code == "QUEST_ALREADY_COMPLETED"
        assert (player.xp, player.gold) == (50, 2)

    def test_stat_investment_unlocks_longer_quests(self, engine):
        player = Player("acct-1", stat_points=3)
        engine.start_day(player)
        assert engine.create_quick_quest(player, "Long read", "intellectual", 40).ok is False

        engine.allocate_stat_points(player, "intellectual", 3)
        outcome = engine.create_quick_quest(player, "Long read", "intellectual", 40)

        assert outcome.ok is True
        assert outcome.data["quest"]["goldReward"] == 6
