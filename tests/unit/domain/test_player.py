"""
Unit Tests for Player Domain Model
==================================

Purpose
-------
Test the Player aggregate and its value objects without external
dependencies.

Test Coverage
-------------
- PlayerStats lookups and increases
- Quest list ordering and template lookups (archived hidden)
- Snapshot conversion and structural invariants
- Domain event buffering

Testing Strategy
----------------
- Unit tests (fast, no database)
- AAA pattern (Arrange, Act, Assert)
"""

from datetime import datetime, timezone

import pytest

from questline.domain.models import (
    ActiveDay,
    Attribute,
    Player,
    PlayerStats,
    Quest,
    QuestKind,
    QuestTemplate,
)
from questline.modules.shared.exceptions import ValidationError

NOW = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


def make_quest(quest_id: str, **overrides) -> Quest:
    fields = dict(
        id=quest_id,
        kind=QuestKind.QUICK,
        type=Attribute.PHYSICAL,
        title="Morning run",
        minutes=25,
        xp_reward=50,
        gold_reward=2,
        created_at=NOW,
    )
    fields.update(overrides)
    return Quest(**fields)


# ============================================================================
# PLAYER STATS TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.domain
class TestPlayerStats:
    def test_value_of_reads_matching_attribute(self):
        # Arrange
        stats = PlayerStats(physical=1, intellectual=2, spiritual=3)

        # Act & Assert
        assert stats.value_of(Attribute.PHYSICAL) == 1
        assert stats.value_of(Attribute.INTELLECTUAL) == 2
        assert stats.value_of(Attribute.SPIRITUAL) == 3

    def test_increase_only_touches_one_attribute(self):
        # Arrange
        stats = PlayerStats()

        # Act
        stats.increase(Attribute.SPIRITUAL, 4)

        # Assert
        assert stats.to_dict() == {"physical": 0, "intellectual": 0, "spiritual": 4}

    def test_missing_keys_default_to_zero(self):
        assert PlayerStats.from_dict({"physical": 2}) == PlayerStats(physical=2)


# ============================================================================
# PLAYER AGGREGATE TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.domain
class TestPlayerAggregate:
    def test_new_player_defaults(self):
        # Act
        player = Player.new("acct-9")

        # Assert
        assert player.account_id == "acct-9"
        assert (player.level, player.xp, player.gold, player.stat_points) == (1, 0, 0, 0)
        assert player.active_day is None
        assert player.quests == []

    def test_quests_are_prepended(self):
        # Arrange
        player = Player.new("acct-1")

        # Act
        player.add_quest(make_quest("q1"))
        player.add_quest(make_quest("q2"))

        # Assert
        assert [q.id for q in player.quests] == ["q2", "q1"]

    def test_archived_template_is_not_found(self):
        # Arrange
        player = Player.new("acct-1")
        template = QuestTemplate(id="t1", title="Read", type=Attribute.INTELLECTUAL, minutes=30)
        player.add_template(template)

        # Act
        template.archive()

        # Assert
        assert player.find_template("t1") is None
        assert player.active_templates() == []
        assert player.templates == [template]  # soft delete keeps it

    def test_pending_quests_excludes_completed(self):
        # Arrange
        player = Player.new("acct-1")
        done = make_quest("q1")
        done.mark_completed(NOW)
        player.add_quest(done)
        player.add_quest(make_quest("q2"))

        # Act & Assert
        assert [q.id for q in player.pending_quests()] == ["q2"]

    def test_mark_completed_twice_is_a_bug(self):
        quest = make_quest("q1")
        quest.mark_completed(NOW)

        with pytest.raises(RuntimeError):
            quest.mark_completed(NOW)

    def test_domain_events_buffer_and_clear(self):
        # Arrange
        player = Player.new("acct-1")
        player.add_domain_event("player.day_started", {"day_key": "2024-03-10"})

        # Act
        events = player.clear_domain_events()

        # Assert
        assert [e.event_name for e in events] == ["player.day_started"]
        assert player.get_pending_events() == []


# ============================================================================
# SNAPSHOT TESTS
# ============================================================================


@pytest.mark.unit
@pytest.mark.domain
class TestPlayerSnapshot:
    def test_snapshot_preserves_state(self):
        # Arrange
        player = Player(
            "acct-1",
            level=3,
            xp=40,
            gold=17,
            stat_points=2,
            stats=PlayerStats(physical=4),
            active_day=ActiveDay(day_key="2024-03-10", started_at=NOW),
            quests=[make_quest("q1", note="bring water")],
            templates=[QuestTemplate(id="t1", title="Read", type=Attribute.INTELLECTUAL, minutes=30)],
        )

        # Act
        snapshot = player.to_snapshot()
        restored = Player.from_snapshot("acct-1", snapshot)

        # Assert
        assert snapshot["activeDay"] == {"dayKey": "2024-03-10", "startedAt": NOW.isoformat()}
        assert snapshot["quests"][0]["xpReward"] == 50
        assert restored.to_snapshot() == snapshot

    def test_empty_snapshot_is_new_player(self):
        assert Player.from_snapshot("acct-1", None).level == 1

    def test_quests_without_active_day_rejected(self):
        # Arrange
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot["quests"] = [make_quest("q1").to_dict()]

        # Act & Assert
        with pytest.raises(ValidationError):
            Player.from_snapshot("acct-1", snapshot)

    @pytest.mark.parametrize("field,value", [("level", 0), ("gold", -1), ("statPoints", -3)])
    def test_out_of_range_counters_rejected(self, field, value):
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot[field] = value

        with pytest.raises(ValidationError):
            Player.from_snapshot("acct-1", snapshot)

    def test_unknown_quest_type_rejected(self):
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot["templates"] = [{"id": "t1", "title": "Lift", "type": "strength", "minutes": 25}]

        with pytest.raises(ValidationError):
            Player.from_snapshot("acct-1", snapshot)

    @pytest.mark.parametrize("active_day", [None, {}, {"dayKey": None, "startedAt": None}])
    def test_null_active_day_means_no_day(self, active_day):
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot["activeDay"] = active_day

        assert Player.from_snapshot("acct-1", snapshot).active_day is None

    def test_xp_at_level_threshold_rejected(self):
        # Arrange: xp_to_next(2) == 125
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot.update(level=2, xp=125)

        # Act & Assert
        with pytest.raises(ValidationError) as exc_info:
            Player.from_snapshot("acct-1", snapshot)
        assert exc_info.value.message == "xp must be below 125 at level 2"

    def test_xp_just_below_threshold_loads(self):
        snapshot = Player.new("acct-1").to_snapshot()
        snapshot.update(level=2, xp=124)

        assert Player.from_snapshot("acct-1", snapshot).xp == 124
