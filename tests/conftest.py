"""
Pytest Configuration and Fixtures for Questline Tests
=====================================================

Purpose
-------
Centralized test fixtures for the Questline test suite: a controllable
clock, engine services wired to it, player factories, and a PostgreSQL
testcontainer for integration tests.

Architecture Notes
------------------
- Unit tests use in-memory players and mocks (fast, isolated)
- Integration tests use testcontainers (real PostgreSQL) and are skipped
  when Docker is not available
- Environment is forced to "testing" before any questline import so
  Config disables file logging and uses NullPool
"""

from __future__ import annotations

import itertools
import os
from datetime import datetime, timedelta, timezone
from typing import AsyncGenerator, Generator

os.environ["ENVIRONMENT"] = "testing"
os.environ["LOG_TO_FILE"] = "false"
os.environ.setdefault("LOG_LEVEL", "DEBUG")

import pytest  # noqa: E402
import pytest_asyncio  # noqa: E402
from sqlalchemy import delete  # noqa: E402

from questline.core.database.service import DatabaseService  # noqa: E402
from questline.core.logging.logger import get_logger, shutdown_logging  # noqa: E402
from questline.domain.models.player import Player  # noqa: E402
from questline.modules.day_cycle.service import DayCycleService  # noqa: E402
from questline.modules.engine import QuestEngine  # noqa: E402
from questline.modules.progression.service import ProgressionService  # noqa: E402
from questline.modules.quests.service import QuestService  # noqa: E402

logger = get_logger(__name__)

START_OF_TEST_DAY = datetime(2024, 3, 10, 12, 0, tzinfo=timezone.utc)


@pytest.fixture(scope="session", autouse=True)
def _flush_logging() -> Generator[None, None, None]:
    """Drain the logging queue once the session ends."""
    yield
    shutdown_logging()


# ============================================================================
# CLOCK & ENGINE FIXTURES (Unit Tests)
# ============================================================================


class FixedClock:
    """Callable clock that only moves when a test advances it."""

    def __init__(self, now: datetime) -> None:
        self.current = now

    def __call__(self) -> datetime:
        return self.current

    def advance(self, **delta: float) -> datetime:
        self.current = self.current + timedelta(**delta)
        return self.current


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock(START_OF_TEST_DAY)


@pytest.fixture
def day_cycle(clock: FixedClock) -> DayCycleService:
    return DayCycleService(boundary_hour=0, tz=timezone.utc, clock=clock)


@pytest.fixture
def id_factory():
    """Deterministic ids: id-1, id-2, ..."""
    counter = itertools.count(1)
    return lambda: f"id-{next(counter)}"


@pytest.fixture
def quest_service(day_cycle: DayCycleService, id_factory) -> QuestService:
    return QuestService(day_cycle, ProgressionService(), id_factory=id_factory)


@pytest.fixture
def engine(day_cycle: DayCycleService, quest_service: QuestService) -> QuestEngine:
    return QuestEngine(day_cycle, quest_service)


# ============================================================================
# DOMAIN MODEL FACTORIES
# ============================================================================


@pytest.fixture
def player() -> Player:
    """Fresh level-1 player with no active day."""
    return Player.new("acct-1")


@pytest.fixture
def started_player(player: Player, day_cycle: DayCycleService) -> Player:
    """Player whose day has been started (events cleared)."""
    day_cycle.start_day(player)
    player.clear_domain_events()
    return player


# ============================================================================
# TESTCONTAINERS FIXTURES (Integration Tests)
# ============================================================================


@pytest.fixture(scope="session")
def postgres_container() -> Generator:
    """
    Start PostgreSQL testcontainer for integration tests.

    Scope: session (container persists across all tests)
    Skips the requesting tests when Docker is unavailable.
    """
    from testcontainers.postgres import PostgresContainer

    container = PostgresContainer(image="postgres:17-alpine", driver="asyncpg")
    try:
        container.start()
    except Exception as exc:  # docker daemon missing or unreachable
        pytest.skip(f"PostgreSQL testcontainer unavailable: {exc}")

    logger.info("PostgreSQL testcontainer started: %s", container.get_connection_url())
    yield container

    logger.info("Stopping PostgreSQL testcontainer...")
    container.stop()


@pytest_asyncio.fixture
async def database(postgres_container) -> AsyncGenerator[type[DatabaseService], None]:
    """
    Initialized DatabaseService with the schema created.

    Scope: function (fresh engine per test, table emptied afterwards)
    """
    from questline.database.models import PlayerRecord

    await DatabaseService.initialize(postgres_container.get_connection_url())
    await DatabaseService.create_schema()

    yield DatabaseService

    async with DatabaseService.get_transaction() as session:
        await session.execute(delete(PlayerRecord))
    await DatabaseService.shutdown()


# ============================================================================
# UTILITY FUNCTIONS
# ============================================================================


def assert_domain_event_emitted(domain_model, event_name: str) -> bool:
    """
    Assert that a domain model emitted a specific event.

    Usage:
        progression.apply_rewards(player, xp=500, gold=0)
        assert assert_domain_event_emitted(player, "player.leveled_up")
    """
    events = domain_model.get_pending_events()
    return any(event.event_name == event_name for event in events)


def get_domain_event_payload(domain_model, event_name: str) -> dict | None:
    """Get the payload of the first pending event with the given name."""
    for event in domain_model.get_pending_events():
        if event.event_name == event_name:
            return event.payload
    return None
