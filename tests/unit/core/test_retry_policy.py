"""
Unit Tests for DatabaseRetryPolicy
==================================

Test Coverage
-------------
- Retriable errors retried up to max_attempts
- Non-retriable errors raised immediately
- Backoff growth and cap
"""

import pytest
from sqlalchemy.orm.exc import StaleDataError

from questline.core.database.retry_policy import DatabaseRetryConfig, DatabaseRetryPolicy


def make_policy(max_attempts: int = 3, **overrides) -> DatabaseRetryPolicy:
    fields = dict(max_attempts=max_attempts, initial_backoff_ms=0, max_backoff_ms=0, jitter_ms=0)
    fields.update(overrides)
    return DatabaseRetryPolicy(DatabaseRetryConfig(**fields))


@pytest.mark.unit
class TestRetryPolicy:
    async def test_success_after_stale_attempt(self, mocker):
        # Arrange
        operation = mocker.AsyncMock(side_effect=[StaleDataError("stale"), "saved"])

        # Act
        result = await make_policy().execute(operation, operation_name="player.start_day")

        # Assert
        assert result == "saved"
        assert operation.await_count == 2

    async def test_gives_up_after_max_attempts(self, mocker):
        operation = mocker.AsyncMock(side_effect=StaleDataError("stale"))

        with pytest.raises(StaleDataError):
            await make_policy(max_attempts=2).execute(operation, operation_name="player.start_day")

        assert operation.await_count == 2

    async def test_non_retriable_raised_immediately(self, mocker):
        operation = mocker.AsyncMock(side_effect=KeyError("boom"))

        with pytest.raises(KeyError):
            await make_policy().execute(operation, operation_name="player.start_day")

        assert operation.await_count == 1

    def test_backoff_doubles_until_cap(self):
        policy = make_policy(initial_backoff_ms=25, max_backoff_ms=80)

        assert [policy._compute_backoff_ms(n) for n in (1, 2, 3, 4)] == [25, 50, 80, 80]

    def test_from_config_reads_config(self):
        assert DatabaseRetryPolicy.from_config().max_attempts >= 1
