"""Pytest configuration and fixtures for jobqueue tests.

This module provides reusable fixtures for:
- Settings overrides
- A controllable clock for job timestamps
- Job factories
- In-memory strategy
"""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from typing import Any

import pytest

from jobqueue.config import Settings
from jobqueue.models.job import Job
from jobqueue.schemas.job import JobConfig
from jobqueue.strategies.in_memory import InMemoryJobQueueStrategy

# =============================================================================
# Settings Fixtures
# =============================================================================


@pytest.fixture
def test_settings() -> Settings:
    """Create test-specific settings."""
    return Settings(
        app_env="development",  # type: ignore[arg-type]
        log_level="DEBUG",  # type: ignore[arg-type]
        log_format="console",  # type: ignore[arg-type]
        default_retries=0,
        settled_job_max_age_seconds=3600,
    )


# =============================================================================
# Clock Fixtures
# =============================================================================


class FakeClock:
    """Stands in for ``jobqueue.models.job.utcnow``."""

    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs: float) -> datetime:
        self.now += timedelta(**kwargs)
        return self.now


@pytest.fixture
def clock(monkeypatch: pytest.MonkeyPatch) -> FakeClock:
    """Freeze job timestamps at a known instant; advance with ``clock.advance``."""
    fake = FakeClock(datetime(2024, 1, 1, 12, 0, tzinfo=UTC))
    monkeypatch.setattr("jobqueue.models.job.utcnow", fake)
    return fake


# =============================================================================
# Job Fixtures
# =============================================================================


@pytest.fixture
def make_job() -> Callable[..., Job[Any]]:
    """Factory building jobs on the ``test-queue`` queue."""

    def _make(data: Any = None, **overrides: Any) -> Job[Any]:
        fields: dict[str, Any] = {
            "queue_name": "test-queue",
            "data": {"n": 1} if data is None else data,
        }
        fields.update(overrides)
        return Job(JobConfig(**fields))

    return _make


@pytest.fixture
def strategy(test_settings: Settings) -> InMemoryJobQueueStrategy:
    """Create an empty in-memory strategy."""
    return InMemoryJobQueueStrategy(settings=test_settings)
