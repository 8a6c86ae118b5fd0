"""Tests for logging configuration and job context."""

import json
import logging
from collections.abc import Iterator

import pytest
import structlog

from jobqueue.config import Settings
from jobqueue.core.logging import (
    add_job_id,
    clear_job_context,
    configure_logging,
    get_job_context,
    get_logger,
    set_job_context,
)


@pytest.fixture(autouse=True)
def reset_logging() -> Iterator[None]:
    """Restore structlog and root handlers after each test."""
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    structlog.reset_defaults()
    clear_job_context()
    root.handlers[:] = handlers
    root.setLevel(level)


class TestJobContext:
    def test_set_and_clear(self) -> None:
        set_job_context("job-1")
        assert get_job_context() == "job-1"

        clear_job_context()
        assert get_job_context() is None

    def test_processor_adds_job_id(self) -> None:
        set_job_context("job-1")
        assert add_job_id(None, "info", {"event": "x"}) == {"event": "x", "job_id": "job-1"}  # type: ignore[arg-type]

    def test_processor_keeps_explicit_job_id(self) -> None:
        set_job_context("job-1")
        event = add_job_id(None, "info", {"event": "x", "job_id": "other"})  # type: ignore[arg-type]
        assert event["job_id"] == "other"


class TestConfigureLogging:
    def test_json_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        settings = Settings(log_format="json", log_level="INFO", app_name="jobs-test")  # type: ignore[arg-type]
        configure_logging(settings)
        set_job_context("job-9")

        get_logger("tests").info("job_completed", duration_ms=12)

        record = json.loads(capsys.readouterr().out.strip().splitlines()[-1])
        assert record["event"] == "job_completed"
        assert record["duration_ms"] == 12
        assert record["job_id"] == "job-9"
        assert record["service"] == "jobs-test"
        assert record["level"] == "info"

    def test_level_applied(self) -> None:
        settings = Settings(log_level="WARNING", log_format="console")  # type: ignore[arg-type]
        configure_logging(settings)
        assert logging.getLogger().level == logging.WARNING
