"""Tests for JobQueue.

Uses the in-memory strategy with async process functions.
"""

import asyncio
from typing import Any
from unittest.mock import AsyncMock

import pytest

from jobqueue.config import Settings
from jobqueue.core.exceptions import QueueStoppedError
from jobqueue.models.job import Job
from jobqueue.models.lifecycle import JobState
from jobqueue.services.job_queue import JobQueue
from jobqueue.strategies.in_memory import InMemoryJobQueueStrategy

# =============================================================================
# Fixtures
# =============================================================================


@pytest.fixture
def process() -> AsyncMock:
    """Process function that succeeds with a fixed result."""
    return AsyncMock(return_value="done")


@pytest.fixture
def queue(
    strategy: InMemoryJobQueueStrategy,
    process: AsyncMock,
    test_settings: Settings,
) -> JobQueue[dict]:
    return JobQueue("emails", strategy, process, settings=test_settings)


# =============================================================================
# add
# =============================================================================


class TestAdd:
    @pytest.mark.asyncio
    async def test_add_stores_pending_job(
        self, queue: JobQueue[dict], strategy: InMemoryJobQueueStrategy
    ) -> None:
        job = await queue.add({"to": "a@b.c"}, retries=2)

        assert job.id is not None
        assert job.queue_name == "emails"
        assert job.state == JobState.PENDING
        assert job.retries == 2
        assert await strategy.find_one(job.id) is job

    @pytest.mark.asyncio
    async def test_default_retries_from_settings(
        self, strategy: InMemoryJobQueueStrategy, process: AsyncMock
    ) -> None:
        queue = JobQueue("emails", strategy, process, settings=Settings(default_retries=4))

        job = await queue.add({})

        assert job.retries == 4

    @pytest.mark.asyncio
    async def test_add_after_stop(self, queue: JobQueue[dict]) -> None:
        await queue.stop()

        with pytest.raises(QueueStoppedError) as exc_info:
            await queue.add({})

        assert queue.stopped is True
        assert exc_info.value.code == "QUEUE_STOPPED"


# =============================================================================
# process_next
# =============================================================================


class TestProcessNext:
    @pytest.mark.asyncio
    async def test_empty_queue(self, queue: JobQueue[dict], process: AsyncMock) -> None:
        assert await queue.process_next() is None
        process.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_success_completes_job(
        self, queue: JobQueue[dict], process: AsyncMock
    ) -> None:
        added = await queue.add({"to": "a@b.c"})

        job = await queue.process_next()

        assert job is added
        process.assert_awaited_once_with(added)
        assert job.state == JobState.COMPLETED
        assert job.result == "done"
        assert job.progress == 100

    @pytest.mark.asyncio
    async def test_process_sees_running_job(
        self, strategy: InMemoryJobQueueStrategy, test_settings: Settings
    ) -> None:
        seen: list[tuple[JobState, int]] = []

        async def work(job: Job[dict]) -> None:
            seen.append((job.state, job.attempts))
            job.set_progress(50)

        queue = JobQueue("emails", strategy, work, settings=test_settings)
        await queue.add({})

        await queue.process_next()

        assert seen == [(JobState.RUNNING, 1)]

    @pytest.mark.asyncio
    async def test_failure_without_retries(
        self, queue: JobQueue[dict], process: AsyncMock
    ) -> None:
        process.side_effect = ConnectionError("smtp down")
        await queue.add({})

        job = await queue.process_next()

        assert job.state == JobState.FAILED
        assert job.error == "smtp down"
        assert job.is_settled is True

    @pytest.mark.asyncio
    async def test_cancel_defers_job(
        self, queue: JobQueue[dict], process: AsyncMock
    ) -> None:
        process.side_effect = asyncio.CancelledError()
        added = await queue.add({})

        with pytest.raises(asyncio.CancelledError):
            await queue.process_next()

        assert added.state == JobState.PENDING
        assert added.attempts == 0

        process.side_effect = None
        assert await queue.process_next() is added
        assert added.state == JobState.COMPLETED


# =============================================================================
# drain
# =============================================================================


class TestDrain:
    @pytest.mark.asyncio
    async def test_retries_until_success(
        self, queue: JobQueue[dict], process: AsyncMock
    ) -> None:
        process.side_effect = [RuntimeError("flaky"), RuntimeError("flaky"), "ok"]
        job = await queue.add({}, retries=2)
        states: list[str] = []
        job.on("fail", lambda j: states.append(j.state.value))

        processed = await queue.drain()

        assert processed == 3
        assert states == ["retrying", "retrying"]
        assert job.state == JobState.COMPLETED
        assert job.result == "ok"
        assert job.attempts == 3

    @pytest.mark.asyncio
    async def test_retry_budget_exhausted(
        self, queue: JobQueue[dict], process: AsyncMock
    ) -> None:
        process.side_effect = RuntimeError("always")
        job = await queue.add({}, retries=1)

        processed = await queue.drain()

        assert processed == 2
        assert job.state == JobState.FAILED
        assert job.error == "always"

    @pytest.mark.asyncio
    async def test_drain_processes_in_order(
        self, queue: JobQueue[dict], process: AsyncMock
    ) -> None:
        first = await queue.add({"n": 1})
        second = await queue.add({"n": 2})

        await queue.drain()

        assert [c.args[0] for c in process.await_args_list] == [first, second]

    @pytest.mark.asyncio
    async def test_drain_after_stop(self, queue: JobQueue[dict]) -> None:
        await queue.add({})
        await queue.stop()

        assert await queue.drain() == 0


class TestListenersThroughQueue:
    @pytest.mark.asyncio
    async def test_complete_listener_fires_once(self, queue: JobQueue[Any]) -> None:
        job = await queue.add({})
        completed: list[Any] = []
        job.on("complete", lambda j: completed.append(j.result))

        await queue.drain()

        assert completed == ["done"]
