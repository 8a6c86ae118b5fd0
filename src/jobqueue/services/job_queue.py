"""JobQueue - add work to a named queue and process it.

The queue turns payloads into jobs, hands them to a strategy and settles
each job according to what the process function does:

    returns a value     → job.complete(value)
    raises an exception → job.fail(exc), retried while the budget allows
    gets cancelled      → job.defer(), then the cancellation propagates

Jobs are processed one at a time per call to ``process_next()``. Running
several queues or workers concurrently is left to the caller.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable
from typing import Any, Generic, TypeVar

import structlog

from jobqueue.config import Settings, get_settings
from jobqueue.core.exceptions import QueueStoppedError
from jobqueue.core.logging import clear_job_context, log_context, set_job_context
from jobqueue.models.job import Job
from jobqueue.models.lifecycle import JobState
from jobqueue.schemas.job import JobConfig
from jobqueue.strategies.base import JobQueueStrategy

logger = structlog.get_logger(__name__)

T = TypeVar("T")

ProcessFn = Callable[[Job[T]], Awaitable[Any]]


class JobQueue(Generic[T]):
    """A named queue of jobs backed by a strategy.

    Usage:
        ```python
        async def send_email(job: Job[dict]) -> str:
            ...
            job.set_progress(50)
            ...
            return message_id

        queue = JobQueue("send-email", InMemoryJobQueueStrategy(), send_email)
        job = await queue.add({"to": "someone@example.com"}, retries=2)
        await queue.drain()
        ```
    """

    def __init__(
        self,
        name: str,
        strategy: JobQueueStrategy,
        process: ProcessFn[T],
        settings: Settings | None = None,
    ) -> None:
        """Initialize the queue.

        Args:
            name: Queue name jobs are filed under
            strategy: Storage and dispatch of jobs
            process: Async function doing the work of one job
            settings: Settings providing the default retry budget
        """
        self.name = name
        self.strategy = strategy
        self.process = process
        self.settings = settings or get_settings()
        self._stopped = False

    @property
    def stopped(self) -> bool:
        return self._stopped

    async def add(self, data: T, retries: int | None = None) -> Job[T]:
        """Add a job to the queue.

        Args:
            data: Work input
            retries: Retry budget, defaults to ``settings.default_retries``

        Returns:
            The stored job; register listeners on this instance

        Raises:
            QueueStoppedError: If the queue has been stopped
        """
        if self._stopped:
            raise QueueStoppedError(self.name)

        config = JobConfig(
            queue_name=self.name,
            data=data,
            retries=self.settings.default_retries if retries is None else retries,
        )
        job = await self.strategy.add(Job(config))
        logger.info("job_queued", job_id=str(job.id), queue=self.name, retries=job.retries)
        return job

    async def process_next(self) -> Job[T] | None:
        """Take the next job and run it to settlement (or retry).

        Returns:
            The processed job, or None if the queue is empty
        """
        job = await self.strategy.next(self.name)
        if job is None:
            return None

        set_job_context(str(job.id))
        try:
            with log_context(queue=self.name, attempt=job.attempts):
                await self._run(job)
        finally:
            clear_job_context()

        await self.strategy.update(job)
        return job

    async def _run(self, job: Job[T]) -> None:
        try:
            result = await self.process(job)
        except asyncio.CancelledError:
            job.defer()
            await self.strategy.update(job)
            logger.warning("job_deferred_on_cancel")
            raise
        except Exception as e:
            job.fail(e)
            if job.state == JobState.RETRYING:
                logger.warning("job_attempt_failed", error=job.error, retries=job.retries)
            else:
                logger.error("job_failed", error=job.error, duration_ms=job.duration)
        else:
            job.complete(result)
            logger.info("job_completed", duration_ms=job.duration)

    async def drain(self) -> int:
        """Process jobs until none is waiting.

        Returns:
            Number of attempts processed, retries included
        """
        processed = 0
        while not self._stopped and await self.process_next() is not None:
            processed += 1
        return processed

    async def stop(self) -> None:
        """Stop accepting and processing jobs."""
        self._stopped = True
        logger.info("queue_stopped", queue=self.name)
