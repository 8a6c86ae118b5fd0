"""Abstract job queue strategy.

A strategy owns the storage and dispatch of jobs. It is the only code that
drives a job's lifecycle on behalf of the queue:

- ``next()`` calls ``job.start()`` before handing the job to a worker
- ``update()`` persists the job after the worker settles it
- ``destroy()`` calls ``job.defer()`` on jobs still running at shutdown

Usage:
    from jobqueue.strategies.base import JobQueueStrategy

    class RedisJobQueueStrategy(JobQueueStrategy):
        async def add(self, job: Job) -> Job:
            ...
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from collections.abc import Iterable
from datetime import datetime
from typing import Any

from jobqueue.models.job import Job
from jobqueue.schemas.job import JobId, JobListOptions


class JobQueueStrategy(ABC):
    """Storage and dispatch of jobs.

    All methods are async so implementations can talk to a database or
    broker. ``init()`` and ``destroy()`` default to no-ops.
    """

    async def init(self) -> None:
        """Acquire resources before the first job is added."""

    async def destroy(self) -> None:
        """Release resources; running jobs should be deferred."""

    @abstractmethod
    async def add(self, job: Job[Any]) -> Job[Any]:
        """Persist a new job.

        Args:
            job: A job without an id

        Listeners already registered on ``job`` must keep firing on the
        returned instance.

        Returns:
            The stored job, with its id assigned
        """

    @abstractmethod
    async def next(self, queue_name: str) -> Job[Any] | None:
        """Take the next job of a queue and start it.

        Args:
            queue_name: Queue to take from

        Returns:
            The started job, or None if nothing is waiting
        """

    @abstractmethod
    async def update(self, job: Job[Any]) -> None:
        """Persist the current state of a job.

        Raises:
            JobNotFoundError: If the job is not held by this strategy
        """

    @abstractmethod
    async def find_one(self, job_id: JobId) -> Job[Any] | None:
        """Get a job by its id."""

    @abstractmethod
    async def find_many(self, options: JobListOptions | None = None) -> list[Job[Any]]:
        """List jobs, oldest first."""

    @abstractmethod
    async def remove_settled_jobs(
        self,
        queue_names: Iterable[str] | None = None,
        older_than: datetime | None = None,
    ) -> int:
        """Delete settled jobs.

        Args:
            queue_names: Restrict to these queues (all queues if None)
            older_than: Only jobs settled before this moment

        Returns:
            Number of jobs removed
        """
