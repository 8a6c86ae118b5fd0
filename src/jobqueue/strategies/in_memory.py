"""In-memory job queue strategy.

Keeps every job in a dict and a FIFO line of waiting job ids per queue.
Nothing survives a restart, so this strategy suits tests and single-process
development setups.
"""

from __future__ import annotations

from collections import defaultdict, deque
from collections.abc import Iterable
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4

import structlog

from jobqueue.config import Settings, get_settings
from jobqueue.core.exceptions import JobNotFoundError
from jobqueue.models.job import Job
from jobqueue.models.lifecycle import STARTABLE_STATES, JobState
from jobqueue.schemas.job import JobId, JobListOptions
from jobqueue.strategies.base import JobQueueStrategy

logger = structlog.get_logger(__name__)


class InMemoryJobQueueStrategy(JobQueueStrategy):
    """Job storage and FIFO dispatch held in process memory.

    Jobs returned by ``add()``, ``next()`` and ``find_one()`` are the stored
    instances, so listeners registered on them keep firing as the job moves
    through its lifecycle. Listeners registered on a job before ``add()`` are
    carried over to the stored copy.
    """

    def __init__(self, settings: Settings | None = None) -> None:
        """Initialize the strategy.

        Args:
            settings: Settings providing the settled job retention period
        """
        self.settings = settings or get_settings()
        self.jobs: dict[JobId, Job[Any]] = {}
        self.waiting: defaultdict[str, deque[JobId]] = defaultdict(deque)

    async def add(self, job: Job[Any]) -> Job[Any]:
        job_id = job.id if job.id is not None else str(uuid4())
        stored = job.copy(id=job_id)
        self.jobs[job_id] = stored
        if stored.state in STARTABLE_STATES:
            self.waiting[stored.queue_name].append(job_id)

        logger.debug("job_added", job_id=str(job_id), queue=stored.queue_name)
        return stored

    async def next(self, queue_name: str) -> Job[Any] | None:
        line = self.waiting[queue_name]
        while line:
            job = self.jobs.get(line.popleft())
            if job is None or job.state not in STARTABLE_STATES:
                continue
            job.start()
            logger.debug(
                "job_dispatched",
                job_id=str(job.id),
                queue=queue_name,
                attempt=job.attempts,
            )
            return job
        return None

    async def update(self, job: Job[Any]) -> None:
        if job.id is None or job.id not in self.jobs:
            raise JobNotFoundError(
                job_id=job.id,
                message=None if job.id is not None else "Job has not been added",
            )

        self.jobs[job.id] = job
        line = self.waiting[job.queue_name]
        if job.state in STARTABLE_STATES and job.id not in line:
            line.append(job.id)

    async def find_one(self, job_id: JobId) -> Job[Any] | None:
        return self.jobs.get(job_id)

    async def find_many(self, options: JobListOptions | None = None) -> list[Job[Any]]:
        options = options or JobListOptions()
        jobs = sorted(self.jobs.values(), key=lambda j: j.created_at)

        if options.queue_names is not None:
            jobs = [j for j in jobs if j.queue_name in options.queue_names]
        if options.states is not None:
            jobs = [j for j in jobs if j.state in options.states]

        end = options.skip + options.take if options.take is not None else None
        return jobs[options.skip : end]

    async def remove_settled_jobs(
        self,
        queue_names: Iterable[str] | None = None,
        older_than: datetime | None = None,
    ) -> int:
        if older_than is None:
            older_than = datetime.now(UTC) - timedelta(
                seconds=self.settings.settled_job_max_age_seconds
            )
        elif older_than.tzinfo is None:
            older_than = older_than.replace(tzinfo=UTC)
        queues = set(queue_names) if queue_names is not None else None

        stale = [
            job_id
            for job_id, job in self.jobs.items()
            if job.settled_at is not None
            and job.settled_at < older_than
            and (queues is None or job.queue_name in queues)
        ]
        for job_id in stale:
            del self.jobs[job_id]

        if stale:
            logger.info("settled_jobs_removed", count=len(stale))
        return len(stale)

    async def destroy(self) -> None:
        running = [j for j in self.jobs.values() if j.state == JobState.RUNNING]
        # newest first, so appendleft leaves the oldest job at the front
        for job in sorted(running, key=lambda j: j.created_at, reverse=True):
            job.defer()
            self.waiting[job.queue_name].appendleft(job.id)

        if running:
            logger.info("running_jobs_deferred", count=len(running))
