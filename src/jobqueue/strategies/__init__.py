"""Queue strategies: storage and dispatch of jobs."""

from jobqueue.strategies.base import JobQueueStrategy
from jobqueue.strategies.in_memory import InMemoryJobQueueStrategy

__all__ = ["InMemoryJobQueueStrategy", "JobQueueStrategy"]
