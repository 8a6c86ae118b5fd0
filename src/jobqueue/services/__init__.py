"""Services built on top of jobs and strategies."""

from jobqueue.services.job_queue import JobQueue

__all__ = ["JobQueue"]
