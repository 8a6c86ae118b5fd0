"""Pydantic schemas for job construction and queries."""

from jobqueue.schemas.job import JobConfig, JobId, JobListOptions

__all__ = ["JobConfig", "JobId", "JobListOptions"]
