"""jobqueue - background jobs with an explicit lifecycle.

Models are imported before schemas: ``jobqueue.schemas.job`` needs the
lifecycle enums and ``jobqueue.models.job`` needs ``JobConfig``.
"""

from jobqueue.models import Job, JobEventType, JobSnapshot, JobState, Transition
from jobqueue.schemas import JobConfig, JobId, JobListOptions
from jobqueue.strategies import InMemoryJobQueueStrategy, JobQueueStrategy
from jobqueue.services import JobQueue

__version__ = "0.1.0"

__all__ = [
    "InMemoryJobQueueStrategy",
    "Job",
    "JobConfig",
    "JobEventType",
    "JobId",
    "JobListOptions",
    "JobQueue",
    "JobQueueStrategy",
    "JobSnapshot",
    "JobState",
    "Transition",
]
