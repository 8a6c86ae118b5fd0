"""Job model and lifecycle state machine.

The lifecycle module must be imported before the job module; the job
module builds on its types.
"""

from jobqueue.models.lifecycle import (
    JobEventType,
    JobSnapshot,
    JobState,
    Transition,
)
from jobqueue.models.job import Job

__all__ = [
    "Job",
    "JobEventType",
    "JobSnapshot",
    "JobState",
    "Transition",
]
