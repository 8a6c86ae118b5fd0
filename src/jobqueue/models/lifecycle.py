"""Job lifecycle state machine.

Pure transition functions over an immutable ``JobSnapshot``. Each function
returns a ``Transition`` holding the next snapshot and the event it emits
(if any); listener dispatch is left to the owner of the snapshot.

State Machine:
    pending ──start──▶ running ──complete──▶ completed
       ▲                 │  │
       └──────defer──────┘  └──fail──▶ retrying ──start──▶ running
                               └─────▶ failed   (retries exhausted)

``complete`` and ``fail`` are accepted from every state. ``start`` and
``defer`` are silent no-ops outside their source states.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from datetime import datetime
from enum import Enum
from typing import Any


class JobState(str, Enum):
    """Lifecycle state of a job."""

    PENDING = "pending"
    RUNNING = "running"
    COMPLETED = "completed"
    FAILED = "failed"
    RETRYING = "retrying"

    @property
    def is_terminal(self) -> bool:
        return self in (JobState.COMPLETED, JobState.FAILED)


class JobEventType(str, Enum):
    """Events raised by job transitions."""

    START = "start"
    COMPLETE = "complete"
    FAIL = "fail"


STARTABLE_STATES = frozenset({JobState.PENDING, JobState.RETRYING})


@dataclass(frozen=True)
class JobSnapshot:
    """The parts of a job that change over its lifetime."""

    state: JobState = JobState.PENDING
    progress: int | float = 0
    result: Any = None
    error: str | None = None
    retries: int = 0
    attempts: int = 0
    started_at: datetime | None = None
    settled_at: datetime | None = None


@dataclass(frozen=True)
class Transition:
    """Outcome of applying an operation to a snapshot."""

    snapshot: JobSnapshot
    event: JobEventType | None = None
    changed: bool = True

    @classmethod
    def unchanged(cls, snapshot: JobSnapshot) -> Transition:
        return cls(snapshot=snapshot, event=None, changed=False)


def normalize_error(err: Any) -> str | None:
    """Reduce whatever was passed to ``fail()`` to a string message.

    Objects carrying a truthy ``message`` attribute (like ``JobQueueError``)
    contribute that. A single-argument ``KeyError`` gives its argument, not the
    quoted repr ``str()`` would produce. Anything else is stringified.
    ``None`` stays ``None``.
    """
    if err is None:
        return None
    message = getattr(err, "message", None)
    if message:
        return str(message)
    if isinstance(err, KeyError) and len(err.args) == 1:
        return str(err.args[0])
    return str(err)


def start(snapshot: JobSnapshot, now: datetime) -> Transition:
    """Begin a new attempt."""
    if snapshot.state not in STARTABLE_STATES:
        return Transition.unchanged(snapshot)
    return Transition(
        snapshot=replace(
            snapshot,
            state=JobState.RUNNING,
            started_at=now,
            attempts=snapshot.attempts + 1,
        ),
        event=JobEventType.START,
    )


def set_progress(snapshot: JobSnapshot, percent: int | float) -> Transition:
    """Record progress, capped at 100."""
    return Transition(snapshot=replace(snapshot, progress=min(percent, 100)))


def complete(snapshot: JobSnapshot, now: datetime, result: Any = None) -> Transition:
    """Settle the job successfully."""
    return Transition(
        snapshot=replace(
            snapshot,
            state=JobState.COMPLETED,
            result=result,
            progress=100,
            settled_at=now,
        ),
        event=JobEventType.COMPLETE,
    )


def fail(snapshot: JobSnapshot, now: datetime, err: Any = None) -> Transition:
    """Record a failed attempt.

    The job goes back to RETRYING while ``retries >= attempts``, so a retry
    budget of N allows N further attempts after the first one fails.
    Otherwise it settles as FAILED. A retrying job is never settled.
    """
    if snapshot.retries >= snapshot.attempts:
        state, settled_at = JobState.RETRYING, None
    else:
        state, settled_at = JobState.FAILED, now
    return Transition(
        snapshot=replace(
            snapshot,
            state=state,
            error=normalize_error(err),
            progress=0,
            settled_at=settled_at,
        ),
        event=JobEventType.FAIL,
    )


def defer(snapshot: JobSnapshot) -> Transition:
    """Release a running job back to the pending pool without counting the attempt."""
    if snapshot.state != JobState.RUNNING:
        return Transition.unchanged(snapshot)
    return Transition(snapshot=replace(snapshot, state=JobState.PENDING, attempts=0))
