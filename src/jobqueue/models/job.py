"""Job model - a unit of deferred work.

A Job carries a typed payload, tracks its own lifecycle and notifies
listeners of transitions. Jobs are usually created through
``JobQueue.add()`` and driven by a ``JobQueueStrategy``:

    strategy.next()   → job.start()
    worker succeeds   → job.complete(result)
    worker raises     → job.fail(exc)
    queue shuts down  → job.defer()

State changes are computed by the pure functions in
``jobqueue.models.lifecycle``; this class stores the resulting snapshot and
dispatches the emitted event. None of the mutators raise, so a strategy can
call ``start()`` or ``defer()`` without checking the state first.

A Job has no internal locking. Exactly one owner (strategy or worker) may
drive a given instance at a time.
"""

from __future__ import annotations

from collections.abc import Mapping
from datetime import UTC, datetime
from typing import Any, Generic, TypeVar

from jobqueue.core.events import JobEventEmitter, JobEventListener
from jobqueue.models import lifecycle
from jobqueue.models.lifecycle import JobEventType, JobSnapshot, JobState, Transition
from jobqueue.schemas.job import JobConfig, JobId

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(UTC)


class Job(Generic[T]):
    """A piece of work to be run outside the request-response cycle.

    Attributes:
        id: Identifier assigned by the strategy, None until persisted
        queue_name: Queue this job belongs to
        created_at: When the job was created
    """

    def __init__(self, config: JobConfig[T]) -> None:
        self._id = config.id
        self._queue_name = config.queue_name
        self._data = config.data
        self._created_at = config.created_at or utcnow()
        self._snapshot = JobSnapshot(
            state=config.state,
            progress=config.progress,
            result=config.result,
            error=config.error,
            retries=config.retries,
            attempts=config.attempts,
            started_at=config.started_at,
            settled_at=config.settled_at,
        )
        self._events: JobEventEmitter[T] = JobEventEmitter()

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> Job[Any]:
        """Validate a plain mapping (e.g. a stored row) into a Job."""
        return cls(JobConfig.model_validate(dict(data)))

    def __repr__(self) -> str:
        return (
            f"<Job(id={self.id}, queue='{self.queue_name}', "
            f"state='{self.state.value}', progress={self.progress}%)>"
        )

    # === Identity ===

    @property
    def id(self) -> JobId | None:
        return self._id

    @property
    def queue_name(self) -> str:
        return self._queue_name

    @property
    def name(self) -> str:
        return self._queue_name

    @property
    def data(self) -> T:
        return self._data

    @property
    def created_at(self) -> datetime:
        return self._created_at

    @property
    def retries(self) -> int:
        return self._snapshot.retries

    # === Lifecycle ===

    @property
    def snapshot(self) -> JobSnapshot:
        return self._snapshot

    @property
    def state(self) -> JobState:
        return self._snapshot.state

    @property
    def progress(self) -> int | float:
        return self._snapshot.progress

    @property
    def result(self) -> Any:
        return self._snapshot.result

    @property
    def error(self) -> str | None:
        return self._snapshot.error

    @property
    def attempts(self) -> int:
        return self._snapshot.attempts

    @property
    def started_at(self) -> datetime | None:
        return self._snapshot.started_at

    @property
    def settled_at(self) -> datetime | None:
        return self._snapshot.settled_at

    @property
    def is_settled(self) -> bool:
        return self._snapshot.settled_at is not None

    @property
    def duration(self) -> int:
        """Milliseconds between the latest start and settlement (or now).

        0 if the job has never been started.
        """
        end = self.settled_at or utcnow()
        begin = self.started_at or end
        return int((end - begin).total_seconds() * 1000)

    # === Transitions ===

    def start(self) -> None:
        """Signal that work on the job has started.

        Only has an effect from PENDING or RETRYING.
        """
        self._apply(lifecycle.start(self._snapshot, utcnow()))

    def set_progress(self, percent: int | float) -> None:
        """Set the progress (0 - 100) of the job."""
        self._apply(lifecycle.set_progress(self._snapshot, percent))

    def complete(self, result: Any = None) -> None:
        """Signal that the job succeeded, storing ``result``."""
        self._apply(lifecycle.complete(self._snapshot, utcnow(), result))

    def fail(self, err: Any = None) -> None:
        """Signal that the current attempt failed."""
        self._apply(lifecycle.fail(self._snapshot, utcnow(), err))

    def defer(self) -> None:
        """Set a RUNNING job back to PENDING without counting the attempt.

        Used when the queue shuts down before the job could finish.
        """
        self._apply(lifecycle.defer(self._snapshot))

    def on(self, event_type: JobEventType | str, listener: JobEventListener) -> None:
        """Register a listener for ``start``, ``complete`` or ``fail``."""
        self._events.on(event_type, listener)

    def _apply(self, transition: Transition) -> None:
        self._snapshot = transition.snapshot
        if transition.event is not None:
            self._events.emit(transition.event, self)

    # === Persistence ===

    def to_config(self, **overrides: Any) -> JobConfig[T]:
        """Capture every field so a strategy can store and rehydrate the job."""
        fields: dict[str, Any] = {
            "id": self._id,
            "queue_name": self._queue_name,
            "data": self._data,
            "state": self.state,
            "retries": self.retries,
            "attempts": self.attempts,
            "progress": self.progress,
            "created_at": self._created_at,
            "result": self.result,
            "error": self.error,
            "started_at": self.started_at,
            "settled_at": self.settled_at,
        }
        fields.update(overrides)
        return JobConfig(**fields)

    def copy(self, **overrides: Any) -> Job[T]:
        """New job built from ``to_config(**overrides)``, keeping registered listeners."""
        clone: Job[T] = Job(self.to_config(**overrides))
        clone._events = self._events.copy()
        return clone

    def to_dict(self) -> dict[str, Any]:
        """Plain-dict form of ``to_config()``."""
        return self.to_config().model_dump()
