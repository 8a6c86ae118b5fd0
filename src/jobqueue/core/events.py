"""Listener registry for job lifecycle events.

Listeners run synchronously, in registration order, on the caller's thread.
A listener that raises is logged and skipped; the remaining listeners still
run and the exception never reaches the code that drove the transition.
"""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Generic, TypeVar

import structlog

from jobqueue.models.lifecycle import JobEventType

if TYPE_CHECKING:
    from jobqueue.models.job import Job

logger = structlog.get_logger(__name__)

T = TypeVar("T")

JobEventListener = Callable[["Job[Any]"], Any]


class JobEventEmitter(Generic[T]):
    """Fixed mapping from event type to an ordered list of listeners."""

    def __init__(self) -> None:
        self._listeners: dict[JobEventType, list[JobEventListener]] = {
            event_type: [] for event_type in JobEventType
        }

    def on(
        self,
        event_type: JobEventType | str,
        listener: JobEventListener,
    ) -> None:
        """Register a listener.

        Raises:
            ValueError: If ``event_type`` is not a known event
        """
        self._listeners[JobEventType(event_type)].append(listener)

    def listeners(self, event_type: JobEventType | str) -> list[JobEventListener]:
        """Return a copy of the listeners registered for ``event_type``."""
        return list(self._listeners[JobEventType(event_type)])

    def copy(self) -> JobEventEmitter[T]:
        """Return a new emitter holding the same listeners."""
        clone: JobEventEmitter[T] = type(self)()
        for event_type, listeners in self._listeners.items():
            clone._listeners[event_type].extend(listeners)
        return clone

    def emit(self, event_type: JobEventType, job: Job[T]) -> None:
        for listener in self.listeners(event_type):
            try:
                listener(job)
            except Exception:
                logger.exception(
                    "job_event_listener_failed",
                    event_type=event_type.value,
                    job_id=str(job.id) if job.id is not None else None,
                    queue=job.queue_name,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )
