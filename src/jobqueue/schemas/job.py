"""Schemas for constructing and querying jobs.

``JobConfig`` is both the input for new jobs and the shape a strategy
persists and reads back when rehydrating a job.
"""

from __future__ import annotations

from datetime import UTC, datetime
from typing import Any, Generic, TypeVar
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from jobqueue.models.lifecycle import JobState

T = TypeVar("T")

JobId = UUID | int | str


class JobConfig(BaseModel, Generic[T]):
    """Configuration of a job.

    Only ``queue_name`` and ``data`` are needed for new work; the remaining
    fields are filled in when a strategy restores a previously stored job.
    """

    model_config = ConfigDict(
        arbitrary_types_allowed=True,
        json_schema_extra={
            "example": {
                "queue_name": "send-email",
                "data": {"to": "someone@example.com"},
                "retries": 2,
            }
        },
    )

    queue_name: str = Field(min_length=1, description="Queue this job belongs to")
    data: T = Field(description="Work input")
    id: JobId | None = Field(default=None, description="Set once persisted")
    state: JobState = Field(default=JobState.PENDING)
    retries: int = Field(default=0, ge=0, description="Permitted re-attempts")
    attempts: int = Field(default=0, ge=0)
    progress: int | float = Field(default=0, description="Percent complete, at most 100")
    created_at: datetime | None = Field(
        default=None,
        description="Defaults to construction time",
    )
    result: Any = None
    error: str | None = None
    started_at: datetime | None = None
    settled_at: datetime | None = None

    @field_validator("created_at", "started_at", "settled_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        """Treat naive timestamps as UTC so durations can be computed."""
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=UTC)
        return v


class JobListOptions(BaseModel):
    """Filters for listing jobs held by a strategy."""

    queue_names: list[str] | None = Field(
        default=None,
        description="Restrict to these queues",
    )
    states: list[JobState] | None = Field(
        default=None,
        description="Restrict to these states",
    )
    skip: int = Field(default=0, ge=0)
    take: int | None = Field(default=None, ge=1)
