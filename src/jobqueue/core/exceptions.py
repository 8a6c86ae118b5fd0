"""Exception hierarchy for the job queue.

Job lifecycle transitions never raise; failure of a job is a state, not an
exception. The errors here belong to the strategy and queue layers:

- Structured error payloads with machine-readable codes
- A single base class callers can catch

Usage:
    from jobqueue.core.exceptions import JobNotFoundError

    raise JobNotFoundError(job_id="1234")
"""

from typing import Any


class JobQueueError(Exception):
    """Base exception for all job queue errors.

    Attributes:
        code: Machine-readable error code (e.g., "JOB_NOT_FOUND")
        message: Human-readable error message
        details: Additional error details (optional)
    """

    code: str = "INTERNAL_ERROR"
    message: str = "An unexpected error occurred"

    def __init__(
        self,
        message: str | None = None,
        code: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        """Initialize the exception.

        Args:
            message: Override default message
            code: Override default error code
            details: Additional error details
        """
        if message:
            self.message = message
        if code:
            self.code = code
        self.details = details or {}
        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Convert exception to an error payload.

        Returns:
            Error dictionary suitable for logging or serialization
        """
        error: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            error["details"] = self.details
        return {"error": error}


# =============================================================================
# Not Found Errors
# =============================================================================


class NotFoundError(JobQueueError):
    """Base class for lookup failures."""

    code: str = "NOT_FOUND"
    message: str = "Resource not found"


class JobNotFoundError(NotFoundError):
    """Raised when a strategy is asked about a job it does not hold."""

    code: str = "JOB_NOT_FOUND"
    message: str = "Job not found"

    def __init__(self, job_id: Any = None, message: str | None = None) -> None:
        """Initialize with optional job ID."""
        details: dict[str, Any] = {}
        if job_id is not None:
            details["job_id"] = str(job_id)
            if not message:
                message = f"Job with ID {job_id} not found"

        super().__init__(message=message, details=details if details else None)


# =============================================================================
# Queue Errors
# =============================================================================


class QueueStoppedError(JobQueueError):
    """Raised when work is added to a queue that has been stopped."""

    code: str = "QUEUE_STOPPED"
    message: str = "Queue has been stopped"

    def __init__(self, queue_name: str | None = None) -> None:
        """Initialize with optional queue name."""
        message = f"Queue '{queue_name}' has been stopped" if queue_name else None
        details = {"queue_name": queue_name} if queue_name else None
        super().__init__(message=message, details=details)
