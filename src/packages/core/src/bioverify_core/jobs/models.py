"""Job models."""
from enum import Enum

from pydantic import BaseModel


class JobStatus(str, Enum):
    """Lifecycle of a bulk job. Status only ever moves forward."""

    PENDING = "PENDING"
    RUNNING = "RUNNING"
    COMPLETED = "COMPLETED"
    FAILED = "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self in (JobStatus.COMPLETED, JobStatus.FAILED)


# Allowed predecessor statuses for each target status.
ALLOWED_FROM: dict[JobStatus, tuple[JobStatus, ...]] = {
    JobStatus.PENDING: (),
    JobStatus.RUNNING: (JobStatus.PENDING,),
    JobStatus.COMPLETED: (JobStatus.RUNNING,),
    # A job that never got a worker can still be failed out of PENDING.
    JobStatus.FAILED: (JobStatus.PENDING, JobStatus.RUNNING),
}


class BulkJob(BaseModel):
    """Bulk job status response."""

    job_id: str
    tenant_id: str
    initiated_by: str
    external_job_id: str | None = None
    status: JobStatus
    status_message: str | None = None
    total_records: int = 0
    processed: int = 0
    succeeded: int = 0
    failed: int = 0
    created_at: str | None = None
    updated_at: str | None = None
