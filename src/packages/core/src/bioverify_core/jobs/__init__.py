"""Job management module."""
from bioverify_core.jobs.repo import (
    create_job,
    get_job,
    list_jobs_for_tenant,
    list_active_jobs,
    mark_running,
    complete_job,
    fail_job,
    set_external_job_id,
    update_progress,
)
from bioverify_core.jobs.models import BulkJob, JobStatus

__all__ = [
    "create_job",
    "get_job",
    "list_jobs_for_tenant",
    "list_active_jobs",
    "mark_running",
    "complete_job",
    "fail_job",
    "set_external_job_id",
    "update_progress",
    "BulkJob",
    "JobStatus",
]
