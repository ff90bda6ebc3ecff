"""Bulk verification task."""
import structlog

from bioverify_core.verification import run_job

logger = structlog.get_logger()


def run_bulk_verification_job(job_id: str, record_ids: list[str]) -> str | None:
    """Run a bulk verification job; returns its final status."""
    logger.info("task_received", job_id=job_id, records=len(record_ids))
    job = run_job(job_id, record_ids)
    if job is None:
        return None
    return job.status.value
