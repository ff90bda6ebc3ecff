"""Bulk job repository using SQLite."""
import structlog

from bioverify_core.db import get_conn
from bioverify_core.jobs.models import ALLOWED_FROM, BulkJob, JobStatus
from bioverify_core.util import JobStateError, generate_id, utc_now_iso

logger = structlog.get_logger()


def _to_job(row) -> BulkJob:
    return BulkJob(**dict(row))


def create_job(tenant_id: str, initiated_by: str, total_records: int) -> BulkJob:
    """Insert a new PENDING job."""
    job_id = generate_id()
    now = utc_now_iso()
    with get_conn() as conn:
        conn.execute(
            """
            INSERT INTO bulk_jobs (job_id, tenant_id, initiated_by, status, total_records, processed, succeeded, failed, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, 0, 0, 0, ?, ?)
            """,
            (job_id, tenant_id, initiated_by, JobStatus.PENDING.value, total_records, now, now),
        )
    logger.info("job_created", job_id=job_id, tenant_id=tenant_id, total=total_records)
    return get_job(job_id)


def get_job(job_id: str) -> BulkJob | None:
    """Get a job by ID."""
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM bulk_jobs WHERE job_id = ?", (job_id,)
        ).fetchone()
        if row is None:
            return None
        return _to_job(row)


def list_jobs_for_tenant(tenant_id: str) -> list[BulkJob]:
    """List a tenant's jobs, most recently created first."""
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM bulk_jobs WHERE tenant_id = ? ORDER BY created_at DESC, rowid DESC",
            (tenant_id,),
        ).fetchall()
        return [_to_job(r) for r in rows]


def list_active_jobs() -> list[BulkJob]:
    """List all jobs that have not reached a terminal status."""
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM bulk_jobs WHERE status IN ('PENDING', 'RUNNING') ORDER BY created_at DESC"
        ).fetchall()
        return [_to_job(r) for r in rows]


def _transition(
    job_id: str,
    status: JobStatus,
    status_message: str | None = None,
    counters: dict[str, int] | None = None,
) -> BulkJob:
    """Move a job to ``status`` if its current status allows it."""
    allowed = ALLOWED_FROM[status]
    counters = counters or {}
    assignments = ["status = ?", "updated_at = ?"]
    params: list = [status.value, utc_now_iso()]
    if status_message is not None:
        assignments.append("status_message = ?")
        params.append(status_message)
    for column in ("processed", "succeeded", "failed"):
        if column in counters:
            # counters never move backwards
            assignments.append(f"{column} = MAX({column}, ?)")
            params.append(counters[column])
    placeholders = ", ".join("?" for _ in allowed)
    params.append(job_id)
    params.extend(s.value for s in allowed)
    with get_conn() as conn:
        cur = conn.execute(
            f"UPDATE bulk_jobs SET {', '.join(assignments)} WHERE job_id = ? AND status IN ({placeholders})",
            params,
        )
        updated = cur.rowcount
    if not updated:
        current = get_job(job_id)
        found = current.status.value if current else "missing"
        raise JobStateError(
            f"Job {job_id} cannot move to {status.value} (current status: {found})"
        )
    logger.info("job_status_changed", job_id=job_id, status=status.value)
    return get_job(job_id)


def mark_running(job_id: str) -> BulkJob:
    """PENDING -> RUNNING."""
    return _transition(job_id, JobStatus.RUNNING)


def complete_job(
    job_id: str, processed: int, succeeded: int, failed: int, status_message: str
) -> BulkJob:
    """RUNNING -> COMPLETED with final counters."""
    return _transition(
        job_id,
        JobStatus.COMPLETED,
        status_message,
        {"processed": processed, "succeeded": succeeded, "failed": failed},
    )


def fail_job(job_id: str, status_message: str) -> BulkJob:
    """Mark a job FAILED, keeping whatever progress was already persisted."""
    job = _transition(job_id, JobStatus.FAILED, status_message)
    # Keep processed == succeeded + failed on the terminal row.
    unaccounted = job.processed - job.succeeded - job.failed
    if unaccounted > 0:
        update_progress(job_id, failed=job.failed + unaccounted)
        job = get_job(job_id)
    return job


def set_external_job_id(job_id: str, external_job_id: str) -> None:
    """Record the provider-assigned job id."""
    with get_conn() as conn:
        conn.execute(
            "UPDATE bulk_jobs SET external_job_id = ?, updated_at = ? WHERE job_id = ?",
            (external_job_id, utc_now_iso(), job_id),
        )


def update_progress(
    job_id: str,
    processed: int | None = None,
    succeeded: int | None = None,
    failed: int | None = None,
) -> None:
    """Persist counters for a job in flight. Counters never decrease and
    processed never exceeds total_records."""
    assignments = []
    params: list = []
    if processed is not None:
        assignments.append("processed = MIN(total_records, MAX(processed, ?))")
        params.append(processed)
    if succeeded is not None:
        assignments.append("succeeded = MAX(succeeded, ?)")
        params.append(succeeded)
    if failed is not None:
        assignments.append("failed = MAX(failed, ?)")
        params.append(failed)
    if not assignments:
        return
    assignments.append("updated_at = ?")
    params.append(utc_now_iso())
    params.append(job_id)
    with get_conn() as conn:
        conn.execute(
            f"UPDATE bulk_jobs SET {', '.join(assignments)} WHERE job_id = ?",
            params,
        )
