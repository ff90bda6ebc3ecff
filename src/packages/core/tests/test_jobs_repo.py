"""Tests for the bulk job store."""
import pytest

from bioverify_core.jobs import (
    JobStatus,
    complete_job,
    create_job,
    fail_job,
    get_job,
    list_active_jobs,
    list_jobs_for_tenant,
    mark_running,
    set_external_job_id,
    update_progress,
)
from bioverify_core.util import JobStateError


def test_create_job_is_pending():
    job = create_job("t1", "u1", 5)
    assert job.status == JobStatus.PENDING
    assert job.total_records == 5
    assert job.processed == job.succeeded == job.failed == 0
    assert job.external_job_id is None
    assert job.status_message is None
    assert job.created_at and job.updated_at


def test_forward_transitions():
    job = create_job("t1", "u1", 3)
    mark_running(job.job_id)
    set_external_job_id(job.job_id, "ext-1")
    done = complete_job(job.job_id, processed=3, succeeded=2, failed=1, status_message="ok")
    assert done.status == JobStatus.COMPLETED
    assert done.external_job_id == "ext-1"
    assert (done.processed, done.succeeded, done.failed) == (3, 2, 1)
    assert done.status_message == "ok"


def test_cannot_complete_pending_job():
    job = create_job("t1", "u1", 1)
    with pytest.raises(JobStateError):
        complete_job(job.job_id, 1, 1, 0, "ok")
    assert get_job(job.job_id).status == JobStatus.PENDING


def test_terminal_status_is_final():
    job = create_job("t1", "u1", 1)
    mark_running(job.job_id)
    fail_job(job.job_id, "Job failed: boom")
    with pytest.raises(JobStateError):
        mark_running(job.job_id)
    with pytest.raises(JobStateError):
        complete_job(job.job_id, 1, 1, 0, "ok")
    assert get_job(job.job_id).status == JobStatus.FAILED


def test_counters_never_decrease_and_processed_capped():
    job = create_job("t1", "u1", 4)
    mark_running(job.job_id)
    update_progress(job.job_id, processed=3, succeeded=3)
    update_progress(job.job_id, processed=1, succeeded=1)
    update_progress(job.job_id, processed=10)
    current = get_job(job.job_id)
    assert current.processed == 4
    assert current.succeeded == 3


def test_fail_keeps_partial_progress_balanced():
    job = create_job("t1", "u1", 10)
    mark_running(job.job_id)
    update_progress(job.job_id, processed=4, succeeded=2)
    failed = fail_job(job.job_id, "Job failed: boom")
    assert failed.status == JobStatus.FAILED
    assert failed.processed == failed.succeeded + failed.failed
    assert failed.succeeded == 2


def test_list_jobs_for_tenant_newest_first():
    first = create_job("t1", "u1", 1)
    second = create_job("t1", "u1", 2)
    create_job("t2", "u9", 3)
    jobs = list_jobs_for_tenant("t1")
    assert [j.job_id for j in jobs] == [second.job_id, first.job_id]


def test_list_active_jobs():
    pending = create_job("t1", "u1", 1)
    done = create_job("t1", "u1", 1)
    mark_running(done.job_id)
    complete_job(done.job_id, 1, 1, 0, "ok")
    active = [j.job_id for j in list_active_jobs()]
    assert pending.job_id in active
    assert done.job_id not in active


def test_missing_job():
    assert get_job("nope") is None
    with pytest.raises(JobStateError, match="missing"):
        mark_running("nope")
