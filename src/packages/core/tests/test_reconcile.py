"""Tests for reconciliation of provider rows with local records."""
from datetime import date

from bioverify_core.ingest import ProviderResultRow
from bioverify_core.jobs import create_job, get_job, mark_running
from bioverify_core.records import (
    RecordStatus,
    add_record,
    get_record,
    list_departments,
    save_verified_record,
)
from bioverify_core.reconcile import Reconciler, apply_row, reconcile


def _row(psn, first="Ada", surname="Lovelace", ministry="Ministry of Works", **kw):
    return ProviderResultRow(
        psn=psn,
        first_name=first,
        surname=surname,
        grade_level=kw.get("grade_level", "GL10"),
        department=ministry,
        cadre="Engineer",
        on_transfer=kw.get("on_transfer", False),
        date_of_first_appointment=kw.get("date_of_first_appointment", date(2010, 1, 1)),
        date_of_confirmation=None,
        bvn="22233344455",
    )


def _job(total):
    job = create_job("t1", "u1", total)
    mark_running(job.job_id)
    return job


def test_two_matched_one_unmatched():
    records = [add_record("t1", f"P{i}", f"Local {i}") for i in range(1, 4)]
    job = _job(3)
    rows = [_row("P1"), _row("P2", first="Grace", surname="Hopper"), _row("X9")]

    result = reconcile(job.job_id, "t1", records, rows)

    assert (result.total, result.processed, result.succeeded, result.failed) == (3, 3, 2, 1)
    assert result.unmatched_rows == 1
    assert result.processed == result.succeeded + result.failed

    p1 = get_record(records[0].record_id)
    assert p1.full_name == "Ada Lovelace"
    assert p1.status == RecordStatus.PENDING_GRADE_VALIDATION
    assert p1.grade_level == "GL10"
    assert p1.on_transfer is False
    assert p1.date_of_first_appointment == date(2010, 1, 1)
    assert p1.verified_at is not None
    assert get_record(records[1].record_id).full_name == "Grace Hopper"
    untouched = get_record(records[2].record_id)
    assert untouched.status == RecordStatus.PENDING_VERIFICATION
    assert untouched.full_name == "Local 3"


def test_departments_found_or_created_once():
    records = [add_record("t1", "P1", "A"), add_record("t1", "P2", "B")]
    job = _job(2)
    reconcile(job.job_id, "t1", records, [_row("P1"), _row("P2", ministry="ministry of works")])
    departments = list_departments("t1")
    assert len(departments) == 1
    assert get_record(records[0].record_id).department_id == departments[0].department_id
    assert get_record(records[1].record_id).department_id == departments[0].department_id


def test_duplicate_rows_count_once():
    records = [add_record("t1", "P1", "A")]
    job = _job(1)
    result = reconcile(job.job_id, "t1", records, [_row("P1"), _row("P1", first="Other")])
    assert result.succeeded == 1
    assert result.failed == 0
    assert get_record(records[0].record_id).full_name == "Ada Lovelace"


def test_no_rows():
    records = [add_record("t1", "P1", "A")]
    job = _job(1)
    result = reconcile(job.job_id, "t1", records, [])
    assert (result.succeeded, result.failed, result.processed) == (0, 1, 1)


def test_concurrent_edit_is_not_counted():
    record = add_record("t1", "P1", "A")
    job = _job(1)
    # another writer gets in first
    save_verified_record(record.model_copy(update={"full_name": "Edited elsewhere"}))
    result = reconcile(job.job_id, "t1", [record], [_row("P1")])
    assert result.succeeded == 0
    assert result.conflicts == 1
    assert get_record(record.record_id).full_name == "Edited elsewhere"


def test_duplicate_row_after_conflict_is_not_retried():
    record = add_record("t1", "P1", "A")
    job = _job(1)
    save_verified_record(record.model_copy(update={"full_name": "Edited elsewhere"}))
    result = reconcile(job.job_id, "t1", [record], [_row("P1"), _row("P1", first="Other")])
    assert result.succeeded == 0
    assert result.conflicts == 1
    assert result.unmatched_rows == 0
    assert get_record(record.record_id).full_name == "Edited elsewhere"


def test_progress_flushed_in_batches():
    records = [add_record("t1", f"P{i}", "x") for i in range(5)]
    job = _job(5)
    Reconciler(job.job_id, "t1", progress_batch_size=2).run(records, [_row(f"P{i}") for i in range(5)])
    current = get_job(job.job_id)
    assert current.succeeded == 4
    assert current.processed == 4


def test_blank_provider_values_keep_local_values():
    record = add_record("t1", "P1", "Local Name", grade_level="GL07")
    row = ProviderResultRow(psn="P1")
    updated = apply_row(record, row, None, "2024-01-01T00:00:00Z")
    assert updated.full_name == "Local Name"
    assert updated.grade_level == "GL07"
    assert updated.status == RecordStatus.PENDING_GRADE_VALIDATION
