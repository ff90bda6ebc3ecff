"""Apply provider results to local identity records."""
from typing import Callable

import structlog
from pydantic import BaseModel

from bioverify_core.ingest import ProviderResultRow
from bioverify_core.jobs import update_progress
from bioverify_core.records import (
    IdentityRecord,
    RecordStatus,
    find_or_create_department,
    save_verified_record,
)
from bioverify_core.util import RecordConflictError, utc_now_iso

logger = structlog.get_logger()


class ReconciliationResult(BaseModel):
    """Counters produced by one reconciliation pass."""

    total: int
    processed: int
    succeeded: int
    failed: int
    unmatched_rows: int = 0
    conflicts: int = 0


def apply_row(
    record: IdentityRecord,
    row: ProviderResultRow,
    department_id: str | None,
    verified_at: str,
) -> IdentityRecord:
    """Return a copy of ``record`` carrying the provider's values.

    Fields the provider left blank (or sent unparsable) keep their local value.
    """
    update = {
        "status": RecordStatus.PENDING_GRADE_VALIDATION,
        "verified_at": verified_at,
    }
    if row.full_name:
        update["full_name"] = row.full_name
    if department_id:
        update["department_id"] = department_id
    for field in (
        "grade_level",
        "cadre",
        "on_transfer",
        "date_of_first_appointment",
        "date_of_confirmation",
        "bvn",
    ):
        value = getattr(row, field)
        if value is not None:
            update[field] = value
    return record.model_copy(update=update)


class Reconciler:
    """Matches result rows to a job's records by PSN and saves each match."""

    def __init__(
        self,
        job_id: str,
        tenant_id: str,
        progress_batch_size: int = 50,
        clock: Callable[[], str] = utc_now_iso,
    ):
        self.job_id = job_id
        self.tenant_id = tenant_id
        self.progress_batch_size = max(1, progress_batch_size)
        self.clock = clock
        self._departments: dict[str, str] = {}

    def _department_id(self, name: str | None) -> str | None:
        if not name:
            return None
        key = " ".join(name.split()).lower()
        if key not in self._departments:
            self._departments[key] = find_or_create_department(self.tenant_id, name).department_id
        return self._departments[key]

    def run(
        self,
        records: list[IdentityRecord],
        rows: list[ProviderResultRow],
        total: int | None = None,
    ) -> ReconciliationResult:
        total = len(records) if total is None else total
        by_psn = {r.psn.strip(): r for r in records}
        seen: set[str] = set()
        matched: set[str] = set()
        unmatched = 0
        conflicts = 0

        for i, row in enumerate(rows):
            psn = row.psn.strip()
            record = by_psn.get(psn)
            if record is None:
                unmatched += 1
                logger.debug("row_unmatched", job_id=self.job_id, row=i + 1)
                continue
            if psn in seen:
                logger.warning("row_duplicate_psn", job_id=self.job_id, row=i + 1)
                continue
            seen.add(psn)

            updated = apply_row(record, row, self._department_id(row.department), self.clock())
            try:
                by_psn[psn] = save_verified_record(updated)
            except RecordConflictError as e:
                conflicts += 1
                logger.warning("record_conflict", job_id=self.job_id, record_id=record.record_id, error=str(e))
                continue
            matched.add(psn)

            if len(matched) % self.progress_batch_size == 0:
                update_progress(self.job_id, processed=len(matched), succeeded=len(matched))

        succeeded = len(matched)
        if unmatched:
            logger.info("rows_unmatched", job_id=self.job_id, count=unmatched)
        result = ReconciliationResult(
            total=total,
            processed=total,
            succeeded=succeeded,
            failed=total - succeeded,
            unmatched_rows=unmatched,
            conflicts=conflicts,
        )
        logger.info("reconciliation_done", job_id=self.job_id, **result.model_dump())
        return result


def reconcile(
    job_id: str,
    tenant_id: str,
    records: list[IdentityRecord],
    rows: list[ProviderResultRow],
    total: int | None = None,
    progress_batch_size: int = 50,
) -> ReconciliationResult:
    """Reconcile ``rows`` against ``records`` for one job."""
    return Reconciler(job_id, tenant_id, progress_batch_size).run(records, rows, total)
