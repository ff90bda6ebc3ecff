"""Identity record and department repository using SQLite."""
from typing import Any, Iterable

import structlog

from bioverify_core.db import get_conn
from bioverify_core.records.models import Department, IdentityRecord, RecordStatus
from bioverify_core.util import RecordConflictError, generate_id, utc_now_iso

logger = structlog.get_logger()


def _to_record(row) -> IdentityRecord:
    data: dict[str, Any] = dict(row)
    if data.get("on_transfer") is not None:
        data["on_transfer"] = bool(data["on_transfer"])
    return IdentityRecord(**data)


def add_record(
    tenant_id: str,
    psn: str,
    full_name: str,
    status: RecordStatus = RecordStatus.PENDING_VERIFICATION,
    **fields: Any,
) -> IdentityRecord:
    """Insert a record."""
    record_id = generate_id()
    now = utc_now_iso()
    with get_conn() as conn:
        conn.execute(
            """
            INSERT INTO records (record_id, tenant_id, psn, full_name, grade_level, cadre, bvn, status, version, created_at, updated_at)
            VALUES (?, ?, ?, ?, ?, ?, ?, ?, 0, ?, ?)
            """,
            (
                record_id,
                tenant_id,
                psn,
                full_name,
                fields.get("grade_level"),
                fields.get("cadre"),
                fields.get("bvn"),
                status.value,
                now,
                now,
            ),
        )
    return get_record(record_id)


def get_record(record_id: str) -> IdentityRecord | None:
    """Get a record by ID."""
    with get_conn() as conn:
        row = conn.execute(
            "SELECT * FROM records WHERE record_id = ?", (record_id,)
        ).fetchone()
        if row is None:
            return None
        return _to_record(row)


def get_records(record_ids: Iterable[str]) -> list[IdentityRecord]:
    """Get records by ID, in the order given. Unknown IDs are dropped."""
    ids = list(record_ids)
    if not ids:
        return []
    placeholders = ", ".join("?" for _ in ids)
    with get_conn() as conn:
        rows = conn.execute(
            f"SELECT * FROM records WHERE record_id IN ({placeholders})", ids
        ).fetchall()
    by_id = {r["record_id"]: _to_record(r) for r in rows}
    return [by_id[i] for i in ids if i in by_id]


def list_records_by_status(tenant_id: str, status: RecordStatus) -> list[IdentityRecord]:
    """List a tenant's records in the given status."""
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT * FROM records WHERE tenant_id = ? AND status = ? ORDER BY created_at, rowid",
            (tenant_id, status.value),
        ).fetchall()
        return [_to_record(r) for r in rows]


def save_verified_record(record: IdentityRecord) -> IdentityRecord:
    """Write back verification fields, guarded by the record version.

    Raises RecordConflictError if the row was modified since ``record`` was read.
    """
    now = utc_now_iso()
    with get_conn() as conn:
        cur = conn.execute(
            """
            UPDATE records SET
                full_name = ?,
                grade_level = ?,
                department_id = ?,
                cadre = ?,
                on_transfer = ?,
                date_of_first_appointment = ?,
                date_of_confirmation = ?,
                bvn = ?,
                status = ?,
                verified_at = ?,
                updated_at = ?,
                version = version + 1
            WHERE record_id = ? AND version = ?
            """,
            (
                record.full_name,
                record.grade_level,
                record.department_id,
                record.cadre,
                None if record.on_transfer is None else int(record.on_transfer),
                record.date_of_first_appointment.isoformat() if record.date_of_first_appointment else None,
                record.date_of_confirmation.isoformat() if record.date_of_confirmation else None,
                record.bvn,
                record.status.value,
                record.verified_at,
                now,
                record.record_id,
                record.version,
            ),
        )
        updated = cur.rowcount
    if not updated:
        raise RecordConflictError(
            f"Record {record.record_id} was modified concurrently (expected version {record.version})"
        )
    return get_record(record.record_id)


def find_or_create_department(tenant_id: str, name: str) -> Department:
    """Look up a tenant's department by name (case-insensitive), creating it if absent."""
    clean = " ".join(name.split())
    key = clean.lower()
    with get_conn() as conn:
        cur = conn.execute(
            """
            INSERT INTO departments (department_id, tenant_id, name, name_key, created_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(tenant_id, name_key) DO NOTHING
            """,
            (generate_id(), tenant_id, clean, key, utc_now_iso()),
        )
        created = cur.rowcount > 0
        row = conn.execute(
            "SELECT department_id, tenant_id, name FROM departments WHERE tenant_id = ? AND name_key = ?",
            (tenant_id, key),
        ).fetchone()
    if created:
        logger.info("department_created", tenant_id=tenant_id, department=clean)
    return Department(**dict(row))


def list_departments(tenant_id: str) -> list[Department]:
    """List a tenant's departments."""
    with get_conn() as conn:
        rows = conn.execute(
            "SELECT department_id, tenant_id, name FROM departments WHERE tenant_id = ? ORDER BY name",
            (tenant_id,),
        ).fetchall()
        return [Department(**dict(r)) for r in rows]
