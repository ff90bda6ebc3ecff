"""Identity records and departments."""
from bioverify_core.records.models import Department, IdentityRecord, RecordStatus
from bioverify_core.records.repo import (
    add_record,
    find_or_create_department,
    get_record,
    get_records,
    list_departments,
    list_records_by_status,
    save_verified_record,
)

__all__ = [
    "Department",
    "IdentityRecord",
    "RecordStatus",
    "add_record",
    "find_or_create_department",
    "get_record",
    "get_records",
    "list_departments",
    "list_records_by_status",
    "save_verified_record",
]
