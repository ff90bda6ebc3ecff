"""Identity record models."""
from datetime import date
from enum import Enum

from pydantic import BaseModel


class RecordStatus(str, Enum):
    """Workflow status of a local identity record."""

    PENDING_VERIFICATION = "PENDING_VERIFICATION"
    PENDING_GRADE_VALIDATION = "PENDING_GRADE_VALIDATION"
    AWAITING_REVIEW = "AWAITING_REVIEW"
    REVIEWED = "REVIEWED"
    ACTIVE = "ACTIVE"
    INACTIVE = "INACTIVE"
    FLAGGED_DATA_MISMATCH = "FLAGGED_DATA_MISMATCH"
    FLAGGED_NOT_IN_SOT = "FLAGGED_NOT_IN_SOT"
    REJECTED = "REJECTED"


class IdentityRecord(BaseModel):
    """A tenant-owned record subject to verification."""

    record_id: str
    tenant_id: str
    psn: str
    full_name: str
    grade_level: str | None = None
    department_id: str | None = None
    cadre: str | None = None
    on_transfer: bool | None = None
    date_of_first_appointment: date | None = None
    date_of_confirmation: date | None = None
    bvn: str | None = None
    status: RecordStatus = RecordStatus.PENDING_VERIFICATION
    version: int = 0
    verified_at: str | None = None
    created_at: str | None = None
    updated_at: str | None = None


class Department(BaseModel):
    """Tenant-scoped organisational unit."""

    department_id: str
    tenant_id: str
    name: str
