"""Decoded provider result rows."""
from datetime import date

from pydantic import BaseModel, Field


class ProviderResultRow(BaseModel):
    """One row of the provider's result file.

    ``raw`` keeps every column as trimmed text keyed by the lower-cased
    header; the typed fields are derived from it.
    """

    psn: str
    raw: dict[str, str] = Field(default_factory=dict)
    first_name: str = ""
    middle_name: str = ""
    surname: str = ""
    grade_level: str | None = None
    department: str | None = None
    cadre: str | None = None
    on_transfer: bool | None = None
    date_of_first_appointment: date | None = None
    date_of_confirmation: date | None = None
    bvn: str | None = None

    @property
    def full_name(self) -> str:
        parts = [self.first_name, self.middle_name, self.surname]
        return " ".join(p for p in parts if p)
