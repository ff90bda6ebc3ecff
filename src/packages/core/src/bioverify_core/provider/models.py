"""Provider API payloads."""
from pydantic import BaseModel, Field


class ProviderJobStatus(BaseModel):
    """Result of one status probe."""

    status: str
    file_url: str | None = Field(default=None, alias="fileUrl")
    message: str | None = None

    class Config:
        populate_by_name = True
        extra = "ignore"

    @property
    def is_completed(self) -> bool:
        return self.status.strip().upper() == "COMPLETED"

    @property
    def is_failed(self) -> bool:
        return self.status.strip().upper() == "FAILED"

    @property
    def is_terminal(self) -> bool:
        return self.is_completed or self.is_failed
