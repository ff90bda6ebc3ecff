"""Utility modules."""
from bioverify_core.util.ids import generate_id
from bioverify_core.util.time import utc_now_iso
from bioverify_core.util.errors import (
    ArchiveError,
    BulkVerificationError,
    ConfigurationError,
    CryptoError,
    JobStateError,
    ProviderError,
    ProviderTimeoutError,
    RecordConflictError,
    ResultFormatError,
    UnsupportedProviderError,
    ValidationError,
)

__all__ = [
    "generate_id",
    "utc_now_iso",
    "ArchiveError",
    "BulkVerificationError",
    "ConfigurationError",
    "CryptoError",
    "JobStateError",
    "ProviderError",
    "ProviderTimeoutError",
    "RecordConflictError",
    "ResultFormatError",
    "UnsupportedProviderError",
    "ValidationError",
]
