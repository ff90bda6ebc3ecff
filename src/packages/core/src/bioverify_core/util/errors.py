"""Error taxonomy for the bulk verification pipeline.

Everything raised from inside a job run derives from BulkVerificationError, so
the job runner can turn any of them into a FAILED job with a readable message.
"""


class BulkVerificationError(Exception):
    """Base class for pipeline errors."""


class ConfigurationError(BulkVerificationError):
    """Tenant provider configuration is missing or unparseable."""


class UnsupportedProviderError(BulkVerificationError):
    """No bulk strategy exists for the configured provider."""


class ProviderError(BulkVerificationError):
    """The provider API returned an error, a bad payload, or a FAILED job."""


class ProviderTimeoutError(ProviderError):
    """The provider job did not finish before the polling deadline."""


class CryptoError(BulkVerificationError):
    """The result payload could not be decrypted."""


class ArchiveError(BulkVerificationError):
    """The result container is empty or malformed."""


class ResultFormatError(BulkVerificationError):
    """The decrypted result file lacks a column the pipeline cannot do without."""


class JobStateError(BulkVerificationError):
    """A job status update would move the job backwards."""


class RecordConflictError(BulkVerificationError):
    """A record changed underneath us (version mismatch)."""


class ValidationError(BulkVerificationError):
    """Caller supplied invalid input."""
