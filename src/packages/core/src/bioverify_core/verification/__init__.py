"""Bulk verification orchestration."""
from bioverify_core.verification.runner import (
    SUCCESS_MESSAGE,
    run_job,
    start_bulk_verification,
    start_job,
)
from bioverify_core.verification.strategies import (
    STRATEGIES,
    BulkStrategy,
    OptimaStrategy,
    get_strategy,
)

__all__ = [
    "SUCCESS_MESSAGE",
    "STRATEGIES",
    "BulkStrategy",
    "OptimaStrategy",
    "get_strategy",
    "run_job",
    "start_bulk_verification",
    "start_job",
]
