"""Bulk job orchestration: create a job, then drive it to a terminal status."""
import time
from typing import Callable

import structlog

from bioverify_core.jobs import (
    BulkJob,
    JobStatus,
    complete_job,
    create_job,
    fail_job,
    get_job,
    mark_running,
)
from bioverify_core.provider import ProviderClient, get_provider_client
from bioverify_core.records import (
    IdentityRecord,
    RecordStatus,
    get_records,
    list_records_by_status,
)
from bioverify_core.settings import Settings, get_settings
from bioverify_core.tenants import TenantProviderConfig, get_provider_config
from bioverify_core.util import ValidationError
from bioverify_core.verification.strategies import get_strategy

logger = structlog.get_logger()

SUCCESS_MESSAGE = "Bulk verification completed successfully."

Dispatcher = Callable[[str, list[str]], None]
ClientFactory = Callable[[TenantProviderConfig], ProviderClient]


def _default_dispatch(job_id: str, record_ids: list[str]) -> None:
    from bioverify_core.dispatch import enqueue_job

    enqueue_job(job_id, record_ids)


def start_job(
    tenant_id: str,
    actor_id: str,
    records: list[IdentityRecord],
    dispatch: Dispatcher | None = None,
) -> str | None:
    """Create a PENDING job for ``records`` and hand it to a worker.

    Returns the job id, or None (and creates nothing) when ``records`` is empty.
    """
    if not records:
        logger.info("no_records_to_verify", tenant_id=tenant_id)
        return None
    job = create_job(tenant_id, actor_id, len(records))
    (dispatch or _default_dispatch)(job.job_id, [r.record_id for r in records])
    logger.info("job_scheduled", job_id=job.job_id, tenant_id=tenant_id, actor_id=actor_id)
    return job.job_id


def start_bulk_verification(
    tenant_id: str, actor_id: str, dispatch: Dispatcher | None = None
) -> str | None:
    """Start a job over every record of the tenant awaiting verification."""
    if not tenant_id or not actor_id:
        raise ValidationError("tenant_id and actor_id are required")
    logger.info("bulk_verification_requested", tenant_id=tenant_id, actor_id=actor_id)
    records = list_records_by_status(tenant_id, RecordStatus.PENDING_VERIFICATION)
    return start_job(tenant_id, actor_id, records, dispatch)


def _default_client_factory(settings: Settings) -> ClientFactory:
    def factory(config: TenantProviderConfig) -> ProviderClient:
        return get_provider_client(
            config,
            timeout=settings.provider_timeout_seconds,
            retries=settings.provider_retries,
        )

    return factory


def run_job(
    job_id: str,
    record_ids: list[str],
    settings: Settings | None = None,
    client_factory: ClientFactory | None = None,
    sleep: Callable[[float], None] = time.sleep,
    clock: Callable[[], float] = time.monotonic,
) -> BulkJob | None:
    """Run a job to COMPLETED or FAILED. Never raises for pipeline failures."""
    settings = settings or get_settings()
    job = get_job(job_id)
    if job is None:
        logger.warning("job_not_found", job_id=job_id)
        return None
    if job.status != JobStatus.PENDING:
        # jobs are never resumed
        logger.warning("job_not_pending", job_id=job_id, status=job.status.value)
        return job

    logger.info("job_started", job_id=job_id, tenant_id=job.tenant_id, total=job.total_records)
    try:
        job = mark_running(job_id)
        records = get_records(record_ids)
        config = get_provider_config(job.tenant_id)
        strategy = get_strategy(
            config.provider_name,
            poll_interval=settings.poll_interval_seconds,
            poll_timeout=settings.poll_timeout_seconds,
            progress_batch_size=settings.progress_batch_size,
            sleep=sleep,
            clock=clock,
        )
        client = (client_factory or _default_client_factory(settings))(config)
        result = strategy.run(job, config, records, client)
        job = complete_job(
            job_id,
            processed=result.processed,
            succeeded=result.succeeded,
            failed=result.failed,
            status_message=SUCCESS_MESSAGE,
        )
        logger.info("job_completed", job_id=job_id, succeeded=result.succeeded, failed=result.failed)
    except Exception as e:
        logger.exception("job_failed", job_id=job_id, error=str(e))
        job = fail_job(job_id, f"Job failed: {e}")
    return job
