"""Provider-specific bulk verification strategies."""
import time
from abc import ABC, abstractmethod
from typing import Callable

import structlog

from bioverify_core.ingest import decode_artifact
from bioverify_core.jobs import BulkJob, set_external_job_id
from bioverify_core.provider import ProviderClient, ProviderJobStatus
from bioverify_core.reconcile import ReconciliationResult, reconcile
from bioverify_core.records import IdentityRecord
from bioverify_core.tenants import TenantProviderConfig
from bioverify_core.util import ProviderError, ProviderTimeoutError, UnsupportedProviderError

logger = structlog.get_logger()


class BulkStrategy(ABC):
    """Runs one bulk job against one provider family."""

    name: str = ""

    def __init__(
        self,
        poll_interval: float = 30.0,
        poll_timeout: float | None = None,
        progress_batch_size: int = 50,
        sleep: Callable[[float], None] = time.sleep,
        clock: Callable[[], float] = time.monotonic,
    ):
        self.poll_interval = poll_interval
        self.poll_timeout = poll_timeout
        self.progress_batch_size = progress_batch_size
        self.sleep = sleep
        self.clock = clock

    @abstractmethod
    def run(
        self,
        job: BulkJob,
        config: TenantProviderConfig,
        records: list[IdentityRecord],
        client: ProviderClient,
    ) -> ReconciliationResult:
        """Submit, wait, download, decode and reconcile."""
        pass


class OptimaStrategy(BulkStrategy):
    """Batch inquiry with an encrypted, zipped CSV result file."""

    name = "OPTIMA"

    def run(self, job, config, records, client):
        psns = [r.psn for r in records]
        provider_job_id = client.submit(psns)
        set_external_job_id(job.job_id, provider_job_id)
        logger.info("bulk_job_initiated", job_id=job.job_id, provider_job_id=provider_job_id)

        status = self.wait_for_completion(client, job.job_id, provider_job_id)

        artifact = client.fetch_artifact(status.file_url)
        rows = decode_artifact(artifact, config.decryption_key, config.decryption_iv)
        return reconcile(
            job.job_id,
            job.tenant_id,
            records,
            rows,
            total=job.total_records,
            progress_batch_size=self.progress_batch_size,
        )

    def wait_for_completion(
        self, client: ProviderClient, job_id: str, provider_job_id: str
    ) -> ProviderJobStatus:
        """Poll until the provider reports COMPLETED or FAILED.

        Without a poll_timeout this loops for as long as the provider keeps
        reporting a non-terminal status.
        """
        started = self.clock()
        attempt = 0
        while True:
            self.sleep(self.poll_interval)
            attempt += 1
            status = client.poll_status(provider_job_id)
            logger.info(
                "poll_status",
                job_id=job_id,
                provider_job_id=provider_job_id,
                attempt=attempt,
                status=status.status,
            )
            if status.is_completed:
                if not status.file_url or not status.file_url.strip():
                    raise ProviderError(
                        "Provider job completed but did not provide a valid file URL."
                    )
                return status
            if status.is_failed:
                raise ProviderError(
                    f"Provider job failed with message: {status.message or ''}"
                )
            if self.poll_timeout is not None and self.clock() - started >= self.poll_timeout:
                raise ProviderTimeoutError(
                    f"Provider job {provider_job_id} still '{status.status}' after "
                    f"{self.poll_timeout:g}s ({attempt} polls)"
                )


STRATEGIES: dict[str, type[BulkStrategy]] = {
    OptimaStrategy.name: OptimaStrategy,
}


def get_strategy(provider_name: str, **kwargs) -> BulkStrategy:
    """Get a strategy instance for a provider name (case-insensitive)."""
    strategy_cls = STRATEGIES.get(provider_name.strip().upper())
    if strategy_cls is None:
        raise UnsupportedProviderError(
            f"Bulk verification not supported for provider: {provider_name}"
        )
    return strategy_cls(**kwargs)
