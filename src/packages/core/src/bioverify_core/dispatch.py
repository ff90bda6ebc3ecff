"""Hand bulk jobs to a worker without blocking the caller."""
from concurrent.futures import ThreadPoolExecutor

import structlog
from redis import Redis
from redis.exceptions import RedisError
from rq import Queue

from bioverify_core.settings import get_settings

logger = structlog.get_logger()

WORKER_TASK = "bioverify_worker.tasks.run_bulk_verification_job"

# Used only when Redis is unreachable.
_executor = ThreadPoolExecutor(max_workers=4, thread_name_prefix="bulk-job")


def _run_in_background(job_id: str, record_ids: list[str]) -> None:
    from bioverify_core.verification import run_job

    try:
        run_job(job_id, record_ids)
    except Exception as e:
        logger.exception("background_job_crashed", job_id=job_id, error=str(e))


def enqueue_job(job_id: str, record_ids: list[str]) -> None:
    """Enqueue a job on RQ, or run it on a local thread pool as fallback."""
    settings = get_settings()
    try:
        conn = Redis.from_url(settings.redis_url)
        q = Queue(settings.queue_name, connection=conn)
        q.enqueue(WORKER_TASK, job_id, record_ids, job_timeout=settings.job_timeout)
        logger.info("job_enqueued", job_id=job_id, queue=settings.queue_name)
    except (RedisError, OSError) as e:
        logger.warning("rq_enqueue_failed_running_in_thread", job_id=job_id, error=str(e))
        _executor.submit(_run_in_background, job_id, record_ids)
