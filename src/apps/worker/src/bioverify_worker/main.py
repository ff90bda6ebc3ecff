"""RQ worker entrypoint."""
import structlog
from redis import Redis
from rq import Worker

from bioverify_core.db import init_db
from bioverify_core.settings import get_settings
from bioverify_core.util.logging import configure_logging
from bioverify_worker.settings import get_queue_names, get_redis_url
from bioverify_worker.tasks import run_bulk_verification_job  # noqa: F401

logger = structlog.get_logger()


def main():
    """Start the worker."""
    configure_logging(get_settings().log_level)
    init_db()
    queues = get_queue_names()
    logger.info("worker_starting", queues=queues)
    conn = Redis.from_url(get_redis_url())
    worker = Worker(queues, connection=conn)
    worker.work()


if __name__ == "__main__":
    main()
