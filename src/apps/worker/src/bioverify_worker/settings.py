"""Worker settings."""
import os


def get_redis_url() -> str:
    """Get Redis URL from environment."""
    return os.environ.get("REDIS_URL", "redis://redis:6379/0")


def get_queue_names() -> list[str]:
    """Queues to listen on (comma-separated QUEUES, default 'default')."""
    raw = os.environ.get("QUEUES", "default")
    return [q.strip() for q in raw.split(",") if q.strip()]
