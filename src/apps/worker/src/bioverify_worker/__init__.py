"""RQ worker for bulk verification jobs."""
