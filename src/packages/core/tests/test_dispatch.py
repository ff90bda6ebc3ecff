"""Tests for handing jobs to workers."""
from redis.exceptions import ConnectionError as RedisConnectionError

from bioverify_core import dispatch


class _RecordingQueue:
    enqueued = []

    def __init__(self, name, connection=None):
        self.name = name

    def enqueue(self, func, *args, **kwargs):
        _RecordingQueue.enqueued.append((self.name, func, args, kwargs))


class _DownQueue:
    def __init__(self, name, connection=None):
        pass

    def enqueue(self, func, *args, **kwargs):
        raise RedisConnectionError("Connection refused")


def test_enqueue_on_rq(monkeypatch):
    _RecordingQueue.enqueued = []
    monkeypatch.setattr(dispatch, "Queue", _RecordingQueue)
    dispatch.enqueue_job("job-1", ["r1", "r2"])
    name, func, args, kwargs = _RecordingQueue.enqueued[0]
    assert name == "default"
    assert func == "bioverify_worker.tasks.run_bulk_verification_job"
    assert args == ("job-1", ["r1", "r2"])
    assert kwargs == {"job_timeout": -1}


def test_falls_back_to_thread_pool(monkeypatch):
    submitted = []
    monkeypatch.setattr(dispatch, "Queue", _DownQueue)
    monkeypatch.setattr(dispatch._executor, "submit", lambda fn, *args: submitted.append((fn, args)))
    dispatch.enqueue_job("job-2", ["r1"])
    assert submitted == [(dispatch._run_in_background, ("job-2", ["r1"]))]


def test_background_run_swallows_crash(monkeypatch):
    import bioverify_core.verification as verification

    def boom(job_id, record_ids):
        raise RuntimeError("db gone")

    monkeypatch.setattr(verification, "run_job", boom)
    dispatch._run_in_background("job-3", [])
