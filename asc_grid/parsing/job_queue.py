from __future__ import annotations

from typing import Any, Callable, Optional

from redis import Redis
from rq import Queue, Worker
from rq.exceptions import InvalidJobOperation, NoSuchJobError
from rq.job import Job


class RQJobHandle:
    """
    Future-like view over an RQ job so `AsyncComputeCache` can poll it.
    A job whose Redis record has disappeared counts as done; `result()` then
    raises instead of leaving the request pending forever.
    """

    def __init__(self, job: Job):
        self.job = job
        self._missing = False

    @property
    def id(self) -> str:
        return self.job.id

    def done(self) -> bool:
        if self._missing:
            return True
        try:
            return self.job.is_finished or self.job.is_failed
        except (NoSuchJobError, InvalidJobOperation):
            self._missing = True
            return True

    def result(self) -> Any:
        if self._missing:
            raise RuntimeError(f"Grid job {self.job.id} is no longer in Redis")
        if self.job.is_failed:
            latest = self.job.latest_result()
            detail = latest.exc_string if latest is not None else "unknown error"
            raise RuntimeError(f"Grid job {self.job.id} failed: {detail}")
        return self.job.return_value()


class RQWorkerPool:
    """
    Redis-backed worker pool using RQ. Jobs are pushed to Redis and executed by
    workers started with `work()` in a dedicated process, so submitted
    callables and their arguments must be importable and picklable.

    `job_timeout=-1` runs jobs without a deadline and `result_ttl=-1` keeps
    results until they are consumed, overriding RQ's 180 s / 500 s defaults.
    """

    def __init__(
        self,
        redis_url: str = "redis://localhost:6379/0",
        queue_name: str = "grid-parse",
        queue: Optional[Queue] = None,
        job_timeout: int = -1,
        result_ttl: int = -1,
    ):
        if queue is None:
            self.redis = Redis.from_url(redis_url)
            queue = Queue(queue_name, connection=self.redis)
        else:
            self.redis = queue.connection
        self.queue = queue
        self.job_timeout = job_timeout
        self.result_ttl = result_ttl

    def submit(self, fn: Callable[..., Any], *args: Any) -> RQJobHandle:
        job = self.queue.enqueue(
            fn,
            *args,
            job_timeout=self.job_timeout,
            result_ttl=self.result_ttl,
            retry=None,
        )
        return RQJobHandle(job)

    def work(self) -> None:
        worker = Worker([self.queue], connection=self.redis)
        worker.work(with_scheduler=True)
