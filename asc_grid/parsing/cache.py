from __future__ import annotations

import logging
import threading
import time
import uuid
from dataclasses import dataclass, field
from typing import Any, Callable, Generic, List, Optional, Protocol, Tuple, TypeVar

from .engine import parse_grid
from .errors import ParseError
from .models import RequestState

logger = logging.getLogger(__name__)

T = TypeVar("T")


class TaskHandle(Protocol):
    def done(self) -> bool:
        ...

    def result(self) -> Any:
        ...


class WorkerPool(Protocol):
    """
    Anything with an Executor-style `submit`. `concurrent.futures.Executor`
    and `RQWorkerPool` both qualify.
    """

    def submit(self, fn: Callable[..., Any], *args: Any) -> TaskHandle:
        ...


def capture_outcome(compute: Callable[[Any], T], source: Any):
    """
    Background task entrypoint. A `ParseError` is returned rather than raised,
    so the failure is stored as the task's value and keeps its type across
    process boundaries.
    """
    try:
        return compute(source)
    except ParseError as exc:
        return exc


@dataclass(eq=False)
class PendingRequest:
    request_id: str
    source: Any
    handle: TaskHandle
    submitted_at: float = field(default_factory=time.monotonic)

    def done(self) -> bool:
        return self.handle.done()


class AsyncComputeCache(Generic[T]):
    """
    Single-flight compute cache for poll-driven callers.

    `submit` starts one background compute on the given pool and records it
    as a pending request. `poll`/`try_resolve` never block: they hand back the
    finished result once and forget the request. `parse_sync` is the
    fallback for callers that never submitted. Submitting the same logical
    request twice without resolving in between is the caller's problem.

    The lock only guards the outstanding list; handle status checks (which
    may hit Redis) run outside it.
    """

    def __init__(self, pool: WorkerPool, compute: Callable[[Any], T] = parse_grid):
        self.pool = pool
        self.compute = compute
        self._pending: List[PendingRequest] = []
        self._lock = threading.Lock()

    def submit(self, source: Any) -> str:
        request_id = uuid.uuid4().hex
        handle = self.pool.submit(capture_outcome, self.compute, source)
        with self._lock:
            self._pending.append(PendingRequest(request_id=request_id, source=source, handle=handle))
        logger.debug("Submitted request %s for %s", request_id, source)
        return request_id

    def poll(self, request_id: Optional[str] = None) -> Tuple[RequestState, Optional[T]]:
        """
        Check and, when finished, consume a request in one step.

        Returns `(PENDING, None)` while it runs, `(COMPLETED, result)` exactly
        once when it is done, and `(UNSUBMITTED, None)` for unknown or already
        consumed requests. A stored `ParseError` is raised instead of returned.

        Without `request_id` only the oldest outstanding request is looked at,
        so a newer request that already finished waits behind a slower older
        one. Pass the id to fetch a specific request.
        """
        with self._lock:
            request = self._find(request_id)
        if request is None:
            return RequestState.UNSUBMITTED, None
        if not request.done():
            return RequestState.PENDING, None
        with self._lock:
            # Another caller may have consumed it while we were checking.
            if not any(pending is request for pending in self._pending):
                return RequestState.UNSUBMITTED, None
            self._pending.remove(request)
        logger.debug(
            "Consumed request %s for %s after %.3fs",
            request.request_id,
            request.source,
            time.monotonic() - request.submitted_at,
        )
        return RequestState.COMPLETED, self._unwrap(request.handle.result())

    def try_resolve(self, request_id: Optional[str] = None) -> Optional[T]:
        """
        Return the finished result for `request_id` (or the oldest request when
        omitted) and consume it. Returns None when there is nothing to hand out
        yet. Same head-of-line rule as `poll`.
        """
        return self.poll(request_id)[1]

    def parse_sync(self, source: Any) -> T:
        return self.compute(source)

    def resolve(self, source: Any) -> Optional[T]:
        """
        One host re-entry: take the oldest finished result, or parse `source`
        synchronously when nothing was ever submitted. Returns None while a
        submitted request is still running.
        """
        if not self.has_pending():
            return self.parse_sync(source)
        return self.try_resolve()

    def status(self, request_id: str) -> RequestState:
        with self._lock:
            request = self._find(request_id)
        if request is None:
            return RequestState.UNSUBMITTED
        return RequestState.COMPLETED if request.done() else RequestState.PENDING

    def has_pending(self) -> bool:
        with self._lock:
            return bool(self._pending)

    @property
    def pending_count(self) -> int:
        with self._lock:
            return len(self._pending)

    def _find(self, request_id: Optional[str]) -> Optional[PendingRequest]:
        if request_id is None:
            return self._pending[0] if self._pending else None
        for request in self._pending:
            if request.request_id == request_id:
                return request
        return None

    @staticmethod
    def _unwrap(outcome):
        if isinstance(outcome, ParseError):
            raise outcome
        return outcome
