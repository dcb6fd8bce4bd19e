from unittest.mock import MagicMock, PropertyMock

import pytest
from rq.exceptions import InvalidJobOperation, NoSuchJobError

from asc_grid.parsing import (
    AsyncComputeCache,
    MalformedHeader,
    RQJobHandle,
    RQWorkerPool,
    RequestState,
    capture_outcome,
    parse_grid,
)


def make_job(finished=False, failed=False, value=None, job_id="job-1"):
    job = MagicMock()
    job.id = job_id
    job.is_finished = finished
    job.is_failed = failed
    job.return_value.return_value = value
    return job


def eager_queue():
    """
    Queue double that runs the job at enqueue time, the way an RQ queue with
    is_async=False would, and reports it as finished.
    """
    queue = MagicMock()

    def enqueue(fn, *args, **kwargs):
        return make_job(finished=True, value=fn(*args))

    queue.enqueue.side_effect = enqueue
    return queue


def test_submit_enqueues_without_retry(minimal_asc):
    queue = MagicMock()
    queue.enqueue.return_value = make_job()
    pool = RQWorkerPool(queue=queue)

    handle = pool.submit(capture_outcome, parse_grid, minimal_asc)

    queue.enqueue.assert_called_once_with(
        capture_outcome, parse_grid, minimal_asc, job_timeout=-1, result_ttl=-1, retry=None
    )
    assert isinstance(handle, RQJobHandle)
    assert handle.id == "job-1"


def test_handle_tracks_job_status():
    job = make_job(value="payload")
    handle = RQJobHandle(job)
    assert not handle.done()

    job.is_finished = True
    assert handle.done()
    assert handle.result() == "payload"


def test_failed_job_raises_runtime_error():
    job = make_job(failed=True)
    job.latest_result.return_value.exc_string = "Traceback: worker died"
    handle = RQJobHandle(job)

    assert handle.done()
    with pytest.raises(RuntimeError, match="worker died"):
        handle.result()


def test_cache_over_rq_pool(minimal_asc, write_asc):
    cache = AsyncComputeCache(RQWorkerPool(queue=eager_queue()))

    request_id = cache.submit(minimal_asc)
    assert cache.try_resolve(request_id) == parse_grid(minimal_asc)
    assert cache.try_resolve(request_id) is None

    cache.submit(write_asc("nrows\n", name="bad.asc"))
    with pytest.raises(MalformedHeader):
        cache.try_resolve()


def expired_job(error, job_id="job-gone"):
    # Each MagicMock has its own class, so the property only affects this job.
    job = MagicMock()
    job.id = job_id
    type(job).is_finished = PropertyMock(side_effect=error(f"Failed to retrieve status for job: {job_id}"))
    return job


def test_timeouts_and_result_ttl_are_configurable():
    queue = MagicMock()
    pool = RQWorkerPool(queue=queue, job_timeout=3600, result_ttl=86400)
    pool.submit(len, "abc")
    queue.enqueue.assert_called_once_with(len, "abc", job_timeout=3600, result_ttl=86400, retry=None)


@pytest.mark.parametrize("error", [InvalidJobOperation, NoSuchJobError])
def test_missing_job_counts_as_done(error):
    handle = RQJobHandle(expired_job(error))
    assert handle.done()
    assert handle.done()
    with pytest.raises(RuntimeError, match="no longer in Redis"):
        handle.result()


def test_expired_job_does_not_block_later_requests(minimal_asc):
    queue = MagicMock()
    gone = expired_job(InvalidJobOperation)
    queue.enqueue.side_effect = [gone, make_job(finished=True, value=parse_grid(minimal_asc))]
    cache = AsyncComputeCache(RQWorkerPool(queue=queue))

    first_id = cache.submit(minimal_asc)
    second_id = cache.submit(minimal_asc)
    assert cache.status(first_id) == RequestState.COMPLETED

    with pytest.raises(RuntimeError):
        cache.try_resolve()
    assert cache.status(first_id) == RequestState.UNSUBMITTED
    assert cache.try_resolve() == parse_grid(minimal_asc)
    assert cache.status(second_id) == RequestState.UNSUBMITTED
