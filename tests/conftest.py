from concurrent.futures import Future

import pytest


MINIMAL_ASC = (
    "ncols 2\n"
    "nrows 2\n"
    "xllcorner 0\n"
    "yllcorner 0\n"
    "cellsize 1\n"
    "nodata -9999\n"
    "1 2\n"
    "3 4\n"
)


class ManualPool:
    """
    Executor stand-in that holds submitted work until `run_all()` so tests can
    observe the pending state deterministically.
    """

    def __init__(self):
        self.jobs = []

    def submit(self, fn, *args):
        future = Future()
        self.jobs.append((future, fn, args))
        return future

    def run_all(self):
        for future, fn, args in self.jobs:
            try:
                future.set_result(fn(*args))
            except Exception as exc:  # noqa: BLE001
                future.set_exception(exc)
        self.jobs = []


@pytest.fixture
def write_asc(tmp_path):
    def _write(text, name="grid.asc"):
        path = tmp_path / name
        path.write_text(text, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def minimal_asc(write_asc):
    return write_asc(MINIMAL_ASC)


@pytest.fixture
def manual_pool():
    return ManualPool()
