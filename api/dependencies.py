from __future__ import annotations

import os
from concurrent.futures import ThreadPoolExecutor
from functools import lru_cache
from pathlib import Path
from typing import List

from asc_grid.parsing import AscParsingEngine, AsyncComputeCache, RQWorkerPool


@lru_cache(maxsize=1)
def get_engine() -> AscParsingEngine:
    return AscParsingEngine(encoding=os.getenv("GRID_ENCODING", "utf-8"))


@lru_cache(maxsize=1)
def get_pool():
    backend = os.getenv("GRID_POOL_BACKEND", "thread").lower()
    if backend == "rq":
        redis_url = os.getenv("REDIS_URL", "redis://localhost:6379/0")
        queue_name = os.getenv("GRID_QUEUE_NAME", "grid-parse")
        return RQWorkerPool(redis_url=redis_url, queue_name=queue_name)
    if backend != "thread":
        raise ValueError(f"Unknown GRID_POOL_BACKEND: {backend}")
    max_workers = int(os.getenv("GRID_WORKERS", "4"))
    return ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="grid-parse")


@lru_cache(maxsize=1)
def get_cache() -> AsyncComputeCache:
    return AsyncComputeCache(get_pool(), compute=get_engine().parse)


@lru_cache(maxsize=1)
def get_data_root() -> Path:
    return Path(os.getenv("GRID_DATA_ROOT", "./data")).resolve()


def get_cors_origins() -> List[str]:
    raw = os.getenv("GRID_CORS_ORIGINS", "")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def resolve_grid_path(path: str) -> Path:
    """
    Resolve a caller-supplied path against the data root. Raises ValueError
    when the result falls outside it.
    """
    root = get_data_root()
    candidate = (root / path).resolve()
    if candidate != root and root not in candidate.parents:
        raise ValueError(f"Path is outside the grid data root: {path}")
    return candidate
