"""
Parsing subsystem exports.
"""

from .cache import AsyncComputeCache, PendingRequest, capture_outcome
from .engine import AscParsingEngine, ParsingEngine, parse_grid
from .errors import InvalidNumber, MalformedHeader, ParseError, SourceUnreadable
from .job_queue import RQJobHandle, RQWorkerPool
from .models import Grid, RequestState

__all__ = [
    "AscParsingEngine",
    "AsyncComputeCache",
    "Grid",
    "InvalidNumber",
    "MalformedHeader",
    "ParseError",
    "ParsingEngine",
    "PendingRequest",
    "RQJobHandle",
    "RQWorkerPool",
    "RequestState",
    "SourceUnreadable",
    "capture_outcome",
    "parse_grid",
]
