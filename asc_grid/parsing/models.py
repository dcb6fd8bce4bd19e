from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Tuple


HEADER_LINE_COUNT = 6

INTEGER_HEADER_KEYS = frozenset({"ncols", "nrows"})
FLOAT_HEADER_KEYS = frozenset(
    {"xllcorner", "yllcorner", "xllcenter", "yllcenter", "cellsize", "nodata"}
)


class RequestState(str, Enum):
    UNSUBMITTED = "unsubmitted"
    PENDING = "pending"
    COMPLETED = "completed"


@dataclass(frozen=True)
class Grid:
    """
    Parsed ASC raster. Header fields that were absent from the file stay at 0.
    `values` holds the samples row-major, in file order.
    """

    columns: int = 0
    rows: int = 0
    lower_left_corner: Tuple[float, float] = (0.0, 0.0)
    lower_left_center: Tuple[float, float] = (0.0, 0.0)
    cell_size: float = 0.0
    no_data: float = 0.0
    values: Tuple[float, ...] = field(default_factory=tuple)

    def to_outputs(self) -> Dict[str, Any]:
        return {
            "columns": self.columns,
            "rows": self.rows,
            "lower_left_corner": list(self.lower_left_corner),
            "lower_left_center": list(self.lower_left_center),
            "cell_size": self.cell_size,
            "no_data": self.no_data,
            "values": list(self.values),
        }
