from __future__ import annotations

import logging
import math
import os
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Union

from .errors import InvalidNumber, MalformedHeader, SourceUnreadable
from .models import FLOAT_HEADER_KEYS, HEADER_LINE_COUNT, INTEGER_HEADER_KEYS, Grid

logger = logging.getLogger(__name__)

GridSource = Union[str, "os.PathLike[str]", Iterable[str]]


class ParsingEngine:
    """
    Abstract parsing engine. Implementations should be stateless and reusable.
    """

    def parse(self, source: GridSource) -> Grid:
        raise NotImplementedError


class AscParsingEngine(ParsingEngine):
    """
    Arc/Info ASCII Grid parser.

    The first six physical lines are header lines, whatever they contain.
    Each is split on generic whitespace into `<key> <value>`; unknown keys are
    skipped. Every later line is payload: split on the literal space character
    (empty tokens dropped) and appended to one flat row-major value list.
    A failure anywhere raises a `ParseError` subclass and no Grid is built.
    """

    def __init__(self, encoding: str = "utf-8"):
        self.encoding = encoding

    def parse(self, source: GridSource) -> Grid:
        if isinstance(source, (str, os.PathLike)):
            path = Path(source)
            try:
                stream = path.open("r", encoding=self.encoding)
            except OSError as exc:
                raise SourceUnreadable(f"cannot open {path}: {exc.strerror or exc}") from exc
            with stream:
                grid = self._parse_lines(stream)
        else:
            grid = self._parse_lines(source)

        logger.debug(
            "Parsed grid %sx%s with %d values",
            grid.columns,
            grid.rows,
            len(grid.values),
        )
        return grid

    def _parse_lines(self, lines: Iterable[str]) -> Grid:
        header: Dict[str, float] = {}
        values: List[float] = []

        for line_index, line in enumerate(_read_lines(lines)):
            line_number = line_index + 1
            line = line.rstrip("\r\n")
            if line_index < HEADER_LINE_COUNT:
                self._apply_header_line(header, line, line_number)
            else:
                # Literal single-space split; tabs are not separators here.
                values.extend(_to_float(token, line_number) for token in line.split(" ") if token)

        return Grid(
            columns=int(header.get("ncols", 0)),
            rows=int(header.get("nrows", 0)),
            lower_left_corner=(header.get("xllcorner", 0.0), header.get("yllcorner", 0.0)),
            lower_left_center=(header.get("xllcenter", 0.0), header.get("yllcenter", 0.0)),
            cell_size=header.get("cellsize", 0.0),
            no_data=header.get("nodata", 0.0),
            values=tuple(values),
        )

    def _apply_header_line(self, header: Dict[str, float], line: str, line_number: int) -> None:
        tokens = line.split()
        if len(tokens) < 2:
            raise MalformedHeader(f"expected '<key> <value>', got {line!r}", line_number)
        key, raw_value = tokens[0], tokens[1]
        if key in INTEGER_HEADER_KEYS:
            header[key] = _to_count(raw_value, line_number)
        elif key in FLOAT_HEADER_KEYS:
            header[key] = _to_float(raw_value, line_number)
        else:
            logger.debug("Ignoring unknown header key %r on line %d", key, line_number)


def parse_grid(source: GridSource, encoding: str = "utf-8") -> Grid:
    """
    Parse an ASC grid from a path or an open text stream.

    Raises `SourceUnreadable`, `MalformedHeader` or `InvalidNumber`.
    """
    return AscParsingEngine(encoding=encoding).parse(source)


def _read_lines(lines: Iterable[str]) -> Iterator[str]:
    try:
        for line in lines:
            yield line
    except (OSError, UnicodeDecodeError) as exc:
        raise SourceUnreadable(f"failed to read source: {exc}") from exc


def _to_float(token: str, line_number: int) -> float:
    # float() accepts digit grouping like "1_000"; grid files never use it.
    if "_" in token:
        raise InvalidNumber(f"{token!r} is not a number", line_number)
    try:
        return float(token)
    except ValueError as exc:
        raise InvalidNumber(f"{token!r} is not a number", line_number) from exc


def _to_count(token: str, line_number: int) -> int:
    value = _to_float(token, line_number)
    if not math.isfinite(value):
        raise InvalidNumber(f"{token!r} is not a finite count", line_number)
    count = int(value)
    if count < 0:
        raise InvalidNumber(f"{token!r} is a negative count", line_number)
    return count
