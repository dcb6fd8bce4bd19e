from __future__ import annotations

from typing import Optional


class ParseError(Exception):
    """
    Base class for ASC parse failures. `line_number` is 1-based and is None
    when the failure is not tied to a line (e.g. the file could not be opened).
    """

    kind = "parse_error"

    def __init__(self, message: str, line_number: Optional[int] = None):
        # Keep both constructor args in `args` so the error survives pickling.
        super().__init__(message, line_number)
        self.message = message
        self.line_number = line_number

    def __str__(self) -> str:
        if self.line_number is None:
            return self.message
        return f"line {self.line_number}: {self.message}"

    def __eq__(self, other: object) -> bool:
        if not isinstance(other, ParseError):
            return NotImplemented
        return type(self) is type(other) and self.args == other.args

    def __hash__(self) -> int:
        return hash((type(self), self.args))


class SourceUnreadable(ParseError):
    kind = "source_unreadable"


class MalformedHeader(ParseError):
    kind = "malformed_header"


class InvalidNumber(ParseError):
    kind = "invalid_number"
