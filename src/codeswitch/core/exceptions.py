"""Exception hierarchy for codeswitch."""

from typing import Any


class CodeswitchError(Exception):
    """Base error for all codeswitch failures."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.details = details or {}


class IndexIOError(CodeswitchError):
    """Filesystem access failed while building or persisting the index."""


class ScanError(IndexIOError):
    """The scan root is missing, not a directory, or unreadable."""


class CacheError(IndexIOError):
    """The cache location cannot be created or written."""


class ConfigParseError(CodeswitchError):
    """A line of the user config file is malformed."""

    def __init__(self, message: str, line_number: int, line: str = "") -> None:
        super().__init__(
            f"line {line_number}: {message}",
            details={"line_number": line_number, "line": line},
        )
        self.line_number = line_number
        self.line = line


class InvalidQueryError(CodeswitchError):
    """The query name is empty or malformed."""


class InvalidIndexError(CodeswitchError):
    """A positional disambiguator is outside the candidate list."""

    def __init__(self, index: int, candidates: list[str]) -> None:
        super().__init__(
            f"Index {index} out of range",
            details={"index": index, "candidates": list(candidates)},
        )
        self.index = index
        self.candidates = list(candidates)
