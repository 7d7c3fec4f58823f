"""Core domain models and exceptions for codeswitch."""

from codeswitch.core.exceptions import (
    CacheError,
    CodeswitchError,
    ConfigParseError,
    IndexIOError,
    InvalidIndexError,
    InvalidQueryError,
    ScanError,
)
from codeswitch.core.models import (
    AmbiguousMatch,
    Candidate,
    Index,
    NoMatch,
    Outcome,
    Query,
    RepoEntry,
    UniqueMatch,
)

__all__ = [
    # Models
    "RepoEntry",
    "Index",
    "Query",
    "Candidate",
    "UniqueMatch",
    "NoMatch",
    "AmbiguousMatch",
    "Outcome",
    # Exceptions
    "CodeswitchError",
    "IndexIOError",
    "ScanError",
    "CacheError",
    "ConfigParseError",
    "InvalidQueryError",
    "InvalidIndexError",
]
