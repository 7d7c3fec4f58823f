"""Domain models for codeswitch."""

from codeswitch.core.models.query import (
    AmbiguousMatch,
    Candidate,
    NoMatch,
    Outcome,
    Query,
    UniqueMatch,
)
from codeswitch.core.models.repository import INDEX_FORMAT_VERSION, Index, RepoEntry

__all__ = [
    "RepoEntry",
    "Index",
    "INDEX_FORMAT_VERSION",
    "Query",
    "Candidate",
    "UniqueMatch",
    "NoMatch",
    "AmbiguousMatch",
    "Outcome",
]
