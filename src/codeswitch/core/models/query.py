"""Query and resolution outcome models."""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict

# Longer digit strings are treated as substrings, like any other word
MAX_POSITION_DIGITS = 20


class Query(BaseModel):
    """A lookup request: a short name plus an optional disambiguator.

    An integer disambiguator picks a position in the sorted candidate list,
    a string one keeps candidates whose path contains it.
    """

    model_config = ConfigDict(frozen=True)

    name: str
    disambiguator: int | str | None = None

    @classmethod
    def from_args(cls, name: str, filter_arg: str | None = None) -> Query:
        """Build a query from raw command-line words.

        Only a plain ASCII number is a position; anything else filters by substring.
        """
        if not filter_arg:
            return cls(name=name)
        if filter_arg.isascii() and filter_arg.isdigit() and len(filter_arg) <= MAX_POSITION_DIGITS:
            return cls(name=name, disambiguator=int(filter_arg))
        return cls(name=name, disambiguator=filter_arg)


class Candidate(BaseModel):
    """One entry of an ambiguous result, numbered from 1."""

    model_config = ConfigDict(frozen=True)

    index: int
    path: str


class UniqueMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["unique"] = "unique"
    path: str


class NoMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["none"] = "none"


class AmbiguousMatch(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["ambiguous"] = "ambiguous"
    candidates: tuple[Candidate, ...]

    @classmethod
    def from_paths(cls, paths: list[str]) -> AmbiguousMatch:
        return cls(
            candidates=tuple(
                Candidate(index=i, path=path) for i, path in enumerate(paths, 1)
            )
        )

    @property
    def paths(self) -> list[str]:
        return [candidate.path for candidate in self.candidates]


Outcome = Union[UniqueMatch, NoMatch, AmbiguousMatch]
