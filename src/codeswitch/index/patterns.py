"""Glob patterns used to rank candidate repository paths.

A pattern is compiled once into a sequence of segments:

- ``LiteralSegment``: a plain path component, compared exactly.
- ``WildcardSegment``: a component with ``*``, ``?`` or ``[...]``, matched
  with :func:`fnmatch.fnmatchcase`.
- ``AnyDepthSegment``: ``**``, zero or more whole components.

A pattern starting with ``/`` must match from the first component of the
path. A relative pattern may match any contiguous run of components. The end
of the path is never anchored, so ``github/myorg/*`` matches
``/code/github/myorg/foo`` and ``work`` matches anything below a ``work``
directory.
"""

from collections.abc import Sequence
from fnmatch import fnmatchcase
from pathlib import PurePosixPath
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

GLOB_METACHARACTERS = frozenset("*?[")


class LiteralSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["literal"] = "literal"
    text: str

    def matches(self, component: str) -> bool:
        return component == self.text


class WildcardSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["wildcard"] = "wildcard"
    glob: str

    def matches(self, component: str) -> bool:
        return fnmatchcase(component, self.glob)


class AnyDepthSegment(BaseModel):
    model_config = ConfigDict(frozen=True)

    kind: Literal["any_depth"] = "any_depth"

    def matches(self, component: str) -> bool:
        return True


Segment = Annotated[
    Union[LiteralSegment, WildcardSegment, AnyDepthSegment],
    Field(discriminator="kind"),
]


class Pattern(BaseModel):
    """A compiled preference pattern."""

    model_config = ConfigDict(frozen=True)

    source: str
    anchored: bool = False
    segments: tuple[Segment, ...]

    @classmethod
    def compile(cls, source: str) -> "Pattern":
        """Compile *source* into a pattern.

        Raises ValueError for empty patterns, empty segments and whitespace.
        """
        text = source.strip()
        if not text:
            raise ValueError("empty pattern")
        if any(ch.isspace() for ch in text):
            raise ValueError(f"whitespace in pattern {source!r}")

        anchored = text.startswith("/")
        body = text.strip("/") if anchored else text.rstrip("/")
        if not body:
            raise ValueError(f"pattern {source!r} has no segments")

        segments: list[Segment] = []
        for part in body.split("/"):
            if not part:
                raise ValueError(f"empty segment in pattern {source!r}")
            if part == "**":
                # Consecutive ** collapse into one
                if segments and isinstance(segments[-1], AnyDepthSegment):
                    continue
                segments.append(AnyDepthSegment())
            elif GLOB_METACHARACTERS.intersection(part):
                segments.append(WildcardSegment(glob=part))
            else:
                segments.append(LiteralSegment(text=part))

        return cls(source=source, anchored=anchored, segments=tuple(segments))

    def matches(self, path: str) -> bool:
        """Check whether the pattern matches some run of *path*'s components."""
        components = [part for part in PurePosixPath(path).parts if part != "/"]
        starts = [0] if self.anchored else range(len(components) + 1)
        return any(self._match_from(components, start, 0) for start in starts)

    def _match_from(self, components: list[str], pos: int, seg: int) -> bool:
        if seg == len(self.segments):
            return True
        segment = self.segments[seg]
        if isinstance(segment, AnyDepthSegment):
            return any(
                self._match_from(components, next_pos, seg + 1)
                for next_pos in range(pos, len(components) + 1)
            )
        if pos >= len(components) or not segment.matches(components[pos]):
            return False
        return self._match_from(components, pos + 1, seg + 1)

    def __str__(self) -> str:
        return self.source


def first_match(patterns: Sequence[Pattern], paths: Sequence[str]) -> str | None:
    """Return the path picked by the first pattern that matches any path.

    Patterns are tried in order; within a pattern, paths are tried in order.
    """
    for pattern in patterns:
        for path in paths:
            if pattern.matches(path):
                return path
    return None
