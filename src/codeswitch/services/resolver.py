"""Resolve a query against the repository index."""

import structlog

from codeswitch.config.loader import UserConfig
from codeswitch.core.exceptions import InvalidIndexError, InvalidQueryError
from codeswitch.core.models.query import AmbiguousMatch, NoMatch, Outcome, Query, UniqueMatch
from codeswitch.core.models.repository import Index, RepoEntry
from codeswitch.index.patterns import first_match
from codeswitch.index.scanner import path_sort_key

logger = structlog.get_logger(__name__)


class Resolver:
    """Turns a query into a unique path, no match, or a numbered list.

    Resolution order:

    1. Candidates are entries whose short name equals the query name. A name
       with ``/`` in it matches entries whose path ends with those components.
    2. A configured default for the name that one candidate's path ends with
       wins outright.
    3. A single candidate wins, whatever the disambiguator.
    4. An integer disambiguator picks a position in the sorted list; a string
       one keeps candidates whose path contains it.
    5. The first preference pattern matching any remaining candidate wins.
    6. Anything left is ambiguous, sorted by path and numbered from 1.
    """

    def __init__(self, config: UserConfig | None = None) -> None:
        self._config = config or UserConfig()

    @property
    def config(self) -> UserConfig:
        return self._config

    def resolve(self, query: Query, index: Index) -> Outcome:
        name = self._validate_name(query.name)

        candidates = self._candidates(name, index)
        if not candidates:
            logger.debug("No candidates", name=name)
            return NoMatch()

        default = self._config.defaults.get(name)
        if default is not None:
            for entry in candidates:
                if entry.ends_with(default):
                    logger.debug("Resolved by default", name=name, path=entry.path)
                    return UniqueMatch(path=entry.path)
            logger.debug("Default matched no candidate", name=name, default=default)

        if len(candidates) == 1:
            return UniqueMatch(path=candidates[0].path)

        paths = [entry.path for entry in candidates]

        disambiguator = query.disambiguator
        if isinstance(disambiguator, int):
            if not 1 <= disambiguator <= len(paths):
                raise InvalidIndexError(disambiguator, paths)
            return UniqueMatch(path=paths[disambiguator - 1])
        if disambiguator:
            paths = [path for path in paths if disambiguator in path]
            if not paths:
                return NoMatch()
            if len(paths) == 1:
                return UniqueMatch(path=paths[0])

        preferred = first_match(self._config.preferences, paths)
        if preferred is not None:
            logger.debug("Resolved by preference", name=name, path=preferred)
            return UniqueMatch(path=preferred)

        return AmbiguousMatch.from_paths(paths)

    def candidates(self, name: str, index: Index) -> list[RepoEntry]:
        """Entries *name* selects before any default, filter or preference applies."""
        return self._candidates(self._validate_name(name), index)

    @staticmethod
    def _validate_name(name: str) -> str:
        stripped = name.strip()
        if not stripped:
            raise InvalidQueryError("Empty repository name")
        if stripped.startswith("/"):
            raise InvalidQueryError(
                f"Repository name must not be an absolute path: {name!r}",
                details={"name": name},
            )
        stripped = stripped.rstrip("/")
        if any(not part for part in stripped.split("/")):
            raise InvalidQueryError(
                f"Repository name has an empty segment: {name!r}",
                details={"name": name},
            )
        return stripped

    @staticmethod
    def _candidates(name: str, index: Index) -> list[RepoEntry]:
        if "/" in name:
            matched = [entry for entry in index.entries if entry.ends_with(name)]
        else:
            matched = [entry for entry in index.entries if entry.name == name]
        return sorted(matched, key=lambda entry: path_sort_key(entry.path))


def resolve(query: Query, index: Index, config: UserConfig | None = None) -> Outcome:
    """Resolve *query* against *index* with *config*."""
    return Resolver(config).resolve(query, index)


def list_names(index: Index) -> list[str]:
    """Unique short names in *index*, for shell completion."""
    return index.names()
