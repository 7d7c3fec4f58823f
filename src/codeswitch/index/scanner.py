"""Directory-tree scanner that discovers repository roots."""

import os
import stat
import time
from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from pathlib import PurePosixPath

import structlog

from codeswitch.core.exceptions import ScanError
from codeswitch.core.models.repository import Index, RepoEntry

logger = structlog.get_logger(__name__)

DEFAULT_MARKERS = (".git",)


def path_sort_key(path: str) -> tuple[str, ...]:
    """Sort key matching a depth-first walk in sorted-name order."""
    return PurePosixPath(path).parts


def _is_within(path: str, ancestor: str) -> bool:
    return path == ancestor or path.startswith(ancestor.rstrip("/") + "/")


@dataclass
class _Listing:
    """What a single directory read found."""

    path: str
    real: str
    is_repo: bool = False
    blocked: bool = False
    subdirs: list[str] = field(default_factory=list)
    links: list[tuple[str, str]] = field(default_factory=list)
    error: OSError | None = None


class RepoScanner:
    """Walks a root directory and records every repository root below it.

    A directory is a repository when one of the marker entries (``.git`` by
    default) is a directory; repositories are never descended into. A marker
    that is not a directory (submodule or worktree pointer file) stops the
    descent without recording anything.

    Symbolic links are not followed while the real tree is walked. Once it is
    exhausted, links are handled in sorted order: a link to a directory that
    was already visited becomes an alias candidate, a link to anything else
    is walked through its link path. Entries are finally rewritten through
    the shortest alias of any of their ancestors.

    Directory reads of one tree level can be spread over a thread pool; the
    result does not depend on ``max_workers``.
    """

    def __init__(
        self,
        markers: Sequence[str] = DEFAULT_MARKERS,
        max_workers: int = 1,
    ) -> None:
        self._markers = tuple(markers)
        self._max_workers = max(1, max_workers)
        self.errors: list[tuple[str, str]] = []

    @property
    def markers(self) -> tuple[str, ...]:
        return self._markers

    def scan(self, root: str | os.PathLike[str]) -> Index:
        """Scan *root* and return a fresh Index.

        Raises ScanError if the root is missing, not a directory or unreadable.
        """
        root_path = os.path.abspath(os.path.expanduser(os.fspath(root)))
        try:
            root_stat = os.stat(root_path)
        except OSError as e:
            raise ScanError(
                f"Cannot access root {root_path}: {e.strerror or e}",
                details={"root": root_path},
            ) from e
        if not stat.S_ISDIR(root_stat.st_mode):
            raise ScanError(
                f"{root_path} is not a directory",
                details={"root": root_path},
            )

        started = time.monotonic()
        self.errors = []

        if self._max_workers > 1:
            with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
                repos, aliases = self._walk(root_path, pool)
        else:
            repos, aliases = self._walk(root_path, None)

        # Worker threads record errors as they go
        self.errors.sort(key=lambda item: path_sort_key(item[0]))

        paths = self._collapse_all(repos, aliases)
        entries = tuple(RepoEntry.from_path(path) for path in paths)

        logger.info(
            "Scan complete",
            root=root_path,
            entries=len(entries),
            aliases=len(aliases),
            errors=len(self.errors),
            elapsed_ms=round((time.monotonic() - started) * 1000, 1),
        )
        return Index(root=root_path, entries=entries, signature=root_stat.st_mtime_ns)

    # --- Walking ---

    def _walk(
        self, root_path: str, pool: ThreadPoolExecutor | None
    ) -> tuple[list[str], dict[str, str]]:
        """Walk the tree, returning repository paths and the alias table.

        The alias table maps the path a directory was walked under to the
        shorter link path that should replace it.
        """
        root_real = os.path.realpath(root_path)
        visited: dict[str, str] = {root_real: root_path}
        repo_reals: list[str] = []
        repos: list[str] = []
        pending_links: list[tuple[str, str]] = []
        alias_candidates: list[tuple[str, str]] = []
        frontier: list[tuple[str, str]] = [(root_path, root_real)]

        while frontier or pending_links:
            if not frontier:
                frontier = self._follow_links(
                    pending_links, root_real, visited, repo_reals, alias_candidates
                )
                pending_links = []
                continue

            next_frontier: list[tuple[str, str]] = []
            for listing in self._read_level(frontier, pool):
                if listing.error is not None:
                    if listing.path == root_path:
                        raise ScanError(
                            f"Cannot read root {root_path}: "
                            f"{listing.error.strerror or listing.error}",
                            details={"root": root_path},
                        ) from listing.error
                    self._record_error(listing.path, listing.error)
                    continue
                if listing.is_repo:
                    repos.append(listing.path)
                    repo_reals.append(listing.real)
                    continue
                if listing.blocked:
                    logger.debug("Skipping directory with non-directory marker", path=listing.path)
                    continue
                for name in listing.subdirs:
                    real = os.path.join(listing.real, name)
                    if real in visited:
                        continue
                    walk_path = os.path.join(listing.path, name)
                    visited[real] = walk_path
                    next_frontier.append((walk_path, real))
                for name, target in listing.links:
                    pending_links.append((os.path.join(listing.path, name), target))

            frontier = sorted(next_frontier, key=lambda item: path_sort_key(item[0]))

        return repos, self._pick_aliases(alias_candidates, visited)

    def _follow_links(
        self,
        links: list[tuple[str, str]],
        root_real: str,
        visited: dict[str, str],
        repo_reals: list[str],
        alias_candidates: list[tuple[str, str]],
    ) -> list[tuple[str, str]]:
        """Sort out pending links; return the ones to walk next."""
        frontier: list[tuple[str, str]] = []
        for link_path, target in sorted(links, key=lambda item: path_sort_key(item[0])):
            if target in visited:
                alias_candidates.append((link_path, target))
            elif _is_within(root_real, target):
                logger.debug(
                    "Skipping link to an ancestor of the root", link=link_path, target=target
                )
            elif any(_is_within(target, repo) for repo in repo_reals):
                logger.debug("Skipping link into a repository", link=link_path, target=target)
            else:
                visited[target] = link_path
                frontier.append((link_path, target))
        return frontier

    def _read_level(
        self, frontier: list[tuple[str, str]], pool: ThreadPoolExecutor | None
    ) -> Iterable[_Listing]:
        if pool is None or len(frontier) == 1:
            return [self._read_dir(path, real) for path, real in frontier]
        return pool.map(lambda item: self._read_dir(*item), frontier)

    def _read_dir(self, path: str, real: str) -> _Listing:
        listing = _Listing(path=path, real=real)

        for marker in self._markers:
            try:
                marker_stat = os.lstat(os.path.join(path, marker))
            except FileNotFoundError:
                continue
            except OSError as e:
                listing.error = e
                return listing
            if stat.S_ISDIR(marker_stat.st_mode):
                listing.is_repo = True
            else:
                listing.blocked = True
            return listing

        try:
            with os.scandir(path) as it:
                entries = sorted(it, key=lambda entry: entry.name)
        except OSError as e:
            listing.error = e
            return listing

        for entry in entries:
            try:
                if entry.is_symlink():
                    target = os.path.realpath(entry.path)
                    if os.path.isdir(target):
                        listing.links.append((entry.name, target))
                elif entry.is_dir(follow_symlinks=False):
                    listing.subdirs.append(entry.name)
            except OSError as e:
                self._record_error(entry.path, e)

        return listing

    def _record_error(self, path: str, error: OSError) -> None:
        logger.warning("Skipping unreadable path", path=path, error=error.strerror or str(error))
        self.errors.append((path, error.strerror or str(error)))

    # --- Symlink collapsing ---

    @staticmethod
    def _pick_aliases(
        candidates: list[tuple[str, str]], visited: dict[str, str]
    ) -> dict[str, str]:
        """Keep the shortest link per target; ties go to the first in walk order."""
        best: dict[str, str] = {}
        for link_path, target in candidates:
            walked = visited[target]
            if len(link_path) >= len(walked):
                continue
            current = best.get(walked)
            if current is None or (len(link_path), path_sort_key(link_path)) < (
                len(current),
                path_sort_key(current),
            ):
                best[walked] = link_path
        return best

    @classmethod
    def _collapse_all(cls, repos: list[str], aliases: dict[str, str]) -> list[str]:
        paths: set[str] = set()
        for repo in repos:
            paths.add(cls._collapse(repo, aliases))
            # A link that points straight at the repository adds an entry under its own name
            if repo in aliases:
                paths.add(cls._collapse(aliases[repo], aliases))
        return sorted(paths, key=path_sort_key)

    @staticmethod
    def _collapse(path: str, aliases: dict[str, str]) -> str:
        """Rewrite *path* through aliases of its ancestors, deepest first.

        Every rewrite makes the path strictly shorter, so this terminates.
        """
        while True:
            parts = PurePosixPath(path).parts
            for i in range(len(parts) - 1, 0, -1):
                alias = aliases.get(str(PurePosixPath(*parts[:i])))
                if alias is not None:
                    path = str(PurePosixPath(alias, *parts[i:]))
                    break
            else:
                return path
