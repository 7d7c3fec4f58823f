"""Switch service: the entry point shell glue calls into."""

import os

import structlog

from codeswitch.config.loader import UserConfig, load_user_config
from codeswitch.config.settings import Settings, get_settings
from codeswitch.core.exceptions import ScanError
from codeswitch.core.models.query import NoMatch, Outcome, Query
from codeswitch.core.models.repository import Index
from codeswitch.index.cache import CacheStore
from codeswitch.index.scanner import RepoScanner
from codeswitch.services.resolver import Resolver

logger = structlog.get_logger(__name__)


class SwitchService:
    """Loads config and index for a root and resolves queries against them.

    The index comes from the cache when it is fresh and is otherwise rebuilt
    and re-cached. A cached index with no entry for the name is rebuilt once
    and the query retried, which picks up repositories added deep in the tree.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        scanner: RepoScanner | None = None,
        cache: CacheStore | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._scanner = scanner or RepoScanner(
            markers=self._settings.markers,
            max_workers=self._settings.scan_workers,
        )
        self._cache = cache or CacheStore(self._settings.cache_dir)
        self._config: UserConfig | None = None

    @property
    def scanner(self) -> RepoScanner:
        return self._scanner

    @property
    def cache(self) -> CacheStore:
        return self._cache

    def load_config(self) -> UserConfig:
        """Load the user config once per service."""
        if self._config is None:
            self._config = load_user_config(self._settings.config_path)
        return self._config

    def load_index(self, root: str | os.PathLike[str], rebuild: bool = False) -> tuple[Index, bool]:
        """Return the index for *root* and whether it came from the cache."""
        root_path = self._normalize_root(root)
        if not rebuild:
            cached = self._cache.load(root_path)
            if cached is not None:
                return cached, True
        else:
            logger.debug("Rebuild requested", root=root_path)
        return self.rebuild(root_path), False

    def rebuild(self, root: str | os.PathLike[str]) -> Index:
        """Scan *root* and replace its cached index."""
        index = self._scanner.scan(self._normalize_root(root))
        self._cache.save(index)
        return index

    def resolve_cli(
        self,
        root: str | os.PathLike[str],
        query: Query,
        rebuild: bool = False,
    ) -> Outcome:
        """Resolve *query* under *root*, rebuilding the index as needed."""
        resolver = Resolver(self.load_config())
        index, from_cache = self.load_index(root, rebuild=rebuild)

        outcome = resolver.resolve(query, index)
        if (
            from_cache
            and isinstance(outcome, NoMatch)
            and not resolver.candidates(query.name, index)
        ):
            logger.info("No match in cached index, rescanning", root=index.root, name=query.name)
            index = self.rebuild(index.root)
            outcome = resolver.resolve(query, index)
        return outcome

    def list_names(self, root: str | os.PathLike[str], rebuild: bool = False) -> list[str]:
        """Unique short names under *root*, for completion."""
        index, _ = self.load_index(root, rebuild=rebuild)
        return index.names()

    @staticmethod
    def _normalize_root(root: str | os.PathLike[str]) -> str:
        root_path = os.path.abspath(os.path.expanduser(os.fspath(root)))
        if not os.path.isdir(root_path):
            raise ScanError(
                f"{root_path} is not a directory",
                details={"root": root_path},
            )
        return root_path


def resolve_cli(
    root: str | os.PathLike[str],
    name: str,
    filter_arg: str | None = None,
    rebuild: bool = False,
    settings: Settings | None = None,
) -> Outcome:
    """Resolve raw command-line words under *root*."""
    query = Query.from_args(name, filter_arg)
    return SwitchService(settings).resolve_cli(root, query, rebuild=rebuild)


def list_names(
    root: str | os.PathLike[str],
    rebuild: bool = False,
    settings: Settings | None = None,
) -> list[str]:
    """Unique short names under *root*."""
    return SwitchService(settings).list_names(root, rebuild=rebuild)
