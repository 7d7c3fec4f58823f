"""On-disk cache of scan results."""

import hashlib
import os
import tempfile
from pathlib import Path

import structlog
from pydantic import ValidationError
from pydantic_core import PydanticSerializationError

from codeswitch.core.exceptions import CacheError
from codeswitch.core.models.repository import INDEX_FORMAT_VERSION, Index

logger = structlog.get_logger(__name__)


class CacheStore:
    """Stores one serialized Index per scan root under a cache directory.

    A cache that is missing, unreadable, corrupt, written for another root or
    format version, or older than the root's mtime is a miss: ``load``
    returns None and the caller rescans. Saving replaces the file atomically,
    so a concurrent reader sees either the old or the new index.

    The root mtime only changes when the root's direct children change; a
    repository added deeper down is picked up by the caller's rescan on a
    cached lookup that finds nothing.
    """

    def __init__(self, cache_dir: str | Path) -> None:
        self._cache_dir = Path(cache_dir).expanduser()

    @property
    def cache_dir(self) -> Path:
        return self._cache_dir

    def path_for(self, root: str) -> Path:
        """Cache file for *root*, named from a hash of the root path."""
        digest = hashlib.sha1(root.encode("utf-8", "surrogateescape")).hexdigest()[:16]
        return self._cache_dir / f"index-{digest}.json"

    def load(self, root: str) -> Index | None:
        """Load the cached index for *root*, or None on a miss."""
        cache_path = self.path_for(root)
        try:
            raw = cache_path.read_bytes()
        except FileNotFoundError:
            logger.debug("Cache miss: no cache file", root=root, path=str(cache_path))
            return None
        except OSError as e:
            logger.warning("Cache miss: unreadable cache file", path=str(cache_path), error=str(e))
            return None

        try:
            index = Index.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Cache miss: corrupt cache file",
                path=str(cache_path),
                errors=e.error_count(),
            )
            return None

        if index.version != INDEX_FORMAT_VERSION:
            logger.debug("Cache miss: format version changed", found=index.version)
            return None
        if index.root != root:
            logger.debug("Cache miss: cache belongs to another root", root=root, cached=index.root)
            return None

        signature = self.signature(root)
        if signature is None or signature != index.signature:
            logger.debug("Cache miss: root changed since last scan", root=root)
            return None

        logger.debug("Cache hit", root=root, entries=len(index))
        return index

    def save(self, index: Index) -> Path:
        """Write *index* atomically. Raises CacheError if it cannot."""
        cache_path = self.path_for(index.root)
        try:
            payload = index.model_dump_json()
        except (PydanticSerializationError, UnicodeError) as e:
            raise CacheError(
                f"Cannot serialize index for {index.root!r}: {e}",
                details={"root": index.root},
            ) from e

        try:
            self._cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise CacheError(
                f"Cannot create cache directory {self._cache_dir}: {e.strerror or e}",
                details={"cache_dir": str(self._cache_dir)},
            ) from e

        # Write to a temp file in the same directory, then rename over the target
        try:
            temp_fd, temp_path = tempfile.mkstemp(
                dir=self._cache_dir,
                prefix=f".{cache_path.name}.",
                suffix=".tmp",
            )
        except OSError as e:
            raise CacheError(
                f"Cannot write cache in {self._cache_dir}: {e.strerror or e}",
                details={"cache_dir": str(self._cache_dir)},
            ) from e

        replaced = False
        try:
            with os.fdopen(temp_fd, "w", encoding="utf-8") as f:
                f.write(payload)
            os.replace(temp_path, cache_path)
            replaced = True
        except OSError as e:
            raise CacheError(
                f"Cannot write cache {cache_path}: {e.strerror or e}",
                details={"path": str(cache_path)},
            ) from e
        finally:
            if not replaced:
                try:
                    os.unlink(temp_path)
                except FileNotFoundError:
                    pass

        logger.info("Index cached", root=index.root, entries=len(index), path=str(cache_path))
        return cache_path

    def invalidate(self, root: str) -> bool:
        """Remove the cache file for *root*. Returns whether one existed."""
        try:
            self.path_for(root).unlink()
        except FileNotFoundError:
            return False
        return True

    @staticmethod
    def signature(root: str) -> int | None:
        """Staleness signal for *root*: its mtime in nanoseconds."""
        try:
            return os.stat(root).st_mtime_ns
        except OSError:
            return None
