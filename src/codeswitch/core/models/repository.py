"""Repository index models."""

import base64
import os
from datetime import datetime, timezone
from pathlib import PurePosixPath
from typing import Annotated, Any

from pydantic import BaseModel, BeforeValidator, ConfigDict, Field, PlainSerializer

INDEX_FORMAT_VERSION = 1


def _dump_fs_text(value: str) -> str | dict[str, str]:
    try:
        value.encode("utf-8")
    except UnicodeEncodeError:
        # Undecodable file names carry surrogate escapes; store the raw bytes
        return {"raw": base64.b64encode(os.fsencode(value)).decode("ascii")}
    return value


def _load_fs_text(value: Any) -> Any:
    if isinstance(value, dict) and set(value) == {"raw"}:
        return os.fsdecode(base64.b64decode(value["raw"], validate=True))
    return value


# A file-system string. Valid UTF-8 is stored as plain JSON text, anything else
# as {"raw": <base64 of the bytes>} so the cache round-trips every name.
FsText = Annotated[
    str,
    BeforeValidator(_load_fs_text),
    PlainSerializer(_dump_fs_text, when_used="json"),
]


class RepoEntry(BaseModel):
    """A repository root discovered under the scan root."""

    model_config = ConfigDict(frozen=True)

    path: FsText
    name: FsText

    @classmethod
    def from_path(cls, path: str) -> "RepoEntry":
        return cls(path=path, name=PurePosixPath(path).name)

    @property
    def parts(self) -> tuple[str, ...]:
        return PurePosixPath(self.path).parts

    def ends_with(self, relative: str) -> bool:
        """Check whether the path ends with the components of *relative*."""
        suffix = PurePosixPath(relative).parts
        if not suffix:
            return False
        return self.parts[-len(suffix):] == suffix


class Index(BaseModel):
    """Result of scanning a root directory.

    ``signature`` is the root's ``st_mtime_ns`` when the scan ran; a cached
    index whose signature no longer matches the root is considered stale.
    """

    model_config = ConfigDict(frozen=True)

    root: FsText
    entries: tuple[RepoEntry, ...] = ()
    signature: int = 0
    scanned_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    version: int = INDEX_FORMAT_VERSION

    def names(self) -> list[str]:
        """Unique short names, sorted."""
        return sorted({entry.name for entry in self.entries})

    def __len__(self) -> int:
        return len(self.entries)
