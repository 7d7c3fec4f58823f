"""User configuration: per-name defaults and preference patterns.

The file is line oriented::

    # pick github/me/dotfiles when "dotfiles" is ambiguous
    dotfiles = me/dotfiles

    # otherwise prefer anything under these, in order
    github/myorg/*
    work

Lines with ``=`` are defaults, every other non-blank, non-comment line is a
preference pattern.
"""

from pathlib import Path, PurePosixPath

import structlog
from pydantic import BaseModel, ConfigDict, Field

from codeswitch.core.exceptions import CodeswitchError, ConfigParseError
from codeswitch.index.patterns import Pattern

logger = structlog.get_logger(__name__)


class UserConfig(BaseModel):
    """Parsed user configuration. Both tables may be empty."""

    model_config = ConfigDict(frozen=True)

    defaults: dict[str, str] = Field(default_factory=dict)
    preferences: tuple[Pattern, ...] = ()

    @property
    def is_empty(self) -> bool:
        return not self.defaults and not self.preferences


def parse_user_config(text: str) -> UserConfig:
    """Parse config text. Raises ConfigParseError on the first bad line."""
    defaults: dict[str, str] = {}
    preferences: list[Pattern] = []

    for line_number, raw in enumerate(text.splitlines(), 1):
        line = raw.strip()
        if not line or line.startswith("#"):
            continue

        if "=" in line:
            name, relative = _parse_default(line, line_number, raw)
            defaults[name] = relative
            continue

        try:
            preferences.append(Pattern.compile(line))
        except ValueError as e:
            raise ConfigParseError(str(e), line_number, raw) from e

    return UserConfig(defaults=defaults, preferences=tuple(preferences))


def _parse_default(line: str, line_number: int, raw: str) -> tuple[str, str]:
    if line.count("=") > 1:
        raise ConfigParseError("more than one '=' in default", line_number, raw)

    name, _, relative = (part.strip() for part in line.partition("="))
    if not name:
        raise ConfigParseError("missing repository name before '='", line_number, raw)
    if any(ch.isspace() for ch in name) or "/" in name:
        raise ConfigParseError(f"invalid repository name {name!r}", line_number, raw)
    if not relative:
        raise ConfigParseError(f"missing path for {name!r}", line_number, raw)
    if relative.startswith("/"):
        raise ConfigParseError(f"path for {name!r} must be relative", line_number, raw)
    if any(not part for part in relative.rstrip("/").split("/")):
        raise ConfigParseError(f"empty segment in path for {name!r}", line_number, raw)

    return name, str(PurePosixPath(relative))


def load_user_config(path: str | Path) -> UserConfig:
    """Load the config file at *path*; a missing file is an empty config."""
    config_path = Path(path).expanduser()
    try:
        text = config_path.read_text(encoding="utf-8")
    except FileNotFoundError:
        logger.debug("No user config, using empty config", path=str(config_path))
        return UserConfig()
    except OSError as e:
        raise CodeswitchError(
            f"Cannot read config {config_path}: {e.strerror or e}",
            details={"path": str(config_path)},
        ) from e

    config = parse_user_config(text)
    logger.debug(
        "User config loaded",
        path=str(config_path),
        defaults=len(config.defaults),
        preferences=len(config.preferences),
    )
    return config
