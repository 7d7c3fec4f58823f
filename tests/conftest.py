"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path

import pytest
import structlog

from codeswitch.config.settings import Settings


@pytest.fixture(autouse=True)
def reset_logging():
    """Undo any structlog configuration a test (or the CLI) installed."""
    yield
    structlog.reset_defaults()


@pytest.fixture
def make_repo() -> Callable[[Path], Path]:
    """Return a helper that turns a directory into a git repository root."""

    def _make(path: Path) -> Path:
        path.mkdir(parents=True, exist_ok=True)
        (path / ".git").mkdir(exist_ok=True)
        (path / "README.md").write_text(f"# {path.name}\n")
        return path

    return _make


@pytest.fixture
def code_root(tmp_path: Path, make_repo: Callable[[Path], Path]) -> Path:
    """A small code tree laid out by host and organization.

    code/
      github/myorg/foo   github/myorg/baz
      github/other/foo
      gitlab/team/bar
      notes/             (no repository)
    """
    root = tmp_path / "code"
    make_repo(root / "github" / "myorg" / "foo")
    make_repo(root / "github" / "myorg" / "baz")
    make_repo(root / "github" / "other" / "foo")
    make_repo(root / "gitlab" / "team" / "bar")
    (root / "notes").mkdir()
    (root / "notes" / "todo.txt").write_text("nothing here\n")
    return root


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings pointing cache and config into the test's temp directory."""
    return Settings(
        cache_dir=str(tmp_path / "cache"),
        config_path=str(tmp_path / "config"),
        scan_workers=2,
    )
