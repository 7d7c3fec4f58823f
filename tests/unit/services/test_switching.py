"""Tests for the switch service."""

from pathlib import Path

import pytest

from codeswitch.config.settings import Settings
from codeswitch.core.exceptions import ConfigParseError, ScanError
from codeswitch.core.models.query import AmbiguousMatch, NoMatch, Query, UniqueMatch
from codeswitch.services.switching import SwitchService, list_names, resolve_cli


@pytest.fixture
def service(settings: Settings) -> SwitchService:
    return SwitchService(settings)


@pytest.mark.unit
class TestLoadIndex:
    """Tests for cache use and rebuilds."""

    def test_first_load_scans_and_caches(self, service: SwitchService, code_root: Path) -> None:
        index, from_cache = service.load_index(code_root)
        assert from_cache is False
        assert len(index) == 4
        assert service.cache.path_for(str(code_root)).is_file()

    def test_second_load_uses_cache(self, service: SwitchService, code_root: Path) -> None:
        first, _ = service.load_index(code_root)
        second, from_cache = service.load_index(code_root)
        assert from_cache is True
        assert second == first

    def test_rebuild_bypasses_cache(self, service: SwitchService, code_root: Path) -> None:
        service.load_index(code_root)
        _, from_cache = service.load_index(code_root, rebuild=True)
        assert from_cache is False

    def test_corrupt_cache_rebuilds(self, service: SwitchService, code_root: Path) -> None:
        service.load_index(code_root)
        service.cache.path_for(str(code_root)).write_text("not json")
        index, from_cache = service.load_index(code_root)
        assert from_cache is False
        assert len(index) == 4

    def test_missing_root(self, service: SwitchService, tmp_path: Path) -> None:
        with pytest.raises(ScanError):
            service.load_index(tmp_path / "missing")


@pytest.mark.unit
class TestResolveCli:
    """Tests for SwitchService.resolve_cli."""

    def test_unique(self, service: SwitchService, code_root: Path) -> None:
        outcome = service.resolve_cli(code_root, Query(name="bar"))
        assert outcome == UniqueMatch(path=str(code_root / "gitlab" / "team" / "bar"))

    def test_ambiguous_then_positional(self, service: SwitchService, code_root: Path) -> None:
        outcome = service.resolve_cli(code_root, Query(name="foo"))
        assert isinstance(outcome, AmbiguousMatch)
        second = service.resolve_cli(code_root, Query(name="foo", disambiguator=2))
        assert second == UniqueMatch(path=outcome.paths[1])

    def test_rescans_when_cached_index_has_no_match(
        self, service: SwitchService, code_root: Path, make_repo
    ) -> None:
        service.load_index(code_root)
        # Deep addition: the root's own mtime does not change
        make_repo(code_root / "github" / "myorg" / "fresh")
        assert service.cache.load(str(code_root)) is not None

        outcome = service.resolve_cli(code_root, Query(name="fresh"))
        assert outcome == UniqueMatch(path=str(code_root / "github" / "myorg" / "fresh"))
        assert "fresh" in service.cache.load(str(code_root)).names()

    def test_filter_that_removes_every_candidate_does_not_rescan(
        self, service: SwitchService, code_root: Path, make_repo, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        service.load_index(code_root)
        make_repo(code_root / "github" / "myorg" / "zzz" / "foo")

        def fail_rebuild(root):
            raise AssertionError("unexpected rescan")

        monkeypatch.setattr(service, "rebuild", fail_rebuild)
        outcome = service.resolve_cli(code_root, Query(name="foo", disambiguator="zzz"))
        assert outcome == NoMatch()

    def test_no_match(self, service: SwitchService, code_root: Path) -> None:
        assert service.resolve_cli(code_root, Query(name="nope")) == NoMatch()

    def test_uses_user_config(
        self, settings: Settings, service: SwitchService, code_root: Path
    ) -> None:
        Path(settings.config_path).write_text("foo = other/foo\n")
        outcome = service.resolve_cli(code_root, Query(name="foo"))
        assert outcome == UniqueMatch(path=str(code_root / "github" / "other" / "foo"))

    def test_preferences_from_user_config(
        self, settings: Settings, service: SwitchService, code_root: Path
    ) -> None:
        Path(settings.config_path).write_text("github/myorg/*\n")
        outcome = service.resolve_cli(code_root, Query(name="foo"))
        assert outcome == UniqueMatch(path=str(code_root / "github" / "myorg" / "foo"))

    def test_config_parse_error_propagates(
        self, settings: Settings, service: SwitchService, code_root: Path
    ) -> None:
        Path(settings.config_path).write_text("foo = /abs\n")
        with pytest.raises(ConfigParseError):
            service.resolve_cli(code_root, Query(name="foo"))


@pytest.mark.unit
class TestModuleFunctions:
    """Tests for the module-level entry points."""

    def test_resolve_cli(self, settings: Settings, code_root: Path) -> None:
        outcome = resolve_cli(code_root, "foo", "other", settings=settings)
        assert outcome == UniqueMatch(path=str(code_root / "github" / "other" / "foo"))

    def test_list_names(self, settings: Settings, code_root: Path) -> None:
        assert list_names(code_root, settings=settings) == ["bar", "baz", "foo"]
