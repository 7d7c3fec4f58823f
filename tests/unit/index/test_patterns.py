"""Tests for preference patterns."""

import pytest

from codeswitch.index.patterns import (
    AnyDepthSegment,
    LiteralSegment,
    Pattern,
    WildcardSegment,
    first_match,
)


@pytest.mark.unit
class TestPatternCompile:
    """Tests for Pattern.compile."""

    def test_segment_kinds(self) -> None:
        pattern = Pattern.compile("github/**/my*")
        assert pattern.segments == (
            LiteralSegment(text="github"),
            AnyDepthSegment(),
            WildcardSegment(glob="my*"),
        )
        assert not pattern.anchored

    def test_leading_slash_anchors(self) -> None:
        pattern = Pattern.compile("/code/github")
        assert pattern.anchored
        assert len(pattern.segments) == 2

    def test_trailing_slash_is_ignored(self) -> None:
        assert Pattern.compile("work/").segments == (LiteralSegment(text="work"),)

    def test_repeated_any_depth_collapses(self) -> None:
        assert len(Pattern.compile("a/**/**/b").segments) == 3

    @pytest.mark.parametrize("source", ["", "   ", "/", "a//b", "my org/*"])
    def test_invalid_patterns(self, source: str) -> None:
        with pytest.raises(ValueError):
            Pattern.compile(source)

    def test_str_is_source(self) -> None:
        assert str(Pattern.compile("github/*")) == "github/*"


@pytest.mark.unit
class TestPatternMatch:
    """Tests for Pattern.matches."""

    def test_org_glob(self) -> None:
        pattern = Pattern.compile("github/myorg/*")
        assert pattern.matches("/code/github/myorg/foo")
        assert not pattern.matches("/code/github/other/foo")

    def test_relative_pattern_matches_anywhere(self) -> None:
        pattern = Pattern.compile("work")
        assert pattern.matches("/home/me/work/client/foo")
        assert not pattern.matches("/home/me/workshop/foo")

    def test_anchored_pattern_matches_from_start(self) -> None:
        pattern = Pattern.compile("/code/github")
        assert pattern.matches("/code/github/myorg/foo")
        assert not Pattern.compile("/github").matches("/code/github/myorg/foo")

    def test_any_depth(self) -> None:
        pattern = Pattern.compile("github/**/foo")
        assert pattern.matches("/code/github/foo")
        assert pattern.matches("/code/github/a/b/foo")
        assert not pattern.matches("/code/gitlab/a/foo")

    def test_wildcards_are_case_sensitive(self) -> None:
        assert not Pattern.compile("GitHub/*").matches("/code/github/foo")
        assert Pattern.compile("git[hl]*/team").matches("/code/gitlab/team/bar")

    def test_wildcard_stays_within_one_component(self) -> None:
        assert not Pattern.compile("github/*/foo").matches("/code/github/a/b/foo")


@pytest.mark.unit
class TestFirstMatch:
    """Tests for first_match ordering."""

    def test_pattern_order_wins_over_path_order(self) -> None:
        patterns = [Pattern.compile("gitlab/*"), Pattern.compile("github/*")]
        paths = ["/code/github/foo", "/code/gitlab/foo"]
        assert first_match(patterns, paths) == "/code/gitlab/foo"

    def test_path_order_within_one_pattern(self) -> None:
        patterns = [Pattern.compile("code")]
        paths = ["/code/b/foo", "/code/a/foo"]
        assert first_match(patterns, paths) == "/code/b/foo"

    def test_no_match(self) -> None:
        assert first_match([Pattern.compile("bitbucket")], ["/code/github/foo"]) is None
        assert first_match([], ["/code/github/foo"]) is None
