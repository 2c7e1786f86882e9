"""Tests for fsinventory.filter."""

from pathlib import PurePosixPath

import pytest
from pathspec import GitIgnoreSpec

from fsinventory.filter import (
    CombinedFilter,
    IgnoreSpecFilter,
    PatternFilter,
    build_filter,
)


class TestPatternFilter:
    def test_no_patterns_excludes_nothing(self) -> None:
        f = PatternFilter()
        assert f.should_exclude(PurePosixPath("foo.py"), False) is False
        assert f.should_exclude(PurePosixPath("cache"), True) is False

    @pytest.mark.parametrize(
        ("patterns", "rel_path", "expected"),
        [
            (["cache"], "cache", True),
            (["cache"], "src/cache", True),
            (["cache"], "cache/inner", False),
            (["*.tmp"], "a/b/foo.tmp", True),
            (["*.tmp"], "foo.tmpx", False),
        ],
    )
    def test_pattern_matching_on_name(
        self, patterns: list[str], rel_path: str, expected: bool
    ) -> None:
        f = PatternFilter(patterns)
        assert f.should_exclude(PurePosixPath(rel_path), False) is expected


class TestIgnoreSpecFilter:
    @pytest.mark.parametrize(
        ("rules", "rel_path", "is_dir", "expected"),
        [
            ("build/\n", "build", True, True),
            ("build/\n", "build", False, False),
            ("/top.txt\n", "top.txt", False, True),
            ("/top.txt\n", "sub/top.txt", False, False),
            ("*.log\n!keep.log\n", "keep.log", False, False),
            ("*.log\n!keep.log\n", "drop.log", False, True),
        ],
    )
    def test_rules(self, rules: str, rel_path: str, is_dir: bool, expected: bool) -> None:
        f = IgnoreSpecFilter(GitIgnoreSpec.from_lines(rules.splitlines()))
        assert f.should_exclude(PurePosixPath(rel_path), is_dir) is expected


class TestBuildFilter:
    def test_nothing_configured(self) -> None:
        assert build_filter() is None
        assert build_filter([], None) is None

    def test_single_filter_is_unwrapped(self) -> None:
        assert isinstance(build_filter(["*.tmp"]), PatternFilter)

    def test_combined_excludes_on_any(self) -> None:
        f = build_filter(["*.tmp"], GitIgnoreSpec.from_lines(["build/"]))
        assert isinstance(f, CombinedFilter)
        assert f.should_exclude(PurePosixPath("x.tmp"), False)
        assert f.should_exclude(PurePosixPath("build"), True)
        assert not f.should_exclude(PurePosixPath("src"), True)
