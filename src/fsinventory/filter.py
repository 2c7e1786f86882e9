"""Entry filtering: fnmatch name patterns and gitignore-style rules."""

from __future__ import annotations

from collections.abc import Sequence
from fnmatch import fnmatch
from pathlib import PurePosixPath

from pathspec import GitIgnoreSpec

from fsinventory.cursor import EntryFilter


class PatternFilter:
    """Filter entries by fnmatch patterns on their name.

    Implements ``-I PATTERN`` exclusion behavior.
    """

    def __init__(self, patterns: list[str] | None = None) -> None:
        self._patterns: list[str] = list(patterns) if patterns else []

    def should_exclude(self, rel_path: PurePosixPath, is_dir: bool) -> bool:
        """Return ``True`` when any configured pattern matches the name."""
        return any(fnmatch(rel_path.name, pat) for pat in self._patterns)


class IgnoreSpecFilter:
    """Filter entries with a compiled gitignore spec.

    Paths are matched relative to the search root; directories are matched
    with a trailing ``/`` so that ``dir/`` rules apply to them.
    """

    def __init__(self, spec: GitIgnoreSpec) -> None:
        self._spec = spec

    def should_exclude(self, rel_path: PurePosixPath, is_dir: bool) -> bool:
        candidate = rel_path.as_posix()
        if is_dir:
            candidate += "/"
        return self._spec.match_file(candidate)


class CombinedFilter:
    """Exclude an entry when any of the wrapped filters does."""

    def __init__(self, filters: Sequence[EntryFilter]) -> None:
        self._filters = list(filters)

    def should_exclude(self, rel_path: PurePosixPath, is_dir: bool) -> bool:
        return any(f.should_exclude(rel_path, is_dir) for f in self._filters)


def build_filter(
    patterns: list[str] | None = None,
    spec: GitIgnoreSpec | None = None,
) -> EntryFilter | None:
    """Combine the configured exclusions, or return ``None`` when there are none."""
    filters: list[EntryFilter] = []
    if patterns:
        filters.append(PatternFilter(patterns))
    if spec is not None:
        filters.append(IgnoreSpecFilter(spec))
    if not filters:
        return None
    if len(filters) == 1:
        return filters[0]
    return CombinedFilter(filters)
