"""Preorder directory cursor using os.scandir with an explicit stack (DFS).

The cursor never dereferences symbolic links on its own. A caller that
wants to continue *through* a link calls :meth:`PathCursor.follow` right
after the link was yielded; the next step then opens the link path as a
directory, so the entries found inside keep paths under the link's
location.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Protocol

from fsinventory import TraversalOpenError
from fsinventory.classify import DIRECTORY, SYMLINK, EntryKind, kind_of

logger = logging.getLogger(__name__)

_NS_PER_SEC = 1_000_000_000

# (seconds, nanoseconds)
TimePair = tuple[int, int]


def _split_ns(value: int) -> TimePair:
    sec, nsec = divmod(value, _NS_PER_SEC)
    return sec, nsec


@dataclass(frozen=True, slots=True)
class Timestamps:
    """Entry timestamps as ``(seconds, nanoseconds)`` pairs.

    Attributes:
        changed: Status-change time, used as an approximation of the
            creation time.
        accessed: Last access time.
        modified: Last modification time.
    """

    changed: TimePair
    accessed: TimePair
    modified: TimePair

    @classmethod
    def from_stat(cls, st: os.stat_result) -> Timestamps:
        return cls(
            changed=_split_ns(st.st_ctime_ns),
            accessed=_split_ns(st.st_atime_ns),
            modified=_split_ns(st.st_mtime_ns),
        )


@dataclass(frozen=True, slots=True)
class Entry:
    """A single filesystem node visited by the cursor.

    Attributes:
        path: Path as walked. Inside a followed symlink this lies under the
            symlink's location rather than its target's.
        kind: Node kind determined without following symlinks.
        size: ``st_size`` of the non-followed stat.
        timestamps: Node timestamps.
        depth: Distance from the search root (the root itself is 0).
    """

    path: Path
    kind: EntryKind
    size: int
    timestamps: Timestamps
    depth: int

    @property
    def name(self) -> str:
        return self.path.name


class EntryFilter(Protocol):
    """Protocol for entry filtering.

    Keeps cursor logic decoupled from matching strategy.
    """

    def should_exclude(self, rel_path: PurePosixPath, is_dir: bool) -> bool: ...


class _NullFilter:
    """Default pass-through filter that excludes nothing."""

    def should_exclude(self, rel_path: PurePosixPath, is_dir: bool) -> bool:
        return False


class _DirStream:
    """One open directory level of the walk."""

    def __init__(self, path: Path, depth: int, sort_entries: bool) -> None:
        self.path = path
        self.depth = depth
        self._handle = os.scandir(path)
        if sort_entries:
            with self._handle:
                self._entries: Iterator[os.DirEntry[str]] = iter(
                    sorted(self._handle, key=lambda e: e.name)
                )
        else:
            self._entries = iter(self._handle)

    def next_entry(self) -> os.DirEntry[str] | None:
        return next(self._entries, None)

    def close(self) -> None:
        self._handle.close()


class PathCursor:
    """Lazy, single-use preorder walk over a search root.

    Only preorder visits are produced; leaving a directory is not an event.

    Args:
        root: Search root. It is yielded first.
        sort_entries: Order siblings by name. When ``False`` siblings come
            in directory-read order.
        entry_filter: Optional exclude filter. Excluded entries are neither
            yielded nor descended into.
    """

    def __init__(
        self,
        root: Path,
        *,
        sort_entries: bool = False,
        entry_filter: EntryFilter | None = None,
    ) -> None:
        self.root = root
        self._sort_entries = sort_entries
        self._filter = entry_filter or _NullFilter()
        self._stack: list[_DirStream] = []
        self._follow: Path | None = None
        self._prune: Path | None = None
        self._started = False

    def follow(self, entry: Entry) -> None:
        """Descend into symlink *entry* on the next step.

        This is a one-shot override for the most recently yielded node; it
        does not switch the cursor into a link-following mode.

        Raises:
            ValueError: If *entry* is not a symbolic link.
        """
        if entry.kind != SYMLINK:
            raise ValueError(f"only symbolic links can be followed: {entry.path}")
        self._follow = entry.path

    def prune(self, entry: Entry) -> None:
        """Do not descend into directory *entry* on the next step.

        Like :meth:`follow`, this only applies to the most recently
        yielded node.
        """
        self._prune = entry.path

    def __iter__(self) -> Iterator[Entry]:
        if self._started:
            raise RuntimeError("PathCursor can only be iterated once")
        self._started = True
        return self._walk()

    def close(self) -> None:
        """Close every directory stream still open."""
        while self._stack:
            self._stack.pop().close()

    def _walk(self) -> Iterator[Entry]:
        try:
            root_stat = os.lstat(self.root)
        except OSError as exc:
            raise TraversalOpenError(
                f"cannot traverse '{self.root}': {exc.strerror}"
            ) from exc
        root_kind = kind_of(root_stat.st_mode)
        if root_kind is None:
            raise TraversalOpenError(f"cannot traverse '{self.root}': unsupported node")

        root_entry = Entry(
            path=self.root,
            kind=root_kind,
            size=root_stat.st_size,
            timestamps=Timestamps.from_stat(root_stat),
            depth=0,
        )
        if root_kind == DIRECTORY:
            try:
                self._stack.append(_DirStream(self.root, 1, self._sort_entries))
            except OSError as exc:
                raise TraversalOpenError(
                    f"cannot traverse '{self.root}': {exc.strerror}"
                ) from exc

        try:
            yield root_entry
            if self._take_follow(root_entry):
                self._descend(root_entry)

            while self._stack:
                current = self._stack[-1]
                dir_entry = current.next_entry()
                if dir_entry is None:
                    self._stack.pop().close()
                    continue

                entry = self._make_entry(dir_entry, current.depth)
                if entry is None:
                    continue

                yield entry

                pruned = self._take_prune(entry)
                if (entry.kind == DIRECTORY and not pruned) or self._take_follow(entry):
                    self._descend(entry)
        finally:
            self.close()

    def _take_follow(self, entry: Entry) -> bool:
        follow, self._follow = self._follow, None
        return follow is not None and follow == entry.path

    def _take_prune(self, entry: Entry) -> bool:
        prune, self._prune = self._prune, None
        return prune is not None and prune == entry.path

    def _descend(self, entry: Entry) -> None:
        try:
            self._stack.append(
                _DirStream(entry.path, entry.depth + 1, self._sort_entries)
            )
        except OSError as exc:
            logger.warning("Cannot open directory %s: %s", entry.path, exc.strerror)

    def _make_entry(self, dir_entry: os.DirEntry[str], depth: int) -> Entry | None:
        path = Path(dir_entry.path)
        try:
            st = dir_entry.stat(follow_symlinks=False)
        except OSError:
            logger.debug("Cannot stat: %s", path)
            return None

        kind = kind_of(st.st_mode)
        if kind is None:
            logger.debug("Skipping unsupported node type: %s", path)
            return None

        rel_path = PurePosixPath(path.relative_to(self.root).as_posix())
        if self._filter.should_exclude(rel_path, kind == DIRECTORY):
            logger.debug("Excluded: %s", path)
            return None

        return Entry(
            path=path,
            kind=kind,
            size=st.st_size,
            timestamps=Timestamps.from_stat(st),
            depth=depth,
        )
