"""Inventory scan: cursor, classifier and rewriter wired into one stream."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

from fsinventory.classify import (
    SYMLINK,
    EntryKind,
    existence_code,
    resolve_symlink,
)
from fsinventory.cursor import EntryFilter, PathCursor, Timestamps
from fsinventory.rewrite import PathRewriter

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class InventoryRecord:
    """One emitted inventory line before formatting.

    Attributes:
        path: Path as walked (under the symlink's location for entries
            found through a followed link).
        existence: ``1`` when the node (or a symlink's target) exists,
            ``2`` for broken symlinks.
        target: Resolved target for symlinks, physical location for
            entries reached through a followed link, otherwise ``""``.
        size: Size in bytes of the non-followed node.
        kind: Kind label.
        timestamps: Node timestamps.
    """

    path: Path
    existence: int
    target: str
    size: int
    kind: EntryKind
    timestamps: Timestamps


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options controlling scanner behavior.

    Attributes:
        local_root: Boundary for following symlinks. ``None`` means the
            search root itself, so no link is ever entered.
        sort_entries: Order siblings by name instead of directory-read order.
        entry_filter: Optional exclude filter.
    """

    local_root: Path | None = None
    sort_entries: bool = False
    entry_filter: EntryFilter | None = None


def scan(
    search_root: Path,
    options: ScanOptions | None = None,
) -> Iterator[InventoryRecord]:
    """Walk *search_root* and yield one record per visited node.

    Records come in preorder visit order. A symlink's record is yielded
    before the decision to enter it is taken, so the link line always
    precedes the lines found through it.

    Args:
        search_root: Subtree to inventory.
        options: Scanner options. Defaults to ``ScanOptions()``.

    Yields:
        InventoryRecord: Records in traversal order.

    Raises:
        TraversalOpenError: If the search root cannot be opened.
        TargetStatError: If a symlink target to be entered cannot be stat'ed.
    """
    scan_options = options or ScanOptions()
    local_root = scan_options.local_root or search_root

    cursor = PathCursor(
        search_root,
        sort_entries=scan_options.sort_entries,
        entry_filter=scan_options.entry_filter,
    )
    rewriter = PathRewriter(cursor, local_root, search_root)

    count = 0
    try:
        for entry in cursor:
            location = rewriter.locate(entry)
            if rewriter.revisits_search_root(entry):
                logger.debug("Skipping %s: already inside the search root", entry.path)
                cursor.prune(entry)
                continue

            if entry.kind == SYMLINK:
                resolution = resolve_symlink(entry.path)
                target = resolution.target_text
                existence = resolution.existence_code
            else:
                resolution = None
                target = str(location) if location is not None else ""
                existence = existence_code(entry.kind)

            yield InventoryRecord(
                path=entry.path,
                existence=existence,
                target=target,
                size=entry.size,
                kind=entry.kind,
                timestamps=entry.timestamps,
            )
            count += 1

            if resolution is not None:
                rewriter.maybe_enter(entry, resolution)
    finally:
        cursor.close()

    logger.info("Scanned %d entries under %s", count, search_root)
