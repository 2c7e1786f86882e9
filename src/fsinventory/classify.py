"""Entry classification: node kind from type bits and symlink resolution."""

from __future__ import annotations

import logging
import os
import stat
from dataclasses import dataclass
from pathlib import Path
from typing import Final, Literal

logger = logging.getLogger(__name__)

EntryKind = Literal["directory", "regular file", "symbolic link"]

DIRECTORY: Final = "directory"
REGULAR_FILE: Final = "regular file"
SYMLINK: Final = "symbolic link"

EXISTS: Final = 1
ABSENT: Final = 2


def kind_of(mode: int) -> EntryKind | None:
    """Map ``st_mode`` of a non-followed stat to an entry kind.

    Args:
        mode: ``st_mode`` as returned by ``lstat``.

    Returns:
        EntryKind | None: The kind label, or ``None`` for node types the
        inventory does not report (FIFOs, sockets, devices).
    """
    if stat.S_ISLNK(mode):
        return SYMLINK
    if stat.S_ISDIR(mode):
        return DIRECTORY
    if stat.S_ISREG(mode):
        return REGULAR_FILE
    return None


@dataclass(frozen=True, slots=True)
class SymlinkResolution:
    """Outcome of resolving a symbolic link.

    Attributes:
        target: Canonical absolute target path, or ``None`` when the link
            is broken or cannot be resolved.
        exists: Whether the resolved target exists.
    """

    target: Path | None
    exists: bool

    @property
    def existence_code(self) -> int:
        return EXISTS if self.exists else ABSENT

    @property
    def target_text(self) -> str:
        return str(self.target) if self.target is not None else ""


def resolve_symlink(path: Path) -> SymlinkResolution:
    """Resolve *path* to its canonical target.

    Resolution failures are not errors: a broken or unreadable link is
    reported as absent with an empty target.

    Args:
        path: Path of the symbolic link itself.

    Returns:
        SymlinkResolution: Target path and existence flag.
    """
    try:
        target = Path(os.path.realpath(path, strict=True))
    except OSError as exc:
        logger.debug("Cannot resolve symlink %s: %s", path, exc)
        return SymlinkResolution(target=None, exists=False)
    if not os.access(target, os.F_OK):
        return SymlinkResolution(target=None, exists=False)
    return SymlinkResolution(target=target, exists=True)


def existence_code(kind: EntryKind, resolution: SymlinkResolution | None = None) -> int:
    """Return the numeric existence code reported for an entry.

    Directories and regular files are only ever visited because they
    exist. Symlinks report the state of their resolved target.
    """
    if kind != SYMLINK:
        return EXISTS
    if resolution is None:
        raise ValueError("symbolic link entries need a resolution")
    return resolution.existence_code
