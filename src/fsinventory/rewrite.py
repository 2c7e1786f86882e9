"""Logical path rewriting and the decision to enter symlinked directories."""

from __future__ import annotations

import logging
import os
import stat
from pathlib import Path

from fsinventory import TargetStatError
from fsinventory.classify import SYMLINK, SymlinkResolution
from fsinventory.cursor import Entry, PathCursor
from fsinventory.redirect import RedirectionStack

logger = logging.getLogger(__name__)


def _canonical(path: Path) -> Path:
    return Path(os.path.realpath(path))


class PathRewriter:
    """Map walked paths to physical locations and drive virtual entering.

    Args:
        cursor: Cursor producing the entries; told which links to follow.
        local_root: Outermost boundary for following symlink targets.
        search_root: Subtree being inventoried.
        stack: Redirection stack. A fresh one is created by default.
    """

    def __init__(
        self,
        cursor: PathCursor,
        local_root: Path,
        search_root: Path,
        stack: RedirectionStack | None = None,
    ) -> None:
        self._cursor = cursor
        self._local_root = _canonical(local_root)
        self._search_root = _canonical(search_root)
        self.stack = stack if stack is not None else RedirectionStack()

    def locate(self, entry: Entry) -> Path | None:
        """Return the physical location of *entry* when it was reached
        through a followed symlink, otherwise ``None``.

        Symlinks are never rewritten. The stack is reconciled for every
        entry so that it only holds redirections enclosing *entry*.
        """
        self.stack.reconcile(entry.path)
        if entry.kind == SYMLINK:
            return None
        redirection = self.stack.current()
        if redirection is None:
            return None
        return redirection.rewrite(entry.path)

    def maybe_enter(self, entry: Entry, resolution: SymlinkResolution) -> bool:
        """Decide whether to continue the walk through symlink *entry*.

        Must be called after the link's own record was emitted and before
        the cursor advances.

        Returns:
            bool: ``True`` when the link was entered.

        Raises:
            TargetStatError: If the resolved target cannot be stat'ed.
        """
        target = resolution.target
        if not resolution.exists or target is None:
            return False
        if not target.is_relative_to(self._local_root):
            logger.debug("Not entering %s: target %s outside local root", entry.path, target)
            return False
        if target.is_relative_to(self._search_root):
            logger.debug("Not entering %s: target %s already scanned", entry.path, target)
            return False
        if self._would_cycle(entry, target):
            logger.debug("Not entering %s: target %s encloses the link", entry.path, target)
            return False

        try:
            st = os.stat(target)
        except OSError as exc:
            raise TargetStatError(f"cannot stat '{target}': {exc.strerror}") from exc
        if not stat.S_ISDIR(st.st_mode):
            return False

        self._cursor.follow(entry)
        self.stack.push(entry.path, target)
        return True

    def revisits_search_root(self, entry: Entry) -> bool:
        """Return whether *entry*, reached through a followed link, lies
        physically inside the search root.

        Such entries are covered by the direct walk; the caller skips them
        and prunes their subtree. Call after :meth:`locate`.
        """
        redirection = self.stack.current()
        if redirection is None:
            return False
        return redirection.rewrite(entry.path).is_relative_to(self._search_root)

    def _would_cycle(self, entry: Entry, target: Path) -> bool:
        # A link whose own directory sits inside the search root can only
        # reach itself again through the pruned search root.
        parent = _canonical(entry.path.parent)
        if not parent.is_relative_to(self._search_root) and parent.is_relative_to(target):
            return True
        return any(r.destination.is_relative_to(target) for r in self.stack)
