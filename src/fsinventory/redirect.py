"""Active symlink redirections, innermost last."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Redirection:
    """Path-prefix substitution created by entering a symlinked directory.

    Attributes:
        source: Walked path of the symlink. Entries found through the link
            have paths under it.
        destination: Resolved target directory the link points at.
    """

    source: Path
    destination: Path

    def applies_to(self, path: Path) -> bool:
        """Return whether *path* lies under ``source`` (segment-aware)."""
        return path.is_relative_to(self.source)

    def rewrite(self, path: Path) -> Path:
        """Substitute ``destination`` for the ``source`` prefix of *path*."""
        return self.destination / path.relative_to(self.source)


class RedirectionStack:
    """Ordered redirections; push and pop only happen at the top.

    The stack is kept consistent lazily: before consulting :meth:`current`
    for a visited path, :meth:`reconcile` drops every top redirection the
    path no longer lies under. This relies on the walk visiting a followed
    link's subtree contiguously, right after the link itself.
    """

    def __init__(self) -> None:
        self._items: list[Redirection] = []

    def push(self, source: Path, destination: Path) -> Redirection:
        redirection = Redirection(source=source, destination=destination)
        self._items.append(redirection)
        logger.debug("Redirect %s -> %s (depth %d)", source, destination, len(self._items))
        return redirection

    def reconcile(self, path: Path) -> None:
        """Pop top redirections whose source is not a prefix of *path*."""
        while self._items and not self._items[-1].applies_to(path):
            popped = self._items.pop()
            logger.debug("Leave redirect %s -> %s", popped.source, popped.destination)

    def current(self) -> Redirection | None:
        """Return the innermost active redirection, if any."""
        return self._items[-1] if self._items else None

    def __iter__(self) -> Iterator[Redirection]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)
