"""Ignore-file loading — gitignore syntax compiled via pathspec."""

from __future__ import annotations

import logging
from pathlib import Path

from pathspec import GitIgnoreSpec

from fsinventory import PathNotFoundError

logger = logging.getLogger(__name__)


def load_ignore_spec(ignore_file: Path) -> GitIgnoreSpec:
    """Compile the gitignore-syntax rules in *ignore_file*.

    Args:
        ignore_file: File holding one pattern per line.

    Returns:
        GitIgnoreSpec: Compiled spec (possibly matching nothing).

    Raises:
        PathNotFoundError: If the file cannot be read.
    """
    try:
        lines = ignore_file.read_text(encoding="utf-8").splitlines()
    except OSError as exc:
        raise PathNotFoundError(
            f"cannot read ignore file '{ignore_file}': {exc.strerror}"
        ) from exc
    logger.debug("Loaded %d ignore lines from %s", len(lines), ignore_file)
    return GitIgnoreSpec.from_lines(lines)
