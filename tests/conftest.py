"""Shared fixtures for fsinventory tests."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path

import pytest


@dataclass(frozen=True)
class Layout:
    """Paths of the standard local-root layout."""

    local: Path
    proj: Path
    shared: Path

    @property
    def link(self) -> Path:
        return self.proj / "link"


@pytest.fixture
def layout(tmp_path: Path) -> Layout:
    """Create the local-root layout with a symlink leaving the search root.

    Structure::

        data/                     (local root)
        ├── proj/                 (search root)
        │   ├── a.txt             (10 bytes)
        │   └── link -> data/shared/x
        └── shared/
            └── x/
                └── f.txt         (3 bytes)
    """
    local = tmp_path.resolve() / "data"
    proj = local / "proj"
    shared = local / "shared"
    proj.mkdir(parents=True)
    (shared / "x").mkdir(parents=True)
    (proj / "a.txt").write_text("0123456789")
    (shared / "x" / "f.txt").write_text("abc")
    os.symlink(shared / "x", proj / "link")
    return Layout(local=local, proj=proj, shared=shared)


@pytest.fixture
def plain_tree(tmp_path: Path) -> Path:
    """Tree without symlinks.

    Structure::

        root/
        ├── alpha/
        │   ├── a1.txt
        │   └── a2.txt
        ├── beta/
        │   └── b1.txt
        └── gamma.txt
    """
    root = tmp_path.resolve() / "root"
    (root / "alpha").mkdir(parents=True)
    (root / "alpha" / "a1.txt").write_text("a1")
    (root / "alpha" / "a2.txt").write_text("a2")
    (root / "beta").mkdir()
    (root / "beta" / "b1.txt").write_text("b1")
    (root / "gamma.txt").write_text("g")
    return root


def fields(line: str, count: int = 5) -> list[str]:
    """Return the first *count* semicolon fields of an inventory line."""
    return line.split(";")[:count]
