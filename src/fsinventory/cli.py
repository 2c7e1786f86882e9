"""CLI entry point for fsinv — I/O boundary only."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from pathlib import Path

from fsinventory import (
    ArgumentError,
    InventoryError,
    PathNotFoundError,
    PathScopeError,
)
from fsinventory.emitter import open_sink, write_inventory
from fsinventory.filter import build_filter
from fsinventory.scanner import ScanOptions

logger = logging.getLogger(__name__)

_LOG_LEVELS = [logging.WARNING, logging.INFO, logging.DEBUG]


def build_parser() -> argparse.ArgumentParser:
    """Build and return the CLI argument parser.

    Returns:
        argparse.ArgumentParser: Configured parser for the ``fsinv`` command.
    """
    parser = argparse.ArgumentParser(
        prog="fsinv",
        description="one-shot filesystem inventory with symlink virtualization",
    )
    parser.add_argument(
        "mode",
        choices=["short", "long"],
        help="short: timestamped header and abbreviated records; long: full records",
    )
    parser.add_argument("output", help="File the inventory is written to")
    parser.add_argument(
        "local_root",
        help="Outermost directory; symlink targets outside it are never entered",
    )
    parser.add_argument(
        "search_roots",
        nargs="+",
        metavar="search_root",
        help="Directory to inventory (must lie under local_root); only the first is scanned",
    )
    parser.add_argument(
        "-I",
        "--exclude",
        action="append",
        default=[],
        dest="patterns",
        help="Exclude entries whose name matches pattern (can be specified multiple times)",
    )
    parser.add_argument(
        "--ignore-file",
        default=None,
        help="Exclude entries matching the gitignore-style rules in this file",
    )
    parser.add_argument(
        "--sort",
        action="store_true",
        dest="sort_entries",
        help="Sort siblings by name (default: directory-read order)",
    )
    parser.add_argument(
        "--timestamp-separator",
        default="",
        help="Text placed between seconds and nanoseconds (default: none)",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="Log progress to stderr (-vv for per-entry decisions)",
    )
    return parser


def _configure_logging(verbosity: int) -> None:
    level = _LOG_LEVELS[min(verbosity, len(_LOG_LEVELS) - 1)]
    logging.basicConfig(
        level=level,
        stream=sys.stderr,
        format="%(levelname)s %(name)s: %(message)s",
    )


def _existing_dir(directory: str, label: str) -> Path:
    """Make *directory* absolute and check it is a directory.

    Symlinks are not resolved, so reported paths keep the spelling the
    caller used.

    Raises:
        PathNotFoundError: If the path does not exist or is not a directory.
    """
    path = Path(os.path.abspath(directory))
    if not path.is_dir():
        raise PathNotFoundError(f"the {label} '{directory}' does not exist")
    return path


def _validate_roots(args: argparse.Namespace) -> tuple[Path, list[Path]]:
    """Validate local and search roots.

    Returns:
        tuple[Path, list[Path]]: Absolute local root and search roots.

    Raises:
        ArgumentError: If no search root was given.
        PathNotFoundError: If a root does not exist.
        PathScopeError: If a search root is not under the local root.
    """
    if not args.search_roots:
        raise ArgumentError("at least one search root is required")

    local_root = _existing_dir(args.local_root, "local directory")
    search_roots: list[Path] = []
    for raw in args.search_roots:
        search_root = _existing_dir(raw, "directory to search")
        if not search_root.is_relative_to(local_root):
            raise PathScopeError(
                f"the directory to search '{raw}' is not located in the local "
                f"directory '{args.local_root}'"
            )
        search_roots.append(search_root)
    return local_root, search_roots


def _build_scan_options(args: argparse.Namespace, local_root: Path) -> ScanOptions:
    spec = None
    if args.ignore_file:
        from fsinventory.gitignore import load_ignore_spec

        spec = load_ignore_spec(Path(args.ignore_file))

    return ScanOptions(
        local_root=local_root,
        sort_entries=args.sort_entries,
        entry_filter=build_filter(args.patterns, spec),
    )


def _run_with_args(args: argparse.Namespace) -> int:
    """Run validation, sink handling and the scan for parsed arguments.

    Returns:
        int: Number of records written.

    Raises:
        InventoryError: On any validation, traversal or I/O error.
    """
    local_root, search_roots = _validate_roots(args)
    if len(search_roots) > 1:
        logger.warning(
            "Only the first search root is scanned; ignoring %s",
            ", ".join(str(p) for p in search_roots[1:]),
        )
    scan_opts = _build_scan_options(args, local_root)

    with open_sink(Path(args.output)) as sink:
        return write_inventory(
            sink,
            args.mode,
            search_roots[0],
            scan_opts,
            timestamp_separator=args.timestamp_separator,
        )


def run_inventory(argv: list[str] | None = None) -> int:
    """Run fsinv with provided CLI args and return the record count.

    This is the primary test target for CLI behavior; it never exits the
    process.

    Args:
        argv: Command-line argument list without program name. If ``None``,
            uses process arguments via ``argparse`` defaults.

    Returns:
        int: Number of records written.

    Raises:
        InventoryError: On any user-facing validation or I/O error.
    """
    parser = build_parser()
    args = parser.parse_args(argv)
    return _run_with_args(args)


def main(argv: list[str] | None = None) -> None:
    """Run the CLI entry point with process (or given) arguments.

    Exits with the error's ``exit_code`` on failure and 0 on success.
    Usage errors are reported by argparse with exit code 2.
    """
    parser = build_parser()
    args = parser.parse_args(argv)  # single parse
    _configure_logging(args.verbose)

    try:
        _run_with_args(args)
    except InventoryError as exc:
        sys.stderr.write(f"fsinv: {exc}\n")
        sys.exit(exc.exit_code)
