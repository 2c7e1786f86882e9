"""Short inventory layout: timestamped header plus abbreviated records."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from fsinventory.formatter.long import FIELD_SEPARATOR, format_time_pair
from fsinventory.scanner import InventoryRecord

_NS_PER_SEC = 1_000_000_000


@dataclass(frozen=True, slots=True)
class ShortOptions:
    """Options for short output.

    Attributes:
        timestamp_separator: Text placed between seconds and nanoseconds of
            the header timestamp.
    """

    timestamp_separator: str = ""


def format_short_header(
    now_ns: int,
    search_root: Path,
    options: ShortOptions | None = None,
) -> list[str]:
    """Return the two header lines of a short inventory.

    Args:
        now_ns: Wall-clock time at scan start, in nanoseconds.
        search_root: Root of the scanned subtree.
        options: Rendering options. Defaults to ``ShortOptions()``.

    Returns:
        list[str]: ``[timestamp, search_root]``.
    """
    opts = options or ShortOptions()
    stamp = format_time_pair(divmod(now_ns, _NS_PER_SEC), opts.timestamp_separator)
    return [stamp, str(search_root)]


def format_short(record: InventoryRecord) -> str:
    """Render *record* as one abbreviated line (no timestamps)."""
    return FIELD_SEPARATOR.join(
        [
            str(record.path),
            str(record.existence),
            record.target,
            str(record.size),
            record.kind,
        ]
    )
