"""Full inventory record layout.

One line per node::

    path;existence;target;size;kind;ctime;atime;mtime

Each timestamp is rendered as seconds followed by nanoseconds. By default
the two are concatenated without a separator (``%li%li`` in the format the
downstream readers were written against); set ``timestamp_separator`` to
keep them apart.
"""

from __future__ import annotations

from dataclasses import dataclass

from fsinventory.cursor import TimePair
from fsinventory.scanner import InventoryRecord

FIELD_SEPARATOR = ";"


@dataclass(frozen=True, slots=True)
class LongOptions:
    """Options for full records.

    Attributes:
        timestamp_separator: Text placed between seconds and nanoseconds.
    """

    timestamp_separator: str = ""


def format_time_pair(pair: TimePair, separator: str = "") -> str:
    sec, nsec = pair
    return f"{sec}{separator}{nsec}"


def format_long(record: InventoryRecord, options: LongOptions | None = None) -> str:
    """Render *record* as one full inventory line (without newline).

    Args:
        record: Record to render.
        options: Rendering options. Defaults to ``LongOptions()``.

    Returns:
        str: Semicolon-delimited line with timestamps.
    """
    opts = options or LongOptions()
    ts = record.timestamps
    sep = opts.timestamp_separator
    return FIELD_SEPARATOR.join(
        [
            str(record.path),
            str(record.existence),
            record.target,
            str(record.size),
            record.kind,
            format_time_pair(ts.changed, sep),
            format_time_pair(ts.accessed, sep),
            format_time_pair(ts.modified, sep),
        ]
    )
