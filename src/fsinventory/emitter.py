"""Streaming record emitter: writes each record as soon as it is scanned."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable, Iterator
from contextlib import closing, contextmanager
from functools import partial
from itertools import chain
from pathlib import Path
from typing import Literal, TextIO

from fsinventory import SinkOpenError, SinkWriteError
from fsinventory.formatter.long import LongOptions, format_long
from fsinventory.formatter.short import ShortOptions, format_short, format_short_header
from fsinventory.scanner import InventoryRecord, ScanOptions, scan

logger = logging.getLogger(__name__)

Mode = Literal["short", "long"]


@contextmanager
def open_sink(path: Path) -> Iterator[TextIO]:
    """Open *path* for writing and close it on every exit path.

    Undecodable filename bytes (surrogate-escaped by ``os.scandir``) are
    written back unchanged.

    Raises:
        SinkOpenError: If the file cannot be created or truncated.
        SinkWriteError: If buffered output cannot be flushed on close.
    """
    try:
        sink = open(
            path, "w", encoding="utf-8", errors="surrogateescape", newline="\n"
        )
    except OSError as exc:
        raise SinkOpenError(f"cannot open '{path}': {exc.strerror}") from exc
    try:
        yield sink
    finally:
        try:
            sink.close()
        except OSError as exc:
            raise SinkWriteError(f"cannot write '{path}': {exc.strerror}") from exc


class RecordWriter:
    """Line writer over an output sink.

    Lines are written in the order received; write failures surface as
    :class:`SinkWriteError`.
    """

    def __init__(self, sink: TextIO) -> None:
        self._sink = sink
        self.lines = 0

    def write_line(self, line: str) -> None:
        try:
            self._sink.write(line + "\n")
        except OSError as exc:
            raise SinkWriteError(f"cannot write inventory: {exc.strerror}") from exc
        self.lines += 1


def write_inventory(
    sink: TextIO,
    mode: Mode,
    search_root: Path,
    scan_options: ScanOptions | None = None,
    timestamp_separator: str = "",
    clock: Callable[[], int] = time.time_ns,
) -> int:
    """Scan *search_root* and stream its inventory to *sink*.

    Args:
        sink: Open text sink.
        mode: ``"long"`` for full records, ``"short"`` for the timestamped
            header followed by abbreviated records.
        search_root: Subtree to inventory.
        scan_options: Scanner options.
        timestamp_separator: Text between seconds and nanoseconds.
        clock: Wall-clock source in nanoseconds, used for the short header.

    Returns:
        int: Number of records written (header lines excluded).
    """
    writer = RecordWriter(sink)

    render: Callable[[InventoryRecord], str]
    if mode == "short":
        render = format_short
    else:
        render = partial(
            format_long, options=LongOptions(timestamp_separator=timestamp_separator)
        )

    with closing(scan(search_root, scan_options)) as records:
        # The search root is opened before anything reaches the sink.
        first = next(records, None)

        if mode == "short":
            short_opts = ShortOptions(timestamp_separator=timestamp_separator)
            for line in format_short_header(clock(), search_root, short_opts):
                writer.write_line(line)

        header_lines = writer.lines
        if first is not None:
            for record in chain((first,), records):
                writer.write_line(render(record))

    count = writer.lines - header_lines
    logger.info("Wrote %d %s records for %s", count, mode, search_root)
    return count
