"""fsinventory — one-shot filesystem inventory with symlink virtualization."""

__version__ = "0.1.0"


class InventoryError(Exception):
    """User-facing inventory error.

    Every failure that aborts a scan derives from this class. The message
    is printed to stderr and the process exits with ``exit_code``.
    """

    exit_code = 1


class ArgumentError(InventoryError):
    """Invalid invocation shape (mode, argument count)."""

    exit_code = 2


class PathNotFoundError(InventoryError):
    """Local root or search root does not exist."""

    exit_code = 3


class PathScopeError(InventoryError):
    """Search root does not lie under the local root."""

    exit_code = 4


class SinkOpenError(InventoryError):
    """Output file cannot be opened for writing."""

    exit_code = 5


class TraversalOpenError(InventoryError):
    """Search root cannot be opened for traversal."""

    exit_code = 6


class TargetStatError(InventoryError):
    """Querying a symlink's resolved target failed mid-traversal."""

    exit_code = 7


class SinkWriteError(InventoryError):
    """Writing a record to the output sink failed."""

    exit_code = 8
