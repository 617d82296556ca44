"""Error taxonomy for the size-aggregation engine.

Per-object scan failures are never raised: the scanner logs and counts them.
Root, query and deletion failures are raised to the immediate caller so the
presentation layer can report them. Nothing here is retried automatically.
"""

from __future__ import annotations

import logging
from typing import Any

logger = logging.getLogger(__name__)


class UsedSpaceError(Exception):
    """Base exception for all engine errors."""

    def __init__(self, message: str, context: dict[str, Any] | None = None) -> None:  # pyright: ignore[reportExplicitAny]
        """Initialize UsedSpaceError.

        Args:
            message: Error message
            context: Additional context information for debugging
        """
        super().__init__(message)
        self.message: str = message
        self.context: dict[str, Any] = context or {}  # pyright: ignore[reportExplicitAny]


class RootUnreadableError(UsedSpaceError):
    """The scan root cannot be opened or stat'ed. Fatal to the whole scan."""

    def __init__(self, root_path: str, cause: BaseException | None = None, message: str | None = None) -> None:
        """Initialize RootUnreadableError.

        Args:
            root_path: The root that could not be read
            cause: Underlying OS error, if any
            message: Override for the default message
        """
        reason = f": {cause}" if cause is not None else ""
        super().__init__(
            message or f"Cannot read scan root {root_path}{reason}",
            {"root_path": root_path},
        )
        self.root_path: str = root_path
        self.cause: BaseException | None = cause


class RootNotDirectoryError(RootUnreadableError):
    """The scan root exists but is not a directory."""

    def __init__(self, root_path: str) -> None:
        super().__init__(root_path, message=f"Scan root is not a directory: {root_path}")


class StaleReferenceError(UsedSpaceError):
    """A query or deletion targets a path that no longer exists on disk."""

    def __init__(self, path: str) -> None:
        super().__init__(f"{path} doesn't exist anymore", {"path": path})
        self.path: str = path


class DeletionError(UsedSpaceError):
    """The filesystem removal failed; the store was left untouched."""

    def __init__(self, path: str, cause: OSError) -> None:
        """Initialize DeletionError.

        Args:
            path: Path that could not be removed
            cause: The OS error raised by the removal
        """
        reason = cause.strerror or str(cause) or "Unknown reason"
        super().__init__(
            f"{path} can't be removed: {reason}",
            {"path": path, "errno": cause.errno},
        )
        self.path: str = path
        self.cause: OSError = cause


class ProtectedPathError(UsedSpaceError):
    """Attempt to delete the scan root through the mutation path."""

    def __init__(self, path: str) -> None:
        super().__init__(f"The scan root cannot be deleted: {path}", {"path": path})
        self.path: str = path


class EntryNotFoundError(UsedSpaceError):
    """The requested path has no record in the store."""

    def __init__(self, path: str) -> None:
        super().__init__(f"No scanned entry for {path}", {"path": path})
        self.path: str = path


class EntryUnreadableError(UsedSpaceError):
    """The object behind a stored entry exists but cannot be inspected."""

    def __init__(self, path: str, cause: OSError) -> None:
        reason = cause.strerror or str(cause) or "Unknown reason"
        super().__init__(f"{path} can't be read: {reason}", {"path": path, "errno": cause.errno})
        self.path: str = path
        self.cause: OSError = cause


class InconsistentStoreError(UsedSpaceError):
    """An ancestor total is smaller than the size of an entry beneath it."""

    def __init__(self, path: str, ancestor_path: str, ancestor_size: int, released: int) -> None:
        super().__init__(
            f"Ancestor {ancestor_path} holds {ancestor_size} bytes, less than the {released} bytes of {path}",
            {"path": path, "ancestor_path": ancestor_path, "ancestor_size": ancestor_size, "released": released},
        )
        self.path: str = path
        self.ancestor_path: str = ancestor_path


class ScanNotReadyError(UsedSpaceError):
    """The store was queried before the scan and rollup barrier."""

    def __init__(self, state: str) -> None:
        super().__init__(f"Scan results are not available yet (state: {state})", {"state": state})
        self.state: str = state


def log_engine_error(error: UsedSpaceError, level: int = logging.WARNING) -> None:
    """Log an engine error together with its context.

    Args:
        error: Error to log
        level: Logging level (default: WARNING)
    """
    message = str(error)
    if error.context:
        context_str = ", ".join(f"{k}={v}" for k, v in error.context.items())  # pyright: ignore[reportAny]
        message = f"{message} (context: {context_str})"

    logger.log(level, message)
