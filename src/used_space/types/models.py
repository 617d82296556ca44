"""Data models for used-space.

This module defines the immutable dataclasses passed between the scanner,
the size store, the queries and the deletion path.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum


@dataclass(slots=True, frozen=True)
class Entry:
    """One filesystem object seen during a scan.

    For files ``size`` is the byte count reported at scan time and never
    re-read. For directories it is the aggregate of every file beneath it,
    maintained by the engine; the filesystem's own directory size is ignored.
    """

    path: str
    size: int
    is_directory: bool


class ObjectKind(str, Enum):
    """Kind of filesystem object as reported by ``lstat``."""

    FILE = "file"
    DIRECTORY = "directory"
    SYMLINK = "symlink"
    NAMED_PIPE = "named_pipe"
    OTHER = "other"


@dataclass(slots=True, frozen=True)
class EntryProperties:
    """Raw metadata describing a stored entry and its on-disk object."""

    path: str
    name: str
    parent: str
    kind: ObjectKind
    size: int
    access_time: datetime
    modification_time: datetime
    child_count: int | None  # None for anything that is not a directory


@dataclass(slots=True, frozen=True)
class ScanStats:
    """Counters collected by a finished scan."""

    directories: int
    files: int
    skipped: int
    elapsed_seconds: float


@dataclass(slots=True, frozen=True)
class RollupStats:
    """Result of the bottom-up size rollup."""

    files: int
    total_bytes: int


@dataclass(slots=True, frozen=True)
class DeletionResult:
    """Outcome of a successful deletion."""

    path: str
    released_bytes: int
    purged_records: int
