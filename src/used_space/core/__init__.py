"""Size-aggregation engine: store, scanner, rollup, queries and deletion."""

from used_space.core.aggregator import rollup
from used_space.core.errors import (
    DeletionError,
    EntryNotFoundError,
    EntryUnreadableError,
    InconsistentStoreError,
    ProtectedPathError,
    RootNotDirectoryError,
    RootUnreadableError,
    ScanNotReadyError,
    StaleReferenceError,
    UsedSpaceError,
)
from used_space.core.mutation import delete_entry
from used_space.core.paths import ancestors, parent_of, resolve_root_path
from used_space.core.query import describe_entry, direct_children
from used_space.core.scanner import DirectoryScanner, ScanHandle, SizeMode
from used_space.core.session import SessionState, UsedSpaceSession
from used_space.core.store import SizeStore

__all__ = [
    # Engine components
    "DirectoryScanner",
    "ScanHandle",
    "SizeMode",
    "SizeStore",
    "SessionState",
    "UsedSpaceSession",
    # Operations
    "ancestors",
    "delete_entry",
    "describe_entry",
    "direct_children",
    "parent_of",
    "resolve_root_path",
    "rollup",
    # Errors
    "DeletionError",
    "EntryNotFoundError",
    "EntryUnreadableError",
    "InconsistentStoreError",
    "ProtectedPathError",
    "RootNotDirectoryError",
    "RootUnreadableError",
    "ScanNotReadyError",
    "StaleReferenceError",
    "UsedSpaceError",
]
