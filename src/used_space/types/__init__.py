"""Type definitions and protocols for used-space.

This package provides:
- Data models (immutable dataclasses)
- Protocol definitions (structural subtyping interfaces)
- Type aliases (PEP 695 modern syntax)
"""

from used_space.types.aliases import EntryPath, Remover
from used_space.types.models import (
    DeletionResult,
    Entry,
    EntryProperties,
    ObjectKind,
    RollupStats,
    ScanStats,
)
from used_space.types.protocols import EntryStore

__all__ = [
    # Type aliases
    "EntryPath",
    "Remover",
    # Data models
    "DeletionResult",
    "Entry",
    "EntryProperties",
    "ObjectKind",
    "RollupStats",
    "ScanStats",
    # Protocols
    "EntryStore",
]
