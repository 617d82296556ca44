"""Protocol definitions for component interfaces.

The scanner, aggregator, queries and mutation handler depend on this
structural contract rather than on the concrete store class.
"""

from typing import Protocol, runtime_checkable

from used_space.types.aliases import EntryPath
from used_space.types.models import Entry


@runtime_checkable
class EntryStore(Protocol):
    """Concurrency-safe mapping of canonical path to Entry."""

    def get(self, path: EntryPath) -> Entry | None:
        """Return the entry stored under ``path``, if any."""
        ...

    def set(self, path: EntryPath, entry: Entry) -> None:
        """Insert or replace the entry stored under ``path``."""
        ...

    def remove(self, path: EntryPath) -> None:
        """Drop the entry stored under ``path``; unknown paths are ignored."""
        ...

    def keys(self) -> list[EntryPath]:
        """Return a snapshot of every stored path."""
        ...

    def children_of(self, path: EntryPath) -> list[Entry]:
        """Return a snapshot of the entries whose parent is ``path``."""
        ...

    def remove_subtree(self, path: EntryPath) -> list[EntryPath]:
        """Drop ``path`` and every stored descendant, returning removed keys."""
        ...

    def snapshot(self) -> dict[EntryPath, Entry]:
        """Return a shallow copy of the whole mapping."""
        ...

    def __len__(self) -> int: ...

    def __contains__(self, path: object) -> bool: ...
