"""In-memory size store shared by scan workers and the post-scan caller.

The store is the sole owner of every Entry. It tolerates concurrent ``set``
calls from scan workers; read-modify-write sequences (rollup, deletion repair)
are only issued while a single logical writer is active, so the store does not
offer an atomic increment.
"""

from __future__ import annotations

import threading
from collections import defaultdict
from collections.abc import Iterator

from used_space.core.paths import is_within, parent_of
from used_space.types.models import Entry


class SizeStore:
    """Mutex-guarded mapping of canonical path to Entry.

    A secondary index of parent path -> child paths keeps child listings
    proportional to the number of children instead of the size of the store.
    """

    def __init__(self) -> None:
        self._entries: dict[str, Entry] = {}
        self._children: defaultdict[str, set[str]] = defaultdict(set)
        self._lock: threading.Lock = threading.Lock()

    def get(self, path: str) -> Entry | None:
        """Return the entry stored under ``path``, if any."""
        with self._lock:
            return self._entries.get(path)

    def set(self, path: str, entry: Entry) -> None:
        """Insert or replace the entry stored under ``path``.

        Raises:
            ValueError: If ``path`` does not match ``entry.path``
        """
        if path != entry.path:
            msg = f"Store key {path!r} does not match entry path {entry.path!r}"
            raise ValueError(msg)

        with self._lock:
            if path not in self._entries:
                parent = parent_of(path)
                if parent != path:
                    self._children[parent].add(path)
            self._entries[path] = entry

    def remove(self, path: str) -> None:
        """Drop the entry stored under ``path``; unknown paths are ignored."""
        with self._lock:
            self._remove_locked(path)

    def remove_subtree(self, path: str) -> list[str]:
        """Drop ``path`` and every stored entry beneath it.

        Returns:
            The removed keys, ``path`` first when it was stored
        """
        with self._lock:
            removed: list[str] = []
            pending = [path]
            while pending:
                current = pending.pop()
                pending.extend(self._children.get(current, ()))
                if self._remove_locked(current):
                    removed.append(current)
            # Orphans whose intermediate directory was never stored
            stragglers = [key for key in self._entries if key != path and is_within(key, path)]
            for key in stragglers:
                if self._remove_locked(key):
                    removed.append(key)
            return removed

    def keys(self) -> list[str]:
        """Return a snapshot of every stored path."""
        with self._lock:
            return list(self._entries)

    def children_of(self, path: str) -> list[Entry]:
        """Return a snapshot of the entries whose parent is ``path``."""
        with self._lock:
            return [self._entries[child] for child in self._children.get(path, ()) if child in self._entries]

    def snapshot(self) -> dict[str, Entry]:
        """Return a shallow copy of the whole mapping."""
        with self._lock:
            return dict(self._entries)

    def __len__(self) -> int:
        with self._lock:
            return len(self._entries)

    def __contains__(self, path: object) -> bool:
        with self._lock:
            return path in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self.keys())

    def _remove_locked(self, path: str) -> bool:
        entry = self._entries.pop(path, None)
        if entry is None:
            return False

        parent = parent_of(path)
        siblings = self._children.get(parent)
        if siblings is not None:
            siblings.discard(path)
            if not siblings:
                del self._children[parent]
        return True
