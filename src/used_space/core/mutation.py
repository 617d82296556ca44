"""Deletion of filesystem objects with incremental repair of aggregate sizes.

Order matters: the filesystem removal happens first and the store is only
touched once it succeeded, so a failed removal leaves every record exactly as
it was. Ancestor totals are checked and computed before the removal and
written back after it as one uninterrupted sequence, mirroring the rollup for a
single entry.
"""

import logging
import os
import shutil
from dataclasses import replace

from used_space.core.errors import (
    DeletionError,
    EntryNotFoundError,
    InconsistentStoreError,
    ProtectedPathError,
    StaleReferenceError,
)
from used_space.core.paths import ancestors, canonical_path
from used_space.types.aliases import Remover
from used_space.types.models import DeletionResult, Entry
from used_space.types.protocols import EntryStore

logger = logging.getLogger(__name__)


def delete_entry(
    store: EntryStore,
    entry: Entry,
    root_path: str,
    *,
    remove_file: Remover = os.remove,
    remove_tree: Remover = shutil.rmtree,
) -> DeletionResult:
    """Delete ``entry`` from disk, then repair the store.

    A directory is removed recursively and every stored descendant is purged
    along with it, so no stale record outlives its object.

    Args:
        store: Rolled-up store
        entry: Entry to delete
        root_path: Scan root (never deletable)
        remove_file: Removal used for files and links
        remove_tree: Recursive removal used for directories

    Returns:
        Removed path, bytes released from every ancestor, records purged

    Raises:
        ProtectedPathError: If ``entry`` names the scan root, in any spelling
        EntryNotFoundError: If ``entry`` has no record in the store
        StaleReferenceError: If the object no longer exists on disk
        InconsistentStoreError: If an ancestor total is smaller than the entry
        DeletionError: If the removal itself failed (store untouched)
    """
    path = canonical_path(entry.path)
    root_path = canonical_path(root_path)
    if path == root_path:
        raise ProtectedPathError(path)

    # Only the stored record is trusted, never the caller's copy
    current = store.get(path)
    if current is None:
        raise EntryNotFoundError(path)

    if not os.path.lexists(path):
        raise StaleReferenceError(path)

    repaired: list[Entry] = []
    for ancestor_path in ancestors(path, root_path):
        ancestor = store.get(ancestor_path)
        if ancestor is None:
            continue
        if ancestor.size < current.size:
            raise InconsistentStoreError(path, ancestor_path, ancestor.size, current.size)
        repaired.append(replace(ancestor, size=ancestor.size - current.size))

    try:
        if current.is_directory:
            remove_tree(path)
        else:
            remove_file(path)
    except OSError as exc:
        logger.warning(
            "Removal failed, store left unchanged",
            extra={"path": path, "error": str(exc)},
        )
        raise DeletionError(path, exc) from exc

    for ancestor in repaired:
        store.set(ancestor.path, ancestor)

    purged = store.remove_subtree(path)

    logger.info(
        "Deleted entry",
        extra={
            "path": path,
            "is_directory": current.is_directory,
            "released_bytes": current.size,
            "purged_records": len(purged),
        },
    )
    return DeletionResult(path=path, released_bytes=current.size, purged_records=len(purged))
