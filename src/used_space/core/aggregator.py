"""Bottom-up rollup of file sizes into cumulative directory sizes.

Runs exactly once, after the scan's completion signal, with no concurrent
writers. Each (file, ancestor) pair is a read-replace-write on the store,
which is only race-free because this pass is single-threaded.
"""

import logging
from dataclasses import replace

from used_space.core.paths import ancestors
from used_space.types.models import RollupStats
from used_space.types.protocols import EntryStore

logger = logging.getLogger(__name__)


def rollup(store: EntryStore, root_path: str) -> RollupStats:
    """Add every file's size to each directory on its ancestor chain.

    Directories never contribute to their ancestors directly; only files do.
    After this pass every directory's size equals the sum of the file sizes in
    its subtree.

    Args:
        store: Populated store (scan finished)
        root_path: Scan root, the last ancestor visited for every file

    Returns:
        Number of files rolled up and the total bytes attributed to the root

    Raises:
        ValueError: If an entry lies outside ``root_path``
    """
    files = 0
    total_bytes = 0
    missing_ancestors = 0

    for key in store.keys():
        entry = store.get(key)
        if entry is None or entry.is_directory:
            continue

        for ancestor_path in ancestors(entry.path, root_path):
            ancestor = store.get(ancestor_path)
            if ancestor is None:
                missing_ancestors += 1
                continue
            store.set(ancestor_path, replace(ancestor, size=ancestor.size + entry.size))

        files += 1
        total_bytes += entry.size

    if missing_ancestors:
        logger.warning(
            "Rollup met ancestors absent from the store",
            extra={"root_path": root_path, "missing_ancestors": missing_ancestors},
        )

    logger.info(
        "Rollup complete",
        extra={"root_path": root_path, "files": files, "total_bytes": total_bytes},
    )
    return RollupStats(files=files, total_bytes=total_bytes)
