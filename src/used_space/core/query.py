"""Read-only queries over a rolled-up store."""

import logging
import os
import stat
from datetime import datetime

from used_space.core.errors import EntryNotFoundError, EntryUnreadableError, StaleReferenceError
from used_space.core.paths import parent_of
from used_space.types.models import Entry, EntryProperties, ObjectKind
from used_space.types.protocols import EntryStore

logger = logging.getLogger(__name__)


def _ranking_key(entry: Entry) -> tuple[int, str]:
    return (-entry.size, entry.path)


def direct_children(store: EntryStore, dir_path: str) -> list[Entry]:
    """Return the entries whose immediate parent is ``dir_path``.

    Ordered by size descending; ties are broken by path ascending so repeated
    calls return identical sequences. Unknown or childless paths yield an
    empty list.

    Args:
        store: Rolled-up store
        dir_path: Directory whose children are listed

    Returns:
        Ranked direct children

    Examples:
        >>> [e.path for e in direct_children(store, "/r")]
        ['/r/a', '/r/b']
    """
    children = [entry for entry in store.children_of(dir_path) if entry.path != dir_path]
    children.sort(key=_ranking_key)
    return children


def object_kind(mode: int) -> ObjectKind:
    """Classify an ``lstat`` mode."""
    if stat.S_ISREG(mode):
        return ObjectKind.FILE
    if stat.S_ISDIR(mode):
        return ObjectKind.DIRECTORY
    if stat.S_ISLNK(mode):
        return ObjectKind.SYMLINK
    if stat.S_ISFIFO(mode):
        return ObjectKind.NAMED_PIPE
    return ObjectKind.OTHER


def describe_entry(store: EntryStore, path: str) -> EntryProperties:
    """Collect raw metadata about a stored entry.

    The size comes from the store (the cumulative size for directories); times,
    kind and the child count are read from disk at call time.

    Raises:
        EntryNotFoundError: If ``path`` has no record in the store
        StaleReferenceError: If the object no longer exists on disk
        EntryUnreadableError: If the object exists but cannot be stat'ed
    """
    entry = store.get(path)
    if entry is None:
        raise EntryNotFoundError(path)

    try:
        st = os.lstat(path)
    except (FileNotFoundError, NotADirectoryError) as exc:
        # A parent replaced by a file also means the object is gone
        raise StaleReferenceError(path) from exc
    except OSError as exc:
        raise EntryUnreadableError(path, exc) from exc

    kind = object_kind(st.st_mode)
    child_count: int | None = None
    if kind is ObjectKind.DIRECTORY:
        try:
            child_count = len(os.listdir(path))
        except OSError as exc:
            logger.debug("Cannot count directory children", extra={"path": path, "error": str(exc)})

    return EntryProperties(
        path=path,
        name=os.path.basename(path) or path,
        parent=parent_of(path),
        kind=kind,
        size=entry.size,
        access_time=datetime.fromtimestamp(st.st_atime),
        modification_time=datetime.fromtimestamp(st.st_mtime),
        child_count=child_count,
    )
