"""Path-chain helpers shared by the scanner, aggregator and mutation handler.

Store keys are plain strings: absolute, normalised, without a trailing
separator (except for the filesystem root itself).
"""

import os
import stat
from collections.abc import Iterator

from used_space.core.errors import RootNotDirectoryError, RootUnreadableError


def canonical_path(raw: str) -> str:
    """Return the absolute, normalised form of ``raw`` used as a store key."""
    return os.path.normpath(os.path.abspath(raw))


def parent_of(path: str) -> str:
    """Return the immediate parent of ``path`` (``/`` is its own parent)."""
    return os.path.dirname(path)


def is_within(path: str, root: str) -> bool:
    """Check whether ``path`` is ``root`` or lies beneath it.

    Examples:
        >>> is_within("/r/b/c", "/r")
        True
        >>> is_within("/rb", "/r")
        False
    """
    if path == root:
        return True
    prefix = root if root.endswith(os.sep) else root + os.sep
    return path.startswith(prefix)


def ancestors(path: str, root: str) -> Iterator[str]:
    """Yield the ancestor chain of ``path`` from its parent up to ``root``.

    ``root`` itself is included, nothing above it is. ``root`` yields nothing.

    Raises:
        ValueError: If ``path`` does not lie under ``root``

    Examples:
        >>> list(ancestors("/r/b/c", "/r"))
        ['/r/b', '/r']
    """
    if not is_within(path, root):
        msg = f"{path} is not under scan root {root}"
        raise ValueError(msg)

    current = path
    while current != root:
        parent = parent_of(current)
        if parent == current:
            # Reached the filesystem root without meeting ``root``
            msg = f"{path} is not under scan root {root}"
            raise ValueError(msg)
        current = parent
        yield current


def resolve_root_path(raw: str | None = None) -> str:
    """Validate and normalise the user-supplied scan root.

    Defaults to the current working directory. A trailing separator is dropped
    (the filesystem root keeps its single ``/``).

    Args:
        raw: Path given on the command line, or None

    Returns:
        Canonical absolute directory path

    Raises:
        RootUnreadableError: If the path does not exist or cannot be stat'ed
        RootNotDirectoryError: If the path is not a directory
    """
    if raw is None or raw == "":
        raw = os.getcwd()

    root = canonical_path(raw)
    try:
        st = os.stat(root)
    except OSError as exc:
        raise RootUnreadableError(root, exc) from exc

    if not stat.S_ISDIR(st.st_mode):
        raise RootNotDirectoryError(root)

    return root
