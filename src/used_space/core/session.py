"""Session facade binding a scan root, its store and the engine operations.

The presentation layer talks to this object only. It enforces the phase
barrier: nothing can be read before the scan's completion signal has been
consumed and the rollup has run, and the rollup runs exactly once.
"""

from __future__ import annotations

import logging
import os
import threading
import uuid
from enum import Enum, auto

from used_space.core.aggregator import rollup
from used_space.core.config import ScanConfig
from used_space.core.errors import ScanNotReadyError, StaleReferenceError
from used_space.core.mutation import delete_entry
from used_space.core.paths import resolve_root_path
from used_space.core.query import describe_entry, direct_children
from used_space.core.scanner import DirectoryScanner, ScanHandle
from used_space.core.store import SizeStore
from used_space.types.models import DeletionResult, Entry, EntryProperties, RollupStats, ScanStats
from used_space.utils.logging import set_scan_id

logger = logging.getLogger(__name__)


class SessionState(Enum):
    """Lifecycle states of a session."""

    IDLE = auto()
    SCANNING = auto()
    READY = auto()
    FAILED = auto()


class UsedSpaceSession:
    """One scan root, scanned once, then queried and mutated serially.

    Example:
        >>> session = UsedSpaceSession("/home/user/projects")
        >>> session.start_scan()
        >>> session.wait()
        >>> [e.path for e in session.direct_children(session.root_path)][:3]
    """

    def __init__(self, root_path: str | None = None, scan_config: ScanConfig | None = None) -> None:
        """Initialize the session.

        Args:
            root_path: Directory to scan (defaults to the working directory)
            scan_config: Scanner settings

        Raises:
            RootUnreadableError: If the root is missing or unreadable
            RootNotDirectoryError: If the root is not a directory
        """
        config = scan_config or ScanConfig()
        self.root_path: str = resolve_root_path(root_path)
        self.store: SizeStore = SizeStore()
        self.scanner: DirectoryScanner = DirectoryScanner(
            max_workers=config.max_workers,
            size_mode=config.size_mode,
        )
        self.scan_id: str = uuid.uuid4().hex[:12]
        self._state: SessionState = SessionState.IDLE
        self._handle: ScanHandle | None = None
        self._rollup_stats: RollupStats | None = None
        self._barrier_lock: threading.Lock = threading.Lock()

    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def scan_stats(self) -> ScanStats | None:
        return self._handle.stats if self._handle is not None else None

    @property
    def rollup_stats(self) -> RollupStats | None:
        return self._rollup_stats

    def start_scan(self) -> ScanHandle:
        """Start the scan; calling it again returns the running handle."""
        if self._handle is not None:
            return self._handle

        set_scan_id(self.scan_id)
        self._state = SessionState.SCANNING
        try:
            self._handle = self.scanner.scan(self.root_path, self.store)
        except Exception:
            self._state = SessionState.FAILED
            raise
        return self._handle

    def wait(self, timeout: float | None = None) -> RollupStats:
        """Block on the completion signal, then roll sizes up once.

        Raises:
            RootUnreadableError: If the root could not be listed
        """
        handle = self.start_scan()
        try:
            _ = handle.wait(timeout)
        except TimeoutError:
            raise
        except Exception:
            self._state = SessionState.FAILED
            raise
        return self._finish()

    async def wait_async(self) -> RollupStats:
        """Await the completion signal from asyncio, then roll sizes up once."""
        handle = self.start_scan()
        try:
            _ = await handle.wait_async()
        except Exception:
            self._state = SessionState.FAILED
            raise
        return self._finish()

    def get(self, path: str) -> Entry | None:
        self._require_ready()
        return self.store.get(path)

    def direct_children(self, dir_path: str, *, check_exists: bool = False) -> list[Entry]:
        """Ranked direct children of ``dir_path``.

        Args:
            dir_path: Directory to list
            check_exists: Raise StaleReferenceError when the directory is gone from disk
        """
        self._require_ready()
        if check_exists and not os.path.lexists(dir_path):
            raise StaleReferenceError(dir_path)
        return direct_children(self.store, dir_path)

    def describe(self, path: str) -> EntryProperties:
        self._require_ready()
        return describe_entry(self.store, path)

    def delete_entry(self, entry: Entry) -> DeletionResult:
        """Delete ``entry`` from disk and repair the aggregates."""
        self._require_ready()
        return delete_entry(self.store, entry, self.root_path)

    def _finish(self) -> RollupStats:
        with self._barrier_lock:
            if self._rollup_stats is None:
                self._rollup_stats = rollup(self.store, self.root_path)
                self._state = SessionState.READY
            return self._rollup_stats

    def _require_ready(self) -> None:
        if self._state is not SessionState.READY:
            raise ScanNotReadyError(self._state.name)
