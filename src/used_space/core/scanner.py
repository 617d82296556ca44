"""Concurrent directory scanner populating the size store.

Traversal fans out over a bounded thread pool, one task per directory
listing, to overlap filesystem latency. Workers share a single store and
only ever insert into it. The scan completes exactly once, after every
worker has finished, through the returned ``ScanHandle``.

Symbolic links are never followed: a link is recorded as a file with its own
``lstat`` size, so cyclic links cannot trap the traversal.
"""

from __future__ import annotations

import asyncio
import contextvars
import logging
import os
import stat
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from enum import Enum
from typing import Final

from used_space.core.errors import RootNotDirectoryError, RootUnreadableError
from used_space.core.paths import canonical_path
from used_space.core.store import SizeStore
from used_space.types.models import Entry, ScanStats
from used_space.types.protocols import EntryStore

logger = logging.getLogger(__name__)

DEFAULT_MAX_WORKERS: Final[int] = 8


class SizeMode(str, Enum):
    """Enumeration for size calculation modes."""

    APPARENT = "apparent"  # Apparent size (file content size)
    DISK_USAGE = "disk_usage"  # Actual disk usage (considering filesystem blocks)


def file_size_from_stat(st: os.stat_result, mode: SizeMode) -> int:
    """Calculate a file's size from its stat result.

    Args:
        st: Result of ``lstat`` on the file
        mode: Size calculation mode

    Returns:
        File size in bytes
    """
    if mode == SizeMode.APPARENT:
        return st.st_size
    # st_blocks is in 512-byte blocks on most systems
    return getattr(st, "st_blocks", 0) * 512


class ScanHandle:
    """One-shot completion signal for a running scan.

    ``wait`` returns the populated store once every worker has finished, or
    raises ``RootUnreadableError`` when the root could not be listed. No
    partial result is exposed before that point.
    """

    def __init__(self, root_path: str, store: EntryStore) -> None:
        self.root_path: str = root_path
        self.store: EntryStore = store
        self._future: Future[EntryStore] = Future()
        self._stats: ScanStats | None = None

    def wait(self, timeout: float | None = None) -> EntryStore:
        """Block until the scan has completed.

        Args:
            timeout: Optional number of seconds to wait

        Returns:
            The populated store

        Raises:
            RootUnreadableError: If the scan root could not be listed
            TimeoutError: If ``timeout`` elapsed first
        """
        return self._future.result(timeout)

    async def wait_async(self) -> EntryStore:
        """Await scan completion from an asyncio event loop."""
        return await asyncio.wrap_future(self._future)

    def done(self) -> bool:
        """Check whether the completion signal has fired."""
        return self._future.done()

    @property
    def stats(self) -> ScanStats | None:
        """Counters of the finished scan, None while it is still running."""
        return self._stats

    def _complete(self, stats: ScanStats, error: BaseException | None) -> None:
        self._stats = stats
        if error is not None:
            self._future.set_exception(error)
        else:
            self._future.set_result(self.store)


class _ScanRun:
    """State of one scan: pending task counter, executor and counters."""

    def __init__(self, handle: ScanHandle, executor: ThreadPoolExecutor, size_mode: SizeMode) -> None:
        self.handle: ScanHandle = handle
        self.executor: ThreadPoolExecutor = executor
        self.size_mode: SizeMode = size_mode
        self.started: float = time.perf_counter()
        self._lock: threading.Lock = threading.Lock()
        self._pending: int = 0
        self._directories: int = 0
        self._files: int = 0
        self._skipped: int = 0
        self._fatal: BaseException | None = None

    def submit(self, path: str) -> None:
        with self._lock:
            self._pending += 1
        try:
            # Each task gets its own context copy so the scan id reaches worker logs
            _ = self.executor.submit(contextvars.copy_context().run, self._run, path)
        except RuntimeError as exc:
            # Executor refused the task: fail the scan and release its pending slot
            with self._lock:
                if self._fatal is None:
                    self._fatal = exc
            self._task_done()
            raise

    def _run(self, path: str) -> None:
        try:
            self._scan_directory(path)
        except Exception as exc:
            logger.exception("Unexpected error while scanning directory", extra={"path": path})
            with self._lock:
                if self._fatal is None:
                    self._fatal = exc
        finally:
            self._task_done()

    def _scan_directory(self, path: str) -> None:
        is_root = path == self.handle.root_path
        store = self.handle.store

        try:
            with os.scandir(path) as it:
                children = list(it)
        except OSError as exc:
            if is_root:
                with self._lock:
                    self._fatal = RootUnreadableError(path, exc)
                return
            logger.debug("Cannot list directory, skipping", extra={"path": path, "error": str(exc)})
            self._count(skipped=1)
            return

        store.set(path, Entry(path=path, size=0, is_directory=True))
        self._count(directories=1)

        files = 0
        skipped = 0
        for child in children:
            try:
                if child.is_dir(follow_symlinks=False):
                    self.submit(child.path)
                    continue
                st = child.stat(follow_symlinks=False)
            except OSError as exc:
                logger.debug("Cannot stat object, skipping", extra={"path": child.path, "error": str(exc)})
                skipped += 1
                continue

            size = file_size_from_stat(st, self.size_mode)
            store.set(child.path, Entry(path=child.path, size=size, is_directory=False))
            files += 1

        self._count(files=files, skipped=skipped)

    def _count(self, *, directories: int = 0, files: int = 0, skipped: int = 0) -> None:
        with self._lock:
            self._directories += directories
            self._files += files
            self._skipped += skipped

    def _task_done(self) -> None:
        with self._lock:
            self._pending -= 1
            if self._pending > 0:
                return
            stats = ScanStats(
                directories=self._directories,
                files=self._files,
                skipped=self._skipped,
                elapsed_seconds=time.perf_counter() - self.started,
            )
            fatal = self._fatal

        self.executor.shutdown(wait=False)
        if fatal is None:
            logger.info(
                "Scan complete",
                extra={
                    "root_path": self.handle.root_path,
                    "directories": stats.directories,
                    "files": stats.files,
                    "skipped": stats.skipped,
                    "elapsed_seconds": round(stats.elapsed_seconds, 3),
                },
            )
        else:
            logger.error("Scan failed", extra={"root_path": self.handle.root_path, "error": str(fatal)})
        self.handle._complete(stats, fatal)  # pyright: ignore[reportPrivateUsage]


class DirectoryScanner:
    """Scanner populating a size store with one Entry per filesystem object.

    Provides concurrent directory traversal with support for:
    - A bounded worker pool shared by every directory listing
    - Apparent-size or disk-usage accounting
    - Graceful skipping of unreadable objects below the root
    - A fatal, caller-visible error when the root itself is unreadable
    """

    def __init__(
        self,
        max_workers: int = DEFAULT_MAX_WORKERS,
        size_mode: SizeMode = SizeMode.APPARENT,
    ) -> None:
        """Initialize the directory scanner.

        Args:
            max_workers: Maximum number of concurrent listing workers
            size_mode: Size calculation mode for files
        """
        if max_workers < 1:
            msg = f"max_workers must be positive, got {max_workers}"
            raise ValueError(msg)

        self.max_workers: int = max_workers
        self.size_mode: SizeMode = size_mode

    def scan(self, root_path: str, store: EntryStore | None = None) -> ScanHandle:
        """Start scanning ``root_path`` and return its completion handle.

        The root is validated synchronously; everything below it is listed by
        the worker pool.

        Args:
            root_path: Directory to scan
            store: Store to populate (a fresh SizeStore when omitted)

        Returns:
            Handle firing once every worker has finished

        Raises:
            RootUnreadableError: If the root does not exist or cannot be stat'ed
            RootNotDirectoryError: If the root is not a directory
        """
        root = canonical_path(root_path)
        try:
            st = os.stat(root)
        except OSError as exc:
            raise RootUnreadableError(root, exc) from exc
        if not stat.S_ISDIR(st.st_mode):
            raise RootNotDirectoryError(root)

        handle = ScanHandle(root, store if store is not None else SizeStore())
        executor = ThreadPoolExecutor(max_workers=self.max_workers, thread_name_prefix="used-space-scan")

        logger.info(
            "Starting scan",
            extra={"root_path": root, "max_workers": self.max_workers, "size_mode": self.size_mode.value},
        )
        _ScanRun(handle, executor, self.size_mode).submit(root)
        return handle

    def scan_sync(self, root_path: str, store: EntryStore | None = None) -> EntryStore:
        """Scan ``root_path`` and block until the store is populated."""
        return self.scan(root_path, store).wait()
