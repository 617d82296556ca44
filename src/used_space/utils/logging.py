"""Logging infrastructure with optional syslog integration and scan ID tracking.

Every record is stamped with the identifier of the scan that produced it,
taken from a ContextVar. The scanner copies the current context into each
worker task, so records emitted from the thread pool carry the same ID as the
caller that started the scan.
"""

import contextvars
import logging
import logging.handlers
import sys
from collections.abc import Mapping
from typing import Final, override

scan_id_var: contextvars.ContextVar[str | None] = contextvars.ContextVar(
    "scan_id",
    default=None,
)

DEFAULT_LOG_FORMAT: Final[str] = "%(asctime)s - %(name)s - %(levelname)s - [%(scan_id)s] - %(message)s"

SYSLOG_LOG_FORMAT: Final[str] = "used-space[%(process)d]: %(levelname)s - [%(scan_id)s] - %(name)s - %(message)s"

DEFAULT_SYSLOG_ADDRESS: Final[str] = "/dev/log"


class ScanIDFilter(logging.Filter):
    """Logging filter that adds the current scan ID to log records."""

    @override
    def filter(self, record: logging.LogRecord) -> bool:
        """Add the scan ID to the record, "N/A" outside any scan.

        Args:
            record: Log record to enhance

        Returns:
            True to allow the record to be logged
        """
        scan_id = scan_id_var.get()
        record.scan_id = scan_id if scan_id is not None else "N/A"
        return True


def configure_logging(
    *,
    log_level: str = "WARNING",
    enable_syslog: bool = False,
    syslog_address: str = DEFAULT_SYSLOG_ADDRESS,
    enable_console: bool = True,
) -> None:
    """Configure application logging.

    Console output goes to stderr so it never mixes with the report printed
    on stdout.

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR)
        enable_syslog: Enable the syslog handler
        syslog_address: Syslog socket address
        enable_console: Enable console output handler

    Example:
        >>> configure_logging(log_level="INFO")
        >>> set_scan_id("3f2a9c")
        >>> logging.getLogger(__name__).info("Scan complete", extra={"files": 12})
    """
    root_logger = logging.getLogger()

    level = getattr(logging, log_level.upper(), logging.WARNING)
    root_logger.setLevel(level)

    # Remove existing handlers to avoid duplicates
    root_logger.handlers.clear()

    scan_filter = ScanIDFilter()

    if enable_syslog:
        try:
            syslog_handler = logging.handlers.SysLogHandler(
                address=syslog_address,
                facility=logging.handlers.SysLogHandler.LOG_USER,
            )
            syslog_handler.setFormatter(logging.Formatter(SYSLOG_LOG_FORMAT))
            syslog_handler.addFilter(scan_filter)
            root_logger.addHandler(syslog_handler)

        except OSError as exc:
            # Syslog not available (e.g., development environment)
            print(
                f"Warning: Could not connect to syslog at {syslog_address}: {exc}",
                file=sys.stderr,
            )

    if enable_console:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(logging.Formatter(DEFAULT_LOG_FORMAT))
        console_handler.addFilter(scan_filter)
        root_logger.addHandler(console_handler)


def get_logger(name: str) -> logging.Logger:
    """Get a logger instance for the specified module."""
    return logging.getLogger(name)


def set_scan_id(scan_id: str) -> None:
    """Set the scan ID for the current context.

    Args:
        scan_id: Identifier of the running scan
    """
    _ = scan_id_var.set(scan_id)


def get_scan_id() -> str | None:
    """Get the current scan ID, or None outside any scan."""
    return scan_id_var.get()


def clear_scan_id() -> None:
    """Clear the scan ID from the current context."""
    _ = scan_id_var.set(None)


def log_with_context(
    logger: logging.Logger,
    level: int,
    message: str,
    *,
    extra: Mapping[str, object] | None = None,
) -> None:
    """Log a message with additional structured fields.

    Args:
        logger: Logger instance to use
        level: Logging level (e.g., logging.INFO)
        message: Log message
        extra: Additional context fields to include in log

    Example:
        >>> log_with_context(
        ...     get_logger(__name__),
        ...     logging.INFO,
        ...     "Deleted entry",
        ...     extra={"path": "/data/old.iso", "released_bytes": 4_700_000_000},
        ... )
    """
    context = dict(extra) if extra else {}

    scan_id = get_scan_id()
    if scan_id:
        context["scan_id"] = scan_id

    logger.log(level, message, extra=context)
