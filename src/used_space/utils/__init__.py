"""Shared utility modules: report formatting and logging setup."""

from used_space.utils.formatting import format_duration, format_size
from used_space.utils.logging import (
    clear_scan_id,
    configure_logging,
    get_logger,
    get_scan_id,
    log_with_context,
    set_scan_id,
)

__all__ = [
    # Formatting utilities
    "format_duration",
    "format_size",
    # Logging
    "clear_scan_id",
    "configure_logging",
    "get_logger",
    "get_scan_id",
    "log_with_context",
    "set_scan_id",
]
