"""Used Space - find what is consuming disk space beneath a directory.

This package scans a directory subtree concurrently, rolls file sizes up into
cumulative per-directory totals, ranks the children of any directory by size,
and deletes objects while keeping every ancestor total consistent.
"""

from used_space.__main__ import main

__all__ = ["main"]
