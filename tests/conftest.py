"""Pytest configuration and shared fixtures."""

from __future__ import annotations

from pathlib import Path

import pytest


@pytest.fixture
def sample_tree(tmp_path: Path) -> Path:
    """Create the reference tree: r/a (100 bytes), r/b/c (50 bytes)."""
    root = tmp_path / "r"
    (root / "b").mkdir(parents=True)
    _ = (root / "a").write_bytes(b"A" * 100)
    _ = (root / "b" / "c").write_bytes(b"C" * 50)
    return root


@pytest.fixture
def nested_tree(tmp_path: Path) -> Path:
    """Create a deeper tree with empty directories and several file sizes."""
    root = tmp_path / "data"
    (root / "logs" / "2024").mkdir(parents=True)
    (root / "logs" / "2025").mkdir(parents=True)
    (root / "cache" / "empty").mkdir(parents=True)
    (root / "src" / "pkg").mkdir(parents=True)

    _ = (root / "README").write_bytes(b"r" * 10)
    _ = (root / "logs" / "2024" / "jan.log").write_bytes(b"l" * 300)
    _ = (root / "logs" / "2024" / "feb.log").write_bytes(b"l" * 200)
    _ = (root / "logs" / "2025" / "jan.log").write_bytes(b"l" * 1000)
    _ = (root / "src" / "pkg" / "mod.py").write_bytes(b"p" * 42)
    _ = (root / "src" / "setup.cfg").write_bytes(b"s" * 8)
    return root

