"""Unit tests for path-chain helpers and root resolution."""

from __future__ import annotations

from pathlib import Path

import pytest

from used_space.core.errors import RootNotDirectoryError, RootUnreadableError
from used_space.core.paths import ancestors, canonical_path, is_within, parent_of, resolve_root_path


@pytest.mark.unit
class TestPathHelpers:
    """Test the pure path helpers."""

    def test_canonical_path_strips_trailing_separator(self) -> None:
        """Trailing separators and dot segments are normalised away."""
        assert canonical_path("/r/b/") == "/r/b"
        assert canonical_path("/r/./b/../a") == "/r/a"
        assert canonical_path("/") == "/"

    def test_parent_of(self) -> None:
        """The filesystem root is its own parent."""
        assert parent_of("/r/b/c") == "/r/b"
        assert parent_of("/r") == "/"
        assert parent_of("/") == "/"

    @pytest.mark.parametrize(
        ("path", "root", "expected"),
        [
            ("/r", "/r", True),
            ("/r/b/c", "/r", True),
            ("/rb", "/r", False),
            ("/", "/r", False),
            ("/anything", "/", True),
        ],
    )
    def test_is_within(self, path: str, root: str, expected: bool) -> None:
        """Containment respects component boundaries."""
        assert is_within(path, root) is expected

    def test_ancestors_chain(self) -> None:
        """The chain runs from the parent up to and including the root."""
        assert list(ancestors("/r/b/c", "/r")) == ["/r/b", "/r"]
        assert list(ancestors("/r/a", "/r")) == ["/r"]
        assert list(ancestors("/r", "/r")) == []

    def test_ancestors_of_filesystem_root(self) -> None:
        """The chain terminates at / when / is the scan root."""
        assert list(ancestors("/etc/hosts", "/")) == ["/etc", "/"]

    def test_ancestors_outside_root(self) -> None:
        """Paths outside the root are rejected."""
        with pytest.raises(ValueError, match="not under scan root"):
            _ = list(ancestors("/other/f", "/r"))


@pytest.mark.unit
class TestResolveRootPath:
    """Test validation of the user-supplied root."""

    def test_existing_directory(self, tmp_path: Path) -> None:
        """A directory resolves to its canonical form."""
        assert resolve_root_path(f"{tmp_path}/") == str(tmp_path)

    def test_defaults_to_working_directory(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """No argument means the current working directory."""
        monkeypatch.chdir(tmp_path)

        assert resolve_root_path() == str(tmp_path)
        assert resolve_root_path("") == str(tmp_path)

    def test_relative_path(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        """Relative paths are made absolute."""
        (tmp_path / "sub").mkdir()
        monkeypatch.chdir(tmp_path)

        assert resolve_root_path("sub") == str(tmp_path / "sub")

    def test_missing_path(self, tmp_path: Path) -> None:
        """A missing root raises RootUnreadableError with the OS cause."""
        with pytest.raises(RootUnreadableError) as exc_info:
            _ = resolve_root_path(str(tmp_path / "missing"))

        assert isinstance(exc_info.value.cause, FileNotFoundError)
        assert exc_info.value.root_path == str(tmp_path / "missing")

    def test_file_is_not_a_root(self, tmp_path: Path) -> None:
        """A regular file raises RootNotDirectoryError."""
        f = tmp_path / "f"
        _ = f.write_text("x")

        with pytest.raises(RootNotDirectoryError, match="not a directory"):
            _ = resolve_root_path(str(f))
