"""Unit tests for formatting utilities.

Tests cover:
- Unit boundaries (Bytes through PB)
- Precision handling
- Duration formatting
- Property-based testing with Hypothesis
"""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from used_space.utils.formatting import format_duration, format_size


class TestFormatSize:
    """Test suite for format_size function."""

    @pytest.mark.parametrize(
        ("bytes_value", "expected"),
        [
            # Bytes range (< 1024)
            (0, "0 Bytes"),
            (1, "1 Bytes"),
            (512, "512 Bytes"),
            (1023, "1023 Bytes"),
            # KB range
            (1024, "1.0 KB"),
            (1536, "1.5 KB"),
            (1024 * 500, "500.0 KB"),
            # MB range
            (1024**2, "1.0 MB"),
            (1024**2 * 100, "100.0 MB"),
            # GB range
            (1024**3, "1.0 GB"),
            (1024**3 * 10, "10.0 GB"),
            # TB and PB
            (1024**4 * 2, "2.0 TB"),
            (1024**5, "1.0 PB"),
        ],
    )
    def test_format_size_boundaries(self, bytes_value: int, expected: str) -> None:
        """Test format_size at unit boundaries."""
        assert format_size(bytes_value) == expected

    def test_format_size_negative_raises_error(self) -> None:
        """Test that negative bytes raise ValueError."""
        with pytest.raises(ValueError, match="bytes must be non-negative"):
            _ = format_size(-1)

    def test_format_size_precision_parameter(self) -> None:
        """Test precision applies from kilobytes upward."""
        value = int(2.5 * 1024**3)

        assert format_size(value) == "2.5 GB"
        assert format_size(value, precision=0) == "2 GB"
        assert format_size(value, precision=2) == "2.50 GB"
        assert format_size(100, precision=3) == "100 Bytes"

    def test_format_size_beyond_largest_unit(self) -> None:
        """Test values past a petabyte stay in PB."""
        assert format_size(1024**5 * 2048) == "2048.0 PB"

    @given(st.integers(min_value=0, max_value=1024**6))
    def test_format_size_always_has_unit(self, bytes_value: int) -> None:
        """Property test: format_size always returns a number and a known unit."""
        number, unit = format_size(bytes_value).split(" ")

        assert unit in {"Bytes", "KB", "MB", "GB", "TB", "PB"}
        assert float(number) >= 0


class TestFormatDuration:
    """Test suite for format_duration function."""

    @pytest.mark.parametrize(
        ("seconds", "expected"),
        [
            (0, "0.00s"),
            (0.25, "0.25s"),
            (59.5, "59.50s"),
            (60, "1m"),
            (75, "1m 15s"),
            (3600, "60m"),
        ],
    )
    def test_format_duration_boundaries(self, seconds: float, expected: str) -> None:
        """Test format_duration below and above one minute."""
        assert format_duration(seconds) == expected

    def test_format_duration_negative_raises_error(self) -> None:
        """Test that negative durations raise ValueError."""
        with pytest.raises(ValueError, match="seconds must be non-negative"):
            _ = format_duration(-0.1)
