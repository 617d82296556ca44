"""Pure formatting utilities for the command-line report.

All functions are stateless and have no side effects.
"""

_UNITS = ("KB", "MB", "GB", "TB", "PB")
_STEP = 1024.0


def format_size(bytes: int, *, precision: int = 1) -> str:
    """Convert bytes to a human-readable size.

    Uses binary units (1024-based) for consistency with system tools.

    Args:
        bytes: Number of bytes to format (must be non-negative)
        precision: Decimal places for values of one kilobyte and above

    Returns:
        Human-readable size string

    Examples:
        >>> format_size(512)
        '512 Bytes'
        >>> format_size(1536)
        '1.5 KB'
        >>> format_size(10737418240)
        '10.0 GB'
    """
    if bytes < 0:
        msg = "bytes must be non-negative"
        raise ValueError(msg)

    if bytes < _STEP:
        return f"{bytes} Bytes"

    value = float(bytes)
    unit = _UNITS[0]
    for unit in _UNITS:
        value /= _STEP
        if value < _STEP:
            break

    return f"{value:.{precision}f} {unit}"


def format_duration(seconds: float) -> str:
    """Convert an elapsed time to a short human-readable string.

    Examples:
        >>> format_duration(0.25)
        '0.25s'
        >>> format_duration(75)
        '1m 15s'
    """
    if seconds < 0:
        msg = "seconds must be non-negative"
        raise ValueError(msg)

    if seconds < 60:
        return f"{seconds:.2f}s"

    minutes, remaining = divmod(int(seconds), 60)
    if remaining:
        return f"{minutes}m {remaining}s"
    return f"{minutes}m"
