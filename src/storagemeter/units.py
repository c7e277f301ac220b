"""Human-readable durations, sizes, and speeds."""

from __future__ import annotations

MEBIBYTE = 1024 * 1024


def ns_to_ms_string(ns: int) -> str:
    """Format nanoseconds as whole milliseconds, e.g. ``"1534 ms"``."""
    return f"{ns // 1_000_000} ms"


def bytes_per_second_to_mb(speed: float) -> float:
    """Convert bytes/second to MiB/second."""
    return speed / MEBIBYTE


def format_speed(mb_per_second: float) -> str:
    """Format a MiB/s figure, switching to GB/s above 1024 MB/s."""
    if mb_per_second > 1024.0:
        return f"{mb_per_second / 1024.0:.2f} GB/s"
    return f"{mb_per_second:.2f} MB/s"


def format_size(size: int) -> str:
    """Format a byte count in MiB, e.g. ``"100.00 MB"``."""
    return f"{size / MEBIBYTE:.2f} MB"
