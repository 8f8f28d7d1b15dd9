"""
Time utilities for timestamps and performance measurement.
"""
from __future__ import annotations

import logging
import time
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime, timezone


def now() -> float:
    """Get current timestamp in seconds (float)."""
    return time.time()


def utc_iso(ts: float | None = None) -> str:
    """
    Format a timestamp as an ISO 8601 UTC string with millisecond precision.

    Args:
        ts: Timestamp in seconds (default: now())

    Returns:
        ISO 8601 string (e.g., "2026-10-19T08:30:45.123Z")
    """
    if ts is None:
        ts = now()
    stamp = datetime.fromtimestamp(ts, tz=timezone.utc)
    return stamp.isoformat(timespec="milliseconds").replace("+00:00", "Z")


@contextmanager
def timer(label: str, logger: logging.Logger | None = None) -> Iterator[None]:
    """
    Context manager for timing operations.

    Usage:
        with timer("index build", logger):
            build()
    """
    start = now()
    try:
        yield
    finally:
        elapsed = now() - start
        msg = f"{label} took {elapsed:.3f}s"
        if logger:
            logger.debug(msg)
        else:
            print(msg)
