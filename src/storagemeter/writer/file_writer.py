"""Sequential file writer: the unit of work run by every benchmark thread."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path

from storagemeter.config import REPEAT_COUNT
from storagemeter.writer.stopwatch import StopWatch

logger = logging.getLogger(__name__)


class WriteError(OSError):
    """Raised when a benchmark file cannot be written."""

    def __init__(self, message: str, path: Path) -> None:
        super().__init__(message)
        self.path = path


class FileOpenError(WriteError):
    """Raised when the target file cannot be created or opened."""

    def __init__(self, path: Path, cause: OSError) -> None:
        super().__init__(f"Failed to create file {path}, errno={cause.errno}", path)
        self.errno = cause.errno


class ShortWriteError(WriteError):
    """Raised when a write stops making progress before the block is written."""

    def __init__(self, path: Path, portion: int, written: int, expected: int) -> None:
        super().__init__(
            f"Failed to write portion {portion} to file {path} "
            f"({written} of {expected} bytes)",
            path,
        )
        self.portion = portion
        self.written = written
        self.expected = expected


def write_test_file(
    path: Path,
    block: bytes,
    repeat_count: int = REPEAT_COUNT,
    clock: Callable[[], int] = time.perf_counter_ns,
) -> int:
    """Write *block* into *path* *repeat_count* times.

    Returns the nanoseconds elapsed between the first write and the file
    being closed. The file is created or truncated; it is closed on every
    exit path.
    """
    try:
        fh = open(path, "wb", buffering=0)  # noqa: SIM115
    except OSError as exc:
        raise FileOpenError(path, exc) from exc

    view = memoryview(block)
    expected = len(view)
    with fh:
        watch = StopWatch(clock)
        for portion in range(repeat_count):
            # a raw write may accept only part of the buffer
            written = 0
            while written < expected:
                try:
                    n = fh.write(view[written:])
                except OSError as exc:
                    raise ShortWriteError(path, portion, written, expected) from exc
                if not n:
                    raise ShortWriteError(path, portion, written, expected)
                written += n
    elapsed = watch.stop()
    logger.debug("Wrote %d x %d bytes to %s in %d ns", repeat_count, expected, path, elapsed)
    return elapsed
