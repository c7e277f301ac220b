"""Block-size calibration against a single-threaded first write."""

from __future__ import annotations

import logging
from pathlib import Path

from storagemeter.config import CALIBRATION_FILE, BenchmarkConfig
from storagemeter.domain.models import NANOSECONDS_PER_SECOND, Calibration
from storagemeter.domain.protocols import BlockWriter
from storagemeter.writer.block import resize_block
from storagemeter.writer.file_writer import write_test_file

logger = logging.getLogger(__name__)


def calibrated_size(current_size: int, elapsed_ns: int, max_duration: float) -> int:
    """Block size expected to make the same write last about *max_duration*.

    Returns *current_size* unchanged when the write was already within
    budget (or took no measurable time). A shrunk block keeps at least
    one byte.
    """
    elapsed_seconds = elapsed_ns / NANOSECONDS_PER_SECOND
    if elapsed_seconds <= max_duration:
        return current_size
    return max(1, int(current_size * (max_duration / elapsed_seconds)))


def calibrate(
    test_dir: Path,
    block: bytes,
    config: BenchmarkConfig,
    write: BlockWriter = write_test_file,
) -> tuple[Calibration, bytes]:
    """Run the first single-threaded write and shrink *block* if it was slow.

    The trial is not re-run to confirm the new size. Write errors propagate.
    Returns the calibration record and the (possibly truncated) block.
    """
    path = test_dir / CALIBRATION_FILE
    elapsed_ns = write(path, block, config.repeat_count)
    calibration = Calibration(
        elapsed_ns=elapsed_ns,
        original_size=len(block),
        calibrated_size=calibrated_size(len(block), elapsed_ns, config.max_test_duration),
        repeat_count=config.repeat_count,
        path=str(path),
    )
    if calibration.shrunk:
        logger.info(
            "First write took %.3fs (budget %.1fs); shrinking block %d -> %d bytes",
            calibration.elapsed_seconds,
            config.max_test_duration,
            calibration.original_size,
            calibration.calibrated_size,
        )
    return calibration, resize_block(block, calibration.calibrated_size)
