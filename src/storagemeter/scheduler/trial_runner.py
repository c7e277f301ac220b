"""Concurrent trial: N writer threads, N files, one shared block."""

from __future__ import annotations

import logging
import threading
from pathlib import Path

from storagemeter.config import BenchmarkConfig, thread_file_name
from storagemeter.domain.models import Trial, WriteOutcome
from storagemeter.domain.protocols import BlockWriter
from storagemeter.writer.file_writer import write_test_file

logger = logging.getLogger(__name__)


def _writer_thread(
    slots: list[WriteOutcome | None],
    index: int,
    path: Path,
    block: bytes,
    repeat_count: int,
    write: BlockWriter,
) -> None:
    """Run one writer and store its outcome in ``slots[index]``.

    Nothing escapes the thread: every exception becomes an error slot.
    """
    number = index + 1
    try:
        elapsed = write(path, block, repeat_count)
    except Exception as exc:  # noqa: BLE001
        logger.error("Writer thread %d failed: %s", number, exc)
        slots[index] = WriteOutcome(thread_number=number, path=str(path), error=str(exc))
        return
    slots[index] = WriteOutcome(thread_number=number, path=str(path), elapsed_ns=elapsed)


def run_trial(
    threads_count: int,
    block: bytes,
    test_dir: Path,
    config: BenchmarkConfig,
    write: BlockWriter = write_test_file,
) -> Trial:
    """Write *block* from *threads_count* threads, one file each, and join them.

    Each thread owns exactly one result slot; the slots are only read after
    every started thread has been joined. A thread the OS refuses to start
    fails the trial instead of raising.
    """
    if threads_count < 1:
        raise ValueError(f"threads_count must be positive, got {threads_count}")

    slots: list[WriteOutcome | None] = [None] * threads_count
    threads: list[threading.Thread] = []
    for index in range(threads_count):
        path = test_dir / thread_file_name(index + 1)
        t = threading.Thread(
            target=_writer_thread,
            args=(slots, index, path, block, config.repeat_count, write),
            name=f"writer-{index + 1}",
        )
        threads.append(t)

    logger.debug("Starting %d writer threads", threads_count)
    started: list[threading.Thread] = []
    try:
        for index, t in enumerate(threads):
            try:
                t.start()
            except RuntimeError as exc:
                # the OS refused a thread; later writers are not started
                logger.error("Cannot start writer thread %d: %s", index + 1, exc)
                path = test_dir / thread_file_name(index + 1)
                slots[index] = WriteOutcome(
                    thread_number=index + 1,
                    path=str(path),
                    error=f"Failed to start writer thread {index + 1}: {exc}",
                )
                break
            started.append(t)
    finally:
        for t in started:
            t.join()

    outcomes: list[WriteOutcome] = []
    for index, slot in enumerate(slots):
        if slot is None:
            # never started, or died before recording anything
            path = test_dir / thread_file_name(index + 1)
            slot = WriteOutcome(thread_number=index + 1, path=str(path), error="no result")
        outcomes.append(slot)

    trial = Trial(
        threads_count=threads_count,
        block_size=len(block),
        repeat_count=config.repeat_count,
        outcomes=tuple(outcomes),
    )
    if trial.success:
        logger.info(
            "%d threads: average %d ns, %.0f B/s",
            threads_count,
            trial.average_ns,
            trial.throughput,
        )
    else:
        logger.warning("%d threads: %d writer(s) failed", threads_count, len(trial.errors))
    return trial
