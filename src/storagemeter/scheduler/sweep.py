"""Benchmark driver: calibrate, then sweep thread counts until throughput stalls.

State machine::

    CALIBRATING -> SWEEPING -> STOPPED

The sweep compares every trial only with the one before it. Two
consecutive regressions (``max_slow_tests``) stop it; a writer failure
stops it immediately.
"""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path

from storagemeter.config import BenchmarkConfig
from storagemeter.domain.models import (
    Calibration,
    RunState,
    StopReason,
    SweepPhase,
    SweepResult,
    Trial,
)
from storagemeter.domain.protocols import BlockWriter, SweepObserver
from storagemeter.scheduler.calibrator import calibrate
from storagemeter.scheduler.trial_runner import run_trial
from storagemeter.writer.block import generate_block
from storagemeter.writer.file_writer import write_test_file

logger = logging.getLogger(__name__)


def begin_sweep(state: RunState, calibration: Calibration) -> RunState:
    """Leave CALIBRATING: fix the block size and seed ``last_speed``."""
    return replace(
        state,
        block_size=calibration.calibrated_size,
        last_speed=calibration.throughput,
        phase=SweepPhase.SWEEPING,
    )


def advance(state: RunState, trial: Trial, max_slow_tests: int, max_threads: int = 0) -> RunState:
    """Apply one trial to *state* and return the next state.

    A failed trial stops the sweep at its own thread count. Otherwise the
    regression counter is bumped or reset, ``last_speed`` is replaced
    unconditionally, and the thread count moves on by one.
    """
    if not trial.success:
        return replace(state, phase=SweepPhase.STOPPED, stop_reason=StopReason.WRITER_FAILURE)

    speed = trial.throughput
    slow_tests = state.slow_tests + 1 if speed < state.last_speed else 0
    nxt = replace(
        state,
        last_speed=speed,
        slow_tests=slow_tests,
        threads_count=state.threads_count + 1,
    )
    if slow_tests >= max_slow_tests:
        return replace(nxt, phase=SweepPhase.STOPPED, stop_reason=StopReason.REGRESSION)
    if max_threads and nxt.threads_count > max_threads:
        return replace(nxt, phase=SweepPhase.STOPPED, stop_reason=StopReason.THREAD_LIMIT)
    return nxt


def max_threads_tested(state: RunState) -> int:
    """Thread count reported for a stopped sweep.

    After a writer failure this is the failing count itself; otherwise the
    last count that ran.
    """
    if state.stop_reason is StopReason.WRITER_FAILURE:
        return state.threads_count
    return state.threads_count - 1


class BenchmarkDriver:
    """Runs one write-throughput benchmark session in *test_dir*."""

    def __init__(
        self,
        test_dir: Path,
        config: BenchmarkConfig,
        observer: SweepObserver | None = None,
        write: BlockWriter = write_test_file,
    ) -> None:
        self._test_dir = test_dir
        self._config = config
        self._observer = observer
        self._write = write

    def run(self, block: bytes | None = None) -> SweepResult:
        """Generate (unless given) and calibrate the block, then sweep.

        Block generation and calibration errors propagate to the caller.
        """
        if block is None:
            block = generate_block(self._config.block_size)
        if self._observer is not None:
            self._observer.on_block_generated(len(block))

        state = RunState(block_size=len(block), last_speed=0.0, phase=SweepPhase.CALIBRATING)
        calibration, block = calibrate(self._test_dir, block, self._config, write=self._write)
        if self._observer is not None:
            self._observer.on_calibrated(calibration)

        state = begin_sweep(state, calibration)
        trials: list[Trial] = []
        while not state.stopped:
            logger.debug(
                "Trial with %d threads (slow tests: %d)", state.threads_count, state.slow_tests
            )
            trial = run_trial(
                state.threads_count, block, self._test_dir, self._config, write=self._write
            )
            trials.append(trial)
            if self._observer is not None:
                self._observer.on_trial(trial)
            state = advance(state, trial, self._config.max_slow_tests, self._config.max_threads)

        result = SweepResult(
            calibration=calibration,
            trials=tuple(trials),
            stop_reason=state.stop_reason or StopReason.REGRESSION,
            max_threads_tested=max_threads_tested(state),
        )
        logger.info(
            "Sweep stopped (%s) after %d trials; max threads tested: %d",
            result.stop_reason.value,
            len(trials),
            result.max_threads_tested,
        )
        if self._observer is not None:
            self._observer.on_finished(result)
        return result


def run_sweep(
    test_dir: Path,
    config: BenchmarkConfig,
    observer: SweepObserver | None = None,
    write: BlockWriter = write_test_file,
) -> SweepResult:
    """Convenience wrapper around BenchmarkDriver.run()."""
    return BenchmarkDriver(test_dir, config, observer=observer, write=write).run()
