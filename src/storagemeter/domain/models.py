"""Core data types for StorageMeter.

All types are frozen dataclasses. This module has zero imports from
outside the Python standard library.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum

NANOSECONDS_PER_SECOND = 1_000_000_000


class SweepPhase(Enum):
    """Stage of the benchmark state machine."""

    CALIBRATING = "calibrating"
    SWEEPING = "sweeping"
    STOPPED = "stopped"


class StopReason(Enum):
    """Why a sweep ended."""

    REGRESSION = "regression"
    WRITER_FAILURE = "writer_failure"
    THREAD_LIMIT = "thread_limit"


def throughput(block_size: int, repeat_count: int, threads_count: int, ns: int) -> float:
    """Aggregate bytes per second for *threads_count* writers averaging *ns*."""
    if ns <= 0:
        return 0.0
    total_bytes = block_size * repeat_count * threads_count
    return total_bytes / (ns / NANOSECONDS_PER_SECOND)


# ---------------------------------------------------------------------------
# Per-thread and per-trial results
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class WriteOutcome:
    """Result slot of a single writer thread.

    Exactly one of ``elapsed_ns`` (success) or ``error`` is meaningful.
    """

    thread_number: int
    path: str
    elapsed_ns: int = 0
    error: str | None = None

    @property
    def ok(self) -> bool:
        return self.error is None


@dataclass(frozen=True)
class Trial:
    """One timed write benchmark at a given thread count."""

    threads_count: int
    block_size: int
    repeat_count: int
    outcomes: tuple[WriteOutcome, ...]

    @property
    def success(self) -> bool:
        return all(o.ok for o in self.outcomes)

    @property
    def durations_ns(self) -> tuple[int, ...]:
        return tuple(o.elapsed_ns for o in self.outcomes)

    @property
    def average_ns(self) -> int:
        if not self.outcomes:
            return 0
        return sum(self.durations_ns) // self.threads_count

    @property
    def throughput(self) -> float:
        """Aggregate bytes per second, 0.0 for a failed trial."""
        if not self.success:
            return 0.0
        return throughput(self.block_size, self.repeat_count, self.threads_count, self.average_ns)

    @property
    def errors(self) -> tuple[str, ...]:
        return tuple(o.error for o in self.outcomes if o.error is not None)


@dataclass(frozen=True)
class Calibration:
    """Single-threaded first write and the block size derived from it."""

    elapsed_ns: int
    original_size: int
    calibrated_size: int
    repeat_count: int
    path: str

    @property
    def shrunk(self) -> bool:
        return self.calibrated_size < self.original_size

    @property
    def elapsed_seconds(self) -> float:
        return self.elapsed_ns / NANOSECONDS_PER_SECOND

    @property
    def throughput(self) -> float:
        """First data point of the sweep: calibrated block size over the calibration time.

        When the block was shrunk this understates the disk, because the time
        was spent writing the original block. The first trial is compared
        against it; ``measured_throughput`` is the true figure.
        """
        return throughput(self.calibrated_size, self.repeat_count, 1, self.elapsed_ns)

    @property
    def measured_throughput(self) -> float:
        """Bytes per second the calibration write actually achieved."""
        return throughput(self.original_size, self.repeat_count, 1, self.elapsed_ns)


# ---------------------------------------------------------------------------
# Run state
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RunState:
    """Explicit state threaded through the sweep loop.

    Each trial takes a RunState and produces the next one; nothing here
    is shared between runs.
    """

    block_size: int
    last_speed: float
    threads_count: int = 2
    slow_tests: int = 0
    phase: SweepPhase = SweepPhase.SWEEPING
    stop_reason: StopReason | None = None

    @property
    def stopped(self) -> bool:
        return self.phase is SweepPhase.STOPPED


@dataclass(frozen=True)
class SweepResult:
    """Final outcome of a benchmark session."""

    calibration: Calibration
    trials: tuple[Trial, ...] = field(default_factory=tuple)
    stop_reason: StopReason = StopReason.REGRESSION
    max_threads_tested: int = 1

    @property
    def block_size(self) -> int:
        return self.calibration.calibrated_size

    @property
    def best_trial(self) -> Trial | None:
        """Successful trial with the highest throughput, if any."""
        ok = [t for t in self.trials if t.success]
        if not ok:
            return None
        return max(ok, key=lambda t: t.throughput)
