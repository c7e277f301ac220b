"""Protocol interfaces for StorageMeter components."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol

from storagemeter.domain.models import Calibration, SweepResult, Trial


class BlockWriter(Protocol):
    """Writes *block* into *path* *repeat_count* times and returns elapsed ns."""

    def __call__(self, path: Path, block: bytes, repeat_count: int) -> int: ...


class SweepObserver(Protocol):
    """Callbacks fired by the sweep as it progresses."""

    def on_block_generated(self, size: int) -> None:
        """The payload block has been allocated and filled."""
        ...

    def on_calibrated(self, calibration: Calibration) -> None:
        """The single-threaded first write finished."""
        ...

    def on_trial(self, trial: Trial) -> None:
        """A concurrent trial finished (successfully or not)."""
        ...

    def on_finished(self, result: SweepResult) -> None:
        """The sweep reached a terminal state."""
        ...
