"""Shared pytest fixtures for StorageMeter tests.

Provides factory fixtures for the domain models and a fake block writer
that can be injected wherever the real file writer is used.
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest

from storagemeter import console as console_mod
from storagemeter.console._plain import PlainBackend
from storagemeter.domain.models import Calibration, Trial, WriteOutcome
from storagemeter.writer.file_writer import FileOpenError

NS = 1_000_000_000


# ---------------------------------------------------------------------------
# Fake writer
# ---------------------------------------------------------------------------


class FakeWriter:
    """BlockWriter stand-in that never touches the disk.

    ``durations`` maps a file name to the nanoseconds it should report;
    ``duration_fn`` (if set) computes it from the file name and the current
    call count instead. ``fail`` lists file names whose write raises
    FileOpenError.
    """

    def __init__(
        self,
        durations: dict[str, int] | None = None,
        default_ns: int = NS,
        fail: set[str] | None = None,
        duration_fn: Callable[[str, int], int] | None = None,
    ) -> None:
        self.durations = durations or {}
        self.default_ns = default_ns
        self.fail = fail or set()
        self.duration_fn = duration_fn
        self.calls: list[tuple[str, int, int]] = []
        self._lock = threading.Lock()

    def __call__(self, path: Path, block: bytes, repeat_count: int) -> int:
        with self._lock:
            self.calls.append((path.name, len(block), repeat_count))
            count = len(self.calls)
        if path.name in self.fail:
            raise FileOpenError(path, PermissionError(13, "Permission denied"))
        if self.duration_fn is not None:
            return self.duration_fn(path.name, count)
        return self.durations.get(path.name, self.default_ns)

    def names(self) -> list[str]:
        return [c[0] for c in self.calls]


@pytest.fixture()
def fake_writer() -> FakeWriter:
    return FakeWriter()


@pytest.fixture()
def make_writer() -> Callable[..., FakeWriter]:
    """Factory for FakeWriter; accepts the FakeWriter constructor arguments."""
    return FakeWriter


# ---------------------------------------------------------------------------
# Model factories
# ---------------------------------------------------------------------------


_Factory = Any


@pytest.fixture()
def make_trial() -> _Factory:
    """Factory for Trial with sensible defaults."""

    def _factory(
        *,
        threads_count: int = 2,
        block_size: int = 1000,
        repeat_count: int = 10,
        durations_ns: tuple[int, ...] | None = None,
        errors: dict[int, str] | None = None,
    ) -> Trial:
        durations = durations_ns or tuple(NS for _ in range(threads_count))
        errors = errors or {}
        outcomes = tuple(
            WriteOutcome(
                thread_number=i + 1,
                path=f"thread{i + 1}",
                elapsed_ns=0 if (i + 1) in errors else durations[i],
                error=errors.get(i + 1),
            )
            for i in range(threads_count)
        )
        return Trial(
            threads_count=threads_count,
            block_size=block_size,
            repeat_count=repeat_count,
            outcomes=outcomes,
        )

    return _factory


@pytest.fixture()
def make_calibration() -> _Factory:
    """Factory for Calibration with sensible defaults."""

    def _factory(
        *,
        elapsed_ns: int = NS,
        original_size: int = 1000,
        calibrated_size: int | None = None,
        repeat_count: int = 10,
    ) -> Calibration:
        return Calibration(
            elapsed_ns=elapsed_ns,
            original_size=original_size,
            calibrated_size=original_size if calibrated_size is None else calibrated_size,
            repeat_count=repeat_count,
            path="single_thread",
        )

    return _factory


# ---------------------------------------------------------------------------
# Console isolation
# ---------------------------------------------------------------------------


@pytest.fixture(autouse=True)
def _plain_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Every test starts with the plain backend."""
    monkeypatch.setattr(console_mod, "_backend", PlainBackend())
