"""Tests for the concurrent trial runner."""

from __future__ import annotations

import threading
import time
from pathlib import Path

import pytest

from storagemeter.config import BenchmarkConfig
from storagemeter.scheduler.trial_runner import run_trial

NS = 1_000_000_000


class TestRunTrial:
    def test_real_files_one_per_thread(self, tmp_path: Path) -> None:
        block = bytes(range(256)) * 4

        trial = run_trial(3, block, tmp_path, BenchmarkConfig())

        assert trial.success
        for n in (1, 2, 3):
            path = tmp_path / f"thread{n}"
            assert path.stat().st_size == len(block) * 10
        assert not (tmp_path / "thread4").exists()
        assert [o.thread_number for o in trial.outcomes] == [1, 2, 3]

    def test_each_thread_gets_its_own_file(self, tmp_path: Path, fake_writer) -> None:
        run_trial(4, bytes(8), tmp_path, BenchmarkConfig(), write=fake_writer)
        assert sorted(fake_writer.names()) == ["thread1", "thread2", "thread3", "thread4"]

    def test_all_threads_share_the_block(self, tmp_path: Path) -> None:
        seen: list[int] = []
        lock = threading.Lock()

        def writer(path: Path, block: bytes, repeat_count: int) -> int:
            with lock:
                seen.append(id(block))
            return NS

        block = bytes(32)
        run_trial(5, block, tmp_path, BenchmarkConfig(), write=writer)
        assert seen == [id(block)] * 5

    def test_runs_writers_on_separate_threads(self, tmp_path: Path) -> None:
        barrier = threading.Barrier(3, timeout=10)
        names: set[str] = set()

        def writer(path: Path, block: bytes, repeat_count: int) -> int:
            # deadlocks (then times out) unless all three run concurrently
            barrier.wait()
            names.add(threading.current_thread().name)
            return NS

        trial = run_trial(3, bytes(4), tmp_path, BenchmarkConfig(), write=writer)
        assert trial.success
        assert names == {"writer-1", "writer-2", "writer-3"}

    def test_average_and_throughput(self, tmp_path: Path, make_writer) -> None:
        writer = make_writer(durations={"thread1": 1 * NS, "thread2": 3 * NS})

        trial = run_trial(2, bytes(1000), tmp_path, BenchmarkConfig(), write=writer)

        assert trial.durations_ns == (1 * NS, 3 * NS)
        assert trial.average_ns == 2 * NS
        # 1000 bytes * 10 writes * 2 threads over 2 seconds
        assert trial.throughput == pytest.approx(10000.0)

    def test_failure_is_caught_at_thread_boundary(self, tmp_path: Path, make_writer) -> None:
        writer = make_writer(fail={"thread2"})

        trial = run_trial(3, bytes(8), tmp_path, BenchmarkConfig(), write=writer)

        assert not trial.success
        assert len(writer.calls) == 3
        failed = [o for o in trial.outcomes if not o.ok]
        assert [o.thread_number for o in failed] == [2]
        assert "thread2" in (failed[0].error or "")
        assert trial.throughput == 0.0

    def test_unexpected_exception_is_recorded(self, tmp_path: Path) -> None:
        def writer(path: Path, block: bytes, repeat_count: int) -> int:
            if path.name == "thread1":
                raise RuntimeError("boom")
            return NS

        trial = run_trial(2, bytes(8), tmp_path, BenchmarkConfig(), write=writer)
        assert trial.errors == ("boom",)
        assert trial.outcomes[1].ok

    def test_open_failure_on_real_disk(self, tmp_path: Path) -> None:
        missing = tmp_path / "does-not-exist"
        trial = run_trial(2, bytes(8), missing, BenchmarkConfig())
        assert not trial.success
        assert len(trial.errors) == 2

    def test_rejects_non_positive_thread_count(self, tmp_path: Path) -> None:
        with pytest.raises(ValueError):
            run_trial(0, bytes(8), tmp_path, BenchmarkConfig())

    def test_refused_thread_start_fails_trial_and_joins_the_rest(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        real_start = threading.Thread.start

        def _start(self: threading.Thread) -> None:
            if self.name == "writer-3":
                raise RuntimeError("can't start new thread")
            real_start(self)

        monkeypatch.setattr(threading.Thread, "start", _start)
        finished: list[str] = []

        def writer(path: Path, block: bytes, repeat_count: int) -> int:
            time.sleep(0.05)
            finished.append(path.name)
            return NS

        trial = run_trial(4, bytes(8), tmp_path, BenchmarkConfig(), write=writer)

        assert not trial.success
        assert sorted(finished) == ["thread1", "thread2"]
        assert not [t.name for t in threading.enumerate() if t.name.startswith("writer-")]
        assert trial.outcomes[0].ok and trial.outcomes[1].ok
        assert "Failed to start writer thread 3" in (trial.outcomes[2].error or "")
        assert trial.outcomes[3].error == "no result"
