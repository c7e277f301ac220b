"""Console progress reporting for a running sweep."""

from __future__ import annotations

from storagemeter.console import console
from storagemeter.domain.models import Calibration, StopReason, SweepResult, Trial
from storagemeter.units import bytes_per_second_to_mb, format_size, format_speed, ns_to_ms_string

_STOP_MESSAGES = {
    StopReason.REGRESSION: "throughput stopped improving",
    StopReason.WRITER_FAILURE: "a writer failed",
    StopReason.THREAD_LIMIT: "thread limit reached",
}


def speed_string(bytes_per_second: float) -> str:
    return format_speed(bytes_per_second_to_mb(bytes_per_second))


class ConsoleProgress:
    """SweepObserver that prints every stage through ``console``."""

    def on_block_generated(self, size: int) -> None:
        console.info(f"Generated {format_size(size)} of random data")

    def on_calibrated(self, calibration: Calibration) -> None:
        console.trial_header(1)
        size_per_thread = calibration.calibrated_size * calibration.repeat_count
        console.trial_result(
            ns_to_ms_string(calibration.elapsed_ns),
            speed_string(calibration.throughput),
            f"data size per thread: {format_size(size_per_thread)}",
        )
        if calibration.shrunk:
            console.info(
                f"Block shrunk from {format_size(calibration.original_size)} "
                f"to {format_size(calibration.calibrated_size)}; "
                f"first write ran at {speed_string(calibration.measured_throughput)}"
            )

    def on_trial(self, trial: Trial) -> None:
        console.trial_header(trial.threads_count)
        for outcome in trial.outcomes:
            console.thread_line(
                outcome.thread_number,
                ns_to_ms_string(outcome.elapsed_ns),
                failed=not outcome.ok,
            )
        if trial.success:
            console.trial_result(ns_to_ms_string(trial.average_ns), speed_string(trial.throughput))
        else:
            for err in trial.errors:
                console.error(err)

    def on_finished(self, result: SweepResult) -> None:
        calib = result.calibration
        rows: list[list[str]] = [
            ["1", ns_to_ms_string(calib.elapsed_ns), speed_string(calib.throughput)]
        ]
        for t in result.trials:
            speed = speed_string(t.throughput) if t.success else "failed"
            rows.append([str(t.threads_count), ns_to_ms_string(t.average_ns), speed])
        console.table(["Threads", "Average", "Speed"], rows, title="Write throughput")

        summary = {
            "Stopped": _STOP_MESSAGES[result.stop_reason],
            "Max threads tested": str(result.max_threads_tested),
            "Block size": format_size(result.block_size),
        }
        best = result.best_trial
        if best is not None:
            summary["Fastest"] = f"{best.threads_count} threads, {speed_string(best.throughput)}"
        console.kv(summary)
