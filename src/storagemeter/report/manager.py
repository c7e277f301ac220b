"""Sweep report persistence via YAML."""

from __future__ import annotations

from datetime import UTC, datetime
from pathlib import Path
from typing import Any

import yaml

from storagemeter import __version__
from storagemeter.domain.models import Calibration, SweepResult, Trial, WriteOutcome


def _outcome_to_dict(o: WriteOutcome) -> dict[str, object]:
    d: dict[str, object] = {
        "thread": o.thread_number,
        "path": o.path,
        "elapsed_ns": o.elapsed_ns,
    }
    if o.error is not None:
        d["error"] = o.error
    return d


def _trial_to_dict(t: Trial) -> dict[str, object]:
    return {
        "threads": t.threads_count,
        "success": t.success,
        "average_ns": t.average_ns,
        "throughput_bytes_per_second": round(t.throughput, 3),
        "outcomes": [_outcome_to_dict(o) for o in t.outcomes],
    }


def _calibration_to_dict(c: Calibration) -> dict[str, object]:
    return {
        "path": c.path,
        "elapsed_ns": c.elapsed_ns,
        "original_block_size": c.original_size,
        "calibrated_block_size": c.calibrated_size,
        "repeat_count": c.repeat_count,
        "throughput_bytes_per_second": round(c.throughput, 3),
        "measured_throughput_bytes_per_second": round(c.measured_throughput, 3),
    }


def result_to_dict(result: SweepResult) -> dict[str, object]:
    best = result.best_trial
    return {
        "version": __version__,
        "finished_at": datetime.now(UTC).strftime("%Y-%m-%dT%H:%M:%SZ"),
        "stop_reason": result.stop_reason.value,
        "max_threads_tested": result.max_threads_tested,
        "best_threads": best.threads_count if best is not None else None,
        "block_size": result.block_size,
        "calibration": _calibration_to_dict(result.calibration),
        "trials": [_trial_to_dict(t) for t in result.trials],
    }


class ReportManager:
    """Writes sweep results to, and reads them back from, YAML files."""

    def save(self, path: Path, result: SweepResult) -> None:
        """Write *result* to *path*, creating parent directories."""
        path.parent.mkdir(parents=True, exist_ok=True)
        data = result_to_dict(result)
        tmp = path.with_suffix(path.suffix + ".tmp")
        tmp.write_text(yaml.safe_dump(data, default_flow_style=False, sort_keys=False))
        tmp.replace(path)

    def load(self, path: Path) -> dict[str, Any]:
        """Load a saved report; a missing file yields an empty mapping."""
        if not path.exists():
            return {}
        data: dict[str, Any] = yaml.safe_load(path.read_text()) or {}
        return data
