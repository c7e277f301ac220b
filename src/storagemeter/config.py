"""Benchmark constants, path helpers, and configuration loading."""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any

import yaml

# ---------------------------------------------------------------------------
# Benchmark settings
# ---------------------------------------------------------------------------

# Size of the in-memory payload written by every writer (100 MiB)
DEFAULT_BLOCK_SIZE = 104857600

# How many times each writer writes the block into its file
REPEAT_COUNT = 10

# Single-threaded trial budget used by calibration (seconds)
MAX_TEST_DURATION = 2.0

# Consecutive non-improving trials before the sweep stops
MAX_SLOW_TESTS = 2

# ---------------------------------------------------------------------------
# Paths
# ---------------------------------------------------------------------------

CALIBRATION_FILE = "single_thread"
THREAD_FILE_PREFIX = "thread"
DEFAULT_TEST_DIR = "temp"

STORAGEMETER_DIR = ".storagemeter"
CONFIG_FILE = "config.yaml"
LOGS_DIR = "logs"
LOG_FILE = "storagemeter.log"


def storagemeter_dir(project_root: Path) -> Path:
    """Return the .storagemeter directory path under *project_root*."""
    return project_root / STORAGEMETER_DIR


def config_file(project_root: Path) -> Path:
    """Return the default config.yaml path."""
    return storagemeter_dir(project_root) / CONFIG_FILE


def logs_dir(project_root: Path) -> Path:
    """Return the logs directory path."""
    return storagemeter_dir(project_root) / LOGS_DIR


def thread_file_name(thread_number: int) -> str:
    """Return the file name used by the 1-based *thread_number*."""
    return f"{THREAD_FILE_PREFIX}{thread_number}"


# ---------------------------------------------------------------------------
# Run configuration
# ---------------------------------------------------------------------------


class ConfigError(ValueError):
    """Raised when a configuration file or value is invalid."""


@dataclass(frozen=True)
class BenchmarkConfig:
    """Tunable parameters of one benchmark session.

    ``max_threads`` caps the sweep; 0 leaves it unbounded.
    """

    block_size: int = DEFAULT_BLOCK_SIZE
    repeat_count: int = REPEAT_COUNT
    max_test_duration: float = MAX_TEST_DURATION
    max_slow_tests: int = MAX_SLOW_TESTS
    max_threads: int = 0

    def __post_init__(self) -> None:
        if self.block_size <= 0:
            raise ConfigError(f"block_size must be positive, got {self.block_size}")
        if self.repeat_count <= 0:
            raise ConfigError(f"repeat_count must be positive, got {self.repeat_count}")
        if self.max_test_duration <= 0:
            raise ConfigError(
                f"max_test_duration must be positive, got {self.max_test_duration}"
            )
        if self.max_slow_tests <= 0:
            raise ConfigError(
                f"max_slow_tests must be positive, got {self.max_slow_tests}"
            )
        if self.max_threads < 0:
            raise ConfigError(f"max_threads must not be negative, got {self.max_threads}")
        if 0 < self.max_threads < 2:
            raise ConfigError("max_threads must be at least 2 (the sweep starts at 2)")

    def with_overrides(self, **overrides: Any) -> BenchmarkConfig:
        """Return a copy with every non-None override applied."""
        changes = {k: v for k, v in overrides.items() if v is not None}
        return replace(self, **changes) if changes else self


_FIELD_TYPES: dict[str, type] = {
    "block_size": int,
    "repeat_count": int,
    "max_test_duration": float,
    "max_slow_tests": int,
    "max_threads": int,
}


def _coerce(key: str, value: Any) -> Any:
    expected = _FIELD_TYPES[key]
    # bool is an int subclass; reject it explicitly
    if isinstance(value, bool):
        raise ConfigError(f"{key}: expected {expected.__name__}, got bool")
    if expected is float and isinstance(value, int):
        return float(value)
    if not isinstance(value, expected):
        raise ConfigError(f"{key}: expected {expected.__name__}, got {type(value).__name__}")
    return value


def config_from_dict(data: dict[str, Any]) -> BenchmarkConfig:
    """Build a BenchmarkConfig from a parsed mapping."""
    known = {f.name for f in fields(BenchmarkConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(f"Unknown config keys: {', '.join(unknown)}")
    return BenchmarkConfig(**{k: _coerce(k, v) for k, v in data.items()})


def load_config(path: Path | None) -> BenchmarkConfig:
    """Load a BenchmarkConfig from a YAML file.

    A missing *path* (None, or a file that does not exist) yields the
    defaults.
    """
    if path is None or not path.exists():
        return BenchmarkConfig()
    try:
        data = yaml.safe_load(path.read_text())
    except yaml.YAMLError as exc:
        raise ConfigError(f"Cannot parse {path}: {exc}") from exc
    if data is None:
        return BenchmarkConfig()
    if not isinstance(data, dict):
        raise ConfigError(f"{path}: top level must be a mapping")
    return config_from_dict(data)
