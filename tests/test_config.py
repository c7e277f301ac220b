"""Tests for configuration constants and YAML loading."""

from __future__ import annotations

from pathlib import Path

import pytest

from storagemeter.config import (
    DEFAULT_BLOCK_SIZE,
    MAX_SLOW_TESTS,
    MAX_TEST_DURATION,
    REPEAT_COUNT,
    BenchmarkConfig,
    ConfigError,
    config_file,
    load_config,
    logs_dir,
    thread_file_name,
)


def test_defaults_match_constants() -> None:
    config = BenchmarkConfig()
    assert config.block_size == DEFAULT_BLOCK_SIZE == 100 * 1024 * 1024
    assert config.repeat_count == REPEAT_COUNT == 10
    assert config.max_test_duration == MAX_TEST_DURATION == 2.0
    assert config.max_slow_tests == MAX_SLOW_TESTS == 2
    assert config.max_threads == 0


def test_thread_file_names_are_one_based() -> None:
    assert thread_file_name(1) == "thread1"
    assert thread_file_name(12) == "thread12"


def test_path_helpers(tmp_path: Path) -> None:
    assert config_file(tmp_path) == tmp_path / ".storagemeter" / "config.yaml"
    assert logs_dir(tmp_path) == tmp_path / ".storagemeter" / "logs"


class TestBenchmarkConfig:
    @pytest.mark.parametrize(
        "kwargs",
        [
            {"block_size": 0},
            {"repeat_count": -1},
            {"max_test_duration": 0.0},
            {"max_slow_tests": 0},
            {"max_threads": -3},
            {"max_threads": 1},
        ],
    )
    def test_invalid_values(self, kwargs: dict[str, object]) -> None:
        with pytest.raises(ConfigError):
            BenchmarkConfig(**kwargs)  # type: ignore[arg-type]

    def test_with_overrides_skips_none(self) -> None:
        config = BenchmarkConfig().with_overrides(block_size=4096, repeat_count=None)
        assert config.block_size == 4096
        assert config.repeat_count == REPEAT_COUNT

    def test_with_overrides_no_changes_returns_self(self) -> None:
        config = BenchmarkConfig()
        assert config.with_overrides(block_size=None) is config

    def test_with_overrides_validates(self) -> None:
        with pytest.raises(ConfigError):
            BenchmarkConfig().with_overrides(max_slow_tests=0)


class TestLoadConfig:
    def test_none_gives_defaults(self) -> None:
        assert load_config(None) == BenchmarkConfig()

    def test_missing_file_gives_defaults(self, tmp_path: Path) -> None:
        assert load_config(tmp_path / "nope.yaml") == BenchmarkConfig()

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("")
        assert load_config(cf) == BenchmarkConfig()

    def test_reads_values(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("block_size: 1048576\nmax_test_duration: 5\nmax_threads: 16\n")
        config = load_config(cf)
        assert config.block_size == 1048576
        assert config.max_test_duration == 5.0
        assert isinstance(config.max_test_duration, float)
        assert config.max_threads == 16

    def test_unknown_key(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("block_size: 10\nturbo: true\n")
        with pytest.raises(ConfigError, match="turbo"):
            load_config(cf)

    def test_wrong_type(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("repeat_count: ten\n")
        with pytest.raises(ConfigError, match="repeat_count"):
            load_config(cf)

    def test_bool_is_not_an_int(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("max_slow_tests: true\n")
        with pytest.raises(ConfigError):
            load_config(cf)

    def test_non_mapping(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("- 1\n- 2\n")
        with pytest.raises(ConfigError, match="mapping"):
            load_config(cf)

    def test_unparseable(self, tmp_path: Path) -> None:
        cf = tmp_path / "config.yaml"
        cf.write_text("block_size: [unclosed\n")
        with pytest.raises(ConfigError, match="Cannot parse"):
            load_config(cf)
