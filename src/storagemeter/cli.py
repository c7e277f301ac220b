#!/usr/bin/env python3
"""
StorageMeter CLI -- entry point for the write-throughput sweep.

Usage:
  storagemeter run [--target DIR] [--config FILE] [--report FILE]
                   [--block-size N] [--repeat N] [--max-duration S]
                   [--max-slow N] [--max-threads N] [--keep] [--verbose|--quiet]
  storagemeter show <report>
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from storagemeter.config import (
    DEFAULT_TEST_DIR,
    LOG_FILE,
    ConfigError,
    config_file,
    load_config,
    logs_dir,
)
from storagemeter.console import configure, console
from storagemeter.domain.models import StopReason

logger = logging.getLogger("storagemeter")

EXIT_OK = 0
EXIT_FAILED = 1
EXIT_USAGE = 2


def _setup_logging(project_dir: Path, level: int) -> None:
    """Configure file logging to .storagemeter/logs/storagemeter.log."""
    log_dir = logs_dir(project_dir)
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = logging.FileHandler(log_dir / LOG_FILE, encoding="utf-8")
    handler.setFormatter(logging.Formatter("%(asctime)s %(name)s %(levelname)s %(message)s"))

    root = logging.getLogger()
    root.setLevel(level)
    root.addHandler(handler)


# ---------------------------------------------------------------------------
# CLI commands
# ---------------------------------------------------------------------------


def cmd_run(args: argparse.Namespace) -> int:
    """Run the calibrate-then-sweep write benchmark."""
    from storagemeter.progress import ConsoleProgress
    from storagemeter.report.manager import ReportManager
    from storagemeter.scheduler.sweep import run_sweep
    from storagemeter.workspace import cleanup_test_dir, prepare_test_dir

    config_path = args.config if args.config is not None else config_file(Path.cwd())
    try:
        config = load_config(config_path).with_overrides(
            block_size=args.block_size,
            repeat_count=args.repeat,
            max_test_duration=args.max_duration,
            max_slow_tests=args.max_slow,
            max_threads=args.max_threads,
        )
    except ConfigError as exc:
        console.error(f"Invalid configuration: {exc}")
        return EXIT_USAGE

    test_dir = args.target.resolve()
    console.kv(
        {
            "Target": str(test_dir),
            "Block size": f"{config.block_size} bytes",
            "Writes per thread": str(config.repeat_count),
            "Trial budget": f"{config.max_test_duration:.1f}s",
        },
        title="StorageMeter",
    )
    logger.info("Benchmark starting in %s with %s", test_dir, config)

    existed = prepare_test_dir(test_dir)
    try:
        result = run_sweep(test_dir, config, observer=ConsoleProgress())
    except Exception as exc:  # noqa: BLE001
        logger.exception("Benchmark failed")
        console.error(f"Benchmark failed: {exc}")
        return EXIT_FAILED
    finally:
        if not args.keep:
            for problem in cleanup_test_dir(test_dir, existed):
                console.warning(problem)

    if args.report is not None:
        ReportManager().save(args.report, result)
        console.success(f"Report saved to {args.report}")

    if result.stop_reason is StopReason.WRITER_FAILURE:
        console.error(f"Sweep aborted at {result.max_threads_tested} threads")
        return EXIT_FAILED
    console.success(f"Sweep finished; max threads tested: {result.max_threads_tested}")
    return EXIT_OK


def cmd_show(args: argparse.Namespace) -> int:
    """Print a previously saved report."""
    from storagemeter.progress import speed_string
    from storagemeter.report.manager import ReportManager
    from storagemeter.units import ns_to_ms_string

    data = ReportManager().load(args.report)
    if not data:
        console.error(f"No report at {args.report}")
        return EXIT_FAILED

    calib = data.get("calibration", {})
    rows: list[list[str]] = [
        [
            "1",
            ns_to_ms_string(int(calib.get("elapsed_ns", 0))),
            speed_string(float(calib.get("throughput_bytes_per_second", 0.0))),
        ]
    ]
    for t in data.get("trials", []):
        speed = (
            speed_string(float(t.get("throughput_bytes_per_second", 0.0)))
            if t.get("success")
            else "failed"
        )
        rows.append([str(t["threads"]), ns_to_ms_string(int(t.get("average_ns", 0))), speed])
    console.table(["Threads", "Average", "Speed"], rows, title=f"Report {args.report.name}")
    console.kv(
        {
            "Finished": str(data.get("finished_at", "--")),
            "Stopped": str(data.get("stop_reason", "--")),
            "Max threads tested": str(data.get("max_threads_tested", "--")),
            "Best threads": str(data.get("best_threads") or "--"),
        }
    )
    return EXIT_OK


# ---------------------------------------------------------------------------
# Main entry point
# ---------------------------------------------------------------------------


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="storagemeter",
        description="StorageMeter -- sequential write throughput under increasing concurrency",
    )
    parser.add_argument(
        "--console",
        choices=["auto", "rich", "plain"],
        default="auto",
        help="Terminal output backend (default: auto)",
    )
    sub = parser.add_subparsers(dest="command")

    # storagemeter run
    run_p = sub.add_parser("run", help="Run the write benchmark sweep")
    run_p.add_argument(
        "--target",
        type=Path,
        default=Path(DEFAULT_TEST_DIR),
        help=f"Directory to write test files into (default: ./{DEFAULT_TEST_DIR})",
    )
    run_p.add_argument("--config", type=Path, default=None, help="YAML config file")
    run_p.add_argument("--report", type=Path, default=None, help="Save a YAML report here")
    run_p.add_argument("--block-size", type=int, default=None, help="Block size in bytes")
    run_p.add_argument("--repeat", type=int, default=None, help="Writes of the block per thread")
    run_p.add_argument(
        "--max-duration", type=float, default=None, help="Calibration budget in seconds"
    )
    run_p.add_argument(
        "--max-slow", type=int, default=None, help="Consecutive regressions before stopping"
    )
    run_p.add_argument(
        "--max-threads", type=int, default=None, help="Upper bound on threads (0=unbounded)"
    )
    run_p.add_argument("--keep", action="store_true", help="Keep test files after the run")
    run_p.add_argument("--verbose", action="store_true", help="Enable debug logging")
    run_p.add_argument("--quiet", action="store_true", help="Only log warnings and errors")

    # storagemeter show
    show_p = sub.add_parser("show", help="Display a saved report")
    show_p.add_argument("report", type=Path, help="Report file written by 'run --report'")

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    # -- Console configuration ------------------------------------------------
    configure(backend=args.console)

    if args.command == "run":
        # -- Logging configuration (file-based audit log) -------------------
        if args.verbose:
            level = logging.DEBUG
        elif args.quiet:
            level = logging.WARNING
        else:
            level = logging.INFO
        _setup_logging(Path.cwd(), level)
        return cmd_run(args)
    if args.command == "show":
        return cmd_show(args)

    parser.print_help()
    return EXIT_USAGE


if __name__ == "__main__":
    sys.exit(main())
