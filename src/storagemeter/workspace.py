"""Create and clean up the directory the benchmark writes into."""

from __future__ import annotations

import logging
from pathlib import Path

from storagemeter.config import CALIBRATION_FILE, THREAD_FILE_PREFIX

logger = logging.getLogger(__name__)


def prepare_test_dir(test_dir: Path) -> bool:
    """Create *test_dir* if needed.

    Returns True when the directory already existed. Failures are logged and
    treated as "existed" so cleanup never removes something we did not make.
    """
    if test_dir.is_dir():
        return True
    try:
        test_dir.mkdir(parents=True)
    except OSError as exc:
        logger.error("Failed to create test folder %s: %s", test_dir, exc)
        return True
    logger.info("Created test folder %s", test_dir)
    return False


def benchmark_files(test_dir: Path) -> list[Path]:
    """Files in *test_dir* that a benchmark run writes."""
    if not test_dir.is_dir():
        return []
    found: list[Path] = []
    for path in sorted(test_dir.iterdir()):
        if not path.is_file():
            continue
        suffix = path.name[len(THREAD_FILE_PREFIX) :]
        if path.name == CALIBRATION_FILE or (
            path.name.startswith(THREAD_FILE_PREFIX) and suffix.isdigit()
        ):
            found.append(path)
    return found


def cleanup_test_dir(test_dir: Path, existed: bool) -> list[str]:
    """Remove benchmark files, and *test_dir* itself unless it pre-existed.

    Returns a list of problems encountered; none of them are raised.
    """
    problems: list[str] = []
    for path in benchmark_files(test_dir):
        try:
            path.unlink()
        except OSError as exc:
            logger.warning("Failed to remove %s: %s", path, exc)
            problems.append(f"Failed to remove {path}: {exc}")

    if not existed and test_dir.is_dir():
        try:
            test_dir.rmdir()
        except OSError as exc:
            logger.warning("Failed to remove test folder %s: %s", test_dir, exc)
            problems.append(f"Failed to remove temp folder {test_dir}: {exc}")
    return problems
