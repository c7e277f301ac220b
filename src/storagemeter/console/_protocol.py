"""storagemeter.console._protocol -- ConsoleProtocol definition.

Pure standard-library typing.Protocol for the StorageMeter terminal output.
No external dependencies allowed in this file.
"""

from __future__ import annotations

from typing import Protocol


class ConsoleProtocol(Protocol):
    """StorageMeter terminal output protocol.

    **General messages** -- usable from any module::

        console.info("Generating random data...")
        console.success("Sweep finished")
        console.warning("Failed to remove temp folder")
        console.error("Writer thread 3 failed")

    **Structured panels** -- tables and key-value displays::

        console.table(["Threads", "Speed"], [["2", "812.40 MB/s"]], title="Results")
        console.kv({"Target": "/mnt/data/temp", "Block": "100.00 MB"})

    **Sweep lifecycle** -- used by the progress reporter::

        console.trial_header(3)
        console.thread_line(1, "1534 ms")
        console.trial_result("1534 ms", "1.95 GB/s")
    """

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        """Informational message."""
        ...

    def success(self, message: str) -> None:
        """Success / positive-outcome message."""
        ...

    def warning(self, message: str) -> None:
        """Warning message."""
        ...

    def error(self, message: str) -> None:
        """Error message."""
        ...

    # -- Structured panels --------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        """Display a table with *headers* and *rows*."""
        ...

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        """Display key-value pairs."""
        ...

    # -- Sweep lifecycle ----------------------------------------------------

    def trial_header(self, threads_count: int) -> None:
        """Display the banner at the start of a trial."""
        ...

    def thread_line(self, thread_number: int, duration: str, *, failed: bool = False) -> None:
        """Display one writer thread's duration (or failure)."""
        ...

    def trial_result(self, average: str, speed: str, detail: str = "") -> None:
        """Display a trial's average duration and aggregate speed."""
        ...
