"""storagemeter.console._plain -- Plain-text fallback backend.

print()-based output with no external dependencies. Used when Rich is not
wanted or stdout is not a TTY.
"""

from __future__ import annotations

import sys


class PlainBackend:
    """ConsoleProtocol implementation using only built-in print()."""

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        print(f"  {message}")

    def success(self, message: str) -> None:
        print(f"  [ok] {message}")

    def warning(self, message: str) -> None:
        print(f"  [warn] {message}")

    def error(self, message: str) -> None:
        print(f"  [error] {message}", file=sys.stderr)

    # -- Structured panels --------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        if title:
            print(f"\n  {title}:")

        if not headers and not rows:
            return

        all_rows = [headers, *rows]
        col_widths = [
            max(len(str(row[i])) if i < len(row) else 0 for row in all_rows)
            for i in range(len(headers))
        ]

        print("  " + "  ".join(h.ljust(w) for h, w in zip(headers, col_widths, strict=True)))
        print("  " + "  ".join("-" * w for w in col_widths))

        for row in rows:
            cells = [
                str(row[i]).ljust(col_widths[i]) if i < len(row) else " " * col_widths[i]
                for i in range(len(headers))
            ]
            print("  " + "  ".join(cells))

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        if title:
            print(f"\n  {title}:")
        if not data:
            return
        max_key = max(len(k) for k in data)
        for k, v in data.items():
            print(f"  {k.rjust(max_key)}: {v}")

    # -- Sweep lifecycle ----------------------------------------------------

    def trial_header(self, threads_count: int) -> None:
        noun = "thread" if threads_count == 1 else "threads"
        print(f"\n  {threads_count} {noun}")

    def thread_line(self, thread_number: int, duration: str, *, failed: bool = False) -> None:
        mark = "FAILED" if failed else duration
        print(f"    thread {thread_number}: {mark}")

    def trial_result(self, average: str, speed: str, detail: str = "") -> None:
        line = f"  Average write time: {average}, speed: {speed}"
        if detail:
            line += f", {detail}"
        print(line)
        print("  -----")
