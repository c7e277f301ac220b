"""storagemeter.console._rich -- Rich-based terminal backend.

Coloured, structured terminal output using the Rich library.
"""

from __future__ import annotations

from rich import box
from rich.console import Console
from rich.rule import Rule
from rich.table import Table
from rich.theme import Theme

_THEME = Theme(
    {
        "info": "blue",
        "success": "bold green",
        "warning": "bold yellow",
        "error": "bold red",
        "trial": "bold cyan",
        "speed": "bold magenta",
        "dim": "dim",
    }
)


class RichBackend:
    """ConsoleProtocol implementation backed by Rich."""

    def __init__(self, console: Console | None = None) -> None:
        if console is None:
            console = Console(theme=_THEME, highlight=False)
        else:
            console.push_theme(_THEME)
        self._con = console
        self._err = Console(theme=_THEME, highlight=False, stderr=True)

    # -- General messages ---------------------------------------------------

    def info(self, message: str) -> None:
        self._con.print(f"  {message}", style="info")

    def success(self, message: str) -> None:
        self._con.print(f"  ✓ {message}", style="success")

    def warning(self, message: str) -> None:
        self._con.print(f"  ⚠ {message}", style="warning")

    def error(self, message: str) -> None:
        self._err.print(f"  ✗ {message}", style="error")

    # -- Structured panels --------------------------------------------------

    def table(self, headers: list[str], rows: list[list[str]], *, title: str = "") -> None:
        t = Table(title=title or None, box=box.SIMPLE, show_edge=False, pad_edge=True)
        for h in headers:
            t.add_column(h)
        for r in rows:
            t.add_row(*r)
        self._con.print(t)

    def kv(self, data: dict[str, str], *, title: str = "") -> None:
        t = Table(
            title=title or None,
            box=box.SIMPLE,
            show_header=False,
            show_edge=False,
            pad_edge=True,
        )
        t.add_column("Key", style="bold", justify="right")
        t.add_column("Value")
        for k, v in data.items():
            t.add_row(k, v)
        self._con.print(t)

    # -- Sweep lifecycle ----------------------------------------------------

    def trial_header(self, threads_count: int) -> None:
        noun = "thread" if threads_count == 1 else "threads"
        self._con.print()
        self._con.print(Rule(f" {threads_count} {noun} ", style="trial", align="left"))

    def thread_line(self, thread_number: int, duration: str, *, failed: bool = False) -> None:
        if failed:
            self._con.print(f"    thread {thread_number}: [error]failed[/]")
        else:
            self._con.print(f"    [dim]thread {thread_number}:[/] {duration}")

    def trial_result(self, average: str, speed: str, detail: str = "") -> None:
        suffix = f" [dim]· {detail}[/]" if detail else ""
        self._con.print(f"  average {average} · [speed]{speed}[/]{suffix}")
