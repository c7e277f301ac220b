"""Terminal output for StorageMeter.

Modules print through the ``console`` proxy, which forwards to whichever
backend ``configure()`` selected. Until then output is plain text.
"""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING

from storagemeter.console._plain import PlainBackend

if TYPE_CHECKING:
    from storagemeter.console._protocol import ConsoleProtocol

_backend: ConsoleProtocol = PlainBackend()


def configure(*, backend: str = "auto") -> None:
    """Select the backend: ``"plain"``, ``"rich"`` or ``"auto"``.

    ``"auto"`` picks Rich only when stdout is a terminal.
    """
    global _backend  # noqa: PLW0603

    if backend == "plain":
        _backend = PlainBackend()
        return

    if backend == "auto":
        if not sys.stdout.isatty():
            _backend = PlainBackend()
            return
        backend = "rich"

    if backend == "rich":
        from storagemeter.console._rich import RichBackend

        _backend = RichBackend()
        return

    raise ValueError(f"Unknown console backend: {backend!r}")


def get_console() -> ConsoleProtocol:
    """Return the current backend instance."""
    return _backend


class _ConsoleProxy:
    """Forwards attribute lookups to the backend selected at call time."""

    def __getattr__(self, name: str) -> object:
        return getattr(_backend, name)


console: ConsoleProtocol = _ConsoleProxy()  # type: ignore[assignment]
