"""Output helpers for tapsh."""

from __future__ import annotations

import sys
from typing import Iterable, Optional, Sequence, TextIO, Tuple


def displayable(text: str) -> str:
    """Show bytes that were not valid UTF-8 as ``\\xNN`` escapes."""
    return text.encode("utf-8", "surrogateescape").decode("utf-8", "backslashreplace")


def emit_result(message: str, *, stream: Optional[TextIO] = None) -> None:
    print(displayable(message), file=stream or sys.stdout)


def emit_error(message: str, *, stream: Optional[TextIO] = None) -> None:
    """Report a non-fatal problem on the console."""
    print(displayable(message), file=stream or sys.stdout)


def os_reason(exc: OSError) -> str:
    return exc.strerror or str(exc)


def render_usage_table(entries: Sequence[Tuple[str, str]], *, indent: int = 0) -> Iterable[str]:
    """Yield ``name -- text`` rows with the name column padded to the widest name."""
    width = max([1] + [len(name) for name, _ in entries])
    pad = " " * indent
    for name, text in entries:
        yield f"{pad}{name:<{width}} -- {text}"


def render_numbered(lines: Iterable[Tuple[int, str]], width: int) -> Iterable[str]:
    for number, text in lines:
        yield f"{number:>{width}}: {text}"


__all__ = ["displayable", "emit_error", "emit_result", "os_reason", "render_numbered", "render_usage_table"]
