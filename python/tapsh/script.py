"""Script buffer holding the user's script one line per entry."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Iterator, List, Tuple

# Lines pass through untouched: no newline translation and undecodable bytes
# survive as surrogates.
SCRIPT_FILE_MODE = {"encoding": "utf-8", "errors": "surrogateescape", "newline": "\n"}


class ScriptBuffer:
    """Ordered, mutable list of raw script lines.

    Lines are displayed 1-indexed.  Numbers are recomputed on every listing,
    so deleting a line renumbers every line after it.
    """

    def __init__(self, lines: Iterable[str] = ()) -> None:
        self.lines: List[str] = list(lines)

    def __len__(self) -> int:
        return len(self.lines)

    def __iter__(self) -> Iterator[str]:
        return iter(self.lines)

    def __bool__(self) -> bool:
        return bool(self.lines)

    def append(self, line: str) -> None:
        self.lines.append(line)

    def extend(self, lines: Iterable[str]) -> None:
        self.lines.extend(lines)

    def delete(self, number: int) -> bool:
        """Remove line *number* (1-based); return False when it does not exist."""
        if number < 1 or number > len(self.lines):
            return False
        del self.lines[number - 1]
        return True

    def clear(self) -> None:
        self.lines.clear()

    def replace(self, lines: Iterable[str]) -> None:
        self.lines = list(lines)

    def text(self) -> str:
        return "\n".join(self.lines)

    def numbered(self) -> Iterator[Tuple[int, str]]:
        return enumerate(self.lines, start=1)

    def number_width(self) -> int:
        return len(str(len(self.lines))) if self.lines else 1

    def load(self, path: str) -> int:
        """Append every line of *path* verbatim; return the number of lines read.

        Raises ``OSError`` when the file cannot be read.
        """
        loaded = read_lines(path)
        self.lines.extend(loaded)
        return len(loaded)

    def save(self, path: str) -> None:
        """Write the buffer joined with newlines plus a trailing newline."""
        with Path(path).open("w", **SCRIPT_FILE_MODE) as fp:
            fp.write(self.text() + "\n")


def read_lines(path: str) -> List[str]:
    """Read *path* into a list of lines, dropping only the ``"\\n"`` terminator.

    Carriage returns and undecodable bytes are kept, so a file read here and
    saved again comes back byte for byte.
    """
    with open(path, "r", **SCRIPT_FILE_MODE) as fp:
        return [line[:-1] if line.endswith("\n") else line for line in fp]


__all__ = ["SCRIPT_FILE_MODE", "ScriptBuffer", "read_lines"]
