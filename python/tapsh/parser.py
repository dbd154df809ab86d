"""Command line tokenizing helpers for tapsh."""

from __future__ import annotations

from typing import List

DELIMITERS = " \t"


def split_command(line: str) -> List[str]:
    """Split a command line on whitespace.

    No quoting rules apply; handlers that care about quotes (``set cmd``)
    re-join the tokens themselves.
    """
    if not line:
        return []
    return line.split()


def strip_outer_quotes(text: str) -> str:
    """Remove one pair of matching outer quotes, if present."""
    if len(text) >= 2 and text[0] in "\"'" and text[0] == text[-1]:
        return text[1:-1]
    return text
