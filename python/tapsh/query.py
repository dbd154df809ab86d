"""Yes-or-no questions, modelled on gdb's defaulted query."""

from __future__ import annotations

import sys
from typing import Callable, Optional, TextIO

from prompt_toolkit import prompt as toolkit_prompt

QUERY_NO_DEFAULT = "none"
QUERY_DEFAULT_YES = "yes"
QUERY_DEFAULT_NO = "no"

ReadFn = Callable[[str], str]


def query(
    prompt: str,
    default: str = QUERY_NO_DEFAULT,
    *,
    read: Optional[ReadFn] = None,
    stdin: Optional[TextIO] = None,
    stream: Optional[TextIO] = None,
) -> bool:
    """Ask *prompt* and return True iff the answer is yes.

    *prompt* should end in ``"? "``.  Without a default, a non-terminal input
    and EOF both count as "yes"; otherwise the default answer is assumed.
    """
    stdin = stdin or sys.stdin
    stream = stream or sys.stderr
    if default == QUERY_DEFAULT_NO:
        def_value, def_answer, not_def_answer = False, "N", "Y"
        y_string, n_string = "y", "[n]"
    else:
        def_value, def_answer, not_def_answer = True, "Y", "N"
        y_string, n_string = ("[y]", "n") if default == QUERY_DEFAULT_YES else ("y", "n")

    if read is None:
        if not stdin.isatty():
            stream.write(
                f"{prompt}({y_string} or {n_string}) "
                f"[answered {def_answer}; input not from terminal]\n"
            )
            return def_value
        read = toolkit_prompt

    while True:
        try:
            response = read(f"{prompt}({y_string} or {n_string}) ")
        except EOFError:
            stream.write(f"EOF [assumed {def_answer}]\n")
            return def_value
        answer = response[:1].upper()
        if answer == not_def_answer:
            return not def_value
        if answer == def_answer or (default != QUERY_NO_DEFAULT and answer == ""):
            return def_value
        stream.write(f"Please answer {y_string} or {n_string}.\n")


__all__ = ["QUERY_DEFAULT_NO", "QUERY_DEFAULT_YES", "QUERY_NO_DEFAULT", "query"]
