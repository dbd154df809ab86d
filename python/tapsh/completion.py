"""Context-aware completion for the tapsh prompt."""

from __future__ import annotations

import re
from typing import Iterable, Iterator, List, Optional, Tuple

from prompt_toolkit.completion import CompleteEvent, Completer, Completion, PathCompleter
from prompt_toolkit.document import Document

from .context import ShellState

WORD_BREAKS = " \t\n.{"
PATH_COMMANDS = {"load", "save"}
PROBE_COMMAND = "add"
PROBE_KEYWORD = "probe"

CONTEXT_NONE = "none"
CONTEXT_COMMAND = "command"
CONTEXT_OPTION = "option"
CONTEXT_PROBE = "probe"
CONTEXT_FILENAME = "filename"


def word_bounds(line: str, cursor: int) -> Tuple[int, int]:
    """Return the ``(begin, end)`` span of the word ending at *cursor*."""
    begin = cursor
    while begin > 0 and line[begin - 1] not in WORD_BREAKS:
        begin -= 1
    return begin, cursor


def _token_start(line: str, position: int) -> int:
    start = position
    while start > 0 and not line[start - 1].isspace():
        start -= 1
    return start


def _probe_path(line: str, begin: int) -> str:
    """Dotted path the probe completion descends before offering children.

    This is the third whitespace token.  While the word being completed lies
    inside it, only the segments typed before that word count.
    """
    spans = [match.span() for match in re.finditer(r"\S+", line)]
    if len(spans) < 3:
        return ""
    start, stop = spans[2]
    if begin < start:
        return ""
    return line[start:min(begin, stop)]


class CompletionEngine:
    """Picks a candidate generator from the line and the word being completed.

    Reads the registry and the name index; never modifies them.
    """

    def __init__(self, state: ShellState) -> None:
        self.state = state

    def context(self, line: str, begin: int) -> str:
        before = line[:begin]
        if not before.strip():
            return CONTEXT_COMMAND
        tokens = line.split()
        token_index = len(before.split())
        if before and not before[-1].isspace():
            token_index -= 1
        command = tokens[0]
        if token_index == 1 and command in self._option_command_names():
            return CONTEXT_OPTION
        if command == PROBE_COMMAND:
            if token_index >= 2 and len(tokens) >= 2 and tokens[1] == PROBE_KEYWORD:
                return CONTEXT_PROBE
            return CONTEXT_NONE
        if token_index == 1 and command in PATH_COMMANDS:
            return CONTEXT_FILENAME
        return CONTEXT_NONE

    def candidates(self, line: str, begin: int, end: int, text: str) -> Iterator[str]:
        """Yield completions for *text*, the word spanning ``line[begin:end]``.

        File names are left to the front end's path completer.
        """
        kind = self.context(line, begin)
        if kind == CONTEXT_COMMAND:
            return self._prefixed(self.state.registry.names(), text)
        if kind == CONTEXT_OPTION:
            command = self.state.registry.get(line.split()[0])
            return self._prefixed(command.options.names(), text)  # type: ignore[union-attr]
        if kind == CONTEXT_PROBE:
            return self.state.index.complete(_probe_path(line, begin), text)
        return iter(())

    def _option_command_names(self) -> List[str]:
        return [command.name for command in self.state.registry.option_commands()]

    @staticmethod
    def _prefixed(names: Iterable[str], text: str) -> Iterator[str]:
        return (name for name in names if name.startswith(text))


class ShellCompleter(Completer):
    """prompt_toolkit completer wired to a :class:`CompletionEngine`."""

    def __init__(self, state: ShellState) -> None:
        self.engine = CompletionEngine(state)
        self._path = PathCompleter(expanduser=True)

    def get_completions(self, document: Document, complete_event: CompleteEvent) -> Iterable[Completion]:
        line = document.text
        cursor = document.cursor_position
        begin, end = word_bounds(line, cursor)
        if self.engine.context(line, begin) == CONTEXT_FILENAME:
            token = line[_token_start(line, cursor):cursor]
            yield from self._path.get_completions(Document(token, len(token)), complete_event)
            return
        text = line[begin:end]
        for candidate in self.engine.candidates(line, begin, end, text):
            yield Completion(candidate, start_position=-len(text))


def provide_completions(state: ShellState, line: str, cursor: Optional[int] = None) -> List[str]:
    """Return the completion strings for *line* with the cursor at *cursor*."""
    if cursor is None:
        cursor = len(line)
    completer = ShellCompleter(state)
    document = Document(line, cursor_position=cursor)
    return [completion.text for completion in completer.get_completions(document, CompleteEvent(completion_requested=True))]


__all__ = [
    "CompletionEngine",
    "ShellCompleter",
    "provide_completions",
    "word_bounds",
]
