"""Interactive REPL for tapsh."""

from __future__ import annotations

import logging
import sys
from typing import Callable, Optional

from prompt_toolkit import PromptSession
from prompt_toolkit.history import InMemoryHistory

from .completion import ShellCompleter
from .context import ShellState
from .executor import PassExecutorError
from .output import emit_error
from .parser import split_command
from .session import DUMP_NONE, DUMP_PROBE_ALIASES, DUMP_PROBE_TYPES, SessionSnapshot

LOGGER = logging.getLogger("tapsh.repl")

PROMPT = "stap> "

ReadLineFn = Callable[[str], str]


def bootstrap_index(state: ShellState) -> int:
    """Seed the name index from the pipeline's probe type and alias dumps.

    The session options touched for the dump runs are restored afterwards.
    Returns the number of dump lines indexed.
    """
    config = state.config
    snapshot = SessionSnapshot.capture(config)
    config.set_verbose(0)
    config.last_pass = 2
    indexed = 0
    try:
        for dump_mode, placeholders in ((DUMP_PROBE_TYPES, True), (DUMP_PROBE_ALIASES, False)):
            config.dump_mode = dump_mode
            try:
                result = state.executor.run(config, capture_output=True)
            except PassExecutorError as exc:
                LOGGER.warning("probe %s dump failed: %s", dump_mode, exc)
                break
            if not result.ok:
                LOGGER.warning("probe %s dump exited with status %s", dump_mode, result.exit_code)
            indexed += state.index.load(result.output, handle_placeholders=placeholders)
    finally:
        config.dump_mode = DUMP_NONE
        snapshot.restore(config)
        config.clear_script_data()
    LOGGER.debug("indexed %d probe names", indexed)
    return indexed


class ShellREPL:
    """Read a line, dispatch it, repeat until ``quit``."""

    def __init__(
        self,
        state: ShellState,
        *,
        read_line: Optional[ReadLineFn] = None,
        interactive: Optional[bool] = None,
    ) -> None:
        self.state = state
        self.running = False
        self._read_line = read_line
        self.interactive = sys.stdin.isatty() if interactive is None else interactive

    def _prompt_reader(self) -> ReadLineFn:
        if not self.interactive:
            return input
        session: PromptSession = PromptSession(
            history=InMemoryHistory(),
            completer=ShellCompleter(self.state),
            complete_while_typing=False,
        )
        return session.prompt

    def run(self) -> int:
        read = self._read_line or self._prompt_reader()
        self.running = True
        while self.running:
            try:
                line = read(PROMPT)
            except KeyboardInterrupt:
                print()
                continue
            except EOFError:
                if self.interactive:
                    print()
                    continue
                break
            if self.dispatch(line):
                self.running = False
        return 0

    def dispatch(self, line: str) -> bool:
        """Run one input line; return True when the shell should quit."""
        tokens = split_command(line)
        if not tokens:
            return False
        name, *argv = tokens
        command = self.state.registry.get(name)
        if command is None:
            emit_error(f'Undefined command: "{name}". Try "help".')
            return False
        try:
            return bool(command.run(self.state, argv))
        except Exception as exc:
            LOGGER.exception("command failed")
            emit_error(f"Command '{name}' failed: {exc}")
            return False


__all__ = ["PROMPT", "ShellREPL", "bootstrap_index"]
