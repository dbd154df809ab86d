"""Run command: compile the script in a child process, then run it."""

from __future__ import annotations

import logging
from typing import Callable, List, Optional, Sequence

from .base import Command
from ..context import ShellState
from ..executor import PassExecutorError
from ..output import emit_error
from ..pipeline import pass_5
from ..session import SessionConfig

LOGGER = logging.getLogger("tapsh.commands.run")

Pass5Fn = Callable[[SessionConfig, Sequence[str]], int]


class RunCommand(Command):
    def __init__(self, pass5: Optional[Pass5Fn] = None) -> None:
        super().__init__("run", "Run the current script.")
        self._pass5 = pass5 or pass_5

    def run(self, state: ShellState, argv: List[str]) -> bool:
        if not state.script:
            emit_error("No script specified.")
            return False
        config = state.config
        config.script = state.script.text()
        state.pending_interrupt = False
        try:
            rc = self._compile(state)
            if rc == 0 and config.last_pass >= 5 and not state.pending_interrupt:
                rc = self._pass5(config, state.targets)
                if rc != 0:
                    emit_error(f"Pass 5 failed (exit status {rc})")
        finally:
            config.reset_outputs()
        return False

    def _compile(self, state: ShellState) -> int:
        config = state.config
        try:
            result = state.executor.run(config)
        except PassExecutorError as exc:
            LOGGER.warning("pipeline spawn failed: %s", exc)
            emit_error(f"Running passes 1-4 failed: {exc}")
            return 1
        except KeyboardInterrupt:
            state.pending_interrupt = True
            print()
            emit_error("Interrupted.")
            return 1
        if not result.ok:
            if result.exit_code < 0:
                emit_error(f"Passes 1-4 terminated by signal {-result.exit_code}")
            else:
                emit_error(f"Passes 1-4 failed (exit status {result.exit_code})")
            return result.exit_code
        config.module_name = result.module_name
        config.aux_path = result.aux_path
        return 0
