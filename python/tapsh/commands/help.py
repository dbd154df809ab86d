"""Help command."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

from .base import Command
from ..context import ShellState
from ..output import emit_result, render_usage_table

if TYPE_CHECKING:  # pragma: no cover
    from . import CommandRegistry


def print_usage(registry: "CommandRegistry") -> None:
    """Print every command's usage and help text."""
    emit_result("List of commands:")
    emit_result("")
    rows = [(command.usage, command.help_text()) for command in registry.list_commands()]
    for row in render_usage_table(rows):
        emit_result(row)


class HelpCommand(Command):
    def __init__(self) -> None:
        super().__init__("help", "Print this command list.")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        print_usage(state.registry)
        return False
