"""Command registry for tapsh."""

from __future__ import annotations

from typing import Dict, Iterable, List, Optional

from .base import Command
from .exit import QuitCommand
from .help import HelpCommand
from .options import OptionCommand, OptionRegistry, SetCommand, ShowCommand, build_options
from .run import RunCommand
from .script import AddCommand, DeleteCommand, EditCommand, ListCommand, LoadCommand, SaveCommand


class CommandRegistry:
    """Stores the known commands in registration order."""

    def __init__(self) -> None:
        self._commands: Dict[str, Command] = {}

    def register(self, command: Command) -> None:
        self._commands[command.name] = command

    def get(self, name: str) -> Optional[Command]:
        return self._commands.get(name)

    def list_commands(self) -> Iterable[Command]:
        return self._commands.values()

    def names(self) -> List[str]:
        return list(self._commands)

    def option_commands(self) -> Iterable[OptionCommand]:
        return [command for command in self._commands.values() if isinstance(command, OptionCommand)]


def build_registry(options: Optional[OptionRegistry] = None, *, run_command: Optional[RunCommand] = None) -> CommandRegistry:
    options = options or build_options()
    registry = CommandRegistry()
    commands = [
        AddCommand(),
        DeleteCommand(),
        ListCommand(),
        EditCommand(),
        LoadCommand(),
        SaveCommand(),
        run_command or RunCommand(),
        SetCommand(options),
        ShowCommand(options),
        HelpCommand(),
        QuitCommand(),
    ]
    for command in commands:
        registry.register(command)
    return registry


__all__ = ["Command", "CommandRegistry", "build_registry"]
