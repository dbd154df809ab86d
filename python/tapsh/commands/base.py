"""Command base classes for tapsh."""

from __future__ import annotations

from dataclasses import dataclass
from typing import List

from ..context import ShellState


@dataclass
class Command:
    """Abstract command description.

    ``run`` receives the tokens after the command name and returns True when
    the shell should quit.
    """

    name: str
    description: str
    usage: str = ""

    def __post_init__(self) -> None:
        if not self.usage:
            self.usage = self.name

    def run(self, state: ShellState, argv: List[str]) -> bool:
        raise NotImplementedError("Command must implement run()")

    def help_text(self) -> str:
        return self.description
