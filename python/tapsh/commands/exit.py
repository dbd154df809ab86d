"""Quit command."""

from __future__ import annotations

from typing import List

from .base import Command
from ..context import ShellState


class QuitCommand(Command):
    def __init__(self) -> None:
        super().__init__("quit", "Quit systemtap.")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        return True
