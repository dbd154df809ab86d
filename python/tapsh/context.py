"""Shell state shared by the REPL, command handlers and the completer."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Callable, List, Optional

from .executor import PassExecutor
from .name_index import NameIndex
from .query import QUERY_NO_DEFAULT, query
from .script import ScriptBuffer
from .session import SessionConfig

if TYPE_CHECKING:  # pragma: no cover
    from .commands import CommandRegistry

LOGGER = logging.getLogger("tapsh.context")

DEFAULT_EDITOR = "/bin/ex"

ConfirmFn = Callable[[str, str], bool]


def _default_editor() -> str:
    return os.environ.get("EDITOR") or DEFAULT_EDITOR


@dataclass
class ShellState:
    """Holds everything one interactive session owns."""

    config: SessionConfig = field(default_factory=SessionConfig)
    script: ScriptBuffer = field(default_factory=ScriptBuffer)
    index: NameIndex = field(default_factory=NameIndex)
    executor: PassExecutor = field(default_factory=PassExecutor)
    targets: List[str] = field(default_factory=list)
    confirm: ConfirmFn = query
    editor: str = field(default_factory=_default_editor)
    pending_interrupt: bool = False
    _registry: Optional["CommandRegistry"] = field(default=None, init=False, repr=False)

    @property
    def registry(self) -> "CommandRegistry":
        if self._registry is None:
            from .commands import build_registry

            self._registry = build_registry()
        return self._registry

    @registry.setter
    def registry(self, registry: "CommandRegistry") -> None:
        self._registry = registry

    def ask(self, prompt: str, default: str = QUERY_NO_DEFAULT) -> bool:
        return bool(self.confirm(prompt, default))


__all__ = ["DEFAULT_EDITOR", "ShellState"]
