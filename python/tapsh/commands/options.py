"""Session options and the set/show commands that own them."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable, Dict, Iterable, List, Optional

from .base import Command
from .help import print_usage
from ..context import ShellState
from ..output import emit_error, emit_result, render_usage_table
from ..parser import strip_outer_quotes

VERB_SET = "set"
VERB_SHOW = "show"

OptionOperation = Callable[[str, ShellState, List[str]], bool]

PID_CMD_CONFLICT = "You can't specify a target pid and a cmd together."


@dataclass(frozen=True)
class Option:
    """One ``set``/``show`` option.

    ``operation(verb, state, values)`` gets the tokens after the option name
    and always returns False (options never quit the shell).
    """

    name: str
    description: str
    operation: OptionOperation

    def apply(self, verb: str, state: ShellState, values: List[str]) -> bool:
        return self.operation(verb, state, values)


class OptionRegistry:
    """Ordered collection of options looked up by exact name."""

    def __init__(self, options: Iterable[Option] = ()) -> None:
        self._options: Dict[str, Option] = {}
        for option in options:
            self.register(option)

    def register(self, option: Option) -> None:
        self._options[option.name] = option

    def get(self, name: str) -> Optional[Option]:
        return self._options.get(name)

    def list_options(self) -> Iterable[Option]:
        return self._options.values()

    def names(self) -> List[str]:
        return list(self._options)


def _parse_int(text: str) -> Optional[int]:
    digits = text[1:] if text[:1] in ("+", "-") else text
    if not (digits.isascii() and digits.isdigit()):
        return None
    return int(text, 10)


def bool_option(name: str, attr: str, description: str) -> Option:
    def operation(verb: str, state: ShellState, values: List[str]) -> bool:
        if verb == VERB_SET:
            setattr(state.config, attr, values[0] != "0")
        else:
            emit_result(f"{name}: {int(getattr(state.config, attr))}")
        return False

    return Option(name, description, operation)


def _last_pass(verb: str, state: ShellState, values: List[str]) -> bool:
    if verb == VERB_SET:
        value = _parse_int(values[0])
        if value is None or value < 1 or value > 5:
            emit_error("Invalid option value (should be 1-5)")
        else:
            state.config.last_pass = value
    else:
        emit_result(f"last_pass: {state.config.last_pass}")
    return False


def _verbose(verb: str, state: ShellState, values: List[str]) -> bool:
    if verb == VERB_SET:
        value = _parse_int(values[0])
        if value is None or value < 0:
            emit_error("Invalid option value (should be greater than 0)")
        else:
            state.config.set_verbose(value)
    else:
        emit_result(f"verbose: {state.config.verbose}")
    return False


def _target_pid(verb: str, state: ShellState, values: List[str]) -> bool:
    if verb == VERB_SET:
        if state.config.cmd:
            emit_error(PID_CMD_CONFLICT)
            return False
        value = _parse_int(values[0])
        if value is None or value < 1:
            emit_error("Invalid target process ID number.")
        else:
            state.config.target_pid = value
    else:
        emit_result(f"target_pid: {state.config.target_pid}")
    return False


def _cmd(verb: str, state: ShellState, values: List[str]) -> bool:
    if verb == VERB_SET:
        if state.config.target_pid != 0:
            emit_error(PID_CMD_CONFLICT)
            return False
        state.config.cmd = strip_outer_quotes(" ".join(values))
    else:
        emit_result(f'cmd: "{state.config.cmd}"')
    return False


def build_options() -> OptionRegistry:
    return OptionRegistry(
        [
            bool_option("keep_tmpdir", "keep_tmpdir", "Keep temporary directory."),
            Option("last_pass", "Stop after pass NUM 1-5.", _last_pass),
            Option("verbose", "Add verbosity to all passes.", _verbose),
            bool_option("guru_mode", "guru_mode", "Guru mode."),
            bool_option("suppress_warnings", "suppress_warnings", "Suppress warnings."),
            bool_option("panic_warnings", "panic_warnings", "Turn warnings into errors."),
            bool_option("timing", "timing", "Collect probe timing information."),
            bool_option("unoptimized", "unoptimized", "Unoptimized translation."),
            Option("target_pid", "Sets target() to PID.", _target_pid),
            Option("cmd", "Start the probes, run CMD, and exit when it finishes.", _cmd),
        ]
    )


class OptionCommand(Command):
    """Base for commands that route their first argument to an option."""

    def __init__(self, name: str, description: str, usage: str, options: OptionRegistry) -> None:
        super().__init__(name, description, usage=usage)
        self.options = options

    def _dispatch(self, state: ShellState, argv: List[str]) -> bool:
        option = self.options.get(argv[0])
        if option is None:
            emit_error("Invalid option name")
            print_usage(state.registry)
            return False
        option.apply(self.name, state, argv[1:])
        return False

    def _invalid(self, state: ShellState) -> bool:
        print()
        emit_error("Invalid command")
        print_usage(state.registry)
        return False


class SetCommand(OptionCommand):
    def __init__(self, options: OptionRegistry) -> None:
        super().__init__(
            VERB_SET,
            "Set option value. Supported options are:",
            "set OPTION VALUE",
            options,
        )

    def help_text(self) -> str:
        rows = [(option.name, option.description) for option in self.options.list_options()]
        return "\n".join([self.description, *render_usage_table(rows, indent=4)])

    def run(self, state: ShellState, argv: List[str]) -> bool:
        if len(argv) < 2:
            return self._invalid(state)
        return self._dispatch(state, argv)


class ShowCommand(OptionCommand):
    def __init__(self, options: OptionRegistry) -> None:
        super().__init__(VERB_SHOW, "Show option value.", "show OPTION", options)

    def run(self, state: ShellState, argv: List[str]) -> bool:
        if not argv:
            for option in self.options.list_options():
                option.apply(VERB_SHOW, state, [])
            return False
        if len(argv) != 1:
            return self._invalid(state)
        return self._dispatch(state, argv)


__all__ = [
    "Option",
    "OptionCommand",
    "OptionRegistry",
    "SetCommand",
    "ShowCommand",
    "build_options",
]
