"""Script buffer commands: add, delete, list, load, save, edit."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
import tempfile
from typing import List

from .base import Command
from .help import print_usage
from ..context import DEFAULT_EDITOR, ShellState
from ..output import emit_error, emit_result, os_reason, render_numbered
from ..script import SCRIPT_FILE_MODE, read_lines

LOGGER = logging.getLogger("tapsh.commands.script")


def _invalid_command(state: ShellState) -> bool:
    print()
    emit_error("Invalid command")
    print_usage(state.registry)
    return False


class AddCommand(Command):
    def __init__(self) -> None:
        super().__init__("add", "Add a global, probe, or function.")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        # Whitespace inside the line is collapsed by tokenizing.
        state.script.append(" ".join(argv))
        return False


class DeleteCommand(Command):
    def __init__(self) -> None:
        super().__init__("delete", "Delete a script line by its number.", usage="delete LINE_NUM")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        if not argv:
            if state.ask("Delete entire script? "):
                state.script.clear()
            return False
        if len(argv) != 1:
            return _invalid_command(state)
        token = argv[0]
        if not token.isdigit():
            emit_error("Invalid script line value")
            return False
        number = int(token)
        if not state.script.delete(number):
            emit_error(f"No line {number}")
        return False


class ListCommand(Command):
    def __init__(self) -> None:
        super().__init__("list", "Display the current script.")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        for row in render_numbered(state.script.numbered(), state.script.number_width()):
            emit_result(row)
        return False


class LoadCommand(Command):
    def __init__(self) -> None:
        super().__init__("load", "Load a script from a file into the current session.", usage="load FILE")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        if len(argv) != 1:
            print()
            emit_error("FILE must be specified.")
            print_usage(state.registry)
            return False
        path = argv[0]
        try:
            count = state.script.load(path)
        except OSError as exc:
            print()
            emit_error(f"File '{path}' couldn't be opened for reading: {os_reason(exc)}")
            return False
        LOGGER.debug("loaded %d lines from %s", count, path)
        return False


class SaveCommand(Command):
    def __init__(self) -> None:
        super().__init__("save", "Save a script to a file from the current session.", usage="save FILE")

    def run(self, state: ShellState, argv: List[str]) -> bool:
        if len(argv) != 1:
            print()
            emit_error("FILE must be specified.")
            print_usage(state.registry)
            return False
        path = argv[0]
        try:
            state.script.save(path)
        except OSError as exc:
            print()
            emit_error(f"File '{path}' couldn't be opened for writing: {os_reason(exc)}")
        return False


class EditCommand(Command):
    def __init__(self) -> None:
        super().__init__(
            "edit",
            "Edit the current script. Uses EDITOR environment variable contents as editor (or ex as default).",
        )

    def run(self, state: ShellState, argv: List[str]) -> bool:
        try:
            fd, temp_path = tempfile.mkstemp(prefix="stap")
        except OSError as exc:
            print()
            emit_error(f"Temporary file couldn't be opened: {os_reason(exc)}")
            return False
        try:
            self._edit(state, fd, temp_path)
        finally:
            try:
                os.unlink(temp_path)
            except OSError as exc:
                LOGGER.debug("removing %s failed: %s", temp_path, exc)
        return False

    def _edit(self, state: ShellState, fd: int, temp_path: str) -> None:
        try:
            with os.fdopen(fd, "w", **SCRIPT_FILE_MODE) as fp:
                if state.script:
                    fp.write(state.script.text())
        except OSError as exc:
            print()
            emit_error(f"Writing to temporary file '{temp_path}' failed: {os_reason(exc)}")
            return
        try:
            cmd = (shlex.split(state.editor) or [DEFAULT_EDITOR]) + [temp_path]
        except ValueError as exc:
            print()
            emit_error(f"Invalid editor command '{state.editor}': {exc}")
            return
        try:
            rc = subprocess.run(cmd, check=False).returncode
        except OSError as exc:
            print()
            emit_error(f"Running editor '{state.editor}' failed: {os_reason(exc)}")
            return
        if rc != 0:
            print()
            emit_error(f"Editor '{state.editor}' exited with status {rc}")
            return
        try:
            lines = read_lines(temp_path)
        except OSError as exc:
            print()
            emit_error(f"Reading temporary file '{temp_path}' failed: {os_reason(exc)}")
            return
        state.script.replace(lines)
