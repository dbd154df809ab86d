"""tapsh CLI entry point."""

from __future__ import annotations

import argparse
import logging
import os
import sys
from typing import List, Optional

from .context import ShellState
from .output import emit_error, os_reason
from .repl import ShellREPL, bootstrap_index
from .session import DEFAULT_PIPELINE_ENTRY, SessionConfig

LOG = logging.getLogger("tapsh.cli")


def _configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Interactive SystemTap script shell")
    parser.add_argument("script", nargs="?", help="Script file to load into the buffer")
    parser.add_argument(
        "-c",
        "--command",
        help="Execute a single command non-interactively (quote the command string)",
    )
    parser.add_argument("--stap", default=os.environ.get("TAPSH_STAP", "stap"), help="Path to the stap translator")
    parser.add_argument(
        "--staprun",
        default=os.environ.get("TAPSH_STAPRUN", "staprun"),
        help="Path to the module runner used by pass 5",
    )
    parser.add_argument(
        "--pipeline",
        default=DEFAULT_PIPELINE_ENTRY,
        help="Pipeline entry point as module:function (default %(default)s)",
    )
    parser.add_argument(
        "--target",
        action="append",
        default=[],
        help="Deployment target for pass 5 (repeatable; default local)",
    )
    parser.add_argument("--no-index", action="store_true", help="Skip building the probe name index")
    parser.add_argument("-p", dest="last_pass", type=int, choices=range(1, 6), default=5, help="Stop after pass NUM")
    parser.add_argument("-v", dest="verbose", action="count", default=0, help="Increase verbosity")
    parser.add_argument("-g", dest="guru_mode", action="store_true", help="Guru mode")
    parser.add_argument("-k", dest="keep_tmpdir", action="store_true", help="Keep temporary directory")
    parser.add_argument(
        "--log-level",
        default=os.environ.get("TAPSH_LOG", "WARNING"),
        help="Logging level (default WARNING)",
    )
    return parser


def build_state(args: argparse.Namespace) -> ShellState:
    config = SessionConfig(
        last_pass=args.last_pass,
        guru_mode=args.guru_mode,
        keep_tmpdir=args.keep_tmpdir,
        stap_path=args.stap,
        staprun_path=args.staprun,
        pipeline_entry=args.pipeline,
    )
    config.set_verbose(args.verbose)
    return ShellState(config=config, targets=list(args.target))


def main(argv: Optional[List[str]] = None) -> int:
    parser = build_arg_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.log_level)
    state = build_state(args)
    if args.script:
        try:
            state.script.load(args.script)
        except OSError as exc:
            emit_error(f"File '{args.script}' couldn't be opened for reading: {os_reason(exc)}")
            return 1
    repl = ShellREPL(state)
    if args.command:
        return _run_single_command(repl, args.command)
    if not args.no_index:
        bootstrap_index(state)
    try:
        return repl.run()
    except KeyboardInterrupt:
        print()
        return 0


def _run_single_command(repl: ShellREPL, command_line: str) -> int:
    if not command_line.split():
        return 0
    name = command_line.split()[0]
    if repl.state.registry.get(name) is None:
        emit_error(f'Undefined command: "{name}". Try "help".')
        return 1
    repl.dispatch(command_line)
    return 0


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
