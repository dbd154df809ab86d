"""Child side of the pass executor.

Reads a serialised :class:`SessionConfig` from stdin, runs the configured
pipeline entry point and reports the produced module over the result pipe.
"""

from __future__ import annotations

import argparse
import importlib
import logging
import os
import sys
from typing import Callable, List, Optional

from .session import SessionConfig

LOGGER = logging.getLogger("tapsh.worker")

PipelineEntry = Callable[[SessionConfig], int]


class PipelineEntryError(Exception):
    """Raised when a ``module:function`` entry point cannot be resolved."""


def resolve_entry(target: str) -> PipelineEntry:
    module_name, sep, attr = target.partition(":")
    if not sep or not module_name or not attr:
        raise PipelineEntryError(f"invalid pipeline entry '{target}' (expected module:function)")
    try:
        module = importlib.import_module(module_name)
    except ImportError as exc:
        raise PipelineEntryError(f"cannot import '{module_name}': {exc}") from exc
    entry = getattr(module, attr, None)
    if not callable(entry):
        raise PipelineEntryError(f"'{target}' is not callable")
    return entry


def run_child(config: SessionConfig, result_fd: int) -> int:
    rc = 1
    try:
        entry = resolve_entry(config.pipeline_entry)
        rc = int(entry(config) or 0)
        with os.fdopen(result_fd, "w", encoding="utf-8", closefd=False) as out:
            if rc == 0 and config.last_pass > 4:
                out.write(f"{config.module_name}\n")
                out.write(f"{config.aux_path}\n")
    except Exception:
        LOGGER.exception("pipeline failed")
        rc = 1
    return 1 if rc else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="tapsh-worker", description="tapsh pipeline child")
    parser.add_argument("--result-fd", type=int, required=True, help="Inherited pipe for the run result")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, os.environ.get("TAPSH_LOG", "WARNING").upper(), logging.WARNING),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    try:
        config = SessionConfig.from_json(sys.stdin.read())
    except ValueError as exc:
        LOGGER.error("invalid session payload: %s", exc)
        return 1
    rc = run_child(config, args.result_fd)
    sys.stdout.flush()
    return rc


if __name__ == "__main__":  # pragma: no cover
    sys.exit(main())
