"""Run the compiler pipeline in an isolated child process."""

from __future__ import annotations

import logging
import os
import subprocess
import sys
from dataclasses import dataclass
from typing import Dict, List, Optional

from .session import SessionConfig

LOGGER = logging.getLogger("tapsh.executor")

WORKER_MODULE = "tapsh.worker"


class PassExecutorError(Exception):
    """Raised when the pipeline child process cannot be started."""


@dataclass
class PipelineResult:
    exit_code: int
    module_name: str = ""
    aux_path: str = ""
    output: str = ""

    @property
    def ok(self) -> bool:
        return self.exit_code == 0


def parse_result(exit_code: int, payload: str, config: SessionConfig) -> PipelineResult:
    """Turn the child's exit status and pipe payload into a result.

    A zero exit that should have produced a module but did not deliver both
    lines, or delivered an empty module name, is reported as a failure.
    """
    if exit_code != 0:
        return PipelineResult(exit_code=exit_code)
    if config.last_pass <= 4:
        return PipelineResult(exit_code=0)
    lines = payload.split("\n")
    if len(lines) < 3 or lines[2] != "" or not lines[0]:
        LOGGER.warning("pipeline child exited cleanly without a complete result")
        return PipelineResult(exit_code=1)
    return PipelineResult(exit_code=0, module_name=lines[0], aux_path=lines[1])


class PassExecutor:
    """Spawn ``python -m tapsh.worker`` and collect its result over a pipe."""

    def __init__(self, *, python: Optional[str] = None, module: str = WORKER_MODULE) -> None:
        self.python = python or sys.executable
        self.module = module

    def _child_env(self) -> Dict[str, str]:
        env = os.environ.copy()
        search_path = [entry for entry in sys.path if entry]
        existing = env.get("PYTHONPATH")
        if existing:
            search_path.append(existing)
        env["PYTHONPATH"] = os.pathsep.join(search_path)
        return env

    def command(self, result_fd: int) -> List[str]:
        return [self.python, "-m", self.module, "--result-fd", str(result_fd)]

    def run(self, config: SessionConfig, *, capture_output: bool = False) -> PipelineResult:
        """Run passes 0-4 for *config* in a child process and wait for it.

        Blocks until the child exits.  Exceptions and crashes inside the child
        only show up as a non-zero exit code.
        """
        read_fd, write_fd = os.pipe()
        cmd = self.command(write_fd)
        LOGGER.debug("spawning pipeline child: %s", " ".join(cmd))
        try:
            proc = subprocess.Popen(
                cmd,
                stdin=subprocess.PIPE,
                stdout=subprocess.PIPE if capture_output else None,
                pass_fds=(write_fd,),
                env=self._child_env(),
                text=True,
            )
        except OSError as exc:
            os.close(read_fd)
            os.close(write_fd)
            raise PassExecutorError(f"could not start pipeline process: {exc}") from exc
        os.close(write_fd)
        with os.fdopen(read_fd, "r", encoding="utf-8") as result_stream:
            try:
                output, _ = proc.communicate(config.to_json())
            except BaseException:
                proc.kill()
                proc.wait()
                raise
            payload = result_stream.read()
        LOGGER.debug("pipeline child exited with %s", proc.returncode)
        result = parse_result(proc.returncode, payload, config)
        if capture_output:
            result.output = output or ""
        return result


__all__ = ["PassExecutor", "PassExecutorError", "PipelineResult", "parse_result"]
