"""Default pipeline boundary backed by the ``stap`` and ``staprun`` tools.

``passes_0_4`` is what the pass executor runs in its child process;
``pass_5`` loads the compiled module and runs in the shell process.
"""

from __future__ import annotations

import logging
import subprocess
import sys
from typing import List, Sequence

from .session import DUMP_PROBE_ALIASES, DUMP_PROBE_TYPES, SessionConfig

LOGGER = logging.getLogger("tapsh.pipeline")

LOCAL_TARGETS = {"", "direct:", "localhost"}


def build_stap_argv(config: SessionConfig) -> List[str]:
    """Translate the session options into a ``stap`` command line."""
    argv = [config.stap_path]
    if config.dump_mode == DUMP_PROBE_TYPES:
        return argv + ["--dump-probe-types"]
    if config.dump_mode == DUMP_PROBE_ALIASES:
        return argv + ["--dump-probe-aliases"]
    argv += ["-p", str(min(config.last_pass, 4))]
    if any(config.perpass_verbose):
        argv.append("--vp")
        argv.append("".join(str(min(level, 9)) for level in config.perpass_verbose))
    flags = (
        (config.keep_tmpdir, "-k"),
        (config.guru_mode, "-g"),
        (config.suppress_warnings, "-w"),
        (config.panic_warnings, "-W"),
        (config.timing, "-t"),
        (config.unoptimized, "-u"),
    )
    argv.extend(flag for enabled, flag in flags if enabled)
    if config.target_pid:
        argv += ["-x", str(config.target_pid)]
    if config.cmd:
        argv += ["-c", config.cmd]
    argv += ["-e", config.script]
    return argv


def passes_0_4(config: SessionConfig) -> int:
    """Run parse/elaborate/translate/compile; record the module on success."""
    argv = build_stap_argv(config)
    LOGGER.debug("running %s", argv[:-1] if config.script else argv)
    if config.last_pass < 4 or config.dump_mode in (DUMP_PROBE_TYPES, DUMP_PROBE_ALIASES):
        return subprocess.run(argv, check=False).returncode
    result = subprocess.run(argv, check=False, stdout=subprocess.PIPE, text=True)
    if result.stdout:
        sys.stdout.write(result.stdout)
    if result.returncode != 0:
        return result.returncode
    produced = [line.strip() for line in result.stdout.splitlines() if line.strip()]
    if not produced:
        LOGGER.error("stap reported success without a module path")
        return 1
    config.module_name = produced[-1]
    return 0


def build_staprun_argv(config: SessionConfig) -> List[str]:
    argv = [config.staprun_path]
    if config.target_pid:
        argv += ["-x", str(config.target_pid)]
    if config.cmd:
        argv += ["-c", config.cmd]
    if config.aux_path:
        argv += ["-u", config.aux_path]
    argv.append(config.module_name)
    return argv


def pass_5(config: SessionConfig, targets: Sequence[str]) -> int:
    """Load and run the compiled module on every deployment target."""
    if not config.module_name:
        LOGGER.error("no compiled module to run")
        return 1
    rc = 0
    for target in targets or [""]:
        if target not in LOCAL_TARGETS:
            print(f"Target '{target}' is not supported; only local runs are available.")
            rc = 1
            continue
        try:
            rc = subprocess.run(build_staprun_argv(config), check=False).returncode or rc
        except OSError as exc:
            print(f"Running '{config.staprun_path}' failed: {exc.strerror or exc}")
            rc = 1
    return rc


__all__ = ["build_stap_argv", "build_staprun_argv", "pass_5", "passes_0_4"]
