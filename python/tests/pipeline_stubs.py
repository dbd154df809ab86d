"""Pipeline entry points used by the pass executor tests.

These run inside the executor's child process.
"""

from __future__ import annotations

import os
import signal

from tapsh.session import DUMP_PROBE_ALIASES, DUMP_PROBE_TYPES

PROBE_TYPES = [
    "begin",
    "end",
    "kernel.function(string)",
    "kernel.function(string).return",
    "kernel.trace(string)",
    "process(number).function(string)",
    "process(string).function(string)",
    "timer.ms(number)",
]

PROBE_ALIASES = [
    "syscall.read = kernel.function(\"sys_read\")",
    "syscall.write = kernel.function(\"sys_write\")",
    "vm.pagefault = kernel.function(\"handle_mm_fault\")",
]


def succeed(config) -> int:
    config.module_name = "stap_1234"
    config.aux_path = "/tmp/stap_uprobes.ko"
    return 0


def fail(config) -> int:
    return 1


def explode(config) -> int:
    raise RuntimeError("translator blew up")


def crash(config) -> int:
    os.kill(os.getpid(), signal.SIGKILL)
    return 0


def no_module(config) -> int:
    return 0


def echo_script(config) -> int:
    print(config.script)
    return 0


def dump(config) -> int:
    if config.dump_mode == DUMP_PROBE_TYPES:
        print("\n".join(PROBE_TYPES))
    elif config.dump_mode == DUMP_PROBE_ALIASES:
        print("\n".join(PROBE_ALIASES))
    print(f"stub.verbose{config.verbose}.pass{config.last_pass}")
    return 0
