"""Session configuration shared between the shell and the pipeline child."""

from __future__ import annotations

import json
from dataclasses import asdict, dataclass, field, fields
from typing import Any, Dict, List

PASS_COUNT = 5

DUMP_NONE = "none"
DUMP_PROBE_TYPES = "probe_types"
DUMP_PROBE_ALIASES = "probe_aliases"

DEFAULT_PIPELINE_ENTRY = "tapsh.pipeline:passes_0_4"


@dataclass
class SessionConfig:
    """Option state handed to the compiler pipeline."""

    verbose: int = 0
    perpass_verbose: List[int] = field(default_factory=lambda: [0] * PASS_COUNT)
    last_pass: int = PASS_COUNT
    keep_tmpdir: bool = False
    guru_mode: bool = False
    suppress_warnings: bool = False
    panic_warnings: bool = False
    timing: bool = False
    unoptimized: bool = False
    target_pid: int = 0
    cmd: str = ""
    script: str = ""
    dump_mode: str = DUMP_NONE
    module_name: str = ""
    aux_path: str = ""
    stap_path: str = "stap"
    staprun_path: str = "staprun"
    pipeline_entry: str = DEFAULT_PIPELINE_ENTRY

    def set_verbose(self, level: int) -> None:
        self.verbose = level
        self.perpass_verbose = [level] * PASS_COUNT

    def clear_script_data(self) -> None:
        self.script = ""

    def reset_outputs(self) -> None:
        """Forget the artefacts of the previous pipeline run."""
        self.module_name = ""
        self.aux_path = ""

    def to_json(self) -> str:
        return json.dumps(asdict(self), sort_keys=True)

    @classmethod
    def from_json(cls, payload: str) -> "SessionConfig":
        data: Dict[str, Any] = json.loads(payload) if payload.strip() else {}
        known = {f.name for f in fields(cls)}
        return cls(**{key: value for key, value in data.items() if key in known})


@dataclass(frozen=True)
class SessionSnapshot:
    """Verbosity and pass limit saved around internal discovery runs."""

    verbose: int
    perpass_verbose: tuple
    last_pass: int

    @classmethod
    def capture(cls, config: SessionConfig) -> "SessionSnapshot":
        return cls(
            verbose=config.verbose,
            perpass_verbose=tuple(config.perpass_verbose),
            last_pass=config.last_pass,
        )

    def restore(self, config: SessionConfig) -> None:
        config.verbose = self.verbose
        config.perpass_verbose = list(self.perpass_verbose)
        config.last_pass = self.last_pass


__all__ = [
    "DEFAULT_PIPELINE_ENTRY",
    "DUMP_NONE",
    "DUMP_PROBE_ALIASES",
    "DUMP_PROBE_TYPES",
    "PASS_COUNT",
    "SessionConfig",
    "SessionSnapshot",
]
