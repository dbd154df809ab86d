"""Pass executor tests; each test spawns a real pipeline child."""

from __future__ import annotations

import os

import pytest

from tapsh.commands.run import RunCommand
from tapsh.executor import PassExecutor, PassExecutorError, PipelineResult, parse_result
from tapsh.session import SessionConfig


def _config(entry: str, **overrides) -> SessionConfig:
    config = SessionConfig(pipeline_entry=f"pipeline_stubs:{entry}", **overrides)
    config.script = "probe begin { exit() }"
    return config


def test_success_delivers_module_and_aux_path():
    result = PassExecutor().run(_config("succeed"))
    assert result == PipelineResult(exit_code=0, module_name="stap_1234", aux_path="/tmp/stap_uprobes.ko")
    assert result.ok


def test_success_before_pass_5_has_no_strings():
    result = PassExecutor().run(_config("succeed", last_pass=4))
    assert result == PipelineResult(exit_code=0)


def test_failure_exit_code_and_empty_strings():
    result = PassExecutor().run(_config("fail"))
    assert result.exit_code == 1
    assert result.module_name == "" and result.aux_path == ""


def test_exception_in_child_is_not_propagated():
    result = PassExecutor().run(_config("explode"))
    assert result.exit_code == 1
    assert not result.ok


def test_child_crash_reports_signal_status():
    result = PassExecutor().run(_config("crash"))
    assert result.exit_code < 0
    assert result.module_name == ""


def test_clean_exit_without_module_is_failure():
    result = PassExecutor().run(_config("no_module"))
    assert result.exit_code == 1


def test_unknown_entry_point_fails_in_child():
    config = _config("succeed")
    config.pipeline_entry = "no_such_module_anywhere:run"
    assert PassExecutor().run(config).exit_code == 1


def test_capture_output_returns_child_stdout():
    result = PassExecutor().run(_config("echo_script", last_pass=2), capture_output=True)
    assert result.ok
    assert result.output == "probe begin { exit() }\n"


def test_parent_config_is_not_modified_by_child():
    config = _config("succeed")
    PassExecutor().run(config)
    assert config.module_name == ""
    assert config.aux_path == ""


def test_spawn_failure_raises(tmp_path):
    executor = PassExecutor(python=str(tmp_path / "missing-python"))
    before = set(os.listdir("/proc/self/fd")) if os.path.isdir("/proc/self/fd") else None
    with pytest.raises(PassExecutorError):
        executor.run(_config("succeed"))
    if before is not None:
        assert set(os.listdir("/proc/self/fd")) <= before


def test_parse_result_requires_both_lines():
    config = SessionConfig(last_pass=5)
    assert parse_result(0, "mod\naux\n", config) == PipelineResult(0, "mod", "aux")
    assert parse_result(0, "mod\n", config).exit_code == 1
    assert parse_result(0, "", config).exit_code == 1
    assert parse_result(0, "\n\n", config) == PipelineResult(1)
    assert parse_result(2, "mod\naux\n", config) == PipelineResult(2)
    assert parse_result(0, "mod\n\n", config) == PipelineResult(0, "mod", "")


def test_clean_exit_without_module_skips_pass_5(state, capsys):
    state.script.append("probe begin {}")
    state.config.pipeline_entry = "pipeline_stubs:no_module"
    ran = []
    RunCommand(lambda config, targets: ran.append(config.module_name) or 0).run(state, [])
    assert ran == []
    assert "Passes 1-4 failed (exit status 1)" in capsys.readouterr().out
