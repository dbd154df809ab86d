"""Completion tests for tapsh."""

from __future__ import annotations

from prompt_toolkit.completion import CompleteEvent
from prompt_toolkit.document import Document

from tapsh.completion import (
    CONTEXT_COMMAND,
    CONTEXT_FILENAME,
    CONTEXT_NONE,
    CONTEXT_OPTION,
    CONTEXT_PROBE,
    CompletionEngine,
    ShellCompleter,
    provide_completions,
    word_bounds,
)

PROBES = [
    "kernel.function(string)",
    "kernel.trace(string)",
    "process(number).function(string)",
]


def _with_probes(state):
    state.index.load(PROBES)
    state.index.load(["syscall.read = kernel.function(\"sys_read\")"], handle_placeholders=False)
    return state


def test_word_bounds_break_on_dots_and_braces():
    line = "add probe kernel.fun"
    assert word_bounds(line, len(line)) == (len("add probe kernel."), len(line))
    assert word_bounds("add probe begin{ex", 18) == (16, 18)
    assert word_bounds("", 0) == (0, 0)


def test_context_resolution(state):
    engine = CompletionEngine(state)
    assert engine.context("ad", 0) == CONTEXT_COMMAND
    assert engine.context("  ad", 2) == CONTEXT_COMMAND
    assert engine.context("set ", 4) == CONTEXT_OPTION
    assert engine.context("show la", 5) == CONTEXT_OPTION
    assert engine.context("set last_pass ", 14) == CONTEXT_NONE
    assert engine.context("add probe ", 10) == CONTEXT_PROBE
    assert engine.context("add probe kernel.", 17) == CONTEXT_PROBE
    assert engine.context("add global ", 11) == CONTEXT_NONE
    assert engine.context("add pro", 4) == CONTEXT_NONE
    assert engine.context("load ", 5) == CONTEXT_FILENAME
    assert engine.context("save /tmp/x", 5) == CONTEXT_FILENAME
    assert engine.context("list ", 5) == CONTEXT_NONE


def test_command_candidates_keep_registry_order(state):
    assert provide_completions(state, "") == [
        "add",
        "delete",
        "list",
        "edit",
        "load",
        "save",
        "run",
        "set",
        "show",
        "help",
        "quit",
    ]
    assert provide_completions(state, "s") == ["save", "set", "show"]
    assert provide_completions(state, "xyz") == []


def test_option_candidates(state):
    assert provide_completions(state, "set ") == [
        "keep_tmpdir",
        "last_pass",
        "verbose",
        "guru_mode",
        "suppress_warnings",
        "panic_warnings",
        "timing",
        "unoptimized",
        "target_pid",
        "cmd",
    ]
    assert provide_completions(state, "show t") == ["timing", "target_pid"]
    assert provide_completions(state, "set timing ") == []


def test_probe_completion_example(state):
    _with_probes(state)
    assert provide_completions(state, "add probe kernel.f") == ["function(string)"]
    assert provide_completions(state, "add probe proc") == ["process(number).function(string)"]


def test_probe_completion_from_root_includes_aliases(state):
    _with_probes(state)
    assert provide_completions(state, "add probe ") == [
        "kernel.function(string)",
        "kernel.trace(string)",
        "process(number).function(string)",
        "syscall.read",
    ]


def test_probe_completion_after_typed_argument(state):
    _with_probes(state)
    line = "add probe process(1234)."
    assert provide_completions(state, line) == ["function(string)"]


def test_probe_completion_uses_token_under_cursor(state):
    _with_probes(state)
    line = "add probe sys { }"
    assert provide_completions(state, line, cursor=len("add probe sys")) == ["syscall.read"]


def test_probe_completion_of_unfinished_first_segment_lists_full_paths(state):
    # The word under completion is matched against children, never descended into.
    _with_probes(state)
    assert provide_completions(state, "add probe kernel") == [
        "kernel.function(string)",
        "kernel.trace(string)",
    ]


def test_probe_body_completes_below_the_probe_point(state):
    _with_probes(state)
    assert provide_completions(state, 'add probe kernel.trace("t") { kernel.') == []
    assert provide_completions(state, "add probe process(1) { f") == ["function(string)"]


def test_no_candidates_outside_known_contexts(state):
    _with_probes(state)
    assert provide_completions(state, "list ke") == []
    assert provide_completions(state, "add function ke") == []


def test_completion_replaces_only_current_segment(state):
    _with_probes(state)
    completer = ShellCompleter(state)
    doc = Document("add probe kernel.tr", cursor_position=len("add probe kernel.tr"))
    results = list(completer.get_completions(doc, CompleteEvent()))
    assert [(c.text, c.start_position) for c in results] == [("trace(string)", -2)]


def test_engine_candidates_are_lazy(state):
    _with_probes(state)
    engine = CompletionEngine(state)
    line = "add probe kernel."
    gen = engine.candidates(line, len(line), len(line), "")
    assert next(gen) == "kernel.function(string)".split(".", 1)[1]
    assert list(engine.candidates(line, len(line), len(line), "")) == ["function(string)", "trace(string)"]


def test_path_completion_for_load(state, tmp_path):
    script = tmp_path / "demo.stp"
    script.write_text("probe begin {}\n", encoding="utf-8")
    text = f"load {script.as_posix()[:-1]}"
    results = provide_completions(state, text)
    assert results == ["p"]
