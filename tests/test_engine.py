# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for sequential and concurrent command execution."""

from __future__ import annotations

import threading
from dataclasses import dataclass
from pathlib import Path

import pytest

from pubtest.core.runtime import run_shell_command
from pubtest.orchestration import CommandDescriptor, ExecutionEngine, ExecutionResult, reduce_exit_codes
from pubtest.orchestration.engine import SPAWN_FAILURE_EXIT_CODE, format_elapsed


@dataclass
class _Completed:
    returncode: int
    stdout: str = ""
    stderr: str = ""


class FakeRunner:
    """Runner returning scripted exit codes keyed by command string."""

    def __init__(self, codes: dict[str, int], *, output: dict[str, str] | None = None) -> None:
        self.codes = codes
        self.output = output or {}
        self.calls: list[str] = []
        self._lock = threading.Lock()

    def __call__(self, command: str, *, cwd: Path, capture_output: bool) -> _Completed:
        with self._lock:
            self.calls.append(command)
        return _Completed(returncode=self.codes[command], stdout=self.output.get(command, ""))


def _commands(*names: str) -> list[CommandDescriptor]:
    return [CommandDescriptor(command=name, working_directory=Path("."), label=f"Running {name}") for name in names]


def test_empty_batch_succeeds(reporter) -> None:
    runner = FakeRunner({})
    engine = ExecutionEngine(runner=runner, logger=reporter)

    assert engine.run([], concurrent=False, bail=True) == 0
    assert engine.run([], concurrent=True, bail=False) == 0
    assert runner.calls == []


def test_sequential_bail_stops_after_first_failure(reporter) -> None:
    runner = FakeRunner({"a": 0, "b": 1, "c": 0})
    engine = ExecutionEngine(runner=runner, logger=reporter)

    assert engine.run(_commands("a", "b", "c"), concurrent=False, bail=True) == 1
    assert runner.calls == ["a", "b"]


def test_sequential_without_bail_runs_everything(reporter) -> None:
    runner = FakeRunner({"a": 0, "b": 1, "c": 0})
    engine = ExecutionEngine(runner=runner, logger=reporter)

    assert engine.run(_commands("a", "b", "c"), concurrent=False, bail=False) == 1
    assert runner.calls == ["a", "b", "c"]
    assert reporter.at("info")[0] == "Running a"
    assert sum(message.startswith("Finished in ") for message in reporter.at("info")) == 3


def test_sequential_returns_last_failure(reporter) -> None:
    runner = FakeRunner({"a": 2, "b": 3})
    engine = ExecutionEngine(runner=runner, logger=reporter)

    assert engine.run(_commands("a", "b"), concurrent=False, bail=False) == 3


def test_concurrent_runs_all_and_reports_failures(reporter) -> None:
    runner = FakeRunner({"a": 1, "b": 0, "c": 2}, output={"a": "compiling\nSome tests failed.\n"})
    engine = ExecutionEngine(runner=runner, logger=reporter)

    exit_code = engine.run(_commands("a", "b", "c"), concurrent=True, bail=False)

    assert exit_code == 1
    assert sorted(runner.calls) == ["a", "b", "c"]
    assert reporter.tables == [
        (
            "Failed test commands",
            ("Command", "Exit", "Details"),
            [("Running a", "1", "Some tests failed."), ("Running c", "2", "")],
        ),
    ]
    assert "Script: a" in reporter.at("detail")


def test_concurrent_results_keep_submission_order(reporter) -> None:
    runner = FakeRunner({name: 0 for name in "abcdef"})
    engine = ExecutionEngine(runner=runner, logger=reporter, max_workers=3)

    results = engine.run_concurrent(_commands(*"abcdef"), bail=False)

    assert [result.descriptor.command for result in results] == list("abcdef")
    assert all(result.succeeded for result in results)


def test_concurrent_bail_skips_commands_not_yet_started(reporter) -> None:
    runner = FakeRunner({"a": 1, "b": 0, "c": 0})
    engine = ExecutionEngine(runner=runner, logger=reporter, max_workers=1)

    results = engine.run_concurrent(_commands("a", "b", "c"), bail=True)

    assert runner.calls == ["a"]
    assert [result.skipped for result in results] == [False, True, True]
    assert reduce_exit_codes(results) == 1


def test_concurrent_bail_reports_skipped_commands(reporter) -> None:
    runner = FakeRunner({"a": 1, "b": 0})
    engine = ExecutionEngine(runner=runner, logger=reporter, max_workers=1)

    assert engine.run(_commands("a", "b"), concurrent=True, bail=True) == 1
    assert reporter.at("warn") == ["Skipped 1 command(s) after a failure"]


@pytest.mark.parametrize("concurrent", [False, True])
def test_spawn_failure_becomes_failed_result(reporter, concurrent: bool) -> None:
    def _missing(command: str, *, cwd: Path, capture_output: bool) -> _Completed:
        raise FileNotFoundError(f"Executable not found: {command}")

    engine = ExecutionEngine(runner=_missing, logger=reporter)

    assert engine.run(_commands("dart test"), concurrent=concurrent, bail=False) == SPAWN_FAILURE_EXIT_CODE


def test_reduce_exit_codes_first_failure_wins() -> None:
    (first, second, third) = _commands("a", "b", "c")
    results = [
        ExecutionResult(descriptor=first, exit_code=0),
        ExecutionResult(descriptor=second, exit_code=4),
        ExecutionResult(descriptor=third, exit_code=9),
    ]

    assert reduce_exit_codes(results) == 4
    assert reduce_exit_codes(results[:1]) == 0
    assert reduce_exit_codes([ExecutionResult(descriptor=third, exit_code=0, skipped=True)]) == 0


@pytest.mark.parametrize(
    ("seconds", "expected"),
    [(0.25, "250ms"), (3.21, "3.2s"), (125.0, "2m 5s")],
)
def test_format_elapsed(seconds: float, expected: str) -> None:
    assert format_elapsed(seconds) == expected


@pytest.mark.parametrize("concurrent", [False, True])
def test_unsplittable_command_becomes_failed_result(tmp_path: Path, reporter, concurrent: bool) -> None:
    command = CommandDescriptor(
        command="dart test test --plain-name=user's list",
        working_directory=tmp_path,
        label="Running (dart) tests in .",
    )
    engine = ExecutionEngine(runner=run_shell_command, logger=reporter)

    assert engine.run([command], concurrent=concurrent, bail=False) == SPAWN_FAILURE_EXIT_CODE
