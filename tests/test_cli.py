# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for the pubtest command-line interface."""

from __future__ import annotations

from pathlib import Path

import pytest
from typer.testing import CliRunner

from pubtest.cli.app import app
from pubtest.errors import ExitCode
from pubtest.orchestration import TestRunOptions, TestServices


@pytest.fixture
def captured(monkeypatch: pytest.MonkeyPatch) -> list[TestRunOptions]:
    calls: list[TestRunOptions] = []

    def _fake_run_tests(options: TestRunOptions, *, services: TestServices) -> int:
        calls.append(options)
        return 3

    monkeypatch.setattr("pubtest.cli.commands.test.run_tests", _fake_run_tests)
    return calls


def test_test_command_maps_flags(tmp_path: Path, captured: list[TestRunOptions]) -> None:
    runner = CliRunner()

    result = runner.invoke(
        app,
        [
            "test",
            "--root",
            str(tmp_path),
            "-r",
            "--concurrent",
            "--bail",
            "--no-optimize",
            "--flutter-only",
            "--jobs",
            "2",
            "--update-goldens",
            "--name",
            "login",
            "--coverage=out",
        ],
    )

    assert result.exit_code == 3
    (options,) = captured
    assert options.root == tmp_path.resolve()
    assert options.config.discovery.recursive is True
    assert options.config.execution.concurrent is True
    assert options.config.execution.bail is True
    assert options.config.execution.jobs == 2
    assert options.config.optimize.enabled is False
    assert options.toolchain_filter.only == "flutter"
    assert options.test_args.for_flutter() == [
        "--update-goldens",
        "--name=login",
        "--coverage",
        "--coverage-path=out/lcov.info",
    ]


def test_test_command_reads_project_config(tmp_path: Path, captured: list[TestRunOptions]) -> None:
    (tmp_path / "pubtest.toml").write_text("[execution]\nbail = true\n", encoding="utf-8")
    runner = CliRunner()

    runner.invoke(app, ["test", "--root", str(tmp_path)])
    runner.invoke(app, ["test", "--root", str(tmp_path), "--no-bail"])

    assert [options.config.execution.bail for options in captured] == [True, False]


def test_test_command_rejects_unknown_forwarded_flag(tmp_path: Path, captured: list[TestRunOptions]) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["test", "--root", str(tmp_path), "--no-emoji", "--bogus"])

    assert result.exit_code == ExitCode.USAGE
    assert "Unknown option: --bogus" in result.stdout
    assert captured == []


def test_test_command_reports_invalid_config(tmp_path: Path, captured: list[TestRunOptions]) -> None:
    (tmp_path / "pubtest.toml").write_text("[execution]\njobs = 0\n", encoding="utf-8")
    runner = CliRunner()

    result = runner.invoke(app, ["test", "--root", str(tmp_path)])

    assert result.exit_code == ExitCode.CONFIG
    assert captured == []


def test_test_command_without_packages(tmp_path: Path) -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["test", "--root", str(tmp_path), "--no-emoji", "--dart-only"])

    assert result.exit_code == ExitCode.UNAVAILABLE
    assert "Running only dart tests" in result.stdout
    assert "No dart tests found" in result.stdout


def test_test_help_lists_forwarded_flags() -> None:
    runner = CliRunner()

    result = runner.invoke(app, ["test", "--help"])

    assert result.exit_code == 0
    for section in ("Dart Flags", "Flutter Flags", "Overlapping Flags", "Conflicting Flags"):
        assert section in result.stdout
    assert "--chain-stack-traces" in result.stdout


def test_clean_command_removes_stale_files(tmp_path: Path) -> None:
    stale = tmp_path / "pkg" / "test" / ".test_optimizer.dart"
    stale.parent.mkdir(parents=True)
    stale.write_text("// stale\n", encoding="utf-8")
    runner = CliRunner()

    dry = runner.invoke(app, ["clean", "--root", str(tmp_path), "--dry-run", "--no-emoji"])
    assert dry.exit_code == 0
    assert "pkg/test/.test_optimizer.dart" in dry.stdout
    assert stale.exists()

    result = runner.invoke(app, ["clean", "--root", str(tmp_path), "--no-emoji"])
    assert result.exit_code == 0
    assert "Removed 1 optimized test files" in result.stdout
    assert not stale.exists()


def test_test_command_reports_undecodable_test_file(tmp_path: Path) -> None:
    package = tmp_path / "app"
    (package / "test").mkdir(parents=True)
    (package / "pubspec.yaml").write_text("name: app\nflutter: {}\n", encoding="utf-8")
    (package / "test" / "a_test.dart").write_bytes(b"void main() {}\n\xff\xfe\n")
    runner = CliRunner()

    result = runner.invoke(app, ["test", "--root", str(tmp_path), "-r", "--no-emoji"])

    assert result.exit_code == ExitCode.SOFTWARE
    assert "not valid UTF-8" in result.stdout
    assert not list(tmp_path.rglob(".test_optimizer*"))
