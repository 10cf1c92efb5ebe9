# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Turn classified test targets into executable command descriptors."""

from __future__ import annotations

import os
import shlex
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path

from ..constants import LIB_DIR_NAME, TEST_DIR_NAME
from ..interfaces import Reporter
from ..toolchain import ToolchainClassifier


@dataclass(frozen=True, slots=True)
class CommandDescriptor:
    """A shell command scheduled for execution."""

    command: str
    working_directory: Path
    label: str
    keys: tuple[str, ...] | None = None


def package_root_for(file_path: str | os.PathLike[str], test_dir_name: str = TEST_DIR_NAME) -> str:
    """Return the package root owning ``file_path``.

    The root is everything above the first ``test_dir_name`` segment, else
    above the first ``lib`` segment, else the basename of the parent
    directory. An empty result becomes ``"."``.
    """

    raw = os.fspath(file_path)
    parts = Path(raw).parts

    if test_dir_name in parts:
        root = _join(parts[: parts.index(test_dir_name)])
    elif LIB_DIR_NAME in parts:
        root = _join(parts[: parts.index(LIB_DIR_NAME)])
    else:
        root = os.path.basename(os.path.dirname(raw))

    return root or "."


def _join(parts: Sequence[str]) -> str:
    if not parts:
        return ""
    return str(Path(*parts))


def _display_root(target: Path, cwd: Path, test_dir_name: str) -> str:
    try:
        relative = os.path.relpath(target, cwd)
    except ValueError:
        relative = str(target)
    return package_root_for(relative, test_dir_name)


def build_label(tool: str, directory: str) -> str:
    """Return the human-readable label shown while a command runs."""

    return f"Running ({tool}) tests in {directory}"


def build_commands(
    targets: Mapping[Path, ToolchainClassifier],
    *,
    dart_args: Sequence[str],
    flutter_args: Sequence[str],
    cwd: Path | None = None,
    test_dir_name: str = TEST_DIR_NAME,
    logger: Reporter | None = None,
) -> list[CommandDescriptor]:
    """Return one command per target, preserving ``targets`` iteration order.

    Args:
        targets: Test directories or aggregator files mapped to their classification.
        dart_args: Extra arguments for ``dart test``.
        flutter_args: Extra arguments for ``flutter test``.
        cwd: Invocation directory used to build display labels.
        test_dir_name: Name of the package test directory used to locate package roots.
        logger: Optional reporter receiving the composed commands.

    Returns:
        list[CommandDescriptor]: Commands ready for the execution engine.
    """

    invocation_root = (cwd or Path.cwd()).resolve()
    commands: list[CommandDescriptor] = []

    for target, tool in targets.items():
        project_root = package_root_for(target, test_dir_name)
        tool_args = flutter_args if tool.is_flutter else dart_args
        runner = tool.tool()

        test_path = os.path.relpath(target, project_root)
        script = shlex.join([runner, "test", test_path, *tool_args])

        if logger is not None:
            logger.detail(f"Test command: {script}")

        commands.append(
            CommandDescriptor(
                command=script,
                working_directory=Path(project_root),
                label=build_label(runner, _display_root(target, invocation_root, test_dir_name)),
                keys=None,
            ),
        )

    return commands


__all__ = ["CommandDescriptor", "build_commands", "build_label", "package_root_for"]
