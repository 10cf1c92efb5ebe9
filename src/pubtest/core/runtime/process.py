# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Safe wrappers around ``subprocess`` execution."""

from __future__ import annotations

import shlex
import shutil

# Bandit: subprocess usage is intentional; commands are split into argument
# lists and never routed through a shell.
import subprocess  # nosec B404
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from pathlib import Path
from subprocess import CompletedProcess


@dataclass(frozen=True, slots=True)
class CommandOptions:
    """Immutable command execution options."""

    cwd: Path | None = None
    env: Mapping[str, str] | None = None
    check: bool = True
    capture_output: bool = False
    text: bool = True


def _normalize_args(args: Sequence[str]) -> list[str]:
    if not args:
        msg = "subprocess command requires at least one argument"
        raise ValueError(msg)

    head, *rest = args
    head_path = Path(head)
    if head_path.is_absolute():
        return [str(head_path), *rest]

    resolved = shutil.which(head)
    if resolved is None:
        msg = f"Executable '{head}' was not found on PATH"
        raise FileNotFoundError(msg)
    return [resolved, *rest]


def run_command(
    args: Sequence[str],
    *,
    options: CommandOptions | None = None,
) -> CompletedProcess[str]:
    """Execute ``args`` after normalising the executable path.

    Args:
        args: Command arguments where the first item is the executable.
        options: Execution options; defaults raise on non-zero exit.

    Returns:
        CompletedProcess[str]: Completed process metadata.

    Raises:
        FileNotFoundError: If the executable cannot be located on ``PATH``.
        subprocess.CalledProcessError: If ``check`` is set and the command fails.
    """

    resolved = options or CommandOptions()
    normalized = _normalize_args(args)
    # Bandit: argument lists are passed directly without shell expansion.
    return subprocess.run(  # nosec B603
        normalized,
        cwd=str(resolved.cwd) if resolved.cwd is not None else None,
        env=dict(resolved.env) if resolved.env is not None else None,
        check=resolved.check,
        capture_output=resolved.capture_output,
        text=resolved.text,
    )


def run_shell_command(command: str, *, cwd: Path, capture_output: bool = False) -> CompletedProcess[str]:
    """Split ``command`` shell-style and run it inside ``cwd`` without raising on failure.

    Args:
        command: Command line such as ``"dart test test/foo_test.dart"``.
        cwd: Working directory for the process.
        capture_output: When ``True`` capture stdout and stderr instead of streaming them.

    Returns:
        CompletedProcess[str]: Completed process metadata.
    """

    options = CommandOptions(cwd=cwd, check=False, capture_output=capture_output)
    return run_command(shlex.split(command), options=options)


__all__ = ["CommandOptions", "run_command", "run_shell_command"]
