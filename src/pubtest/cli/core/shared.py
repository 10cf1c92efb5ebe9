# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared utilities for CLI commands (logging, errors)."""

from __future__ import annotations

from collections.abc import Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass

import typer
from rich.console import Console
from rich.table import Table
from rich.text import Text

from ...core.logging import detail as core_detail
from ...core.logging import fail as core_fail
from ...core.logging import info as core_info
from ...core.logging import ok as core_ok
from ...core.logging import warn as core_warn
from ...errors import ExitCode
from ...runtime.console import detect_tty, get_console_manager


class CLIError(RuntimeError):
    """Error raised when a CLI command fails and should exit with a status code."""

    def __init__(self, message: str, *, exit_code: int = ExitCode.USAGE) -> None:
        """Initialise the error with a message and exit code.

        Args:
            message: Human-readable error message shown to the user.
            exit_code: Exit status associated with the failure.
        """

        super().__init__(message)
        self.exit_code = exit_code


@dataclass(slots=True)
class CLILogger:
    """Adapter around project logging helpers respecting CLI output settings.

    Satisfies :class:`pubtest.interfaces.Reporter`.
    """

    console: Console
    use_emoji: bool
    use_color: bool
    verbose: bool = False

    def detail(self, message: str) -> None:
        """Emit ``message`` only when verbose output is enabled."""

        if self.verbose:
            core_detail(message, use_color=self.use_color)

    def info(self, message: str) -> None:
        core_info(message, use_emoji=False, use_color=self.use_color)

    def ok(self, message: str) -> None:
        core_ok(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def warn(self, message: str) -> None:
        core_warn(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def fail(self, message: str) -> None:
        core_fail(message, use_emoji=self.use_emoji, use_color=self.use_color)

    def echo(self, message: str) -> None:
        """Write ``message`` to stdout using Typer's echo helper."""

        typer.echo(message)

    @contextmanager
    def progress(self, message: str) -> Iterator[None]:
        """Display a spinner with ``message`` while the block runs.

        Falls back to a single line when stdout is not a terminal.
        """

        if not detect_tty():
            self.detail(message)
            yield
            return
        with self.console.status(Text(message, style="cyan" if self.use_color else "")):
            yield

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Render ``rows`` as a Rich table."""

        table = Table(title=title, title_justify="left", show_lines=False)
        for column in columns:
            table.add_column(column, style="red" if column == columns[0] and self.use_color else None)
        for row in rows:
            table.add_row(*(Text(cell) for cell in row))
        self.console.print(table)


def build_cli_logger(*, emoji: bool, color: bool = True, verbose: bool = False) -> CLILogger:
    """Return a ``CLILogger`` configured for the provided output preferences.

    Args:
        emoji: Whether log output may include emoji glyphs.
        color: Whether terminal colour output should be enabled.
        verbose: Whether detail-level messages should be shown.

    Returns:
        CLILogger: Logger instance bound to the shared Rich console.
    """

    console = get_console_manager().get(color=color, emoji=emoji)
    return CLILogger(console=console, use_emoji=emoji, use_color=color, verbose=verbose)


__all__ = ["CLIError", "CLILogger", "build_cli_logger"]
