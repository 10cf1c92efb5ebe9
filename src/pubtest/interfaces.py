# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Service interfaces injected into the orchestration components."""

# pylint: disable=too-few-public-methods -- Protocol definitions intentionally expose minimal method surfaces.

from __future__ import annotations

from collections.abc import Sequence
from contextlib import AbstractContextManager
from pathlib import Path
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class ConsoleManager(Protocol):
    """Manage console instances keyed by output preferences."""

    def get(self, *, color: bool, emoji: bool) -> Any:
        """Return a console configured according to the requested options."""

        raise NotImplementedError


@runtime_checkable
class Reporter(Protocol):
    """Leveled console output consumed by every orchestration stage.

    Implementations are purely observational and never influence control flow.
    """

    def detail(self, message: str) -> None:
        """Emit a message only shown in verbose mode."""

        raise NotImplementedError

    def info(self, message: str) -> None:
        """Emit an informational message."""

        raise NotImplementedError

    def warn(self, message: str) -> None:
        """Emit a warning message."""

        raise NotImplementedError

    def fail(self, message: str) -> None:
        """Emit an error message."""

        raise NotImplementedError

    def progress(self, message: str) -> AbstractContextManager[Any]:
        """Return a context manager displaying ``message`` while work runs."""

        raise NotImplementedError

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        """Render ``rows`` as a table titled ``title``."""

        raise NotImplementedError


@runtime_checkable
class CommandRunner(Protocol):
    """One-shot command execution capability."""

    def __call__(self, command: str, *, cwd: Path, capture_output: bool) -> CommandCompletion:
        """Run ``command`` inside ``cwd`` and return its completion record."""

        raise NotImplementedError


class CommandCompletion(Protocol):
    """Minimal view over :class:`subprocess.CompletedProcess`."""

    @property
    def returncode(self) -> int:
        """Exit status reported by the process."""

        raise NotImplementedError

    @property
    def stdout(self) -> str | None:
        """Captured standard output when requested."""

        raise NotImplementedError

    @property
    def stderr(self) -> str | None:
        """Captured standard error when requested."""

        raise NotImplementedError


__all__ = ["CommandCompletion", "CommandRunner", "ConsoleManager", "Reporter"]
