# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exit codes and the error hierarchy shared by every stage of a test run."""

from __future__ import annotations

from enum import IntEnum


class ExitCode(IntEnum):
    """Process exit statuses modelled on ``sysexits.h``."""

    SUCCESS = 0
    USAGE = 64
    DATA = 65
    UNAVAILABLE = 69
    SOFTWARE = 70
    CONFIG = 78


class PubtestError(RuntimeError):
    """Base error carrying the exit status the CLI should terminate with."""

    exit_code: ExitCode = ExitCode.SOFTWARE

    def __init__(self, message: str, *, exit_code: int | None = None) -> None:
        """Initialise the error with a message and optional exit status override.

        Args:
            message: Human-readable description shown to the user.
            exit_code: Optional status overriding the class default.
        """

        super().__init__(message)
        if exit_code is not None:
            self.exit_code = ExitCode(exit_code)


class ManifestError(PubtestError):
    """Raised when a ``pubspec.yaml`` or ``pubspec.lock`` cannot be parsed."""

    exit_code = ExitCode.DATA


class ConfigError(PubtestError):
    """Raised when configuration input is invalid."""

    exit_code = ExitCode.CONFIG


__all__ = ["ConfigError", "ExitCode", "ManifestError", "PubtestError"]
