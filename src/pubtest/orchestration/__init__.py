# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Command construction, execution and the end-to-end test pipeline."""

from __future__ import annotations

from .commands import CommandDescriptor, build_commands, package_root_for
from .engine import ExecutionEngine, ExecutionResult, reduce_exit_codes
from .pipeline import TestRunOptions, TestServices, run_tests

__all__ = [
    "CommandDescriptor",
    "ExecutionEngine",
    "ExecutionResult",
    "TestRunOptions",
    "TestServices",
    "build_commands",
    "package_root_for",
    "reduce_exit_codes",
    "run_tests",
]
