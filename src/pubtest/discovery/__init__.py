# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Test directory discovery."""

from __future__ import annotations

from .test_dirs import (
    NoTestsFoundError,
    TestDirectories,
    TestDirectoryResolver,
    ToolchainFilter,
    describe_filter,
)

__all__ = [
    "NoTestsFoundError",
    "TestDirectories",
    "TestDirectoryResolver",
    "ToolchainFilter",
    "describe_filter",
]
