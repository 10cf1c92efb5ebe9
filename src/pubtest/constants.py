# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Shared constants describing Dart package layout conventions."""

from __future__ import annotations

from typing import Final

PUBSPEC_YAML: Final[str] = "pubspec.yaml"
PUBSPEC_LOCK: Final[str] = "pubspec.lock"
CONFIG_FILENAME: Final[str] = "pubtest.toml"

TEST_DIR_NAME: Final[str] = "test"
LIB_DIR_NAME: Final[str] = "lib"
TEST_FILE_SUFFIX: Final[str] = "_test.dart"
TEST_FILE_GLOB: Final[str] = f"**{TEST_FILE_SUFFIX}"

# Reserved for synthesized aggregator files; any file carrying this token is
# never treated as user test content.
OPTIMIZED_TEST_BASENAME: Final[str] = ".test_optimizer"

# Directory names never descended into while searching for child packages.
IGNORED_PACKAGE_DIRS: Final[frozenset[str]] = frozenset({"build"})

__all__ = [
    "CONFIG_FILENAME",
    "IGNORED_PACKAGE_DIRS",
    "LIB_DIR_NAME",
    "OPTIMIZED_TEST_BASENAME",
    "PUBSPEC_LOCK",
    "PUBSPEC_YAML",
    "TEST_DIR_NAME",
    "TEST_FILE_GLOB",
    "TEST_FILE_SUFFIX",
]
