# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Consolidate scattered test files into per-group aggregator files."""

from __future__ import annotations

from .aggregator import (
    TestFileAggregator,
    collect_tests,
    group_test_files,
    is_optimized_file,
    list_test_files,
    optimized_test_file_name,
)
from .classifier import BindingClassifier, ContentClassifier
from .writer import Testable, write_optimized_test_file

__all__ = [
    "BindingClassifier",
    "ContentClassifier",
    "TestFileAggregator",
    "Testable",
    "collect_tests",
    "group_test_files",
    "is_optimized_file",
    "list_test_files",
    "optimized_test_file_name",
    "write_optimized_test_file",
]
