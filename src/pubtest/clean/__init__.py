# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Removal of synthesized aggregator files."""

from __future__ import annotations

from .plan import CleanPlan, CleanPlanner, find_stale_optimized_files
from .runner import CleanResult, clean_up, optimized_files, sweep_stale_optimized_files

__all__ = [
    "CleanPlan",
    "CleanPlanner",
    "CleanResult",
    "clean_up",
    "find_stale_optimized_files",
    "optimized_files",
    "sweep_stale_optimized_files",
]
