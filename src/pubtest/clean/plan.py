# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Planning helpers for removing aggregator files left behind by earlier runs."""

from __future__ import annotations

import os
from collections.abc import Iterator
from dataclasses import dataclass, field
from pathlib import Path
from typing import Final

from ..constants import IGNORED_PACKAGE_DIRS, OPTIMIZED_TEST_BASENAME

PROTECTED_DIRECTORIES: Final[frozenset[str]] = frozenset({".git", ".hg", ".svn", ".dart_tool"})


@dataclass(slots=True)
class CleanPlan:
    """Aggregator files scheduled for removal."""

    paths: list[Path] = field(default_factory=list)

    def __bool__(self) -> bool:
        return bool(self.paths)


class CleanPlanner:
    """Find stale aggregator files below a root directory."""

    def __init__(self, *, marker: str = OPTIMIZED_TEST_BASENAME) -> None:
        self._marker = marker

    def plan(self, root: Path) -> CleanPlan:
        """Return every file under ``root`` carrying the aggregator marker.

        Protected VCS and tool directories, build output, and symlinks are
        skipped.

        Args:
            root: Directory scanned for stale aggregator files.

        Returns:
            CleanPlan: Sorted list of files to remove.
        """

        return CleanPlan(paths=sorted(self._iter_candidates(root.resolve())))

    def _iter_candidates(self, root: Path) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(root, followlinks=False):
            dirnames[:] = [
                name for name in dirnames if name not in PROTECTED_DIRECTORIES and name not in IGNORED_PACKAGE_DIRS
            ]
            for name in filenames:
                if self._marker not in name:
                    continue
                candidate = Path(dirpath) / name
                if candidate.is_symlink() or not candidate.is_file():
                    continue
                yield candidate


def find_stale_optimized_files(root: Path) -> list[Path]:
    """Return aggregator files found below ``root``."""

    return CleanPlanner().plan(root).paths


__all__ = ["CleanPlan", "CleanPlanner", "PROTECTED_DIRECTORIES", "find_stale_optimized_files"]
