# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Execution helpers for aggregator cleanup."""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

from ..interfaces import Reporter
from ..optimize.aggregator import is_optimized_file
from .plan import CleanPlanner


@dataclass(slots=True)
class CleanResult:
    """Capture the outcome of a cleanup operation."""

    removed: list[Path] = field(default_factory=list)
    skipped: list[Path] = field(default_factory=list)

    def register_removed(self, path: Path) -> None:
        self.removed.append(path)

    def register_skipped(self, path: Path) -> None:
        self.skipped.append(path)

    def __bool__(self) -> bool:
        return bool(self.removed or self.skipped)


def clean_up(paths: Iterable[Path], *, logger: Reporter | None = None) -> CleanResult:
    """Delete the aggregator files among ``paths``.

    Paths lacking the aggregator marker are never touched, so a caller
    passing user files by mistake cannot lose them.

    Args:
        paths: Paths produced by the aggregation stage.
        logger: Optional reporter receiving verbose diagnostics.

    Returns:
        CleanResult: Paths removed and paths left untouched.
    """

    result = CleanResult()
    for path in paths:
        if not is_optimized_file(path):
            result.register_skipped(path)
            continue
        path.unlink(missing_ok=True)
        result.register_removed(path)
        if logger is not None:
            logger.detail(f"Removed {path}")
    return result


@contextmanager
def optimized_files(paths: list[Path], *, logger: Reporter | None = None) -> Iterator[list[Path]]:
    """Yield ``paths`` and remove the aggregator files among them on exit.

    ``paths`` is read when the block exits, so a list still being filled by
    the aggregator inside the block is honoured. Cleanup runs whether the
    body returns, fails, or raises.
    """

    try:
        yield paths
    finally:
        clean_up(list(paths), logger=logger)


def sweep_stale_optimized_files(root: Path, *, dry_run: bool = False) -> CleanResult:
    """Remove aggregator files left under ``root`` by interrupted runs.

    Args:
        root: Directory scanned recursively.
        dry_run: When ``True`` report the files without deleting them.

    Returns:
        CleanResult: Removed files, or the would-be removals as skipped on a dry run.
    """

    plan = CleanPlanner().plan(root)
    if dry_run:
        return CleanResult(skipped=list(plan.paths))
    return clean_up(plan.paths)


__all__ = ["CleanResult", "clean_up", "optimized_files", "sweep_stale_optimized_files"]
