# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Group test files by sub-type and synthesize one aggregator file per group."""

from __future__ import annotations

import fnmatch
import os
from collections.abc import Iterator, Sequence
from pathlib import Path

from ..constants import OPTIMIZED_TEST_BASENAME, TEST_FILE_GLOB
from ..discovery.test_dirs import NoTestsFoundError, TestDirectories
from ..errors import PubtestError
from ..interfaces import Reporter
from ..toolchain import ToolchainClassifier, ToolchainKind
from .classifier import BindingClassifier, ContentClassifier
from .writer import Testable, write_optimized_test_file

# Ordered mapping of test target (aggregator file or directory) -> classification.
TestTargets = dict[Path, ToolchainClassifier]


def optimized_test_file_name(label: str) -> str:
    """Return the aggregator file name for a sub-type ``label``.

    The toolchain default labels share the bare basename.
    """

    if label in {ToolchainKind.DART.value, ToolchainKind.FLUTTER.value}:
        return f"{OPTIMIZED_TEST_BASENAME}.dart"
    return f"{OPTIMIZED_TEST_BASENAME}.{label}.dart"


def is_optimized_file(path: Path | str) -> bool:
    """Return ``True`` when ``path`` names a synthesized aggregator file."""

    return OPTIMIZED_TEST_BASENAME in os.path.basename(os.fspath(path))


def list_test_files(test_dir: Path, pattern: str = TEST_FILE_GLOB) -> list[Path]:
    """Return regular files below ``test_dir`` matching ``pattern``.

    Symlinked files and directories are never followed. The result is sorted
    so that aggregator content is stable between runs.
    """

    return sorted(_iter_matching(test_dir, pattern))


def _iter_matching(test_dir: Path, pattern: str) -> Iterator[Path]:
    suffix_pattern = pattern.replace("**", "*")
    for dirpath, _dirnames, filenames in os.walk(test_dir, followlinks=False):
        for name in filenames:
            if not fnmatch.fnmatchcase(name, suffix_pattern):
                continue
            candidate = Path(dirpath) / name
            if candidate.is_symlink() or not candidate.is_file():
                continue
            yield candidate


class TestFileAggregator:
    """Write optimized aggregator files for a set of test directories."""

    __test__ = False

    def __init__(
        self,
        *,
        logger: Reporter,
        content_classifier: ContentClassifier | None = None,
        pattern: str = TEST_FILE_GLOB,
    ) -> None:
        self._logger = logger
        self._content_classifier = content_classifier or BindingClassifier()
        self._pattern = pattern
        # Every aggregator created by this instance, in creation order.
        self.written: list[Path] = []

    def label_for(self, test_file: Path, tool: ToolchainClassifier) -> str:
        """Return the sub-type label of ``test_file``.

        Dart packages are never inspected; Flutter test files are sniffed for
        a specialised binding and fall back to ``"flutter"``.

        Raises:
            PubtestError: If a Flutter test file is not valid UTF-8.
        """

        if not tool.is_flutter:
            return ToolchainKind.DART.value

        try:
            content = test_file.read_text(encoding="utf-8")
        except UnicodeDecodeError as exc:
            raise PubtestError(f"{test_file} is not valid UTF-8: {exc}") from exc
        label = self._content_classifier.classify(content)
        if label is None:
            return ToolchainKind.FLUTTER.value

        self._logger.detail(f"Found Flutter {label} test")
        return label

    def group_test_files(self, test_files: Sequence[Path], tool: ToolchainClassifier) -> dict[str, list[Path]]:
        """Partition ``test_files`` by sub-type label.

        Aggregator files already present in ``test_files`` are skipped so that
        re-running never aggregates previous output.
        """

        groups: dict[str, list[Path]] = {}
        for test_file in test_files:
            if is_optimized_file(test_file):
                continue
            label = self.label_for(test_file, tool)
            groups.setdefault(label, []).append(test_file)
        return groups

    def write_optimized_files(self, test_dirs: TestDirectories) -> TestTargets:
        """Write one aggregator per sub-type group in every test directory.

        Args:
            test_dirs: Test directories mapped to their package classification.

        Returns:
            TestTargets: Aggregator path mapped to the owning classification;
            empty when no directory holds any test file.

        Raises:
            OSError: If a test file cannot be read or an aggregator cannot be written.
        """

        optimized: TestTargets = {}

        for test_dir, tool in test_dirs.items():
            groups = self.group_test_files(list_test_files(test_dir, self._pattern), tool)
            if not groups:
                continue

            for label, files in groups.items():
                optimized_path = test_dir / optimized_test_file_name(label)
                optimized_path.parent.mkdir(parents=True, exist_ok=True)
                optimized_path.touch()
                if optimized_path not in self.written:
                    self.written.append(optimized_path)

                testables = [Testable(absolute=path, optimized_path=optimized_path) for path in files]
                content = write_optimized_test_file(testables, is_flutter_package=tool.is_flutter)
                optimized_path.write_text(content, encoding="utf-8")

                optimized[optimized_path] = tool

        return optimized

    def directories_with_tests(self, test_dirs: TestDirectories) -> TestTargets:
        """Return the subset of ``test_dirs`` holding at least one user test file."""

        return {
            test_dir: tool
            for test_dir, tool in test_dirs.items()
            if any(not is_optimized_file(path) for path in list_test_files(test_dir, self._pattern))
        }


def group_test_files(
    test_files: Sequence[Path],
    tool: ToolchainClassifier,
    *,
    logger: Reporter,
    content_classifier: ContentClassifier | None = None,
) -> dict[str, list[Path]]:
    """Partition ``test_files`` by sub-type label using a throwaway aggregator."""

    aggregator = TestFileAggregator(logger=logger, content_classifier=content_classifier)
    return aggregator.group_test_files(test_files, tool)


def collect_tests(
    test_dirs: TestDirectories,
    *,
    optimize: bool,
    aggregator: TestFileAggregator,
    logger: Reporter,
) -> TestTargets:
    """Return the targets to execute, optionally writing aggregator files first.

    Args:
        test_dirs: Test directories resolved for the run.
        optimize: When ``True`` consolidate test files into aggregator files.
        aggregator: Aggregator used to scan and write files.
        logger: Reporter receiving progress and warnings.

    Returns:
        TestTargets: Aggregator files or plain directories mapped to their classification.

    Raises:
        NoTestsFoundError: If no test file exists in any directory.
    """

    logger.detail(f"{'' if optimize else 'NOT '}Optimizing {len(test_dirs)} test directories")

    if optimize:
        with logger.progress("Optimizing test files"):
            targets = aggregator.write_optimized_files(test_dirs)
    else:
        logger.warn("Running tests without optimization")
        targets = aggregator.directories_with_tests(test_dirs)

    if not targets:
        error = NoTestsFoundError()
        logger.fail(str(error))
        raise error

    return targets


__all__ = [
    "TestFileAggregator",
    "TestTargets",
    "collect_tests",
    "group_test_files",
    "is_optimized_file",
    "list_test_files",
    "optimized_test_file_name",
]
