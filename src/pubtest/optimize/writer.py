# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Render the Dart source of an aggregator file."""

from __future__ import annotations

import os
from collections.abc import Iterable
from dataclasses import dataclass
from pathlib import Path, PurePosixPath
from typing import Final

GENERATED_HEADER: Final[str] = (
    "// GENERATED CODE - DO NOT MODIFY BY HAND\n"
    "// Aggregates the test files of this directory into a single entrypoint.\n"
    "// ignore_for_file: directives_ordering, no_leading_underscores_for_library_prefixes\n"
)
_DART_TEST_IMPORT: Final[str] = "package:test/test.dart"
_FLUTTER_TEST_IMPORT: Final[str] = "package:flutter_test/flutter_test.dart"


@dataclass(frozen=True, slots=True)
class Testable:
    """A test file registered inside an aggregator file."""

    __test__ = False

    absolute: Path
    optimized_path: Path

    @property
    def relative_to_optimized(self) -> str:
        """Return the import path of the test file as seen from the aggregator."""

        relative = os.path.relpath(self.absolute, self.optimized_path.parent)
        return PurePosixPath(*Path(relative).parts).as_posix()

    @property
    def test_name(self) -> str:
        """Return the group description used for the file's tests."""

        return self.relative_to_optimized


def _dart_string(value: str) -> str:
    escaped = value.replace("\\", "\\\\").replace("'", "\\'").replace("$", "\\$")
    return f"'{escaped}'"


def write_optimized_test_file(testables: Iterable[Testable], *, is_flutter_package: bool) -> str:
    """Return the content of an aggregator importing every ``testables`` entry.

    Each test file is imported under a numbered prefix and its ``main`` is
    invoked inside a ``group`` named after the file, so test names remain
    attributable to their source file.

    Args:
        testables: Test files grouped into this aggregator.
        is_flutter_package: Selects ``flutter_test`` instead of ``test``.

    Returns:
        str: Dart source for the aggregator file.
    """

    entries = list(testables)
    test_import = _FLUTTER_TEST_IMPORT if is_flutter_package else _DART_TEST_IMPORT

    lines = [GENERATED_HEADER, f"import {_dart_string(test_import)};", ""]
    for index, testable in enumerate(entries):
        lines.append(f"import {_dart_string(testable.relative_to_optimized)} as _i{index};")

    lines.extend(["", "void main() {"])
    for index, testable in enumerate(entries):
        lines.append(f"  group({_dart_string(testable.test_name)}, () {{")
        lines.append(f"    _i{index}.main();")
        lines.append("  });")
    lines.append("}")

    return "\n".join(lines) + "\n"


__all__ = ["GENERATED_HEADER", "Testable", "write_optimized_test_file"]
