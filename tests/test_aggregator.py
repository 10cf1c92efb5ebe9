# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for test file grouping and aggregator synthesis."""

from __future__ import annotations

from pathlib import Path

import pytest

from pubtest.discovery import NoTestsFoundError
from pubtest.errors import ExitCode, PubtestError
from pubtest.optimize import (
    BindingClassifier,
    TestFileAggregator,
    collect_tests,
    group_test_files,
    is_optimized_file,
    list_test_files,
    optimized_test_file_name,
)
from pubtest.optimize.writer import GENERATED_HEADER, Testable, write_optimized_test_file
from pubtest.toolchain import ToolchainClassifier, ToolchainKind

PLAIN_TEST = "import 'package:test/test.dart';\nvoid main() { test('a', () {}); }\n"
WIDGET_TEST = "import 'package:flutter_test/flutter_test.dart';\nvoid main() { testWidgets('w', (t) async {}); }\n"
INTEGRATION_TEST = (
    "import 'package:integration_test/integration_test.dart';\n"
    "void main() {\n  IntegrationTestWidgetsFlutterBinding.ensureInitialized();\n}\n"
)
BINDING_TEST = "void main() {\n  TestWidgetsFlutterBinding.ensureInitialized();\n}\n"


def _test_dir(root: Path, files: dict[str, str]) -> Path:
    test_dir = root / "test"
    for relative, content in files.items():
        target = test_dir / relative
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(content, encoding="utf-8")
    return test_dir


def _classifier(root: Path, kind: ToolchainKind) -> ToolchainClassifier:
    return ToolchainClassifier(root / "pubspec.yaml", kind=kind)


@pytest.mark.parametrize(
    ("content", "label"),
    [
        (INTEGRATION_TEST, "integration"),
        (BINDING_TEST, "test"),
        ("final binding = AutomatedTestWidgetsFlutterBinding();", "automated"),
        (WIDGET_TEST, None),
    ],
)
def test_binding_classifier(content: str, label: str | None) -> None:
    assert BindingClassifier().classify(content) == label


def test_optimized_file_names() -> None:
    assert optimized_test_file_name("dart") == ".test_optimizer.dart"
    assert optimized_test_file_name("flutter") == ".test_optimizer.dart"
    assert optimized_test_file_name("integration") == ".test_optimizer.integration.dart"
    assert is_optimized_file(Path("test/.test_optimizer.integration.dart"))
    assert not is_optimized_file(Path("test/widget_test.dart"))


def test_list_test_files_is_sorted_and_recursive(tmp_path: Path) -> None:
    test_dir = _test_dir(
        tmp_path,
        {"b_test.dart": PLAIN_TEST, "a_test.dart": PLAIN_TEST, "nested/c_test.dart": PLAIN_TEST, "helpers.dart": ""},
    )

    assert list_test_files(test_dir) == [
        test_dir / "a_test.dart",
        test_dir / "b_test.dart",
        test_dir / "nested" / "c_test.dart",
    ]


def test_list_test_files_ignores_symlinks(tmp_path: Path) -> None:
    test_dir = _test_dir(tmp_path, {"real_test.dart": PLAIN_TEST})
    (test_dir / "link_test.dart").symlink_to(test_dir / "real_test.dart")

    assert list_test_files(test_dir) == [test_dir / "real_test.dart"]


def test_dart_files_are_not_read(tmp_path: Path, reporter) -> None:
    test_dir = _test_dir(tmp_path, {"a_test.dart": INTEGRATION_TEST})
    groups = group_test_files(list_test_files(test_dir), _classifier(tmp_path, ToolchainKind.DART), logger=reporter)

    assert groups == {"dart": [test_dir / "a_test.dart"]}


def test_flutter_files_partition_by_binding(tmp_path: Path, reporter) -> None:
    test_dir = _test_dir(
        tmp_path,
        {"widget_test.dart": WIDGET_TEST, "app_test.dart": INTEGRATION_TEST, "binding_test.dart": BINDING_TEST},
    )
    files = list_test_files(test_dir)

    groups = group_test_files(files, _classifier(tmp_path, ToolchainKind.FLUTTER), logger=reporter)

    assert groups == {
        "integration": [test_dir / "app_test.dart"],
        "test": [test_dir / "binding_test.dart"],
        "flutter": [test_dir / "widget_test.dart"],
    }
    assert sorted(path for paths in groups.values() for path in paths) == files
    assert "Found Flutter integration test" in reporter.at("detail")


def test_write_optimized_files_creates_one_file_per_group(tmp_path: Path, reporter) -> None:
    test_dir = _test_dir(tmp_path, {"widget_test.dart": WIDGET_TEST, "app_test.dart": INTEGRATION_TEST})
    tool = _classifier(tmp_path, ToolchainKind.FLUTTER)
    aggregator = TestFileAggregator(logger=reporter)

    targets = aggregator.write_optimized_files({test_dir: tool})

    assert list(targets) == [test_dir / ".test_optimizer.integration.dart", test_dir / ".test_optimizer.dart"]
    assert all(value is tool for value in targets.values())
    assert aggregator.written == list(targets)
    content = (test_dir / ".test_optimizer.dart").read_text(encoding="utf-8")
    assert "import 'package:flutter_test/flutter_test.dart';" in content
    assert "import 'widget_test.dart' as _i0;" in content
    assert "app_test.dart" not in content


def test_write_optimized_files_is_idempotent(tmp_path: Path, reporter) -> None:
    test_dir = _test_dir(tmp_path, {"a_test.dart": PLAIN_TEST, "nested/b_test.dart": PLAIN_TEST})
    tool = _classifier(tmp_path, ToolchainKind.DART)

    TestFileAggregator(logger=reporter).write_optimized_files({test_dir: tool})
    first = (test_dir / ".test_optimizer.dart").read_text(encoding="utf-8")
    TestFileAggregator(logger=reporter).write_optimized_files({test_dir: tool})
    second = (test_dir / ".test_optimizer.dart").read_text(encoding="utf-8")

    assert first == second
    assert ".test_optimizer" not in first.replace(GENERATED_HEADER, "")
    assert "import 'nested/b_test.dart' as _i1;" in second


def test_write_optimized_files_skips_empty_directories(tmp_path: Path, reporter) -> None:
    empty = tmp_path / "empty" / "test"
    empty.mkdir(parents=True)
    aggregator = TestFileAggregator(logger=reporter)

    assert aggregator.write_optimized_files({empty: _classifier(tmp_path / "empty", ToolchainKind.DART)}) == {}
    assert aggregator.written == []


def test_writer_renders_groups_per_file(tmp_path: Path) -> None:
    optimized = tmp_path / "test" / ".test_optimizer.dart"
    testables = [
        Testable(absolute=tmp_path / "test" / "a_test.dart", optimized_path=optimized),
        Testable(absolute=tmp_path / "test" / "sub" / "b_test.dart", optimized_path=optimized),
    ]

    content = write_optimized_test_file(testables, is_flutter_package=False)

    assert content.startswith(GENERATED_HEADER)
    assert "import 'package:test/test.dart';" in content
    assert "import 'sub/b_test.dart' as _i1;" in content
    assert "  group('a_test.dart', () {\n    _i0.main();\n  });" in content
    assert content.rstrip().endswith("}")


def test_collect_tests_without_optimization_returns_directories(tmp_path: Path, reporter) -> None:
    test_dir = _test_dir(tmp_path, {"a_test.dart": PLAIN_TEST})
    tool = _classifier(tmp_path, ToolchainKind.DART)
    aggregator = TestFileAggregator(logger=reporter)

    targets = collect_tests({test_dir: tool}, optimize=False, aggregator=aggregator, logger=reporter)

    assert targets == {test_dir: tool}
    assert reporter.at("warn") == ["Running tests without optimization"]
    assert not (test_dir / ".test_optimizer.dart").exists()


def test_collect_tests_raises_without_test_files(tmp_path: Path, reporter) -> None:
    test_dir = _test_dir(tmp_path, {"helpers.dart": ""})
    aggregator = TestFileAggregator(logger=reporter)

    with pytest.raises(NoTestsFoundError):
        collect_tests(
            {test_dir: _classifier(tmp_path, ToolchainKind.DART)},
            optimize=True,
            aggregator=aggregator,
            logger=reporter,
        )

    assert reporter.at("fail") == ["No tests found"]


def test_undecodable_flutter_test_file_raises(tmp_path: Path, reporter) -> None:
    test_dir = tmp_path / "test"
    test_dir.mkdir()
    (test_dir / "broken_test.dart").write_bytes(b"void main() {}\n\xff\xfe\n")
    aggregator = TestFileAggregator(logger=reporter)

    with pytest.raises(PubtestError, match="not valid UTF-8") as excinfo:
        aggregator.write_optimized_files({test_dir: _classifier(tmp_path, ToolchainKind.FLUTTER)})

    assert excinfo.value.exit_code == ExitCode.SOFTWARE
