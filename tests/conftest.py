# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator, Sequence
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path

import pytest


@dataclass
class RecordingReporter:
    """Reporter collecting every message it receives, keyed by level."""

    messages: list[tuple[str, str]] = field(default_factory=list)
    tables: list[tuple[str, tuple[str, ...], list[tuple[str, ...]]]] = field(default_factory=list)

    def detail(self, message: str) -> None:
        self.messages.append(("detail", message))

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def ok(self, message: str) -> None:
        self.messages.append(("ok", message))

    def warn(self, message: str) -> None:
        self.messages.append(("warn", message))

    def fail(self, message: str) -> None:
        self.messages.append(("fail", message))

    @contextmanager
    def progress(self, message: str) -> Iterator[None]:
        self.messages.append(("progress", message))
        yield

    def table(self, title: str, columns: Sequence[str], rows: Sequence[Sequence[str]]) -> None:
        self.tables.append((title, tuple(columns), [tuple(row) for row in rows]))

    def at(self, level: str) -> list[str]:
        return [message for kind, message in self.messages if kind == level]


@pytest.fixture
def reporter() -> RecordingReporter:
    """Return a reporter recording messages in memory."""

    return RecordingReporter()


DART_PUBSPEC = "name: {name}\nenvironment:\n  sdk: ^3.0.0\ndev_dependencies:\n  test: ^1.24.0\n"
FLUTTER_PUBSPEC = (
    "name: {name}\n"
    "environment:\n  sdk: ^3.0.0\n"
    "dependencies:\n  flutter:\n    sdk: flutter\n"
    "dev_dependencies:\n  flutter_test:\n    sdk: flutter\n"
)


@pytest.fixture
def make_package() -> Callable[..., Path]:
    """Return a factory creating a package with a manifest and test files."""

    def _make(
        root: Path,
        name: str,
        *,
        flutter: bool = False,
        tests: dict[str, str] | None = None,
    ) -> Path:
        package = root / name
        package.mkdir(parents=True, exist_ok=True)
        template = FLUTTER_PUBSPEC if flutter else DART_PUBSPEC
        (package / "pubspec.yaml").write_text(template.format(name=name.replace("/", "_")), encoding="utf-8")
        for relative, content in (tests or {}).items():
            target = package / "test" / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        return package

    return _make
