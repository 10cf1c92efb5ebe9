# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Declarative definitions of the arguments forwarded to ``dart test`` / ``flutter test``."""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Final


class ArgumentKind(StrEnum):
    """How an argument is rendered on the command line."""

    FLAG = "flag"
    OPTION = "option"
    MULTI = "multi"


class ArgumentGroup(StrEnum):
    """Which toolchain(s) accept an argument."""

    DART = "dart"
    FLUTTER = "flutter"
    BOTH = "both"
    CONFLICTING = "conflicting"


@dataclass(frozen=True, slots=True)
class TestArgument:
    """Definition of a single forwarded test runner argument."""

    __test__ = False

    name: str
    kind: ArgumentKind
    group: ArgumentGroup
    help: str

    @property
    def flag(self) -> str:
        return f"--{self.name}"

    @property
    def dest(self) -> str:
        """Return the key used for the parsed value of this argument."""

        return self.name.replace("-", "_")

    def render(self, value: object) -> list[str]:
        """Return command-line tokens for ``value``; unset values render nothing."""

        if value is None or value is False:
            return []
        if self.kind is ArgumentKind.FLAG:
            return [self.flag]
        if self.kind is ArgumentKind.MULTI:
            values = [value] if isinstance(value, str) else list(value)  # type: ignore[call-overload]
            return [f"{self.flag}={item}" for item in values if item]
        if value == "":
            return []
        return [f"{self.flag}={value}"]


TEST_ARGUMENTS: Final[tuple[TestArgument, ...]] = (
    # dart test only
    TestArgument("chain-stack-traces", ArgumentKind.FLAG, ArgumentGroup.DART, "Use chained stack traces."),
    TestArgument("no-retry", ArgumentKind.FLAG, ArgumentGroup.DART, "Do not retry failed tests."),
    TestArgument("platform", ArgumentKind.MULTI, ArgumentGroup.DART, "Platform(s) on which to run the tests."),
    TestArgument("compiler", ArgumentKind.MULTI, ArgumentGroup.DART, "Compiler(s) to use when running tests."),
    TestArgument("preset", ArgumentKind.MULTI, ArgumentGroup.DART, "Configuration preset(s) to use."),
    # flutter test only
    TestArgument("update-goldens", ArgumentKind.FLAG, ArgumentGroup.FLUTTER, "Update golden files."),
    TestArgument("flavor", ArgumentKind.OPTION, ArgumentGroup.FLUTTER, "Build flavor to test."),
    TestArgument("dart-define", ArgumentKind.MULTI, ArgumentGroup.FLUTTER, "Compile-time KEY=VALUE definitions."),
    TestArgument(
        "test-randomize-ordering-seed",
        ArgumentKind.OPTION,
        ArgumentGroup.FLUTTER,
        "Seed used to randomize test ordering.",
    ),
    TestArgument("no-pub", ArgumentKind.FLAG, ArgumentGroup.FLUTTER, "Skip running 'flutter pub get'."),
    # accepted by both runners
    TestArgument("name", ArgumentKind.MULTI, ArgumentGroup.BOTH, "Run tests whose name matches a regex."),
    TestArgument("plain-name", ArgumentKind.MULTI, ArgumentGroup.BOTH, "Run tests whose name contains a string."),
    TestArgument("tags", ArgumentKind.MULTI, ArgumentGroup.BOTH, "Run only tests with the given tag(s)."),
    TestArgument("exclude-tags", ArgumentKind.MULTI, ArgumentGroup.BOTH, "Skip tests with the given tag(s)."),
    TestArgument("concurrency", ArgumentKind.OPTION, ArgumentGroup.BOTH, "Number of concurrent test suites."),
    TestArgument("timeout", ArgumentKind.OPTION, ArgumentGroup.BOTH, "Default per-test timeout."),
    TestArgument("reporter", ArgumentKind.OPTION, ArgumentGroup.BOTH, "Test result reporter."),
    TestArgument("run-skipped", ArgumentKind.FLAG, ArgumentGroup.BOTH, "Run skipped tests instead of skipping them."),
    TestArgument("fail-fast", ArgumentKind.FLAG, ArgumentGroup.BOTH, "Stop a runner after its first failure."),
    # same intent, different syntax per runner
    TestArgument("coverage", ArgumentKind.OPTION, ArgumentGroup.CONFLICTING, "Directory receiving coverage output."),
)


def arguments_in(group: ArgumentGroup) -> tuple[TestArgument, ...]:
    """Return the argument definitions belonging to ``group``."""

    return tuple(argument for argument in TEST_ARGUMENTS if argument.group is group)


def _render_conflicting(argument: TestArgument, value: object, *, flutter: bool) -> list[str]:
    if value is None or value == "":
        return []
    if argument.name == "coverage":
        if flutter:
            return ["--coverage", f"--coverage-path={value}/lcov.info"]
        return [f"--coverage={value}"]
    return argument.render(value)


@dataclass(frozen=True, slots=True)
class TestArgs:
    """Argument lists forwarded to each runner, built once per invocation."""

    __test__ = False

    both: tuple[str, ...] = ()
    dart: tuple[str, ...] = ()
    flutter: tuple[str, ...] = ()
    conflicting_dart: tuple[str, ...] = ()
    conflicting_flutter: tuple[str, ...] = ()

    def for_dart(self) -> list[str]:
        """Return every argument ``dart test`` should receive."""

        return [*self.dart, *self.both, *self.conflicting_dart]

    def for_flutter(self) -> list[str]:
        """Return every argument ``flutter test`` should receive."""

        return [*self.flutter, *self.both, *self.conflicting_flutter]


def build_test_args(values: Mapping[str, object], definitions: Sequence[TestArgument] = TEST_ARGUMENTS) -> TestArgs:
    """Render parsed ``values`` (keyed by :attr:`TestArgument.dest`) into :class:`TestArgs`.

    Args:
        values: Parsed argument values; missing keys are treated as unset.
        definitions: Argument definitions to render.

    Returns:
        TestArgs: Per-runner argument lists.
    """

    rendered: dict[ArgumentGroup, list[str]] = {group: [] for group in ArgumentGroup}
    conflicting_dart: list[str] = []
    conflicting_flutter: list[str] = []

    for argument in definitions:
        value = values.get(argument.dest)
        if argument.group is ArgumentGroup.CONFLICTING:
            conflicting_dart.extend(_render_conflicting(argument, value, flutter=False))
            conflicting_flutter.extend(_render_conflicting(argument, value, flutter=True))
            continue
        rendered[argument.group].extend(argument.render(value))

    return TestArgs(
        both=tuple(rendered[ArgumentGroup.BOTH]),
        dart=tuple(rendered[ArgumentGroup.DART]),
        flutter=tuple(rendered[ArgumentGroup.FLUTTER]),
        conflicting_dart=tuple(conflicting_dart),
        conflicting_flutter=tuple(conflicting_flutter),
    )


__all__ = [
    "ArgumentGroup",
    "ArgumentKind",
    "TEST_ARGUMENTS",
    "TestArgs",
    "TestArgument",
    "arguments_in",
    "build_test_args",
]
