# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Wire discovery, aggregation, command construction, execution and cleanup."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path

from ..args import TestArgs
from ..clean import optimized_files
from ..config import Config
from ..core.runtime import run_shell_command
from ..discovery import NoTestsFoundError, TestDirectoryResolver, ToolchainFilter, describe_filter
from ..interfaces import CommandRunner, Reporter
from ..manifest import PubspecLock, PubspecYaml, collect_pubspecs
from ..optimize import BindingClassifier, ContentClassifier, TestFileAggregator, collect_tests
from ..toolchain import ToolchainClassifier
from .commands import build_commands
from .engine import ExecutionEngine


@dataclass(slots=True)
class TestServices:
    """Collaborators injected into every stage of a test run."""

    __test__ = False

    logger: Reporter
    runner: CommandRunner = run_shell_command
    manifest_reader: PubspecYaml | None = None
    lock_reader: PubspecLock = field(default_factory=PubspecLock)
    content_classifier: ContentClassifier = field(default_factory=BindingClassifier)

    def classifier_for(self, pubspec: Path) -> ToolchainClassifier:
        return ToolchainClassifier(pubspec, lock_reader=self.lock_reader)


@dataclass(frozen=True, slots=True)
class TestRunOptions:
    """Resolved inputs of a single ``pubtest test`` invocation."""

    __test__ = False

    root: Path
    config: Config = field(default_factory=Config)
    toolchain_filter: ToolchainFilter = field(default_factory=ToolchainFilter)
    test_args: TestArgs = field(default_factory=TestArgs)


def run_tests(options: TestRunOptions, *, services: TestServices) -> int:
    """Run the test pipeline and return the process exit status.

    Discovery failures return before any command runs. Aggregator files
    written during the run are removed on every exit path, including
    exceptions raised while writing them.

    Args:
        options: Invocation inputs.
        services: Injected collaborators.

    Returns:
        int: Exit status reduced from every executed command.
    """

    logger = services.logger
    config = options.config

    if (message := describe_filter(options.toolchain_filter)) is not None:
        logger.info(message)

    reader = services.manifest_reader or PubspecYaml(options.root)
    pubspecs = collect_pubspecs(reader, recursive=config.discovery.recursive, logger=logger)

    resolver = TestDirectoryResolver(
        logger=logger,
        classifier_factory=services.classifier_for,
        test_dir_name=config.discovery.test_dir_name,
    )
    aggregator = TestFileAggregator(
        logger=logger,
        content_classifier=services.content_classifier,
        pattern=config.discovery.test_glob,
    )

    with optimized_files(aggregator.written, logger=logger):
        try:
            test_dirs = resolver.resolve(pubspecs, options.toolchain_filter)
            targets = collect_tests(test_dirs, optimize=config.optimize.enabled, aggregator=aggregator, logger=logger)
        except NoTestsFoundError as exc:
            return exc.exit_code

        commands = build_commands(
            targets,
            dart_args=options.test_args.for_dart(),
            flutter_args=options.test_args.for_flutter(),
            cwd=options.root,
            test_dir_name=config.discovery.test_dir_name,
            logger=logger,
        )
        engine = ExecutionEngine(runner=services.runner, logger=logger, max_workers=config.execution.jobs)
        return engine.run(commands, concurrent=config.execution.concurrent, bail=config.execution.bail)


__all__ = ["TestRunOptions", "TestServices", "run_tests"]
