# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command running the tests of one or more Dart/Flutter packages."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated, Any

import typer

from ...args import build_test_args
from ...config_loader import load_config
from ...discovery import ToolchainFilter
from ...errors import ExitCode, PubtestError
from ...orchestration import TestRunOptions, TestServices, run_tests
from ..core.shared import CLIError, build_cli_logger
from ..forwarded import parse_forwarded_args
from ..typer_ext import ForwardedArgsCommand

ROOT_OPTION = Annotated[Path, typer.Option("--root", help="Directory the run starts from.")]
RECURSIVE_OPTION = Annotated[
    bool | None,
    typer.Option("--recursive/--no-recursive", "-r", help="Also run tests of nested packages."),
]
CONCURRENT_OPTION = Annotated[
    bool | None,
    typer.Option("--concurrent/--no-concurrent", "-c", help="Run test commands in parallel."),
]
BAIL_OPTION = Annotated[
    bool | None,
    typer.Option("--bail/--no-bail", "-b", help="Stop launching commands after the first failure."),
]
JOBS_OPTION = Annotated[
    int | None,
    typer.Option("--jobs", "-j", min=1, help="Maximum concurrent commands (defaults to the batch size)."),
]
DART_ONLY_OPTION = Annotated[bool, typer.Option("--dart-only", help="Only run dart tests.")]
FLUTTER_ONLY_OPTION = Annotated[bool, typer.Option("--flutter-only", help="Only run flutter tests.")]
OPTIMIZE_OPTION = Annotated[
    bool | None,
    typer.Option("--optimize/--no-optimize", help="Merge test files into one entrypoint per group."),
]
VERBOSE_OPTION = Annotated[bool | None, typer.Option("--verbose/--quiet", "-v", help="Show detailed output.")]
EMOJI_OPTION = Annotated[bool | None, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]
COLOR_OPTION = Annotated[bool | None, typer.Option("--color/--no-color", help="Toggle colour output.")]


def _cli_overrides(
    *,
    recursive: bool | None,
    concurrent: bool | None,
    bail: bool | None,
    jobs: int | None,
    optimize: bool | None,
    verbose: bool | None,
    emoji: bool | None,
    color: bool | None,
) -> dict[str, Any]:
    return {
        "discovery": {"recursive": recursive},
        "execution": {"concurrent": concurrent, "bail": bail, "jobs": jobs},
        "optimize": {"enabled": optimize},
        "output": {"verbose": verbose, "emoji": emoji, "color": color},
    }


def test_command(
    ctx: typer.Context,
    root: ROOT_OPTION = Path("."),
    recursive: RECURSIVE_OPTION = None,
    concurrent: CONCURRENT_OPTION = None,
    bail: BAIL_OPTION = None,
    jobs: JOBS_OPTION = None,
    dart_only: DART_ONLY_OPTION = False,
    flutter_only: FLUTTER_ONLY_OPTION = False,
    optimize: OPTIMIZE_OPTION = None,
    verbose: VERBOSE_OPTION = None,
    emoji: EMOJI_OPTION = None,
    color: COLOR_OPTION = None,
) -> None:
    """Run dart and flutter tests across the packages below ``--root``.

    Unrecognised flags listed under the runner sections are forwarded to
    ``dart test`` and ``flutter test``.
    """

    resolved_root = root.resolve()
    fallback_logger = build_cli_logger(emoji=emoji is not False, color=color is not False)
    try:
        forwarded = parse_forwarded_args(ctx.args)
        config = load_config(
            resolved_root,
            overrides=_cli_overrides(
                recursive=recursive,
                concurrent=concurrent,
                bail=bail,
                jobs=jobs,
                optimize=optimize,
                verbose=verbose,
                emoji=emoji,
                color=color,
            ),
        )
    except (CLIError, PubtestError) as exc:
        fallback_logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc

    logger = build_cli_logger(
        emoji=config.output.emoji,
        color=config.output.color,
        verbose=config.output.verbose,
    )
    options = TestRunOptions(
        root=resolved_root,
        config=config,
        toolchain_filter=ToolchainFilter(dart_only=dart_only, flutter_only=flutter_only),
        test_args=build_test_args(forwarded),
    )

    try:
        exit_code = run_tests(options, services=TestServices(logger=logger))
    except PubtestError as exc:
        logger.fail(str(exc))
        raise typer.Exit(code=exc.exit_code) from exc
    except OSError as exc:
        logger.fail(f"Filesystem error: {exc}")
        raise typer.Exit(code=ExitCode.SOFTWARE) from exc

    raise typer.Exit(code=int(exit_code))


def register(app: typer.Typer) -> None:
    """Register the ``test`` command on ``app``."""

    app.command(
        "test",
        cls=ForwardedArgsCommand,
        context_settings={"allow_extra_args": True, "ignore_unknown_options": True},
    )(test_command)


__all__ = ["register", "test_command"]
