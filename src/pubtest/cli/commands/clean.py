# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""CLI command removing aggregator files left behind by interrupted runs."""

from __future__ import annotations

import os
from pathlib import Path
from typing import Annotated

import typer

from ...clean import sweep_stale_optimized_files
from ..core.shared import build_cli_logger

ROOT_OPTION = Annotated[Path, typer.Option("--root", "-r", help="Directory scanned recursively.")]
DRY_RUN_OPTION = Annotated[bool, typer.Option("--dry-run", help="Show what would be removed.")]
EMOJI_OPTION = Annotated[bool, typer.Option("--emoji/--no-emoji", help="Toggle emoji output.")]


def clean_command(
    root: ROOT_OPTION = Path("."),
    dry_run: DRY_RUN_OPTION = False,
    emoji: EMOJI_OPTION = True,
) -> None:
    """Remove optimized test files left in the working tree."""

    logger = build_cli_logger(emoji=emoji)
    resolved_root = root.resolve()
    result = sweep_stale_optimized_files(resolved_root, dry_run=dry_run)

    if dry_run:
        logger.echo("DRY RUN - the following files would be removed:")
        for path in result.skipped:
            logger.echo(f"  {os.path.relpath(path, resolved_root)}")
        logger.ok(f"Dry run complete; {len(result.skipped)} files would be removed")
    else:
        logger.ok(f"Removed {len(result.removed)} optimized test files")
    raise typer.Exit(code=0)


def register(app: typer.Typer) -> None:
    """Register the ``clean`` command on ``app``."""

    app.command("clean")(clean_command)


__all__ = ["clean_command", "register"]
