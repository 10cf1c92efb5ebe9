# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Run batches of test commands sequentially or concurrently."""

from __future__ import annotations

import threading
import time
from collections.abc import Callable, Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass
from textwrap import shorten
from typing import Final

from ..errors import ExitCode
from ..interfaces import CommandRunner, Reporter
from .commands import CommandDescriptor

SPAWN_FAILURE_EXIT_CODE: Final[int] = 127


@dataclass(frozen=True, slots=True)
class ExecutionResult:
    """Outcome of a single command descriptor."""

    descriptor: CommandDescriptor
    exit_code: int
    output: str = ""
    duration: float = 0.0
    skipped: bool = False

    @property
    def succeeded(self) -> bool:
        return not self.skipped and self.exit_code == ExitCode.SUCCESS

    @property
    def failed(self) -> bool:
        return not self.skipped and self.exit_code != ExitCode.SUCCESS


def reduce_exit_codes(results: Iterable[ExecutionResult]) -> int:
    """Return the single exit status representing ``results``.

    Success only when every executed result succeeded; otherwise the first
    failure in submission order wins. Results skipped after a bail carry no
    status of their own.
    """

    for result in results:
        if result.failed:
            return result.exit_code
    return ExitCode.SUCCESS


def format_elapsed(seconds: float) -> str:
    """Return a compact human-readable duration."""

    if seconds < 1:
        return f"{int(seconds * 1000)}ms"
    if seconds < 60:
        return f"{seconds:.1f}s"
    minutes, remainder = divmod(int(seconds), 60)
    return f"{minutes}m {remainder}s"


class ExecutionEngine:
    """Execute command descriptors and reduce their statuses.

    Spawn failures, including command lines that cannot be split, are folded
    into the results with :data:`SPAWN_FAILURE_EXIT_CODE`; nothing raised by
    the runner escapes :meth:`run` except programming errors.
    """

    def __init__(
        self,
        *,
        runner: CommandRunner,
        logger: Reporter,
        max_workers: int | None = None,
        clock: Callable[[], float] = time.perf_counter,
    ) -> None:
        self._runner = runner
        self._logger = logger
        self._max_workers = max_workers
        self._clock = clock

    def run(self, commands: Sequence[CommandDescriptor], *, concurrent: bool, bail: bool) -> int:
        """Run ``commands`` and return the aggregate exit status.

        Args:
            commands: Descriptors in submission order.
            concurrent: When ``True`` run the batch in parallel.
            bail: Stop launching new commands after the first failure.

        Returns:
            int: Reduced exit status (``0`` on success).
        """

        if not commands:
            return ExitCode.SUCCESS
        if concurrent:
            results = self.run_concurrent(commands, bail=bail)
            report_failures(results, self._logger)
            return reduce_exit_codes(results)
        return self.run_sequential(commands, bail=bail)

    def run_sequential(self, commands: Sequence[CommandDescriptor], *, bail: bool) -> int:
        """Run ``commands`` one at a time in order.

        Without ``bail`` every command runs and the last failure is returned.
        """

        exit_code: int | None = None

        for command in commands:
            self._logger.detail(command.command)
            self._logger.info(command.label)

            result = self._execute(command, capture_output=False)

            self._logger.info(f"Finished in {format_elapsed(result.duration)}\n")

            if not result.succeeded:
                if result.output:
                    self._logger.fail(result.output)
                exit_code = result.exit_code
                if bail:
                    return exit_code

        return ExitCode.SUCCESS if exit_code is None else exit_code

    def run_concurrent(self, commands: Sequence[CommandDescriptor], *, bail: bool) -> list[ExecutionResult]:
        """Run ``commands`` in parallel and return results in submission order.

        When ``bail`` is set a shared flag is raised on the first failure;
        every worker checks it immediately before spawning and records a
        skipped result instead of launching. Running processes are left to
        finish.
        """

        for command in commands:
            self._logger.detail(f"Script: {command.command}")

        bail_flag = threading.Event()
        results: list[ExecutionResult | None] = [None] * len(commands)
        workers = self._max_workers or len(commands)

        def _work(command: CommandDescriptor) -> ExecutionResult:
            if bail and bail_flag.is_set():
                return ExecutionResult(descriptor=command, exit_code=ExitCode.SUCCESS, skipped=True)
            result = self._execute(command, capture_output=True)
            if bail and result.failed:
                bail_flag.set()
            return result

        with self._logger.progress("Running tests"):
            with ThreadPoolExecutor(max_workers=workers) as executor:
                future_map = {executor.submit(_work, command): index for index, command in enumerate(commands)}
                for future in as_completed(future_map):
                    results[future_map[future]] = future.result()

        return [result for result in results if result is not None]

    def _execute(self, command: CommandDescriptor, *, capture_output: bool) -> ExecutionResult:
        started = self._clock()
        try:
            completed = self._runner(
                command.command,
                cwd=command.working_directory,
                capture_output=capture_output,
            )
        except (OSError, ValueError) as exc:
            return ExecutionResult(
                descriptor=command,
                exit_code=SPAWN_FAILURE_EXIT_CODE,
                output=str(exc),
                duration=self._clock() - started,
            )

        output = "\n".join(part for part in (completed.stdout, completed.stderr) if part)
        return ExecutionResult(
            descriptor=command,
            exit_code=completed.returncode,
            output=output,
            duration=self._clock() - started,
        )


def report_failures(results: Sequence[ExecutionResult], logger: Reporter) -> None:
    """Render a table listing every failing command of a batch."""

    failures = [result for result in results if result.failed]
    skipped = sum(1 for result in results if result.skipped)
    if skipped:
        logger.warn(f"Skipped {skipped} command(s) after a failure")
    if not failures:
        return

    rows = [
        (result.descriptor.label, str(result.exit_code), _last_non_empty_line(result.output) or "")
        for result in failures
    ]
    logger.table("Failed test commands", ("Command", "Exit", "Details"), rows)


def _last_non_empty_line(text: str) -> str | None:
    """Return the last non-empty line of ``text`` truncated for readability."""

    for raw_line in reversed(text.splitlines()):
        hint = raw_line.strip()
        if hint:
            return shorten(hint, width=160, placeholder="…")
    return None


__all__ = [
    "ExecutionEngine",
    "ExecutionResult",
    "SPAWN_FAILURE_EXIT_CODE",
    "format_elapsed",
    "reduce_exit_codes",
    "report_failures",
]
