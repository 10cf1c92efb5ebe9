# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Parse the extra command-line tokens forwarded to ``dart test``/``flutter test``."""

from __future__ import annotations

from collections.abc import Sequence

from ..args import TEST_ARGUMENTS, ArgumentKind, TestArgument
from ..errors import ExitCode
from .core.shared import CLIError

_BY_NAME: dict[str, TestArgument] = {argument.name: argument for argument in TEST_ARGUMENTS}


def parse_forwarded_args(tokens: Sequence[str]) -> dict[str, object]:
    """Return parsed values keyed by :attr:`TestArgument.dest`.

    Accepts ``--flag``, ``--option=value`` and ``--option value``; repeatable
    options accumulate into lists.

    Raises:
        CLIError: On unknown options, stray positionals, or missing values.
    """

    values: dict[str, object] = {}
    index = 0
    while index < len(tokens):
        token = tokens[index]
        index += 1
        if not token.startswith("--"):
            raise CLIError(f"Unexpected argument: {token}", exit_code=ExitCode.USAGE)

        name, has_value, value = token[2:].partition("=")
        argument = _BY_NAME.get(name)
        if argument is None:
            raise CLIError(f"Unknown option: --{name}", exit_code=ExitCode.USAGE)

        if argument.kind is ArgumentKind.FLAG:
            if has_value:
                raise CLIError(f"Option --{name} does not take a value", exit_code=ExitCode.USAGE)
            values[argument.dest] = True
            continue

        if not has_value:
            if index >= len(tokens):
                raise CLIError(f"Option --{name} requires a value", exit_code=ExitCode.USAGE)
            value = tokens[index]
            index += 1

        if argument.kind is ArgumentKind.MULTI:
            collected = values.get(argument.dest)
            if not isinstance(collected, list):
                collected = []
                values[argument.dest] = collected
            collected.append(value)
        else:
            values[argument.dest] = value

    return values


__all__ = ["parse_forwarded_args"]
