# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Custom Typer helpers for consistent, sorted CLI help output."""

from __future__ import annotations

from collections.abc import Callable, Iterable
from typing import Any, Final, TypeVar

import typer
from click.core import Context, Parameter
from click.formatting import HelpFormatter
from typer.core import TyperCommand, TyperGroup

from ..args import ArgumentGroup, ArgumentKind, arguments_in

ARGUMENT_PARAM_TYPE: Final[str] = "argument"

_FORWARDED_SECTIONS: Final[tuple[tuple[str, ArgumentGroup], ...]] = (
    ("Dart Flags", ArgumentGroup.DART),
    ("Flutter Flags", ArgumentGroup.FLUTTER),
    ("Overlapping Flags", ArgumentGroup.BOTH),
    ("Conflicting Flags", ArgumentGroup.CONFLICTING),
)


def _primary_option_name(param: Parameter) -> str:
    """Return the canonical name used for sorting a Click parameter."""

    option_names: Iterable[str] = tuple(getattr(param, "opts", ())) + tuple(
        getattr(param, "secondary_opts", ()),
    )
    long_names = [name for name in option_names if name.startswith("--")]
    candidate = long_names[0] if long_names else (next(iter(option_names), "") or param.name or "")
    return candidate.lstrip("-").lower()


class SortedTyperCommand(TyperCommand):
    """Typer command that renders options in sorted order within help output."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        """Render positional arguments and sorted options within CLI help.

        Args:
            ctx: Click context describing the application invocation.
            formatter: Click help formatter used to emit definition lists.
        """

        argument_records: list[tuple[str, str]] = []
        option_entries: list[tuple[tuple[str, int], tuple[str, str]]] = []

        for index, param in enumerate(self.get_params(ctx)):
            record = param.get_help_record(ctx)
            if record is None:
                continue
            if getattr(param, "param_type_name", "") == ARGUMENT_PARAM_TYPE:
                argument_records.append(record)
                continue
            option_entries.append(((_primary_option_name(param), index), record))

        if argument_records:
            with formatter.section("Arguments"):
                formatter.write_dl(argument_records)

        if option_entries:
            sorted_records = [entry for _, entry in sorted(option_entries, key=lambda item: item[0])]
            with formatter.section("Options"):
                formatter.write_dl(sorted_records)


class ForwardedArgsCommand(SortedTyperCommand):
    """Command whose help also lists the flags forwarded to the test runners."""

    def format_options(self, ctx: Context, formatter: HelpFormatter) -> None:
        super().format_options(ctx, formatter)
        for title, group in _FORWARDED_SECTIONS:
            records = []
            for argument in arguments_in(group):
                metavar = "" if argument.kind is ArgumentKind.FLAG else "=VALUE"
                suffix = " (repeatable)" if argument.kind is ArgumentKind.MULTI else ""
                records.append((f"{argument.flag}{metavar}", f"{argument.help}{suffix}"))
            with formatter.section(title):
                formatter.write_dl(records)


class SortedTyperGroup(TyperGroup):
    """Typer group that defaults to using :class:`SortedTyperCommand`."""

    command_class = SortedTyperCommand


CommandCallback = TypeVar("CommandCallback", bound=Callable[..., Any])


class SortedTyper(typer.Typer):
    """Typer application that emits sorted option listings by default."""

    def __init__(self, *args: Any, cls: type[TyperGroup] | None = None, **kwargs: Any) -> None:
        super().__init__(*args, cls=cls or SortedTyperGroup, **kwargs)

    def command(
        self,
        name: str | None = None,
        *,
        cls: type[TyperCommand] | None = None,
        **kwargs: Any,
    ) -> Callable[[CommandCallback], CommandCallback]:
        """Return a decorator that registers commands using sorted help output."""

        return super().command(name, cls=cls or SortedTyperCommand, **kwargs)


def create_typer(*, cls: type[TyperGroup] | None = None, **kwargs: Any) -> SortedTyper:
    """Return a :class:`SortedTyper` configured to emit sorted help listings.

    Rich help rendering is disabled by default because it bypasses
    :meth:`SortedTyperCommand.format_options`.
    """

    kwargs.setdefault("rich_markup_mode", None)
    return SortedTyper(cls=cls, **kwargs)


__all__ = ["ForwardedArgsCommand", "SortedTyper", "SortedTyperCommand", "create_typer"]
