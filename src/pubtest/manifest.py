# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Locate and parse ``pubspec.yaml`` manifests and ``pubspec.lock`` files."""

from __future__ import annotations

import os
from collections.abc import Iterator, Mapping
from pathlib import Path
from typing import Any

import yaml

from .constants import IGNORED_PACKAGE_DIRS, PUBSPEC_LOCK, PUBSPEC_YAML
from .errors import ManifestError
from .interfaces import Reporter


def _load_yaml(path: Path) -> Mapping[str, Any]:
    """Return the YAML mapping stored at ``path``.

    Args:
        path: YAML document to parse.

    Returns:
        Mapping[str, Any]: Parsed document; empty documents yield an empty mapping.

    Raises:
        ManifestError: If the document is not UTF-8, is malformed, or is not a mapping.
    """

    try:
        with path.open(encoding="utf-8") as handle:
            data = yaml.safe_load(handle)
    except yaml.YAMLError as exc:
        raise ManifestError(f"Failed to parse {path}: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(f"{path} is not valid UTF-8: {exc}") from exc
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise ManifestError(f"{path} must contain a YAML mapping")
    return data


def _find_upwards(start: Path, filename: str) -> Path | None:
    for directory in (start, *start.parents):
        candidate = directory / filename
        if candidate.is_file():
            return candidate
    return None


class PubspecYaml:
    """Find package manifests relative to a working directory."""

    def __init__(self, cwd: Path | None = None) -> None:
        self.cwd = (cwd or Path.cwd()).resolve()

    def nearest(self) -> Path | None:
        """Return the closest ``pubspec.yaml`` at or above :attr:`cwd`."""

        return _find_upwards(self.cwd, PUBSPEC_YAML)

    def children(self) -> list[Path]:
        """Return every ``pubspec.yaml`` strictly below :attr:`cwd`.

        Hidden directories (``.dart_tool``, ``.git``...) and build output are
        never descended into, and symlinked directories are not followed.

        Returns:
            list[Path]: Sorted manifest paths.
        """

        return sorted(self._walk_children())

    def _walk_children(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.cwd, followlinks=False):
            dirnames[:] = [
                name for name in dirnames if not name.startswith(".") and name not in IGNORED_PACKAGE_DIRS
            ]
            current = Path(dirpath)
            if current == self.cwd:
                continue
            if PUBSPEC_YAML in filenames:
                yield current / PUBSPEC_YAML

    @staticmethod
    def parse(path: Path) -> Mapping[str, Any]:
        """Return the parsed manifest stored at ``path``."""

        return _load_yaml(path)


class PubspecLock:
    """Find and parse ``pubspec.lock`` files."""

    @staticmethod
    def find_in(directory: Path) -> Path | None:
        """Return the nearest lockfile at or above ``directory``.

        Workspace members share the lockfile of the workspace root, hence the
        upward search.
        """

        return _find_upwards(directory.resolve(), PUBSPEC_LOCK)

    @staticmethod
    def parse(path: Path) -> Mapping[str, Any]:
        """Return the parsed lockfile stored at ``path``."""

        return _load_yaml(path)


def collect_pubspecs(reader: PubspecYaml, *, recursive: bool, logger: Reporter | None = None) -> list[Path]:
    """Return the manifests a test run should consider.

    Args:
        reader: Manifest locator bound to the invocation directory.
        recursive: When ``True`` include manifests of nested packages.
        logger: Optional reporter receiving verbose diagnostics.

    Returns:
        list[Path]: Ordered, de-duplicated manifest paths.
    """

    pubspecs: dict[Path, None] = {}

    nearest = reader.nearest()
    if nearest is not None:
        pubspecs[nearest] = None

    if recursive:
        if logger is not None:
            logger.detail("Running tests recursively")
        for child in reader.children():
            pubspecs.setdefault(child, None)

    return list(pubspecs)


__all__ = ["PubspecLock", "PubspecYaml", "collect_pubspecs"]
