# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Decide whether a package runs its tests with ``dart`` or ``flutter``."""

from __future__ import annotations

from collections.abc import Mapping
from enum import StrEnum
from pathlib import Path
from typing import Any, Final

from .errors import ManifestError
from .manifest import PubspecLock, PubspecYaml

_FLUTTER_PACKAGES: Final[frozenset[str]] = frozenset({"flutter", "flutter_test"})
_DEPENDENCY_SECTIONS: Final[tuple[str, ...]] = ("dependencies", "dev_dependencies")


class ToolchainKind(StrEnum):
    """Test runner ecosystem; the value doubles as the runner executable."""

    DART = "dart"
    FLUTTER = "flutter"


class ToolchainClassifier:
    """Classify the package owning ``pubspec_yaml``.

    The decision is computed lazily and cached for the lifetime of the
    instance; a lockfile, when present, takes precedence over the manifest.
    Passing ``kind`` skips detection entirely.
    """

    def __init__(
        self,
        pubspec_yaml: Path,
        *,
        lock_reader: PubspecLock | None = None,
        manifest_reader: PubspecYaml | None = None,
        kind: ToolchainKind | None = None,
    ) -> None:
        self.pubspec_yaml = pubspec_yaml
        self._lock_reader = lock_reader or PubspecLock()
        self._manifest_reader = manifest_reader or PubspecYaml(pubspec_yaml.parent)
        self._kind = kind

    @property
    def kind(self) -> ToolchainKind:
        if self._kind is None:
            self._kind = ToolchainKind.FLUTTER if self._determine_flutter() else ToolchainKind.DART
        return self._kind

    @property
    def is_flutter(self) -> bool:
        return self.kind is ToolchainKind.FLUTTER

    @property
    def is_dart(self) -> bool:
        return not self.is_flutter

    def tool(self) -> str:
        """Return the runner invocation token for this package."""

        return self.kind.value

    def _determine_flutter(self) -> bool:
        lockfile = self._lock_reader.find_in(self.pubspec_yaml.parent)
        if lockfile is not None:
            try:
                return lock_uses_flutter(self._lock_reader.parse(lockfile))
            except (ManifestError, OSError):
                pass
        try:
            manifest = self._manifest_reader.parse(self.pubspec_yaml)
        except (ManifestError, OSError):
            return False
        return manifest_uses_flutter(manifest)

    def __repr__(self) -> str:
        return f"ToolchainClassifier({str(self.pubspec_yaml)!r})"


def lock_uses_flutter(lock: Mapping[str, Any]) -> bool:
    """Return ``True`` when a parsed ``pubspec.lock`` pins the Flutter SDK."""

    sdks = lock.get("sdks")
    if isinstance(sdks, Mapping) and "flutter" in sdks:
        return True
    packages = lock.get("packages")
    if not isinstance(packages, Mapping):
        return False
    for name, entry in packages.items():
        if name in _FLUTTER_PACKAGES and isinstance(entry, Mapping) and entry.get("source") == "sdk":
            return True
    return False


def manifest_uses_flutter(manifest: Mapping[str, Any]) -> bool:
    """Return ``True`` when a parsed ``pubspec.yaml`` depends on Flutter."""

    if "flutter" in manifest:
        return True
    environment = manifest.get("environment")
    if isinstance(environment, Mapping) and "flutter" in environment:
        return True
    for section in _DEPENDENCY_SECTIONS:
        dependencies = manifest.get(section)
        if not isinstance(dependencies, Mapping):
            continue
        for name, spec in dependencies.items():
            if name in _FLUTTER_PACKAGES:
                return True
            if isinstance(spec, Mapping) and spec.get("sdk") == "flutter":
                return True
    return False


__all__ = ["ToolchainClassifier", "ToolchainKind", "lock_uses_flutter", "manifest_uses_flutter"]
