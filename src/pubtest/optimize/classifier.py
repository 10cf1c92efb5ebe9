# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Content sniffing strategies that label Flutter test files by binding kind."""

from __future__ import annotations

import re
from typing import Final, Protocol, runtime_checkable

BINDING_SUFFIX: Final[str] = "WidgetsFlutterBinding"
TEST_BINDING_SUFFIX: Final[str] = f"Test{BINDING_SUFFIX}"
PLAIN_BINDING_LABEL: Final[str] = "test"

_BINDING_PATTERN: Final[re.Pattern[str]] = re.compile(rf"(\w+{BINDING_SUFFIX})")


@runtime_checkable
class ContentClassifier(Protocol):
    """Strategy returning an optional sub-type label for a test file's source."""

    def classify(self, content: str) -> str | None:
        """Return a label for ``content`` or ``None`` when nothing specific is found."""

        raise NotImplementedError


class BindingClassifier:
    """Detect the ``*WidgetsFlutterBinding`` a Flutter test initialises.

    ``IntegrationTestWidgetsFlutterBinding`` yields ``"integration"`` and the
    bare ``TestWidgetsFlutterBinding`` yields ``"test"``.
    """

    def classify(self, content: str) -> str | None:
        match = _BINDING_PATTERN.search(content)
        if match is None:
            return None
        label = match.group(1).replace(TEST_BINDING_SUFFIX, "").lower()
        return label or PLAIN_BINDING_LABEL


__all__ = [
    "BINDING_SUFFIX",
    "BindingClassifier",
    "ContentClassifier",
    "PLAIN_BINDING_LABEL",
    "TEST_BINDING_SUFFIX",
]
