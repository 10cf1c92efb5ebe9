# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Configuration models for a pubtest run."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .constants import TEST_DIR_NAME, TEST_FILE_GLOB


class DiscoveryConfig(BaseModel):
    """How packages and their test directories are located."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    recursive: bool = False
    test_dir_name: str = TEST_DIR_NAME
    test_glob: str = TEST_FILE_GLOB

    @field_validator("test_dir_name")
    @classmethod
    def _single_segment(cls, value: str) -> str:
        if not value or "/" in value or "\\" in value:
            raise ValueError("test_dir_name must be a single directory name")
        return value


class ExecutionConfig(BaseModel):
    """Execution behaviour for the command batch."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    concurrent: bool = False
    bail: bool = False
    jobs: int | None = Field(default=None, ge=1)


class OptimizeConfig(BaseModel):
    """Aggregator file synthesis settings."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    enabled: bool = True


class OutputConfig(BaseModel):
    """Console output preferences."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    verbose: bool = False
    emoji: bool = True
    color: bool = True


class Config(BaseModel):
    """Primary configuration container used by the test pipeline."""

    model_config = ConfigDict(validate_assignment=True, extra="forbid")

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    execution: ExecutionConfig = Field(default_factory=ExecutionConfig)
    optimize: OptimizeConfig = Field(default_factory=OptimizeConfig)
    output: OutputConfig = Field(default_factory=OutputConfig)

    def to_dict(self) -> dict[str, Any]:
        """Return a JSON-compatible representation of the configuration."""

        return self.model_dump(mode="json")


__all__ = [
    "Config",
    "DiscoveryConfig",
    "ExecutionConfig",
    "OptimizeConfig",
    "OutputConfig",
]
