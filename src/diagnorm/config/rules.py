# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Models describing the rules file that drives a diagnorm check run."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_serializer, field_validator

from ..core.errors import DuplicateLintError, RulesConfigError
from ..guidelines.ids import GuidelineID, coerce_guideline_id

LOGGER = logging.getLogger(__name__)


class SanitizerType(str, Enum):
    """Sanitizers supported by ``-Zsanitizer``."""

    ADDRESS = "address"
    MEMORY = "memory"
    LEAK = "leak"
    THREAD = "thread"


class LintLevels(BaseModel):
    """Lint names grouped by the level they should be reported at."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    deny: tuple[str, ...] = ()
    warn: tuple[str, ...] = ()
    allow: tuple[str, ...] = ()

    def verify(self) -> None:
        """Ensure no lint name is listed under more than one level.

        The compilers accept conflicting flags silently and let the last one
        win, which makes the outcome depend on argument order.

        Raises:
            DuplicateLintError: If a lint appears more than once across the lists.
        """

        seen: set[str] = set()
        duplicates: list[str] = []
        for name in (*self.deny, *self.warn, *self.allow):
            if name in seen and name not in duplicates:
                duplicates.append(name)
            seen.add(name)
        if duplicates:
            raise DuplicateLintError(
                f"lints configuration contains duplicate elements: {', '.join(duplicates)}",
            )

    def flags(self) -> list[str]:
        """Return ``-D``/``-W``/``-A`` compiler flags for every listed lint."""

        flags: list[str] = []
        for flag, names in (("-D", self.deny), ("-W", self.warn), ("-A", self.allow)):
            for name in names:
                flags.extend((flag, name))
        return flags


class _ToolSection(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")

    enable: bool = False
    supplement_compilation_options: str | None = None


class LintsOptions(_ToolSection):
    """Clippy and compiler lint settings."""

    clippy: LintLevels = Field(default_factory=LintLevels)
    rustc: LintLevels = Field(default_factory=LintLevels)


class MiriOptions(_ToolSection):
    """Miri settings."""


class SanitizerOptions(_ToolSection):
    """Sanitizer settings; ``types`` defaults to the address sanitizer."""

    types: tuple[SanitizerType, ...] = (SanitizerType.ADDRESS,)

    @field_validator("types", mode="before")
    @classmethod
    def _lower_types(cls, value: object) -> object:
        if isinstance(value, (list, tuple)):
            return tuple(item.lower() if isinstance(item, str) else item for item in value)
        return value


class RulesConfig(BaseModel):
    """Top-level rules configuration.

    Attributes:
        file_path: Source file (or crate entry point) to check.
        coding_guidelines: Guidelines to enforce, unique and in file order.
        supplement_compilation_options: Extra options appended to every compiler invocation.
        lints: Clippy and compiler lint settings.
        miri: Miri settings.
        sanitizer: Sanitizer settings. An absent section selects no sanitizer.
    """

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    file_path: Path
    coding_guidelines: tuple[GuidelineID, ...] = ()
    supplement_compilation_options: str | None = None
    lints: LintsOptions = Field(default_factory=LintsOptions)
    miri: MiriOptions = Field(default_factory=MiriOptions)
    sanitizer: SanitizerOptions = Field(default_factory=lambda: SanitizerOptions(types=()))

    @field_validator("coding_guidelines", mode="before")
    @classmethod
    def _unique_guidelines(cls, value: object) -> object:
        if not isinstance(value, (list, tuple)):
            return value
        unique: list[GuidelineID] = []
        for item in value:
            guideline_id = coerce_guideline_id(item)
            if guideline_id not in unique:
                unique.append(guideline_id)
        return tuple(unique)

    @field_serializer("coding_guidelines")
    def _serialize_guidelines(self, value: tuple[GuidelineID, ...]) -> list[str]:
        return [str(item) for item in value]

    def verify(self) -> None:
        """Run cross-field checks pydantic cannot express.

        Raises:
            DuplicateLintError: If a lint level list overlaps another.
        """

        self.lints.clippy.verify()
        self.lints.rustc.verify()

    def with_file_path(self, path: Path) -> RulesConfig:
        """Return a copy of the configuration checking ``path`` instead."""

        return self.model_copy(update={"file_path": path})


def load_rules_config(path: Path) -> RulesConfig:
    """Load and verify the JSON rules file at ``path``.

    Args:
        path: Rules file supplied by the operator.

    Returns:
        RulesConfig: Validated configuration.

    Raises:
        RulesConfigError: If the file cannot be read, is not JSON or fails validation.
        DuplicateLintError: If a lint is listed under more than one level.
    """

    try:
        text = path.read_text(encoding="utf-8")
    except OSError as exc:
        raise RulesConfigError(f"{path}: unable to read rules file: {exc}") from exc
    try:
        payload = json.loads(text)
    except json.JSONDecodeError as exc:
        raise RulesConfigError(f"{path}: failed to parse rules JSON: {exc}") from exc
    try:
        config = RulesConfig.model_validate(payload)
    except ValidationError as exc:
        raise RulesConfigError(f"{path}: invalid rules configuration: {exc}") from exc
    config.verify()
    LOGGER.debug("loaded rules from %s with %d guidelines", path, len(config.coding_guidelines))
    return config


__all__ = [
    "LintLevels",
    "LintsOptions",
    "MiriOptions",
    "RulesConfig",
    "SanitizerOptions",
    "SanitizerType",
    "load_rules_config",
]
