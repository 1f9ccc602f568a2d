# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Core data models shared across the diagnorm package."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_serializer, field_validator

from ..guidelines.ids import GuidelineID, coerce_guideline_id
from .errors import UnsupportedToolError


class Tool(str, Enum):
    """Static-analysis tools whose diagnostics diagnorm normalises."""

    CLIPPY = "clippy"
    COMPILER_LINT = "rustc"
    DYNAMIC_ANALYSIS = "miri"
    SANITIZER = "sanitizer"

    @classmethod
    def parse(cls, name: str) -> Tool:
        """Return the tool named ``name`` (case-insensitive).

        Args:
            name: Tool name as written in configuration or catalog documents.

        Returns:
            Tool: Matching tool member.

        Raises:
            UnsupportedToolError: If ``name`` does not refer to a supported tool.
        """

        try:
            return cls(name.strip().lower())
        except ValueError as exc:
            raise UnsupportedToolError(name, (tool.value for tool in cls)) from exc

    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True, slots=True)
class RawOutput:
    """Captured output of one tool invocation."""

    stdout: bytes = b""
    stderr: bytes = b""
    returncode: int = 0

    def stdout_text(self) -> str:
        """Return stdout decoded lossily with Unix line endings."""
        return _decode(self.stdout)

    def stderr_text(self) -> str:
        """Return stderr decoded lossily with Unix line endings."""
        return _decode(self.stderr)


def _decode(payload: bytes) -> str:
    return payload.decode("utf-8", errors="replace").replace("\r\n", "\n")


class GuidelineRef(BaseModel):
    """Summary of a guideline violated by a diagnostic."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    id: GuidelineID
    name: str

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> GuidelineID:
        return coerce_guideline_id(value)

    @field_serializer("id")
    def _serialize_id(self, value: GuidelineID) -> str:
        return str(value)


class Diagnostic(BaseModel):
    """Normalised diagnostic record produced from one tool output block."""

    model_config = ConfigDict(validate_assignment=True)

    source_path: str | None = None
    begin_line: int | None = None
    end_line: int | None = None
    column: int | None = None
    lint_id: str = ""
    summary: str = ""
    code_snippet: str = ""
    annotations: str = ""
    tool: Tool
    guidelines: list[GuidelineRef] = Field(default_factory=list)

    @field_validator("source_path", mode="before")
    @classmethod
    def _normalize_path(cls, value: object) -> object:
        """Store paths using forward slashes regardless of the input type."""
        if isinstance(value, Path):
            return value.as_posix()
        return value

    @field_validator("begin_line", "end_line", "column")
    @classmethod
    def _positive(cls, value: int | None) -> int | None:
        if value is not None and value < 1:
            raise ValueError("line and column numbers are 1-based")
        return value


class Report(BaseModel):
    """Ordered collection of diagnostics emitted by one diagnorm run."""

    model_config = ConfigDict(validate_assignment=True)

    diagnostics: list[Diagnostic] = Field(default_factory=list)

    def __iter__(self) -> Iterator[Diagnostic]:  # type: ignore[override]
        return iter(self.diagnostics)

    def __len__(self) -> int:
        return len(self.diagnostics)

    def for_tool(self, tool: Tool) -> list[Diagnostic]:
        """Return the diagnostics emitted by ``tool`` in report order."""
        return [diagnostic for diagnostic in self.diagnostics if diagnostic.tool is tool]


__all__ = ["Diagnostic", "GuidelineRef", "RawOutput", "Report", "Tool"]
