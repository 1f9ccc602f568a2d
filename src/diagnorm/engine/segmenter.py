# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Split captured tool output into independent diagnostic blocks."""

from __future__ import annotations

import re
from collections.abc import Sequence
from dataclasses import dataclass
from enum import Enum
from typing import Final

BLANK_LINE_DELIMITER: Final[str] = "\n\n"
DEFAULT_SEVERITY_TOKENS: Final[tuple[str, ...]] = ("error", "warning")


class SegmentStrategy(str, Enum):
    """How the banner preceding the first diagnostic is recognised."""

    POSITIONAL_BANNER = "positional-banner"
    """Drop the first line of the first chunk (``Checking crate foo ...``)."""

    SEVERITY_PREFIX_SCAN = "severity-prefix-scan"
    """Drop first-chunk lines until one starts with a severity token."""

    REPORT_MARKER = "report-marker"
    """Start a block at every line matching a report marker; blank lines are content."""


@dataclass(frozen=True, slots=True)
class SegmentationSpec:
    """Per-tool segmentation parameters supplied by a tool adapter.

    Attributes:
        strategy: Banner handling / splitting strategy.
        delimiter: Separator between diagnostics for blank-line based strategies.
        severity_tokens: Line prefixes recognised by :attr:`SegmentStrategy.SEVERITY_PREFIX_SCAN`.
        drop_trailing_summary: Drop the final chunk (a run summary) when more than one chunk remains.
        required_marker: When set, blocks not containing this text are discarded.
        block_start: Marker pattern used by :attr:`SegmentStrategy.REPORT_MARKER`.
    """

    strategy: SegmentStrategy = SegmentStrategy.POSITIONAL_BANNER
    delimiter: str = BLANK_LINE_DELIMITER
    severity_tokens: tuple[str, ...] = DEFAULT_SEVERITY_TOKENS
    drop_trailing_summary: bool = True
    required_marker: str | None = None
    block_start: re.Pattern[str] | None = None

    def __post_init__(self) -> None:
        if self.strategy is SegmentStrategy.REPORT_MARKER and self.block_start is None:
            raise ValueError("report-marker segmentation requires a block_start pattern")
        if not self.delimiter:
            raise ValueError("segmentation delimiter must not be empty")


def segment(text: str, spec: SegmentationSpec) -> list[str]:
    """Split ``text`` into diagnostic blocks according to ``spec``.

    Args:
        text: Complete output captured from one tool invocation.
        spec: Segmentation parameters of the tool that produced ``text``.

    Returns:
        list[str]: Non-empty blocks in source order. Empty or whitespace-only
        input yields an empty list.
    """

    trimmed = text.strip()
    if not trimmed:
        return []

    if spec.strategy is SegmentStrategy.REPORT_MARKER:
        assert spec.block_start is not None  # enforced by SegmentationSpec
        chunks = _split_on_marker(trimmed, spec.block_start)
    else:
        chunks = trimmed.split(spec.delimiter)
        chunks[0] = _strip_banner(chunks[0], spec)
        # The summary is dropped even when the banner left the first chunk empty.
        if spec.drop_trailing_summary and len(chunks) > 1:
            chunks = chunks[:-1]

    blocks = [chunk.strip("\n") for chunk in chunks if chunk.strip()]
    if spec.required_marker is not None:
        blocks = [block for block in blocks if spec.required_marker in block]
    return blocks


def _strip_banner(chunk: str, spec: SegmentationSpec) -> str:
    lines = chunk.splitlines()
    if spec.strategy is SegmentStrategy.POSITIONAL_BANNER:
        return "\n".join(lines[1:])
    return "\n".join(_skip_until_severity(lines, spec.severity_tokens))


def _skip_until_severity(lines: Sequence[str], tokens: Sequence[str]) -> list[str]:
    prefixes = tuple(tokens)
    for index, line in enumerate(lines):
        if line.lstrip().startswith(prefixes):
            return list(lines[index:])
    return []


def _split_on_marker(text: str, marker: re.Pattern[str]) -> list[str]:
    blocks: list[list[str]] = []
    for line in text.splitlines():
        if marker.search(line):
            blocks.append([line])
        elif blocks:
            blocks[-1].append(line)
    return ["\n".join(lines) for lines in blocks]


__all__ = [
    "BLANK_LINE_DELIMITER",
    "DEFAULT_SEVERITY_TOKENS",
    "SegmentStrategy",
    "SegmentationSpec",
    "segment",
]
