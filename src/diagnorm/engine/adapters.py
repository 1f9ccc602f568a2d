# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Per-tool adapters binding a segmentation spec to an extraction strategy."""

from __future__ import annotations

import re
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, replace
from enum import Enum
from typing import Final

from ..core.models import Diagnostic, RawOutput, Tool
from .extractor import Extractor, PatternExtractor, SequentialExtractor
from .segmenter import SegmentationSpec, SegmentStrategy, segment


class OutputChannel(str, Enum):
    """Output stream of a tool that carries its diagnostics."""

    STDOUT = "stdout"
    STDERR = "stderr"


@dataclass(frozen=True, slots=True)
class ToolAdapter:
    """Everything diagnorm needs to know to normalise the output of one tool.

    Attributes:
        tool: Tool tag attached to every extracted diagnostic.
        channel: Stream holding the diagnostics.
        segmentation: Parameters used to split the stream into blocks.
        extractor: Strategy turning one block into a diagnostic.
    """

    tool: Tool
    channel: OutputChannel
    segmentation: SegmentationSpec
    extractor: Extractor

    def diagnostics_text(self, raw: RawOutput) -> str:
        """Return the decoded stream that carries diagnostics for this tool."""

        return raw.stderr_text() if self.channel is OutputChannel.STDERR else raw.stdout_text()

    def blocks(self, raw: RawOutput) -> list[str]:
        """Split the diagnostic stream of ``raw`` into blocks."""

        return segment(self.diagnostics_text(raw), self.segmentation)

    def extract(self, block: str) -> Diagnostic:
        """Extract a diagnostic from ``block`` tagged with this adapter's tool."""

        return self.extractor.extract(block, self.tool)

    def with_segmentation(self, segmentation: SegmentationSpec) -> ToolAdapter:
        """Return a copy of the adapter using ``segmentation``."""

        return replace(self, segmentation=segmentation)


# Clippy ----------------------------------------------------------------------

_CLIPPY_HELP_URL: Final[re.Pattern[str]] = re.compile(r"https?://\S*#(?P<name>\w+)")
_CLIPPY_NOTE_ATTRIBUTE: Final[re.Pattern[str]] = re.compile(
    r"#\[(?:warn|deny|forbid|expect)\((?:clippy::)?(?P<name>\w+)\)\]",
)
_CLIPPY_NOTE_FLAG: Final[re.Pattern[str]] = re.compile(r"`-[WDF]\s*clippy::(?P<name>[\w-]+)`")

CLIPPY_ADAPTER: Final[ToolAdapter] = ToolAdapter(
    tool=Tool.CLIPPY,
    channel=OutputChannel.STDERR,
    segmentation=SegmentationSpec(strategy=SegmentStrategy.POSITIONAL_BANNER),
    extractor=SequentialExtractor(
        help_patterns=(_CLIPPY_HELP_URL,),
        note_patterns=(_CLIPPY_NOTE_ATTRIBUTE, _CLIPPY_NOTE_FLAG),
        normalize_separators=True,
    ),
)

# Compiler lints --------------------------------------------------------------

_LINT_NOTE_ATTRIBUTE: Final[re.Pattern[str]] = re.compile(
    r"#\[(?:warn|deny|forbid|expect)\((?P<name>[\w:]+)\)\]",
)
_LINT_NOTE_FLAG: Final[re.Pattern[str]] = re.compile(r"`-[WDF]\s*(?P<name>[\w:-]+)`")

COMPILER_LINT_ADAPTER: Final[ToolAdapter] = ToolAdapter(
    tool=Tool.COMPILER_LINT,
    channel=OutputChannel.STDERR,
    segmentation=SegmentationSpec(strategy=SegmentStrategy.SEVERITY_PREFIX_SCAN),
    extractor=SequentialExtractor(note_patterns=(_LINT_NOTE_ATTRIBUTE, _LINT_NOTE_FLAG)),
)

# Miri ------------------------------------------------------------------------

_MIRI_UB_KINDS: Final[re.Pattern[str]] = re.compile(
    r"(?i)\b(?P<name>data race|out-of-bounds|dangling|memory leak|uninitialized|unaligned|deadlock)",
)

MIRI_ADAPTER: Final[ToolAdapter] = ToolAdapter(
    tool=Tool.DYNAMIC_ANALYSIS,
    channel=OutputChannel.STDERR,
    segmentation=SegmentationSpec(
        strategy=SegmentStrategy.SEVERITY_PREFIX_SCAN,
        severity_tokens=("error",),
        drop_trailing_summary=False,
        required_marker="|",
    ),
    extractor=PatternExtractor(
        summary_pattern=re.compile(r"(?m)^error: (?P<summary>.+)$"),
        location_pattern=re.compile(r"(?m)^[ \t]*--> (?P<path>[^:\n]+):(?P<line>\d+):(?P<column>\d+)"),
        snippet_pattern=re.compile(r"(?m)^[ \t]*\d+[ \t]*\|[ \t]*(?P<code>.*)$"),
        annotation_pattern=re.compile(r"(?m)^[ \t=]*(?:help|note): (?P<text>.*)$"),
        identifier_patterns=(_MIRI_UB_KINDS,),
        slug_identifiers=True,
    ),
)

# Sanitizers ------------------------------------------------------------------

SANITIZER_REPORT_START: Final[re.Pattern[str]] = re.compile(r"^(?:==\d+==)?(?:ERROR|WARNING): \w*Sanitizer:")

SANITIZER_ADAPTER: Final[ToolAdapter] = ToolAdapter(
    tool=Tool.SANITIZER,
    channel=OutputChannel.STDERR,
    segmentation=SegmentationSpec(
        strategy=SegmentStrategy.REPORT_MARKER,
        block_start=SANITIZER_REPORT_START,
        drop_trailing_summary=False,
    ),
    extractor=PatternExtractor(
        summary_pattern=re.compile(r"(?m)^(?:==\d+==)?(?:ERROR|WARNING): (?P<summary>\w*Sanitizer: .+)$"),
        location_pattern=re.compile(
            r"(?m)^[ \t]*#\d+ 0x[0-9a-fA-F]+ in \S+ (?!/rustc/)(?P<path>[^\s:()]+):(?P<line>\d+)(?::(?P<column>\d+))?",
        ),
        annotation_pattern=re.compile(r"(?m)^SUMMARY: (?P<text>.+)$"),
        identifier_patterns=(
            re.compile(r"Sanitizer: (?:detected )?(?P<name>[A-Za-z][\w -]*?)(?= on | in |\s*\(|$)"),
        ),
        slug_identifiers=True,
    ),
)

DEFAULT_ADAPTERS: Final[tuple[ToolAdapter, ...]] = (
    CLIPPY_ADAPTER,
    COMPILER_LINT_ADAPTER,
    MIRI_ADAPTER,
    SANITIZER_ADAPTER,
)


class AdapterRegistry(Mapping[Tool, ToolAdapter]):
    """Read-only mapping of tools to the adapter normalising their output."""

    def __init__(self, adapters: Iterable[ToolAdapter] = ()) -> None:
        """Initialise the registry with ``adapters``.

        Args:
            adapters: Adapters registered in declaration order.
        """

        self._adapters: dict[Tool, ToolAdapter] = {}
        for adapter in adapters:
            self.register(adapter)

    def register(self, adapter: ToolAdapter) -> None:
        """Register ``adapter`` enforcing one adapter per tool.

        Raises:
            ValueError: If an adapter for the same tool is already registered.
        """

        if adapter.tool in self._adapters:
            raise ValueError(f"Adapter for '{adapter.tool}' already registered")
        self._adapters[adapter.tool] = adapter

    def __getitem__(self, tool: Tool) -> ToolAdapter:
        return self._adapters[tool]

    def __iter__(self) -> Iterator[Tool]:
        return iter(self._adapters)

    def __len__(self) -> int:
        return len(self._adapters)


DEFAULT_REGISTRY: Final[AdapterRegistry] = AdapterRegistry(DEFAULT_ADAPTERS)


def adapter_for(tool: Tool, registry: Mapping[Tool, ToolAdapter] = DEFAULT_REGISTRY) -> ToolAdapter:
    """Return the adapter registered for ``tool``.

    Raises:
        KeyError: If no adapter handles ``tool``.
    """

    return registry[tool]


__all__ = [
    "AdapterRegistry",
    "CLIPPY_ADAPTER",
    "COMPILER_LINT_ADAPTER",
    "DEFAULT_ADAPTERS",
    "DEFAULT_REGISTRY",
    "MIRI_ADAPTER",
    "OutputChannel",
    "SANITIZER_ADAPTER",
    "SANITIZER_REPORT_START",
    "ToolAdapter",
    "adapter_for",
]
