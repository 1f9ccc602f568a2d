# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Diagnostic normalisation engine: segmentation, extraction and aggregation."""

from __future__ import annotations

from .adapters import (
    CLIPPY_ADAPTER,
    COMPILER_LINT_ADAPTER,
    MIRI_ADAPTER,
    SANITIZER_ADAPTER,
    AdapterRegistry,
    OutputChannel,
    ToolAdapter,
    adapter_for,
)
from .aggregator import DiagnosticAggregator
from .extractor import BodyScanner, LineKind, PatternExtractor, ScanState, SequentialExtractor
from .pipeline import normalize
from .segmenter import SegmentationSpec, SegmentStrategy, segment

__all__ = [
    "AdapterRegistry",
    "BodyScanner",
    "CLIPPY_ADAPTER",
    "COMPILER_LINT_ADAPTER",
    "DiagnosticAggregator",
    "LineKind",
    "MIRI_ADAPTER",
    "OutputChannel",
    "PatternExtractor",
    "SANITIZER_ADAPTER",
    "ScanState",
    "SegmentStrategy",
    "SegmentationSpec",
    "SequentialExtractor",
    "ToolAdapter",
    "adapter_for",
    "normalize",
    "segment",
]
