# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for report aggregation."""

from __future__ import annotations

from diagnorm.core.models import Diagnostic, Tool
from diagnorm.engine.aggregator import DiagnosticAggregator


def _diagnostic(tool: Tool, lint_id: str) -> Diagnostic:
    return Diagnostic(tool=tool, lint_id=lint_id)


def test_report_preserves_insertion_order_without_dedup() -> None:
    aggregator = DiagnosticAggregator()
    aggregator.extend([_diagnostic(Tool.CLIPPY, "b"), _diagnostic(Tool.CLIPPY, "a")])
    aggregator.extend([])
    aggregator.extend([_diagnostic(Tool.DYNAMIC_ANALYSIS, "a"), _diagnostic(Tool.CLIPPY, "b")])

    report = aggregator.report()

    assert [(diagnostic.tool, diagnostic.lint_id) for diagnostic in report] == [
        (Tool.CLIPPY, "b"),
        (Tool.CLIPPY, "a"),
        (Tool.DYNAMIC_ANALYSIS, "a"),
        (Tool.CLIPPY, "b"),
    ]
    assert len(report) == len(aggregator) == 4
    assert [diagnostic.lint_id for diagnostic in report.for_tool(Tool.CLIPPY)] == ["b", "a", "b"]


def test_empty_aggregator_reports_nothing() -> None:
    assert len(DiagnosticAggregator().report()) == 0
