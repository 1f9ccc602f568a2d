# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Collect per-tool diagnostics into the final ordered report."""

from __future__ import annotations

from collections.abc import Iterable

from ..core.models import Diagnostic, Report


class DiagnosticAggregator:
    """Append-only accumulator of diagnostics across tool passes.

    Diagnostics keep the order in which :meth:`extend` received them; the
    aggregator never sorts or deduplicates.
    """

    def __init__(self) -> None:
        self._diagnostics: list[Diagnostic] = []

    def extend(self, diagnostics: Iterable[Diagnostic]) -> None:
        """Append the diagnostics of one tool pass."""

        self._diagnostics.extend(diagnostics)

    def __len__(self) -> int:
        return len(self._diagnostics)

    def report(self) -> Report:
        """Return a report holding every diagnostic collected so far."""

        return Report(diagnostics=list(self._diagnostics))


__all__ = ["DiagnosticAggregator"]
