# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Normalise the raw output of one tool pass into annotated diagnostics."""

from __future__ import annotations

import logging

from ..core.models import Diagnostic, RawOutput
from ..guidelines.catalog import GuidelineCatalog
from .adapters import OutputChannel, ToolAdapter

LOGGER = logging.getLogger(__name__)


def normalize(raw: RawOutput, adapter: ToolAdapter, catalog: GuidelineCatalog) -> list[Diagnostic]:
    """Segment, extract and annotate the diagnostics contained in ``raw``.

    Args:
        raw: Output captured from one tool invocation.
        adapter: Adapter describing how the tool formats its diagnostics.
        catalog: Guideline catalog used to annotate each diagnostic.

    Returns:
        list[Diagnostic]: Diagnostics in block order, each carrying the
        guidelines its lint identifier violates.
    """

    if adapter.channel is OutputChannel.STDERR:
        passthrough = raw.stdout_text().strip()
        if passthrough:
            LOGGER.debug("%s stdout: %s", adapter.tool, passthrough)

    diagnostics: list[Diagnostic] = []
    for block in adapter.blocks(raw):
        diagnostic = adapter.extract(block)
        diagnostic.guidelines = catalog.lookup(diagnostic.tool, diagnostic.lint_id)
        diagnostics.append(diagnostic)
    LOGGER.debug("%s produced %d diagnostics", adapter.tool, len(diagnostics))
    return diagnostics


__all__ = ["normalize"]
