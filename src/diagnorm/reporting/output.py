# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Serialise reports into the JSON artifact written at the end of a run."""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any

from ..core.models import Diagnostic, Report

JSON_INDENT = 2


def serialize_diagnostic(diagnostic: Diagnostic) -> dict[str, Any]:
    """Return a JSON-ready mapping for ``diagnostic``.

    Absent optional fields are kept as ``None`` so every record carries the
    same keys.
    """

    return diagnostic.model_dump(mode="json")


def serialize_report(report: Report) -> list[dict[str, Any]]:
    """Return the diagnostics of ``report`` as JSON-ready mappings in report order."""

    return [serialize_diagnostic(diagnostic) for diagnostic in report]


def report_to_json(report: Report) -> str:
    """Render ``report`` as a pretty-printed JSON array."""

    return json.dumps(serialize_report(report), indent=JSON_INDENT, ensure_ascii=False)


def write_report(report: Report, path: Path) -> None:
    """Write ``report`` to ``path`` as UTF-8 JSON.

    Args:
        report: Report produced by the run.
        path: Destination file; its parent directory must exist.
    """

    path.write_text(report_to_json(report) + "\n", encoding="utf-8")


__all__ = ["report_to_json", "serialize_diagnostic", "serialize_report", "write_report"]
