# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Report serialisation helpers."""

from __future__ import annotations

from .output import report_to_json, serialize_diagnostic, serialize_report, write_report

__all__ = ["report_to_json", "serialize_diagnostic", "serialize_report", "write_report"]
