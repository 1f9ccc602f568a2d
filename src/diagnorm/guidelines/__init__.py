# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Coding guideline identifiers and the embedded guideline catalog."""

from __future__ import annotations

from .ids import GuidelineID

__all__ = ["GuidelineID"]
