# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Check run orchestration."""

from __future__ import annotations

from .orchestrator import ConfirmCallback, Orchestrator, PassOutcome

__all__ = ["ConfirmCallback", "Orchestrator", "PassOutcome"]
