# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Planning of the external tool invocations performed by a check run."""

from __future__ import annotations

from .commands import CommandPlan, ToolCommand, find_manifest_dir, plan_commands

__all__ = ["CommandPlan", "ToolCommand", "find_manifest_dir", "plan_commands"]
