# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Rules configuration models and loaders."""

from __future__ import annotations

from .rules import (
    LintLevels,
    LintsOptions,
    MiriOptions,
    RulesConfig,
    SanitizerOptions,
    SanitizerType,
    load_rules_config,
)

__all__ = [
    "LintLevels",
    "LintsOptions",
    "MiriOptions",
    "RulesConfig",
    "SanitizerOptions",
    "SanitizerType",
    "load_rules_config",
]
