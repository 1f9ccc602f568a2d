# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Exception taxonomy shared across the diagnorm package."""

from __future__ import annotations

from collections.abc import Iterable
from pathlib import Path


class DiagnormError(Exception):
    """Base class for every error raised deliberately by diagnorm."""


class ConfigurationError(DiagnormError):
    """Raised when configuration input is invalid and the run must abort."""


class InvalidGuidelineIDError(ConfigurationError, ValueError):
    """Raised when a guideline identifier lacks the ``<type>.<group>.<index>`` shape."""

    def __init__(self, raw: str) -> None:
        """Initialise the error with the rejected identifier.

        Args:
            raw: Identifier text supplied by the caller.
        """

        super().__init__(f"'{raw}' is not a valid guideline ID. A valid ID should look like: \"G.Exam.Ple.01\"")
        self.raw = raw


class InvalidGuidelineTypeError(ConfigurationError, ValueError):
    """Raised when the leading type token of a guideline identifier is not one character."""

    def __init__(self, token: str) -> None:
        """Initialise the error with the rejected type token.

        Args:
            token: Leading identifier segment that failed validation.
        """

        super().__init__(
            f"'{token}' is not a valid guideline type. A valid type should be a single character such as 'P' or 'G'",
        )
        self.token = token


class UnsupportedToolError(ConfigurationError, ValueError):
    """Raised when a tool name does not map onto a supported tool."""

    def __init__(self, name: str, supported: Iterable[str]) -> None:
        """Initialise the error with the rejected name and the accepted choices.

        Args:
            name: Tool name supplied by configuration.
            supported: Tool names accepted by diagnorm.
        """

        self.supported = tuple(supported)
        super().__init__(
            f"'{name}' is not a valid variant of tool name. Supported variants are: [{', '.join(self.supported)}]",
        )
        self.name = name


class DuplicateLintError(ConfigurationError):
    """Raised when the same lint appears in more than one deny/warn/allow list."""


class RulesConfigError(ConfigurationError):
    """Raised when the rules configuration file cannot be read or validated."""


class CatalogIntegrityError(ConfigurationError):
    """Raised when the guideline catalog document violates its structure."""


class ToolExecutionError(DiagnormError):
    """Raised when an external tool cannot be launched."""

    def __init__(self, executable: str, reason: str) -> None:
        """Initialise the error with the failing executable.

        Args:
            executable: Program that failed to start.
            reason: Human readable failure description.
        """

        super().__init__(f"failed to execute '{executable}': {reason}")
        self.executable = executable


class RunCancelledError(DiagnormError):
    """Raised when the operator declines to continue a run with missing tools."""


class PathNotExistError(ConfigurationError):
    """Raised when a path supplied by the operator does not exist."""

    def __init__(self, kind: str, path: Path) -> None:
        """Initialise the error for a missing path.

        Args:
            kind: Short label describing the path, e.g. ``"file"``.
            path: Path that could not be found.
        """

        label = f"{kind} " if kind else ""
        super().__init__(f"the provided {label}path does not exist: '{path}'")
        self.path = path


class OrphanFilePathError(ConfigurationError):
    """Raised when an output path points into a directory that does not exist."""

    def __init__(self, path: Path) -> None:
        """Initialise the error for an output path without a parent directory.

        Args:
            path: Output path whose parent directory is missing.
        """

        super().__init__(f"the provided file path's parent directory is missing: '{path}'")
        self.path = path


__all__ = [
    "CatalogIntegrityError",
    "ConfigurationError",
    "DiagnormError",
    "DuplicateLintError",
    "InvalidGuidelineIDError",
    "InvalidGuidelineTypeError",
    "OrphanFilePathError",
    "PathNotExistError",
    "RulesConfigError",
    "RunCancelledError",
    "ToolExecutionError",
    "UnsupportedToolError",
]
