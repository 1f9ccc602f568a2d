# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Process execution boundary used to invoke external analysis tools."""

from __future__ import annotations

import logging
import os
import shlex
import shutil

# Bandit: subprocess usage is intentional; commands are argument lists built
# from vetted tool plans and never pass through a shell.
import subprocess  # nosec B404
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol, runtime_checkable

from .errors import ToolExecutionError
from .models import RawOutput

LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class Command:
    """Executable, arguments and environment forming one runnable command."""

    app: str
    args: tuple[str, ...] = ()
    envs: Mapping[str, str] = field(default_factory=dict)
    cwd: Path | None = None

    def argv(self) -> list[str]:
        """Return the argument vector passed to the operating system."""
        return [self.app, *self.args]

    def __str__(self) -> str:
        envs = " ".join(f'{key}="{value}"' for key, value in self.envs.items())
        command = shlex.join(self.argv())
        return f"{envs} {command}" if envs else command


@runtime_checkable
class ProcessRunner(Protocol):
    """Collaborator able to run commands and probe for executables."""

    def run(self, command: Command) -> RawOutput:
        """Run ``command`` to completion and capture its output."""

    def exists(self, executable: str) -> bool:
        """Return ``True`` when ``executable`` can be launched."""


class SubprocessRunner:
    """:class:`ProcessRunner` backed by :func:`subprocess.run`."""

    def __init__(self, *, timeout: float | None = None) -> None:
        """Create a runner.

        Args:
            timeout: Optional timeout in seconds applied to every command.
        """

        self._timeout = timeout

    def run(self, command: Command) -> RawOutput:
        """Execute ``command`` and capture its raw stdout/stderr bytes.

        Args:
            command: Command to execute.

        Returns:
            RawOutput: Captured output and exit status. Non-zero exit codes are
            expected from analysis tools and are not treated as failures.

        Raises:
            ToolExecutionError: If the command cannot be launched or times out.
        """

        env = {**os.environ, **command.envs}
        LOGGER.debug("running %s (cwd=%s)", command, command.cwd)
        try:
            completed = subprocess.run(  # nosec B603 - argument list, no shell
                command.argv(),
                cwd=str(command.cwd) if command.cwd is not None else None,
                env=env,
                check=False,
                capture_output=True,
                timeout=self._timeout,
                stdin=subprocess.DEVNULL,
            )
        except subprocess.TimeoutExpired as exc:
            raise ToolExecutionError(command.app, f"timed out after {exc.timeout}s") from exc
        except OSError as exc:
            raise ToolExecutionError(command.app, str(exc)) from exc
        return RawOutput(stdout=completed.stdout, stderr=completed.stderr, returncode=completed.returncode)

    def exists(self, executable: str) -> bool:
        """Return ``True`` when ``executable`` resolves on ``PATH`` or as a path."""

        return shutil.which(executable) is not None


__all__ = ["Command", "ProcessRunner", "SubprocessRunner"]
