# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Run the planned tool passes and aggregate their diagnostics into a report."""

from __future__ import annotations

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from dataclasses import dataclass, field
from pathlib import Path

from ..config.rules import RulesConfig
from ..core.errors import RunCancelledError, ToolExecutionError
from ..core.logging import info, warn
from ..core.models import Diagnostic, Report
from ..core.process import ProcessRunner, SubprocessRunner
from ..engine.aggregator import DiagnosticAggregator
from ..engine.pipeline import normalize
from ..guidelines.catalog import GuidelineCatalog, load_default_catalog
from ..tools.commands import CARGO, CommandPlan, ToolCommand, plan_commands

LOGGER = logging.getLogger(__name__)

ConfirmCallback = Callable[[str], bool]

_CONTINUE_PROMPT = "The result might be incomplete, continue?"


def _always_continue(_: str) -> bool:
    return True


@dataclass(slots=True)
class PassOutcome:
    """Result of one tool pass.

    Attributes:
        order: Position of the pass in the plan.
        entry: Planned pass that produced the outcome.
        diagnostics: Normalised diagnostics, empty when the pass failed.
        error: Launch failure isolated to this pass, if any.
    """

    order: int
    entry: ToolCommand
    diagnostics: list[Diagnostic] = field(default_factory=list)
    error: ToolExecutionError | None = None


class Orchestrator:
    """Coordinate planning, execution and aggregation of a check run."""

    def __init__(
        self,
        *,
        runner: ProcessRunner | None = None,
        catalog: GuidelineCatalog | None = None,
        confirm: ConfirmCallback | None = None,
        out_dir: Path | None = None,
        use_color: bool | None = None,
        use_emoji: bool = True,
    ) -> None:
        """Create an orchestrator.

        Args:
            runner: Process collaborator; defaults to :class:`SubprocessRunner`.
            catalog: Guideline catalog; defaults to the embedded catalog.
            confirm: Callback asked whether to continue when tools are missing.
                Returning ``False`` cancels the run. Defaults to always continuing.
            out_dir: Directory for metadata emitted by direct compiler invocations.
            use_color: Explicit colour preference for operator messages.
            use_emoji: Whether operator messages carry emoji prefixes.
        """

        self._runner = runner if runner is not None else SubprocessRunner()
        self._catalog = catalog if catalog is not None else load_default_catalog()
        self._confirm = confirm if confirm is not None else _always_continue
        self._out_dir = out_dir
        self._use_color = use_color
        self._use_emoji = use_emoji

    @property
    def catalog(self) -> GuidelineCatalog:
        """Return the catalog used to annotate diagnostics."""
        return self._catalog

    def plan(self, config: RulesConfig) -> CommandPlan:
        """Plan the passes for ``config`` and resolve missing executables.

        Missing tools are reported with :func:`warn` and the confirmation
        callback decides whether the run continues without them.

        Raises:
            RunCancelledError: If the operator declines to continue.
        """

        has_cargo = self._runner.exists(CARGO)
        plan = plan_commands(config, self._catalog, has_cargo=has_cargo, out_dir=self._out_dir)
        missing = [app for app in plan.executables() if app != CARGO and not self._runner.exists(app)]

        problems: list[str] = []
        if not has_cargo:
            problems.append(
                "We couldn't find `cargo`'s executable to run, make sure it's in the path. "
                "Some tools (such as miri) cannot run without it.",
            )
        if plan.skipped:
            names = ", ".join(str(tool) for tool in plan.skipped)
            problems.append(f"Skipping {names}: no cargo package found for {config.file_path}.")
        if missing:
            problems.append(f"Missing executables: {', '.join(missing)}.")
        if not problems:
            return plan

        for problem in problems:
            warn(problem, use_emoji=self._use_emoji, use_color=self._use_color)
        if not self._confirm(_CONTINUE_PROMPT):
            raise RunCancelledError("run cancelled by the operator")
        return plan.without(missing)

    def run(self, config: RulesConfig, *, jobs: int = 1) -> Report:
        """Execute every planned pass and return the aggregated report.

        Args:
            config: Rules configuration of the run.
            jobs: Maximum number of passes executed concurrently.

        Returns:
            Report: Diagnostics of every pass, in plan order.

        Raises:
            RunCancelledError: If the operator declines to continue with missing tools.
        """

        plan = self.plan(config)
        outcomes = self.execute(plan.commands, jobs=jobs)
        aggregator = DiagnosticAggregator()
        for outcome in outcomes:
            aggregator.extend(outcome.diagnostics)
        return aggregator.report()

    def execute(self, commands: Sequence[ToolCommand], *, jobs: int = 1) -> list[PassOutcome]:
        """Run ``commands`` serially or concurrently, returning outcomes in plan order."""

        if jobs > 1 and len(commands) > 1:
            outcomes = self._execute_in_parallel(commands, jobs)
        else:
            outcomes = [self.run_pass(order, entry) for order, entry in enumerate(commands)]
        return sorted(outcomes, key=lambda outcome: outcome.order)

    def run_pass(self, order: int, entry: ToolCommand) -> PassOutcome:
        """Run one pass, isolating launch failures to it."""

        info(f"Running {entry.label}: {entry.command}", use_emoji=self._use_emoji, use_color=self._use_color)
        try:
            raw = self._runner.run(entry.command)
        except ToolExecutionError as exc:
            warn(str(exc), use_emoji=self._use_emoji, use_color=self._use_color)
            return PassOutcome(order=order, entry=entry, error=exc)
        LOGGER.debug("%s exited with %d", entry.label, raw.returncode)
        return PassOutcome(order=order, entry=entry, diagnostics=normalize(raw, entry.adapter, self._catalog))

    def _execute_in_parallel(self, commands: Sequence[ToolCommand], jobs: int) -> list[PassOutcome]:
        outcomes: list[PassOutcome] = []
        with ThreadPoolExecutor(max_workers=jobs) as executor:
            futures = [executor.submit(self.run_pass, order, entry) for order, entry in enumerate(commands)]
            for future in as_completed(futures):
                outcomes.append(future.result())
        return outcomes


__all__ = ["ConfirmCallback", "Orchestrator", "PassOutcome"]
