# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Typer application exposing the ``check`` and ``guidelines`` commands."""

from __future__ import annotations

from pathlib import Path
from typing import Annotated

import typer
from rich import box
from rich.console import Console
from rich.table import Table

from ..config.rules import load_rules_config
from ..core.errors import (
    ConfigurationError,
    OrphanFilePathError,
    PathNotExistError,
    RunCancelledError,
)
from ..core.logging import fail, info, ok
from ..guidelines.catalog import GuidelineCatalog, load_default_catalog
from ..orchestration.orchestrator import ConfirmCallback, Orchestrator
from ..reporting.output import write_report

DEFAULT_OUTPUT = Path("output.json")

app = typer.Typer(
    help="Normalise Rust static-analysis diagnostics into guideline-annotated JSON.",
    add_completion=False,
    no_args_is_help=True,
)


def _existing_file(value: Path | None) -> Path | None:
    if value is not None and not value.exists():
        raise typer.BadParameter(str(PathNotExistError("file", value)))
    return value


def _output_path(value: Path) -> Path:
    if not value.parent.exists():
        raise typer.BadParameter(str(OrphanFilePathError(value)))
    return value


def _load_catalog(path: Path | None) -> GuidelineCatalog:
    return GuidelineCatalog.from_path(path) if path is not None else load_default_catalog()


def _confirm_callback(assume_yes: bool) -> ConfirmCallback:
    def confirm(prompt: str) -> bool:
        return assume_yes or typer.confirm(prompt, default=True)

    return confirm


@app.command("check")
def check_command(
    rule_file: Annotated[
        Path,
        typer.Option(
            "--rule-file",
            "-r",
            help="Path to the rules configuration file.",
            callback=_existing_file,
        ),
    ],
    src_file: Annotated[
        Path | None,
        typer.Option(
            "--src-file",
            "-s",
            help="Override the source file named by the rules file.",
            callback=_existing_file,
        ),
    ] = None,
    output: Annotated[
        Path,
        typer.Option("--output", "-o", help="Path of the JSON report.", callback=_output_path),
    ] = DEFAULT_OUTPUT,
    yes: Annotated[
        bool,
        typer.Option("--yes", "-y", help="Continue without prompting when tools are missing."),
    ] = False,
    jobs: Annotated[
        int,
        typer.Option("--jobs", "-j", min=1, help="Number of tool passes to run concurrently."),
    ] = 1,
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", help="Guideline catalog overriding the embedded one.", callback=_existing_file),
    ] = None,
    no_color: Annotated[bool, typer.Option("--no-color", help="Disable coloured output.")] = False,
    no_emoji: Annotated[bool, typer.Option("--no-emoji", help="Disable emoji output.")] = False,
) -> None:
    """Run the configured checks and write the normalised report."""

    use_color = False if no_color else None
    use_emoji = not no_emoji
    try:
        guideline_catalog = _load_catalog(catalog)
        config = load_rules_config(rule_file)
        if src_file is not None:
            info("Overriding src path from commandline", use_emoji=use_emoji, use_color=use_color)
            config = config.with_file_path(src_file)
        elif not config.file_path.exists():
            raise PathNotExistError("file", config.file_path)
        orchestrator = Orchestrator(
            catalog=guideline_catalog,
            confirm=_confirm_callback(yes),
            use_color=use_color,
            use_emoji=use_emoji,
        )
        report = orchestrator.run(config, jobs=jobs)
    except RunCancelledError:
        raise typer.Exit(code=0) from None
    except ConfigurationError as exc:
        fail(str(exc), use_emoji=use_emoji, use_color=use_color)
        raise typer.Exit(code=1) from exc

    write_report(report, output)
    ok(f"Wrote {len(report)} diagnostics to {output}", use_emoji=use_emoji, use_color=use_color)


def build_guidelines_table(catalog: GuidelineCatalog) -> Table:
    """Return a table listing every guideline of ``catalog``."""

    table = Table(title="Coding Guidelines", box=box.SIMPLE, expand=True)
    table.add_column("ID", style="bold")
    table.add_column("Name", overflow="fold")
    table.add_column("Level")
    table.add_column("Tools", overflow="fold")
    for guideline in catalog.values():
        bindings = ", ".join(f"{binding.name}:{binding.ident}" for binding in guideline.tool)
        table.add_row(str(guideline.id), guideline.name, guideline.level.value, bindings or "-")
    return table


@app.command("guidelines")
def guidelines_command(
    catalog: Annotated[
        Path | None,
        typer.Option("--catalog", help="Guideline catalog overriding the embedded one.", callback=_existing_file),
    ] = None,
) -> None:
    """List the guidelines of the catalog and the lints bound to them."""

    try:
        guideline_catalog = _load_catalog(catalog)
    except ConfigurationError as exc:
        fail(str(exc))
        raise typer.Exit(code=1) from exc
    Console().print(build_guidelines_table(guideline_catalog))


__all__ = ["app", "build_guidelines_table", "check_command", "guidelines_command"]
