# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Translate a rules configuration into concrete tool invocations."""

from __future__ import annotations

import logging
import shlex
import tempfile
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from pathlib import Path
from typing import Final

from ..config.rules import RulesConfig, SanitizerType
from ..core.models import Tool
from ..core.process import Command
from ..engine.adapters import CLIPPY_ADAPTER, COMPILER_LINT_ADAPTER, ToolAdapter, adapter_for
from ..engine.segmenter import SegmentationSpec, SegmentStrategy
from ..guidelines.catalog import GuidelineCatalog

LOGGER = logging.getLogger(__name__)

CARGO: Final[str] = "cargo"
CLIPPY_DRIVER: Final[str] = "clippy-driver"
RUSTC: Final[str] = "rustc"
CARGO_MANIFEST: Final[str] = "Cargo.toml"
CLIPPY_QUALIFIER: Final[str] = "clippy::"
NIGHTLY_TOOLCHAIN: Final[str] = "+nightly"

# Invoking the drivers directly prints no ``Checking <crate>`` banner.
_DIRECT_CLIPPY_ADAPTER: Final[ToolAdapter] = CLIPPY_ADAPTER.with_segmentation(
    SegmentationSpec(strategy=SegmentStrategy.SEVERITY_PREFIX_SCAN),
)


@dataclass(frozen=True, slots=True)
class ToolCommand:
    """One planned tool pass.

    Attributes:
        tool: Tool whose output the pass produces.
        command: Command to execute.
        adapter: Adapter normalising the command output.
        label: Human readable name of the pass.
    """

    tool: Tool
    command: Command
    adapter: ToolAdapter
    label: str


@dataclass(frozen=True, slots=True)
class CommandPlan:
    """Ordered tool passes plus the tools that could not be planned."""

    commands: tuple[ToolCommand, ...] = ()
    skipped: tuple[Tool, ...] = ()

    def executables(self) -> list[str]:
        """Return the distinct executables required by the plan in order."""

        seen: list[str] = []
        for entry in self.commands:
            if entry.command.app not in seen:
                seen.append(entry.command.app)
        return seen

    def without(self, executables: Iterable[str]) -> CommandPlan:
        """Return a plan dropping every pass that needs one of ``executables``."""

        missing = set(executables)
        kept = tuple(entry for entry in self.commands if entry.command.app not in missing)
        return CommandPlan(commands=kept, skipped=self.skipped)


def find_manifest_dir(path: Path) -> Path | None:
    """Return the nearest directory at or above ``path`` holding ``Cargo.toml``."""

    start = path if path.is_dir() else path.parent
    for candidate in (start, *start.parents):
        if (candidate / CARGO_MANIFEST).is_file():
            return candidate
    return None


def plan_commands(
    config: RulesConfig,
    catalog: GuidelineCatalog,
    *,
    has_cargo: bool,
    out_dir: Path | None = None,
) -> CommandPlan:
    """Plan the tool passes needed to check ``config.file_path``.

    Tools are selected from the bindings of the configured guidelines and from
    the enabled configuration sections. Passes run in the fixed order Clippy,
    compiler lints, Miri, then one sanitizer pass per sanitizer type.

    Args:
        config: Rules configuration of the run.
        catalog: Catalog resolving guideline bindings.
        has_cargo: Whether ``cargo`` can be launched.
        out_dir: Directory for metadata emitted by direct compiler invocations.

    Returns:
        CommandPlan: Planned passes and the tools skipped for lack of cargo.
    """

    bindings = catalog.tools_for(config.coding_guidelines)
    manifest_dir = find_manifest_dir(config.file_path.resolve()) if has_cargo else None
    if has_cargo and manifest_dir is None:
        LOGGER.debug("no %s found above %s, invoking compilers directly", CARGO_MANIFEST, config.file_path)
    metadata_dir = out_dir if out_dir is not None else Path(tempfile.gettempdir())
    lint_options = _split_options(config.supplement_compilation_options, config.lints.supplement_compilation_options)

    commands: list[ToolCommand] = []
    skipped: list[Tool] = []
    if Tool.CLIPPY in bindings or config.lints.enable:
        # Compiler lints reported through Clippy are bound under both tools and stay unqualified.
        compiler_idents = set(bindings.get(Tool.COMPILER_LINT, []))
        idents = [
            ident if ident in compiler_idents else _qualify_clippy(ident) for ident in bindings.get(Tool.CLIPPY, [])
        ]
        flags = [*_warn_flags(idents), *_qualified_level_flags(config.lints.clippy.flags())]
        commands.append(
            _lint_command(Tool.CLIPPY, [*lint_options, *flags], config, manifest_dir, metadata_dir),
        )
    if Tool.COMPILER_LINT in bindings or (config.lints.enable and config.lints.rustc.flags()):
        flags = [*_warn_flags(bindings.get(Tool.COMPILER_LINT, [])), *config.lints.rustc.flags()]
        commands.append(
            _lint_command(Tool.COMPILER_LINT, [*lint_options, *flags], config, manifest_dir, metadata_dir),
        )

    if Tool.DYNAMIC_ANALYSIS in bindings or config.miri.enable:
        if manifest_dir is None:
            skipped.append(Tool.DYNAMIC_ANALYSIS)
        else:
            options = _split_options(config.supplement_compilation_options, config.miri.supplement_compilation_options)
            commands.append(
                ToolCommand(
                    tool=Tool.DYNAMIC_ANALYSIS,
                    command=Command(app=CARGO, args=("miri", "run"), envs=_rustflags(options), cwd=manifest_dir),
                    adapter=adapter_for(Tool.DYNAMIC_ANALYSIS),
                    label="miri",
                ),
            )

    if Tool.SANITIZER in bindings or config.sanitizer.enable:
        if manifest_dir is None:
            skipped.append(Tool.SANITIZER)
        else:
            commands.extend(_sanitizer_commands(config, manifest_dir))

    return CommandPlan(commands=tuple(commands), skipped=tuple(skipped))


def _lint_command(
    tool: Tool,
    compiler_args: Sequence[str],
    config: RulesConfig,
    manifest_dir: Path | None,
    metadata_dir: Path,
) -> ToolCommand:
    if manifest_dir is not None:
        subcommand = "clippy" if tool is Tool.CLIPPY else "rustc"
        command = Command(app=CARGO, args=(subcommand, "--", *compiler_args), cwd=manifest_dir)
        adapter = adapter_for(tool)
    else:
        app = CLIPPY_DRIVER if tool is Tool.CLIPPY else RUSTC
        args = (
            str(config.file_path),
            "--crate-type",
            "lib",
            "--emit=metadata",
            "--out-dir",
            str(metadata_dir),
            *compiler_args,
        )
        command = Command(app=app, args=args)
        adapter = _DIRECT_CLIPPY_ADAPTER if tool is Tool.CLIPPY else COMPILER_LINT_ADAPTER
    return ToolCommand(tool=tool, command=command, adapter=adapter, label=str(tool))


def _sanitizer_commands(config: RulesConfig, manifest_dir: Path) -> list[ToolCommand]:
    types = config.sanitizer.types or (SanitizerType.ADDRESS,)
    options = _split_options(config.supplement_compilation_options, config.sanitizer.supplement_compilation_options)
    adapter = adapter_for(Tool.SANITIZER)
    commands: list[ToolCommand] = []
    for sanitizer in types:
        # TODO: pass ``--target <host triple>`` so std is rebuilt with the sanitizer.
        command = Command(
            app=CARGO,
            args=(NIGHTLY_TOOLCHAIN, "run"),
            envs=_rustflags([f"-Zsanitizer={sanitizer.value}", *options]),
            cwd=manifest_dir,
        )
        commands.append(
            ToolCommand(tool=Tool.SANITIZER, command=command, adapter=adapter, label=f"sanitizer ({sanitizer.value})"),
        )
    return commands


def _split_options(*chunks: str | None) -> list[str]:
    options: list[str] = []
    for chunk in chunks:
        if chunk:
            options.extend(shlex.split(chunk))
    return options


def _rustflags(options: Sequence[str]) -> dict[str, str]:
    return {"RUSTFLAGS": " ".join(options)} if options else {}


def _qualify_clippy(name: str) -> str:
    return name if "::" in name else f"{CLIPPY_QUALIFIER}{name}"


def _warn_flags(idents: Iterable[str]) -> list[str]:
    flags: list[str] = []
    for ident in idents:
        flags.extend(("-W", ident))
    return flags


def _qualified_level_flags(flags: Sequence[str]) -> list[str]:
    """Qualify the lint names of ``-D/-W/-A <name>`` pairs with ``clippy::``."""

    qualified = list(flags)
    for index in range(1, len(qualified), 2):
        qualified[index] = _qualify_clippy(qualified[index])
    return qualified


__all__ = [
    "CARGO",
    "CLIPPY_DRIVER",
    "CommandPlan",
    "RUSTC",
    "ToolCommand",
    "find_manifest_dir",
    "plan_commands",
]
