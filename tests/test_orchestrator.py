# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for check run orchestration."""

from __future__ import annotations

from pathlib import Path

import pytest

from conftest import ASAN_STDERR, CLIPPY_STDERR, MIRI_STDERR, FakeRunner
from diagnorm.config.rules import RulesConfig
from diagnorm.core.errors import RunCancelledError
from diagnorm.core.models import RawOutput, Tool
from diagnorm.guidelines.catalog import GuidelineCatalog
from diagnorm.orchestration.orchestrator import Orchestrator

RUSTC_STDERR = """\
   Compiling mock v0.1.0 (/work/mock)
warning: unused variable: `x`
 --> src/main.rs:2:9
  |
2 |     let x = 1;
  |         ^ help: if this is intentional, prefix it with an underscore: `_x`
  |
  = note: `#[warn(unused_variables)]` on by default

warning: `mock` (bin "mock") generated 1 warning
"""


def _config(path: Path, *guidelines: str) -> RulesConfig:
    return RulesConfig.model_validate({"file_path": str(path), "coding_guidelines": list(guidelines)})


@pytest.fixture
def all_tools_runner(fake_runner: FakeRunner) -> FakeRunner:
    fake_runner.outputs.update(
        {
            "cargo clippy": RawOutput(stderr=CLIPPY_STDERR.encode(), returncode=101),
            "cargo rustc": RawOutput(stderr=RUSTC_STDERR.encode()),
            "cargo miri": RawOutput(stdout=b"", stderr=MIRI_STDERR.encode(), returncode=1),
            "cargo +nightly": RawOutput(stderr=ASAN_STDERR.encode(), returncode=1),
        },
    )
    return fake_runner


@pytest.mark.parametrize("jobs", [1, 4])
def test_report_follows_tool_declaration_order(
    jobs: int,
    all_tools_runner: FakeRunner,
    cargo_project: Path,
    sample_catalog: GuidelineCatalog,
) -> None:
    orchestrator = Orchestrator(runner=all_tools_runner, catalog=sample_catalog)
    config = _config(cargo_project, "P.MTH.LCK.01", "P.VAR.01", "G.TYP.ARR.01", "P.UNS.MEM.01")

    report = orchestrator.run(config, jobs=jobs)

    assert [diagnostic.tool for diagnostic in report] == [
        Tool.CLIPPY,
        Tool.CLIPPY,
        Tool.CLIPPY,
        Tool.COMPILER_LINT,
        Tool.DYNAMIC_ANALYSIS,
        Tool.SANITIZER,
    ]
    assert [diagnostic.lint_id for diagnostic in report.for_tool(Tool.COMPILER_LINT)] == ["unused_variables"]
    assert [str(ref.id) for ref in report.for_tool(Tool.COMPILER_LINT)[0].guidelines] == ["p.var.01"]
    assert len(all_tools_runner.calls) == 4


def test_launch_failure_is_isolated_to_its_pass(
    all_tools_runner: FakeRunner,
    cargo_project: Path,
    sample_catalog: GuidelineCatalog,
) -> None:
    all_tools_runner.failures.add("cargo clippy")
    orchestrator = Orchestrator(runner=all_tools_runner, catalog=sample_catalog)

    report = orchestrator.run(_config(cargo_project, "G.TYP.ARR.01", "P.VAR.01"))

    assert [diagnostic.tool for diagnostic in report] == [Tool.COMPILER_LINT, Tool.DYNAMIC_ANALYSIS]


def test_missing_cargo_asks_before_continuing(
    fake_runner: FakeRunner,
    cargo_project: Path,
    sample_catalog: GuidelineCatalog,
) -> None:
    fake_runner.available = {"clippy-driver", "rustc"}
    prompts: list[str] = []

    def confirm(prompt: str) -> bool:
        prompts.append(prompt)
        return True

    orchestrator = Orchestrator(runner=fake_runner, catalog=sample_catalog, confirm=confirm)
    orchestrator.run(_config(cargo_project, "G.TYP.ARR.01"))

    assert len(prompts) == 1
    assert [command.app for command in fake_runner.calls] == ["clippy-driver"]


def test_declining_cancels_before_running_tools(
    fake_runner: FakeRunner,
    cargo_project: Path,
    sample_catalog: GuidelineCatalog,
) -> None:
    fake_runner.available = set()
    orchestrator = Orchestrator(runner=fake_runner, catalog=sample_catalog, confirm=lambda _prompt: False)

    with pytest.raises(RunCancelledError):
        orchestrator.run(_config(cargo_project, "G.TYP.ARR.01"))
    assert fake_runner.calls == []


def test_missing_executables_are_dropped(
    fake_runner: FakeRunner,
    tmp_path: Path,
    sample_catalog: GuidelineCatalog,
) -> None:
    source = tmp_path / "lib.rs"
    source.write_text("", encoding="utf-8")
    fake_runner.available = {"rustc"}
    orchestrator = Orchestrator(runner=fake_runner, catalog=sample_catalog)

    report = orchestrator.run(_config(source, "G.TYP.ARR.01", "P.VAR.01"))

    assert len(report) == 0
    assert [command.app for command in fake_runner.calls] == ["rustc"]


def test_no_prompt_when_everything_is_available(
    fake_runner: FakeRunner,
    cargo_project: Path,
    sample_catalog: GuidelineCatalog,
) -> None:
    def confirm(_prompt: str) -> bool:
        raise AssertionError("unexpected prompt")

    orchestrator = Orchestrator(runner=fake_runner, catalog=sample_catalog, confirm=confirm)

    assert len(orchestrator.run(_config(cargo_project, "P.VAR.01"))) == 0
    assert [str(command) for command in fake_runner.calls] == ["cargo rustc -- -W unused_variables"]
