# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for rules configuration loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from diagnorm.config.rules import LintLevels, RulesConfig, SanitizerType, load_rules_config
from diagnorm.core.errors import ConfigurationError, DuplicateLintError, RulesConfigError
from diagnorm.guidelines.ids import GuidelineID

FULL_RULES = {
    "file_path": "./src/main.rs",
    "coding_guidelines": ["P.VAR.01", "G.TYP.ARR.01", "p.var.01"],
    "supplement_compilation_options": "-I../a/b/c/d sources=../e/f/g/h.rs",
    "lints": {
        "enable": True,
        "supplement_compilation_options": "",
        "clippy": {"deny": [], "warn": ["all", "pedantic"], "allow": ["cargo"]},
        "rustc": {"deny": [], "warn": [], "allow": []},
    },
    "miri": {"enable": True, "supplement_compilation_options": ""},
    "sanitizer": {"enable": True, "supplement_compilation_options": ""},
}


def _write(tmp_path: Path, payload: object) -> Path:
    path = tmp_path / "rules.json"
    path.write_text(payload if isinstance(payload, str) else json.dumps(payload), encoding="utf-8")
    return path


def test_full_rules_file(tmp_path: Path) -> None:
    config = load_rules_config(_write(tmp_path, FULL_RULES))

    assert config.file_path == Path("./src/main.rs")
    assert config.coding_guidelines == (GuidelineID.parse("P.VAR.01"), GuidelineID.parse("G.TYP.ARR.01"))
    assert config.supplement_compilation_options == "-I../a/b/c/d sources=../e/f/g/h.rs"
    assert config.lints.enable
    assert config.lints.supplement_compilation_options == ""
    assert config.lints.clippy == LintLevels(warn=("all", "pedantic"), allow=("cargo",))
    assert config.lints.rustc == LintLevels()
    assert config.miri.enable
    assert config.sanitizer.enable
    assert config.sanitizer.types == (SanitizerType.ADDRESS,)


def test_minimal_rules_file_uses_disabled_defaults(tmp_path: Path) -> None:
    config = load_rules_config(_write(tmp_path, {"file_path": "./src/main.rs"}))

    assert config.coding_guidelines == ()
    assert config.supplement_compilation_options is None
    assert not config.lints.enable
    assert config.lints.supplement_compilation_options is None
    assert not config.miri.enable
    assert not config.sanitizer.enable
    assert config.sanitizer.types == ()


def test_sanitizer_types_are_case_insensitive(tmp_path: Path) -> None:
    payload = {"file_path": "a.rs", "sanitizer": {"enable": True, "types": ["Address", "thread"]}}

    config = load_rules_config(_write(tmp_path, payload))

    assert config.sanitizer.types == (SanitizerType.ADDRESS, SanitizerType.THREAD)


def test_duplicate_lints_are_rejected(tmp_path: Path) -> None:
    payload = {
        "file_path": "./src/main.rs",
        "lints": {
            "enable": True,
            "clippy": {"warn": ["all", "pedantic"], "allow": ["cargo"], "deny": ["all"]},
            "rustc": {"deny": ["unused"], "warn": ["all"], "allow": []},
        },
    }

    with pytest.raises(DuplicateLintError, match="all"):
        load_rules_config(_write(tmp_path, payload))


def test_lint_levels_verify_and_flags() -> None:
    levels = LintLevels(deny=("unused",), warn=("all",), allow=("dead_code",))

    levels.verify()
    assert levels.flags() == ["-D", "unused", "-W", "all", "-A", "dead_code"]
    with pytest.raises(DuplicateLintError):
        LintLevels(warn=("x",), allow=("x",)).verify()


@pytest.mark.parametrize(
    "payload",
    [
        "{not json",
        {"coding_guidelines": []},
        {"file_path": "a.rs", "coding_guidelines": ["bogus"]},
        {"file_path": "a.rs", "sanitizer": {"types": ["hwaddress"]}},
        {"file_path": "a.rs", "unexpected": True},
    ],
)
def test_invalid_rules_raise_configuration_errors(tmp_path: Path, payload: object) -> None:
    with pytest.raises(RulesConfigError):
        load_rules_config(_write(tmp_path, payload))


def test_unreadable_rules_file(tmp_path: Path) -> None:
    with pytest.raises(ConfigurationError):
        load_rules_config(tmp_path / "missing.json")


def test_with_file_path_overrides_source() -> None:
    config = RulesConfig(file_path=Path("a.rs"))

    assert config.with_file_path(Path("b.rs")).file_path == Path("b.rs")
    assert config.file_path == Path("a.rs")
