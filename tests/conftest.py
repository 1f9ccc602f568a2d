# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.

"""Shared pytest fixtures."""

from __future__ import annotations

import json
from dataclasses import dataclass, field
from pathlib import Path

import pytest

from diagnorm.core.errors import ToolExecutionError
from diagnorm.core.models import RawOutput
from diagnorm.core.process import Command
from diagnorm.guidelines.catalog import GuidelineCatalog

CLIPPY_SCENARIO_BLOCK = """\
error: range is out of bounds
 --> src/clippy.rs:12:19
  |
12 |     let _ = &x[2..9];
  |                   ^
  |
  = help: for further information visit https://example.org/index.html#out_of_bounds_indexing
  = note: `#[deny(clippy::out_of_bounds_indexing)]` on by default"""

CLIPPY_SWAP_BLOCK = """\
error: this looks like you are trying to swap `_a` and `_b`
 --> src/clippy.rs:5:5
  |
5 | /     _a = _b;
6 | |     _b = _a;
  | |___________^ help: try: `std::mem::swap(&mut _a, &mut _b)`
  |
  = note: or maybe you should use `std::mem::replace`?
  = help: for further information visit https://rust-lang.github.io/rust-clippy/master/index.html#almost_swapped
  = note: `#[deny(clippy::almost_swapped)]` on by default"""

CLIPPY_DOUBLE_NEG_BLOCK = """\
warning: `--x` could be misinterpreted as pre-decrement by C programmers, is usually a no-op
  --> src/clippy.rs:25:13
   |
25 |     let _ = --x;
   |             ^^^
   |
   = help: for further information visit https://rust-lang.github.io/rust-clippy/master/index.html#double_neg
   = note: `#[warn(clippy::double_neg)]` on by default"""

CLIPPY_STDERR = (
    "    Checking mock v0.1.0 (/work/mock)\n"
    + CLIPPY_SCENARIO_BLOCK
    + "\n\n"
    + CLIPPY_SWAP_BLOCK
    + "\n\n"
    + CLIPPY_DOUBLE_NEG_BLOCK
    + "\n\nwarning: `mock` (lib) generated 1 warning\nerror: could not compile `mock` due to 2 previous errors\n"
)

MIRI_DATA_RACE_BLOCK = """\
error: Undefined Behavior: Data race detected between (1) Write on thread `<unnamed>` and (2) Write on thread `<unnamed>` at alloc1. (2) just happened here
 --> src/bin/data_race.rs:7:38
  |
7 |   let t2 = thread::spawn(|| unsafe { UNSAFE = 2 });
  |                                      ^^^^^^^^^^ Data race detected between (1) Write on thread `<unnamed>` and (2) Write on thread `<unnamed>` at alloc1. (2) just happened here
  |
help: and (1) occurred earlier here
 --> src/bin/data_race.rs:6:38
  |
6 |   let t1 = thread::spawn(|| unsafe { UNSAFE = 1 });
  |                                      ^^^^^^^^^^
  = help: this indicates a bug in the program: it performed an invalid operation, and caused Undefined Behavior
  = help: see https://doc.rust-lang.org/nightly/reference/behavior-considered-undefined.html for further information
  = note: BACKTRACE (of the first span):
  = note: inside closure at src/bin/data_race.rs:7:38: 7:48"""

MIRI_STDERR = (
    "Preparing a sysroot for Miri (target: x86_64-unknown-linux-gnu)... done\n"
    "   Compiling mock-miri v0.1.0 (/work/mock-miri)\n"
    "    Finished dev [unoptimized + debuginfo] target(s) in 0.10s\n"
    "     Running `cargo-miri runner target/miri/debug/data_race`\n"
    + MIRI_DATA_RACE_BLOCK
    + "\n\nnote: some details are omitted, run with `MIRIFLAGS=-Zmiri-backtrace=full` for a verbose backtrace"
    + "\n\nerror: aborting due to previous error\n"
)

ASAN_STDERR = """\
    Finished dev [unoptimized + debuginfo] target(s) in 0.20s
     Running `target/debug/mock`
=================================================================
==4242==ERROR: AddressSanitizer: heap-use-after-free on address 0x602000000010 at pc 0x55d1 bp 0x7ffc sp 0x7ff0
READ of size 4 at 0x602000000010 thread T0
    #0 0x55d1e4 in mock::main::h5e1f /work/mock/src/main.rs:5:20
    #1 0x55d1f0 in core::ops::function::FnOnce::call_once /rustc/90c5/library/core/src/ops/function.rs:250:5

0x602000000010 is located 0 bytes inside of 4-byte region [0x602000000010,0x602000000014)
freed by thread T0 here:
    #0 0x55d100 in free (/work/mock/target/debug/mock+0x100)

SUMMARY: AddressSanitizer: heap-use-after-free /work/mock/src/main.rs:5:20 in mock::main::h5e1f
==4242==ABORTING
"""

SAMPLE_CATALOG = {
    "coding_guidelines": [
        {
            "id": "G.TYP.ARR.01",
            "name": "Avoid out of bounds indexing",
            "level": "severe",
            "tool": [
                {"name": "clippy", "ident": "out_of_bounds_indexing"},
                {"name": "miri", "ident": "out-of-bounds"},
            ],
        },
        {
            "id": "G.FUD.01",
            "name": "Use std::mem::swap to swap values",
            "tool": [{"name": "clippy", "ident": "almost_swapped"}],
        },
        {
            "id": "P.VAR.01",
            "name": "Remove unused variables",
            "tool": [{"name": "rustc", "ident": "unused_variables"}],
        },
        {
            "id": "P.MTH.LCK.01",
            "name": "Avoid data races",
            "level": "fatal",
            "tool": [
                {"name": "miri", "ident": "data-race"},
                {"name": "sanitizer", "ident": "data-race"},
            ],
        },
        {
            "id": "P.UNS.MEM.01",
            "name": "Do not use memory after it is freed",
            "tool": [{"name": "sanitizer", "ident": "heap-use-after-free"}],
        },
    ],
}


@dataclass
class FakeRunner:
    """In-memory :class:`~diagnorm.core.process.ProcessRunner` for tests.

    Outputs and failures are keyed by the executable, or by ``cargo <subcommand>``
    for cargo invocations.
    """

    available: set[str] = field(default_factory=lambda: {"cargo", "clippy-driver", "rustc"})
    outputs: dict[str, RawOutput] = field(default_factory=dict)
    failures: set[str] = field(default_factory=set)
    calls: list[Command] = field(default_factory=list)

    @staticmethod
    def key(command: Command) -> str:
        if command.app == "cargo" and command.args:
            return f"cargo {command.args[0]}"
        return command.app

    def run(self, command: Command) -> RawOutput:
        self.calls.append(command)
        key = self.key(command)
        if key in self.failures:
            raise ToolExecutionError(command.app, "No such file or directory")
        return self.outputs.get(key, RawOutput())

    def exists(self, executable: str) -> bool:
        return executable in self.available


@pytest.fixture
def fake_runner() -> FakeRunner:
    """Return a runner where cargo and both compiler drivers are available."""
    return FakeRunner()


@pytest.fixture
def sample_catalog() -> GuidelineCatalog:
    return GuidelineCatalog.from_json(json.dumps(SAMPLE_CATALOG), source="sample")


@pytest.fixture
def cargo_project(tmp_path: Path) -> Path:
    """Create a minimal cargo package and return the path of its main source file."""

    root = tmp_path / "mock"
    (root / "src").mkdir(parents=True)
    (root / "Cargo.toml").write_text('[package]\nname = "mock"\nversion = "0.1.0"\n', encoding="utf-8")
    main = root / "src" / "main.rs"
    main.write_text("fn main() {}\n", encoding="utf-8")
    return main
