# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Tests for operator status messages."""

from __future__ import annotations

import pytest

from diagnorm.core.logging import MessageKind, console_cache, emit, fail, ok, warn


def test_plain_messages_have_no_glyph(capsys: pytest.CaptureFixture[str]) -> None:
    warn("cargo is missing", use_emoji=False, use_color=False)

    assert capsys.readouterr().out == "cargo is missing\n"


def test_emoji_prefix_follows_message_kind(capsys: pytest.CaptureFixture[str]) -> None:
    fail("bad rules", use_emoji=True, use_color=False)

    assert capsys.readouterr().out.startswith(MessageKind.FAIL.value.glyph.strip())


def test_long_messages_are_not_wrapped(capsys: pytest.CaptureFixture[str]) -> None:
    message = "x" * 300

    emit(MessageKind.INFO, message, use_emoji=False, use_color=False)

    assert capsys.readouterr().out == f"{message}\n"


def test_consoles_are_reused() -> None:
    cache = console_cache()

    assert cache.console(color=False, emoji=False) is cache.console(color=False, emoji=False)


def test_ok_reports_completed_steps(capsys: pytest.CaptureFixture[str]) -> None:
    ok("Wrote 0 diagnostics to output.json", use_emoji=True, use_color=False)

    assert capsys.readouterr().out == "✅ Wrote 0 diagnostics to output.json\n"
