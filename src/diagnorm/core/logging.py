# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Operator-facing status messages rendered through Rich.

Messages go to stdout so they interleave with typer prompts. Colour is only
used when stdout is a terminal unless the caller decides explicitly.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from functools import lru_cache

from rich.console import Console
from rich.text import Text


def stdout_is_terminal() -> bool:
    """Return ``True`` when ``sys.stdout`` is attached to a terminal."""

    try:
        return sys.stdout.isatty()
    except (AttributeError, ValueError):
        return False


@dataclass(frozen=True, slots=True)
class _MessageStyle:
    glyph: str
    style: str


class MessageKind(Enum):
    """Kinds of status messages and the glyph and colour each one uses."""

    INFO = _MessageStyle("ℹ️ ", "cyan")
    OK = _MessageStyle("✅ ", "green")
    WARN = _MessageStyle("⚠️ ", "yellow")
    FAIL = _MessageStyle("❌ ", "red")


class ConsoleCache:
    """Hand out one Rich :class:`Console` per colour/emoji/terminal combination."""

    def __init__(self) -> None:
        self._consoles: dict[tuple[bool, bool, bool], Console] = {}

    def console(self, *, color: bool, emoji: bool) -> Console:
        """Return the console rendering with ``color`` and ``emoji``.

        Args:
            color: Whether ANSI colours may be emitted.
            emoji: Whether Rich should render emoji codes.

        Returns:
            Console: Console writing to the current ``sys.stdout``.
        """

        terminal = stdout_is_terminal()
        key = (color, emoji, terminal)
        console = self._consoles.get(key)
        if console is None:
            colored = color and terminal
            console = Console(
                color_system="auto" if colored else None,
                force_terminal=terminal,
                no_color=not colored,
                emoji=emoji,
                soft_wrap=True,
            )
            self._consoles[key] = console
        return console


@lru_cache(maxsize=1)
def console_cache() -> ConsoleCache:
    """Return the process-wide :class:`ConsoleCache`."""

    return ConsoleCache()


def emit(kind: MessageKind, msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Print ``msg`` as a status message of ``kind``.

    Args:
        kind: Message kind selecting glyph and colour.
        msg: Message text.
        use_emoji: Prefix the message with the glyph of ``kind``.
        use_color: Force colour on or off; ``None`` follows terminal detection.
    """

    color = stdout_is_terminal() if use_color is None else use_color
    prefix = kind.value.glyph if use_emoji else ""
    text = Text(f"{prefix}{msg}")
    if color:
        text.stylize(kind.value.style)
    console_cache().console(color=color, emoji=use_emoji).print(text)


def info(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Report progress, such as the command a pass is about to run."""

    emit(MessageKind.INFO, msg, use_emoji=use_emoji, use_color=use_color)


def ok(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Report a completed step, such as the report being written."""

    emit(MessageKind.OK, msg, use_emoji=use_emoji, use_color=use_color)


def warn(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Report a problem the run can continue past."""

    emit(MessageKind.WARN, msg, use_emoji=use_emoji, use_color=use_color)


def fail(msg: str, *, use_emoji: bool = True, use_color: bool | None = None) -> None:
    """Report the error that ends the run."""

    emit(MessageKind.FAIL, msg, use_emoji=use_emoji, use_color=use_color)


__all__ = [
    "ConsoleCache",
    "MessageKind",
    "console_cache",
    "emit",
    "fail",
    "info",
    "ok",
    "stdout_is_terminal",
    "warn",
]
