# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Field extraction strategies turning one diagnostic block into a :class:`Diagnostic`.

Two strategies exist. :class:`SequentialExtractor` walks compiler-style
blocks line by line (summary, ``-->`` location, gutter snippet, ``= help``/
``= note`` annotations). :class:`PatternExtractor` applies independent,
line-anchored patterns to the whole block for tools whose blocks interleave
primary and secondary locations.

Neither strategy raises on malformed text: a field that cannot be found is
left absent or empty.
"""

from __future__ import annotations

import re
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Final, Protocol

from ..core.models import Diagnostic, Tool

LOCATION_ARROW: Final[str] = "-->"
SNIPPET_LINE: Final[re.Pattern[str]] = re.compile(r"^(?P<number>\d+)\s+\|\s?(?P<code>.*)$")
# Inline markers after an unnumbered gutter (`|    ^ help: ...`) count as annotations too.
ANNOTATION_LINE: Final[re.Pattern[str]] = re.compile(
    r"^(?:=\s*|\|[\s|/\\_^~\-]*)?(?P<kind>help|note):\s*(?P<text>.*)$",
)
_GUTTER_ONLY: Final[str] = "|"
_SUMMARY_SEPARATOR: Final[str] = ":"
_LOCATION_PARTS: Final[int] = 3
_WHITESPACE: Final[re.Pattern[str]] = re.compile(r"\s+")


class Extractor(Protocol):
    """Strategy converting one block of tool output into a diagnostic."""

    def extract(self, block: str, tool: Tool) -> Diagnostic:
        """Return the diagnostic described by ``block``."""


class LineKind(str, Enum):
    """Classification of a body line inside a compiler-style block."""

    SNIPPET = "snippet"
    HELP = "help"
    NOTE = "note"
    IGNORED = "ignored"


class ScanState(Enum):
    """States of :class:`BodyScanner`; the only transition is snippet -> annotations."""

    SCANNING_SNIPPET = "scanning-snippet"
    SCANNING_ANNOTATIONS = "scanning-annotations"


@dataclass(frozen=True, slots=True)
class SourceLocation:
    """File and position parsed from a ``--> path:line:column`` line."""

    path: str | None = None
    line: int | None = None
    column: int | None = None


@dataclass(slots=True)
class ClassifiedLine:
    """Result of classifying one body line."""

    kind: LineKind
    match: re.Match[str] | None = None


class BodyScanner:
    """Two-state machine classifying the body lines of one block.

    The scanner starts in :attr:`ScanState.SCANNING_SNIPPET`. The first help or
    note line moves it to :attr:`ScanState.SCANNING_ANNOTATIONS` for the rest of
    the block, after which gutter lines are never reported as snippets again;
    suggested fixes rendered below a ``help:`` line therefore never leak into
    the primary code excerpt.
    """

    def __init__(self, annotation_marker: re.Pattern[str] = ANNOTATION_LINE) -> None:
        self._marker = annotation_marker
        self._state = ScanState.SCANNING_SNIPPET

    @property
    def state(self) -> ScanState:
        """Return the current scanner state."""
        return self._state

    def classify(self, line: str) -> ClassifiedLine:
        """Classify ``line`` and advance the state machine.

        Args:
            line: Raw body line; surrounding whitespace is ignored.

        Returns:
            ClassifiedLine: Line kind plus the match carrying its fields.
        """

        trimmed = line.strip()
        if not trimmed or trimmed == _GUTTER_ONLY:
            return ClassifiedLine(LineKind.IGNORED)
        annotation = self._marker.match(trimmed)
        if annotation is not None:
            self._state = ScanState.SCANNING_ANNOTATIONS
            return ClassifiedLine(LineKind(annotation.group("kind").lower()), annotation)
        if self._state is ScanState.SCANNING_SNIPPET:
            snippet = SNIPPET_LINE.match(trimmed)
            if snippet is not None:
                return ClassifiedLine(LineKind.SNIPPET, snippet)
        return ClassifiedLine(LineKind.IGNORED)


def parse_summary(line: str) -> str:
    """Return the message of a ``<severity>: <message>`` line, or ``""``."""

    _, sep, message = line.partition(_SUMMARY_SEPARATOR)
    return message.strip() if sep else ""


def is_location_line(line: str) -> bool:
    """Return ``True`` when ``line`` starts with the ``-->`` location arrow."""

    return line.strip().startswith(LOCATION_ARROW)


def parse_location(line: str) -> SourceLocation:
    """Parse a ``--> path:line:column`` line.

    Args:
        line: Candidate location line.

    Returns:
        SourceLocation: Parsed location; all fields are ``None`` when the line
        lacks the arrow or the three-part ``path:line:column`` form.
    """

    stripped = line.strip()
    if not stripped.startswith(LOCATION_ARROW):
        return SourceLocation()
    parts = stripped[len(LOCATION_ARROW) :].strip().rsplit(":", _LOCATION_PARTS - 1)
    if len(parts) != _LOCATION_PARTS or not parts[0]:
        return SourceLocation()
    path, line_no, column = parts
    return SourceLocation(path=path, line=positive_int(line_no), column=positive_int(column))


def positive_int(text: str | None) -> int | None:
    """Return ``text`` as a positive integer, or ``None`` when it is not one."""

    if text is None:
        return None
    try:
        value = int(text.strip())
    except ValueError:
        return None
    return value if value > 0 else None


def find_identifier(patterns: Iterable[re.Pattern[str]], text: str) -> str | None:
    """Return the lint identifier named by ``text``, or ``None``.

    Patterns are tried in order and the first one that matches decides. Within
    a line the first occurrence names the specific lint; later ones name the
    lint group it belongs to.
    Callers scanning several lines keep the result of the last line that matched.
    """

    for pattern in patterns:
        match = pattern.search(text)
        if match is not None:
            candidate = _identifier_group(match)
            if candidate:
                return candidate
    return None


def _identifier_group(match: re.Match[str]) -> str | None:
    if "name" in match.re.groupindex:
        return match.group("name")
    for group in reversed(match.groups()):
        if group:
            return group
    return None


@dataclass(frozen=True, slots=True)
class SequentialExtractor:
    """Line-by-line extractor for Clippy and compiler lint blocks.

    Attributes:
        help_patterns: Identifier patterns applied to help lines.
        note_patterns: Identifier patterns applied to note lines.
        annotation_marker: Pattern recognising help/note lines (groups ``kind`` and ``text``).
        normalize_separators: Rewrite ``-`` to ``_`` in identifiers taken from
            command-line flag notes (``-D clippy::needless-return``).
    """

    help_patterns: tuple[re.Pattern[str], ...] = ()
    note_patterns: tuple[re.Pattern[str], ...] = ()
    annotation_marker: re.Pattern[str] = ANNOTATION_LINE
    normalize_separators: bool = False

    def extract(self, block: str, tool: Tool) -> Diagnostic:
        """Extract a diagnostic from a compiler-style ``block``.

        Args:
            block: Diagnostic block produced by the segmenter.
            tool: Tool tag attached to the diagnostic.

        Returns:
            Diagnostic: Diagnostic populated with every field that could be found.
        """

        lines = block.strip().splitlines()
        if not lines:
            return Diagnostic(tool=tool)

        summary = parse_summary(lines[0])
        body: Sequence[str] = lines[1:]
        location = SourceLocation()
        if body and is_location_line(body[0]):
            location = parse_location(body[0])
            body = body[1:]

        scanner = BodyScanner(self.annotation_marker)
        snippet: list[str] = []
        annotations: list[str] = []
        lint_id = ""
        end_line: int | None = None
        for raw_line in body:
            classified = scanner.classify(raw_line)
            match = classified.match
            if match is None:
                continue
            if classified.kind is LineKind.SNIPPET:
                snippet.append(match.group("code"))
                end_line = positive_int(match.group("number")) or end_line
                continue
            annotations.append(f"{classified.kind.value}: {match.group('text').strip()}")
            patterns = self.help_patterns if classified.kind is LineKind.HELP else self.note_patterns
            lint_id = find_identifier(patterns, raw_line.strip()) or lint_id

        if self.normalize_separators:
            lint_id = lint_id.replace("-", "_")

        return Diagnostic(
            source_path=location.path,
            begin_line=location.line,
            end_line=end_line if location.line is not None else None,
            column=location.column,
            lint_id=lint_id,
            summary=summary,
            code_snippet="\n".join(snippet),
            annotations="\n".join(annotations),
            tool=tool,
        )


@dataclass(frozen=True, slots=True)
class PatternExtractor:
    """Whole-block extractor for Miri and sanitizer reports.

    Attributes:
        summary_pattern: Pattern with a ``summary`` group; first match wins.
        location_pattern: Pattern with ``path``/``line``/``column`` groups; the
            first (primary) match wins.
        snippet_pattern: Pattern with a ``code`` group; every match contributes.
        annotation_pattern: Pattern with a ``text`` group; every match contributes.
        identifier_patterns: Patterns applied to the summary; the first that matches wins.
        slug_identifiers: Lowercase identifiers and join their words with ``-``.
    """

    summary_pattern: re.Pattern[str]
    location_pattern: re.Pattern[str]
    snippet_pattern: re.Pattern[str] | None = None
    annotation_pattern: re.Pattern[str] | None = None
    identifier_patterns: tuple[re.Pattern[str], ...] = field(default_factory=tuple)
    slug_identifiers: bool = False

    def extract(self, block: str, tool: Tool) -> Diagnostic:
        """Extract a diagnostic by scanning the whole ``block`` with independent patterns."""

        text = block.strip()
        if not text:
            return Diagnostic(tool=tool)

        summary_match = self.summary_pattern.search(text)
        if summary_match is not None:
            summary = summary_match.group("summary").strip()
        else:
            summary = parse_summary(text.splitlines()[0])

        location = SourceLocation()
        location_match = self.location_pattern.search(text)
        if location_match is not None:
            location = SourceLocation(
                path=location_match.group("path"),
                line=positive_int(location_match.group("line")),
                column=positive_int(location_match.groupdict().get("column")),
            )

        snippet = _collect(self.snippet_pattern, "code", text)
        annotations = _collect(self.annotation_pattern, "text", text)
        lint_id = find_identifier(self.identifier_patterns, summary) or ""
        if lint_id and self.slug_identifiers:
            lint_id = _WHITESPACE.sub("-", lint_id.strip()).lower()

        return Diagnostic(
            source_path=location.path,
            begin_line=location.line,
            end_line=location.line,
            column=location.column,
            lint_id=lint_id,
            summary=summary,
            code_snippet="\n".join(snippet),
            annotations="\n".join(annotations),
            tool=tool,
        )


def _collect(pattern: re.Pattern[str] | None, group: str, text: str) -> list[str]:
    if pattern is None:
        return []
    return [match.group(group).strip() for match in pattern.finditer(text)]


__all__ = [
    "ANNOTATION_LINE",
    "BodyScanner",
    "ClassifiedLine",
    "Extractor",
    "LOCATION_ARROW",
    "LineKind",
    "PatternExtractor",
    "SNIPPET_LINE",
    "ScanState",
    "SequentialExtractor",
    "SourceLocation",
    "find_identifier",
    "is_location_line",
    "parse_location",
    "parse_summary",
    "positive_int",
]
