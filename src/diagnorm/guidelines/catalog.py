# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Guideline catalog models, loaders and lint-to-guideline lookup."""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable, Iterator, Mapping
from enum import Enum
from functools import lru_cache
from importlib import resources
from pathlib import Path
from typing import Final

from pydantic import BaseModel, ConfigDict, ValidationError, field_serializer, field_validator

from ..core.errors import CatalogIntegrityError, InvalidGuidelineIDError, InvalidGuidelineTypeError
from ..core.models import GuidelineRef, Tool
from .ids import GuidelineID, coerce_guideline_id

LOGGER = logging.getLogger(__name__)

_DATA_PACKAGE: Final[str] = "diagnorm.guidelines.data"
_DEFAULT_CATALOG: Final[str] = "guidelines.json"


class CheckLevel(str, Enum):
    """Ordered severity levels attached to guidelines, ``WARN`` being the default."""

    INFO = "info"
    NOTICE = "notice"
    WARN = "warn"
    SEVERE = "severe"
    FATAL = "fatal"

    @property
    def rank(self) -> int:
        """Return the position of the level, ``0`` being the least severe."""
        return _LEVEL_ORDER.index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, CheckLevel):
            return NotImplemented
        return self.rank < other.rank

    def __le__(self, other: object) -> bool:
        if not isinstance(other, CheckLevel):
            return NotImplemented
        return self.rank <= other.rank

    def __gt__(self, other: object) -> bool:
        if not isinstance(other, CheckLevel):
            return NotImplemented
        return self.rank > other.rank

    def __ge__(self, other: object) -> bool:
        if not isinstance(other, CheckLevel):
            return NotImplemented
        return self.rank >= other.rank


_LEVEL_ORDER: Final[tuple[CheckLevel, ...]] = tuple(CheckLevel)


class ToolBinding(BaseModel):
    """Bind a guideline to the lint identifier a tool reports for it."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Tool
    ident: str

    @field_validator("name", mode="before")
    @classmethod
    def _coerce_tool(cls, value: object) -> object:
        if isinstance(value, str):
            return Tool.parse(value)
        return value


class Guideline(BaseModel):
    """Coding guideline entry loaded from the catalog document."""

    model_config = ConfigDict(frozen=True, extra="forbid", arbitrary_types_allowed=True)

    id: GuidelineID
    name: str
    level: CheckLevel = CheckLevel.WARN
    tool: tuple[ToolBinding, ...]

    @field_validator("id", mode="before")
    @classmethod
    def _coerce_id(cls, value: object) -> GuidelineID:
        return coerce_guideline_id(value)

    @field_serializer("id")
    def _serialize_id(self, value: GuidelineID) -> str:
        return str(value)

    def summary(self) -> GuidelineRef:
        """Return the ``{id, name}`` reference attached to diagnostics."""
        return GuidelineRef(id=self.id, name=self.name)

    def binds(self, tool: Tool, lint_id: str) -> bool:
        """Return ``True`` when any binding of ``tool`` names ``lint_id`` exactly."""
        return any(binding.name is tool and binding.ident == lint_id for binding in self.tool)


class _CatalogDocument(BaseModel):
    model_config = ConfigDict(extra="forbid")

    coding_guidelines: tuple[Guideline, ...]


class GuidelineCatalog(Mapping[GuidelineID, Guideline]):
    """Read-only mapping of guideline identifiers to guideline definitions.

    Iteration follows the order of the source document, which is also the
    order in which :meth:`lookup` reports matches.
    """

    def __init__(self, guidelines: Iterable[Guideline]) -> None:
        """Build the catalog from ``guidelines``.

        Args:
            guidelines: Guideline definitions in document order.

        Raises:
            CatalogIntegrityError: If two guidelines share an identifier.
        """

        self._guidelines: dict[GuidelineID, Guideline] = {}
        for guideline in guidelines:
            if guideline.id in self._guidelines:
                raise CatalogIntegrityError(f"duplicate guideline ID '{guideline.id}' in catalog")
            self._guidelines[guideline.id] = guideline

    @classmethod
    def from_json(cls, text: str, *, source: str = "<catalog>") -> GuidelineCatalog:
        """Deserialize a catalog document.

        Args:
            text: JSON document with a ``coding_guidelines`` list.
            source: Label used in error messages.

        Returns:
            GuidelineCatalog: Catalog containing every guideline of the document.

        Raises:
            CatalogIntegrityError: If the document is not valid JSON or violates
                the catalog structure (missing fields, bad IDs, unknown tools).
        """

        try:
            payload = json.loads(text)
        except json.JSONDecodeError as exc:
            raise CatalogIntegrityError(f"{source}: failed to parse catalog JSON: {exc}") from exc
        try:
            document = _CatalogDocument.model_validate(payload)
        except ValidationError as exc:
            raise CatalogIntegrityError(f"{source}: invalid guideline catalog: {exc}") from exc
        LOGGER.debug("loaded %d guidelines from %s", len(document.coding_guidelines), source)
        return cls(document.coding_guidelines)

    @classmethod
    def from_path(cls, path: Path) -> GuidelineCatalog:
        """Load a catalog document from ``path``.

        Raises:
            CatalogIntegrityError: If the file cannot be read or parsed.
        """

        try:
            text = path.read_text(encoding="utf-8")
        except OSError as exc:
            raise CatalogIntegrityError(f"{path}: unable to read catalog: {exc}") from exc
        return cls.from_json(text, source=str(path))

    def __getitem__(self, key: GuidelineID | str) -> Guideline:
        """Return the guideline for ``key``; raw strings are parsed first.

        Raises:
            KeyError: If ``key`` is unknown or not a valid guideline ID.
        """

        if isinstance(key, str):
            try:
                key = GuidelineID.parse(key)
            except (InvalidGuidelineIDError, InvalidGuidelineTypeError) as exc:
                raise KeyError(key) from exc
        return self._guidelines[key]

    def __iter__(self) -> Iterator[GuidelineID]:
        return iter(self._guidelines)

    def __len__(self) -> int:
        return len(self._guidelines)

    def lookup(self, tool: Tool, lint_id: str) -> list[GuidelineRef]:
        """Return references to every guideline violated by ``lint_id``.

        Args:
            tool: Tool that reported the diagnostic.
            lint_id: Lint identifier extracted from the diagnostic.

        Returns:
            list[GuidelineRef]: Matching guidelines in catalog order, each at most
            once. Empty when ``lint_id`` is empty or nothing matches.
        """

        if not lint_id:
            return []
        return [guideline.summary() for guideline in self._guidelines.values() if guideline.binds(tool, lint_id)]

    def tools_for(self, ids: Iterable[GuidelineID | str]) -> dict[Tool, list[str]]:
        """Group the lint identifiers bound to ``ids`` by tool.

        Unknown identifiers are skipped with a debug log entry.

        Args:
            ids: Guideline identifiers requested by the rules configuration.

        Returns:
            dict[Tool, list[str]]: Tools in first-seen order mapped to unique idents.
        """

        grouped: dict[Tool, list[str]] = {}
        for guideline_id in ids:
            guideline = self.get(guideline_id)
            if guideline is None:
                LOGGER.debug("guideline %s is not part of the catalog", guideline_id)
                continue
            for binding in guideline.tool:
                idents = grouped.setdefault(binding.name, [])
                if binding.ident not in idents:
                    idents.append(binding.ident)
        return grouped


@lru_cache(maxsize=1)
def load_default_catalog() -> GuidelineCatalog:
    """Return the catalog embedded in the package, parsed once per process.

    Raises:
        CatalogIntegrityError: If the embedded document is malformed.
    """

    text = resources.files(_DATA_PACKAGE).joinpath(_DEFAULT_CATALOG).read_text(encoding="utf-8")
    return GuidelineCatalog.from_json(text, source=_DEFAULT_CATALOG)


__all__ = [
    "CheckLevel",
    "Guideline",
    "GuidelineCatalog",
    "ToolBinding",
    "load_default_catalog",
]
