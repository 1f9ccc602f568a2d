# SPDX-License-Identifier: MIT
# Copyright (c) 2025 Blackcat Informatics® Inc.
"""Guideline identifier parsing and comparison."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Final

from ..core.errors import InvalidGuidelineIDError, InvalidGuidelineTypeError

_SEPARATOR: Final[str] = "."


@dataclass(frozen=True, slots=True, eq=False)
class GuidelineID:
    """Unique identifier of a coding guideline such as ``P.VAR.CONST.02``.

    Attributes:
        category: Single lowercase character naming the guideline type (``p``, ``g``).
        group: Dot-separated lowercase path of the group, e.g. ``var.const``.
        index: Index of the guideline inside its group with its casing preserved.
    """

    category: str
    group: str
    index: str

    @classmethod
    def parse(cls, raw: str) -> GuidelineID:
        """Parse ``raw`` into a :class:`GuidelineID`.

        Args:
            raw: Identifier text in ``<type>.<group...>.<index>`` form, any case.

        Returns:
            GuidelineID: Identifier with type and group lowercased.

        Raises:
            InvalidGuidelineIDError: If the group or index segment is missing.
            InvalidGuidelineTypeError: If the type token is not exactly one character.
        """

        category, sep, remainder = raw.partition(_SEPARATOR)
        if not sep:
            raise InvalidGuidelineIDError(raw)
        if len(category) != 1:
            raise InvalidGuidelineTypeError(category)
        group, sep, index = remainder.rpartition(_SEPARATOR)
        if not sep or not group or not index:
            raise InvalidGuidelineIDError(raw)
        return cls(category=category.lower(), group=group.lower(), index=index)

    def __str__(self) -> str:
        return _SEPARATOR.join((self.category, self.group, self.index))

    def __eq__(self, other: object) -> bool:
        if isinstance(other, str):
            try:
                other = GuidelineID.parse(other)
            except (InvalidGuidelineIDError, InvalidGuidelineTypeError):
                return False
        if not isinstance(other, GuidelineID):
            return NotImplemented
        return (self.category, self.group, self.index) == (other.category, other.group, other.index)

    def __hash__(self) -> int:
        return hash((self.category, self.group, self.index))


def coerce_guideline_id(value: object) -> GuidelineID:
    """Return ``value`` as a :class:`GuidelineID`, parsing strings on the way.

    Used as a pydantic ``mode="before"`` validator body.
    """

    if isinstance(value, GuidelineID):
        return value
    if isinstance(value, str):
        return GuidelineID.parse(value)
    raise ValueError(f"guideline ID must be a string, got {type(value).__name__}")


__all__ = ["GuidelineID", "coerce_guideline_id"]
