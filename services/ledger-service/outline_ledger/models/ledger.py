from __future__ import annotations

import copy
from dataclasses import dataclass, field
from typing import Union

UNTITLED_SECTION_NAME = "Untitled"
EXCLUSION_MARKER = "[X] "
SECTION_SEPARATOR = "---"
DEFAULT_ITEM_NAME = "New Item"
DEFAULT_SECTION_NAME = "New Section"


@dataclass(frozen=True, slots=True)
class NumericValue:
    """An item value that parsed as a finite number."""

    amount: float


@dataclass(frozen=True, slots=True)
class TextValue:
    """An item value kept verbatim because it is not a number."""

    text: str


ItemValue = Union[NumericValue, TextValue]


@dataclass(slots=True)
class Item:
    """Single `name: value` entry of a section.

    The exclusion marker is never part of `name`; it lives in `excluded`.
    """

    name: str
    value: ItemValue
    excluded: bool = False

    @property
    def is_numeric(self) -> bool:
        return isinstance(self.value, NumericValue)


@dataclass(slots=True)
class Section:
    """Named, ordered group of items. `total` is derived by the totals engine."""

    name: str
    items: list[Item] = field(default_factory=list)
    total: float = 0.0


@dataclass(slots=True)
class Ledger:
    """Document root: ordered sections plus the derived grand total."""

    sections: list[Section] = field(default_factory=list)
    grand_total: float = 0.0

    def copy(self) -> Ledger:
        """Return an independent working copy (no shared sections or items)."""
        return copy.deepcopy(self)

    @property
    def item_count(self) -> int:
        return sum(len(section.items) for section in self.sections)
