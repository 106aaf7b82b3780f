"""
Edit operations applied by the table editor to a working ledger.

Every operation mutates the ledger in place, recomputes totals and returns the
same ledger. Indices must be in range; anything else raises LedgerIndexError
before the ledger is touched. Negative indices count as out of range.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Mapping

from .models.ledger import DEFAULT_ITEM_NAME, DEFAULT_SECTION_NAME, Item, Ledger, NumericValue, Section
from .parsers.values import coerce_value
from .totals import recompute_totals

logger = logging.getLogger(__name__)


class LedgerIndexError(IndexError):
    """Raised when an edit addresses a section or item that does not exist."""

    def __init__(self, kind: str, index: int, size: int) -> None:
        super().__init__(f"{kind} index {index} is out of range (size {size})")
        self.kind = kind
        self.index = index
        self.size = size


class UnknownEditError(ValueError):
    """Raised when a declarative edit names an unsupported operation or omits fields."""


def default_item() -> Item:
    return Item(name=DEFAULT_ITEM_NAME, value=NumericValue(0.0), excluded=False)


def rename_section(ledger: Ledger, section_index: int, name: str) -> Ledger:
    _section_at(ledger, section_index).name = name
    return recompute_totals(ledger)


def rename_item(ledger: Ledger, section_index: int, item_index: int, name: str) -> Ledger:
    _item_at(ledger, section_index, item_index).name = name
    return recompute_totals(ledger)


def set_item_value(ledger: Ledger, section_index: int, item_index: int, raw_value: str) -> Ledger:
    """Store the edited text as a number when it parses, else verbatim (no numeral normalization)."""
    _item_at(ledger, section_index, item_index).value = coerce_value(raw_value, normalize=False)
    return recompute_totals(ledger)


def toggle_item_exclusion(ledger: Ledger, section_index: int, item_index: int) -> Ledger:
    item = _item_at(ledger, section_index, item_index)
    item.excluded = not item.excluded
    return recompute_totals(ledger)


def add_item(ledger: Ledger, section_index: int) -> Ledger:
    _section_at(ledger, section_index).items.append(default_item())
    return recompute_totals(ledger)


def remove_item(ledger: Ledger, section_index: int, item_index: int) -> Ledger:
    _item_at(ledger, section_index, item_index)
    del ledger.sections[section_index].items[item_index]
    return recompute_totals(ledger)


def add_section(ledger: Ledger) -> Ledger:
    ledger.sections.append(Section(name=DEFAULT_SECTION_NAME, items=[default_item()]))
    return recompute_totals(ledger)


def remove_section(ledger: Ledger, section_index: int) -> Ledger:
    _section_at(ledger, section_index)
    del ledger.sections[section_index]
    return recompute_totals(ledger)


_OPERATIONS: Dict[str, Callable[[Ledger, Mapping[str, Any]], Ledger]] = {
    "rename_section": lambda ledger, op: rename_section(ledger, op["section"], op["name"]),
    "rename_item": lambda ledger, op: rename_item(ledger, op["section"], op["item"], op["name"]),
    "set_item_value": lambda ledger, op: set_item_value(ledger, op["section"], op["item"], str(op["value"])),
    "toggle_item_exclusion": lambda ledger, op: toggle_item_exclusion(ledger, op["section"], op["item"]),
    "add_item": lambda ledger, op: add_item(ledger, op["section"]),
    "remove_item": lambda ledger, op: remove_item(ledger, op["section"], op["item"]),
    "add_section": lambda ledger, op: add_section(ledger),
    "remove_section": lambda ledger, op: remove_section(ledger, op["section"]),
}


def apply_edit(ledger: Ledger, operation: Mapping[str, Any]) -> Ledger:
    """
    Dispatch a declarative edit such as {"op": "toggle_item_exclusion", "section": 0, "item": 2}.

    Args:
        ledger: Working ledger to mutate.
        operation: Mapping with an "op" key plus the fields that operation needs
            ("section", "item", "name", "value").
    Returns:
        The mutated ledger with refreshed totals.
    Raises:
        UnknownEditError: unsupported op or missing field.
        LedgerIndexError: index out of range.
    """
    op_name = operation.get("op")
    handler = _OPERATIONS.get(op_name) if isinstance(op_name, str) else None
    if handler is None:
        raise UnknownEditError(f"Unsupported edit operation '{op_name}'")

    try:
        result = handler(ledger, operation)
    except KeyError as exc:
        raise UnknownEditError(f"Edit operation '{op_name}' is missing field {exc.args[0]!r}") from exc

    logger.debug({"event": "ledger_edit_applied", "op": op_name, "grand_total": result.grand_total})
    return result


def _section_at(ledger: Ledger, section_index: int) -> Section:
    size = len(ledger.sections)
    if not _in_range(section_index, size):
        raise LedgerIndexError("section", section_index, size)
    return ledger.sections[section_index]


def _item_at(ledger: Ledger, section_index: int, item_index: int) -> Item:
    section = _section_at(ledger, section_index)
    size = len(section.items)
    if not _in_range(item_index, size):
        raise LedgerIndexError("item", item_index, size)
    return section.items[item_index]


def _in_range(index: int, size: int) -> bool:
    return isinstance(index, int) and not isinstance(index, bool) and 0 <= index < size
