"""
Projections of a ledger for external collaborators.

`ledger_to_tree` is the JSON download/persistence shape, `ledger_to_rows` the
CSV download, `format_display_value` the on-screen rendering. Scaling by the
display factor and the currency suffix are presentation only.
"""

from __future__ import annotations

import csv
import math
from dataclasses import dataclass
from io import StringIO
from typing import Any, Dict, List, Mapping, Sequence

from .models.ledger import Item, ItemValue, Ledger, NumericValue, Section, TextValue
from .parsers.outline_parser import parse_outline
from .parsers.values import format_number
from .settings import LedgerSettings
from .totals import recompute_totals

UNTITLED_DOCUMENT_TITLE = "Untitled Document"

# Absorbs float noise from scaling (0.3 * 1000 == 300.00000000000006).
_SCALED_PRECISION = 9


class LedgerTreeError(ValueError):
    """Raised when a JSON-like tree does not describe a ledger."""


@dataclass(frozen=True, slots=True)
class DocumentSnapshot:
    """Opaque (title, text, parsed data) triple handed to a document store."""

    title: str
    text: str
    parsed_data: Dict[str, Any]


def ledger_to_tree(ledger: Ledger) -> Dict[str, Any]:
    return {
        "sections": [
            {
                "name": section.name,
                "items": [
                    {"name": item.name, "value": _tree_value(item.value), "excluded": item.excluded}
                    for item in section.items
                ],
                "total": _json_number(section.total),
            }
            for section in ledger.sections
        ],
        "grandTotal": _json_number(ledger.grand_total),
    }


def ledger_from_tree(tree: Mapping[str, Any]) -> Ledger:
    """
    Rebuild a Ledger from the shape produced by `ledger_to_tree`.

    Stored totals in the tree are ignored and recomputed. Raises LedgerTreeError
    when sections, names or values have the wrong shape.
    """
    if not isinstance(tree, Mapping):
        raise LedgerTreeError("Ledger tree must be an object")
    raw_sections = tree.get("sections", [])
    if not isinstance(raw_sections, list):
        raise LedgerTreeError("'sections' must be a list")

    sections: List[Section] = []
    for section_index, raw_section in enumerate(raw_sections):
        if not isinstance(raw_section, Mapping):
            raise LedgerTreeError(f"Section {section_index} must be an object")
        name = raw_section.get("name")
        if not isinstance(name, str):
            raise LedgerTreeError(f"Section {section_index} is missing a text 'name'")
        raw_items = raw_section.get("items", [])
        if not isinstance(raw_items, list):
            raise LedgerTreeError(f"Section {section_index} 'items' must be a list")
        items = [_item_from_tree(raw_item, section_index, item_index) for item_index, raw_item in enumerate(raw_items)]
        sections.append(Section(name=name, items=items))

    return recompute_totals(Ledger(sections=sections))


def scale_amount(amount: float, settings: LedgerSettings) -> float:
    return round(amount * settings.display_scale, _SCALED_PRECISION)


def format_export_value(value: ItemValue, settings: LedgerSettings) -> str:
    """CSV cell text: scaled number with the currency label, or the text value as-is."""
    if isinstance(value, NumericValue):
        return format_export_amount(value.amount, settings)
    return value.text


def format_export_amount(amount: float, settings: LedgerSettings) -> str:
    return f"{format_number(scale_amount(amount, settings))} {settings.currency_label}"


def format_display_value(value: ItemValue | float, settings: LedgerSettings) -> str:
    """On-screen value: scaled, thousands-grouped, at most three fraction digits."""
    if isinstance(value, TextValue):
        return value.text
    amount = value.amount if isinstance(value, NumericValue) else float(value)
    grouped = f"{scale_amount(amount, settings):,.3f}".rstrip("0").rstrip(".")
    if grouped in ("-0", ""):
        grouped = "0"
    return f"{grouped} {settings.currency_label}"


def ledger_to_rows(ledger: Ledger, settings: LedgerSettings) -> List[List[str]]:
    rows: List[List[str]] = []
    for section in ledger.sections:
        rows.append([f"Section: {section.name}"])
        rows.append(["Item", "Value"])
        for item in section.items:
            rows.append([item.name, format_export_value(item.value, settings)])
        rows.append(["Subtotal", format_export_amount(section.total, settings)])
        rows.append([])
    rows.append(["Grand Total", format_export_amount(ledger.grand_total, settings)])
    return rows


def rows_to_csv(rows: Sequence[Sequence[str]]) -> str:
    buffer = StringIO()
    writer = csv.writer(buffer, lineterminator="\n")
    writer.writerows(rows)
    return buffer.getvalue()


def build_document_snapshot(title: str | None, text: str) -> DocumentSnapshot:
    """Parse `text` and package it with its title for a document store."""
    cleaned_title = (title or "").strip() or UNTITLED_DOCUMENT_TITLE
    return DocumentSnapshot(title=cleaned_title, text=text, parsed_data=ledger_to_tree(parse_outline(text)))


def _item_from_tree(raw_item: Any, section_index: int, item_index: int) -> Item:
    location = f"Item {item_index} of section {section_index}"
    if not isinstance(raw_item, Mapping):
        raise LedgerTreeError(f"{location} must be an object")
    name = raw_item.get("name")
    if not isinstance(name, str):
        raise LedgerTreeError(f"{location} is missing a text 'name'")
    excluded = raw_item.get("excluded", False)
    if not isinstance(excluded, bool):
        raise LedgerTreeError(f"{location} 'excluded' must be a boolean")
    return Item(name=name, value=_value_from_tree(raw_item.get("value"), location), excluded=excluded)


def _value_from_tree(raw_value: Any, location: str) -> ItemValue:
    if isinstance(raw_value, bool) or raw_value is None:
        raise LedgerTreeError(f"{location} 'value' must be a number or text")
    if isinstance(raw_value, (int, float)):
        amount = float(raw_value)
        if not math.isfinite(amount):
            raise LedgerTreeError(f"{location} 'value' must be finite")
        return NumericValue(amount)
    if isinstance(raw_value, str):
        return TextValue(raw_value)
    raise LedgerTreeError(f"{location} 'value' must be a number or text")


def _tree_value(value: ItemValue) -> int | float | str:
    if isinstance(value, NumericValue):
        return _json_number(value.amount)
    return value.text


def _json_number(amount: float) -> int | float:
    if amount.is_integer():
        return int(amount)
    return amount
