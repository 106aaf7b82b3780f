from __future__ import annotations

import logging
import re
from typing import Optional, Tuple

from ..models.ledger import EXCLUSION_MARKER, UNTITLED_SECTION_NAME, Item, Ledger, Section
from ..totals import recompute_totals
from .values import coerce_value

logger = logging.getLogger(__name__)

_LINE_BREAK = re.compile(r"\r?\n")
_SEPARATOR_LINE = re.compile(r"-+")


def parse_outline(text: str) -> Ledger:
    """
    Parse a plain-text outline into a Ledger with populated totals.

    Args:
        text: Line-based outline. Headers start sections, `name: value` lines
            become items, dash-only lines reset the current section.
    Returns:
        A Ledger; empty or garbage input yields an empty (or text-only) Ledger.
    Assumptions:
        Single pass without lookahead; no line is ever rejected.
    """
    ledger = Ledger()
    current: Optional[Section] = None

    for raw_line in _LINE_BREAK.split(text):
        line = raw_line.strip()
        if not line:
            continue
        if is_separator_line(line):
            current = None
            continue

        if not is_item_line(line):
            current = Section(name=line)
            ledger.sections.append(current)
            continue

        if current is None:
            current = Section(name=UNTITLED_SECTION_NAME)
            ledger.sections.append(current)
            logger.debug({"event": "implicit_section_created", "section_index": len(ledger.sections) - 1})

        raw_name, raw_value = split_item_line(line)
        name, excluded = strip_exclusion_marker(raw_name)
        current.items.append(Item(name=name, value=coerce_value(raw_value), excluded=excluded))

    return recompute_totals(ledger)


def is_separator_line(line: str) -> bool:
    return bool(_SEPARATOR_LINE.fullmatch(line))


def is_item_line(line: str) -> bool:
    """A line is an item when its first ':' is neither the first nor the last character."""
    colon_index = line.find(":")
    return 0 < colon_index < len(line) - 1


def split_item_line(line: str) -> Tuple[str, str]:
    name, _, value = line.partition(":")
    return name.strip(), value.strip()


def strip_exclusion_marker(name: str) -> Tuple[str, bool]:
    if name.startswith(EXCLUSION_MARKER):
        return name[len(EXCLUSION_MARKER) :], True
    return name, False
