from __future__ import annotations

from typing import List

from .models.ledger import EXCLUSION_MARKER, SECTION_SEPARATOR, Item, Ledger
from .parsers.values import render_value


def serialize_ledger(ledger: Ledger) -> str:
    """
    Render a ledger back into outline text.

    Sections are separated by `---` lines (none before the first or after the
    last). Excluded items carry the `[X] ` prefix. Numbers use plain decimal
    notation; the original numeral script and spacing are not restored.
    """
    lines: List[str] = []
    for index, section in enumerate(ledger.sections):
        if index > 0:
            lines.append(SECTION_SEPARATOR)
        lines.append(section.name)
        lines.extend(render_item_line(item) for item in section.items)
    return "\n".join(lines)


def render_item_line(item: Item) -> str:
    prefix = EXCLUSION_MARKER if item.excluded else ""
    return f"{prefix}{item.name}: {render_value(item.value)}"
