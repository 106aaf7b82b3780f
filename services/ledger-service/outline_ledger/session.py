from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Mapping

from .edits import apply_edit
from .models.ledger import Ledger
from .parsers.outline_parser import parse_outline
from .serializer import serialize_ledger

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class CommitResult:
    text: str
    ledger: Ledger


def ledgers_equal(left: Ledger, right: Ledger) -> bool:
    """Structural equality: section/item names, values and flags in order. Totals are ignored."""
    if len(left.sections) != len(right.sections):
        return False
    for left_section, right_section in zip(left.sections, right.sections):
        if left_section.name != right_section.name:
            return False
        if len(left_section.items) != len(right_section.items):
            return False
        for left_item, right_item in zip(left_section.items, right_section.items):
            if (left_item.name, left_item.value, left_item.excluded) != (
                right_item.name,
                right_item.value,
                right_item.excluded,
            ):
                return False
    return True


class EditSession:
    """
    Snapshot plus working copy for the table editor.

    The snapshot is the last parsed ledger and is never mutated. Edits go to
    the working copy; `cancel` drops them and `commit` turns the working copy
    back into outline text, whose re-parse becomes the next snapshot.
    """

    def __init__(self, snapshot: Ledger) -> None:
        self._snapshot = snapshot.copy()
        self._working = snapshot.copy()

    @classmethod
    def begin(cls, ledger: Ledger) -> EditSession:
        return cls(ledger)

    @classmethod
    def from_text(cls, text: str) -> EditSession:
        return cls(parse_outline(text))

    @property
    def snapshot(self) -> Ledger:
        # Hand out a copy so callers cannot mutate the committed state.
        return self._snapshot.copy()

    @property
    def working(self) -> Ledger:
        return self._working

    @property
    def is_dirty(self) -> bool:
        return not ledgers_equal(self._snapshot, self._working)

    def edit(self, operation: Mapping[str, Any]) -> Ledger:
        return apply_edit(self._working, operation)

    def cancel(self) -> Ledger:
        self._working = self._snapshot.copy()
        return self._working

    def commit(self) -> CommitResult:
        text = serialize_ledger(self._working)
        committed = parse_outline(text)
        logger.info(
            {
                "event": "edit_session_committed",
                "section_count": len(committed.sections),
                "item_count": committed.item_count,
                "grand_total": committed.grand_total,
            }
        )
        self._snapshot = committed.copy()
        self._working = committed.copy()
        return CommitResult(text=text, ledger=committed)
