"""
Outline ledger core.

Turns plain-text outlines (headers, `name: value` lines, `[X] ` exclusions and
dash separators) into a ledger with section and grand totals, and renders an
edited ledger back into the same outline text.
"""

from .edits import LedgerIndexError, UnknownEditError, apply_edit
from .models.ledger import Item, Ledger, NumericValue, Section, TextValue
from .parsers.outline_parser import parse_outline
from .serializer import serialize_ledger
from .totals import recompute_totals

__all__ = [
    "Item",
    "Ledger",
    "LedgerIndexError",
    "NumericValue",
    "Section",
    "TextValue",
    "UnknownEditError",
    "apply_edit",
    "parse_outline",
    "recompute_totals",
    "serialize_ledger",
]
