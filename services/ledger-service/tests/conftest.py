"""Pytest configuration for ledger-service tests.

Puts the service root (for `outline_ledger`) and `services/` (for `shared`)
on sys.path so the suite runs from a plain checkout as well as an install.
"""

import sys
from pathlib import Path

import pytest

SERVICE_ROOT = Path(__file__).resolve().parents[1]
SERVICES_ROOT = SERVICE_ROOT.parent

for path in (SERVICE_ROOT, SERVICES_ROOT):
    if str(path) not in sys.path:
        sys.path.insert(0, str(path))

from outline_ledger.models.ledger import Item, Ledger, NumericValue, Section, TextValue  # noqa: E402
from outline_ledger.totals import recompute_totals  # noqa: E402



def make_item(name: str, value: float | str, excluded: bool = False) -> Item:
    wrapped = TextValue(value) if isinstance(value, str) else NumericValue(float(value))
    return Item(name=name, value=wrapped, excluded=excluded)


def make_ledger(*sections: tuple[str, list[Item]]) -> Ledger:
    return recompute_totals(Ledger(sections=[Section(name=name, items=items) for name, items in sections]))


@pytest.fixture
def two_section_ledger() -> Ledger:
    return make_ledger(
        ("A", [make_item("x", 2), make_item("y", 3)]),
        ("B", [make_item("z", 5), make_item("note", "later"), make_item("old", 4, excluded=True)]),
    )
