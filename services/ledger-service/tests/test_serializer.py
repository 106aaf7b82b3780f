import pytest
from outline_ledger.models.ledger import Item, Ledger, NumericValue, Section, TextValue
from outline_ledger.parsers.outline_parser import parse_outline
from outline_ledger.serializer import render_item_line, serialize_ledger
from outline_ledger.session import ledgers_equal


def test_serialize_ledger_layout(two_section_ledger):
    assert serialize_ledger(two_section_ledger) == "A\nx: 2\ny: 3\n---\nB\nz: 5\nnote: later\n[X] old: 4"


def test_serialize_empty_ledger_is_empty_text():
    assert serialize_ledger(Ledger()) == ""


def test_serialize_section_without_items_emits_header_only():
    ledger = Ledger(sections=[Section(name="Only")])

    assert serialize_ledger(ledger) == "Only"


def test_render_item_line_numbers_and_text():
    assert render_item_line(Item("kettle", NumericValue(1.5))) == "kettle: 1.5"
    assert render_item_line(Item("fridge", NumericValue(30.0), excluded=True)) == "[X] fridge: 30"
    assert render_item_line(Item("note", TextValue("10:30"))) == "note: 10:30"


def test_arabic_numerals_are_not_restored():
    ledger = parse_outline("Room\nستائر: ٣،٥")

    assert serialize_ledger(ledger) == "Room\nستائر: 3.5"


@pytest.mark.parametrize(
    "text",
    [
        "A\nx: 2\ny: 3\n---\nB\nz: 5\n",
        "المطبخ\nالهيكل:17\n[X] تلاجه: 30\nمكواة: ٢،٥\n---\nالمجلس\nركنة: 50\n 5 ستائر: 6\n\n---",
        "Header\nnote: later\nmeeting: 10:30\nEmpty\n---\nLast\nv: -0.25",
    ],
)
def test_parse_serialize_parse_is_structurally_stable(text):
    first = parse_outline(text)

    second = parse_outline(serialize_ledger(first))

    assert ledgers_equal(first, second)
    assert second.grand_total == pytest.approx(first.grand_total)


def test_tiny_values_serialize_in_decimal_notation():
    ledger = parse_outline("A\nscrew: 0.00005\nbolt: ٠،٠٠٠٠١\ntiny: 0.0000001")

    text = serialize_ledger(ledger)

    assert text == "A\nscrew: 0.00005\nbolt: 0.00001\ntiny: 1e-7"
    assert ledgers_equal(parse_outline(text), ledger)
