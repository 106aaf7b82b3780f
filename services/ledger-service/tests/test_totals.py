import pytest
from outline_ledger.models.ledger import Item, Ledger, NumericValue, Section, TextValue
from outline_ledger.totals import (
    ItemShare,
    compute_section_total,
    format_share,
    item_share,
    recompute_totals,
    section_shares,
)


def make_section(name: str, *items: Item) -> Section:
    return Section(name=name, items=list(items))


def test_compute_section_total_skips_text_and_excluded_items():
    section = make_section(
        "Kitchen",
        Item("fridge", NumericValue(30.0)),
        Item("washer", NumericValue(25.0), excluded=True),
        Item("note", TextValue("soon")),
        Item("kettle", NumericValue(1.5)),
    )

    assert compute_section_total(section) == pytest.approx(31.5)


def test_recompute_totals_updates_sections_and_grand_total_in_place(two_section_ledger):
    two_section_ledger.sections[0].total = 999.0
    two_section_ledger.grand_total = -1.0

    result = recompute_totals(two_section_ledger)

    assert result is two_section_ledger
    assert [section.total for section in result.sections] == [pytest.approx(5.0), pytest.approx(5.0)]
    assert result.grand_total == pytest.approx(10.0)


def test_recompute_totals_is_idempotent(two_section_ledger):
    first = (two_section_ledger.grand_total, [s.total for s in two_section_ledger.sections])

    recompute_totals(two_section_ledger)

    assert (two_section_ledger.grand_total, [s.total for s in two_section_ledger.sections]) == first


def test_empty_ledger_totals_are_zero():
    ledger = recompute_totals(Ledger(sections=[Section(name="Empty")]))

    assert ledger.sections[0].total == 0
    assert ledger.grand_total == 0


def test_toggling_exclusion_changes_total_by_item_value(two_section_ledger):
    section = two_section_ledger.sections[0]
    before = section.total

    section.items[1].excluded = True
    recompute_totals(two_section_ledger)

    assert section.total == pytest.approx(before - 3.0)


def test_item_share_statuses():
    section = make_section(
        "Room",
        Item("sofa", NumericValue(30.0)),
        Item("table", NumericValue(10.0)),
        Item("tv", NumericValue(20.0), excluded=True),
        Item("note", TextValue("later")),
        Item("free", NumericValue(0.0)),
    )
    section.total = compute_section_total(section)

    assert item_share(section, section.items[0]) == ItemShare(status="included", percent=pytest.approx(75.0))
    assert item_share(section, section.items[2]) == ItemShare(status="excluded")
    assert item_share(section, section.items[3]) == ItemShare(status="none")
    assert section_shares(section) == ["75.0%", "25.0%", "Excluded", "—", "—"]


def test_item_share_without_positive_total_is_none():
    section = make_section("Refunds", Item("refund", NumericValue(-5.0)), Item("gift", NumericValue(5.0), excluded=True))
    section.total = compute_section_total(section)

    assert format_share(item_share(section, section.items[0])) == "—"
    assert format_share(item_share(section, section.items[1])) == "Excluded"


def test_format_share_rounds_to_one_decimal():
    assert format_share(ItemShare(status="included", percent=100 / 3)) == "33.3%"
