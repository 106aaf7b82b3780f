from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, Optional

from .models.ledger import Item, Ledger, NumericValue, Section

ShareStatus = Literal["included", "excluded", "none"]

SUBTOTAL_SHARE_LABEL = "100%"
EXCLUDED_SHARE_LABEL = "Excluded"
NO_SHARE_LABEL = "—"


@dataclass(frozen=True, slots=True)
class ItemShare:
    status: ShareStatus
    percent: Optional[float] = None


def contributes_to_total(item: Item) -> bool:
    return item.is_numeric and not item.excluded


def compute_section_total(section: Section) -> float:
    """
    Sum the numeric, non-excluded item values of a section.

    Args:
        section: Section whose items are read but not modified.
    Returns:
        The subtotal; text-valued and excluded items contribute 0.
    """
    return float(sum(item.value.amount for item in section.items if contributes_to_total(item)))


def recompute_section(section: Section) -> Section:
    section.total = compute_section_total(section)
    return section


def recompute_totals(ledger: Ledger) -> Ledger:
    """
    Refresh every section total and the grand total in place.

    Args:
        ledger: Ledger to update; only `total` and `grand_total` fields are written.
    Returns:
        The same ledger instance, so callers can chain after edits.
    Assumptions:
        Idempotent and safe to call after any mutation, including renames.
    """
    grand_total = 0.0
    for section in ledger.sections:
        grand_total += recompute_section(section).total
    ledger.grand_total = grand_total
    return ledger


def item_share(section: Section, item: Item) -> ItemShare:
    """
    Describe an item's share of its section subtotal.

    Included items with a positive value report their percentage of a positive
    subtotal. Excluded items with a positive value are flagged as excluded.
    Everything else (text, zero, negative values or an empty subtotal) has no share.
    """
    amount = item.value.amount if isinstance(item.value, NumericValue) else 0.0
    if section.total > 0 and amount > 0 and not item.excluded:
        return ItemShare(status="included", percent=amount / section.total * 100)
    if item.excluded and amount > 0:
        return ItemShare(status="excluded")
    return ItemShare(status="none")


def format_share(share: ItemShare) -> str:
    if share.status == "included" and share.percent is not None:
        return f"{share.percent:.1f}%"
    if share.status == "excluded":
        return EXCLUDED_SHARE_LABEL
    return NO_SHARE_LABEL


def section_shares(section: Section) -> list[str]:
    """Share labels for each item of the section, in item order."""
    return [format_share(item_share(section, item)) for item in section.items]
