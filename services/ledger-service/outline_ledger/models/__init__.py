from .ledger import (
    DEFAULT_ITEM_NAME,
    DEFAULT_SECTION_NAME,
    EXCLUSION_MARKER,
    SECTION_SEPARATOR,
    UNTITLED_SECTION_NAME,
    Item,
    ItemValue,
    Ledger,
    NumericValue,
    Section,
    TextValue,
)

__all__ = [
    "DEFAULT_ITEM_NAME",
    "DEFAULT_SECTION_NAME",
    "EXCLUSION_MARKER",
    "SECTION_SEPARATOR",
    "UNTITLED_SECTION_NAME",
    "Item",
    "ItemValue",
    "Ledger",
    "NumericValue",
    "Section",
    "TextValue",
]
