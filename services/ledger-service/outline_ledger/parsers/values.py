from __future__ import annotations

import math
import re
from decimal import Decimal

from ..models.ledger import ItemValue, NumericValue, TextValue

ARABIC_INDIC_DIGITS = "٠١٢٣٤٥٦٧٨٩"
ARABIC_DECIMAL_SEPARATOR = "،"

_NUMERAL_TABLE = str.maketrans(
    {
        **{digit: str(position) for position, digit in enumerate(ARABIC_INDIC_DIGITS)},
        ARABIC_DECIMAL_SEPARATOR: ".",
    }
)

# float() also accepts "nan", "inf", "1_000" and non-ASCII digits; those must stay text.
_DECIMAL_LITERAL = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?", re.ASCII)

# Magnitudes inside [1e-6, 1e21) render in plain decimal notation, others with an exponent.
_PLAIN_LOWER_LIMIT = 1e-6
_PLAIN_UPPER_LIMIT = 1e21


def normalize_numerals(text: str) -> str:
    """Map Arabic-indic digits to 0-9 and the Arabic decimal separator to '.'."""
    return text.translate(_NUMERAL_TABLE)


def coerce_value(raw: str, normalize: bool = True) -> ItemValue:
    """
    Interpret raw value text as a number when possible, else keep it as text.

    Args:
        raw: Value text as typed by the user (parse-time callers pass it trimmed).
        normalize: Apply Arabic numeral normalization before the numeric check.
    Returns:
        NumericValue for non-empty finite decimal literals; TextValue holding the
        original, un-normalized `raw` otherwise. Never raises.
    """
    candidate = normalize_numerals(raw) if normalize else raw
    amount = _parse_decimal(candidate)
    if amount is None:
        return TextValue(raw)
    return NumericValue(amount)


def format_number(amount: float) -> str:
    """Render with the shortest round-trip digits: `0.00005`, `17`, `1e-7`, `1.5e+21`."""
    if amount == 0:
        return "0"
    if not math.isfinite(amount):
        return repr(float(amount))
    if _PLAIN_LOWER_LIMIT <= abs(amount) < _PLAIN_UPPER_LIMIT:
        if amount.is_integer():
            return str(int(amount))
        return format(Decimal(repr(float(amount))), "f")
    mantissa, _, exponent = repr(float(amount)).partition("e")
    if not exponent:
        return mantissa
    power = int(exponent)
    return f"{mantissa}e{'+' if power >= 0 else '-'}{abs(power)}"


def render_value(value: ItemValue) -> str:
    if isinstance(value, NumericValue):
        return format_number(value.amount)
    return value.text


def _parse_decimal(text: str) -> float | None:
    stripped = text.strip()
    if not stripped or not _DECIMAL_LITERAL.fullmatch(stripped):
        return None
    amount = float(stripped)
    if not math.isfinite(amount):
        return None
    return amount
