from __future__ import annotations

"""
Environment-driven presentation settings for the ledger service.

Display scaling and the currency label only affect exports and on-screen
values; stored item values are never scaled.
"""

import math
import os
from dataclasses import dataclass
from typing import Optional

DEFAULT_DISPLAY_SCALE = 1000.0
DEFAULT_CURRENCY_LABEL = "جنية"
DEFAULT_MAX_TEXT_LENGTH = 200_000

DISPLAY_SCALE_ENV = "LEDGER_DISPLAY_SCALE"
CURRENCY_LABEL_ENV = "LEDGER_CURRENCY_LABEL"
MAX_TEXT_LENGTH_ENV = "LEDGER_MAX_TEXT_LENGTH"


class LedgerSettingsError(RuntimeError):
    """Raised when ledger settings cannot be constructed from the environment."""


@dataclass(frozen=True, slots=True)
class LedgerSettings:
    display_scale: float = DEFAULT_DISPLAY_SCALE
    currency_label: str = DEFAULT_CURRENCY_LABEL
    max_text_length: int = DEFAULT_MAX_TEXT_LENGTH


def load_ledger_settings() -> LedgerSettings:
    """
    Build LedgerSettings from LEDGER_* env vars, falling back to defaults when unset/empty.

    Raises:
        LedgerSettingsError: a numeric env var is malformed or not positive.
    """

    display_scale = _parse_float(os.getenv(DISPLAY_SCALE_ENV), DEFAULT_DISPLAY_SCALE, DISPLAY_SCALE_ENV)
    max_text_length = _parse_int(os.getenv(MAX_TEXT_LENGTH_ENV), DEFAULT_MAX_TEXT_LENGTH, MAX_TEXT_LENGTH_ENV)
    currency_label = (os.getenv(CURRENCY_LABEL_ENV) or "").strip() or DEFAULT_CURRENCY_LABEL

    if not math.isfinite(display_scale) or display_scale <= 0:
        raise LedgerSettingsError(f"{DISPLAY_SCALE_ENV} must be positive (received '{display_scale}')")
    if max_text_length <= 0:
        raise LedgerSettingsError(f"{MAX_TEXT_LENGTH_ENV} must be positive (received '{max_text_length}')")

    return LedgerSettings(
        display_scale=display_scale,
        currency_label=currency_label,
        max_text_length=max_text_length,
    )


def _parse_float(raw_value: Optional[str], default: float, env_key: str) -> float:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return float(raw_value)
    except ValueError as exc:
        raise LedgerSettingsError(f"{env_key} must be numeric (received '{raw_value}')") from exc


def _parse_int(raw_value: Optional[str], default: int, env_key: str) -> int:
    if raw_value is None or raw_value.strip() == "":
        return default

    try:
        return int(raw_value)
    except ValueError as exc:
        raise LedgerSettingsError(f"{env_key} must be an integer (received '{raw_value}')") from exc
