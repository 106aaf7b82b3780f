"""Tests for parsers/values.py - numeral normalization, numeric-or-text coercion and rendering."""

import pytest
from outline_ledger.models.ledger import NumericValue, TextValue
from outline_ledger.parsers.values import coerce_value, format_number, normalize_numerals, render_value


def test_normalize_numerals_maps_arabic_indic_digits_and_separator():
    assert normalize_numerals("٠١٢٣٤٥٦٧٨٩") == "0123456789"
    assert normalize_numerals("٣،٥") == "3.5"
    assert normalize_numerals("abc 12") == "abc 12"


@pytest.mark.parametrize(
    ("raw", "expected"),
    [
        ("17", 17.0),
        ("0.5", 0.5),
        ("-4", -4.0),
        (".25", 0.25),
        ("3.", 3.0),
        ("1e3", 1000.0),
        ("١٧", 17.0),
        ("٣،٥", 3.5),
    ],
)
def test_coerce_value_numeric(raw, expected):
    value = coerce_value(raw)

    assert isinstance(value, NumericValue)
    assert value.amount == pytest.approx(expected)


@pytest.mark.parametrize("raw", ["", "abc", "5 ستائر", "nan", "inf", "Infinity", "1_000", "1,200", "1e999", "--1"])
def test_coerce_value_keeps_non_numbers_as_text(raw):
    assert coerce_value(raw) == TextValue(raw)


def test_coerce_value_preserves_original_text_not_normalized_text():
    assert coerce_value("٣ قطع") == TextValue("٣ قطع")


def test_coerce_value_without_normalization_rejects_arabic_digits():
    assert coerce_value("١٧", normalize=False) == TextValue("١٧")
    assert coerce_value(" 12 ", normalize=False) == NumericValue(12.0)
    assert coerce_value("   ", normalize=False) == TextValue("   ")


@pytest.mark.parametrize(
    ("amount", "expected"),
    [
        (17.0, "17"),
        (2.5, "2.5"),
        (-0.0, "0"),
        (0.1, "0.1"),
        (-3.0, "-3"),
        (0.00005, "0.00005"),
        (0.00001, "0.00001"),
        (-0.000015, "-0.000015"),
        (0.000001, "0.000001"),
        (0.0000015, "0.0000015"),
        (9e-7, "9e-7"),
        (1e-7, "1e-7"),
        (2.5e-8, "2.5e-8"),
        (1e20, "100000000000000000000"),
        (1e21, "1e+21"),
        (1.5e22, "1.5e+22"),
    ],
)
def test_format_number_uses_plain_decimal_notation(amount, expected):
    assert format_number(amount) == expected


def test_render_value_returns_text_verbatim():
    assert render_value(TextValue("  spaced ")) == "  spaced "
    assert render_value(NumericValue(30.0)) == "30"


def test_small_values_render_without_python_exponent_padding():
    assert render_value(coerce_value("0.00005")) == "0.00005"
    assert render_value(coerce_value("٠،٠٠٠٠١")) == "0.00001"
    assert render_value(coerce_value("0.0000001")) == "1e-7"
