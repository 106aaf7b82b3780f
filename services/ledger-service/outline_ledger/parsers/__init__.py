from .outline_parser import parse_outline
from .values import coerce_value, format_number, normalize_numerals, render_value

__all__ = [
    "coerce_value",
    "format_number",
    "normalize_numerals",
    "parse_outline",
    "render_value",
]
