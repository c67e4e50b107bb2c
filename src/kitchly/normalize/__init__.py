"""Sanitization of ingredient and line-item data."""

from kitchly.normalize.measurements import (
    NOMINAL_MEASUREMENT,
    ensure_measured,
    sanitize_ingredient,
    sanitize_ingredients,
    sanitize_instructions,
    sanitize_line_item,
    sanitize_line_items,
)

__all__ = [
    "NOMINAL_MEASUREMENT",
    "ensure_measured",
    "sanitize_ingredient",
    "sanitize_ingredients",
    "sanitize_instructions",
    "sanitize_line_item",
    "sanitize_line_items",
]
