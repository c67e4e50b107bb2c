"""Ingredient, line-item and measurement sanitization.

Everything here is pure: untrusted structures (usually parsed from model
output) go in, validated schema objects come out. Salvageable problems are
dropped with a warning; an item without a usable name rejects the batch
because the grocery API cannot accept it.
"""

import math
from collections.abc import Iterable, Mapping
from typing import Any, TypeVar

from pydantic import BaseModel

from kitchly.errors import ValidationError
from kitchly.logging_config import get_logger
from kitchly.schemas import IngredientItem, LineItem, Measurement

logger = get_logger(__name__)

NOMINAL_MEASUREMENT = Measurement(quantity=1, unit="unit")

ItemT = TypeVar("ItemT", bound=IngredientItem)


def _is_non_empty_string(value: Any) -> bool:
    return isinstance(value, str) and bool(value.strip())


def _is_positive_number(value: Any) -> bool:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    try:
        value = float(value)
    except OverflowError:
        return False
    return math.isfinite(value) and value > 0


def _as_mapping(item: Any, index: int, kind: str) -> Mapping[str, Any]:
    if isinstance(item, BaseModel):
        return item.model_dump()
    if isinstance(item, Mapping):
        return item
    raise ValidationError(f'{kind} at index {index} is not an object.', index=index)


def _sanitize_measurements(raw: Any, owner: str, kind: str) -> list[Measurement]:
    """Keep only measurements with a positive numeric quantity and a unit."""
    if not isinstance(raw, list):
        return []

    kept: list[Measurement] = []
    for entry in raw:
        if not isinstance(entry, Mapping):
            logger.warning(f'Dropping malformed measurement for {kind} "{owner}".')
            continue
        quantity = entry.get("quantity")
        unit = entry.get("unit")
        if not _is_positive_number(quantity):
            logger.warning(
                f'Dropping measurement with invalid quantity ({quantity!r}) for {kind} "{owner}".'
            )
            continue
        if not _is_non_empty_string(unit):
            logger.warning(f'Dropping measurement with empty unit for {kind} "{owner}".')
            continue
        kept.append(Measurement(quantity=quantity, unit=unit.strip()))
    return kept


def _sanitize(
    item: Any,
    index: int,
    model: type[ItemT],
    kind: str,
    measurement_keys: tuple[str, ...],
) -> ItemT:
    data = _as_mapping(item, index, kind.capitalize())
    name = data.get("name")
    if not _is_non_empty_string(name):
        raise ValidationError(
            f'{kind.capitalize()} at index {index} is missing a valid "name".', index=index
        )
    name = name.strip()

    display_text = data.get("display_text", data.get("displayText"))
    raw_measurements = next(
        (data[key] for key in measurement_keys if data.get(key) is not None), None
    )

    return model(
        name=name,
        display_text=display_text.strip() if _is_non_empty_string(display_text) else None,
        measurements=_sanitize_measurements(raw_measurements, name, kind),
    )


def sanitize_ingredient(item: Any, index: int) -> IngredientItem:
    """
    Sanitize a single recipe ingredient.

    Args:
        item: Mapping (or schema object) with name, display_text, measurements.
        index: Position in the batch, used in error messages.

    Returns:
        A validated IngredientItem. May carry no measurements.

    Raises:
        ValidationError: If the ingredient has no usable name.
    """
    return _sanitize(item, index, IngredientItem, "ingredient", ("measurements",))


def sanitize_line_item(item: Any, index: int) -> LineItem:
    """Sanitize a single shopping-list line item (see sanitize_ingredient)."""
    return _sanitize(
        item, index, LineItem, "line item", ("line_item_measurements", "measurements")
    )


def sanitize_ingredients(items: Iterable[Any]) -> list[IngredientItem]:
    """Sanitize a batch of ingredients, failing on the first unnamed one."""
    return [sanitize_ingredient(item, i) for i, item in enumerate(items)]


def sanitize_line_items(items: Iterable[Any]) -> list[LineItem]:
    """Sanitize a batch of line items, failing on the first unnamed one."""
    return [sanitize_line_item(item, i) for i, item in enumerate(items)]


def ensure_measured(item: ItemT) -> ItemT:
    """Give an unmeasured item the nominal 1 unit measurement."""
    if item.measurements:
        return item
    return item.model_copy(update={"measurements": [NOMINAL_MEASUREMENT.model_copy()]})


def sanitize_instructions(steps: Any) -> list[str]:
    """Trim instruction steps and drop the empty ones."""
    if not isinstance(steps, list):
        return []
    return [step.strip() for step in steps if _is_non_empty_string(step)]
