"""
Price calculator for customized menu items.

compute_price() is a pure function: no I/O beyond the catalog_lookup
callable the caller passes in, and it never raises on well-typed input.
Missing or malformed prices contribute 0.

Pricing runs in two steps:
  1. Base price. An active half-and-half schema in "hh" mode replaces the
     item's own price with half of each item plus the combination fee.
  2. Modifiers. Every schema adds its selected options on top of the base.
     Contributions are additive, so schema order does not matter.

The sum is rounded half-up to the nearest rounding unit (1000 by default).
"""

import logging
from collections.abc import Callable, Sequence
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation, localcontext
from typing import Any

from pizzeria_schemas import (
    OPTION_KEY,
    SIZE_KEY,
    AdditionalToppingsSchema,
    CatalogItem,
    HalfAndHalfSchema,
    LegacyOptionsSchema,
    OrderMode,
    SchemaSelection,
    SelectionState,
    SingleChoiceOptionsSchema,
    SizeSelectionSchema,
)

from apps.web.customization.engine.selection import (
    as_id_list,
    selected_toppings,
    selected_value,
)

logger = logging.getLogger(__name__)

ROUNDING_UNIT = 1000
HALF = Decimal("0.5")
ZERO = Decimal("0")

# Stored prices at or above this are treated as malformed
MAX_PRICE = Decimal(10) ** 18

# pricing_config key holding the half-and-half combination fee
HALF_AND_HALF_FEE_KEY = "halfAndHalfFee"

CatalogLookup = Callable[[str], CatalogItem | None]


def to_price(value: Any) -> Decimal:
    """Coerce a stored price to Decimal. Anything non-numeric is 0."""
    if value is None or isinstance(value, bool):
        return ZERO
    if isinstance(value, Decimal):
        amount = value
    elif isinstance(value, int | float | str):
        try:
            amount = Decimal(str(value).strip())
        except InvalidOperation:
            logger.debug("Ignoring non-numeric price %r", value)
            return ZERO
    else:
        return ZERO
    if not amount.is_finite():
        return ZERO
    if abs(amount) >= MAX_PRICE:
        logger.debug("Ignoring out-of-range price %r", value)
        return ZERO
    return amount


def pricing_entry(schema: Any, option_id: str) -> Decimal | None:
    """
    Price for an option from the schema's pricing_config.

    Returns None when the option has no entry, so callers can fall back to
    a price embedded in the config.
    """
    entry = schema.pricing_config.get(option_id)
    if entry is None:
        return None
    if isinstance(entry, dict):
        if entry.get("price") is None:
            return None
        return to_price(entry["price"])
    return to_price(entry)


def round_price(amount: Decimal, unit: int = ROUNDING_UNIT) -> int:
    """Round half-up to the nearest unit, never below 0."""
    if amount <= 0:
        return 0
    with localcontext() as ctx:
        ctx.prec = 60
        units = (amount / Decimal(unit)).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(units) * unit


def combination_fee(schema: HalfAndHalfSchema) -> Decimal:
    """Half-and-half fee: pricing_config, then config, then the default."""
    fee = pricing_entry(schema, HALF_AND_HALF_FEE_KEY)
    if fee is not None:
        return fee
    return to_price(schema.config.combination_fee)


def base_price(
    item: CatalogItem,
    schemas: Sequence[Any],
    state: SelectionState,
    catalog_lookup: CatalogLookup,
) -> Decimal:
    """
    Starting price before modifiers.

    Half-and-half substitutes the item's price rather than adding to it.
    Only the first schema in "hh" mode is used.
    """
    for schema in schemas:
        if not isinstance(schema, HalfAndHalfSchema) or not schema.is_active:
            continue
        selection = state.for_schema(schema.id)
        if selection.order_mode != OrderMode.HALF_AND_HALF:
            continue

        second_price = ZERO
        if selection.second_item_id:
            second = catalog_lookup(selection.second_item_id)
            if second is None:
                logger.debug(
                    "Second item %s not found, pricing it at 0",
                    selection.second_item_id,
                )
            else:
                second_price = second.base_price

        return item.base_price * HALF + second_price * HALF + combination_fee(schema)

    return item.base_price


def modifier_price(schema: Any, selection: SchemaSelection) -> Decimal:
    """What one schema's selections add on top of the base price."""
    if isinstance(schema, SizeSelectionSchema):
        size_id = selected_value(selection, SIZE_KEY)
        if not size_id:
            return ZERO
        price = pricing_entry(schema, size_id)
        if price is not None:
            return price
        size = next((s for s in schema.config.sizes if s.id == size_id), None)
        return to_price(size.price_modifier) if size else ZERO

    if isinstance(schema, AdditionalToppingsSchema):
        total = ZERO
        for topping_id in selected_toppings(selection):
            total += pricing_entry(schema, topping_id) or ZERO
        return total

    if isinstance(schema, SingleChoiceOptionsSchema):
        option_id = selected_value(selection, OPTION_KEY)
        if not option_id:
            return ZERO
        price = pricing_entry(schema, option_id)
        if price is not None:
            return price
        option = next((o for o in schema.config.options if o.id == option_id), None)
        return to_price(option.price) if option else ZERO

    if isinstance(schema, LegacyOptionsSchema):
        options = {option.id: option for option in schema.config.options}
        total = ZERO
        for value in selection.values.values():
            for option_id in as_id_list(value):
                option = options.get(option_id)
                if option is not None:
                    total += to_price(option.price)
        return total

    # half_and_half only affects the base price
    return ZERO


def compute_price(
    item: CatalogItem,
    schemas: Sequence[Any],
    state: SelectionState,
    catalog_lookup: CatalogLookup,
    *,
    rounding_unit: int = ROUNDING_UNIT,
) -> int:
    """
    Total unit price for an item with its current selections.

    Args:
        item: The item being customized.
        schemas: Typed schema definitions attached to the item.
        state: The customer's in-progress selections.
        catalog_lookup: Resolves the half-and-half second item by id.
        rounding_unit: Currency rounding unit.

    Returns:
        A non-negative multiple of rounding_unit.
    """
    total = base_price(item, schemas, state, catalog_lookup)
    for schema in schemas:
        if schema.is_active:
            total += modifier_price(schema, state.for_schema(schema.id))
    return round_price(total, rounding_unit)
