"""
Customization & pricing engine.

Pure, synchronous code shared by the price preview endpoint (one item,
possibly one schema) and order creation (many items, many schemas). The
only external dependency is the catalog_lookup callable passed in.
"""

import logging
from collections.abc import Sequence
from typing import Any

from pizzeria_schemas import (
    OrderMode,
    PricedItem,
    PricedSelection,
    PriceItemResult,
    SelectionState,
)

from apps.web.customization.engine.cart import add_line, compute_cart_totals, line_key
from apps.web.customization.engine.definitions import check_definition, definition_errors
from apps.web.customization.engine.pricing import (
    ROUNDING_UNIT,
    CatalogLookup,
    compute_price,
    round_price,
)
from apps.web.customization.engine.selection import new_selection_state, normalize, reset
from apps.web.customization.engine.validation import validate_selections
from apps.web.customization.exceptions import CatalogItemNotFoundError

logger = logging.getLogger(__name__)


def price_item(
    item_id: str,
    schemas: Sequence[Any],
    state: SelectionState,
    catalog_lookup: CatalogLookup,
    *,
    rounding_unit: int = ROUNDING_UNIT,
) -> PriceItemResult:
    """
    Validate selections and price one cart line.

    Args:
        item_id: Catalog id of the item being customized.
        schemas: Typed schemas attached to the item, in display order.
        state: The customer's selections.
        catalog_lookup: Resolves catalog items by id.
        rounding_unit: Currency rounding unit.

    Returns:
        PriceItemResult with either the priced line or every selection
        error. Nothing is priced when validation fails.

    Raises:
        CatalogItemNotFoundError: If item_id is not in the catalog.
    """
    item = catalog_lookup(item_id)
    if item is None:
        raise CatalogItemNotFoundError(item_id)

    active = [schema for schema in schemas if schema.is_active]

    errors = validate_selections(item, active, state, catalog_lookup)
    if errors:
        logger.debug("Selections for item %s rejected: %d error(s)", item_id, len(errors))
        return PriceItemResult(errors=errors)

    unit_price = compute_price(
        item, active, state, catalog_lookup, rounding_unit=rounding_unit
    )

    customizations = []
    for schema in active:
        selection = state.for_schema(schema.id)
        is_half = selection.order_mode == OrderMode.HALF_AND_HALF
        customizations.append(
            PricedSelection(
                schema_id=schema.id,
                selections=normalize(selection),
                order_mode=selection.order_mode,
                second_item_id=selection.second_item_id if is_half else "",
                unit_price=unit_price,
            )
        )

    return PriceItemResult(
        priced=PricedItem(
            item_id=item.id,
            name=item.name,
            unit_price=unit_price,
            vat_rate=item.vat_rate,
            customizations=customizations,
        )
    )


__all__ = [
    "ROUNDING_UNIT",
    "CatalogLookup",
    "add_line",
    "check_definition",
    "compute_cart_totals",
    "compute_price",
    "definition_errors",
    "line_key",
    "new_selection_state",
    "price_item",
    "reset",
    "round_price",
    "validate_selections",
]
