"""Cart helpers - line merging and VAT totals for priced items."""

import json
from collections.abc import Sequence
from decimal import ROUND_HALF_UP, Decimal

from pizzeria_schemas import CartLine, CartTotals, PricedItem


def line_key(item: PricedItem) -> str:
    """
    Identity of a cart line.

    Two additions of the same item with identical selections share a line.
    """
    selections = [
        {
            "schema_id": c.schema_id,
            "selections": c.selections,
            "order_mode": c.order_mode.value,
            "second_item_id": c.second_item_id,
        }
        for c in item.customizations
    ]
    return f"{item.item_id}:{json.dumps(selections, sort_keys=True)}"


def add_line(lines: list[CartLine], item: PricedItem, quantity: int = 1) -> list[CartLine]:
    """Add an item to the cart, merging quantities with an identical line."""
    key = line_key(item)
    merged: list[CartLine] = []
    found = False
    for line in lines:
        if not found and line_key(line.item) == key:
            merged.append(line.model_copy(update={"quantity": line.quantity + quantity}))
            found = True
        else:
            merged.append(line)
    if not found:
        merged.append(CartLine(item=item, quantity=quantity))
    return merged


def compute_cart_totals(lines: Sequence[CartLine]) -> CartTotals:
    """
    Subtotal, VAT and total for a cart.

    Menu prices exclude VAT; VAT is added per line at the item's rate and
    the sum is rounded half-up to a whole currency unit.
    """
    subtotal = sum(line.line_total for line in lines)
    vat = sum(
        (Decimal(line.line_total) * line.item.vat_rate / 100 for line in lines),
        Decimal("0"),
    )
    vat_amount = int(vat.quantize(Decimal("1"), rounding=ROUND_HALF_UP))
    return CartTotals(subtotal=subtotal, vat=vat_amount, total=subtotal + vat_amount)
