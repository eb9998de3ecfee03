"""Tests for cart line merging and totals."""

from decimal import Decimal

from pizzeria_schemas import CartLine, PricedItem, PricedSelection

from apps.web.customization.engine.cart import add_line, compute_cart_totals, line_key


def priced(item_id: str = "1", unit_price: int = 290000, size: str = "20cm", vat: str = "8") -> PricedItem:
    return PricedItem(
        item_id=item_id,
        unit_price=unit_price,
        vat_rate=Decimal(vat),
        customizations=[
            PricedSelection(schema_id="size", selections={"size": size}, unit_price=unit_price)
        ],
    )


class TestLineKey:
    """Cart line identity."""

    def test_same_selections_same_key(self) -> None:
        """Identical item and selections share a key."""
        assert line_key(priced()) == line_key(priced())

    def test_different_selections_different_key(self) -> None:
        """Any selection difference gives a new line."""
        assert line_key(priced(size="20cm")) != line_key(priced(size="30cm"))

    def test_different_items_different_key(self) -> None:
        """Different items never merge."""
        assert line_key(priced(item_id="1")) != line_key(priced(item_id="2"))


class TestAddLine:
    """Adding items to a cart."""

    def test_merges_identical_lines(self) -> None:
        """Adding the same customization twice bumps the quantity."""
        lines = add_line([], priced())
        lines = add_line(lines, priced(), quantity=2)

        assert len(lines) == 1
        assert lines[0].quantity == 3

    def test_keeps_distinct_lines(self) -> None:
        """Different customizations stay separate."""
        lines = add_line([], priced(size="20cm"))
        lines = add_line(lines, priced(size="30cm", unit_price=340000))

        assert [line.quantity for line in lines] == [1, 1]

    def test_does_not_mutate_input(self) -> None:
        """The original list is left untouched."""
        original = add_line([], priced())
        add_line(original, priced())

        assert original[0].quantity == 1


class TestCartTotals:
    """Subtotal, VAT and total."""

    def test_totals(self) -> None:
        """VAT is added on top of VAT-exclusive menu prices."""
        lines = [
            CartLine(item=priced(unit_price=290000), quantity=2),
            CartLine(item=priced(item_id="2", unit_price=30000, vat="10"), quantity=1),
        ]

        totals = compute_cart_totals(lines)

        assert totals.subtotal == 610000
        assert totals.vat == 46400 + 3000
        assert totals.total == 610000 + 49400

    def test_vat_rounds_half_up(self) -> None:
        """VAT is rounded half-up to a whole unit."""
        lines = [CartLine(item=priced(unit_price=1000, vat="0.05"), quantity=1)]

        assert compute_cart_totals(lines).vat == 1

    def test_empty_cart(self) -> None:
        """An empty cart totals zero."""
        totals = compute_cart_totals([])

        assert (totals.subtotal, totals.vat, totals.total) == (0, 0, 0)
