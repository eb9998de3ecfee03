"""End-to-end tests for price_item()."""

from decimal import Decimal

import pytest
from pizzeria_schemas import (
    CatalogItem,
    OrderMode,
    SelectionErrorKind,
    SelectionState,
    parse_schema,
)

from apps.web.customization.engine import new_selection_state, price_item
from apps.web.customization.exceptions import CatalogItemNotFoundError

CATALOG = {
    "1": CatalogItem(id="1", name="Margherita", base_price=Decimal("250000")),
    "2": CatalogItem(id="2", name="Hawaiian", base_price=Decimal("150000")),
}

SIZES = parse_schema(
    {
        "id": "10",
        "type": "size_selection",
        "config": {
            "sizes": [
                {"id": "16cm", "priceModifier": 0},
                {"id": "20cm", "priceModifier": 40000},
            ]
        },
    }
)
HALF = parse_schema({"id": "11", "type": "half_and_half"})


def lookup(item_id: str) -> CatalogItem | None:
    return CATALOG.get(item_id)


class TestPriceItem:
    """price_item() composes validation and pricing."""

    def test_end_to_end_size(self) -> None:
        """250000 with the 20cm size (+40000) costs 290000."""
        state = new_selection_state([SIZES])
        state.set_selection("10", "size", "20cm")

        result = price_item("1", [SIZES], state, lookup)

        assert result.ok
        assert result.errors == []
        assert result.priced.unit_price == 290000
        assert result.priced.name == "Margherita"
        assert result.priced.vat_rate == Decimal("8")

    def test_one_priced_selection_per_schema(self) -> None:
        """Every schema gets a PricedSelection carrying the line price."""
        state = new_selection_state([SIZES, HALF])
        state.set_selection("10", "size", "20cm")
        state.set_order_mode("11", OrderMode.HALF_AND_HALF)
        state.set_second_item("11", "2")

        result = price_item("1", [SIZES, HALF], state, lookup)

        customizations = result.priced.customizations
        assert [c.schema_id for c in customizations] == ["10", "11"]
        assert customizations[0].selections == {"size": "20cm"}
        assert customizations[1].order_mode == OrderMode.HALF_AND_HALF
        assert customizations[1].second_item_id == "2"
        # 125000 + 75000 + 10000 + 40000
        assert {c.unit_price for c in customizations} == {250000}

    def test_second_item_dropped_in_whole_mode(self) -> None:
        """A stale second item is not persisted for whole pizzas."""
        state = new_selection_state([HALF])
        state.set_second_item("11", "2")

        result = price_item("1", [HALF], state, lookup)

        assert result.priced.customizations[0].second_item_id == ""
        assert result.priced.unit_price == 250000

    def test_missing_required_size(self) -> None:
        """A required size with nothing chosen is not priced."""
        required = SIZES.model_copy(update={"is_required": True})

        result = price_item("1", [required], new_selection_state([required]), lookup)

        assert not result.ok
        assert result.priced is None
        assert [e.kind for e in result.errors] == [
            SelectionErrorKind.MISSING_REQUIRED_SELECTION
        ]

    def test_self_combination_not_priced(self) -> None:
        """Both halves from the same item are rejected."""
        state = SelectionState()
        state.set_order_mode("11", OrderMode.HALF_AND_HALF)
        state.set_second_item("11", "1")

        result = price_item("1", [HALF], state, lookup)

        assert [e.kind for e in result.errors] == [
            SelectionErrorKind.SELF_COMBINATION_NOT_ALLOWED
        ]

    def test_unknown_second_item_not_priced(self) -> None:
        """A second half missing from the catalog blocks the line."""
        state = SelectionState()
        state.set_order_mode("11", OrderMode.HALF_AND_HALF)
        state.set_second_item("11", "999999")

        result = price_item("1", [HALF], state, lookup)

        assert result.priced is None
        assert [e.kind for e in result.errors] == [
            SelectionErrorKind.INVALID_SECOND_FLAVOR
        ]

    def test_inactive_schemas_ignored(self) -> None:
        """Inactive schemas neither validate nor appear in the result."""
        inactive = SIZES.model_copy(update={"is_required": True, "is_active": False})

        result = price_item("1", [inactive], SelectionState(), lookup)

        assert result.ok
        assert result.priced.customizations == []

    def test_unknown_item_raises(self) -> None:
        """Pricing an item the catalog does not know is a caller error."""
        with pytest.raises(CatalogItemNotFoundError) as exc_info:
            price_item("404", [], SelectionState(), lookup)

        assert exc_info.value.item_id == "404"

    def test_rounding_unit_passed_through(self) -> None:
        """The rounding unit is a parameter."""
        item = CatalogItem(id="3", base_price=Decimal("123456"))

        result = price_item("3", [], SelectionState(), {"3": item}.get, rounding_unit=100)

        assert result.priced.unit_price == 123500
