"""Pizzeria Schemas - Pydantic models for data contracts."""

from pizzeria_schemas.customization import (
    DEFAULT_COMBINATION_FEE,
    DEFAULT_VAT_RATE,
    OPTION_KEY,
    SIZE_KEY,
    TOPPINGS_KEY,
    AdditionalToppingsSchema,
    CatalogItem,
    ChoiceOption,
    CustomizationSchema,
    HalfAndHalfSchema,
    LegacyOptionsSchema,
    OrderMode,
    PricedItem,
    PricedSelection,
    PriceItemResult,
    SchemaSelection,
    SchemaType,
    SelectionError,
    SelectionErrorKind,
    SelectionState,
    SingleChoiceOptionsSchema,
    SizeOption,
    SizeSelectionSchema,
    ToppingOption,
    parse_schema,
    parse_schemas,
)
from pizzeria_schemas.orders import (
    CartLine,
    CartTotals,
    OrderStatus,
    OrderType,
    PaymentMethod,
)

__all__ = [
    # Customization
    "DEFAULT_COMBINATION_FEE",
    "DEFAULT_VAT_RATE",
    "OPTION_KEY",
    "SIZE_KEY",
    "TOPPINGS_KEY",
    "AdditionalToppingsSchema",
    "CatalogItem",
    "ChoiceOption",
    "CustomizationSchema",
    "HalfAndHalfSchema",
    "LegacyOptionsSchema",
    "OrderMode",
    "PricedItem",
    "PricedSelection",
    "PriceItemResult",
    "SchemaSelection",
    "SchemaType",
    "SelectionError",
    "SelectionErrorKind",
    "SelectionState",
    "SingleChoiceOptionsSchema",
    "SizeOption",
    "SizeSelectionSchema",
    "ToppingOption",
    "parse_schema",
    "parse_schemas",
    # Orders
    "CartLine",
    "CartTotals",
    "OrderStatus",
    "OrderType",
    "PaymentMethod",
]
