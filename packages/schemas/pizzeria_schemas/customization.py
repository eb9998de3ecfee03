"""Customization schemas - data contracts for menu item customization and pricing."""

from decimal import Decimal
from enum import Enum
from typing import Annotated, Any, Literal, Union

from pydantic import (
    AliasChoices,
    BaseModel,
    ConfigDict,
    Discriminator,
    Field,
    Tag,
    TypeAdapter,
)
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

DEFAULT_VAT_RATE = Decimal("8")
DEFAULT_COMBINATION_FEE = Decimal("10000")

# Selection keys used inside SchemaSelection.values
SIZE_KEY = "size"
TOPPINGS_KEY = "toppings"
OPTION_KEY = "selectedOption"

# =============================================================================
# Enums
# =============================================================================


class SchemaType(str, Enum):
    """Supported customization axes."""

    SIZE_SELECTION = "size_selection"
    HALF_AND_HALF = "half_and_half"
    ADDITIONAL_TOPPINGS = "additional_toppings"
    SINGLE_CHOICE_OPTIONS = "single_choice_options"


class OrderMode(str, Enum):
    """Whole pizza or half-and-half."""

    WHOLE = ""
    HALF_AND_HALF = "hh"


class SelectionErrorKind(str, Enum):
    """Customer-correctable selection problems."""

    MISSING_REQUIRED_SELECTION = "missing_required_selection"
    MISSING_SECOND_FLAVOR = "missing_second_flavor"
    SELF_COMBINATION_NOT_ALLOWED = "self_combination_not_allowed"
    BELOW_MINIMUM_SELECTIONS = "below_minimum_selections"
    ABOVE_MAXIMUM_SELECTIONS = "above_maximum_selections"
    UNKNOWN_OPTION = "unknown_option"
    INVALID_SECOND_FLAVOR = "invalid_second_flavor"


class _CamelModel(BaseModel):
    """Accepts both snake_case and the camelCase keys stored by the admin UI."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Catalog
# =============================================================================


class CatalogItem(_CamelModel):
    """Read-only snapshot of a menu item taken when customization starts."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str = ""
    base_price: Decimal = Field(ge=0)
    vat_rate: Decimal = DEFAULT_VAT_RATE
    category_id: str | None = None
    is_available: bool = True


# =============================================================================
# Schema definitions
# =============================================================================


class SizeOption(_CamelModel):
    """One size tier."""

    id: str
    name: str = ""
    name_vi: str | None = None
    price_modifier: Decimal = Decimal("0")


class ToppingOption(_CamelModel):
    """One topping. Toppings are priced through pricing_config only."""

    id: str
    name: str = ""
    name_vi: str | None = None


class ChoiceOption(_CamelModel):
    """One option of a single-choice (or legacy) schema."""

    id: str
    name: str = ""
    name_vi: str | None = None
    price: Decimal | None = None


class SizeSelectionConfig(_CamelModel):
    sizes: list[SizeOption] = Field(default_factory=list)


class HalfAndHalfConfig(_CamelModel):
    combination_fee: Decimal = Field(
        default=DEFAULT_COMBINATION_FEE,
        ge=0,
        validation_alias=AliasChoices(
            "combination_fee", "combinationFee", "halfAndHalfFee"
        ),
    )
    allowed_categories: list[str] = Field(default_factory=list)


class ToppingsConfig(_CamelModel):
    toppings: list[ToppingOption] = Field(default_factory=list)
    min_selections: int | None = None
    max_selections: int | None = None
    allow_multiple: bool | None = None

    @property
    def is_single_select(self) -> bool:
        """max_selections == 1 means a single string, not a list."""
        return self.max_selections == 1


class SingleChoiceConfig(_CamelModel):
    options: list[ChoiceOption] = Field(default_factory=list)
    max_selections: int = 1
    allow_multiple: bool = False


class LegacyOptionsConfig(_CamelModel):
    """Free-form config of schema types the engine does not model."""

    model_config = ConfigDict(extra="allow")

    options: list[ChoiceOption] = Field(default_factory=list)


class _SchemaBase(_CamelModel):
    """Fields shared by every schema variant."""

    id: str
    name: str = ""
    name_vi: str | None = None
    is_required: bool = False
    is_active: bool = True
    # option id -> {"price": ...}; values are not validated here on purpose,
    # the calculator treats malformed entries as 0.
    pricing_config: dict[str, Any] = Field(default_factory=dict)
    default_option_id: str | None = None


class SizeSelectionSchema(_SchemaBase):
    type: Literal["size_selection"] = "size_selection"
    config: SizeSelectionConfig = Field(default_factory=SizeSelectionConfig)

    def option_ids(self) -> list[str]:
        return [size.id for size in self.config.sizes]


class HalfAndHalfSchema(_SchemaBase):
    type: Literal["half_and_half"] = "half_and_half"
    config: HalfAndHalfConfig = Field(default_factory=HalfAndHalfConfig)

    def option_ids(self) -> list[str]:
        return []


class AdditionalToppingsSchema(_SchemaBase):
    type: Literal["additional_toppings"] = "additional_toppings"
    config: ToppingsConfig = Field(default_factory=ToppingsConfig)

    def option_ids(self) -> list[str]:
        return [topping.id for topping in self.config.toppings]


class SingleChoiceOptionsSchema(_SchemaBase):
    type: Literal["single_choice_options"] = "single_choice_options"
    config: SingleChoiceConfig = Field(default_factory=SingleChoiceConfig)

    def option_ids(self) -> list[str]:
        return [option.id for option in self.config.options]


class LegacyOptionsSchema(_SchemaBase):
    """Any other schema type; contributes embedded option prices only."""

    type: str
    config: LegacyOptionsConfig = Field(default_factory=LegacyOptionsConfig)

    def option_ids(self) -> list[str]:
        return [option.id for option in self.config.options]


_KNOWN_TYPES = {t.value for t in SchemaType}


def _schema_tag(value: Any) -> str:
    schema_type = (
        value.get("type") if isinstance(value, dict) else getattr(value, "type", None)
    )
    if schema_type in _KNOWN_TYPES:
        return SchemaType(schema_type).value
    return "legacy"


CustomizationSchema = Annotated[
    Union[
        Annotated[SizeSelectionSchema, Tag("size_selection")],
        Annotated[HalfAndHalfSchema, Tag("half_and_half")],
        Annotated[AdditionalToppingsSchema, Tag("additional_toppings")],
        Annotated[SingleChoiceOptionsSchema, Tag("single_choice_options")],
        Annotated[LegacyOptionsSchema, Tag("legacy")],
    ],
    Discriminator(_schema_tag),
]

_schema_adapter: TypeAdapter[Any] = TypeAdapter(CustomizationSchema)


def parse_schema(data: dict[str, Any]) -> Any:
    """
    Parse a stored schema definition into its typed variant.

    Raises:
        pydantic.ValidationError: If the definition does not fit its type.
    """
    schema_type = data.get("type")
    if isinstance(schema_type, Enum):
        data = {**data, "type": schema_type.value}
    return _schema_adapter.validate_python(data)


def parse_schemas(rows: list[dict[str, Any]]) -> list[Any]:
    """
    Parse schema definitions, dropping inactive and unparseable ones.

    Soft-deleted or broken schemas are treated as absent, not as errors.
    """
    schemas = []
    for row in rows:
        try:
            schema = parse_schema(row)
        except PydanticValidationError:
            continue
        if schema.is_active:
            schemas.append(schema)
    return schemas


# =============================================================================
# Selection state
# =============================================================================

SelectionValue = str | list[str]


class SchemaSelection(_CamelModel):
    """In-progress choices for one schema. Never validated on write."""

    values: dict[str, SelectionValue] = Field(default_factory=dict)
    order_mode: OrderMode = OrderMode.WHOLE
    second_item_id: str = ""


class SelectionState(_CamelModel):
    """Selections for every schema of one item, keyed by schema id."""

    schemas: dict[str, SchemaSelection] = Field(default_factory=dict)

    def for_schema(self, schema_id: str) -> SchemaSelection:
        """Selections for a schema; an empty selection when none were made."""
        return self.schemas.get(schema_id) or SchemaSelection()

    def set_selection(self, schema_id: str, key: str, value: SelectionValue) -> None:
        """Overwrite one selection key. No validation happens here."""
        selection = self.schemas.setdefault(schema_id, SchemaSelection())
        selection.values[key] = list(value) if isinstance(value, list) else value

    def set_order_mode(self, schema_id: str, mode: OrderMode | str) -> None:
        selection = self.schemas.setdefault(schema_id, SchemaSelection())
        selection.order_mode = OrderMode(mode)

    def set_second_item(self, schema_id: str, item_id: str) -> None:
        selection = self.schemas.setdefault(schema_id, SchemaSelection())
        selection.second_item_id = item_id


# =============================================================================
# Results
# =============================================================================


class SelectionError(BaseModel):
    """A violated selection constraint, surfaced verbatim to the customer."""

    kind: SelectionErrorKind
    schema_id: str
    message: str


class PricedSelection(BaseModel):
    """Normalized per-schema selection record for order persistence."""

    model_config = ConfigDict(frozen=True)

    schema_id: str
    selections: dict[str, str] = Field(default_factory=dict)
    order_mode: OrderMode = OrderMode.WHOLE
    second_item_id: str = ""
    unit_price: int = Field(ge=0)


class PricedItem(BaseModel):
    """A fully priced cart line: the item plus every schema's selections."""

    model_config = ConfigDict(frozen=True)

    item_id: str
    name: str = ""
    unit_price: int = Field(ge=0)
    vat_rate: Decimal = DEFAULT_VAT_RATE
    customizations: list[PricedSelection] = Field(default_factory=list)


class PriceItemResult(BaseModel):
    """Either a priced line item or the selection errors preventing it."""

    priced: PricedItem | None = None
    errors: list[SelectionError] = Field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.priced is not None and not self.errors
