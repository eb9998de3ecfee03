"""
Pydantic schemas for customization API requests and responses.

Requests accept camelCase (admin UI, storefront) or snake_case keys.
"""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from pizzeria_schemas import (
    CatalogItem,
    PricedSelection,
    SchemaSelection,
    SelectionError,
    SelectionState,
)


class _Request(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


# =============================================================================
# Storefront
# =============================================================================


class PricePreviewRequest(_Request):
    """Body for POST /api/clients/{slug}/menu/items/{item_id}/price."""

    selections: dict[str, SchemaSelection] = Field(default_factory=dict)
    schema_id: str | None = None

    def to_state(self) -> SelectionState:
        return SelectionState(schemas=dict(self.selections))


class PricePreviewResponse(BaseModel):
    """Live price for an item; errors only gate adding it to the cart."""

    item_id: str
    unit_price: int
    vat_rate: Decimal
    can_add_to_cart: bool
    errors: list[SelectionError] = Field(default_factory=list)
    customizations: list[PricedSelection] = Field(default_factory=list)


class ItemCustomizationsResponse(BaseModel):
    """Response for GET /api/clients/{slug}/menu/items/{item_id}/customizations."""

    item: CatalogItem
    schemas: list[dict[str, Any]]
    initial_selections: SelectionState
    second_flavor_candidates: list[CatalogItem] = Field(default_factory=list)


# =============================================================================
# Staff administration
# =============================================================================


class SchemaWriteRequest(_Request):
    """Body for schema create and update. Unset fields are left untouched."""

    name: str | None = Field(default=None, max_length=200)
    name_vi: str | None = Field(default=None, max_length=200)
    type: str | None = Field(default=None, max_length=50)
    description: str | None = None
    config: dict[str, Any] | None = None
    pricing_config: dict[str, Any] | None = None
    default_option_id: str | None = Field(default=None, max_length=100)
    base_schema_id: int | None = None
    is_base_schema: bool | None = None
    is_active: bool | None = None


class SchemaAssignRequest(_Request):
    """Body for POST /dashboard/customizations/items/{item_id}/schemas."""

    schema_ids: list[int] = Field(..., min_length=1)
    required_schema_ids: list[int] = Field(default_factory=list)


class SchemaResponse(BaseModel):
    """A stored customization schema."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_vi: str
    type: str
    description: str
    config: dict[str, Any]
    pricing_config: dict[str, Any]
    default_option_id: str
    base_schema_id: int | None
    is_base_schema: bool
    is_active: bool


class AssignmentResponse(BaseModel):
    """A schema attached to a menu item."""

    schema_id: int
    sort_order: int
    is_required: bool
