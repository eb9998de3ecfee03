"""
Pydantic schemas for menu and order API requests and responses.

These schemas define the public API contract for restaurant data.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pizzeria_schemas import OrderType, PaymentMethod, SchemaSelection, SelectionState

# =============================================================================
# Nested Menu Structure
# =============================================================================


class MenuItemSchemaRef(BaseModel):
    """A customization schema attached to a menu item."""

    schema_id: int
    name: str
    type: str
    is_required: bool


class MenuItemSchema(BaseModel):
    """A menu item with full details."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_vi: str
    description: str
    price: Decimal
    vat_rate: Decimal
    image_url: str
    is_available: bool
    is_pinned: bool
    tags: list[str]
    customizations: list[MenuItemSchemaRef] = Field(default_factory=list)


class MenuCategorySchema(BaseModel):
    """A menu category with its items."""

    model_config = ConfigDict(from_attributes=True)

    id: int
    name: str
    name_vi: str
    description: str
    items: list[MenuItemSchema] = Field(default_factory=list)


class MenuListResponse(BaseModel):
    """Response for GET /api/clients/{slug}/menu."""

    categories: list[MenuCategorySchema]
    currency: str
    ordering_enabled: bool


# =============================================================================
# Order Schemas
# =============================================================================


class CustomerSchema(BaseModel):
    """Customer information for an order."""

    name: str = Field(..., min_length=1, max_length=200)
    email: str = Field(..., pattern=r"^[^@]+@[^@]+\.[^@]+$")
    phone: str = Field(..., min_length=1, max_length=20)
    address: str = Field(default="", max_length=500)


class OrderItemCreateSchema(BaseModel):
    """A single item in an order creation request."""

    menu_item_id: int
    quantity: int = Field(..., ge=1, le=99)
    # schema id -> selections, as built by the customization panel
    selections: dict[str, SchemaSelection] = Field(default_factory=dict)
    special_instructions: str = Field(default="", max_length=500)

    def to_state(self) -> SelectionState:
        return SelectionState(schemas=dict(self.selections))


class OrderCreateRequest(BaseModel):
    """Request body for POST /api/clients/{slug}/orders."""

    customer: CustomerSchema
    order_type: OrderType
    payment_method: PaymentMethod = PaymentMethod.CASH
    items: list[OrderItemCreateSchema] = Field(..., min_length=1)
    special_instructions: str = Field(default="", max_length=1000)


class OrderItemResponseSchema(BaseModel):
    """A line item in an order response."""

    id: int
    menu_item_id: int
    item_name: str
    quantity: int
    unit_price: Decimal
    vat_rate: Decimal
    customizations: list[dict[str, Any]]  # Snapshot of priced selections
    special_instructions: str
    line_total: Decimal


class OrderCreateResponse(BaseModel):
    """Response for POST /api/clients/{slug}/orders."""

    order_id: int
    confirmation_code: str
    status: str
    subtotal: Decimal
    vat: Decimal
    total: Decimal
    items: list[OrderItemResponseSchema]
    created_at: datetime


class OrderDetailResponse(BaseModel):
    """Response for GET /api/clients/{slug}/orders/{order_id}."""

    order_id: int
    confirmation_code: str
    status: str
    customer: CustomerSchema
    items: list[OrderItemResponseSchema]
    order_type: str
    payment_method: str
    special_instructions: str
    subtotal: Decimal
    vat: Decimal
    total: Decimal
    created_at: datetime


class OrderStatusResponse(BaseModel):
    """Response for GET /api/clients/{slug}/orders/{order_id}/status."""

    status: str
    updated_at: datetime


class ValidationErrorDetail(BaseModel):
    """A single validation error."""

    field: str
    message: str
    kind: str | None = None


class ValidationErrorResponse(BaseModel):
    """Response for validation errors."""

    error: Literal["validation_error"]
    details: list[ValidationErrorDetail]
