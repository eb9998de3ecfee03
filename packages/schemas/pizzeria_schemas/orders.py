"""Order schemas - enums and cart contracts shared by the web app."""

from enum import Enum

from pydantic import BaseModel, Field

from pizzeria_schemas.customization import PricedItem

# =============================================================================
# Enums
# =============================================================================


class OrderType(str, Enum):
    """Order fulfillment type."""

    DINE_IN = "dine-in"
    TAKEOUT = "takeout"
    DELIVERY = "delivery"


class OrderStatus(str, Enum):
    """Order lifecycle status."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    PREPARING = "preparing"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentMethod(str, Enum):
    """How the customer pays. Settled offline."""

    CASH = "cash"
    TRANSFER = "transfer"


# =============================================================================
# Cart
# =============================================================================


class CartLine(BaseModel):
    """A priced item with a quantity."""

    item: PricedItem
    quantity: int = Field(default=1, ge=1)

    @property
    def line_total(self) -> int:
        return self.item.unit_price * self.quantity


class CartTotals(BaseModel):
    """Subtotal, VAT and grand total of a cart, in currency units."""

    subtotal: int
    vat: int
    total: int
