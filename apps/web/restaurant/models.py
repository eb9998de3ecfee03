"""
Restaurant models - Menu categories, items, and orders.

All models follow the multi-tenancy pattern with ClientScopedModel.
Prices are stored in whole currency units (VND has no minor unit).
"""

from decimal import Decimal

from django.db import models

from apps.web.core.models import ClientScopedModel


class RestaurantProfile(ClientScopedModel):
    """
    Restaurant-specific configuration for a client.

    OneToOne with Client (enforced by unique constraint).
    """

    # Display settings
    show_prices = models.BooleanField(default=True)
    show_descriptions = models.BooleanField(default=True)
    show_images = models.BooleanField(default=True)

    # Ordering configuration
    ordering_enabled = models.BooleanField(
        default=False,
        help_text="Allow online ordering",
    )
    delivery_enabled = models.BooleanField(default=False)
    dine_in_enabled = models.BooleanField(default=True)

    # Pricing
    currency = models.CharField(max_length=3, default="VND")
    default_vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        default=Decimal("8"),
        help_text="VAT percentage for items without their own rate (e.g., 8 for 8%)",
    )

    class Meta:
        constraints = [
            models.UniqueConstraint(
                fields=["client"],
                name="unique_restaurant_profile_per_client",
            ),
        ]

    def __str__(self) -> str:
        return f"Restaurant profile for {self.client}"


class MenuCategory(ClientScopedModel):
    """
    Menu category (e.g., Pizza, Pasta, Drinks).

    Half-and-half second flavors are offered from the same category.
    """

    name = models.CharField(max_length=200)
    name_vi = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]
        verbose_name_plural = "menu categories"
        indexes = [
            models.Index(fields=["client", "display_order"]),
        ]

    def __str__(self) -> str:
        return self.name


class MenuItem(ClientScopedModel):
    """
    Individual menu item.

    Customization schemas attach through MenuItemCustomization.
    """

    category = models.ForeignKey(
        MenuCategory,
        on_delete=models.CASCADE,
        related_name="items",
    )
    name = models.CharField(max_length=200)
    name_vi = models.CharField(max_length=200, blank=True)
    description = models.TextField(blank=True)
    description_vi = models.TextField(blank=True)
    price = models.DecimalField(max_digits=12, decimal_places=2)
    vat_rate = models.DecimalField(
        max_digits=5,
        decimal_places=2,
        null=True,
        blank=True,
        help_text="VAT percentage (blank = restaurant default)",
    )
    image_url = models.URLField(blank=True)

    is_available = models.BooleanField(
        default=True,
        help_text="False = sold out",
    )
    is_pinned = models.BooleanField(default=False)
    pinned_at = models.DateTimeField(null=True, blank=True)
    tags = models.JSONField(default=list, blank=True)

    display_order = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["display_order", "name"]
        indexes = [
            models.Index(fields=["client", "category"]),
            models.Index(fields=["client", "is_available"]),
        ]

    def __str__(self) -> str:
        return self.name


class OrderStatus(models.TextChoices):
    """Order lifecycle status."""

    PENDING = "pending", "Pending"
    CONFIRMED = "confirmed", "Confirmed"
    PREPARING = "preparing", "Preparing"
    READY = "ready", "Ready"
    DELIVERED = "delivered", "Delivered"
    CANCELLED = "cancelled", "Cancelled"


class OrderType(models.TextChoices):
    """Order fulfillment type."""

    DINE_IN = "dine-in", "Dine-in"
    TAKEOUT = "takeout", "Takeout"
    DELIVERY = "delivery", "Delivery"


class PaymentMethod(models.TextChoices):
    """Offline payment method."""

    CASH = "cash", "Cash"
    TRANSFER = "transfer", "Bank transfer"


class Order(ClientScopedModel):
    """
    Customer order.

    Totals are computed server-side from re-priced line items.
    """

    # Customer information
    customer_name = models.CharField(max_length=200)
    customer_email = models.EmailField()
    customer_phone = models.CharField(max_length=20)
    customer_address = models.TextField(blank=True)

    # Order details
    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
    )
    order_type = models.CharField(
        max_length=20,
        choices=OrderType.choices,
    )
    payment_method = models.CharField(
        max_length=20,
        choices=PaymentMethod.choices,
        default=PaymentMethod.CASH,
    )
    special_instructions = models.TextField(blank=True)

    # Pricing
    subtotal = models.DecimalField(max_digits=12, decimal_places=2)
    vat = models.DecimalField(max_digits=12, decimal_places=2)
    total = models.DecimalField(max_digits=12, decimal_places=2)

    # Confirmation
    confirmation_code = models.CharField(
        max_length=20,
        blank=True,
        help_text="Customer-facing confirmation code",
    )

    class Meta:
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["client", "status"]),
            models.Index(fields=["client", "created_at"]),
            models.Index(fields=["confirmation_code"]),
        ]

    def __str__(self) -> str:
        return f"Order {self.confirmation_code or self.pk} - {self.customer_name}"


class OrderItem(ClientScopedModel):
    """
    Line item in an order.

    Stores a snapshot of the item and its priced customizations.
    """

    order = models.ForeignKey(
        Order,
        on_delete=models.CASCADE,
        related_name="items",
    )
    menu_item = models.ForeignKey(
        MenuItem,
        on_delete=models.PROTECT,
        related_name="order_items",
        help_text="Reference to the menu item (for analytics)",
    )

    # Snapshot of item at order time
    item_name = models.CharField(max_length=200)
    quantity = models.PositiveIntegerField(default=1)
    unit_price = models.DecimalField(max_digits=12, decimal_places=2)
    vat_rate = models.DecimalField(max_digits=5, decimal_places=2)

    # One PricedSelection per customization schema
    customizations = models.JSONField(
        default=list,
        blank=True,
        help_text="Selections per customization schema at order time",
    )

    special_instructions = models.TextField(blank=True)

    line_total = models.DecimalField(
        max_digits=12,
        decimal_places=2,
        help_text="unit_price * quantity",
    )

    class Meta:
        ordering = ["pk"]

    def __str__(self) -> str:
        return f"{self.quantity}x {self.item_name}"
