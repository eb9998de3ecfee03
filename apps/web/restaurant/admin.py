"""Admin registration for restaurant models."""

from django.contrib import admin

from apps.web.core.admin import ClientScopedParentAdmin
from apps.web.customization.admin import MenuItemCustomizationInline
from apps.web.restaurant.models import (
    MenuCategory,
    MenuItem,
    Order,
    OrderItem,
    RestaurantProfile,
)


class MenuItemInline(admin.TabularInline):
    """Inline for items within a category."""

    model = MenuItem
    extra = 0
    fields = ["name", "price", "is_available", "display_order"]


class OrderItemInline(admin.TabularInline):
    """Inline for items within an order."""

    model = OrderItem
    extra = 0
    fields = ["item_name", "quantity", "unit_price", "vat_rate", "line_total"]
    readonly_fields = ["item_name", "quantity", "unit_price", "vat_rate", "line_total"]


@admin.register(RestaurantProfile)
class RestaurantProfileAdmin(admin.ModelAdmin):
    """Admin for restaurant profiles."""

    list_display = ["client", "ordering_enabled", "delivery_enabled", "default_vat_rate"]
    list_filter = ["ordering_enabled", "delivery_enabled"]
    search_fields = ["client__name", "client__slug"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["client"]}),
        (
            "Display Settings",
            {"fields": ["show_prices", "show_descriptions", "show_images"]},
        ),
        (
            "Ordering",
            {"fields": ["ordering_enabled", "dine_in_enabled", "delivery_enabled"]},
        ),
        ("Pricing", {"fields": ["currency", "default_vat_rate"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(MenuCategory)
class MenuCategoryAdmin(ClientScopedParentAdmin):
    """Admin for menu categories."""

    list_display = ["name", "client", "display_order"]
    list_filter = ["client"]
    search_fields = ["name", "name_vi"]
    inlines = [MenuItemInline]
    readonly_fields = ["created_at", "updated_at"]


@admin.register(MenuItem)
class MenuItemAdmin(ClientScopedParentAdmin):
    """Admin for menu items."""

    list_display = ["name", "category", "price", "vat_rate", "is_available", "is_pinned"]
    list_filter = ["is_available", "is_pinned", "category__client"]
    search_fields = ["name", "name_vi", "description"]
    inlines = [MenuItemCustomizationInline]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["client", "category", "name", "name_vi", "price", "vat_rate"]}),
        ("Description", {"fields": ["description", "description_vi", "image_url"]}),
        (
            "Availability",
            {"fields": ["is_available", "is_pinned", "pinned_at", "tags", "display_order"]},
        ),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]


@admin.register(Order)
class OrderAdmin(admin.ModelAdmin):
    """Admin for orders."""

    list_display = [
        "confirmation_code",
        "customer_name",
        "client",
        "status",
        "order_type",
        "payment_method",
        "total",
        "created_at",
    ]
    list_filter = ["status", "order_type", "payment_method", "client"]
    search_fields = [
        "confirmation_code",
        "customer_name",
        "customer_email",
        "customer_phone",
    ]
    inlines = [OrderItemInline]
    readonly_fields = ["created_at", "updated_at"]
    date_hierarchy = "created_at"

    fieldsets = [
        (None, {"fields": ["client", "confirmation_code"]}),
        (
            "Customer",
            {
                "fields": [
                    "customer_name",
                    "customer_email",
                    "customer_phone",
                    "customer_address",
                ]
            },
        ),
        (
            "Order Details",
            {
                "fields": [
                    "status",
                    "order_type",
                    "payment_method",
                    "special_instructions",
                ]
            },
        ),
        ("Pricing", {"fields": ["subtotal", "vat", "total"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]
