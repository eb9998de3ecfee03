"""
Customization models - Reusable option schemas attached to menu items.

A schema is authored once (e.g. "Pizza sizes") and attached to many items
through MenuItemCustomization. The typed shape of config lives in
pizzeria_schemas; here it is stored as JSON exactly as the admin UI sends it.
"""

from typing import Any

from django.db import models

from apps.web.core.models import ClientScopedModel


class SchemaType(models.TextChoices):
    """Schema types offered in the admin UI."""

    SIZE_SELECTION = "size_selection", "Size selection"
    HALF_AND_HALF = "half_and_half", "Half and half"
    ADDITIONAL_TOPPINGS = "additional_toppings", "Additional toppings"
    SINGLE_CHOICE_OPTIONS = "single_choice_options", "Single choice options"


class CustomizationSchema(ClientScopedModel):
    """
    A customization axis for menu items.

    type is not restricted to SchemaType.choices: rows created by older
    versions of the admin may carry other types, which are priced from the
    option prices embedded in their config.
    """

    name = models.CharField(max_length=200)
    name_vi = models.CharField(max_length=200, blank=True)
    type = models.CharField(max_length=50, help_text="See SchemaType")
    description = models.TextField(blank=True)

    config = models.JSONField(default=dict, blank=True)
    pricing_config = models.JSONField(
        default=dict,
        blank=True,
        help_text='Option id -> {"price": amount}',
    )
    default_option_id = models.CharField(max_length=100, blank=True)

    base_schema = models.ForeignKey(
        "self",
        on_delete=models.SET_NULL,
        null=True,
        blank=True,
        related_name="derived_schemas",
    )
    is_base_schema = models.BooleanField(
        default=False,
        help_text="Base schemas are templates and cannot be deleted",
    )
    is_active = models.BooleanField(default=True)

    class Meta:
        ordering = ["name"]
        indexes = [
            models.Index(fields=["client", "type"]),
            models.Index(fields=["client", "is_active"]),
        ]

    def __str__(self) -> str:
        return f"{self.name} ({self.type})"

    def to_definition(self, *, is_required: bool = False) -> dict[str, Any]:
        """Schema fields in the shape pizzeria_schemas.parse_schema expects."""
        return {
            "id": str(self.pk),
            "name": self.name,
            "name_vi": self.name_vi or None,
            "type": self.type,
            "config": self.config or {},
            "pricing_config": self.pricing_config or {},
            "default_option_id": self.default_option_id or None,
            "is_required": is_required,
            "is_active": self.is_active,
        }


class MenuItemCustomization(ClientScopedModel):
    """
    Attachment of a schema to a menu item.

    is_required is per attachment: the same size schema can be required on
    pizzas and optional on pasta.
    """

    menu_item = models.ForeignKey(
        "restaurant.MenuItem",
        on_delete=models.CASCADE,
        related_name="customizations",
    )
    schema = models.ForeignKey(
        CustomizationSchema,
        on_delete=models.CASCADE,
        related_name="assignments",
    )
    sort_order = models.PositiveIntegerField(default=0)
    is_required = models.BooleanField(default=False)

    class Meta:
        ordering = ["sort_order", "pk"]
        constraints = [
            models.UniqueConstraint(
                fields=["menu_item", "schema"],
                name="unique_schema_per_menu_item",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.menu_item} - {self.schema.name}"
