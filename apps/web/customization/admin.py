"""Admin registration for customization models."""

from typing import Any

from django import forms
from django.contrib import admin

from apps.web.customization.engine import definition_errors
from apps.web.customization.models import CustomizationSchema, MenuItemCustomization


class CustomizationSchemaForm(forms.ModelForm):
    """Runs the same definition checks as the staff API."""

    class Meta:
        model = CustomizationSchema
        fields = "__all__"

    def clean(self) -> dict[str, Any]:
        cleaned = super().clean()
        errors = definition_errors(
            {
                "type": cleaned.get("type"),
                "name": cleaned.get("name") or "",
                "config": cleaned.get("config") or {},
                "pricing_config": cleaned.get("pricing_config") or {},
                "default_option_id": cleaned.get("default_option_id") or None,
            }
        )
        if errors:
            raise forms.ValidationError(errors)
        return cleaned


class MenuItemCustomizationInline(admin.TabularInline):
    """Inline for schemas attached to a menu item."""

    model = MenuItemCustomization
    extra = 0
    fields = ["schema", "sort_order", "is_required"]
    autocomplete_fields = ["schema"]


@admin.register(CustomizationSchema)
class CustomizationSchemaAdmin(admin.ModelAdmin):
    """Admin for customization schemas."""

    form = CustomizationSchemaForm
    list_display = ["name", "type", "client", "is_base_schema", "is_active"]
    list_filter = ["type", "is_base_schema", "is_active", "client"]
    search_fields = ["name", "name_vi", "description"]
    readonly_fields = ["created_at", "updated_at"]

    fieldsets = [
        (None, {"fields": ["client", "name", "name_vi", "type", "description"]}),
        ("Definition", {"fields": ["config", "pricing_config", "default_option_id"]}),
        ("Lineage", {"fields": ["base_schema", "is_base_schema", "is_active"]}),
        ("Timestamps", {"fields": ["created_at", "updated_at"]}),
    ]
