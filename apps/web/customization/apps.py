"""Django app configuration for customization module."""

from django.apps import AppConfig


class CustomizationConfig(AppConfig):
    """Customization schemas and pricing app configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.customization"
    verbose_name = "Customization"
