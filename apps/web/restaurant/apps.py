"""Django app configuration for the restaurant menu and ordering module."""

from django.apps import AppConfig


class RestaurantConfig(AppConfig):
    """Menu categories, items and orders."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "apps.web.restaurant"
    verbose_name = "Restaurant"
