"""
URL routing for public customization endpoints.

Mounted under /api/clients/<slug>/ next to the restaurant API.
"""

from django.urls import path

from apps.web.customization import views

app_name = "customization"

urlpatterns = [
    path(
        "menu/items/<int:item_id>/customizations",
        views.item_customizations,
        name="item_customizations",
    ),
    path("menu/items/<int:item_id>/price", views.price_preview, name="price_preview"),
]
