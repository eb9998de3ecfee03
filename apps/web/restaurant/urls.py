"""
URL routing for restaurant API endpoints.

All endpoints are public (no auth required) and CORS-enabled.
"""

from django.urls import path

from apps.web.restaurant import views

app_name = "restaurant"

urlpatterns = [
    # Menu endpoints
    path("menu", views.menu_list, name="menu_list"),
    # Order endpoints
    path("orders", views.create_order, name="order_create"),
    path("orders/<int:order_id>", views.get_order, name="order_detail"),
    path("orders/<int:order_id>/status", views.order_status, name="order_status"),
]
