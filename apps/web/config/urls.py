"""
URL configuration for Pizzeria.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("dashboard/customizations/", include("apps.web.customization.staff_urls")),
    # Public API endpoints
    path("api/clients/<slug:slug>/", include("apps.web.restaurant.urls")),
    path("api/clients/<slug:slug>/", include("apps.web.customization.urls")),
]
