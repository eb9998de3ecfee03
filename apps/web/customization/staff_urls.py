"""
Dashboard URL routes for schema administration.
"""

from django.urls import path

from apps.web.customization import views

app_name = "customization_staff"

urlpatterns = [
    path("schemas/", views.schema_list, name="schema_list"),
    path("schemas/<int:schema_id>/", views.schema_detail, name="schema_detail"),
    path("schemas/<int:schema_id>/clone/", views.schema_clone, name="schema_clone"),
    path("schemas/<int:schema_id>/delete/", views.schema_delete, name="schema_delete"),
    path(
        "items/<int:item_id>/schemas/",
        views.item_schemas_assign,
        name="item_schemas_assign",
    ),
]
