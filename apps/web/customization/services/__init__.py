"""Customization services - catalog access and schema administration."""

from apps.web.customization.services.catalog import DjangoCatalog
from apps.web.customization.services.schemas import (
    assign_schemas,
    clone_schema,
    create_schema,
    delete_schema,
    update_schema,
)

__all__ = [
    "DjangoCatalog",
    "assign_schemas",
    "clone_schema",
    "create_schema",
    "delete_schema",
    "update_schema",
]
