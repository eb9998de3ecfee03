"""
Schema administration services.

Every write validates the full definition first; an invalid definition
raises SchemaDefinitionError and leaves the stored row untouched.
"""

import logging
from collections.abc import Iterable, Sequence
from enum import Enum
from typing import Any

from django.db import transaction

from apps.web.core.models import Client
from apps.web.customization.engine import check_definition
from apps.web.customization.exceptions import (
    ProtectedSchemaError,
    SchemaInUseError,
    UnknownSchemaError,
)
from apps.web.customization.models import CustomizationSchema, MenuItemCustomization
from apps.web.restaurant.models import MenuItem

logger = logging.getLogger(__name__)

WRITABLE_FIELDS = (
    "name",
    "name_vi",
    "type",
    "description",
    "config",
    "pricing_config",
    "default_option_id",
    "is_base_schema",
    "is_active",
)

COPY_SUFFIX = " (Copy)"
COPY_SUFFIX_VI = " (Bản sao)"


def _definition(values: dict[str, Any]) -> dict[str, Any]:
    return {
        "type": values.get("type"),
        "name": values.get("name") or "",
        "config": values.get("config") or {},
        "pricing_config": values.get("pricing_config") or {},
        "default_option_id": values.get("default_option_id") or None,
    }


def _writable(data: dict[str, Any]) -> dict[str, Any]:
    values = {key: data[key] for key in WRITABLE_FIELDS if key in data}
    # Text columns store "" rather than NULL
    for key in ("name_vi", "description", "default_option_id"):
        if key in values and values[key] is None:
            values[key] = ""
    if isinstance(values.get("type"), Enum):
        values["type"] = values["type"].value
    return values


def create_schema(client: Client, data: dict[str, Any]) -> CustomizationSchema:
    """
    Create a customization schema.

    Raises:
        SchemaDefinitionError: If the definition violates its type's rules.
    """
    values = _writable(data)
    check_definition(_definition(values))

    schema = CustomizationSchema.objects.create(
        client=client,
        base_schema_id=data.get("base_schema_id"),
        **values,
    )
    logger.info(
        "Created %s schema %s (%s) for client %s",
        schema.type,
        schema.pk,
        schema.name,
        client.slug,
    )
    return schema


def update_schema(schema: CustomizationSchema, data: dict[str, Any]) -> CustomizationSchema:
    """
    Update a schema.

    Supplied fields replace the stored ones; a supplied config replaces the
    stored config as a whole, nested keys are not merged.

    Raises:
        SchemaDefinitionError: If the merged definition is invalid.
    """
    changes = _writable(data)
    merged = {field: getattr(schema, field) for field in WRITABLE_FIELDS}
    merged.update(changes)
    check_definition(_definition(merged))

    for field, value in changes.items():
        setattr(schema, field, value)
    schema.save()

    logger.info(
        "Updated schema %s for client %s: %s",
        schema.pk,
        schema.client.slug,
        ", ".join(sorted(changes)) or "no changes",
    )
    return schema


def clone_schema(schema: CustomizationSchema) -> CustomizationSchema:
    """
    Copy a schema so it can be customized without touching the original.

    The copy points at the original's base schema (or at the original if it
    is itself a base schema) and is never a base schema.
    """
    base = schema if schema.is_base_schema else schema.base_schema
    clone = CustomizationSchema.objects.create(
        client=schema.client,
        name=f"{schema.name}{COPY_SUFFIX}",
        name_vi=f"{schema.name_vi}{COPY_SUFFIX_VI}" if schema.name_vi else "",
        type=schema.type,
        description=schema.description,
        config=schema.config,
        pricing_config=schema.pricing_config,
        default_option_id=schema.default_option_id,
        base_schema=base,
        is_base_schema=False,
        is_active=schema.is_active,
    )
    logger.info("Cloned schema %s as %s", schema.pk, clone.pk)
    return clone


def delete_schema(schema: CustomizationSchema) -> None:
    """
    Delete a schema.

    Raises:
        ProtectedSchemaError: If the schema is a base schema.
        SchemaInUseError: If the schema is still attached to menu items.
    """
    if schema.is_base_schema:
        raise ProtectedSchemaError(f"Base schema '{schema.name}' cannot be deleted")

    item_ids = [
        str(pk)
        for pk in schema.assignments.values_list("menu_item_id", flat=True).distinct()
    ]
    if item_ids:
        raise SchemaInUseError(
            f"Schema '{schema.name}' is used by {len(item_ids)} menu item(s)",
            item_ids=item_ids,
        )

    schema_id = schema.pk
    schema.delete()
    logger.info("Deleted schema %s", schema_id)


@transaction.atomic
def assign_schemas(
    menu_item: MenuItem,
    schema_ids: Sequence[int | str],
    *,
    required_ids: Iterable[int | str] = (),
) -> list[MenuItemCustomization]:
    """
    Replace the schemas attached to a menu item.

    Args:
        menu_item: Item to configure.
        schema_ids: Schema ids in display order. Must be non-empty and unique.
        required_ids: Subset of schema_ids the customer must fill in.

    Returns:
        The new attachments, in display order.

    Raises:
        UnknownSchemaError: If the ids are empty, repeated, or not found
            for the item's client.
    """
    ids = [str(schema_id) for schema_id in schema_ids]
    if not ids:
        raise UnknownSchemaError("At least one schema id is required")
    if len(set(ids)) != len(ids):
        raise UnknownSchemaError("Schema ids must be unique", schema_ids=ids)

    int_ids = []
    for schema_id in ids:
        try:
            int_ids.append(int(schema_id))
        except ValueError:
            raise UnknownSchemaError(
                f"Schema {schema_id} not found", schema_ids=[schema_id]
            ) from None

    schemas = {
        str(schema.pk): schema
        for schema in CustomizationSchema.objects.for_tenant(menu_item.client).filter(
            pk__in=int_ids
        )
    }
    missing = [schema_id for schema_id in ids if schema_id not in schemas]
    if missing:
        raise UnknownSchemaError(
            f"Schema(s) not found: {', '.join(missing)}", schema_ids=missing
        )

    required = {str(schema_id) for schema_id in required_ids}
    MenuItemCustomization.objects.filter(menu_item=menu_item).delete()
    assignments = MenuItemCustomization.objects.bulk_create(
        [
            MenuItemCustomization(
                client=menu_item.client,
                menu_item=menu_item,
                schema=schemas[schema_id],
                sort_order=index,
                is_required=schema_id in required,
            )
            for index, schema_id in enumerate(ids)
        ]
    )
    logger.info(
        "Assigned %d schema(s) to menu item %s: %s",
        len(assignments),
        menu_item.pk,
        ", ".join(ids),
    )
    return assignments
