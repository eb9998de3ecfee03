"""
Catalog services - Menu items and their schemas as the pricing engine sees them.

The engine never touches the ORM; views build a DjangoCatalog for the
request's client and hand its bound methods to price_item().
"""

import logging
from collections.abc import Sequence
from decimal import Decimal
from typing import Any

from django.conf import settings

from pizzeria_schemas import CatalogItem, SchemaType, parse_schemas

from apps.web.core.models import Client
from apps.web.customization.models import MenuItemCustomization
from apps.web.restaurant.models import MenuItem, RestaurantProfile

logger = logging.getLogger(__name__)

_FEE_KEYS = ("combination_fee", "combinationFee", "halfAndHalfFee")


def _parse_item_id(item_id: Any) -> int | None:
    try:
        return int(str(item_id))
    except (TypeError, ValueError):
        return None


class DjangoCatalog:
    """
    Read-only catalog for one client.

    Lookups are memoized for the lifetime of the instance, so a catalog
    should not outlive the request that created it.
    """

    def __init__(self, client: Client) -> None:
        self.client = client
        self._items: dict[str, CatalogItem | None] = {}
        self._default_vat_rate: Decimal | None = None

    @property
    def default_vat_rate(self) -> Decimal:
        """Restaurant VAT rate, falling back to the DEFAULT_VAT_RATE setting."""
        if self._default_vat_rate is None:
            profile = RestaurantProfile.objects.for_tenant(self.client).first()
            if profile is not None:
                self._default_vat_rate = profile.default_vat_rate
            else:
                self._default_vat_rate = Decimal(str(settings.DEFAULT_VAT_RATE))
        return self._default_vat_rate

    def to_catalog_item(self, menu_item: MenuItem) -> CatalogItem:
        vat_rate = menu_item.vat_rate
        return CatalogItem(
            id=str(menu_item.pk),
            name=menu_item.name,
            base_price=menu_item.price,
            vat_rate=vat_rate if vat_rate is not None else self.default_vat_rate,
            category_id=str(menu_item.category_id),
            is_available=menu_item.is_available,
        )

    def get_catalog_item(self, item_id: str) -> CatalogItem | None:
        """
        Snapshot of a menu item, or None if it does not exist for this client.
        """
        key = str(item_id)
        if key in self._items:
            return self._items[key]

        pk = _parse_item_id(item_id)
        menu_item = None
        if pk is not None:
            menu_item = MenuItem.objects.for_tenant(self.client).filter(pk=pk).first()

        item = self.to_catalog_item(menu_item) if menu_item else None
        if item is None:
            logger.debug("Menu item %s not found for client %s", item_id, self.client.slug)
        self._items[key] = item
        return item

    def get_schema_definitions(self, item_id: str) -> list[dict[str, Any]]:
        """Raw definitions of the active schemas attached to an item."""
        pk = _parse_item_id(item_id)
        if pk is None:
            return []

        assignments = (
            MenuItemCustomization.objects.for_tenant(self.client).filter(
                menu_item_id=pk,
                schema__is_active=True,
            )
            .select_related("schema")
            .order_by("sort_order", "pk")
        )

        definitions = []
        for assignment in assignments:
            definition = assignment.schema.to_definition(
                is_required=assignment.is_required
            )
            if definition["type"] == SchemaType.HALF_AND_HALF:
                config = dict(definition["config"])
                if not any(key in config for key in _FEE_KEYS):
                    config["combination_fee"] = settings.HALF_AND_HALF_DEFAULT_FEE
                definition["config"] = config
            definitions.append(definition)
        return definitions

    def get_schemas_for_item(self, item_id: str) -> list[Any]:
        """
        Typed schemas attached to an item, in display order.

        Inactive schemas and definitions that no longer parse are left out.
        """
        definitions = self.get_schema_definitions(item_id)
        schemas = parse_schemas(definitions)
        if len(schemas) != len(definitions):
            logger.debug(
                "Skipped %d unparseable schema(s) on item %s",
                len(definitions) - len(schemas),
                item_id,
            )
        return schemas

    def second_flavor_candidates(
        self, item_id: str, categories: Sequence[str] = ()
    ) -> list[CatalogItem]:
        """
        Items that can fill the other half of a half-and-half pizza.

        Available items of the given categories (the first item's own
        category when none are given), excluding the item itself.
        """
        pk = _parse_item_id(item_id)
        if pk is None:
            return []
        menu_item = MenuItem.objects.for_tenant(self.client).filter(pk=pk).first()
        if menu_item is None:
            return []

        if categories:
            category_ids = [pk for pk in map(_parse_item_id, categories) if pk is not None]
        else:
            category_ids = [menu_item.category_id]

        candidates = (
            MenuItem.objects.for_tenant(self.client).filter(
                category_id__in=category_ids,
                is_available=True,
            )
            .exclude(pk=menu_item.pk)
            .order_by("display_order", "name")
        )
        return [self.to_catalog_item(candidate) for candidate in candidates]
