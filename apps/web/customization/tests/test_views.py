"""
Integration tests for customization API views.
"""

import json

from django.test import Client as DjangoClient

import pytest

from apps.web.core.models import User
from apps.web.customization.models import CustomizationSchema, MenuItemCustomization
from apps.web.restaurant.tests.factories import (
    ClientFactory,
    MenuCategoryFactory,
    MenuItemFactory,
)

from .factories import CustomizationSchemaFactory, MenuItemCustomizationFactory


@pytest.fixture
def api_client() -> DjangoClient:
    """Django test client for API requests."""
    return DjangoClient()


@pytest.fixture
def pizza_menu():
    """Two pizzas in one category, the first with size and half-and-half."""
    category = MenuCategoryFactory(client=ClientFactory(slug="pizza-4p"), name="Pizza")
    client = category.client
    margherita = MenuItemFactory(
        client=client, category=category, name="Margherita", price=250000
    )
    hawaiian = MenuItemFactory(
        client=client, category=category, name="Hawaiian", price=150000
    )
    sizes = CustomizationSchemaFactory(client=client, name="Size")
    half = CustomizationSchemaFactory(client=client, name="Half & half", half_and_half=True)
    MenuItemCustomizationFactory(
        client=client, menu_item=margherita, schema=sizes, sort_order=0, is_required=True
    )
    MenuItemCustomizationFactory(
        client=client, menu_item=margherita, schema=half, sort_order=1
    )
    return {
        "client": client,
        "margherita": margherita,
        "hawaiian": hawaiian,
        "sizes": sizes,
        "half": half,
    }


@pytest.mark.django_db
class TestItemCustomizationsView:
    """Tests for GET /api/clients/{slug}/menu/items/{item_id}/customizations."""

    def test_returns_schemas_and_initial_state(self, api_client: DjangoClient, pizza_menu):
        """Schemas are listed in order with fresh selections."""
        item = pizza_menu["margherita"]

        response = api_client.get(f"/api/clients/pizza-4p/menu/items/{item.pk}/customizations")

        assert response.status_code == 200
        data = response.json()
        assert data["item"]["id"] == str(item.pk)
        assert [s["type"] for s in data["schemas"]] == ["size_selection", "half_and_half"]
        assert data["schemas"][0]["is_required"] is True
        size_state = data["initial_selections"]["schemas"][str(pizza_menu["sizes"].pk)]
        assert size_state["values"] == {}

    def test_lists_second_flavor_candidates(self, api_client: DjangoClient, pizza_menu):
        """Half-and-half items list the other pizzas of their category."""
        item = pizza_menu["margherita"]

        response = api_client.get(f"/api/clients/pizza-4p/menu/items/{item.pk}/customizations")

        candidates = response.json()["second_flavor_candidates"]
        assert [c["id"] for c in candidates] == [str(pizza_menu["hawaiian"].pk)]

    def test_has_cors_headers(self, api_client: DjangoClient, pizza_menu):
        """Storefront responses are CORS-enabled."""
        item = pizza_menu["margherita"]

        response = api_client.get(f"/api/clients/pizza-4p/menu/items/{item.pk}/customizations")

        assert response["Access-Control-Allow-Origin"] == "*"

    def test_404_for_other_client_item(self, api_client: DjangoClient, pizza_menu):
        """Items of another restaurant are not found."""
        other = MenuItemFactory()

        response = api_client.get(f"/api/clients/pizza-4p/menu/items/{other.pk}/customizations")

        assert response.status_code == 404


@pytest.mark.django_db
class TestPricePreviewView:
    """Tests for POST /api/clients/{slug}/menu/items/{item_id}/price."""

    def _post(self, api_client: DjangoClient, item_id: int, body: dict):
        return api_client.post(
            f"/api/clients/pizza-4p/menu/items/{item_id}/price",
            data=body,
            content_type="application/json",
        )

    def test_prices_selected_size(self, api_client: DjangoClient, pizza_menu):
        """250000 with the 20cm size costs 290000."""
        sizes = pizza_menu["sizes"]
        body = {"selections": {str(sizes.pk): {"values": {"size": "20cm"}}}}

        response = self._post(api_client, pizza_menu["margherita"].pk, body)

        assert response.status_code == 200
        data = response.json()
        assert data["unit_price"] == 290000
        assert data["can_add_to_cart"] is True
        assert data["errors"] == []
        assert len(data["customizations"]) == 2

    def test_half_and_half(self, api_client: DjangoClient, pizza_menu):
        """Half-and-half substitutes the base price."""
        body = {
            "selections": {
                str(pizza_menu["sizes"].pk): {"values": {"size": "16cm"}},
                str(pizza_menu["half"].pk): {
                    "orderMode": "hh",
                    "secondItemId": str(pizza_menu["hawaiian"].pk),
                },
            }
        }

        response = self._post(api_client, pizza_menu["margherita"].pk, body)

        # 125000 + 75000 + 10000
        assert response.json()["unit_price"] == 210000

    def test_unknown_second_flavor_blocks_cart(self, api_client: DjangoClient, pizza_menu):
        """An unknown second half keeps the price live but cannot be added."""
        body = {
            "selections": {
                str(pizza_menu["sizes"].pk): {"values": {"size": "16cm"}},
                str(pizza_menu["half"].pk): {"orderMode": "hh", "secondItemId": "999999"},
            }
        }

        response = self._post(api_client, pizza_menu["margherita"].pk, body)

        data = response.json()
        assert data["can_add_to_cart"] is False
        assert [e["kind"] for e in data["errors"]] == ["invalid_second_flavor"]
        # 125000 + 0 + 10000
        assert data["unit_price"] == 135000

    def test_incomplete_selections_still_priced(self, api_client: DjangoClient, pizza_menu):
        """The live price is shown while required choices are missing."""
        response = self._post(api_client, pizza_menu["margherita"].pk, {"selections": {}})

        data = response.json()
        assert data["unit_price"] == 250000
        assert data["can_add_to_cart"] is False
        assert data["errors"][0]["kind"] == "missing_required_selection"
        assert data["errors"][0]["message"] == "Please select size"

    def test_single_schema_preview(self, api_client: DjangoClient, pizza_menu):
        """schemaId limits pricing to one schema."""
        half = pizza_menu["half"]
        body = {"schemaId": str(half.pk), "selections": {}}

        response = self._post(api_client, pizza_menu["margherita"].pk, body)

        data = response.json()
        assert data["can_add_to_cart"] is True
        assert [c["schema_id"] for c in data["customizations"]] == [str(half.pk)]

    def test_invalid_body(self, api_client: DjangoClient, pizza_menu):
        """Malformed selections are a 400."""
        body = {"selections": {"1": {"orderMode": "quarter"}}}

        response = self._post(api_client, pizza_menu["margherita"].pk, body)

        assert response.status_code == 400
        assert response.json()["error"] == "validation_error"

    def test_invalid_json(self, api_client: DjangoClient, pizza_menu):
        """A body that is not JSON is a 400."""
        response = api_client.post(
            f"/api/clients/pizza-4p/menu/items/{pizza_menu['margherita'].pk}/price",
            data="not json",
            content_type="application/json",
        )

        assert response.status_code == 400

    def test_get_not_allowed(self, api_client: DjangoClient, pizza_menu):
        """Only POST is accepted."""
        response = api_client.get(
            f"/api/clients/pizza-4p/menu/items/{pizza_menu['margherita'].pk}/price"
        )

        assert response.status_code == 405


# =============================================================================
# Staff administration
# =============================================================================


@pytest.fixture
def staff_client(client_tenant, user) -> DjangoClient:
    """Logged-in staff user of client_tenant."""
    django_client = DjangoClient()
    django_client.force_login(user)
    return django_client


def _post_json(django_client: DjangoClient, url: str, body: dict | None = None):
    return django_client.post(url, data=json.dumps(body or {}), content_type="application/json")


@pytest.mark.django_db
class TestSchemaAdminViews:
    """Tests for /dashboard/customizations/schemas/."""

    def test_requires_login(self, api_client: DjangoClient):
        """Anonymous users are redirected to login."""
        response = api_client.get("/dashboard/customizations/schemas/")

        assert response.status_code == 302

    def test_list_is_client_scoped(self, staff_client: DjangoClient, client_tenant):
        """Only the user's client's schemas are listed."""
        own = CustomizationSchemaFactory(client=client_tenant)
        CustomizationSchemaFactory()

        response = staff_client.get("/dashboard/customizations/schemas/")

        assert response.status_code == 200
        assert [s["id"] for s in response.json()["schemas"]] == [own.pk]

    def test_list_filters_by_type(self, staff_client: DjangoClient, client_tenant):
        """?type= narrows the list."""
        CustomizationSchemaFactory(client=client_tenant)
        half = CustomizationSchemaFactory(client=client_tenant, half_and_half=True)

        response = staff_client.get("/dashboard/customizations/schemas/?type=half_and_half")

        assert [s["id"] for s in response.json()["schemas"]] == [half.pk]

    def test_create(self, staff_client: DjangoClient, client_tenant):
        """A valid definition is created for the user's client."""
        body = {
            "name": "Extra toppings",
            "type": "additional_toppings",
            "config": {"toppings": [{"id": "cheese"}], "maxSelections": 3, "allowMultiple": True},
            "pricingConfig": {"cheese": {"price": 15000}},
        }

        response = _post_json(staff_client, "/dashboard/customizations/schemas/", body)

        assert response.status_code == 201
        schema = CustomizationSchema.objects.get(pk=response.json()["id"])
        assert schema.client == client_tenant
        assert schema.pricing_config == {"cheese": {"price": 15000}}

    def test_create_invalid_definition(self, staff_client: DjangoClient):
        """Definition errors come back as a 400 with every message."""
        body = {
            "name": "Crust",
            "type": "single_choice_options",
            "config": {"maxSelections": 2, "allowMultiple": True},
        }

        response = _post_json(staff_client, "/dashboard/customizations/schemas/", body)

        assert response.status_code == 400
        assert response.json()["errors"] == [
            "single_choice_options must have maxSelections = 1",
            "single_choice_options must have allowMultiple = false",
        ]

    def test_update(self, staff_client: DjangoClient, client_tenant):
        """Supplied fields replace stored ones."""
        schema = CustomizationSchemaFactory(client=client_tenant, name="Size")

        response = _post_json(
            staff_client,
            f"/dashboard/customizations/schemas/{schema.pk}/",
            {"name": "Pizza size", "nameVi": "Cỡ bánh"},
        )

        assert response.status_code == 200
        schema.refresh_from_db()
        assert schema.name == "Pizza size"
        assert schema.name_vi == "Cỡ bánh"

    def test_detail_404_for_other_client(self, staff_client: DjangoClient):
        """Schemas of another client are not found."""
        other = CustomizationSchemaFactory()

        response = staff_client.get(f"/dashboard/customizations/schemas/{other.pk}/")

        assert response.status_code == 404

    def test_readonly_user_cannot_edit(self, staff_client: DjangoClient, user, client_tenant):
        """Read-only users are refused writes."""
        user.role = User.Role.READONLY
        user.save()
        schema = CustomizationSchemaFactory(client=client_tenant)

        response = _post_json(
            staff_client, f"/dashboard/customizations/schemas/{schema.pk}/clone/"
        )

        assert response.status_code == 403

    def test_clone(self, staff_client: DjangoClient, client_tenant):
        """Cloning returns the new schema."""
        schema = CustomizationSchemaFactory(client=client_tenant, name="Size")

        response = _post_json(
            staff_client, f"/dashboard/customizations/schemas/{schema.pk}/clone/"
        )

        assert response.status_code == 201
        assert response.json()["name"] == "Size (Copy)"

    def test_delete_in_use_conflict(self, staff_client: DjangoClient, client_tenant):
        """Deleting an attached schema is a 409."""
        assignment = MenuItemCustomizationFactory(client=client_tenant)

        response = _post_json(
            staff_client,
            f"/dashboard/customizations/schemas/{assignment.schema_id}/delete/",
        )

        assert response.status_code == 409
        assert response.json()["item_ids"] == [str(assignment.menu_item_id)]

    def test_delete_base_conflict(self, staff_client: DjangoClient, client_tenant):
        """Deleting a base schema is a 409."""
        schema = CustomizationSchemaFactory(client=client_tenant, is_base_schema=True)

        response = _post_json(
            staff_client, f"/dashboard/customizations/schemas/{schema.pk}/delete/"
        )

        assert response.status_code == 409

    def test_delete(self, staff_client: DjangoClient, client_tenant):
        """Unused schemas are deleted."""
        schema = CustomizationSchemaFactory(client=client_tenant)

        response = _post_json(
            staff_client, f"/dashboard/customizations/schemas/{schema.pk}/delete/"
        )

        assert response.status_code == 200
        assert not CustomizationSchema.objects.filter(pk=schema.pk).exists()


@pytest.mark.django_db
class TestAssignSchemasView:
    """Tests for POST /dashboard/customizations/items/{item_id}/schemas/."""

    def test_assign(self, staff_client: DjangoClient, client_tenant):
        """Schemas are attached in the given order."""
        item = MenuItemFactory(client=client_tenant)
        sizes = CustomizationSchemaFactory(client=client_tenant)
        half = CustomizationSchemaFactory(client=client_tenant, half_and_half=True)

        response = _post_json(
            staff_client,
            f"/dashboard/customizations/items/{item.pk}/schemas/",
            {"schemaIds": [half.pk, sizes.pk], "requiredSchemaIds": [sizes.pk]},
        )

        assert response.status_code == 200
        assert response.json()["assignments"] == [
            {"schema_id": half.pk, "sort_order": 0, "is_required": False},
            {"schema_id": sizes.pk, "sort_order": 1, "is_required": True},
        ]
        assert MenuItemCustomization.objects.filter(menu_item=item).count() == 2

    def test_unknown_schema(self, staff_client: DjangoClient, client_tenant):
        """Unknown ids are a 400 naming them."""
        item = MenuItemFactory(client=client_tenant)

        response = _post_json(
            staff_client,
            f"/dashboard/customizations/items/{item.pk}/schemas/",
            {"schemaIds": [999999]},
        )

        assert response.status_code == 400
        assert response.json()["schema_ids"] == ["999999"]

    def test_empty_ids_rejected(self, staff_client: DjangoClient, client_tenant):
        """At least one schema id is required."""
        item = MenuItemFactory(client=client_tenant)

        response = _post_json(
            staff_client,
            f"/dashboard/customizations/items/{item.pk}/schemas/",
            {"schemaIds": []},
        )

        assert response.status_code == 400
