"""
Customization API views.

Public endpoints (storefront, CORS-enabled):
- Item customizations: schemas, initial selections, half-and-half candidates
- Price preview: live price while the customer edits selections

Staff endpoints (dashboard, login required):
- Schema create/update/clone/delete and assignment to menu items
"""

import json
from typing import Any, TypeVar

from django.conf import settings
from django.contrib.auth.decorators import login_required
from django.core.exceptions import PermissionDenied
from django.http import Http404, HttpRequest, JsonResponse
from django.shortcuts import get_object_or_404
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_http_methods, require_POST

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError
from pizzeria_schemas import HalfAndHalfSchema

from apps.web.core.api import get_client_or_404, json_response, validation_error_details
from apps.web.customization.engine import compute_price, new_selection_state, price_item
from apps.web.customization.exceptions import (
    ProtectedSchemaError,
    SchemaDefinitionError,
    SchemaInUseError,
    UnknownSchemaError,
)
from apps.web.customization.models import CustomizationSchema, MenuItemCustomization
from apps.web.customization.serializers import (
    AssignmentResponse,
    ItemCustomizationsResponse,
    PricePreviewRequest,
    PricePreviewResponse,
    SchemaAssignRequest,
    SchemaResponse,
    SchemaWriteRequest,
)
from apps.web.customization.services import (
    DjangoCatalog,
    assign_schemas,
    clone_schema,
    create_schema,
    delete_schema,
    update_schema,
)
from apps.web.restaurant.models import MenuItem


_M = TypeVar("_M", bound=BaseModel)


def _parse_body(request: HttpRequest, model: type[_M]) -> _M | JsonResponse:
    """Parse a JSON body, or return the 400 response describing why not."""
    try:
        body = json.loads(request.body or b"{}")
        return model.model_validate(body)
    except json.JSONDecodeError:
        return json_response({"error": "Invalid JSON in request body"}, status=400)
    except PydanticValidationError as e:
        return json_response(
            {"error": "validation_error", "details": validation_error_details(e)},
            status=400,
        )


# =============================================================================
# Storefront
# =============================================================================


@require_GET
def item_customizations(_request: HttpRequest, slug: str, item_id: int) -> JsonResponse:
    """
    GET /api/clients/{slug}/menu/items/{item_id}/customizations

    Returns the schemas attached to an item with the selections a fresh
    customization panel starts from.
    """
    client = get_client_or_404(slug)
    catalog = DjangoCatalog(client)

    item = catalog.get_catalog_item(str(item_id))
    if item is None:
        raise Http404(f"Menu item {item_id} not found")

    schemas = catalog.get_schemas_for_item(item.id)
    candidates = []
    half = next((s for s in schemas if isinstance(s, HalfAndHalfSchema)), None)
    if half is not None:
        candidates = catalog.second_flavor_candidates(
            item.id, half.config.allowed_categories
        )

    response = ItemCustomizationsResponse(
        item=item,
        schemas=[schema.model_dump(mode="json") for schema in schemas],
        initial_selections=new_selection_state(schemas),
        second_flavor_candidates=candidates,
    )
    return json_response(response.model_dump(mode="json"))


@csrf_exempt
@require_POST
def price_preview(request: HttpRequest, slug: str, item_id: int) -> JsonResponse:
    """
    POST /api/clients/{slug}/menu/items/{item_id}/price

    Prices the item with the given selections. The price is returned even
    when selections are incomplete; can_add_to_cart says whether they pass
    validation.

    Request body: PricePreviewRequest schema
    Response: PricePreviewResponse schema (200), 400 or 404
    """
    client = get_client_or_404(slug)

    preview = _parse_body(request, PricePreviewRequest)
    if isinstance(preview, JsonResponse):
        return preview

    catalog = DjangoCatalog(client)
    item = catalog.get_catalog_item(str(item_id))
    if item is None:
        raise Http404(f"Menu item {item_id} not found")

    schemas = catalog.get_schemas_for_item(item.id)
    if preview.schema_id is not None:
        schemas = [schema for schema in schemas if schema.id == preview.schema_id]

    state = preview.to_state()
    result = price_item(
        item.id,
        schemas,
        state,
        catalog.get_catalog_item,
        rounding_unit=settings.PRICE_ROUNDING_UNIT,
    )

    if result.priced is not None:
        unit_price = result.priced.unit_price
        customizations = result.priced.customizations
    else:
        unit_price = compute_price(
            item,
            schemas,
            state,
            catalog.get_catalog_item,
            rounding_unit=settings.PRICE_ROUNDING_UNIT,
        )
        customizations = []

    response = PricePreviewResponse(
        item_id=item.id,
        unit_price=unit_price,
        vat_rate=item.vat_rate,
        can_add_to_cart=result.ok,
        errors=result.errors,
        customizations=customizations,
    )
    return json_response(response.model_dump(mode="json"))


# =============================================================================
# Staff administration
# =============================================================================


def _check_can_edit(request: HttpRequest) -> None:
    if not getattr(request.user, "can_edit_menu", False):
        raise PermissionDenied("Read-only users cannot edit customizations")


def _schema_payload(schema: CustomizationSchema) -> dict[str, Any]:
    return SchemaResponse.model_validate(schema).model_dump(mode="json")


def _definition_error_response(e: SchemaDefinitionError) -> JsonResponse:
    return JsonResponse({"error": "invalid_schema", "errors": e.errors}, status=400)


@login_required
@require_http_methods(["GET", "POST"])
def schema_list(request: HttpRequest) -> JsonResponse:
    """
    GET /dashboard/customizations/schemas/
    POST /dashboard/customizations/schemas/

    Lists the client's schemas, or creates one.
    """
    if request.method == "GET":
        schemas = CustomizationSchema.objects.for_client(request)
        schema_type = request.GET.get("type", "").strip()
        if schema_type:
            schemas = schemas.filter(type=schema_type)
        return JsonResponse({"schemas": [_schema_payload(s) for s in schemas]})

    _check_can_edit(request)
    data = _parse_body(request, SchemaWriteRequest)
    if isinstance(data, JsonResponse):
        return data

    values = data.model_dump(exclude_unset=True)
    base_schema_id = values.get("base_schema_id")
    if base_schema_id is not None:
        get_object_or_404(CustomizationSchema.objects.for_client(request), pk=base_schema_id)

    try:
        schema = create_schema(request.client, values)  # type: ignore[attr-defined]
    except SchemaDefinitionError as e:
        return _definition_error_response(e)

    return JsonResponse(_schema_payload(schema), status=201)


@login_required
@require_http_methods(["GET", "POST"])
def schema_detail(request: HttpRequest, schema_id: int) -> JsonResponse:
    """
    GET /dashboard/customizations/schemas/{schema_id}/
    POST /dashboard/customizations/schemas/{schema_id}/

    Returns a schema, or updates it. A supplied config replaces the stored
    config as a whole.
    """
    schema = get_object_or_404(CustomizationSchema.objects.for_client(request), pk=schema_id)

    if request.method == "GET":
        return JsonResponse(_schema_payload(schema))

    _check_can_edit(request)
    data = _parse_body(request, SchemaWriteRequest)
    if isinstance(data, JsonResponse):
        return data

    try:
        schema = update_schema(schema, data.model_dump(exclude_unset=True))
    except SchemaDefinitionError as e:
        return _definition_error_response(e)

    return JsonResponse(_schema_payload(schema))


@require_POST
@login_required
def schema_clone(request: HttpRequest, schema_id: int) -> JsonResponse:
    """
    POST /dashboard/customizations/schemas/{schema_id}/clone/
    """
    _check_can_edit(request)
    schema = get_object_or_404(CustomizationSchema.objects.for_client(request), pk=schema_id)
    clone = clone_schema(schema)
    return JsonResponse(_schema_payload(clone), status=201)


@require_POST
@login_required
def schema_delete(request: HttpRequest, schema_id: int) -> JsonResponse:
    """
    POST /dashboard/customizations/schemas/{schema_id}/delete/

    Base schemas and schemas attached to menu items are protected (409).
    """
    _check_can_edit(request)
    schema = get_object_or_404(CustomizationSchema.objects.for_client(request), pk=schema_id)

    try:
        delete_schema(schema)
    except ProtectedSchemaError as e:
        return JsonResponse({"error": e.message}, status=409)
    except SchemaInUseError as e:
        return JsonResponse({"error": e.message, "item_ids": e.item_ids}, status=409)

    return JsonResponse({"deleted": schema_id})


@require_POST
@login_required
def item_schemas_assign(request: HttpRequest, item_id: int) -> JsonResponse:
    """
    POST /dashboard/customizations/items/{item_id}/schemas/

    Replaces the schemas attached to a menu item, in the given order.
    """
    _check_can_edit(request)
    menu_item = get_object_or_404(MenuItem.objects.for_client(request), pk=item_id)

    data = _parse_body(request, SchemaAssignRequest)
    if isinstance(data, JsonResponse):
        return data

    try:
        assignments = assign_schemas(
            menu_item,
            data.schema_ids,
            required_ids=data.required_schema_ids,
        )
    except UnknownSchemaError as e:
        return JsonResponse(
            {"error": e.message, "schema_ids": e.schema_ids},
            status=400,
        )

    return JsonResponse({"assignments": _assignments_payload(assignments)})


def _assignments_payload(assignments: list[MenuItemCustomization]) -> list[dict[str, Any]]:
    return [
        AssignmentResponse(
            schema_id=a.schema_id,
            sort_order=a.sort_order,
            is_required=a.is_required,
        ).model_dump()
        for a in assignments
    ]
