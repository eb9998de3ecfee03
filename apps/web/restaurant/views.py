"""
Menu and Order API views - Public endpoints for restaurant data.

These endpoints are used by the storefront:
- Menu browsing: categories, items and their customization schemas
- At checkout: Order creation and status tracking

Orders are always re-priced server-side; client-side prices are never trusted.
"""

import json
import logging
import secrets

from django.conf import settings
from django.db import transaction
from django.db.models import Prefetch
from django.http import Http404, HttpRequest, JsonResponse
from django.views.decorators.cache import cache_control
from django.views.decorators.csrf import csrf_exempt
from django.views.decorators.http import require_GET, require_POST

from pydantic import ValidationError as PydanticValidationError
from pizzeria_schemas import CartLine, OrderType

from apps.web.core.api import get_client_or_404, json_response
from apps.web.core.decorators import idempotency_key_required
from apps.web.core.models import Client
from apps.web.customization.engine import compute_cart_totals, price_item
from apps.web.customization.models import MenuItemCustomization
from apps.web.customization.services import DjangoCatalog
from apps.web.restaurant.models import (
    MenuCategory,
    MenuItem,
    Order,
    OrderItem,
    OrderStatus,
    RestaurantProfile,
)
from apps.web.restaurant.serializers import (
    CustomerSchema,
    MenuCategorySchema,
    MenuItemSchema,
    MenuItemSchemaRef,
    MenuListResponse,
    OrderCreateRequest,
    OrderCreateResponse,
    OrderDetailResponse,
    OrderItemCreateSchema,
    OrderItemResponseSchema,
    OrderStatusResponse,
    ValidationErrorDetail,
    ValidationErrorResponse,
)

logger = logging.getLogger(__name__)


def _get_restaurant_profile(client: Client) -> RestaurantProfile | None:
    """Get the restaurant profile for a client, if any."""
    return RestaurantProfile.objects.for_tenant(client).first()


def _validation_error(details: list[ValidationErrorDetail]) -> JsonResponse:
    response = ValidationErrorResponse(error="validation_error", details=details)
    return json_response(response.model_dump(), status=400)


def _serialize_menu_item(item: MenuItem, catalog: DjangoCatalog) -> MenuItemSchema:
    """Serialize a MenuItem model with its active customization schemas."""
    customizations = [
        MenuItemSchemaRef(
            schema_id=assignment.schema_id,
            name=assignment.schema.name,
            type=assignment.schema.type,
            is_required=assignment.is_required,
        )
        for assignment in item.customizations.all()
        if assignment.schema.is_active
    ]
    return MenuItemSchema(
        id=item.pk,
        name=item.name,
        name_vi=item.name_vi,
        description=item.description,
        price=item.price,
        vat_rate=item.vat_rate if item.vat_rate is not None else catalog.default_vat_rate,
        image_url=item.image_url,
        is_available=item.is_available,
        is_pinned=item.is_pinned,
        tags=item.tags,
        customizations=customizations,
    )


def _serialize_category(category: MenuCategory, catalog: DjangoCatalog) -> MenuCategorySchema:
    """Serialize a MenuCategory model with nested items."""
    return MenuCategorySchema(
        id=category.pk,
        name=category.name,
        name_vi=category.name_vi,
        description=category.description,
        items=[_serialize_menu_item(item, catalog) for item in category.items.all()],
    )


@require_GET
@cache_control(max_age=300, public=True)  # 5 minutes
def menu_list(_request: HttpRequest, slug: str) -> JsonResponse:
    """
    GET /api/clients/{slug}/menu

    Returns categories, items and the schemas attached to each item.
    Pinned items are listed first within their category.

    Cache: 5 minutes
    """
    client = get_client_or_404(slug)
    profile = _get_restaurant_profile(client)
    catalog = DjangoCatalog(client)

    categories = MenuCategory.objects.for_tenant(client).prefetch_related(
        Prefetch(
            "items",
            queryset=MenuItem.objects.order_by("-is_pinned", "display_order", "name"),
        ),
        Prefetch(
            "items__customizations",
            queryset=MenuItemCustomization.objects.select_related("schema"),
        ),
    )

    response = MenuListResponse(
        categories=[_serialize_category(category, catalog) for category in categories],
        currency=profile.currency if profile else "VND",
        ordering_enabled=profile.ordering_enabled if profile else False,
    )
    return json_response(response.model_dump(mode="json"))


# =============================================================================
# Order API Endpoints
# =============================================================================


def _generate_confirmation_code() -> str:
    """Generate a unique customer-facing confirmation code."""
    # Format: ORD-XXXX where X is alphanumeric
    return f"ORD-{secrets.token_hex(2).upper()}"


def _price_order_items(
    client: Client, items: list[OrderItemCreateSchema]
) -> tuple[list[ValidationErrorDetail], list[tuple[MenuItem, OrderItemCreateSchema, CartLine]]]:
    """
    Check availability and re-price every requested item.

    Returns:
        Tuple of (errors, priced_items)
        where priced_items is a list of (MenuItem, item_data, CartLine) tuples
    """
    catalog = DjangoCatalog(client)
    errors: list[ValidationErrorDetail] = []
    priced_items: list[tuple[MenuItem, OrderItemCreateSchema, CartLine]] = []

    for i, item_data in enumerate(items):
        field_prefix = f"items[{i}]"

        menu_item = MenuItem.objects.for_tenant(client).filter(pk=item_data.menu_item_id).first()
        if menu_item is None:
            errors.append(
                ValidationErrorDetail(
                    field=f"{field_prefix}.menu_item_id",
                    message="Item not found",
                )
            )
            continue

        # Check item is available (sold out)
        if not menu_item.is_available:
            errors.append(
                ValidationErrorDetail(
                    field=f"{field_prefix}.menu_item_id",
                    message=f"'{menu_item.name}' is currently unavailable",
                )
            )
            continue

        item_id = str(menu_item.pk)
        result = price_item(
            item_id,
            catalog.get_schemas_for_item(item_id),
            item_data.to_state(),
            catalog.get_catalog_item,
            rounding_unit=settings.PRICE_ROUNDING_UNIT,
        )
        if result.priced is None:
            errors.extend(
                ValidationErrorDetail(
                    field=f"{field_prefix}.selections.{error.schema_id}",
                    message=error.message,
                    kind=error.kind.value,
                )
                for error in result.errors
            )
            continue

        priced_items.append(
            (menu_item, item_data, CartLine(item=result.priced, quantity=item_data.quantity))
        )

    return errors, priced_items


def _serialize_order_item(item: OrderItem) -> OrderItemResponseSchema:
    return OrderItemResponseSchema(
        id=item.pk,
        menu_item_id=item.menu_item_id,
        item_name=item.item_name,
        quantity=item.quantity,
        unit_price=item.unit_price,
        vat_rate=item.vat_rate,
        customizations=item.customizations,
        special_instructions=item.special_instructions,
        line_total=item.line_total,
    )


@csrf_exempt
@require_POST
@idempotency_key_required
def create_order(request: HttpRequest, slug: str) -> JsonResponse:  # noqa: PLR0911
    """
    POST /api/clients/{slug}/orders

    Create a new order. Every line is validated and priced again here;
    payment is settled offline (cash or bank transfer).

    Request body: OrderCreateRequest schema
    Response: OrderCreateResponse schema (201) or ValidationErrorResponse (400)
    """
    client = get_client_or_404(slug)
    profile = _get_restaurant_profile(client)

    # Check ordering is enabled
    if profile and not profile.ordering_enabled:
        return json_response(
            {"error": "Online ordering is not enabled for this restaurant"},
            status=400,
        )

    # Parse and validate request body
    try:
        body = json.loads(request.body)
        order_request = OrderCreateRequest.model_validate(body)
    except json.JSONDecodeError:
        return json_response(
            {"error": "Invalid JSON in request body"},
            status=400,
        )
    except PydanticValidationError as e:
        return _validation_error(
            [
                ValidationErrorDetail(
                    field=".".join(str(loc) for loc in err["loc"]),
                    message=err["msg"],
                )
                for err in e.errors()
            ]
        )

    # Validate order type
    if order_request.order_type == OrderType.DELIVERY:
        if profile and not profile.delivery_enabled:
            return json_response(
                {"error": "Delivery is not available for this restaurant"},
                status=400,
            )
        if not order_request.customer.address:
            return _validation_error(
                [
                    ValidationErrorDetail(
                        field="customer.address",
                        message="Delivery address is required for delivery orders",
                    )
                ]
            )
    if order_request.order_type == OrderType.DINE_IN and profile and not profile.dine_in_enabled:
        return json_response(
            {"error": "Dine-in ordering is not available for this restaurant"},
            status=400,
        )

    errors, priced_items = _price_order_items(client, order_request.items)
    if errors:
        logger.info(
            "Rejected order for client %s: %d validation error(s)", client.slug, len(errors)
        )
        return _validation_error(errors)

    totals = compute_cart_totals([line for _item, _data, line in priced_items])

    # Create order and items in a transaction
    with transaction.atomic():
        order = Order.objects.create(
            client=client,
            customer_name=order_request.customer.name,
            customer_email=order_request.customer.email,
            customer_phone=order_request.customer.phone,
            customer_address=order_request.customer.address,
            order_type=order_request.order_type.value,
            payment_method=order_request.payment_method.value,
            special_instructions=order_request.special_instructions,
            subtotal=totals.subtotal,
            vat=totals.vat,
            total=totals.total,
            status=OrderStatus.PENDING,
            confirmation_code=_generate_confirmation_code(),
        )

        order_items = [
            OrderItem.objects.create(
                client=client,
                order=order,
                menu_item=menu_item,
                item_name=menu_item.name,
                quantity=line.quantity,
                unit_price=line.item.unit_price,
                vat_rate=line.item.vat_rate,
                customizations=[
                    c.model_dump(mode="json") for c in line.item.customizations
                ],
                special_instructions=item_data.special_instructions,
                line_total=line.line_total,
            )
            for menu_item, item_data, line in priced_items
        ]

    logger.info(
        "Created order %s (%s) for client %s: %d item(s), total %s",
        order.pk,
        order.confirmation_code,
        client.slug,
        len(order_items),
        order.total,
    )

    response = OrderCreateResponse(
        order_id=order.pk,
        confirmation_code=order.confirmation_code,
        status=order.status,
        subtotal=order.subtotal,
        vat=order.vat,
        total=order.total,
        items=[_serialize_order_item(item) for item in order_items],
        created_at=order.created_at,
    )
    return json_response(response.model_dump(mode="json"), status=201)


@require_GET
def get_order(_request: HttpRequest, slug: str, order_id: int) -> JsonResponse:
    """
    GET /api/clients/{slug}/orders/{order_id}

    Get order details by ID.

    Response: OrderDetailResponse schema (200) or 404
    """
    client = get_client_or_404(slug)

    try:
        order = Order.objects.prefetch_related("items").get(
            client=client,
            pk=order_id,
        )
    except Order.DoesNotExist as exc:
        raise Http404(f"Order {order_id} not found") from exc

    response = OrderDetailResponse(
        order_id=order.pk,
        confirmation_code=order.confirmation_code,
        status=order.status,
        customer=CustomerSchema(
            name=order.customer_name,
            email=order.customer_email,
            phone=order.customer_phone,
            address=order.customer_address,
        ),
        items=[_serialize_order_item(item) for item in order.items.all()],
        order_type=order.order_type,
        payment_method=order.payment_method,
        special_instructions=order.special_instructions,
        subtotal=order.subtotal,
        vat=order.vat,
        total=order.total,
        created_at=order.created_at,
    )

    return json_response(response.model_dump(mode="json"))


@require_GET
@cache_control(max_age=5, public=True)  # 5 seconds
def order_status(_request: HttpRequest, slug: str, order_id: int) -> JsonResponse:
    """
    GET /api/clients/{slug}/orders/{order_id}/status

    Get current order status for polling.

    Response: OrderStatusResponse schema (200) or 404
    """
    client = get_client_or_404(slug)

    try:
        order = Order.objects.get(
            client=client,
            pk=order_id,
        )
    except Order.DoesNotExist as exc:
        raise Http404(f"Order {order_id} not found") from exc

    response = OrderStatusResponse(
        status=order.status,
        updated_at=order.updated_at,
    )

    return json_response(response.model_dump(mode="json"))
