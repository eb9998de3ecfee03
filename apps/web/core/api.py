"""
Helpers shared by the public JSON API views.
"""

from typing import Any

from django.http import Http404, JsonResponse

from pydantic import ValidationError as PydanticValidationError

from .models import Client


def cors_headers() -> dict[str, str]:
    """CORS headers for storefront access."""
    return {
        "Access-Control-Allow-Origin": "*",
        "Access-Control-Allow-Methods": "GET, POST, OPTIONS",
        "Access-Control-Allow-Headers": "Content-Type, Idempotency-Key",
    }


def json_response(data: dict[str, Any], status: int = 200) -> JsonResponse:
    """Create a JSON response with CORS headers."""
    response = JsonResponse(data, status=status)
    for key, value in cors_headers().items():
        response[key] = value
    return response


def validation_error_details(error: PydanticValidationError) -> list[dict[str, str]]:
    """Flatten a pydantic error into field/message pairs."""
    return [
        {
            "field": ".".join(str(loc) for loc in err["loc"]),
            "message": err["msg"],
        }
        for err in error.errors()
    ]


def get_client_or_404(slug: str) -> Client:
    """Get an active client by slug or raise Http404."""
    try:
        return Client.objects.get(slug=slug, is_active=True)
    except Client.DoesNotExist as exc:
        raise Http404(f"Client '{slug}' not found") from exc
