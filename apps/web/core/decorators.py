"""
Decorators for storefront request handling.
"""

import json
import logging
from collections.abc import Callable
from functools import wraps
from typing import Any

from django.core.cache import cache
from django.http import HttpRequest, JsonResponse

from .api import json_response

logger = logging.getLogger(__name__)

IDEMPOTENCY_TTL = 86400  # 24 hours


def idempotency_key_required(view_func: Callable[..., Any]) -> Callable[..., Any]:
    """
    Decorator that requires an Idempotency-Key header for POST requests.

    A retried checkout with the same key gets the first response back
    instead of placing a second order. Keys are scoped to the request path,
    so two restaurants never share one. Only successful responses are
    stored; a rejected order can be corrected and resubmitted with the
    same key.

    Usage:
        @idempotency_key_required
        def create_order(request, slug):
            ...
    """

    @wraps(view_func)
    def wrapper(request: HttpRequest, *args: Any, **kwargs: Any) -> Any:
        key = request.headers.get("Idempotency-Key", "").strip()

        if not key:
            return json_response(
                {"error": "Idempotency-Key header is required"},
                status=400,
            )

        cache_key = f"idempotency:{request.path}:{key}"
        cached = cache.get(cache_key)

        if cached is not None:
            logger.info("Replaying response for idempotency key %s on %s", key, request.path)
            return json_response(cached["data"], status=cached["status"])

        response: JsonResponse = view_func(request, *args, **kwargs)

        if response.status_code < 400:
            cache.set(
                cache_key,
                {
                    "data": json.loads(response.content),
                    "status": response.status_code,
                },
                timeout=IDEMPOTENCY_TTL,
            )

        return response

    return wrapper
