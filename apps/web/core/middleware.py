"""
Client middleware - attaches the current restaurant to request.
"""

from collections.abc import Callable
from typing import TYPE_CHECKING

from django.http import Http404, HttpRequest, HttpResponse

if TYPE_CHECKING:
    from .models import Client

DASHBOARD_PREFIX = "/dashboard/"


class ClientMiddleware:
    """
    Middleware that attaches the current client to the request.

    Client is determined by (in order):
    1. X-Client-ID header (for API calls)
    2. Subdomain (client.pizzeria.vn)
    3. User's assigned client (for dashboard)

    Storefront API views take the client from the URL slug instead and
    ignore request.client. A logged-in dashboard user without a client
    gets a 404; anonymous users fall through to login_required.
    """

    def __init__(self, get_response: Callable[[HttpRequest], HttpResponse]) -> None:
        self.get_response = get_response

    def __call__(self, request: HttpRequest) -> HttpResponse:
        # Skip for admin
        if request.path.startswith("/admin/"):
            return self.get_response(request)

        client = self._get_client(request)
        if (
            client is None
            and request.path.startswith(DASHBOARD_PREFIX)
            and request.user.is_authenticated
        ):
            raise Http404("Client not found")

        request.client = client  # type: ignore[attr-defined]
        return self.get_response(request)

    def _get_client(self, request: HttpRequest) -> "Client | None":
        """Resolve client from request."""
        # Lazy import to avoid circular dependency
        from .models import Client

        # 1. Header
        client_slug = request.headers.get("X-Client-ID")
        if client_slug:
            return Client.objects.filter(slug=client_slug, is_active=True).first()

        # 2. Subdomain
        host = request.get_host().split(":")[0]  # Remove port
        if host.count(".") >= 2:
            subdomain = host.split(".")[0]
            client = Client.objects.filter(slug=subdomain, is_active=True).first()
            if client is not None:
                return client

        # 3. User's client
        if request.user.is_authenticated:
            return getattr(request.user, "client", None)

        return None
