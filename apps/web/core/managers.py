"""
Custom managers for multi-tenancy.

ClientScopedManager narrows querysets to one restaurant (Client).
"""

from typing import TYPE_CHECKING, Any, TypeVar

from django.db import models

if TYPE_CHECKING:
    from django.http import HttpRequest

    from .models import Client, ClientScopedModel

_T = TypeVar("_T", bound="ClientScopedModel")


class ClientScopedManager(models.Manager[_T]):
    """
    Manager that filters by client.

    Usage in staff views:
        schemas = CustomizationSchema.objects.for_client(request)

    Usage in storefront views and services, where the client comes from the URL:
        items = MenuItem.objects.for_tenant(client).filter(is_available=True)

    SECURITY: Never query tenant data without one of these.
    """

    def for_tenant(self, client: "Client") -> models.QuerySet[_T]:
        """Filter queryset to a single client."""
        return self.filter(client=client)

    def for_client(self, request: "HttpRequest") -> models.QuerySet[_T]:
        """
        Filter queryset by the client attached to the request.

        Args:
            request: HttpRequest with .client attribute (set by ClientMiddleware)

        Returns:
            QuerySet filtered to the request's client

        Raises:
            ValueError: If request has no client attached
        """
        client: Any = getattr(request, "client", None)
        if client is None:
            msg = "Request has no client attached. Is ClientMiddleware enabled?"
            raise ValueError(msg)
        return self.for_tenant(client)
