"""
Core models - Restaurants (tenants) and their staff.

Every menu, schema and order row belongs to one Client through
ClientScopedModel.
"""

from django.contrib.auth.models import AbstractUser
from django.db import models

from .managers import ClientScopedManager


class Client(models.Model):
    """
    Tenant - one restaurant.

    The slug appears in every storefront API URL.
    """

    slug = models.SlugField(unique=True, help_text="URL-safe identifier")
    name = models.CharField(max_length=200)
    email = models.EmailField()
    phone = models.CharField(max_length=20, blank=True)
    address = models.TextField(blank=True)

    storefront_url = models.URLField(blank=True, help_text="Public ordering site")

    # Status
    is_active = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["name"]

    def __str__(self) -> str:
        return self.name


class User(AbstractUser):
    """
    Dashboard user.

    Staff belong to one Client; superusers to none. Read-only users can
    browse customization schemas but not change them.
    """

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        null=True,
        blank=True,
        related_name="users",
        help_text="Null for superusers",
    )

    class Role(models.TextChoices):
        OWNER = "owner", "Owner"
        STAFF = "staff", "Staff"
        READONLY = "readonly", "Read Only"

    role = models.CharField(
        max_length=20,
        choices=Role.choices,
        default=Role.STAFF,
    )

    class Meta:
        ordering = ["username"]

    def __str__(self) -> str:
        if self.client:
            return f"{self.username} ({self.client.slug})"
        return self.username

    @property
    def can_edit_menu(self) -> bool:
        """Owners and staff may change menu items and their schemas."""
        return self.role != self.Role.READONLY


class ClientScopedModel(models.Model):
    """
    Abstract base for all tenant-scoped models.

    Provides:
    - Automatic client FK
    - ClientScopedManager for filtered queries
    - Created/updated timestamps
    """

    client = models.ForeignKey(
        Client,
        on_delete=models.CASCADE,
        related_name="%(class)ss",  # e.g., client.menuitems, client.orders
    )
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    objects = ClientScopedManager()

    class Meta:
        abstract = True
