"""
Pytest configuration for Django app tests.
"""

import pytest

from apps.web.core.models import Client, User


@pytest.fixture
def client_tenant() -> Client:
    """Create a test client (tenant)."""
    return Client.objects.create(
        slug="test-client",
        name="Test Pizzeria",
        email="test@example.com",
    )


@pytest.fixture
def user(client_tenant: Client) -> User:
    """Create a staff user associated with the client tenant."""
    return User.objects.create_user(
        username="testuser",
        email="testuser@example.com",
        password="testpass123",
        client=client_tenant,
    )
