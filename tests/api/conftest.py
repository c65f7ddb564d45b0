"""API test fixtures: the full app over a mocked PostgresClient."""

from unittest.mock import Mock

import pytest
from starlette.testclient import TestClient

from api.app import create_app
from clients.postgres_client import PostgresClient
from core.services.invoice_service import InvoiceService
from factories import TEST_USER_ID

TEST_TOKEN = "test-token"


def resolve_test_user(request):
    """Stand-in for the auth provider: one bearer token, one user."""
    if request.headers.get("Authorization") == f"Bearer {TEST_TOKEN}":
        return TEST_USER_ID
    return None


# =============================================================================
# SERVICE FIXTURES
# =============================================================================


@pytest.fixture
def db():
    return Mock(spec=PostgresClient)


@pytest.fixture
def invoice_service(db):
    return InvoiceService(db)


@pytest.fixture
def services(invoice_service):
    return {"invoice": invoice_service}


# =============================================================================
# APP & CLIENT FIXTURES
# =============================================================================


@pytest.fixture
def app(services):
    return create_app(services, resolve_test_user)


@pytest.fixture
def client(app):
    """Authenticated test client."""
    c = TestClient(app, raise_server_exceptions=False)
    c.headers["Authorization"] = f"Bearer {TEST_TOKEN}"
    return c


@pytest.fixture
def unauthed_client(app):
    """Unauthenticated test client (no bearer token)."""
    return TestClient(app, raise_server_exceptions=False)
