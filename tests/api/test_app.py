"""Tests for the application factory and service wiring."""

from unittest.mock import patch

from starlette.testclient import TestClient

from api.app import build_services, create_app
from core.config import InvoicingConfig
from core.services.invoice_service import InvoiceService


class TestBuildServices:

    def test_database_url_from_vault(self):
        with patch("api.app.get_database_url", return_value="postgresql://vault/db") as get_url, \
                patch("api.app.PostgresClient") as postgres:
            services = build_services()

        get_url.assert_called_once()
        postgres.assert_called_once_with("postgresql://vault/db")
        assert isinstance(services["invoice"], InvoiceService)

    def test_explicit_url_skips_vault(self):
        with patch("api.app.get_database_url") as get_url, patch("api.app.PostgresClient") as postgres:
            build_services("postgresql://local/db")

        get_url.assert_not_called()
        postgres.assert_called_once_with("postgresql://local/db")

    def test_config_passed_to_service(self):
        config = InvoicingConfig(currency="GBP")

        with patch("api.app.PostgresClient"):
            services = build_services("postgresql://local/db", config)

        assert services["invoice"].config.currency == "GBP"


class TestCreateApp:

    def test_routes_mounted(self, app):
        paths = {route.path for route in app.routes}

        assert {"/health", "/api/data", "/api/actions", "/api/data/invoices/{invoice_id}/document"} <= paths

    def test_shutdown_closes_pool(self, services, db):
        app = create_app(services, lambda request: None)

        with TestClient(app) as client:
            client.get("/health")
            db.close.assert_not_called()

        db.close.assert_called_once()
