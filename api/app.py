"""FastAPI application factory."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from api.actions import create_actions_router
from api.base import success_response
from api.data import create_data_router
from api.errors import register_error_handlers
from api.middleware import RequestIDMiddleware, UserContextMiddleware, UserResolver
from clients.postgres_client import PostgresClient
from clients.vault_client import get_database_url
from core.config import InvoicingConfig
from core.engine import SettlementEngine
from core.services.invoice_service import InvoiceService

logger = logging.getLogger(__name__)


def build_services(
    database_url: str | None = None,
    config: InvoicingConfig | None = None,
) -> dict:
    """
    Wire the service graph.

    The database URL comes from Vault unless one is passed in.
    """
    postgres = PostgresClient(database_url or get_database_url())
    return {
        "invoice": InvoiceService(postgres, SettlementEngine(), config or InvoicingConfig()),
    }


def create_app(services: dict, resolve_user: UserResolver) -> FastAPI:
    """
    Build the invoicing API.

    Args:
        services: Output of build_services(), or test doubles with the same keys
        resolve_user: Maps a request to the authenticated user's UUID, or None
    """
    @asynccontextmanager
    async def lifespan(app: FastAPI):
        yield
        services["invoice"].postgres.close()
        logger.info("Invoicing API stopped, connection pool closed")

    app = FastAPI(title="Invoicing", lifespan=lifespan)

    # Last added runs first: request IDs are assigned before authentication
    app.add_middleware(UserContextMiddleware, resolve_user=resolve_user)
    app.add_middleware(RequestIDMiddleware)
    register_error_handlers(app)

    @app.get("/health")
    async def health(request: Request):
        return success_response({"status": "ok"}, request).model_dump(mode="json")

    app.include_router(create_data_router(services), prefix="/api")
    app.include_router(create_actions_router(services), prefix="/api")

    logger.info("Invoicing API created with services: %s", ", ".join(sorted(services)))
    return app
