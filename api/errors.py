"""Global exception handlers for FastAPI."""

import logging

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from core.exceptions import SettlementError

logger = logging.getLogger(__name__)


def _json(status_code: int, code: str, message: str, request: Request) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=error_response(code, message, request).model_dump(mode="json"),
    )


def register_error_handlers(app: FastAPI) -> None:
    """Register global exception handlers on the app."""

    @app.exception_handler(SettlementError)
    async def settlement_error_handler(request: Request, exc: SettlementError):
        # The whole calculation failed; never fall back to partial totals
        logger.warning("Cannot compute totals (%s): %s", type(exc).__name__, exc)
        return _json(422, ErrorCodes.CANNOT_COMPUTE_TOTALS, f"Cannot compute totals: {exc}", request)

    @app.exception_handler(ValueError)
    async def value_error_handler(request: Request, exc: ValueError):
        message = str(exc)
        if "not found" in message.lower():
            return _json(404, ErrorCodes.NOT_FOUND, message, request)
        return _json(400, ErrorCodes.INVALID_REQUEST, message, request)

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(request: Request, exc: RequestValidationError):
        return _json(422, ErrorCodes.VALIDATION_ERROR, str(exc.errors()), request)

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        logger.exception("Unhandled exception")
        return _json(500, ErrorCodes.INTERNAL_ERROR, "An internal error occurred", request)
