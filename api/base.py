"""Unified API response envelope and error codes."""

from typing import Any
from datetime import datetime
from uuid import uuid4

from pydantic import BaseModel, Field
from starlette.requests import Request

from utils.timezone import now_utc


class APIError(BaseModel):
    """Error details in API response."""

    code: str = Field(..., description="Machine-readable error code")
    message: str = Field(..., description="Human-readable error message")


class APIMeta(BaseModel):
    """Metadata included in every API response."""

    timestamp: datetime = Field(..., description="Response timestamp (UTC)")
    request_id: str = Field(..., description="Matches the X-Request-ID response header")


class APIResponse(BaseModel):
    """
    Envelope for every API response.

    Exactly one of data / error is meaningful, as flagged by success.
    """

    success: bool
    data: Any | None = None
    error: APIError | None = None
    meta: APIMeta


def request_id_of(request: Request | None) -> str:
    """Request ID assigned by RequestIDMiddleware, or a fresh one outside a request."""
    if request is not None:
        request_id = getattr(request.state, "request_id", None)
        if request_id:
            return request_id
    return str(uuid4())


def _meta(request: Request | None) -> APIMeta:
    return APIMeta(timestamp=now_utc(), request_id=request_id_of(request))


def success_response(data: Any, request: Request | None = None) -> APIResponse:
    """Create a success response."""
    return APIResponse(success=True, data=data, error=None, meta=_meta(request))


def error_response(code: str, message: str, request: Request | None = None) -> APIResponse:
    """Create an error response."""
    return APIResponse(
        success=False,
        data=None,
        error=APIError(code=code, message=message),
        meta=_meta(request),
    )


class ErrorCodes:
    """
    Standard error codes for consistent error handling.

    Clients switch on these, never on the message text.
    """

    # Authentication
    NOT_AUTHENTICATED = "NOT_AUTHENTICATED"

    # Resource Errors
    NOT_FOUND = "NOT_FOUND"

    # Validation Errors
    VALIDATION_ERROR = "VALIDATION_ERROR"
    INVALID_REQUEST = "INVALID_REQUEST"

    # Totals & Settlement: show "cannot compute totals", never stale numbers
    CANNOT_COMPUTE_TOTALS = "CANNOT_COMPUTE_TOTALS"

    # Infrastructure
    INTERNAL_ERROR = "INTERNAL_ERROR"
