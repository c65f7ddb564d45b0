"""Request-scoped middleware: request IDs and the RLS user context."""

from typing import Callable
from uuid import UUID, uuid4

from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse

from api.base import error_response, ErrorCodes
from utils.user_context import set_current_user_id, clear_current_user_id

# Maps a request to the authenticated user, or None. Session handling lives
# with the auth provider; this middleware only consumes its answer.
UserResolver = Callable[[Request], UUID | None]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Assigns a unique request ID to every request."""

    async def dispatch(self, request: Request, call_next):
        request_id = str(uuid4())
        request.state.request_id = request_id
        response = await call_next(request)
        response.headers["X-Request-ID"] = request_id
        return response


class UserContextMiddleware(BaseHTTPMiddleware):
    """
    Sets the user context that PostgresClient uses for RLS.

    For protected routes:
    1. Asks the injected resolver who the caller is
    2. Returns 401 if nobody
    3. Sets user_id in request.state and user context
    4. Clears context after the request completes

    Public paths bypass this entirely.
    """

    PUBLIC_PATHS = [
        "/health",
        "/docs",
        "/openapi.json",
    ]

    def __init__(self, app, resolve_user: UserResolver):
        super().__init__(app)
        self._resolve_user = resolve_user

    def _is_public_path(self, path: str) -> bool:
        return any(path == public or path.startswith(public + "/") for public in self.PUBLIC_PATHS)

    async def dispatch(self, request: Request, call_next):
        if self._is_public_path(request.url.path):
            return await call_next(request)

        user_id = self._resolve_user(request)
        if user_id is None:
            return JSONResponse(
                status_code=401,
                content=error_response(
                    ErrorCodes.NOT_AUTHENTICATED,
                    "Authentication required",
                    request,
                ).model_dump(mode="json"),
            )

        set_current_user_id(user_id)
        request.state.user_id = user_id

        try:
            return await call_next(request)
        finally:
            clear_current_user_id()
