"""Tests for RequestIDMiddleware and UserContextMiddleware."""

import pytest
from uuid import UUID
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.testclient import TestClient

from api.middleware import RequestIDMiddleware, UserContextMiddleware
from factories import TEST_USER_ID
from utils.user_context import get_current_user_id


@pytest.fixture
def app():
    """Minimal FastAPI app with both middlewares."""
    app = FastAPI()
    app.add_middleware(
        UserContextMiddleware,
        resolve_user=lambda request: TEST_USER_ID if request.headers.get("X-User") == "yes" else None,
    )
    app.add_middleware(RequestIDMiddleware)

    @app.get("/test")
    async def test_endpoint(request: Request):
        return JSONResponse({
            "request_id": request.state.request_id,
            "user_id": str(request.state.user_id),
            "context_user_id": str(get_current_user_id()),
        })

    @app.get("/health")
    async def health():
        return JSONResponse({"ok": True})

    return app


@pytest.fixture
def client(app):
    return TestClient(app)


class TestRequestIDMiddleware:

    def test_response_has_request_id_header(self, client):
        response = client.get("/test", headers={"X-User": "yes"})

        assert "X-Request-ID" in response.headers
        UUID(response.headers["X-Request-ID"])

    def test_request_state_has_request_id(self, client):
        response = client.get("/test", headers={"X-User": "yes"})

        assert response.headers["X-Request-ID"] == response.json()["request_id"]

    def test_each_request_gets_unique_id(self, client):
        r1 = client.get("/test", headers={"X-User": "yes"})
        r2 = client.get("/test", headers={"X-User": "yes"})

        assert r1.headers["X-Request-ID"] != r2.headers["X-Request-ID"]

    def test_rejected_request_still_gets_id(self, client):
        response = client.get("/test")

        assert response.json()["meta"]["request_id"] == response.headers["X-Request-ID"]


class TestUserContextMiddleware:

    def test_unresolved_user_returns_401(self, client):
        response = client.get("/test")

        assert response.status_code == 401
        assert response.json()["error"]["code"] == "NOT_AUTHENTICATED"

    def test_sets_state_and_context(self, client):
        response = client.get("/test", headers={"X-User": "yes"})

        assert response.status_code == 200
        assert response.json()["user_id"] == str(TEST_USER_ID)
        assert response.json()["context_user_id"] == str(TEST_USER_ID)

    def test_context_cleared_after_request(self, client):
        client.get("/test", headers={"X-User": "yes"})

        with pytest.raises(RuntimeError):
            get_current_user_id()

    def test_public_path_skips_resolver(self, client):
        response = client.get("/health")

        assert response.status_code == 200

    def test_prefix_lookalike_is_not_public(self, client):
        response = client.get("/healthcheck")

        assert response.status_code == 401
