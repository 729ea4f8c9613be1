"""Tests for HTTP error mapping."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient

from teamtrack.core.auth.jwt import ExpiredTokenError, InvalidTokenError
from teamtrack.core.exceptions import (
    AccountLockedError,
    ApplicationError,
    AuthError,
    DomainError,
    NotFoundError,
    PermissionDeniedError,
    TeamtrackError,
)
from teamtrack.entrypoints.api.errors import install_exception_handlers, status_for


class TestStatusFor:
    """Test the error to status mapping."""

    @pytest.mark.parametrize(
        ("error", "status_code"),
        [
            (DomainError("x"), 409),
            (PermissionDeniedError("x"), 403),
            (NotFoundError("x"), 404),
            (AuthError("x"), 401),
            (InvalidTokenError("x"), 401),
            (ExpiredTokenError("x"), 401),
            (AccountLockedError("login:a@b.c"), 429),
            (ApplicationError("x"), 500),
            (TeamtrackError("x"), 500),
        ],
    )
    def test_mapping(self, error: TeamtrackError, status_code: int) -> None:
        """Each taxonomy error has its status code."""
        assert status_for(error) == status_code


class TestExceptionHandlers:
    """Test the installed FastAPI handlers."""

    @pytest.fixture
    def client(self) -> TestClient:
        app = FastAPI()
        install_exception_handlers(app)

        @app.get("/denied")
        async def denied() -> None:
            raise PermissionDeniedError("Insufficient permissions")

        @app.get("/locked")
        async def locked() -> None:
            raise AccountLockedError("login:a@b.c")

        @app.get("/broken")
        async def broken() -> None:
            raise ApplicationError("Failed to create task", cause=RuntimeError("db password leaked"))

        return TestClient(app)

    def test_permission_denied(self, client: TestClient) -> None:
        """Denials become 403 with the message."""
        response = client.get("/denied")

        assert response.status_code == 403
        assert response.json() == {
            "error": {"code": "PermissionDeniedError", "message": "Insufficient permissions"}
        }

    def test_locked(self, client: TestClient) -> None:
        """Lockouts become 429."""
        assert client.get("/locked").status_code == 429

    def test_application_error_hides_cause(self, client: TestClient) -> None:
        """Internal failures do not leak details."""
        response = client.get("/broken")

        assert response.status_code == 500
        assert "leaked" not in response.text
        assert response.json()["error"]["message"] == "Internal server error"
