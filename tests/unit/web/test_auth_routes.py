"""Tests for the session HTTP endpoints."""

from unittest.mock import patch

import pytest
from fastapi.testclient import TestClient
from structlog.testing import capture_logs

from sessionkeeper.app import App
from sessionkeeper.config import Config
from sessionkeeper.web.server import create_fastapi_app

USER_HEADER = {"X-User-Id": "user-1"}


@pytest.fixture
def config():
    """Plain-HTTP friendly config so the test client keeps the cookie."""
    return Config(cookie_secure=False, sweep_interval_seconds=0, session_cookie_name="sid")


@pytest.fixture
def app_instance(config):
    return App(config)


@pytest.fixture
def client(app_instance, config):
    with TestClient(create_fastapi_app(app_instance, config)) as test_client:
        yield test_client


class TestHealth:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "healthy", "active_sessions": 0}

    def test_health_reports_active_sessions(self, client):
        """Test that the health check counts stored sessions."""
        client.post("/api/v1/auth/session", headers=USER_HEADER)
        assert client.get("/health").json()["active_sessions"] == 1


class TestIssueOrRenew:
    """Tests for POST /api/v1/auth/session."""

    def test_missing_user_header_is_rejected(self, client):
        """Test that requests without an upstream user are refused."""
        response = client.post("/api/v1/auth/session")

        assert response.status_code == 401
        assert response.json() == {"message": "Authentication required", "type": "authentication_error"}

    def test_blank_user_header_is_rejected(self, client):
        response = client.post("/api/v1/auth/session", headers={"X-User-Id": "  "})
        assert response.status_code == 401

    def test_issues_session_and_sets_cookie(self, client, app_instance):
        """Test that a new session is returned and stored in a hardened cookie."""
        response = client.post("/api/v1/auth/session", headers=USER_HEADER)

        assert response.status_code == 200
        body = response.json()
        assert len(body["token"]) == 64
        assert "expires" in body

        set_cookie = response.headers["set-cookie"].lower()
        assert set_cookie.startswith(f"sid={body['token']}")
        assert "httponly" in set_cookie
        assert "samesite=strict" in set_cookie
        assert "expires=" in set_cookie
        assert app_instance.active_session_count() == 1

    def test_cookie_token_is_reused(self, client, app_instance):
        """Test that a second request with the cookie keeps the same session."""
        first = client.post("/api/v1/auth/session", headers=USER_HEADER).json()
        second = client.post("/api/v1/auth/session", headers=USER_HEADER).json()

        assert second == first
        assert app_instance.active_session_count() == 1

    def test_bearer_token_is_preferred(self, client):
        """Test that the Authorization header wins over the cookie."""
        first = client.post("/api/v1/auth/session", headers=USER_HEADER).json()
        client.cookies.set("sid", "stale-cookie-token")

        response = client.post(
            "/api/v1/auth/session", headers={**USER_HEADER, "Authorization": f"Bearer {first['token']}"}
        )

        assert response.json()["token"] == first["token"]

    def test_other_users_token_gets_fresh_session(self, client):
        """Test that a token presented for a different user is replaced."""
        first = client.post("/api/v1/auth/session", headers=USER_HEADER).json()
        second = client.post("/api/v1/auth/session", headers={"X-User-Id": "user-2"}).json()

        assert second["token"] != first["token"]

    def test_custom_user_header(self):
        """Test that the upstream header name is configurable."""
        config = Config(cookie_secure=False, sweep_interval_seconds=0, user_id_header="X-Remote-User")
        with TestClient(create_fastapi_app(App(config), config)) as client:
            assert client.post("/api/v1/auth/session", headers=USER_HEADER).status_code == 401
            assert client.post("/api/v1/auth/session", headers={"X-Remote-User": "u"}).status_code == 200

    def test_random_source_failure_returns_500(self, client):
        """Test that token generation failures surface as a generic server error."""
        with (
            patch("sessionkeeper.core.modules.session.service.secrets.token_hex", side_effect=OSError),
            capture_logs() as logs,
        ):
            response = client.post("/api/v1/auth/session", headers=USER_HEADER)

        assert response.status_code == 500
        assert response.json()["type"] == "internal_server_error"
        assert [entry["log_level"] for entry in logs if entry["event"] == "token_generation_failed"] == ["critical"]


class TestLogout:
    """Tests for POST /api/v1/auth/logout."""

    def test_logout_revokes_and_clears_cookie(self, client, app_instance):
        """Test that logout removes the session and the cookie."""
        first = client.post("/api/v1/auth/session", headers=USER_HEADER).json()

        response = client.post("/api/v1/auth/logout")

        assert response.status_code == 204
        assert app_instance.active_session_count() == 0
        assert "sid" not in client.cookies

        again = client.post(
            "/api/v1/auth/session", headers={**USER_HEADER, "Authorization": f"Bearer {first['token']}"}
        ).json()
        assert again["token"] != first["token"]

    def test_logout_without_session(self, client):
        """Test that logout is idempotent."""
        assert client.post("/api/v1/auth/logout").status_code == 204
        assert client.post("/api/v1/auth/logout").status_code == 204


class TestLifespan:
    def test_sessions_are_dropped_on_shutdown(self, config):
        """Test that the volatile store is emptied when the app stops."""
        app_instance = App(config)
        with TestClient(create_fastapi_app(app_instance, config)) as client:
            client.post("/api/v1/auth/session", headers=USER_HEADER)
            assert app_instance.active_session_count() == 1
        assert app_instance.active_session_count() == 0
