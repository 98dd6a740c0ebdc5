"""Tests for the authorization gate and the public routes."""

import pytest

pytestmark = pytest.mark.integration


class TestPublicRoutes:
    def test_health(self, client):
        response = client.get("/health")

        assert response.status_code == 200
        assert response.json()["status"] == "ok"

    def test_register_duplicate(self, client):
        body = {"login": "a@b.com", "masterpassword": "secret123"}
        assert client.post("/api/user/register", json=body).status_code == 200

        assert client.post("/api/user/register", json=body).status_code == 409

    def test_register_invalid_login(self, client):
        body = {"login": "not-an-email", "masterpassword": "secret123"}

        assert client.post("/api/user/register", json=body).status_code == 400

    def test_login_sets_bearer_header(self, login_as):
        headers = login_as()

        assert headers["Authorization"].startswith("Bearer ")

    def test_login_wrong_password(self, client, login_as):
        login_as()

        response = client.post("/api/user/login", json={"login": "a@b.com", "pwd": "wrong"})

        assert response.status_code == 401
        assert "Authorization" not in response.headers

    def test_password_keeps_surrounding_spaces(self, client, login_as):
        headers = login_as("pad@example.com", "  pad secret  ")

        assert client.get("/api/user/passwords", headers=headers).status_code == 200

        trimmed = {"login": "pad@example.com", "pwd": "pad secret"}
        assert client.post("/api/user/login", json=trimmed).status_code == 401

    def test_login_is_trimmed_on_both_sides(self, client):
        body = {"login": "  space@example.com ", "masterpassword": "secret123"}
        assert client.post("/api/user/register", json=body).json()["login"] == "space@example.com"

        response = client.post(
            "/api/user/login", json={"login": " space@example.com  ", "pwd": "secret123"}
        )

        assert response.status_code == 200
        assert response.json() == {"login": "space@example.com"}


class TestGate:
    @pytest.mark.parametrize(
        "value",
        [None, "", "Bearer", "Token abc", "bearer abc", "Bearer a b", "Bearer not-a-jwt"],
    )
    def test_rejects_missing_or_malformed(self, client, value):
        headers = {} if value is None else {"Authorization": value}

        response = client.get("/api/user/passwords", headers=headers)

        assert response.status_code == 401

    def test_accepts_current_token(self, client, auth_headers):
        assert client.get("/api/user/passwords", headers=auth_headers).status_code == 200

    def test_superseded_token_rejected(self, client, login_as):
        first = login_as()
        response = client.post("/api/user/login", json={"login": "a@b.com", "pwd": "secret123"})
        second = {"Authorization": response.headers["Authorization"]}

        assert client.get("/api/user/passwords", headers=first).status_code == 401
        assert client.get("/api/user/passwords", headers=second).status_code == 200

    def test_error_body_and_correlation_id(self, client):
        response = client.get("/api/user/passwords", headers={"X-Correlation-Id": "corr-42"})

        assert response.status_code == 401
        assert response.headers["X-Correlation-Id"] == "corr-42"
        error = response.json()["error"]
        assert error["code"] == "4000"
        assert error["correlation_id"] == "corr-42"
