"""Integration tests for registration and JWT authentication."""

from __future__ import annotations

import pytest
from django.contrib.auth import get_user_model

pytestmark = pytest.mark.integration

User = get_user_model()

REGISTER_URL = "/api/v1/auth/register/"
TOKEN_URL = "/api/v1/auth/token/"
ME_URL = "/api/v1/auth/me/"


def _register(api_client, **overrides):
    payload = {"name": "Asha Verma", "email": "Asha@Example.com", "password": "Secret@123"}
    payload.update(overrides)
    return api_client.post(REGISTER_URL, payload, format="json")


class TestRegistration:
    def test_register_returns_user_and_tokens(self, api_client):
        response = _register(api_client)

        assert response.status_code == 201
        data = response.json()
        assert data["user"]["email"] == "asha@example.com"
        assert data["user"]["role"] == "USER"
        assert data["access"]
        assert data["refresh"]
        assert "password" not in data["user"]

    def test_duplicate_email_rejected(self, api_client):
        _register(api_client)
        response = _register(api_client, email="ASHA@example.com")

        assert response.status_code == 400
        assert response.json()["errors"][0]["code"] == "email_taken"
        assert User.objects.filter(email="asha@example.com").count() == 1

    def test_weak_password_rejected(self, api_client):
        response = _register(api_client, password="password")
        assert response.status_code == 400
        assert not User.objects.exists()

    def test_invalid_email_rejected(self, api_client):
        response = _register(api_client, email="not-an-email")
        assert response.status_code == 400


class TestLogin:
    def test_login_is_case_insensitive_on_email(self, api_client, user):
        response = api_client.post(
            TOKEN_URL, {"email": "SHOPPER@example.com", "password": "Shopper@123"}, format="json"
        )
        assert response.status_code == 200
        assert "access" in response.json()

    def test_wrong_password_is_401(self, api_client, user):
        response = api_client.post(
            TOKEN_URL, {"email": "shopper@example.com", "password": "nope"}, format="json"
        )
        assert response.status_code == 401

    def test_token_grants_access_to_me(self, api_client, user):
        token = api_client.post(
            TOKEN_URL, {"email": "shopper@example.com", "password": "Shopper@123"}, format="json"
        ).json()["access"]
        api_client.credentials(HTTP_AUTHORIZATION=f"Bearer {token}")

        response = api_client.get(ME_URL)

        assert response.status_code == 200
        assert response.json()["email"] == "shopper@example.com"


class TestProtectedEndpoints:
    """DRF endpoints require a valid JWT by default (Fail Closed)."""

    def test_health_is_public(self, client):
        assert client.get("/health").status_code == 200

    def test_no_token_returns_401(self, api_client):
        assert api_client.get(ME_URL).status_code == 401

    def test_invalid_token_returns_401(self, api_client):
        api_client.credentials(HTTP_AUTHORIZATION="Bearer invalid.token.here")
        assert api_client.get("/api/v1/orders/").status_code == 401

    def test_401_includes_www_authenticate_header(self, api_client):
        response = api_client.get("/api/v1/orders/")
        assert response.status_code == 401
        assert "Bearer" in response.get("WWW-Authenticate", "")
