"""Tests for the admin permission gate."""

from datetime import timedelta

import jwt
import pytest

from promotions.core.auth import DISCOUNTS_VIEW, create_access_token
from promotions.core.config import settings

BASE = "/v1/discounts/"


class TestPermissionGate:
    def test_missing_header(self, client):
        response = client.get(BASE)
        assert response.status_code == 401
        assert response.json()["detail"] == "Authentication required"

    @pytest.mark.parametrize("header", ["Token abc", "Bearer ", "Basic dXNlcjpwYXNz"])
    def test_malformed_header(self, client, header):
        assert client.get(BASE, headers={"Authorization": header}).status_code == 401

    def test_expired_token(self, client):
        token = create_access_token("admin-1", [DISCOUNTS_VIEW], expires_in=timedelta(seconds=-5))
        response = client.get(BASE, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Token has expired"

    def test_wrong_secret(self, client):
        token = jwt.encode(
            {"sub": "admin-1", "permissions": [DISCOUNTS_VIEW]},
            "not-the-secret",
            algorithm=settings.AUTH_JWT_ALGORITHM,
        )
        response = client.get(BASE, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 401
        assert response.json()["detail"] == "Invalid token"

    def test_missing_subject(self, client):
        token = jwt.encode(
            {"permissions": [DISCOUNTS_VIEW]},
            settings.AUTH_JWT_SECRET,
            algorithm=settings.AUTH_JWT_ALGORITHM,
        )
        assert client.get(BASE, headers={"Authorization": f"Bearer {token}"}).status_code == 401

    def test_viewer_can_read(self, client, viewer_headers):
        assert client.get(BASE, headers=viewer_headers).status_code == 200
        assert client.get(f"{BASE}metrics", headers=viewer_headers).status_code == 200

    def test_viewer_cannot_write(self, client, viewer_headers):
        response = client.post(
            BASE, json={"name": "x", "type": "percentage", "value": "5"}, headers=viewer_headers
        )
        assert response.status_code == 403
        assert response.json()["detail"] == "Missing permission: discounts.manage"

    def test_no_permissions(self, client):
        token = create_access_token("nobody", [])
        response = client.get(BASE, headers={"Authorization": f"Bearer {token}"})
        assert response.status_code == 403


def test_token_claims():
    token = create_access_token("admin-7", ["b", "a", "a"])
    payload = jwt.decode(
        token, settings.AUTH_JWT_SECRET, algorithms=[settings.AUTH_JWT_ALGORITHM]
    )
    assert payload["sub"] == "admin-7"
    assert payload["permissions"] == ["a", "b"]
    assert "exp" in payload
