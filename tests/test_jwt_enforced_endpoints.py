from __future__ import annotations

import pytest

from app.api.deps import request_identity as request_identity_module
from app.core.config import settings
from app.core.security.clerk_jwt_verifier import AuthTokenValidationError
from app.core.security.session_tokens import create_session_token


class _FakeVerifier:
    def verify(self, token: str):
        if token == "good-token":
            return {
                "sub": "user_seed",
                "email": "seed@lma.example.com",
                "iss": "https://clerk.lma.example.com",
                "iat": 1,
                "exp": 9999999999,
            }
        raise AuthTokenValidationError("Invalid token: bad signature")


PROTECTED = ["/it-assets", "/laptops", "/radios"]


def test_health_is_open(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    r = client.get("/health")
    assert r.status_code == 200
    assert r.json() == {"status": "up"}


@pytest.mark.parametrize("path", PROTECTED)
def test_jwt_only_blocks_request_without_bearer(client, monkeypatch, path):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    request_identity_module._get_verifier.cache_clear()
    response = client.get(path, headers={"X-User-Email": "legacy@lma.example.com"})
    assert response.status_code == 401


@pytest.mark.parametrize("path", PROTECTED)
def test_jwt_only_allows_request_with_valid_bearer(client, monkeypatch, path):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    response = client.get(path, headers={"Authorization": "Bearer good-token"})
    assert response.status_code == 200
    assert isinstance(response.json(), list)


def test_jwt_only_rejects_bad_bearer(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    response = client.get("/it-assets", headers={"Authorization": "Bearer forged"})
    assert response.status_code == 401


def test_jwt_only_records_token_subject_as_author(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    r = client.post(
        "/docon/documents",
        json={
            "contract_code": "161",
            "document_type": "RFI",
            "discipline": "STR",
            "location": "07",
            "work_system": "21",
            "title": "Pier cap rebar clash",
            "pic": "Made",
            "date_received": "2025-05-02",
        },
        headers={"Authorization": "Bearer good-token"},
    )
    assert r.status_code == 201, r.text
    assert r.json()["created_by"] == "seed@lma.example.com"


def test_session_cookie_opens_protected_routes(client, monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    client.cookies.set(settings.SESSION_COOKIE_NAME, create_session_token(1, "admin"))
    assert client.get("/laptops").status_code == 200
