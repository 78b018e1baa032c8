from __future__ import annotations

from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient

from app.api.deps import request_identity as request_identity_module
from app.core.config import settings
from app.core.security.clerk_jwt_verifier import AuthTokenValidationError
from app.core.security.session_tokens import create_session_token
from app.schemas.request_identity import RequestIdentity


class _FakeVerifier:
    def verify(self, token: str):
        if token == "ok-token":
            return {
                "sub": "user_2abc",
                "email": "JWT@lma.example.com",
                "iss": "https://clerk.lma.example.com",
                "iat": 1,
                "exp": 9999999999,
            }
        if token == "ok-token-no-email":
            return {
                "sub": "user_2def",
                "iss": "https://clerk.lma.example.com",
                "iat": 1,
                "exp": 9999999999,
            }
        raise AuthTokenValidationError("Invalid token: bad signature")


def _build_app() -> FastAPI:
    app = FastAPI()

    @app.get("/whoami")
    def whoami(identity: RequestIdentity = Depends(request_identity_module.get_request_identity)):
        return {
            "email": identity.email,
            "source": identity.auth_source,
            "sub": identity.subject,
            "actor": identity.actor,
            "user_id": identity.user_id,
        }

    return app


def test_legacy_header_mode_uses_x_user_email(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    with TestClient(_build_app()) as client:
        r = client.get("/whoami", headers={"X-User-Email": "Legacy@LMA.example.com"})
        assert r.status_code == 200
        payload = r.json()
        assert payload["email"] == "legacy@lma.example.com"
        assert payload["source"] == "legacy_header"


def test_legacy_header_mode_defaults_to_system(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    with TestClient(_build_app()) as client:
        r = client.get("/whoami")
        assert r.status_code == 200
        assert r.json()["actor"] == "system@local"


def test_legacy_header_mode_ignores_bearer_token(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "legacy_header")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    with TestClient(_build_app()) as client:
        r = client.get(
            "/whoami",
            headers={
                "Authorization": "Bearer ok-token",
                "X-User-Email": "legacy@lma.example.com",
            },
        )
        assert r.status_code == 200
        assert r.json()["source"] == "legacy_header"


def test_jwt_only_mode_requires_bearer(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    with TestClient(_build_app()) as client:
        r = client.get("/whoami", headers={"X-User-Email": "legacy@lma.example.com"})
        assert r.status_code == 401
        assert r.json()["detail"] == "Missing Bearer access token."


def test_jwt_only_mode_rejects_invalid_token(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    with TestClient(_build_app()) as client:
        r = client.get("/whoami", headers={"Authorization": "Bearer forged"})
        assert r.status_code == 401
        assert "bad signature" in r.json()["detail"]


def test_dual_mode_prefers_bearer(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    with TestClient(_build_app()) as client:
        r = client.get(
            "/whoami",
            headers={
                "Authorization": "Bearer ok-token",
                "X-User-Email": "legacy@lma.example.com",
            },
        )
        assert r.status_code == 200
        payload = r.json()
        assert payload["email"] == "jwt@lma.example.com"
        assert payload["source"] == "jwt"
        assert payload["sub"] == "user_2abc"


def test_dual_mode_falls_back_to_legacy_header(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "dual")
    with TestClient(_build_app()) as client:
        r = client.get("/whoami", headers={"X-User-Email": "legacy@lma.example.com"})
        assert r.status_code == 200
        assert r.json()["source"] == "legacy_header"


def test_token_without_email_uses_subject_as_actor(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    monkeypatch.setattr(request_identity_module, "_get_verifier", lambda: _FakeVerifier())
    with TestClient(_build_app()) as client:
        r = client.get("/whoami", headers={"Authorization": "Bearer ok-token-no-email"})
        assert r.status_code == 200
        payload = r.json()
        assert payload["email"] is None
        assert payload["actor"] == "user_2def"


def test_session_cookie_is_accepted_in_jwt_only_mode(monkeypatch):
    monkeypatch.setattr(settings, "AUTH_MODE", "jwt_only")
    token = create_session_token(42, "admin")
    with TestClient(_build_app(), cookies={settings.SESSION_COOKIE_NAME: token}) as client:
        r = client.get("/whoami")
        assert r.status_code == 200
        payload = r.json()
        assert payload["source"] == "session"
        assert payload["user_id"] == 42
        assert payload["actor"] == "admin"
