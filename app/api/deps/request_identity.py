from __future__ import annotations

from functools import lru_cache
import logging

from fastapi import HTTPException, Request

from app.core.config import csv_values, settings
from app.core.security.clerk_jwt_verifier import (
    AuthTokenValidationError,
    ClerkJWTVerifier,
)
from app.core.security.jwks_cache import JwksCache
from app.core.security.session_tokens import SessionTokenError, decode_session_token
from app.schemas.request_identity import RequestIdentity

logger = logging.getLogger(__name__)


def _normalized_auth_mode() -> str:
    raw = (settings.AUTH_MODE or "legacy_header").strip().lower()
    if raw in {"legacy_header", "dual", "jwt_only"}:
        return raw
    return "legacy_header"


def _clerk_issuer() -> str:
    return (settings.CLERK_ISSUER or "").strip().rstrip("/")


def _clerk_jwks_uri() -> str:
    if settings.CLERK_JWKS_URI:
        return settings.CLERK_JWKS_URI.strip()
    issuer = _clerk_issuer()
    if not issuer:
        return ""
    return f"{issuer}/.well-known/jwks.json"


@lru_cache(maxsize=1)
def _get_verifier() -> ClerkJWTVerifier:
    algorithms = [token.upper() for token in csv_values(settings.AUTH_JWT_ALGORITHMS)]
    return ClerkJWTVerifier(
        issuer=_clerk_issuer(),
        jwks_uri=_clerk_jwks_uri(),
        algorithms=algorithms or ["RS256"],
        jwks_cache=JwksCache(
            ttl_sec=settings.AUTH_JWKS_CACHE_TTL_SEC,
            timeout_sec=settings.AUTH_JWKS_TIMEOUT_SEC,
        ),
        leeway_sec=settings.AUTH_JWT_CLOCK_SKEW_SEC,
        authorized_parties=csv_values(settings.CLERK_AUTHORIZED_PARTIES),
    )


def _extract_bearer_token(request: Request) -> str | None:
    header = request.headers.get("Authorization") or ""
    prefix = "Bearer "
    if not header.startswith(prefix):
        return None
    token = header[len(prefix) :].strip()
    return token or None


def _identity_from_legacy_header(request: Request) -> RequestIdentity:
    email = (
        request.headers.get("X-User-Email")
        or request.headers.get("X-User")
        or "system@local"
    )
    return RequestIdentity(
        subject=None,
        email=(email or "").strip().lower() or None,
        auth_source="legacy_header",
        claims={},
    )


def _identity_from_session_cookie(request: Request) -> RequestIdentity | None:
    token = request.cookies.get(settings.SESSION_COOKIE_NAME)
    if not token:
        return None
    try:
        claims = decode_session_token(token)
    except SessionTokenError as exc:
        logger.info("session_cookie_rejected reason=%s", exc)
        return None
    return RequestIdentity(
        subject=str(claims["sub"]),
        email=None,
        username=claims.get("username"),
        auth_source="session",
        claims=claims,
        user_id=claims["user_id"],
    )


def _extract_email_from_claims(claims: dict) -> str | None:
    for key in ("email", "primary_email", "email_address", "username"):
        value = claims.get(key)
        if value is None:
            continue
        text = str(value).strip().lower()
        if text:
            return text
    return None


def _identity_from_token(token: str) -> RequestIdentity:
    try:
        claims = _get_verifier().verify(token)
    except AuthTokenValidationError as exc:
        raise HTTPException(status_code=401, detail=str(exc)) from exc

    subject = claims.get("sub")
    subject_text = str(subject).strip() if subject is not None else None
    email = _extract_email_from_claims(claims)
    if not email:
        # Clerk only adds email when the session token template includes it.
        logger.warning(
            "jwt_identity_email_missing subject=%s claim_keys=%s",
            subject_text or "-",
            sorted(str(k) for k in claims.keys()),
        )
    return RequestIdentity(
        subject=subject_text or None,
        email=email,
        auth_source="jwt",
        claims=claims,
    )


def resolve_request_identity(request: Request) -> RequestIdentity:
    token = _extract_bearer_token(request)
    mode = _normalized_auth_mode()

    if mode != "legacy_header" and token:
        return _identity_from_token(token)

    session_identity = _identity_from_session_cookie(request)
    if session_identity is not None:
        return session_identity

    if mode == "jwt_only":
        raise HTTPException(status_code=401, detail="Missing Bearer access token.")

    # legacy_header, or dual mode without a bearer token.
    return _identity_from_legacy_header(request)


def get_request_identity(request: Request) -> RequestIdentity:
    return resolve_request_identity(request)


def require_identity(request: Request) -> RequestIdentity:
    """
    Dependency for routes that record who made a change.

    In legacy_header mode this always succeeds (falling back to system@local);
    in jwt_only mode a missing or invalid credential is a 401.
    """
    return resolve_request_identity(request)


def get_request_email(request: Request) -> str:
    identity = resolve_request_identity(request)
    return identity.email or identity.username or "system@local"
