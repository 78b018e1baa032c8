from __future__ import annotations

from datetime import datetime, timedelta, timezone

import jwt

from app.core.config import settings

SESSION_ALGORITHM = "HS256"


class SessionTokenError(Exception):
    pass


def create_session_token(user_id: int, username: str) -> str:
    now = datetime.now(timezone.utc)
    payload = {
        "sub": str(user_id),
        "username": username,
        "iat": now,
        "exp": now + timedelta(seconds=settings.SESSION_TOKEN_TTL_SECONDS),
    }
    return jwt.encode(payload, settings.SESSION_SECRET_KEY, algorithm=SESSION_ALGORITHM)


def decode_session_token(token: str) -> dict:
    try:
        claims = jwt.decode(
            token,
            settings.SESSION_SECRET_KEY,
            algorithms=[SESSION_ALGORITHM],
            options={"require": ["exp", "sub"]},
        )
    except jwt.InvalidTokenError as exc:
        raise SessionTokenError(str(exc)) from exc

    try:
        claims["user_id"] = int(claims["sub"])
    except (TypeError, ValueError) as exc:
        raise SessionTokenError("Session subject is not a user id.") from exc
    return claims
