from __future__ import annotations

import json

import jwt
from jwt.algorithms import RSAAlgorithm

from app.core.security.jwks_cache import JwksCache, JwksFetchError


class AuthTokenValidationError(Exception):
    pass


class ClerkJWTVerifier:
    """
    Verifies Clerk session tokens (RS256, keys from the instance JWKS).

    Clerk session tokens carry no `aud`; the origin that requested the token is
    in `azp` and is checked against `authorized_parties` when configured.
    """

    def __init__(
        self,
        *,
        issuer: str,
        jwks_uri: str,
        algorithms: list[str],
        jwks_cache: JwksCache,
        leeway_sec: int = 60,
        authorized_parties: list[str] | None = None,
    ) -> None:
        self.issuer = (issuer or "").strip()
        self.jwks_uri = (jwks_uri or "").strip()
        self.algorithms = algorithms or ["RS256"]
        self.jwks_cache = jwks_cache
        self.leeway_sec = leeway_sec
        self.authorized_parties = [p for p in (authorized_parties or []) if p]

    def _signing_key(self, token: str):
        try:
            header = jwt.get_unverified_header(token)
        except jwt.InvalidTokenError as exc:
            raise AuthTokenValidationError("Malformed token header.") from exc

        alg = str(header.get("alg") or "")
        if alg not in self.algorithms:
            raise AuthTokenValidationError(f"Unsupported token algorithm: {alg or '-'}.")

        kid = header.get("kid")
        if not kid:
            raise AuthTokenValidationError("Token header has no 'kid'.")
        if not self.jwks_uri:
            raise AuthTokenValidationError("JWKS URI is not configured.")

        try:
            jwk = self.jwks_cache.get_key(self.jwks_uri, str(kid))
        except JwksFetchError as exc:
            raise AuthTokenValidationError(str(exc)) from exc
        if jwk is None:
            raise AuthTokenValidationError("Signing key not found for token.")
        return RSAAlgorithm.from_jwk(json.dumps(jwk))

    def verify(self, token: str) -> dict:
        key = self._signing_key(token)
        options = {
            "require": ["exp", "iat", "sub"],
            "verify_aud": False,
            "verify_iss": bool(self.issuer),
        }
        try:
            claims = jwt.decode(
                token,
                key=key,
                algorithms=self.algorithms,
                issuer=self.issuer or None,
                leeway=self.leeway_sec,
                options=options,
            )
        except jwt.ExpiredSignatureError as exc:
            raise AuthTokenValidationError("Token has expired.") from exc
        except jwt.ImmatureSignatureError as exc:
            raise AuthTokenValidationError("Token is not yet valid.") from exc
        except jwt.InvalidIssuerError as exc:
            raise AuthTokenValidationError("Invalid token issuer.") from exc
        except jwt.InvalidTokenError as exc:
            raise AuthTokenValidationError(f"Invalid token: {exc}") from exc

        if self.authorized_parties:
            azp = claims.get("azp")
            if azp and azp not in self.authorized_parties:
                raise AuthTokenValidationError(f"Unauthorized party: {azp}.")
        return claims
