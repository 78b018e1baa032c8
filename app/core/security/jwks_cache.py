from __future__ import annotations

import logging
import threading
import time

import requests

logger = logging.getLogger(__name__)


class JwksFetchError(Exception):
    pass


class JwksCache:
    """
    Per-URI JWKS key cache.

    Keys are refreshed after `ttl_sec`. A `kid` missing from a fresh document
    triggers one forced refetch, which covers signing-key rotation.
    """

    def __init__(self, ttl_sec: int = 300, timeout_sec: int = 5) -> None:
        self.ttl_sec = max(int(ttl_sec), 0)
        self.timeout_sec = timeout_sec
        self._lock = threading.Lock()
        self._keys_by_uri: dict[str, dict[str, dict]] = {}
        self._fetched_at: dict[str, float] = {}

    def _fetch(self, jwks_uri: str) -> dict[str, dict]:
        try:
            resp = requests.get(jwks_uri, timeout=self.timeout_sec)
            resp.raise_for_status()
            payload = resp.json()
        except (requests.RequestException, ValueError) as exc:
            raise JwksFetchError(f"Unable to fetch JWKS from {jwks_uri}: {exc}") from exc

        keys = payload.get("keys") if isinstance(payload, dict) else None
        if not isinstance(keys, list):
            raise JwksFetchError(f"JWKS document at {jwks_uri} has no 'keys' list.")

        key_by_kid = {
            str(key["kid"]): key
            for key in keys
            if isinstance(key, dict) and key.get("kid")
        }
        logger.info("jwks_refreshed uri=%s key_count=%s", jwks_uri, len(key_by_kid))
        return key_by_kid

    def _is_fresh(self, jwks_uri: str) -> bool:
        fetched_at = self._fetched_at.get(jwks_uri)
        if fetched_at is None:
            return False
        return (time.monotonic() - fetched_at) < self.ttl_sec

    def _refresh(self, jwks_uri: str) -> dict[str, dict]:
        keys = self._fetch(jwks_uri)
        self._keys_by_uri[jwks_uri] = keys
        self._fetched_at[jwks_uri] = time.monotonic()
        return keys

    def get_key(self, jwks_uri: str, kid: str) -> dict | None:
        with self._lock:
            refreshed = False
            if not self._is_fresh(jwks_uri):
                self._refresh(jwks_uri)
                refreshed = True

            key = self._keys_by_uri.get(jwks_uri, {}).get(kid)
            if key is None and not refreshed:
                key = self._refresh(jwks_uri).get(kid)
            return key

    def clear(self) -> None:
        with self._lock:
            self._keys_by_uri.clear()
            self._fetched_at.clear()
