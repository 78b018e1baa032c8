"""
Client for the Ruijie Cloud voucher API (managed Wi-Fi captive portal).

The upstream list endpoint has returned three shapes over time:
`{"voucherData": {"list": [...]}}`, `{"list": [...]}` and a bare array.
"""

from __future__ import annotations

import logging
from typing import Any

import requests

from app.core.config import settings

logger = logging.getLogger(__name__)

VOUCHER_STATUS_BY_CODE = {
    "1": "inactive",
    "2": "active",
    "3": "expired",
}


class RuijieApiError(Exception):
    def __init__(self, message: str, status_code: int = 502, details: Any = None) -> None:
        super().__init__(message)
        self.status_code = status_code
        self.details = details


def _access_token() -> str:
    token = (settings.RUIJIE_ACCESS_TOKEN or "").strip()
    if not token:
        raise RuijieApiError(
            "Access token not found. Please set RUIJIE_ACCESS_TOKEN in your environment variables.",
            status_code=500,
        )
    return token


def _voucher_url(action: str, list_id: str) -> str:
    base_url = settings.RUIJIE_BASE_URL.rstrip("/")
    return f"{base_url}/service/api/open/auth/voucher/{action}/{list_id}"


def _extract_voucher_list(body: Any) -> list[dict]:
    if isinstance(body, list):
        return body
    if isinstance(body, dict):
        nested = body.get("voucherData")
        if isinstance(nested, dict) and isinstance(nested.get("list"), list):
            return nested["list"]
        if isinstance(body.get("list"), list):
            return body["list"]
    logger.warning("ruijie_unexpected_payload type=%s", type(body).__name__)
    raise RuijieApiError(
        'Unexpected API response structure. The API did not return data with a "list" property.',
        status_code=502,
        details=body,
    )


def _text(value) -> str:
    return "" if value is None else str(value)


def normalize_voucher(raw: dict) -> dict:
    status = VOUCHER_STATUS_BY_CODE.get(str(raw.get("status") or ""), "unknown")
    return {
        "voucherCode": _text(raw.get("voucherCode")),
        "status": status,
        "packageName": _text(raw.get("packageName")),
        "firstName": _text(raw.get("firstName")),
        "comment": _text(raw.get("comment")),
        "usedQuota": raw.get("usedQuota") or 0,
        "userGroupId": raw.get("userGroupId"),
        "maxClients": raw.get("maxClients") or 0,
        "currentClients": raw.get("currentClients") or 0,
    }


def filter_vouchers(
    vouchers: list[dict],
    *,
    first_name: str | None = None,
    voucher_code: str | None = None,
) -> list[dict]:
    result = vouchers
    if first_name:
        needle = first_name.lower()
        result = [v for v in result if needle in v["firstName"].lower()]
    if voucher_code:
        needle = voucher_code.lower()
        result = [v for v in result if needle in v["voucherCode"].lower()]
    return result


def _raise_for_upstream(response: requests.Response, action: str) -> None:
    if response.ok:
        return
    logger.warning(
        "ruijie_upstream_error action=%s status=%s body=%s",
        action,
        response.status_code,
        response.text[:500],
    )
    raise RuijieApiError(
        f"Failed to {action}: {response.status_code} {response.reason}",
        status_code=response.status_code,
        details=response.text,
    )


def _json(response: requests.Response) -> Any:
    try:
        return response.json()
    except ValueError as exc:
        raise RuijieApiError("Ruijie API returned invalid JSON.", status_code=502) from exc


def fetch_vouchers(list_id: str | None = None) -> list[dict]:
    params = {
        "access_token": _access_token(),
        "start": 0,
        "pageSize": settings.RUIJIE_PAGE_SIZE,
        "tenantId": settings.RUIJIE_TENANT_ID,
    }
    url = _voucher_url("getList", list_id or settings.RUIJIE_DEFAULT_LIST_ID)
    try:
        response = requests.get(url, params=params, timeout=settings.RUIJIE_TIMEOUT_SECONDS)
    except requests.RequestException as exc:
        raise RuijieApiError(f"Failed to reach Ruijie API: {exc}", status_code=502) from exc

    _raise_for_upstream(response, "fetch data from Ruijie API")
    vouchers = _extract_voucher_list(_json(response))
    return [normalize_voucher(v) for v in vouchers if isinstance(v, dict)]


def create_vouchers(payload: dict[str, Any], list_id: str | None = None) -> Any:
    url = _voucher_url("create", list_id or settings.RUIJIE_DEFAULT_LIST_ID)
    try:
        response = requests.post(
            url,
            params={"access_token": _access_token()},
            json=payload,
            timeout=settings.RUIJIE_TIMEOUT_SECONDS,
        )
    except requests.RequestException as exc:
        raise RuijieApiError(f"Failed to reach Ruijie API: {exc}", status_code=502) from exc

    _raise_for_upstream(response, "create voucher")
    body = _json(response)
    logger.info("ruijie_vouchers_created quantity=%s list_id=%s", payload.get("quantity"), list_id)
    return body
