from __future__ import annotations

import pytest
import requests

from app.core.config import settings


class _FakeResponse:
    def __init__(self, payload=None, status_code=200, reason="OK", text=""):
        self._payload = payload
        self.status_code = status_code
        self.reason = reason
        self.text = text

    @property
    def ok(self):
        return self.status_code < 400

    def json(self):
        return self._payload


UPSTREAM_LIST = [
    {
        "voucherCode": "AB12CD",
        "status": 2,
        "packageName": "1 Day",
        "firstName": "Budi",
        "comment": "site office",
        "usedQuota": 120,
        "userGroupId": 9,
        "maxClients": 2,
        "currentClients": 1,
    },
    {
        "voucherCode": "ZZ99XY",
        "status": "3",
        "packageName": "1 Week",
        "firstName": "Sari",
    },
]


@pytest.fixture
def ruijie_token(monkeypatch):
    monkeypatch.setattr(settings, "RUIJIE_ACCESS_TOKEN", "tok-123")


@pytest.mark.parametrize(
    "payload",
    [
        {"voucherData": {"list": UPSTREAM_LIST}},
        {"list": UPSTREAM_LIST},
        UPSTREAM_LIST,
    ],
)
def test_list_normalizes_all_upstream_shapes(client, ruijie_token, monkeypatch, payload):
    seen = {}

    def _fake_get(url, params, timeout):
        seen["url"] = url
        seen["params"] = params
        return _FakeResponse(payload)

    monkeypatch.setattr(requests, "get", _fake_get)

    r = client.get("/vouchers")
    assert r.status_code == 200
    rows = r.json()
    assert [v["voucherCode"] for v in rows] == ["AB12CD", "ZZ99XY"]
    assert rows[0]["status"] == "active"
    assert rows[1]["status"] == "expired"
    assert rows[1]["comment"] == ""
    assert rows[1]["maxClients"] == 0

    assert seen["url"].endswith(f"/voucher/getList/{settings.RUIJIE_DEFAULT_LIST_ID}")
    assert seen["params"]["access_token"] == "tok-123"
    assert seen["params"]["tenantId"] == settings.RUIJIE_TENANT_ID


def test_list_filters_by_name_and_code(client, ruijie_token, monkeypatch):
    monkeypatch.setattr(requests, "get", lambda url, params, timeout: _FakeResponse(UPSTREAM_LIST))

    rows = client.get("/vouchers", params={"searchFirstName": "sar"}).json()
    assert [v["voucherCode"] for v in rows] == ["ZZ99XY"]

    rows = client.get("/vouchers", params={"searchVoucherCode": "ab12"}).json()
    assert [v["voucherCode"] for v in rows] == ["AB12CD"]


def test_list_filters_tolerate_non_string_fields(client, ruijie_token, monkeypatch):
    upstream = [
        {"voucherCode": 483920, "status": "2", "firstName": 1024, "comment": None},
        {"voucherCode": "QW77", "status": "1", "firstName": None},
    ]
    monkeypatch.setattr(requests, "get", lambda url, params, timeout: _FakeResponse(upstream))

    rows = client.get("/vouchers", params={"searchFirstName": "102"}).json()
    assert [v["voucherCode"] for v in rows] == ["483920"]
    assert rows[0]["firstName"] == "1024"
    assert rows[0]["comment"] == ""

    rows = client.get("/vouchers", params={"searchVoucherCode": "4839"}).json()
    assert [v["voucherCode"] for v in rows] == ["483920"]


def test_list_reports_upstream_failures(client, ruijie_token, monkeypatch):
    monkeypatch.setattr(
        requests,
        "get",
        lambda url, params, timeout: _FakeResponse(status_code=503, reason="Service Unavailable", text="down"),
    )
    r = client.get("/vouchers")
    assert r.status_code == 503
    assert r.json()["error"] == "Failed to fetch data from Ruijie API: 503 Service Unavailable"

    monkeypatch.setattr(requests, "get", lambda url, params, timeout: _FakeResponse({"code": 0}))
    r = client.get("/vouchers")
    assert r.status_code == 502
    assert "list" in r.json()["error"]
    assert r.json()["details"] == {"code": 0}


def test_missing_access_token_is_a_server_error(client, monkeypatch):
    monkeypatch.setattr(settings, "RUIJIE_ACCESS_TOKEN", "")
    r = client.get("/vouchers")
    assert r.status_code == 500
    assert "Access token not found" in r.json()["error"]


def test_create_requires_fields_and_forwards_payload(client, ruijie_token, monkeypatch):
    r = client.post("/vouchers", json={"quantity": 2, "profile": "p1"})
    assert r.status_code == 400

    seen = {}

    def _fake_post(url, params, json, timeout):
        seen["url"] = url
        seen["json"] = json
        return _FakeResponse({"code": 0, "voucherCodes": ["A1", "B2"]})

    monkeypatch.setattr(requests, "post", _fake_post)
    r = client.post(
        "/vouchers",
        params={"listId": "777"},
        json={"quantity": 2, "profile": "p1", "userGroupId": 9, "firstName": "Tamu"},
    )
    assert r.status_code == 200
    assert r.json()["voucherCodes"] == ["A1", "B2"]
    assert seen["url"].endswith("/voucher/create/777")
    assert seen["json"]["comment"] == ""


def test_local_voucher_register(client):
    payload = {
        "kode_voucher": "LMA-001",
        "nama_user": "Rina",
        "tipe_voucher": "Harian",
        "divisi": "Finance",
    }
    r = client.post("/vouchers/local", json=payload)
    assert r.status_code == 201
    assert r.json()["status"] == "aktif"

    assert client.post("/vouchers/local", json=payload).status_code == 409

    client.post(
        "/vouchers/local",
        json={**payload, "kode_voucher": "LMA-002", "nama_user": "Tono", "status": "digunakan"},
    )

    rows = client.get("/vouchers/local", params={"status": "digunakan"}).json()
    assert [v["kode_voucher"] for v in rows] == ["LMA-002"]
    rows = client.get("/vouchers/local", params={"search": "rina"}).json()
    assert [v["kode_voucher"] for v in rows] == ["LMA-001"]
    assert client.get("/vouchers/local", params={"status": "lost"}).status_code == 422

    r = client.patch("/vouchers/local/LMA-001/status", json={"status": "kadaluarsa"})
    assert r.status_code == 200
    assert r.json()["status"] == "kadaluarsa"

    r = client.put("/vouchers/local/LMA-001", json={"divisi": "HR"})
    assert r.json()["divisi"] == "HR"

    assert client.delete("/vouchers/local/LMA-001").json() == {"success": True}
    assert client.get("/vouchers/local/LMA-001").status_code == 404
    assert client.patch("/vouchers/local/LMA-001/status", json={"status": "aktif"}).status_code == 404
