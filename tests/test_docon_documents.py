from __future__ import annotations

from datetime import date
from io import BytesIO

import pandas as pd

from app.models.docon import DoconDocument
from app.services.document_numbering import DocumentNumberingService, UniquenessResult


def _payload(**overrides):
    payload = {
        "contract_code": "160",
        "document_type": "DWG",
        "discipline": "CIV",
        "location": "05",
        "work_system": "11",
        "title": "Box culvert general arrangement",
        "pic": "Andi",
        "date_received": "2025-03-14",
    }
    payload.update(overrides)
    return payload


def _create(client, headers, **overrides):
    r = client.post("/docon/documents", json=_payload(**overrides), headers=headers)
    assert r.status_code == 201, r.text
    return r.json()


def test_reference_catalog_lists_codes(client):
    r = client.get("/docon/reference")
    assert r.status_code == 200
    body = r.json()
    assert "160" in body["contract_codes"]
    assert "DWG" in body["document_types"]


def test_create_allocates_serial_and_initial_history(client, auth_headers):
    doc = _create(client, auth_headers)
    assert doc["serial_number"] == "001"
    assert doc["revision_number"] == "0"
    assert doc["document_number"] == "160-DWG-CIV-5.11-001-0"
    assert doc["submission_status"] == "Draft"
    assert doc["created_by"] == "it@lma.example.com"

    history = client.get(f"/docon/documents/{doc['id']}/history").json()
    assert len(history) == 1
    assert history[0]["changes_description"] == "Initial document creation"
    assert history[0]["revised_by"] == "Andi"

    second = _create(client, auth_headers, title="Sections")
    assert second["serial_number"] == "002"


def test_create_letter_starts_at_501(client, auth_headers):
    doc = _create(client, auth_headers, document_type="LET", discipline="GEN", location="01", work_system="1")
    assert doc["serial_number"] == "501"
    assert doc["document_number"] == "160-LET-GEN-1.1-501-0"


def test_create_rejects_missing_fields_and_bad_work_system(client, auth_headers):
    payload = _payload()
    payload.pop("title")
    assert client.post("/docon/documents", json=payload, headers=auth_headers).status_code == 422

    r = client.post("/docon/documents", json=_payload(work_system="120"), headers=auth_headers)
    assert r.status_code == 400
    assert "Work system" in r.json()["detail"]


def test_create_duplicate_number_is_rejected(client, auth_headers):
    _create(client, auth_headers, serial_number="007")
    r = client.post("/docon/documents", json=_payload(serial_number="007"), headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Duplicate document number: 160-DWG-CIV-5.11-007-0 already exists"


def test_location_and_work_system_spellings_share_one_combination(client, auth_headers):
    first = _create(client, auth_headers)

    second = _create(client, auth_headers, location="5", work_system="011", title="Sections")
    assert second["location"] == "05"
    assert second["work_system"] == "11"
    assert second["serial_number"] == "002"
    assert second["document_number"] == "160-DWG-CIV-5.11-002-0"

    r = client.post(
        "/docon/documents",
        json=_payload(location="5", work_system="011", serial_number=first["serial_number"]),
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert r.json()["detail"] == "Duplicate document number: 160-DWG-CIV-5.11-001-0 already exists"

    r = client.get("/docon/documents/next-serial", params={
        "contract_code": "160",
        "document_type": "DWG",
        "discipline": "CIV",
        "location": "5",
        "work_system": "11",
    })
    assert r.json()["serial_number"] == "003"


def test_stored_row_with_other_spelling_blocks_same_number(client, auth_headers, db_session):
    db_session.add(
        DoconDocument(
            contract_code="160",
            document_type="DWG",
            discipline="CIV",
            location="5",
            work_system="011",
            serial_number="001",
            revision_number="0",
            document_number="160-DWG-CIV-5.11-001-0",
            title="Imported register row",
            pic="Andi",
            date_received=date(2024, 11, 2),
        )
    )
    db_session.commit()

    r = client.post("/docon/documents", json=_payload(serial_number="001"), headers=auth_headers)
    assert r.status_code == 400
    assert r.json()["detail"] == "Duplicate document number: 160-DWG-CIV-5.11-001-0 already exists"


def test_racing_insert_surfaces_as_conflict(client, auth_headers, monkeypatch):
    _create(client, auth_headers, serial_number="007")
    monkeypatch.setattr(
        DocumentNumberingService,
        "validate_uniqueness",
        staticmethod(lambda *args, **kwargs: UniquenessResult(valid=True)),
    )

    r = client.post("/docon/documents", json=_payload(serial_number="007"), headers=auth_headers)
    assert r.status_code == 409
    assert r.json()["detail"] == "Duplicate document number: 160-DWG-CIV-5.11-007-0 already exists"
    assert len(client.get("/docon/documents").json()) == 1

    other = _create(client, auth_headers, serial_number="008")
    r = client.put(
        f"/docon/documents/{other['id']}",
        json={"serial_number": "007"},
        headers=auth_headers,
    )
    assert r.status_code == 409
    assert client.get(f"/docon/documents/{other['id']}").json()["serial_number"] == "008"


def test_next_serial_endpoint_and_legacy_query(client, auth_headers):
    params = {
        "contract_code": "160",
        "document_type": "DWG",
        "discipline": "CIV",
        "location": "05",
        "work_system": "11",
    }
    r = client.get("/docon/documents/next-serial", params=params)
    assert r.status_code == 200
    assert r.json() == {
        "serial_number": "001",
        "is_new_combination": True,
        "message": "New combination - starting from beginning",
    }

    _create(client, auth_headers)

    r = client.get("/docon/documents", params={**params, "get_next_serial": "true"})
    assert r.status_code == 200
    assert r.json() == {
        "serial_number": "002",
        "is_new_combination": False,
        "message": "Existing combination - incrementing",
    }


def test_list_filters_and_counts(client, auth_headers):
    first = _create(client, auth_headers, title="Culvert plan")
    _create(client, auth_headers, title="Drainage profile", pic="Budi")
    _create(client, auth_headers, location="07", title="Culvert section")

    client.post(
        f"/docon/documents/{first['id']}/files",
        json={"file_key": "docon/1/plan.pdf", "file_name": "plan.pdf", "file_size": 1200},
        headers=auth_headers,
    )

    rows = client.get("/docon/documents").json()
    assert [r["title"] for r in rows] == ["Culvert section", "Drainage profile", "Culvert plan"]
    by_title = {r["title"]: r for r in rows}
    assert by_title["Culvert plan"]["file_count"] == 1
    assert by_title["Culvert plan"]["revision_count"] == 1

    rows = client.get("/docon/documents", params={"location": "07"}).json()
    assert [r["title"] for r in rows] == ["Culvert section"]

    rows = client.get("/docon/documents", params={"search": "culvert"}).json()
    assert {r["title"] for r in rows} == {"Culvert plan", "Culvert section"}

    # search is ignored once a key filter scopes the list
    rows = client.get("/docon/documents", params={"search": "budi", "location": "05"}).json()
    assert {r["title"] for r in rows} == {"Culvert plan", "Drainage profile"}

    rows = client.get("/docon/documents", params={"limit": 1, "offset": 1}).json()
    assert [r["title"] for r in rows] == ["Drainage profile"]


def test_update_revision_adds_history_and_renumbers(client, auth_headers):
    doc = _create(client, auth_headers)

    r = client.put(
        f"/docon/documents/{doc['id']}",
        json={
            "revision_number": "1",
            "changes_description": "Updated invert levels",
            "revision_review_code": "B",
            "reviewer_name": "Citra",
        },
        headers=auth_headers,
    )
    assert r.status_code == 200, r.text
    body = r.json()
    assert body["revision_number"] == "1"
    assert body["document_number"] == "160-DWG-CIV-5.11-001-1"
    assert body["updated_by"] == "it@lma.example.com"

    history = client.get(f"/docon/documents/{doc['id']}/history").json()
    assert [h["revision_number"] for h in history] == ["1", "0"]
    assert history[0]["changes_description"] == "Updated invert levels"
    assert history[0]["reviewer_name"] == "Citra"


def test_update_plain_fields_keeps_number(client, auth_headers):
    doc = _create(client, auth_headers)
    r = client.put(
        f"/docon/documents/{doc['id']}",
        json={"title": "Renamed", "submission_status": "Submitted"},
        headers=auth_headers,
    )
    assert r.status_code == 200
    assert r.json()["document_number"] == doc["document_number"]
    assert r.json()["submission_status"] == "Submitted"

    history = client.get(f"/docon/documents/{doc['id']}/history").json()
    assert len(history) == 1


def test_update_into_existing_number_is_rejected(client, auth_headers):
    _create(client, auth_headers, serial_number="001")
    second = _create(client, auth_headers, serial_number="002")

    r = client.put(
        f"/docon/documents/{second['id']}",
        json={"serial_number": "001"},
        headers=auth_headers,
    )
    assert r.status_code == 400
    assert "Duplicate document number" in r.json()["detail"]


def test_revisions_are_listed_highest_first(client, auth_headers):
    base = _create(client, auth_headers, serial_number="010")
    _create(client, auth_headers, serial_number="010", revision_number="1")
    _create(client, auth_headers, serial_number="010", revision_number="2")

    r = client.get(f"/docon/documents/{base['id']}/revisions")
    assert r.status_code == 200
    assert [d["revision_number"] for d in r.json()] == ["2", "1", "0"]


def test_delete_removes_document_and_children(client, auth_headers):
    doc = _create(client, auth_headers)
    client.post(
        f"/docon/documents/{doc['id']}/files",
        json={"file_key": "k", "file_name": "a.pdf"},
        headers=auth_headers,
    )

    r = client.delete(f"/docon/documents/{doc['id']}", headers=auth_headers)
    assert r.status_code == 200
    assert r.json() == {"message": "Document deleted successfully"}

    assert client.get(f"/docon/documents/{doc['id']}").status_code == 404
    assert client.get(f"/docon/documents/{doc['id']}/files").status_code == 404
    assert client.delete(f"/docon/documents/{doc['id']}", headers=auth_headers).status_code == 404


def test_export_streams_xlsx_register(client, auth_headers):
    _create(client, auth_headers, title="Culvert plan")

    r = client.get("/docon/documents/export")
    assert r.status_code == 200
    assert "attachment" in r.headers["content-disposition"]
    assert r.headers["content-disposition"].endswith('.xlsx"')

    df = pd.read_excel(BytesIO(r.content))
    assert list(df["Document Number"]) == ["160-DWG-CIV-5.11-001-0"]
    assert list(df["Title"]) == ["Culvert plan"]
